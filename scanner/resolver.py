"""Path utilities for making output paths relative to a base directory."""

import os
from pathlib import Path
from typing import Union

from .errors import PathResolutionError


def eval_symlinks(path: Union[str, Path]) -> str:
    """
    Resolve symlinks in ``path``.

    Returns the original path unchanged if it cannot be resolved, e.g.
    because it does not exist.
    """
    try:
        return str(Path(path).resolve(strict=True))
    except (OSError, RuntimeError):
        return str(path)


def relative_path(base: Union[str, Path], path: Union[str, Path]) -> str:
    """
    Get ``path`` relative to ``base`` as a slash-separated string.

    Both paths have their symlinks resolved first.

    Raises:
        PathResolutionError: If no relative form exists (e.g. different drives).
    """
    try:
        rel = os.path.relpath(eval_symlinks(path), eval_symlinks(base))
    except ValueError as e:
        raise PathResolutionError(
            f"failed to make path {str(path)!r} relative to {str(base)!r}: {e}"
        ) from e
    return rel.replace(os.sep, "/")
