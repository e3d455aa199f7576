"""File discovery for finding shell scripts in a directory tree."""

from pathlib import Path
from typing import Iterator, List, Optional, Set

from graph.model import SourceUnit, UNIT_TYPE
from .resolver import eval_symlinks


DEFAULT_EXTENSIONS = {".sh"}
DEFAULT_EXCLUDE_DIRS: Set[str] = set()
VCS_DIRS = {".git", ".hg", ".svn", ".bzr"}


def iter_files(
    root: Path,
    include_ext: Optional[Set[str]] = None,
    exclude_dirs: Optional[Set[str]] = None,
) -> Iterator[Path]:
    """
    Iterate over matching files in a directory tree.

    Args:
        root: Root directory to scan.
        include_ext: File extensions to include. If None, uses DEFAULT_EXTENSIONS.
        exclude_dirs: Directory names to skip. If None, uses DEFAULT_EXCLUDE_DIRS.

    Yields:
        Paths of regular files, in sorted order.
    """
    if include_ext is None:
        include_ext = DEFAULT_EXTENSIONS
    if exclude_dirs is None:
        exclude_dirs = DEFAULT_EXCLUDE_DIRS

    def _walk(current: Path) -> Iterator[Path]:
        for entry in sorted(current.iterdir()):
            if entry.is_dir() and not entry.is_symlink():
                if entry.name in exclude_dirs:
                    continue
                yield from _walk(entry)
            elif entry.is_file() and not entry.is_symlink() and entry.suffix in include_ext:
                yield entry

    yield from _walk(root)


def scan_units(
    root: Path,
    include_ext: Optional[Set[str]] = None,
    exclude_dirs: Optional[Set[str]] = None,
) -> List[SourceUnit]:
    """
    Find the shell scripts under ``root``.

    Returns:
        A single source unit for the whole directory, with absolute file paths.
    """
    scan_dir = eval_symlinks(Path(root).absolute())
    files = [
        str(path)
        for path in iter_files(Path(scan_dir), include_ext=include_ext, exclude_dirs=exclude_dirs)
    ]
    return [SourceUnit(name=scan_dir, type=UNIT_TYPE, dir=scan_dir, files=files)]
