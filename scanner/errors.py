"""Exceptions raised while scanning and graphing shell scripts."""


class XrefError(Exception):
    """Base class for all fatal indexing errors."""


class InputError(XrefError):
    """Raised when the JSON read from the host is malformed or has the wrong shape."""


class SourceFileError(XrefError):
    """Raised when a source file cannot be opened or read."""

    def __init__(self, path, reason):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"failed to read file {self.path}: {reason}")


class PathResolutionError(XrefError):
    """Raised when a path cannot be expressed relative to the base directory."""


class CommandTableError(XrefError):
    """Raised when the command table data is malformed."""
