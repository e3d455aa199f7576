"""Scanner module for tokenizing shell scripts and resolving identifiers."""

from .errors import (
    XrefError,
    InputError,
    SourceFileError,
    PathResolutionError,
    CommandTableError,
)
from .tokenizer import Token, TokenKind, tokenize, tokenize_file
from .commands import CommandTable, load_command_table
from .resolver import eval_symlinks, relative_path

__all__ = [
    "XrefError",
    "InputError",
    "SourceFileError",
    "PathResolutionError",
    "CommandTableError",
    "Token",
    "TokenKind",
    "tokenize",
    "tokenize_file",
    "CommandTable",
    "load_command_table",
    "eval_symlinks",
    "relative_path",
]
