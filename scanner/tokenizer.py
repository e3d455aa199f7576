"""Tokenizer that splits shell script bytes into words and operators."""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, Union

from .errors import SourceFileError


class TokenKind(Enum):
    """Kinds of tokens produced by the tokenizer."""

    IDENT = "ident"
    WORD = "word"
    NUMBER = "number"
    STRING = "string"
    VARIABLE = "variable"
    OPERATOR = "operator"
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    """
    A single token.

    ``end`` is the byte offset just past the token, so the token occupies
    ``source[end - len(text):end]`` for identifiers.
    """

    kind: TokenKind
    text: str
    end: int

    @property
    def start(self) -> int:
        return self.end - len(self.text)


_SKIP = re.compile(rb"(?:[ \t\r\n\f\v]+|\\\r?\n|#[^\n]*)+")

_STRING = re.compile(rb"'[^']*'?|\"(?:\\.|[^\"\\])*\"?", re.DOTALL)

_VARIABLE = re.compile(rb"\$(?:[A-Za-z_][A-Za-z0-9_]*|\{[^}]*\}?|[0-9#?$!@*-])")

# Anything that is not whitespace, a quote, an expansion or a metacharacter.
_WORD = re.compile(rb"[^\s'\"`$|&;()<>{}\[\]]+")

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(?:-[A-Za-z0-9_]+)*")


def _classify_word(text: str) -> TokenKind:
    if IDENTIFIER_PATTERN.fullmatch(text):
        return TokenKind.IDENT
    if text.isdigit():
        return TokenKind.NUMBER
    return TokenKind.WORD


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="surrogateescape")


def tokenize(source: bytes) -> Iterator[Token]:
    """
    Lazily tokenize shell script source.

    Args:
        source: Raw script bytes.

    Yields:
        Tokens in document order, terminated by a single EOF token.
    """
    pos = 0
    length = len(source)

    while True:
        skipped = _SKIP.match(source, pos)
        if skipped:
            pos = skipped.end()
        if pos >= length:
            break

        match = _STRING.match(source, pos)
        if match:
            pos = match.end()
            yield Token(TokenKind.STRING, _decode(match.group()), pos)
            continue

        match = _VARIABLE.match(source, pos)
        if match:
            pos = match.end()
            yield Token(TokenKind.VARIABLE, _decode(match.group()), pos)
            continue

        match = _WORD.match(source, pos)
        if match:
            pos = match.end()
            text = _decode(match.group())
            yield Token(_classify_word(text), text, pos)
            continue

        # Metacharacters and stray bytes are single-byte operators.
        pos += 1
        yield Token(TokenKind.OPERATOR, _decode(source[pos - 1:pos]), pos)

    yield Token(TokenKind.EOF, "", length)


def read_source(path: Union[str, Path]) -> bytes:
    """Read a script file as bytes, wrapping I/O failures in SourceFileError."""
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise SourceFileError(path, e.strerror or str(e)) from e


def tokenize_file(path: Union[str, Path]) -> Iterator[Token]:
    """Tokenize the script at ``path``."""
    return tokenize(read_source(path))
