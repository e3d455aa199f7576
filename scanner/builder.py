"""Graph builder that turns script tokens into definitions and references."""

from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Union

from graph.model import Definition, GraphOutput, Reference, SourceUnit
from .commands import CommandTable
from .tokenizer import Token, TokenKind, tokenize_file


FUNCTION_KEYWORD = "function"

NAME_LIKE_KINDS = frozenset({
    TokenKind.WORD,
    TokenKind.NUMBER,
    TokenKind.STRING,
    TokenKind.VARIABLE,
})


class ScanState(Enum):
    """Where the scan is relative to a ``function`` keyword."""

    START = "start"
    NORMAL = "normal"
    AFTER_FUNCTION_KEYWORD = "after_function_keyword"


class GraphBuilder:
    """
    Classify identifiers in shell scripts.

    An identifier directly following the ``function`` keyword is a
    definition. Other identifiers are references, either to a well-known
    command in the command table or to ``<file>/<identifier>`` in the same
    unit.
    """

    def __init__(self, commands: CommandTable, resolve_external_commands: bool = True):
        self.commands = commands
        self.resolve_external_commands = resolve_external_commands

    def graph_units(
        self,
        units: Iterable[SourceUnit],
        output: Optional[GraphOutput] = None,
    ) -> GraphOutput:
        """
        Graph every file of every unit into one output.

        Raises:
            SourceFileError: If a file cannot be read. Files after it are
                not attempted.
        """
        if output is None:
            output = GraphOutput()
        for unit in units:
            self.graph_unit(unit, output)
        return output

    def graph_unit(self, unit: SourceUnit, output: GraphOutput) -> None:
        for file in unit.files:
            self.graph_file(file, unit, output)

    def graph_file(
        self,
        path: Union[str, Path],
        unit: SourceUnit,
        output: GraphOutput,
    ) -> None:
        """Scan one file, appending its definitions and references to ``output``."""
        self.graph_tokens(tokenize_file(path), str(path), unit, output)

    def graph_tokens(
        self,
        tokens: Iterable[Token],
        file: str,
        unit: SourceUnit,
        output: GraphOutput,
    ) -> None:
        state = ScanState.START

        for token in tokens:
            if token.kind is TokenKind.EOF:
                break
            if token.kind in NAME_LIKE_KINDS:
                # A name that is not an identifier (e.g. ns::init) defines nothing.
                state = ScanState.NORMAL
                continue
            if token.kind is not TokenKind.IDENT:
                continue

            if token.text == FUNCTION_KEYWORD:
                output.add_ref(self._local_ref(token, file, unit))
                state = ScanState.AFTER_FUNCTION_KEYWORD
                continue

            if state is ScanState.AFTER_FUNCTION_KEYWORD:
                definition = self._make_def(token, file, unit)
                output.add_def(definition)
                output.add_ref(self._local_ref(token, file, unit, is_def=True))
            elif self.resolve_external_commands and token.text in self.commands:
                output.add_ref(self._command_ref(token, file, unit))
            else:
                output.add_ref(self._local_ref(token, file, unit))

            state = ScanState.NORMAL

    def _make_def(self, token: Token, file: str, unit: SourceUnit) -> Definition:
        return Definition(
            unit_type=unit.type,
            unit=unit.name,
            path=f"{file}/{token.text}",
            name=token.text,
            file=file,
            start=token.start,
            end=token.end,
        )

    def _local_ref(
        self,
        token: Token,
        file: str,
        unit: SourceUnit,
        is_def: bool = False,
    ) -> Reference:
        return Reference(
            def_unit_type=unit.type,
            def_unit=unit.name,
            def_path=f"{file}/{token.text}",
            unit_type=unit.type,
            unit=unit.name,
            file=file,
            start=token.start,
            end=token.end,
            is_def=is_def,
        )

    def _command_ref(self, token: Token, file: str, unit: SourceUnit) -> Reference:
        return Reference(
            def_repo=self.commands.repository,
            def_unit_type=self.commands.unit_type,
            def_unit=self.commands.unit,
            def_path=self.commands.def_path(token.text),
            unit_type=unit.type,
            unit=unit.name,
            file=file,
            start=token.start,
            end=token.end,
        )


def build_graph(
    units: Iterable[SourceUnit],
    commands: CommandTable,
    base: Union[str, Path],
    resolve_external_commands: bool = True,
) -> GraphOutput:
    """
    Graph the given units and make all file paths relative to ``base``.

    Args:
        units: Source units whose files should be scanned.
        commands: Table of well-known external commands.
        base: Directory that output paths are made relative to.
        resolve_external_commands: If False, command names are treated as
                                   plain identifiers.

    Returns:
        GraphOutput with relative file paths.
    """
    builder = GraphBuilder(commands, resolve_external_commands=resolve_external_commands)
    return builder.graph_units(units).relative_to(base)
