"""Table of well-known external commands and their documentation pages."""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

import yaml

from .errors import CommandTableError


DEFAULT_COMMAND_TABLE = Path(__file__).parent / "data" / "commands.yaml"


@dataclass(frozen=True)
class CommandTable:
    """
    Immutable mapping from command names to documentation page ids.

    The table also names the documentation corpus that the pages live in, so
    references to commands can point at it.
    """

    repository: str
    unit_type: str
    unit: str
    commands: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze the mapping so the table can be shared between scans.
        object.__setattr__(self, "commands", MappingProxyType(dict(self.commands)))

    def lookup(self, name: str) -> Optional[str]:
        """Return the page id for ``name``, or None if it is not a known command."""
        return self.commands.get(name)

    def def_path(self, name: str) -> str:
        """Return the corpus path that documents ``name``."""
        return f"{self.commands[name]}/{name}"

    def __contains__(self, name: object) -> bool:
        return name in self.commands

    def __len__(self) -> int:
        return len(self.commands)


def parse_command_table(data) -> CommandTable:
    """
    Build a CommandTable from its parsed YAML structure.

    Args:
        data: Mapping with ``repository``, ``unit_type``, ``unit`` and
              ``pages`` (page id -> list of command names).

    Returns:
        The command table.
    """
    if not isinstance(data, dict):
        raise CommandTableError("command table must be a mapping")

    for key in ("repository", "unit_type", "unit"):
        if not isinstance(data.get(key), str) or not data[key]:
            raise CommandTableError(f"command table is missing '{key}'")

    pages = data.get("pages")
    if not isinstance(pages, dict):
        raise CommandTableError("command table is missing 'pages'")

    commands = {}
    for page_id, names in pages.items():
        if not isinstance(names, list):
            raise CommandTableError(f"page '{page_id}' must list command names")
        for name in names:
            if not isinstance(name, str):
                raise CommandTableError(
                    f"page '{page_id}' has a non-string command name: {name!r}"
                )
            if name in commands:
                raise CommandTableError(f"command '{name}' is listed twice")
            commands[name] = str(page_id)

    return CommandTable(
        repository=data["repository"],
        unit_type=data["unit_type"],
        unit=data["unit"],
        commands=commands,
    )


def load_command_table(path: Union[str, Path] = DEFAULT_COMMAND_TABLE) -> CommandTable:
    """Load the command table from a YAML file."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CommandTableError(f"cannot read command table {path}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise CommandTableError(f"cannot parse command table {path}: {e}") from e

    return parse_command_table(data)
