"""JSON exporter for graph output, source units and dependency resolutions."""

import json
from typing import Iterable

from graph.model import GraphOutput, Resolution, SourceUnit


def to_json(output: GraphOutput, indent: int = 2) -> str:
    """
    Convert graph output to the host's JSON format.

    Args:
        output: Definitions and references to export.
        indent: JSON indentation level.

    Returns:
        JSON object with ``Defs``, ``Refs`` and ``Docs`` arrays.
    """
    return json.dumps(output.to_dict(), indent=indent)


def units_to_json(units: Iterable[SourceUnit], indent: int = 2) -> str:
    """Convert discovered source units to a JSON array."""
    return json.dumps([unit.to_dict() for unit in units], indent=indent)


def resolutions_to_json(resolutions: Iterable[Resolution], indent: int = 2) -> str:
    """Convert dependency resolutions to a JSON array."""
    return json.dumps([res.to_dict() for res in resolutions], indent=indent)
