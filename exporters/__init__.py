"""Exporters for converting graph output to the host's JSON formats."""

from .json_exporter import to_json, units_to_json, resolutions_to_json

__all__ = ["to_json", "units_to_json", "resolutions_to_json"]
