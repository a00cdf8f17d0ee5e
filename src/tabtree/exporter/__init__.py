"""
Exporter package.

Re-exports the JSON export entry points used by the CLI.
"""

from __future__ import annotations

from .json_exporter import export_forest_json, forest_to_dict, serialize_forest

__all__ = ["export_forest_json", "forest_to_dict", "serialize_forest"]
