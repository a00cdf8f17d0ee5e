"""
CLI command modules for tabtree.

Each command module defines a single Typer-compatible command function.
"""

from tabtree.cli.commands.export import export_command
from tabtree.cli.commands.stats import stats_command

__all__ = [
    "export_command",
    "stats_command",
]
