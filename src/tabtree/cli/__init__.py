"""
CLI package for tabtree.

Provides the Typer application entrypoint and shared CLI utilities.
"""

from tabtree.cli.app import app, main

__all__ = [
    "app",
    "main",
]
