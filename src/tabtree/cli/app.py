
from __future__ import annotations

import typer

from tabtree.cli.commands.export import export_command
from tabtree.cli.commands.stats import stats_command

app = typer.Typer(
    name="tabtree",
    help="Build a tree from delimiter-separated parent/child rows",
    add_completion=False,
)

app.command("export")(export_command)
app.command("stats")(stats_command)


def main():
    app()


if __name__ == "__main__":
    main()
