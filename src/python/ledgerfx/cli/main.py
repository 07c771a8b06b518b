"""ledgerfx CLI entry point."""

from __future__ import annotations

from pathlib import Path

import click

from ledgerfx.__version__ import __version__
from ledgerfx.cli.budget import budget
from ledgerfx.cli.export import export
from ledgerfx.cli.report import report
from ledgerfx.cli.savings import savings


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="ledgerfx")
@click.option(
    "--snapshot",
    "snapshot_path",
    type=click.Path(path_type=Path),
    help="Path to the ledger snapshot JSON (defaults to $LEDGERFX_SNAPSHOT).",
)
@click.pass_context
def main(ctx: click.Context, snapshot_path: Path | None) -> None:
    """ledgerfx CLI entry point."""
    ctx.obj = {"snapshot_path": snapshot_path}


main.add_command(report)
main.add_command(budget)
main.add_command(savings)
main.add_command(export)


if __name__ == "__main__":
    main()
