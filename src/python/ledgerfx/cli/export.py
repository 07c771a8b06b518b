"""Export CLI commands."""

from __future__ import annotations

import csv
from pathlib import Path

import click

from ledgerfx.cli.common import get_snapshot
from ledgerfx.normalize import sort_transactions
from ledgerfx.rates import tx_to_base

CSV_HEADER = [
    "type",
    "date",
    "amount",
    "currency",
    "amount_base",
    "base_currency",
    "category",
    "payment_source",
    "vendor",
    "desc",
    "tags",
    "notes",
]


def _single_line(value: str) -> str:
    return value.replace("\n", " ")


@click.group()
def export() -> None:
    """Export commands."""


@export.command("csv")
@click.option("--output", "output_path", required=True, type=click.Path(path_type=Path), help="CSV file to write.")
@click.pass_context
def export_csv(ctx: click.Context, output_path: Path) -> None:
    """Export all transactions, newest first, with base-currency amounts."""
    snapshot = get_snapshot(ctx)
    config = snapshot.config
    records = sort_transactions(snapshot.transactions, config)
    with output_path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(CSV_HEADER)
        for tx in records:
            writer.writerow(
                [
                    tx.type,
                    tx.date.isoformat(),
                    str(tx.amount),
                    tx.currency,
                    str(tx_to_base(tx, config)),
                    config.base_currency,
                    tx.category,
                    tx.payment_source,
                    _single_line(tx.vendor),
                    _single_line(tx.description),
                    "|".join(tx.tags),
                    _single_line(tx.notes),
                ]
            )
    click.echo(f"Exported {len(records)} transactions to {output_path}")
