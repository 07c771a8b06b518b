"""Savings (foreign currency position) CLI commands."""

from __future__ import annotations

import click

from ledgerfx.cli.common import echo_json, fmt_amount, get_snapshot, resolve_month
from ledgerfx.normalize import is_fx_sell
from ledgerfx.savings import fx_operations, savings_summary


@click.group()
def savings() -> None:
    """Savings commands."""


@savings.command("summary")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON.")
@click.pass_context
def savings_overview(ctx: click.Context, as_json: bool) -> None:
    """Show foreign-currency holdings valued in USD and their history."""
    snapshot = get_snapshot(ctx)
    result = savings_summary(snapshot.transactions, snapshot.config)

    if as_json:
        echo_json(result.to_dict())
        return

    if not result.rows and not result.cumulative:
        click.echo("No foreign currency operations found.")
        return

    click.echo(f"\n{'Currency':<10} {'Quantity':>16} {'USD':>16}")
    click.echo("-" * 44)
    for row in result.rows:
        click.echo(f"{row.currency:<10} {fmt_amount(row.qty):>16} {fmt_amount(row.usd_val):>16}")
    click.echo(f"{'Total':<10} {'':>16} {fmt_amount(result.total_usd):>16}")

    click.echo("\nCumulative USD:")
    for point in result.cumulative:
        click.echo(f"  {point.month}  {fmt_amount(point.total_usd):>16}  {point.growth_pct:+.1f}%")


@savings.command("operations")
@click.option("--month", "month_value", default=None, help="Month in YYYY-MM (defaults to current month).")
@click.pass_context
def list_operations(ctx: click.Context, month_value: str | None) -> None:
    """List the currency buy/sell operations of a month."""
    month = resolve_month(month_value, "--month")
    snapshot = get_snapshot(ctx)
    operations = fx_operations(snapshot.transactions, month)
    if not operations:
        click.echo(f"No operations for {month}.")
        return
    for tx in operations:
        kind = "Sell" if is_fx_sell(tx) else "Buy"
        click.echo(f"{tx.id}\t{tx.date.isoformat()}\t{kind}\t{tx.currency}\t{tx.amount:.2f}")
