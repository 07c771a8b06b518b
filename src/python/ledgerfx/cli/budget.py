"""Budget CLI commands."""

from __future__ import annotations

import click

from ledgerfx.budgets import DEFAULT_TOP_N, category_table, evaluate_budgets, worst_offenders
from ledgerfx.cli.common import echo_json, fmt_amount, get_snapshot, resolve_month
from ledgerfx.models import AGGREGATION_MODES, MODE_CATEGORY

STATUS_LABELS = {"danger": "Over", "warn": "Alert", "ok": "OK"}


@click.group()
def budget() -> None:
    """Budget commands."""


@budget.command("status")
@click.option("--month", "month_value", default=None, help="Month in YYYY-MM (defaults to current month).")
@click.option("--mode", type=click.Choice(AGGREGATION_MODES), default=MODE_CATEGORY, help="Budget kind.")
@click.option("--top", type=click.IntRange(min=1), default=DEFAULT_TOP_N, show_default=True, help="Rows to show.")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON.")
@click.pass_context
def budget_status(
    ctx: click.Context,
    month_value: str | None,
    mode: str,
    top: int,
    as_json: bool,
) -> None:
    """Show the budgets closest to (or over) their limit.

    Only keys with a configured limit are listed.

    Examples:
        ledgerfx budget status --month 2026-03
        ledgerfx budget status --mode group --top 3
    """
    month = resolve_month(month_value, "--month")
    snapshot = get_snapshot(ctx)
    rows = worst_offenders(
        evaluate_budgets(month, mode, snapshot.transactions, snapshot.budgets, snapshot.config),
        top,
    )

    if as_json:
        echo_json([row.to_dict() for row in rows])
        return

    if not rows:
        click.echo(f"No budgets defined for {month}.")
        return

    click.echo(f"\n{'Label':<24} {'Spent':>14} {'Limit':>14} {'%':>6}  Status")
    click.echo("-" * 72)
    for row in rows:
        click.echo(
            f"{row.label:<24} {fmt_amount(row.spent):>14} {fmt_amount(row.limit):>14}"
            f" {row.pct_label:>6}  {STATUS_LABELS[row.status]}"
        )


@budget.command("table")
@click.option("--month", "month_value", default=None, help="Month in YYYY-MM (defaults to current month).")
@click.option("--mode", type=click.Choice(AGGREGATION_MODES), default=MODE_CATEGORY, help="Budget kind.")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON.")
@click.pass_context
def budget_table(ctx: click.Context, month_value: str | None, mode: str, as_json: bool) -> None:
    """List spend for every category or group, with or without a limit."""
    month = resolve_month(month_value, "--month")
    snapshot = get_snapshot(ctx)
    rows = category_table(month, mode, snapshot.transactions, snapshot.budgets, snapshot.config)

    if as_json:
        echo_json([row.to_dict() for row in rows])
        return

    if not rows:
        click.echo("No data.")
        return

    for row in rows:
        limit = fmt_amount(row.limit) if row.pct is not None else "—"
        click.echo(f"{row.label:<24} {fmt_amount(row.spent):>14} {limit:>14} {row.pct_label:>6}")
