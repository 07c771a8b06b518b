"""Dashboard report CLI commands."""

from __future__ import annotations

import click

from ledgerfx.aggregate import by_payment_source, expenses_by, incomes_by_category
from ledgerfx.cli.common import echo_json, fmt_amount, get_snapshot, resolve_month
from ledgerfx.comparison import DEFAULT_WINDOW, build_breakdown, build_monthly_comparison, daily_series
from ledgerfx.dashboard import SCOPE_ALL, SCOPE_MONTH, build_dashboard, compute_kpis, savings_rate
from ledgerfx.models import AGGREGATION_MODES, MODE_CATEGORY, TRANSACTION_TYPES
from ledgerfx.normalize import filter_transactions, sort_transactions, transactions_in_month
from ledgerfx.rates import tx_to_base


@click.group()
def report() -> None:
    """Dashboard reports."""


@report.command("summary")
@click.option("--month", "month_value", default=None, help="Month in YYYY-MM (defaults to current month).")
@click.option("--all", "all_history", is_flag=True, help="Use the whole history instead of one month.")
@click.option("--mode", type=click.Choice(AGGREGATION_MODES), default=MODE_CATEGORY, help="Expense aggregation.")
@click.option("--top", type=click.IntRange(min=1), default=5, show_default=True, help="Entries per breakdown.")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON.")
@click.pass_context
def summary(
    ctx: click.Context,
    month_value: str | None,
    all_history: bool,
    mode: str,
    top: int,
    as_json: bool,
) -> None:
    """Show KPIs and ranked breakdowns.

    Examples:
        ledgerfx report summary --month 2026-03
        ledgerfx report summary --all --mode group
    """
    month = resolve_month(month_value, "--month")
    snapshot = get_snapshot(ctx)
    config = snapshot.config
    scoped = (
        snapshot.transactions if all_history else transactions_in_month(snapshot.transactions, month)
    )
    kpis = compute_kpis(scoped, config)
    breakdowns = {
        "expenses": expenses_by(scoped, config, mode)[:top],
        "incomes": incomes_by_category(scoped, config)[:top],
        "payments": by_payment_source(scoped, config)[:top],
    }

    if as_json:
        echo_json(
            {
                "scope": SCOPE_ALL if all_history else SCOPE_MONTH,
                "month": None if all_history else month,
                "kpis": kpis.to_dict(),
                **{name: [entry.to_dict() for entry in entries] for name, entries in breakdowns.items()},
            }
        )
        return

    rate = savings_rate(kpis)
    click.echo(f"\nSummary: {'all history' if all_history else month} ({config.base_currency})")
    click.echo("-" * 50)
    click.echo(f"{'Income':<20} {fmt_amount(kpis.income):>20}")
    click.echo(f"{'Expense':<20} {fmt_amount(kpis.expense):>20}")
    click.echo(f"{'Net':<20} {fmt_amount(kpis.net):>20}")
    click.echo(f"{'Savings':<20} {('—' if rate is None else f'{rate:.0f}%'):>20}")
    click.echo(f"{'Reentries':<20} {fmt_amount(kpis.reentry):>20}")
    click.echo(f"{'Records':<20} {kpis.count:>20}")
    for title, entries in breakdowns.items():
        click.echo(f"\nTop {title}:")
        if not entries:
            click.echo("  (none)")
        for entry in entries:
            click.echo(f"  {entry.key:<30} {fmt_amount(entry.value):>16}")


@report.command("compare")
@click.option("--month", "month_value", default=None, help="Last month of the window in YYYY-MM.")
@click.option("--window", type=click.IntRange(min=1), default=DEFAULT_WINDOW, show_default=True, help="Number of months.")
@click.option("--mode", type=click.Choice(AGGREGATION_MODES), default=MODE_CATEGORY, help="Breakdown aggregation.")
@click.option("--only", "only_labels", multiple=True, help="Restrict the breakdown to these labels.")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON.")
@click.pass_context
def compare(
    ctx: click.Context,
    month_value: str | None,
    window: int,
    mode: str,
    only_labels: tuple[str, ...],
    as_json: bool,
) -> None:
    """Compare income, expense and net across consecutive months.

    Examples:
        ledgerfx report compare --month 2026-03 --window 3
        ledgerfx report compare --mode group --only Esenciales --only Finanzas
    """
    month = resolve_month(month_value, "--month")
    snapshot = get_snapshot(ctx)
    comparison = build_monthly_comparison(snapshot.transactions, snapshot.config, month, window)
    breakdown = build_breakdown(
        snapshot.transactions,
        snapshot.config,
        month,
        window,
        mode,
        list(only_labels) or None,
    )

    if as_json:
        echo_json({"comparison": comparison.to_dict(), "breakdown": breakdown.to_dict()})
        return

    click.echo(f"\n{'Month':<10} {'Income':>16} {'Expense':>16} {'Net':>16}")
    click.echo("-" * 61)
    for index, label in enumerate(comparison.months):
        click.echo(
            f"{label:<10} {fmt_amount(comparison.income[index]):>16}"
            f" {fmt_amount(comparison.expense[index]):>16} {fmt_amount(comparison.net[index]):>16}"
        )
    click.echo(f"\nSpend by {mode}:")
    if not breakdown.labels:
        click.echo("  (none)")
    for label, values in zip(breakdown.labels, breakdown.series):
        cells = " ".join(f"{fmt_amount(value):>12}" for value in values)
        click.echo(f"  {label:<24} {cells}")


@report.command("daily")
@click.option("--month", "month_value", default=None, help="Month in YYYY-MM.")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON.")
@click.pass_context
def daily(ctx: click.Context, month_value: str | None, as_json: bool) -> None:
    """Show income, expense and net per day of a month."""
    month = resolve_month(month_value, "--month")
    snapshot = get_snapshot(ctx)
    series = daily_series(snapshot.transactions, snapshot.config, month)

    if as_json:
        echo_json(series.to_dict())
        return

    for day, income, expense, net in zip(series.days, series.income, series.expense, series.net):
        if income or expense:
            click.echo(
                f"{month}-{day:02d}\t{fmt_amount(income)}\t{fmt_amount(expense)}\t{fmt_amount(net)}"
            )


@report.command("dashboard")
@click.option("--month", "month_value", default=None, help="Month in YYYY-MM (defaults to current month).")
@click.option("--all", "all_history", is_flag=True, help="KPIs and breakdowns over the whole history.")
@click.option("--mode", type=click.Choice(AGGREGATION_MODES), default=MODE_CATEGORY, help="Expense aggregation.")
@click.option("--window", type=click.IntRange(min=1), default=DEFAULT_WINDOW, show_default=True, help="Comparison months.")
@click.pass_context
def dashboard(
    ctx: click.Context,
    month_value: str | None,
    all_history: bool,
    mode: str,
    window: int,
) -> None:
    """Emit every dashboard figure for a month as JSON."""
    month = resolve_month(month_value, "--month")
    snapshot = get_snapshot(ctx)
    view = build_dashboard(
        snapshot.transactions,
        snapshot.config,
        snapshot.budgets,
        month,
        scope=SCOPE_ALL if all_history else SCOPE_MONTH,
        mode=mode,
        window=window,
    )
    echo_json(view.to_dict())


@report.command("transactions")
@click.option("--type", "tx_type", type=click.Choice(TRANSACTION_TYPES), default=None, help="Filter by type.")
@click.option("--category", default=None, help="Filter by category.")
@click.option("--start-date", default=None, help="Start date in YYYY-MM-DD.")
@click.option("--end-date", default=None, help="End date in YYYY-MM-DD.")
@click.option("--search", default=None, help="Free-text search.")
@click.option("--limit", type=int, default=None, help="Limit results.")
@click.pass_context
def list_transactions(
    ctx: click.Context,
    tx_type: str | None,
    category: str | None,
    start_date: str | None,
    end_date: str | None,
    search: str | None,
    limit: int | None,
) -> None:
    """List transactions, newest first."""
    snapshot = get_snapshot(ctx)
    try:
        records = filter_transactions(
            snapshot.transactions,
            tx_type=tx_type,
            category=category,
            start_date=start_date,
            end_date=end_date,
            search=search,
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--start-date/--end-date") from exc
    records = sort_transactions(records, snapshot.config)
    if limit is not None:
        records = records[:limit]
    for tx in records:
        base = tx_to_base(tx, snapshot.config)
        click.echo(
            f"{tx.id}\t{tx.date.isoformat()}\t{tx.type}\t{tx.amount} {tx.currency}"
            f"\t{fmt_amount(base)}\t{tx.category}\t{tx.payment_source}"
        )
