"""Running foreign-currency savings position valued in USD."""

from __future__ import annotations

from decimal import Decimal
import logging
from typing import Iterable, Mapping

from ledgerfx.models import (
    HUNDRED,
    ZERO,
    BaseTransaction,
    Config,
    CumulativePoint,
    SavingsRow,
    SavingsSummary,
    Transaction,
)
from ledgerfx.normalize import is_fx_category_tx, is_tracked_fx_tx
from ledgerfx.rates import REF_CURRENCY, resolve_rate, to_base

logger = logging.getLogger(__name__)


def signed_quantity(tx: BaseTransaction) -> Decimal:
    """Buys (expenses) add to the stock; sells (incomes) subtract."""
    return tx.amount if tx.is_expense else -tx.amount


def tracked_transactions(transactions: Iterable[BaseTransaction], config: Config) -> list[Transaction]:
    return [tx for tx in transactions if is_tracked_fx_tx(tx, config)]


def net_positions(transactions: Iterable[BaseTransaction], config: Config) -> dict[str, Decimal]:
    """Net quantity held per currency across the whole history."""
    positions: dict[str, Decimal] = {}
    for tx in tracked_transactions(transactions, config):
        positions[tx.currency] = positions.get(tx.currency, ZERO) + signed_quantity(tx)
    return positions


def usd_delta(tx: BaseTransaction, config: Config) -> Decimal:
    """USD value of a transaction's signed quantity at its own date."""
    rate = resolve_rate(tx.currency, config, tx.date)
    usd_rate = resolve_rate(REF_CURRENCY, config, tx.date)
    return signed_quantity(tx) * (rate / usd_rate)


def monthly_usd_deltas(transactions: Iterable[BaseTransaction], config: Config) -> dict[str, Decimal]:
    deltas: dict[str, Decimal] = {}
    for tx in tracked_transactions(transactions, config):
        deltas[tx.month] = deltas.get(tx.month, ZERO) + usd_delta(tx, config)
    return deltas


def valuation_rows(positions: Mapping[str, Decimal], config: Config) -> list[SavingsRow]:
    """Value each open position in USD at the global rates, largest first.

    Currencies whose net quantity is exactly zero are left out.
    """
    usd_rate = resolve_rate(REF_CURRENCY, config)
    rows = [
        SavingsRow(
            currency=currency,
            qty=qty,
            usd_val=to_base(qty, currency, config) / usd_rate,
        )
        for currency, qty in positions.items()
        if qty != ZERO
    ]
    return sorted(rows, key=lambda row: row.usd_val, reverse=True)


def growth_pct(current: Decimal, previous: Decimal) -> Decimal:
    """Percentage change, 0 when there is no previous value to compare to."""
    if previous == ZERO:
        return ZERO
    return (current - previous) / abs(previous) * HUNDRED


def cumulative_series(deltas: Mapping[str, Decimal]) -> list[CumulativePoint]:
    """Running total of monthly deltas in chronological order, with growth."""
    points = []
    running = ZERO
    previous: Decimal | None = None
    for month in sorted(deltas):
        running += deltas[month]
        growth = ZERO if previous is None else growth_pct(running, previous)
        points.append(CumulativePoint(month=month, total_usd=running, growth_pct=growth))
        previous = running
    return points


def latest_growth(points: list[CumulativePoint]) -> Decimal:
    if len(points) < 2:
        return ZERO
    return points[-1].growth_pct


def savings_summary(transactions: Iterable[BaseTransaction], config: Config) -> SavingsSummary:
    """Positions, USD total and cumulative USD series for all history."""
    tracked = tracked_transactions(transactions, config)
    rows = valuation_rows(net_positions(tracked, config), config)
    cumulative = cumulative_series(monthly_usd_deltas(tracked, config))
    total = sum((row.usd_val for row in rows), ZERO)
    logger.debug("Savings: %d tracked transactions, %d open positions", len(tracked), len(rows))
    return SavingsSummary(
        rows=rows,
        total_usd=total,
        cumulative=cumulative,
        growth_pct=latest_growth(cumulative),
    )


def fx_operations(transactions: Iterable[BaseTransaction], month: str) -> list[Transaction]:
    """Explicit buy/sell operations of one month, newest first."""
    operations = [tx for tx in transactions if tx.month == month and is_fx_category_tx(tx)]
    return sorted(operations, key=lambda tx: tx.date, reverse=True)
