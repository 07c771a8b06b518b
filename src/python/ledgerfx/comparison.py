"""Rolling month-over-month and daily series."""

from __future__ import annotations

from decimal import Decimal
import logging
from typing import Iterable, Sequence

from ledgerfx.aggregate import expense_key
from ledgerfx.models import (
    MODE_CATEGORY,
    ZERO,
    BaseTransaction,
    Breakdown,
    Config,
    DailySeries,
    MonthlyComparison,
)
from ledgerfx.months import days_in_month, month_window
from ledgerfx.normalize import is_reentry_transfer
from ledgerfx.rates import tx_to_base

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 6


def build_monthly_comparison(
    transactions: Iterable[BaseTransaction],
    config: Config,
    anchor: str,
    window: int = DEFAULT_WINDOW,
) -> MonthlyComparison:
    """Income, expense and net for the window months ending at anchor.

    Reentry transfers and records excluded from net are not counted.
    Months without records are zero-filled.
    """
    months = month_window(anchor, window)
    index = {month: position for position, month in enumerate(months)}
    income = [ZERO] * len(months)
    expense = [ZERO] * len(months)

    for tx in transactions:
        position = index.get(tx.month)
        if position is None or not tx.include_in_net:
            continue
        if tx.is_expense:
            expense[position] += tx_to_base(tx, config)
        elif not is_reentry_transfer(tx, config):
            income[position] += tx_to_base(tx, config)

    net = [inc - exp for inc, exp in zip(income, expense)]
    logger.debug("Comparison window %s..%s", months[0], months[-1])
    return MonthlyComparison(months=months, income=income, expense=expense, net=net)


def build_breakdown(
    transactions: Iterable[BaseTransaction],
    config: Config,
    anchor: str,
    window: int = DEFAULT_WINDOW,
    mode: str = MODE_CATEGORY,
    subset: Sequence[str] | None = None,
) -> Breakdown:
    """Per-category (or per-group) expense series across the window.

    Labels are ranked once by total spend over the whole window so their
    order is the same in every month. With a subset, exactly those labels
    are returned; otherwise every label with nonzero spend.
    """
    months = month_window(anchor, window)
    index = {month: position for position, month in enumerate(months)}
    per_label: dict[str, list[Decimal]] = {}
    if subset is not None:
        for label in subset:
            per_label.setdefault(label, [ZERO] * len(months))

    for tx in transactions:
        position = index.get(tx.month)
        if position is None or not tx.is_expense:
            continue
        label = expense_key(tx, config, mode)
        if subset is not None and label not in per_label:
            continue
        values = per_label.setdefault(label, [ZERO] * len(months))
        values[position] += tx_to_base(tx, config)

    totals = {label: sum(values, ZERO) for label, values in per_label.items()}
    if subset is None:
        totals = {label: total for label, total in totals.items() if total != ZERO}
    labels = sorted(totals, key=lambda label: totals[label], reverse=True)
    return Breakdown(
        months=months,
        labels=labels,
        series=[per_label[label] for label in labels],
    )


def daily_series(
    transactions: Iterable[BaseTransaction],
    config: Config,
    month: str,
) -> DailySeries:
    """Base-currency income, expense and net per day of one month."""
    days = days_in_month(month)
    income = [ZERO] * days
    expense = [ZERO] * days
    for tx in transactions:
        if tx.month != month:
            continue
        if tx.is_income:
            income[tx.date.day - 1] += tx_to_base(tx, config)
        else:
            expense[tx.date.day - 1] += tx_to_base(tx, config)
    net = [inc - exp for inc, exp in zip(income, expense)]
    return DailySeries(month=month, income=income, expense=expense, net=net)
