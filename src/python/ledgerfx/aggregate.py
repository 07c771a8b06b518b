"""Sum-by-key grouping used by every breakdown."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable, Iterable, TypeVar

from ledgerfx.models import (
    MODE_CATEGORY,
    MODE_GROUP,
    ZERO,
    BaseTransaction,
    Config,
    GroupTotal,
    to_decimal,
)
from ledgerfx.normalize import is_reentry_transfer
from ledgerfx.rates import tx_to_base

T = TypeVar("T")


def group_sum(
    items: Iterable[T],
    key_fn: Callable[[T], str],
    value_fn: Callable[[T], Any],
) -> list[GroupTotal]:
    """Sum value_fn per key_fn, largest first.

    Ties keep the order in which keys were first seen. Values that are
    not numbers count as zero.
    """
    totals: dict[str, Decimal] = {}
    for item in items:
        key = key_fn(item)
        value = to_decimal(value_fn(item)) or ZERO
        totals[key] = totals.get(key, ZERO) + value
    ranked = sorted(totals.items(), key=lambda entry: entry[1], reverse=True)
    return [GroupTotal(key=key, value=value) for key, value in ranked]


def expense_key(tx: BaseTransaction, config: Config, mode: str = MODE_CATEGORY) -> str:
    """Breakdown key of an expense.

    In group mode a category without a configured group is its own bucket.
    """
    if mode != MODE_GROUP:
        return tx.category
    return config.group_of(tx.category) or tx.category


def expenses_by(
    transactions: Iterable[BaseTransaction],
    config: Config,
    mode: str = MODE_CATEGORY,
) -> list[GroupTotal]:
    expenses = [tx for tx in transactions if tx.is_expense]
    return group_sum(
        expenses,
        lambda tx: expense_key(tx, config, mode),
        lambda tx: tx_to_base(tx, config),
    )


def incomes_by_category(
    transactions: Iterable[BaseTransaction],
    config: Config,
    include_reentries: bool = True,
) -> list[GroupTotal]:
    incomes = [
        tx
        for tx in transactions
        if tx.is_income and (include_reentries or not is_reentry_transfer(tx, config))
    ]
    return group_sum(incomes, lambda tx: tx.category, lambda tx: tx_to_base(tx, config))


def by_payment_source(transactions: Iterable[BaseTransaction], config: Config) -> list[GroupTotal]:
    return group_sum(
        transactions,
        lambda tx: tx.payment_source,
        lambda tx: tx_to_base(tx, config),
    )


def top_entry(totals: list[GroupTotal]) -> GroupTotal | None:
    return totals[0] if totals else None
