"""Normalization boundary for raw ledger records."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Iterable, Mapping, Sequence
import uuid

from ledgerfx.models import (
    TYPE_EXPENSE,
    TYPE_INCOME,
    BaseTransaction,
    Config,
    ExpenseTransaction,
    IncomeTransaction,
    Transaction,
)
from ledgerfx.months import parse_date

logger = logging.getLogger(__name__)

TYPE_REENTRY = "reentry"
BUY_CATEGORY = "Compra de divisas"
SELL_CATEGORY = "Venta de divisas"
FX_CATEGORIES = frozenset({BUY_CATEGORY, SELL_CATEGORY})
MAX_TAGS = 12

DEFAULT_CATEGORIES = {
    TYPE_INCOME: "Otros ingresos",
    TYPE_REENTRY: "Reintegro",
    TYPE_EXPENSE: "Otros",
}
DEFAULT_PAYMENT_SOURCES = {
    TYPE_INCOME: "Transferencia",
    TYPE_REENTRY: "Reintegro",
    TYPE_EXPENSE: "Tarjeta",
}
FALSE_FLAGS = {"false", "0", "no"}
SAME_DAY_RANK = {TYPE_INCOME: 0, TYPE_REENTRY: 1, TYPE_EXPENSE: 2}


def safe_tags(value: str | Iterable[str] | None) -> tuple[str, ...]:
    """Parse tags: split on commas, trim, drop empties, keep the first 12."""
    if value is None:
        return ()
    parts = value.split(",") if isinstance(value, str) else value
    tags = [str(part).strip() for part in parts]
    return tuple(tag for tag in tags if tag)[:MAX_TAGS]


def _text(raw: Mapping[str, Any], *names: str) -> str:
    for name in names:
        value = raw.get(name)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ""


def _include_in_net(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_FLAGS
    return value is not False and value != 0


def normalize(raw: Mapping[str, Any], config: Config) -> Transaction:
    """Apply defaults once and build a typed transaction.

    Unknown types become expenses. The legacy "reentry" type becomes an
    income flagged as money returned to the user, whatever its payment
    source; its category and payment source default to "Reintegro".

    Raises:
        ValueError: When the amount is missing, not a number or not positive,
            or when the date cannot be parsed.
    """
    raw_type = str(raw.get("type") or "").strip().lower()
    if raw_type not in (TYPE_INCOME, TYPE_EXPENSE, TYPE_REENTRY):
        raw_type = TYPE_EXPENSE
    tx_class = ExpenseTransaction if raw_type == TYPE_EXPENSE else IncomeTransaction

    date_value = raw.get("date")
    date = parse_date(date_value) if date_value else dt.date.today()
    currency = _text(raw, "currency").upper() or config.base_currency

    return tx_class(
        id=_text(raw, "id") or uuid.uuid4().hex,
        date=date,
        amount=raw.get("amount"),
        currency=currency,
        category=_text(raw, "category") or DEFAULT_CATEGORIES[raw_type],
        payment_source=_text(raw, "paymentSource", "pay") or DEFAULT_PAYMENT_SOURCES[raw_type],
        fx_rate=raw.get("fxRate"),
        include_in_net=_include_in_net(raw.get("includeInNet")),
        tags=safe_tags(raw.get("tags")),
        notes=_text(raw, "notes"),
        vendor=_text(raw, "vendor"),
        description=_text(raw, "desc", "description"),
        reentry=raw_type == TYPE_REENTRY or raw.get("reentry") is True,
    )


def normalize_all(records: Iterable[Mapping[str, Any]], config: Config) -> list[Transaction]:
    """Normalize a list of raw records into a new list."""
    return [normalize(record, config) for record in records]


def is_fx_category_tx(tx: BaseTransaction) -> bool:
    """True for explicit currency buy/sell operations."""
    return tx.category in FX_CATEGORIES


def is_fx_sell(tx: BaseTransaction) -> bool:
    return tx.category == SELL_CATEGORY


def is_reentry_transfer(tx: BaseTransaction, config: Config) -> bool:
    """True for income that is money returned to the user, not real income."""
    if tx.type != TYPE_INCOME:
        return False
    if tx.reentry:
        return True
    source = tx.payment_source.strip().lower()
    return any(source == label.strip().lower() for label in config.reentry_categories)


def is_tracked_fx_tx(tx: BaseTransaction, config: Config) -> bool:
    """True for FX operations and for any movement in a non-base currency."""
    return is_fx_category_tx(tx) or tx.currency != config.base_currency


def transactions_in_month(transactions: Iterable[BaseTransaction], month: str) -> list[Transaction]:
    return [tx for tx in transactions if tx.month == month]


def sort_transactions(transactions: Iterable[BaseTransaction], config: Config) -> list[Transaction]:
    """Newest first; on the same day income, then reentries, then expenses,
    then larger amounts first."""

    def rank(tx: BaseTransaction) -> int:
        if is_reentry_transfer(tx, config):
            return SAME_DAY_RANK[TYPE_REENTRY]
        return SAME_DAY_RANK[tx.type]

    by_amount = sorted(transactions, key=lambda tx: tx.amount, reverse=True)
    by_rank = sorted(by_amount, key=rank)
    return sorted(by_rank, key=lambda tx: tx.date, reverse=True)


def filter_transactions(
    transactions: Sequence[BaseTransaction],
    *,
    tx_type: str | None = None,
    category: str | None = None,
    start_date: dt.date | str | None = None,
    end_date: dt.date | str | None = None,
    search: str | None = None,
) -> list[Transaction]:
    """Filter transactions by type, category, inclusive date range and text."""
    start = parse_date(start_date) if start_date else None
    end = parse_date(end_date) if end_date else None
    query = (search or "").strip().lower()

    results = []
    for tx in transactions:
        if tx_type and tx.type != tx_type:
            continue
        if category and tx.category != category:
            continue
        if start is not None and tx.date < start:
            continue
        if end is not None and tx.date > end:
            continue
        if query:
            haystack = " ".join(
                [
                    tx.vendor,
                    tx.description,
                    tx.notes,
                    tx.category,
                    tx.payment_source,
                    tx.currency,
                    tx.type,
                    *tx.tags,
                ]
            ).lower()
            if query not in haystack:
                continue
        results.append(tx)
    logger.debug("Filtered %d of %d transactions", len(results), len(transactions))
    return results
