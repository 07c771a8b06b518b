"""Monthly budget limits and threshold evaluation."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
import logging
from typing import Any, Iterable, Mapping

from ledgerfx.aggregate import expenses_by
from ledgerfx.models import (
    AGGREGATION_MODES,
    HUNDRED,
    MODE_CATEGORY,
    ZERO,
    BaseTransaction,
    BudgetKey,
    BudgetStatusRow,
    Config,
    positive_decimal,
)
from ledgerfx.months import parse_month
from ledgerfx.normalize import transactions_in_month

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_WARN = "warn"
STATUS_DANGER = "danger"
WARN_THRESHOLD = Decimal("80")
DANGER_THRESHOLD = HUNDRED
DEFAULT_TOP_N = 8

# Prefixes used by the storage layer for group budgets
LEGACY_GROUP_PREFIXES = ("__group__::", "[GRUPO] ")


def decode_budget_key(raw_key: str) -> BudgetKey:
    """Decode a stored budget key into a category or group key."""
    text = str(raw_key).strip()
    for prefix in LEGACY_GROUP_PREFIXES:
        if text.startswith(prefix):
            return BudgetKey.group(text[len(prefix):])
    return BudgetKey.category(text)


@dataclass(frozen=True)
class BudgetBook:
    """Immutable month to budget-key limits map.

    Only limits greater than zero are stored; an absent key means no limit.
    """

    entries: Mapping[str, Mapping[BudgetKey, Decimal]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Mapping[str, Any]] | None) -> "BudgetBook":
        entries: dict[str, dict[BudgetKey, Decimal]] = {}
        for month, limits in (payload or {}).items():
            if not isinstance(limits, Mapping):
                continue
            month_entries: dict[BudgetKey, Decimal] = {}
            for raw_key, raw_limit in limits.items():
                if not str(raw_key or "").strip():
                    continue
                limit = positive_decimal(raw_limit)
                if limit is not None:
                    month_entries[decode_budget_key(raw_key)] = limit
            if month_entries:
                entries[str(month).strip()] = month_entries
        return cls(entries=entries)

    def months(self) -> list[str]:
        return sorted(self.entries)

    def limit_for(self, month: str, key: BudgetKey) -> Decimal:
        return self.entries.get(month, {}).get(key, ZERO)

    def limits_for(self, month: str, mode: str = MODE_CATEGORY) -> dict[str, Decimal]:
        """Return name to limit for one month and one key kind."""
        return {
            key.name: limit
            for key, limit in self.entries.get(month, {}).items()
            if key.kind == mode
        }

    def with_limit(self, month: str, key: BudgetKey, amount: Decimal | float | str | None) -> "BudgetBook":
        """Return a new book with one limit set; zero or empty removes it."""
        parse_month(month)
        month_entries = dict(self.entries.get(month, {}))
        limit = positive_decimal(amount)
        if limit is None:
            month_entries.pop(key, None)
        else:
            month_entries[key] = limit
        entries = {name: dict(limits) for name, limits in self.entries.items()}
        if month_entries:
            entries[month] = month_entries
        else:
            entries.pop(month, None)
        return BudgetBook(entries=entries)


def classify_pct(pct: Decimal) -> str:
    """Status tier of a spent percentage; both thresholds are inclusive."""
    if pct >= DANGER_THRESHOLD:
        return STATUS_DANGER
    if pct >= WARN_THRESHOLD:
        return STATUS_WARN
    return STATUS_OK


def _validate_mode(mode: str) -> str:
    if mode not in AGGREGATION_MODES:
        raise ValueError(f"Aggregation mode must be one of {AGGREGATION_MODES}")
    return mode


def _spend_by_key(
    month: str,
    mode: str,
    transactions: Iterable[BaseTransaction],
    config: Config,
) -> dict[str, Decimal]:
    monthly = transactions_in_month(transactions, month)
    return {entry.key: entry.value for entry in expenses_by(monthly, config, mode)}


def evaluate_budgets(
    month: str,
    mode: str,
    transactions: Iterable[BaseTransaction],
    budgets: BudgetBook,
    config: Config,
) -> list[BudgetStatusRow]:
    """Compare a month's base-currency spend against its configured limits.

    Keys without a limit are left out. Rows are sorted by percentage,
    highest first.
    """
    _validate_mode(mode)
    parse_month(month)
    spent_by_key = _spend_by_key(month, mode, transactions, config)
    rows = []
    for name, limit in budgets.limits_for(month, mode).items():
        spent = spent_by_key.get(name, ZERO)
        pct = spent / limit * HUNDRED
        rows.append(
            BudgetStatusRow(label=name, spent=spent, limit=limit, pct=pct, status=classify_pct(pct))
        )
    logger.debug("Evaluated %d %s budgets for %s", len(rows), mode, month)
    return sorted(rows, key=lambda row: row.pct, reverse=True)


def worst_offenders(rows: list[BudgetStatusRow], limit: int = DEFAULT_TOP_N) -> list[BudgetStatusRow]:
    """Top rows by percentage spent."""
    ranked = sorted(
        (row for row in rows if row.pct is not None),
        key=lambda row: row.pct,
        reverse=True,
    )
    return ranked[:limit]


def category_table(
    month: str,
    mode: str,
    transactions: Iterable[BaseTransaction],
    budgets: BudgetBook,
    config: Config,
) -> list[BudgetStatusRow]:
    """Spend for every key with spend or a limit, largest spend first.

    Keys without a limit carry ``pct=None`` and ``status=None``.
    """
    _validate_mode(mode)
    spent_by_key = _spend_by_key(month, mode, transactions, config)
    limits = budgets.limits_for(month, mode)
    rows = []
    for name in dict.fromkeys([*spent_by_key, *limits]):
        spent = spent_by_key.get(name, ZERO)
        limit = limits.get(name, ZERO)
        if limit > ZERO:
            pct = spent / limit * HUNDRED
            rows.append(BudgetStatusRow(name, spent, limit, pct, classify_pct(pct)))
        else:
            rows.append(BudgetStatusRow(name, spent, ZERO, None, None))
    return sorted(rows, key=lambda row: row.spent, reverse=True)

