"""Domain models and report rows."""

from __future__ import annotations

from dataclasses import dataclass, field
import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Union

from ledgerfx.months import month_of, parse_date

TYPE_INCOME = "income"
TYPE_EXPENSE = "expense"
TRANSACTION_TYPES = (TYPE_INCOME, TYPE_EXPENSE)

MODE_CATEGORY = "category"
MODE_GROUP = "group"
AGGREGATION_MODES = (MODE_CATEGORY, MODE_GROUP)

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")

DEFAULT_BASE_CURRENCY = "ARS"
DEFAULT_LOCALE = "es-AR"
DEFAULT_REENTRY_LABELS = ("Reintegro",)


def to_decimal(value: Any) -> Decimal | None:
    """Coerce a number-like value to a finite Decimal, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def positive_decimal(value: Any) -> Decimal | None:
    """Return value as a Decimal when it is finite and greater than zero."""
    number = to_decimal(value)
    if number is None or number <= ZERO:
        return None
    return number


def _ensure_amount(value: Decimal | str | int | float) -> Decimal:
    """Parse and validate a positive transaction amount."""
    amount = to_decimal(value)
    if amount is None:
        raise ValueError(f"Amount must be a decimal, got {value!r}")
    if amount <= ZERO:
        raise ValueError("Amount must be greater than zero")
    return amount


def _number(value: Decimal | None) -> float | None:
    return None if value is None else float(value)


@dataclass(frozen=True)
class BaseTransaction:
    """Shared fields of a normalized ledger transaction.

    The direction of a movement is carried by the concrete class
    (``IncomeTransaction`` or ``ExpenseTransaction``); the amount is
    always positive.
    """

    id: str
    date: dt.date
    amount: Decimal
    currency: str
    category: str
    payment_source: str
    fx_rate: Decimal | None = None
    include_in_net: bool = True
    tags: tuple[str, ...] = ()
    notes: str = ""
    vendor: str = ""
    description: str = ""
    reentry: bool = False

    type = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", parse_date(self.date))
        object.__setattr__(self, "amount", _ensure_amount(self.amount))
        object.__setattr__(self, "fx_rate", positive_decimal(self.fx_rate))
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "reentry", bool(self.reentry) and self.type == TYPE_INCOME)

    @property
    def month(self) -> str:
        return month_of(self.date)

    @property
    def is_income(self) -> bool:
        return self.type == TYPE_INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TYPE_EXPENSE

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "date": self.date.isoformat(),
            "amount": float(self.amount),
            "currency": self.currency,
            "category": self.category,
            "paymentSource": self.payment_source,
            "fxRate": _number(self.fx_rate),
            "includeInNet": self.include_in_net,
            "tags": list(self.tags),
            "notes": self.notes,
            "vendor": self.vendor,
            "desc": self.description,
            "reentry": self.reentry,
        }


@dataclass(frozen=True)
class IncomeTransaction(BaseTransaction):
    """Money coming in; for FX operations, a sale of foreign currency."""

    type = TYPE_INCOME


@dataclass(frozen=True)
class ExpenseTransaction(BaseTransaction):
    """Money going out; for FX operations, a purchase of foreign currency."""

    type = TYPE_EXPENSE


Transaction = Union[IncomeTransaction, ExpenseTransaction]


def _rate_map(raw: Any) -> dict[str, Decimal]:
    if not isinstance(raw, Mapping):
        return {}
    rates: dict[str, Decimal] = {}
    for code, value in raw.items():
        number = to_decimal(value)
        if number is not None:
            rates[str(code).strip().upper()] = number
    return rates


def _text_list(raw: Any, default: tuple[str, ...] = ()) -> tuple[str, ...]:
    if raw is None:
        return default
    values = [str(item).strip() for item in raw if str(item or "").strip()]
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True)
class Config:
    """Read-only configuration snapshot.

    Attributes:
        base_currency: Currency every KPI and budget is expressed in
        currencies: Currencies offered for entry
        rates_to_base: Global fallback rate per currency
        rates_by_month: Month key to per-currency rate, overriding the
            global rate for that month
        expense_categories: Configured expense categories, in display order
        income_categories: Configured income categories
        reentry_categories: Payment-source labels that mark an income as
            money returned to the user
        expense_groups: Configured expense groups
        expense_category_groups: Category to group assignment
        locale: Display locale for the rendering layer
    """

    base_currency: str = DEFAULT_BASE_CURRENCY
    currencies: tuple[str, ...] = ()
    rates_to_base: Mapping[str, Decimal] = field(default_factory=dict)
    rates_by_month: Mapping[str, Mapping[str, Decimal]] = field(default_factory=dict)
    expense_categories: tuple[str, ...] = ()
    income_categories: tuple[str, ...] = ()
    reentry_categories: tuple[str, ...] = DEFAULT_REENTRY_LABELS
    expense_groups: tuple[str, ...] = ()
    expense_category_groups: Mapping[str, str] = field(default_factory=dict)
    locale: str = DEFAULT_LOCALE

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Config":
        """Build a snapshot from the storage layer's camelCase payload.

        Rates that cannot be parsed as finite numbers are dropped.
        The payload is copied; later changes to it do not leak in.
        """
        base_currency = str(payload.get("baseCurrency") or DEFAULT_BASE_CURRENCY).strip().upper()
        rates_by_month_raw = payload.get("ratesByMonth") or {}
        rates_by_month = {
            str(month).strip(): _rate_map(rates)
            for month, rates in rates_by_month_raw.items()
            if isinstance(rates, Mapping)
        }
        category_groups_raw = payload.get("expenseCategoryGroups") or {}
        category_groups = {
            str(category).strip(): str(group).strip()
            for category, group in category_groups_raw.items()
            if str(group or "").strip()
        }
        return cls(
            base_currency=base_currency,
            currencies=tuple(code.upper() for code in _text_list(payload.get("currencies"))),
            rates_to_base=_rate_map(payload.get("ratesToBase")),
            rates_by_month=rates_by_month,
            expense_categories=_text_list(payload.get("expenseCategories")),
            income_categories=_text_list(payload.get("incomeCategories")),
            reentry_categories=_text_list(
                payload.get("reentryCategories"), DEFAULT_REENTRY_LABELS
            ),
            expense_groups=_text_list(payload.get("expenseGroups")),
            expense_category_groups=category_groups,
            locale=str(payload.get("locale") or DEFAULT_LOCALE),
        )

    def group_of(self, category: str) -> str | None:
        """Return the configured group of a category, if any."""
        return self.expense_category_groups.get(category) or None


@dataclass(frozen=True)
class BudgetKey:
    """Discriminated budget key: a category limit or a group limit."""

    kind: str
    name: str

    def __post_init__(self) -> None:
        if self.kind not in AGGREGATION_MODES:
            raise ValueError(f"Budget key kind must be one of {AGGREGATION_MODES}")
        name = str(self.name or "").strip()
        if not name:
            raise ValueError("Budget key name is required")
        object.__setattr__(self, "name", name)

    @classmethod
    def category(cls, name: str) -> "BudgetKey":
        return cls(MODE_CATEGORY, name)

    @classmethod
    def group(cls, name: str) -> "BudgetKey":
        return cls(MODE_GROUP, name)


@dataclass(frozen=True)
class GroupTotal:
    """One ranked entry of a breakdown."""

    key: str
    value: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "value": float(self.value)}


@dataclass(frozen=True)
class BudgetStatusRow:
    """Spend against a budget limit for one category or group.

    ``pct`` and ``status`` are None for rows without a configured limit,
    which only appear in the full category table.
    """

    label: str
    spent: Decimal
    limit: Decimal
    pct: Decimal | None
    status: str | None

    @property
    def pct_label(self) -> str:
        if self.pct is None:
            return "—"
        return f"{self.pct:.0f}%"

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "spent": float(self.spent),
            "limit": float(self.limit),
            "pct": _number(self.pct),
            "status": self.status,
        }


@dataclass(frozen=True)
class SavingsRow:
    currency: str
    qty: Decimal
    usd_val: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"currency": self.currency, "qty": float(self.qty), "usdVal": float(self.usd_val)}


@dataclass(frozen=True)
class CumulativePoint:
    """Cumulative USD savings at the end of a month."""

    month: str
    total_usd: Decimal
    growth_pct: Decimal = ZERO

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "totalUsd": float(self.total_usd),
            "growthPct": float(self.growth_pct),
        }


@dataclass(frozen=True)
class SavingsSummary:
    """Foreign-currency position valued in USD.

    Attributes:
        rows: Per-currency net quantity and USD value, largest first
        total_usd: Sum of the row values
        cumulative: Running USD savings per month, oldest first
        growth_pct: Growth of the last cumulative point over the previous one
    """

    rows: list[SavingsRow]
    total_usd: Decimal
    cumulative: list[CumulativePoint]
    growth_pct: Decimal = ZERO

    def to_dict(self) -> dict[str, Any]:
        return {
            "rows": [row.to_dict() for row in self.rows],
            "totalUsd": float(self.total_usd),
            "cumulative": [point.to_dict() for point in self.cumulative],
            "growthPct": float(self.growth_pct),
        }


@dataclass(frozen=True)
class MonthlyComparison:
    months: list[str]
    income: list[Decimal]
    expense: list[Decimal]
    net: list[Decimal]

    def to_dict(self) -> dict[str, Any]:
        return {
            "months": list(self.months),
            "income": [float(value) for value in self.income],
            "expense": [float(value) for value in self.expense],
            "net": [float(value) for value in self.net],
        }


@dataclass(frozen=True)
class Breakdown:
    """Per-label spend series across a month window.

    ``series[i][j]`` is the spend of ``labels[i]`` in ``months[j]``.
    """

    months: list[str]
    labels: list[str]
    series: list[list[Decimal]]

    def to_dict(self) -> dict[str, Any]:
        return {
            "months": list(self.months),
            "labels": list(self.labels),
            "series": [[float(value) for value in row] for row in self.series],
        }


@dataclass(frozen=True)
class DailySeries:
    month: str
    income: list[Decimal]
    expense: list[Decimal]
    net: list[Decimal]

    @property
    def days(self) -> list[int]:
        return list(range(1, len(self.income) + 1))

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "days": self.days,
            "income": [float(value) for value in self.income],
            "expense": [float(value) for value in self.expense],
            "net": [float(value) for value in self.net],
        }


@dataclass(frozen=True)
class Kpis:
    """Headline totals in base currency."""

    income: Decimal
    expense: Decimal
    net: Decimal
    savings_pct: Decimal
    reentry: Decimal
    count: int
    average: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "income": float(self.income),
            "expense": float(self.expense),
            "net": float(self.net),
            "savingsPct": float(self.savings_pct),
            "reentry": float(self.reentry),
            "count": self.count,
            "average": float(self.average),
        }
