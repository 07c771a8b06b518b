"""Dashboard orchestration: one refresh over a ledger snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
import logging
import os
from typing import Any, Iterable, Sequence

from ledgerfx.aggregate import by_payment_source, expenses_by, incomes_by_category
from ledgerfx.budgets import BudgetBook, category_table, evaluate_budgets
from ledgerfx.comparison import DEFAULT_WINDOW, build_breakdown, build_monthly_comparison, daily_series
from ledgerfx.models import (
    AGGREGATION_MODES,
    HUNDRED,
    MODE_CATEGORY,
    ZERO,
    BaseTransaction,
    Breakdown,
    BudgetStatusRow,
    Config,
    DailySeries,
    GroupTotal,
    Kpis,
    MonthlyComparison,
    SavingsSummary,
)
from ledgerfx.months import parse_month
from ledgerfx.normalize import is_reentry_transfer, transactions_in_month
from ledgerfx.rates import tx_to_base
from ledgerfx.savings import savings_summary

# Configure logging
logger = logging.getLogger(__name__)
package_logger = logging.getLogger("ledgerfx")
log_level = os.environ.get("LOGGING_LEVEL", "INFO").upper()
package_logger.setLevel(getattr(logging, log_level, logging.INFO))
if not package_logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s - %(name)s - %(message)s"))
    package_logger.addHandler(handler)

SCOPE_MONTH = "month"
SCOPE_ALL = "all"
SCOPES = (SCOPE_MONTH, SCOPE_ALL)


def compute_kpis(transactions: Iterable[BaseTransaction], config: Config) -> Kpis:
    """Headline totals in base currency.

    Reentries are reported apart from income but still add to net, and
    savings_pct is that net over real income. Records excluded from net
    count toward none of the totals.
    """
    income = expense = reentry = ZERO
    count = 0
    for tx in transactions:
        count += 1
        if not tx.include_in_net:
            continue
        amount = tx_to_base(tx, config)
        if tx.is_expense:
            expense += amount
        elif is_reentry_transfer(tx, config):
            reentry += amount
        else:
            income += amount
    net = income + reentry - expense
    savings_pct = net / income * HUNDRED if income > ZERO else ZERO
    average = (income + reentry + expense) / count if count else ZERO
    return Kpis(
        income=income,
        expense=expense,
        net=net,
        savings_pct=savings_pct,
        reentry=reentry,
        count=count,
        average=average,
    )


@dataclass(frozen=True)
class DashboardView:
    """Everything the dashboard renders after one refresh."""

    month: str
    scope: str
    mode: str
    kpis: Kpis
    expenses: list[GroupTotal]
    incomes: list[GroupTotal]
    payments: list[GroupTotal]
    budget_rows: list[BudgetStatusRow]
    category_rows: list[BudgetStatusRow]
    comparison: MonthlyComparison
    breakdown: Breakdown
    daily: DailySeries
    savings: SavingsSummary

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "scope": self.scope,
            "mode": self.mode,
            "kpis": self.kpis.to_dict(),
            "expenses": [entry.to_dict() for entry in self.expenses],
            "incomes": [entry.to_dict() for entry in self.incomes],
            "payments": [entry.to_dict() for entry in self.payments],
            "budgets": [row.to_dict() for row in self.budget_rows],
            "categories": [row.to_dict() for row in self.category_rows],
            "comparison": self.comparison.to_dict(),
            "breakdown": self.breakdown.to_dict(),
            "daily": self.daily.to_dict(),
            "savings": self.savings.to_dict(),
        }


def build_dashboard(
    transactions: Sequence[BaseTransaction],
    config: Config,
    budgets: BudgetBook,
    month: str,
    scope: str = SCOPE_MONTH,
    mode: str = MODE_CATEGORY,
    window: int = DEFAULT_WINDOW,
    breakdown_subset: Sequence[str] | None = None,
) -> DashboardView:
    """Recompute every dashboard figure from scratch.

    Budgets, comparison and daily series always follow month; KPIs and
    breakdowns follow scope. Savings always cover the whole history.
    """
    parse_month(month)
    if scope not in SCOPES:
        raise ValueError(f"Scope must be one of {SCOPES}")
    if mode not in AGGREGATION_MODES:
        raise ValueError(f"Aggregation mode must be one of {AGGREGATION_MODES}")

    scoped = list(transactions) if scope == SCOPE_ALL else transactions_in_month(transactions, month)
    logger.debug("Refreshing dashboard for %s (%s scope, %d records)", month, scope, len(scoped))

    return DashboardView(
        month=month,
        scope=scope,
        mode=mode,
        kpis=compute_kpis(scoped, config),
        expenses=expenses_by(scoped, config, mode),
        incomes=incomes_by_category(scoped, config),
        payments=by_payment_source(scoped, config),
        budget_rows=evaluate_budgets(month, mode, transactions, budgets, config),
        category_rows=category_table(month, mode, transactions, budgets, config),
        comparison=build_monthly_comparison(transactions, config, month, window),
        breakdown=build_breakdown(transactions, config, month, window, mode, breakdown_subset),
        daily=daily_series(transactions, config, month),
        savings=savings_summary(transactions, config),
    )


def savings_rate(kpis: Kpis) -> Decimal | None:
    """Savings percentage for display, None when there is no income."""
    return kpis.savings_pct if kpis.income > ZERO else None
