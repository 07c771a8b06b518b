"""Public ledgerfx package exports."""

from __future__ import annotations

from ledgerfx.__version__ import __version__
from ledgerfx.aggregate import group_sum
from ledgerfx.budgets import BudgetBook, category_table, classify_pct, evaluate_budgets, worst_offenders
from ledgerfx.comparison import build_breakdown, build_monthly_comparison, daily_series
from ledgerfx.dashboard import DashboardView, build_dashboard, compute_kpis
from ledgerfx.exceptions import LedgerError, SnapshotError
from ledgerfx.models import (
    BudgetKey,
    Config,
    ExpenseTransaction,
    IncomeTransaction,
    Transaction,
)
from ledgerfx.normalize import (
    is_fx_category_tx,
    is_reentry_transfer,
    is_tracked_fx_tx,
    normalize,
    normalize_all,
)
from ledgerfx.rates import resolve_rate, to_base
from ledgerfx.savings import savings_summary
from ledgerfx.snapshot import Snapshot, load_snapshot

__all__ = [
    "__version__",
    "BudgetBook",
    "BudgetKey",
    "Config",
    "DashboardView",
    "ExpenseTransaction",
    "IncomeTransaction",
    "LedgerError",
    "Snapshot",
    "SnapshotError",
    "Transaction",
    "build_breakdown",
    "build_dashboard",
    "build_monthly_comparison",
    "category_table",
    "classify_pct",
    "compute_kpis",
    "daily_series",
    "evaluate_budgets",
    "group_sum",
    "is_fx_category_tx",
    "is_reentry_transfer",
    "is_tracked_fx_tx",
    "load_snapshot",
    "normalize",
    "normalize_all",
    "resolve_rate",
    "savings_summary",
    "to_base",
    "worst_offenders",
]
