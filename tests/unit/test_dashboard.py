from __future__ import annotations

from decimal import Decimal

import pytest

from ledgerfx.budgets import BudgetBook
from ledgerfx.dashboard import build_dashboard, compute_kpis, savings_rate
from ledgerfx.models import Config
from ledgerfx.normalize import normalize


@pytest.fixture()
def march_records(make_tx):
    return [
        make_tx(type="income", category="Salario", amount=1000, date="2026-03-01"),
        make_tx(type="income", category="Reembolso", paymentSource="Reintegro", amount=200, date="2026-03-04"),
        make_tx(category="Comida", amount=300, date="2026-03-05"),
        make_tx(category="Hogar", amount=500, date="2026-03-06", includeInNet=False),
    ]


def test_compute_kpis(config: Config, march_records) -> None:
    kpis = compute_kpis(march_records, config)

    assert kpis.income == Decimal("1000")
    assert kpis.expense == Decimal("300")
    assert kpis.net == Decimal("900")
    assert kpis.savings_pct == Decimal("90")
    assert kpis.reentry == Decimal("200")
    assert kpis.count == 4
    assert kpis.average == Decimal("375")


def test_compute_kpis_without_income(config: Config, make_tx) -> None:
    kpis = compute_kpis([make_tx(category="Comida", amount=300)], config)

    assert kpis.savings_pct == Decimal("0")
    assert kpis.net == Decimal("-300")
    assert savings_rate(kpis) is None


def test_compute_kpis_empty(config: Config) -> None:
    kpis = compute_kpis([], config)

    assert kpis.count == 0
    assert kpis.average == Decimal("0")


def test_build_dashboard_month_scope(config: Config, budgets: BudgetBook, march_records, make_tx) -> None:
    records = march_records + [make_tx(category="Comida", amount=4000, date="2026-02-10")]

    view = build_dashboard(records, config, budgets, "2026-03", window=2)

    assert view.kpis.expense == Decimal("300")
    assert [entry.key for entry in view.expenses] == ["Hogar", "Comida"]
    assert [entry.key for entry in view.incomes] == ["Salario", "Reembolso"]
    assert view.comparison.months == ["2026-02", "2026-03"]
    assert view.comparison.expense == [Decimal("4000"), Decimal("300")]
    assert [row.label for row in view.budget_rows] == ["Comida", "Transporte"]
    assert view.daily.month == "2026-03"


def test_build_dashboard_all_scope(config: Config, budgets: BudgetBook, march_records, make_tx) -> None:
    records = march_records + [make_tx(category="Comida", amount=4000, date="2026-02-10")]

    view = build_dashboard(records, config, budgets, "2026-03", scope="all")

    assert view.kpis.expense == Decimal("4300")
    assert view.kpis.count == 5
    # Budgets stay on the selected month.
    assert view.budget_rows[0].spent == Decimal("300")


def test_build_dashboard_does_not_mutate_inputs(config: Config, budgets: BudgetBook, march_records) -> None:
    snapshot = list(march_records)
    entries = {month: dict(limits) for month, limits in budgets.entries.items()}

    build_dashboard(march_records, config, budgets, "2026-03", mode="group")

    assert march_records == snapshot
    assert budgets.entries == entries


def test_build_dashboard_to_dict(config: Config, budgets: BudgetBook, march_records) -> None:
    payload = build_dashboard(march_records, config, budgets, "2026-03", window=1).to_dict()

    assert payload["month"] == "2026-03"
    assert payload["kpis"]["savingsPct"] == 90.0
    assert payload["comparison"]["months"] == ["2026-03"]
    assert set(payload) >= {"budgets", "categories", "breakdown", "daily", "savings"}


@pytest.mark.parametrize("kwargs", [
    {"month": "2026-13"},
    {"month": "2026-03", "scope": "week"},
    {"month": "2026-03", "mode": "tag"},
])
def test_build_dashboard_rejects_bad_input(config: Config, budgets: BudgetBook, kwargs) -> None:
    with pytest.raises(ValueError):
        build_dashboard([], config, budgets, **kwargs)


def test_reentries_add_to_net_but_not_income(config: Config, make_tx) -> None:
    records = [
        make_tx(type="income", category="Salario", amount=1000),
        make_tx(type="income", category="Reembolso", paymentSource="Reintegro", amount=400),
        make_tx(category="Comida", amount=300),
    ]

    kpis = compute_kpis(records, config)

    assert kpis.income == Decimal("1000")
    assert kpis.reentry == Decimal("400")
    assert kpis.net == Decimal("1100")
    assert kpis.savings_pct == Decimal("110")


def test_legacy_reentry_with_custom_labels(config_payload) -> None:
    custom = Config.from_dict({**config_payload, "reentryCategories": ["Devolucion"]})
    records = [
        normalize({"type": "reentry", "amount": 50, "date": "2026-03-04"}, custom),
        normalize({"type": "income", "amount": 200, "date": "2026-03-05", "category": "Salario"}, custom),
    ]

    kpis = compute_kpis(records, custom)

    assert kpis.income == Decimal("200")
    assert kpis.reentry == Decimal("50")
    assert kpis.net == Decimal("250")
