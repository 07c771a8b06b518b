from __future__ import annotations

from decimal import Decimal

import pytest

from ledgerfx.budgets import (
    BudgetBook,
    category_table,
    classify_pct,
    decode_budget_key,
    evaluate_budgets,
    worst_offenders,
)
from ledgerfx.models import BudgetKey, Config


@pytest.mark.parametrize("pct, status", [
    (Decimal("0"), "ok"),
    (Decimal("79.99"), "ok"),
    (Decimal("80"), "warn"),
    (Decimal("99.99"), "warn"),
    (Decimal("100"), "danger"),
    (Decimal("250"), "danger"),
])
def test_classify_pct_boundaries(pct, status) -> None:
    assert classify_pct(pct) == status


def test_decode_budget_key() -> None:
    assert decode_budget_key("Comida") == BudgetKey.category("Comida")
    assert decode_budget_key("__group__::Esenciales") == BudgetKey.group("Esenciales")
    assert decode_budget_key("[GRUPO] Esenciales") == BudgetKey.group("Esenciales")


def test_budget_book_drops_empty_limits(budgets: BudgetBook) -> None:
    assert budgets.limits_for("2026-03", "category") == {
        "Comida": Decimal("1000"),
        "Transporte": Decimal("500"),
    }
    assert budgets.limits_for("2026-03", "group") == {"Esenciales": Decimal("2000")}
    assert budgets.limit_for("2026-03", BudgetKey.category("Hogar")) == Decimal("0")
    assert budgets.limits_for("2026-04") == {}


def test_budget_book_modes_do_not_collide() -> None:
    book = BudgetBook().with_limit("2026-03", BudgetKey.category("Ocio"), 100)
    book = book.with_limit("2026-03", BudgetKey.group("Ocio"), 900)

    assert book.limits_for("2026-03", "category") == {"Ocio": Decimal("100")}
    assert book.limits_for("2026-03", "group") == {"Ocio": Decimal("900")}


def test_budget_book_with_limit_returns_new_book(budgets: BudgetBook) -> None:
    updated = budgets.with_limit("2026-03", BudgetKey.category("Comida"), 0)

    assert "Comida" not in updated.limits_for("2026-03")
    assert budgets.limits_for("2026-03")["Comida"] == Decimal("1000")


def test_budget_book_removing_last_limit_drops_month() -> None:
    book = BudgetBook().with_limit("2026-05", BudgetKey.category("Ocio"), 10)
    assert book.months() == ["2026-05"]
    assert book.with_limit("2026-05", BudgetKey.category("Ocio"), None).months() == []


def test_evaluate_budgets_warn_scenario(config: Config, make_tx, budgets: BudgetBook) -> None:
    records = [
        make_tx(category="Comida", amount=600, date="2026-03-02"),
        make_tx(category="Comida", amount=250, date="2026-03-20"),
        make_tx(category="Comida", amount=5000, date="2026-02-20"),
    ]

    rows = evaluate_budgets("2026-03", "category", records, budgets, config)
    food = next(row for row in rows if row.label == "Comida")

    assert food.spent == Decimal("850")
    assert food.limit == Decimal("1000")
    assert food.pct == Decimal("85")
    assert food.status == "warn"


def test_evaluate_budgets_skips_keys_without_limit(config: Config, make_tx, budgets: BudgetBook) -> None:
    records = [
        make_tx(category="Hogar", amount=999),
        make_tx(category="Ocio", amount=50),
    ]

    rows = evaluate_budgets("2026-03", "category", records, budgets, config)

    assert {row.label for row in rows} == {"Comida", "Transporte"}
    assert all(row.spent == Decimal("0") and row.status == "ok" for row in rows)


def test_evaluate_budgets_sorted_by_pct(config: Config, make_tx, budgets: BudgetBook) -> None:
    records = [
        make_tx(category="Comida", amount=1000),
        make_tx(category="Transporte", amount=400),
    ]

    rows = evaluate_budgets("2026-03", "category", records, budgets, config)

    assert [(row.label, row.status) for row in rows] == [("Comida", "danger"), ("Transporte", "warn")]
    assert rows[0].pct == Decimal("100")
    assert rows[1].pct == Decimal("80")


def test_evaluate_budgets_group_mode(config: Config, make_tx, budgets: BudgetBook) -> None:
    records = [
        make_tx(category="Comida", amount=1000),
        make_tx(category="Transporte", amount=600),
        make_tx(category="Ocio", amount=5000),
    ]

    rows = evaluate_budgets("2026-03", "group", records, budgets, config)

    assert len(rows) == 1
    assert rows[0].label == "Esenciales"
    assert rows[0].spent == Decimal("1600")
    assert rows[0].status == "warn"


def test_evaluate_budgets_converts_to_base(config: Config, make_tx) -> None:
    book = BudgetBook.from_dict({"2026-03": {"Ocio": 25000}})
    records = [make_tx(category="Ocio", amount=20, currency="USD", date="2026-03-05")]

    rows = evaluate_budgets("2026-03", "category", records, book, config)

    assert rows[0].spent == Decimal("25000")
    assert rows[0].status == "danger"


def test_evaluate_budgets_rejects_unknown_mode(config: Config, budgets: BudgetBook) -> None:
    with pytest.raises(ValueError):
        evaluate_budgets("2026-03", "tag", [], budgets, config)


def test_worst_offenders_limits_rows(config: Config, make_tx) -> None:
    book = BudgetBook.from_dict({"2026-03": {f"Cat{index}": 100 for index in range(10)}})
    records = [make_tx(category=f"Cat{index}", amount=index * 10 + 1) for index in range(10)]

    top = worst_offenders(evaluate_budgets("2026-03", "category", records, book, config), 3)

    assert [row.label for row in top] == ["Cat9", "Cat8", "Cat7"]


def test_category_table_lists_limitless_spend(config: Config, make_tx, budgets: BudgetBook) -> None:
    records = [
        make_tx(category="Ocio", amount=700),
        make_tx(category="Comida", amount=300),
    ]

    rows = category_table("2026-03", "category", records, budgets, config)

    assert [row.label for row in rows] == ["Ocio", "Comida", "Transporte"]
    assert rows[0].pct is None
    assert rows[0].pct_label == "—"
    assert rows[1].pct == Decimal("30")
    assert rows[2].spent == Decimal("0")


def test_evaluation_does_not_mutate_inputs(config: Config, make_tx, budgets: BudgetBook) -> None:
    records = [make_tx(category="Comida", amount=10)]
    before = dict(budgets.entries["2026-03"])

    evaluate_budgets("2026-03", "category", records, budgets, config)
    category_table("2026-03", "group", records, budgets, config)

    assert budgets.entries["2026-03"] == before
    assert len(records) == 1
