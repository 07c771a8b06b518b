"""Pytest configuration and shared fixtures.

Unit tests build transactions through the normalization boundary with
the ``make_tx`` factory. Integration tests drive the CLI against a
snapshot file written to a temporary directory.
"""
from __future__ import annotations

import json
from pathlib import Path
import sys
from typing import Any, Callable

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src" / "python"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from ledgerfx.budgets import BudgetBook  # noqa: E402
from ledgerfx.models import Config  # noqa: E402
from ledgerfx.normalize import normalize  # noqa: E402


@pytest.fixture()
def config_payload() -> dict[str, Any]:
    return {
        "baseCurrency": "ARS",
        "currencies": ["ARS", "USD", "EUR", "USDT"],
        "locale": "es-AR",
        "ratesToBase": {"ARS": 1, "USD": 1100, "EUR": 1200},
        "ratesByMonth": {
            "2026-02": {"USD": 1200},
            "2026-03": {"USD": 1250, "EUR": 1350},
        },
        "expenseCategories": ["Comida", "Transporte", "Ocio", "Hogar", "Otros"],
        "incomeCategories": ["Salario", "Reembolso", "Otros ingresos"],
        "reentryCategories": ["Reintegro"],
        "expenseGroups": ["Esenciales", "Estilo de vida"],
        "expenseCategoryGroups": {
            "Comida": "Esenciales",
            "Transporte": "Esenciales",
            "Ocio": "Estilo de vida",
        },
    }


@pytest.fixture()
def config(config_payload: dict[str, Any]) -> Config:
    return Config.from_dict(config_payload)


@pytest.fixture()
def make_tx(config: Config) -> Callable[..., Any]:
    """Factory for normalized transactions with sensible defaults."""
    counter = {"next": 0}

    def _make(**fields: Any):
        counter["next"] += 1
        raw = {
            "id": f"tx-{counter['next']}",
            "type": "expense",
            "date": "2026-03-10",
            "amount": "100",
            "currency": "ARS",
        }
        raw.update(fields)
        return normalize(raw, config)

    return _make


@pytest.fixture()
def budgets() -> BudgetBook:
    return BudgetBook.from_dict(
        {
            "2026-03": {
                "Comida": 1000,
                "Transporte": 500,
                "Hogar": 0,
                "__group__::Esenciales": 2000,
            }
        }
    )


@pytest.fixture()
def snapshot_payload(config_payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "version": 2,
        "config": config_payload,
        "budgets": {
            "2026-03": {"Comida": 100000, "Transporte": 20000, "[GRUPO] Esenciales": 150000},
        },
        "transactions": [
            {"id": "inc-1", "type": "income", "date": "2026-03-01", "amount": 500000,
             "currency": "ARS", "category": "Salario", "pay": "Transferencia"},
            {"id": "exp-1", "type": "expense", "date": "2026-03-03", "amount": 85000,
             "currency": "ARS", "category": "Comida", "pay": "Tarjeta", "tags": "super, semana"},
            {"id": "exp-2", "type": "expense", "date": "2026-03-12", "amount": 15000,
             "currency": "ARS", "category": "Transporte", "pay": "Efectivo"},
            {"id": "ree-1", "type": "income", "date": "2026-03-20", "amount": 5000,
             "currency": "ARS", "category": "Reembolso", "paymentSource": "Reintegro"},
            {"id": "fx-1", "type": "expense", "date": "2026-02-10", "amount": 200,
             "currency": "USD", "category": "Compra de divisas", "pay": "Compra de divisas"},
            {"id": "fx-2", "type": "income", "date": "2026-03-25", "amount": 50,
             "currency": "USD", "category": "Venta de divisas", "pay": "Venta de divisas"},
        ],
    }


@pytest.fixture()
def snapshot_path(tmp_path: Path, snapshot_payload: dict[str, Any]) -> Path:
    path = tmp_path / "ledger-snapshot.json"
    with path.open("w", encoding="utf-8") as handle:
        json.dump(snapshot_payload, handle)
    return path
