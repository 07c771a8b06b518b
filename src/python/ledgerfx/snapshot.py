"""Load ledger snapshots exported by the storage layer."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
from typing import Any

from ledgerfx.budgets import BudgetBook
from ledgerfx.exceptions import SnapshotError
from ledgerfx.models import Config, Transaction
from ledgerfx.normalize import normalize_all

logger = logging.getLogger(__name__)

SNAPSHOT_ENV_VAR = "LEDGERFX_SNAPSHOT"


@dataclass(frozen=True)
class Snapshot:
    """Config, normalized transactions and budgets read at one point in time."""

    config: Config
    transactions: list[Transaction]
    budgets: BudgetBook


def resolve_snapshot_path(path: str | Path | None = None) -> Path:
    """Resolve the snapshot path from the argument or the environment."""
    if path is not None:
        return Path(path)
    from_env = os.environ.get(SNAPSHOT_ENV_VAR)
    if not from_env:
        raise SnapshotError(
            f"Snapshot path is required when {SNAPSHOT_ENV_VAR} is not set",
            {"env_var": SNAPSHOT_ENV_VAR},
        )
    return Path(from_env)


def parse_snapshot(payload: dict[str, Any]) -> Snapshot:
    """Build a snapshot from a decoded payload.

    Transactions are normalized; the legacy ``expenses`` list is read as
    expense records when ``transactions`` is absent.
    """
    config_payload = payload.get("config") or {}
    if not isinstance(config_payload, dict):
        raise SnapshotError("Snapshot config must be an object", {"type": type(config_payload).__name__})
    config = Config.from_dict(config_payload)

    records = payload.get("transactions")
    if records is None and isinstance(payload.get("expenses"), list):
        records = [{**record, "type": "expense"} for record in payload["expenses"]]
    if not isinstance(records or [], list):
        raise SnapshotError("Snapshot transactions must be a list", {"type": type(records).__name__})

    transactions = normalize_all(records or [], config)
    try:
        budgets = BudgetBook.from_dict(payload.get("budgets") or {})
    except ValueError as exc:
        raise SnapshotError(f"Snapshot budgets are invalid: {exc}", {"section": "budgets"}) from exc
    return Snapshot(config=config, transactions=transactions, budgets=budgets)


def load_snapshot(path: str | Path | None = None) -> Snapshot:
    """Read and parse a JSON snapshot file."""
    snapshot_path = resolve_snapshot_path(path)
    if not snapshot_path.exists():
        raise SnapshotError("Snapshot file not found", {"path": str(snapshot_path)})
    try:
        with snapshot_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise SnapshotError("Snapshot file could not be read", {"path": str(snapshot_path)}) from exc
    if not isinstance(payload, dict):
        raise SnapshotError("Snapshot must be a JSON object", {"path": str(snapshot_path)})
    snapshot = parse_snapshot(payload)
    logger.debug("Loaded %d transactions from %s", len(snapshot.transactions), snapshot_path)
    return snapshot
