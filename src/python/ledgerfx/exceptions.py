"""Custom exception types for ledgerfx."""

from __future__ import annotations

from typing import Any


class LedgerError(Exception):
    """Base class for ledgerfx errors."""


class SnapshotError(LedgerError):
    """Raised when a ledger snapshot cannot be located or read."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}
