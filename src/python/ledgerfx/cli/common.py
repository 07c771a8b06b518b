"""Shared CLI helpers."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
import json
from typing import Any

import click

from ledgerfx.exceptions import SnapshotError
from ledgerfx.months import month_of, parse_month
from ledgerfx.snapshot import Snapshot, load_snapshot


def resolve_month(value: str | None, field_name: str) -> str:
    """Validate a YYYY-MM option, defaulting to the current month."""
    if value is None:
        return month_of(dt.date.today())
    try:
        parse_month(value)
    except ValueError as exc:
        raise click.BadParameter("Use YYYY-MM format.", param_hint=field_name) from exc
    return value


def get_snapshot(ctx: click.Context) -> Snapshot:
    """Load the ledger snapshot named in the Click context."""
    payload = ctx.obj or {}
    try:
        return load_snapshot(payload.get("snapshot_path"))
    except SnapshotError as exc:
        location = exc.details.get("path") or exc.details.get("env_var") or ""
        raise click.ClickException(f"{exc} {location}".strip()) from exc
    except ValueError as exc:
        raise click.ClickException(f"Snapshot contains an invalid record: {exc}") from exc


def fmt_amount(value: Decimal) -> str:
    return f"{value:,.2f}"


def echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
