"""Temporal exchange-rate resolution and base-currency conversion."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
import logging

from ledgerfx.models import ONE, BaseTransaction, Config, positive_decimal, to_decimal
from ledgerfx.months import month_of

logger = logging.getLogger(__name__)

REF_CURRENCY = "USD"
USD_PEGGED_STABLECOINS = frozenset({"USDT", "USDC", "DJED"})


def resolve_rate(
    currency: str,
    config: Config,
    date: dt.date | str | None = None,
    override_rate: Decimal | float | str | None = None,
) -> Decimal:
    """Resolve the rate that converts one unit of currency to base currency.

    Resolution order:
    - the base currency is always 1
    - a positive override (the rate executed on the transaction)
    - the currency's own rate for the month of date
    - for USD-pegged stablecoins, the month's USD rate
    - the global fallback rate
    - 1 (treat the amount as already in base currency)

    Never raises for missing or invalid rates. An unparseable date raises
    ValueError.
    """
    code = str(currency or "").strip().upper()
    if code == config.base_currency:
        return ONE

    override = positive_decimal(override_rate)
    if override is not None:
        return override

    month = month_of(date)
    if month is not None:
        month_rates = config.rates_by_month.get(month, {})
        month_rate = positive_decimal(month_rates.get(code))
        if month_rate is not None:
            return month_rate
        if code in USD_PEGGED_STABLECOINS:
            usd_rate = positive_decimal(month_rates.get(REF_CURRENCY))
            if usd_rate is not None:
                return usd_rate

    global_rate = positive_decimal(config.rates_to_base.get(code))
    if global_rate is not None:
        return global_rate

    logger.debug("No rate for %s (month=%s); using identity", code, month)
    return ONE


def to_base(
    amount: Decimal | float | int | str,
    currency: str,
    config: Config,
    date: dt.date | str | None = None,
    override_rate: Decimal | float | str | None = None,
) -> Decimal:
    """Convert an amount to base currency. No rounding is applied."""
    value = to_decimal(amount)
    if value is None:
        value = Decimal("0")
    return value * resolve_rate(currency, config, date, override_rate)


def tx_to_base(tx: BaseTransaction, config: Config) -> Decimal:
    """Convert a transaction at its own date and executed rate."""
    return to_base(tx.amount, tx.currency, config, tx.date, tx.fx_rate)


def to_usd(
    base_amount: Decimal,
    config: Config,
    date: dt.date | str | None = None,
) -> Decimal:
    """Express a base-currency amount in USD using the USD rate at date."""
    return base_amount / resolve_rate(REF_CURRENCY, config, date)
