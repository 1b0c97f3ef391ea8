"""Fixed-point price scaling and source date conversion."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

import pandas as pd

from tariff_normalizer.records import PRICE_SCALE

MONTHS_PER_YEAR = 12
SOURCE_DATE_FORMAT = "%d/%m/%Y"


def parse_decimal(text: str) -> Decimal:
    """Parse a source amount, accepting a decimal comma."""
    try:
        amount = Decimal(str(text).strip().replace(",", "."))
    except InvalidOperation as exc:
        raise ValueError(f"not a decimal amount: {text!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"not a decimal amount: {text!r}")
    return amount


def _to_scaled_int(amount: Decimal) -> int:
    return int((amount * PRICE_SCALE).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def scale_price(text: str) -> int:
    return _to_scaled_int(parse_decimal(text))


def monthly_subscription(text: str) -> int:
    """Scaled monthly amount for an annual subscription fee."""
    return _to_scaled_int(parse_decimal(text) / MONTHS_PER_YEAR)


def convert_to_iso_date(text: str | None) -> str | None:
    """``DD/MM/YYYY`` to ``YYYY-MM-DD``.

    Empty input means an open-ended period and gives ``None``. Malformed input
    also gives ``None`` and is left for the validator to reject.
    """
    if text is None or not str(text).strip():
        return None
    value = str(text).strip()
    if value.count("/") != 2:
        return None
    parsed = pd.to_datetime(value, format=SOURCE_DATE_FORMAT, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.strftime("%Y-%m-%d")
