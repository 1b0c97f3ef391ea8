"""Strict validation gate over the aggregated price records."""

from __future__ import annotations

import math
import re
from typing import Any, Iterable, Mapping

from tariff_normalizer.records import (
    CONSUMPTION,
    CONTRACT_SHAPES,
    CURRENCIES,
    DAY_TYPES,
    HOUR_SLOT_TOKENS,
    PRICE_TYPES,
    SUBSCRIPTION,
    ContractShape,
    PriceRecord,
)
from tariff_normalizer.records.contracts import REQUIRED_FIELDS

from .errors import ContractValidationError

ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def _as_dict(record: Any) -> dict[str, Any]:
    if isinstance(record, PriceRecord):
        return record.to_dict()
    if isinstance(record, dict):
        return record
    raise TypeError(f"expected a price record, got {type(record).__name__}")


def _is_iso_date(value: Any) -> bool:
    return isinstance(value, str) and ISO_DATE.fullmatch(value) is not None


def validate_price_record(
    record: Any,
    contract_type: str,
    power_level: str,
    index: int,
    shapes: Mapping[str, ContractShape] = CONTRACT_SHAPES,
    currencies: Iterable[str] = CURRENCIES,
) -> None:
    """Field presence, types and per-record shape rules for one record."""

    def fail(reason: str) -> ContractValidationError:
        return ContractValidationError(contract_type, power_level, index, reason)

    try:
        price = _as_dict(record)
    except TypeError as exc:
        raise fail(str(exc)) from exc

    for name in REQUIRED_FIELDS:
        if name not in price:
            raise fail(f"missing required field '{name}'")

    contract = price["contract"]
    if not isinstance(contract, str):
        raise fail(f"contract must be a string, got {type(contract).__name__}")
    if contract not in shapes:
        allowed = "', '".join(sorted(shapes))
        raise fail(f"contract must be one of '{allowed}', got '{contract}'")

    if not isinstance(price["price_type"], str) or price["price_type"] not in PRICE_TYPES:
        raise fail(f"price_type must be 'consumption' or 'subscription', got '{price['price_type']}'")

    currencies = set(currencies)
    if not isinstance(price["currency"], str) or price["currency"] not in currencies:
        allowed = "', '".join(sorted(currencies))
        raise fail(f"currency must be one of '{allowed}', got '{price['currency']}'")

    value = price["price"]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise fail(f"price must be a non-negative number, got {value!r}")
    if not math.isfinite(value) or value < 0:
        raise fail(f"price must be a non-negative number, got {value!r}")

    if not _is_iso_date(price["start_date"]):
        raise fail(f"start_date must be YYYY-MM-DD, got {price['start_date']!r}")
    end_date = price.get("end_date")
    if end_date is not None and not _is_iso_date(end_date):
        raise fail(f"end_date must be YYYY-MM-DD or null, got {end_date!r}")

    hour_slots = price.get("hour_slots")
    day_type = price.get("day_type")

    if price["price_type"] == SUBSCRIPTION:
        if hour_slots is not None:
            raise fail(f"subscription must have hour_slots = null, got {hour_slots!r}")
        if day_type is not None:
            raise fail(f"subscription must have day_type = null, got {day_type!r}")
        if value <= 0:
            raise fail(f"subscription price must be positive, got {value!r}")
        return

    shape = shapes[contract]
    if shape is ContractShape.FLAT:
        if hour_slots is not None:
            raise fail(f"flat-rate consumption must have hour_slots = null, got {hour_slots!r}")
        if day_type is not None:
            raise fail(f"flat-rate consumption must have day_type = null, got {day_type!r}")
    elif shape is ContractShape.DUAL:
        if hour_slots not in HOUR_SLOT_TOKENS:
            allowed = "' or '".join(HOUR_SLOT_TOKENS)
            raise fail(f"peak/off-peak consumption must have hour_slots '{allowed}', got {hour_slots!r}")
        if day_type is not None:
            raise fail(f"peak/off-peak consumption must have day_type = null, got {day_type!r}")
    elif shape is ContractShape.TIERED:
        if day_type not in DAY_TYPES:
            allowed = "', '".join(DAY_TYPES)
            raise fail(f"tiered consumption must have day_type in '{allowed}', got {day_type!r}")
        if not isinstance(hour_slots, str) or not hour_slots:
            raise fail(f"tiered consumption must have non-empty hour_slots, got {hour_slots!r}")


def validate_power_level(
    prices: Any,
    contract_type: str,
    power_level: str,
    shapes: Mapping[str, ContractShape] = CONTRACT_SHAPES,
    currencies: Iterable[str] = CURRENCIES,
) -> None:
    if not isinstance(prices, list):
        raise ContractValidationError(
            contract_type, power_level, None, "power level must hold a list of prices"
        )
    if not prices:
        raise ContractValidationError(contract_type, power_level, None, "power level has no prices")

    currencies = set(currencies)
    for index, record in enumerate(prices):
        validate_price_record(record, contract_type, power_level, index, shapes, currencies)

    rows = [_as_dict(record) for record in prices]
    subscription_ranges = {
        (row["start_date"], row.get("end_date")) for row in rows if row["price_type"] == SUBSCRIPTION
    }
    if not subscription_ranges:
        raise ContractValidationError(
            contract_type, power_level, None, "at least one subscription price is required"
        )

    for index, row in enumerate(rows):
        if row["price_type"] != CONSUMPTION:
            continue
        date_range = (row["start_date"], row.get("end_date"))
        if date_range not in subscription_ranges:
            raise ContractValidationError(
                contract_type,
                power_level,
                index,
                f"missing subscription price for date range {date_range[0]}|{date_range[1]}",
            )


def validate_aggregate(
    aggregate: Any,
    shapes: Mapping[str, ContractShape] = CONTRACT_SHAPES,
    currencies: Iterable[str] = CURRENCIES,
    expected_contract_types: Iterable[str] = (),
) -> None:
    """Walk every (contract type, power level, record) and raise on the first violation."""
    if not isinstance(aggregate, dict):
        raise ContractValidationError("<root>", None, None, "aggregate must be a mapping")

    currencies = set(currencies)
    for contract_type, by_power in aggregate.items():
        if not isinstance(by_power, dict):
            raise ContractValidationError(
                contract_type, None, None, "contract type must map power levels to prices"
            )
        for power_level, prices in by_power.items():
            validate_power_level(prices, contract_type, power_level, shapes, currencies)

    for expected in expected_contract_types:
        if expected not in aggregate:
            raise ContractValidationError(expected, None, None, "expected contract type not found")
