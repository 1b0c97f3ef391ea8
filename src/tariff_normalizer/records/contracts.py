"""Canonical price record contract shared by converters and the validator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

CONSUMPTION = "consumption"
SUBSCRIPTION = "subscription"
PRICE_TYPES = frozenset({CONSUMPTION, SUBSCRIPTION})

CURRENCIES = frozenset({"euro"})
DEFAULT_CURRENCY = "euro"

DAY_TYPES = ("blue", "white", "red")

PEAK_TOKEN = "TO_REPLACE_PEAK"
OFF_PEAK_TOKEN = "TO_REPLACE_OFF_PEAK"
HOUR_SLOT_TOKENS = (PEAK_TOKEN, OFF_PEAK_TOKEN)

# Half-hour markers; peak covers 06:00-22:00, off-peak the rest of the day.
OFF_PEAK_SLOTS = (
    "00:00,00:30,01:00,01:30,02:00,02:30,03:00,03:30,04:00,04:30,05:00,05:30,"
    "22:00,22:30,23:00,23:30"
)
PEAK_SLOTS = (
    "06:00,06:30,07:00,07:30,08:00,08:30,09:00,09:30,10:00,10:30,11:00,11:30,"
    "12:00,12:30,13:00,13:30,14:00,14:30,15:00,15:30,16:00,16:30,17:00,17:30,"
    "18:00,18:30,19:00,19:30,20:00,20:30,21:00,21:30"
)

RECORD_FIELDS = (
    "contract",
    "price_type",
    "currency",
    "price",
    "start_date",
    "end_date",
    "hour_slots",
    "day_type",
)
REQUIRED_FIELDS = ("contract", "price_type", "currency", "start_date", "price")

# Scale applied to currency amounts before they are stored as integers.
PRICE_SCALE = 10_000


class ContractShape(str, Enum):
    FLAT = "flat"
    DUAL = "dual"
    TIERED = "tiered"


CONTRACT_SHAPES: dict[str, ContractShape] = {
    "base": ContractShape.FLAT,
    "peak-off-peak": ContractShape.DUAL,
    "tempo": ContractShape.TIERED,
}


@dataclass(frozen=True)
class PriceRecord:
    """One dated price, scaled by ``PRICE_SCALE``.

    Subscription prices are monthly amounts. ``end_date=None`` means the price
    is still in effect. ``hour_slots`` is either ``None``, a comma-joined list
    of ``HH:MM`` markers, or one of ``HOUR_SLOT_TOKENS``.
    """

    contract: str
    price_type: str
    currency: str
    price: int
    start_date: str | None
    end_date: str | None = None
    hour_slots: str | None = None
    day_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in RECORD_FIELDS}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> PriceRecord:
        missing = [name for name in REQUIRED_FIELDS if name not in payload]
        if missing:
            raise KeyError(f"price entry missing required fields: {missing}")
        return cls(
            contract=payload["contract"],
            price_type=payload["price_type"],
            currency=payload["currency"],
            price=payload["price"],
            start_date=payload["start_date"],
            end_date=payload.get("end_date"),
            hour_slots=payload.get("hour_slots"),
            day_type=payload.get("day_type"),
        )


PowerLevelPrices = dict[str, list[PriceRecord]]
AggregateOutput = dict[str, PowerLevelPrices]


def resolve_contract_shapes(extra: dict[str, str] | None = None) -> dict[str, ContractShape]:
    shapes = dict(CONTRACT_SHAPES)
    for contract, shape in (extra or {}).items():
        shapes[str(contract)] = ContractShape(shape)
    return shapes
