from .contracts import (
    CONSUMPTION,
    CONTRACT_SHAPES,
    CURRENCIES,
    DAY_TYPES,
    DEFAULT_CURRENCY,
    HOUR_SLOT_TOKENS,
    OFF_PEAK_SLOTS,
    OFF_PEAK_TOKEN,
    PEAK_SLOTS,
    PEAK_TOKEN,
    PRICE_SCALE,
    PRICE_TYPES,
    SUBSCRIPTION,
    AggregateOutput,
    ContractShape,
    PowerLevelPrices,
    PriceRecord,
    resolve_contract_shapes,
)

__all__ = [
    "AggregateOutput",
    "CONSUMPTION",
    "CONTRACT_SHAPES",
    "CURRENCIES",
    "ContractShape",
    "DAY_TYPES",
    "DEFAULT_CURRENCY",
    "HOUR_SLOT_TOKENS",
    "OFF_PEAK_SLOTS",
    "OFF_PEAK_TOKEN",
    "PEAK_SLOTS",
    "PEAK_TOKEN",
    "PRICE_SCALE",
    "PRICE_TYPES",
    "PowerLevelPrices",
    "PriceRecord",
    "SUBSCRIPTION",
    "resolve_contract_shapes",
]
