from .config import load_yaml, parse_config_bool, stable_hash
from .units import convert_to_iso_date, monthly_subscription, parse_decimal, scale_price

__all__ = [
    "convert_to_iso_date",
    "load_yaml",
    "monthly_subscription",
    "parse_config_bool",
    "parse_decimal",
    "scale_price",
    "stable_hash",
]
