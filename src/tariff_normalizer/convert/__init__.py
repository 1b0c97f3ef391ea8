from .base import Converter
from .catalog import (
    DEFAULT_POWER_LEVELS,
    StaticCatalogConverter,
    UniformCatalogConverter,
    load_json_document,
)
from .errors import ConverterError, SourceFormatError
from .tabular import (
    CalendarTieredConverter,
    DualRateConverter,
    FlatRateConverter,
    read_tariff_table,
)

__all__ = [
    "CalendarTieredConverter",
    "Converter",
    "ConverterError",
    "DEFAULT_POWER_LEVELS",
    "DualRateConverter",
    "FlatRateConverter",
    "SourceFormatError",
    "StaticCatalogConverter",
    "UniformCatalogConverter",
    "load_json_document",
    "read_tariff_table",
]
