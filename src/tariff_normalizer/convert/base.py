"""Converter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from tariff_normalizer.records import PowerLevelPrices, PriceRecord


class Converter(ABC):
    contract: str = "base"

    @abstractmethod
    def convert(self) -> PowerLevelPrices:
        """Return canonical price records grouped by subscribed power level."""


def append_records(result: PowerLevelPrices, power_level: str, records: list[PriceRecord]) -> None:
    result.setdefault(power_level, []).extend(records)
