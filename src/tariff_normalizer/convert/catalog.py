"""Converters for static JSON price catalogs."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Sequence

from tariff_normalizer.records import PowerLevelPrices, PriceRecord

from .base import Converter
from .errors import SourceFormatError

DEFAULT_POWER_LEVELS = tuple(str(level) for level in range(3, 37))


def load_json_document(path: str | Path) -> Any:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError as exc:
        raise SourceFormatError(f"catalog not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise SourceFormatError(f"catalog is not valid JSON: {path}: {exc}") from exc


def _parse_entries(raw: Any, source: str, contract: str) -> list[PriceRecord]:
    if not isinstance(raw, list):
        raise SourceFormatError(f"{source} must be a JSON list of price entries")
    entries: list[PriceRecord] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            raise SourceFormatError(f"{source}[{idx}] must be a JSON object")
        try:
            entry = PriceRecord.from_dict(item)
        except KeyError as exc:
            raise SourceFormatError(f"{source}[{idx}]: {exc.args[0]}") from exc
        if entry.contract != contract:
            raise SourceFormatError(
                f"{source}[{idx}]: contract must be '{contract}', got {entry.contract!r}"
            )
        entries.append(entry)
    return entries


class StaticCatalogConverter(Converter):
    """Shared consumption catalog plus a per-power-level subscription table.

    Every power level gets its own copy of the consumption entries, followed by
    its subscription entries. Entries must carry the converter's ``contract``.
    """

    def __init__(
        self,
        contract_path: str | Path,
        subscription_path: str | Path,
        contract: str = "base",
    ):
        self.contract_path = Path(contract_path)
        self.subscription_path = Path(subscription_path)
        self.contract = contract

    def convert(self) -> PowerLevelPrices:
        consumption = _parse_entries(
            load_json_document(self.contract_path), self.contract_path.name, self.contract
        )
        table = load_json_document(self.subscription_path)
        if not isinstance(table, dict):
            raise SourceFormatError(
                f"{self.subscription_path.name} must map power levels to price lists"
            )

        result: PowerLevelPrices = {}
        for power_level, raw in table.items():
            source = f"{self.subscription_path.name}[{power_level}]"
            subscriptions = _parse_entries(raw, source, self.contract)
            result[str(power_level)] = copy.deepcopy(consumption) + copy.deepcopy(subscriptions)
        return result


class UniformCatalogConverter(Converter):
    """One catalog applied identically to a fixed list of power levels."""

    def __init__(
        self,
        contract_path: str | Path,
        power_levels: Sequence[str] = DEFAULT_POWER_LEVELS,
        contract: str = "base",
    ):
        self.contract_path = Path(contract_path)
        self.power_levels = [str(level) for level in power_levels]
        self.contract = contract

    def convert(self) -> PowerLevelPrices:
        entries = _parse_entries(
            load_json_document(self.contract_path), self.contract_path.name, self.contract
        )
        return {level: copy.deepcopy(entries) for level in self.power_levels}
