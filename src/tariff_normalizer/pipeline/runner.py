"""Config-driven normalization runner."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Sequence

from tariff_normalizer.records import (
    CONSUMPTION,
    CURRENCIES,
    SUBSCRIPTION,
    AggregateOutput,
    ContractShape,
    resolve_contract_shapes,
)
from tariff_normalizer.utils.config import parse_config_bool, stable_hash

from .aggregator import aggregate
from .errors import ConfigValidationError
from .registry import DEFAULT_REGISTRY, ConverterRegistration, select_registrations
from .validator import validate_aggregate
from .writer import ArtifactWriter, to_payload

DEFAULT_DATA_ROOT = "data/contracts"
DEFAULT_OUTPUT_PATH = "build/contracts.json"
_ALLOWED_SHAPES = {shape.value for shape in ContractShape}


@dataclass
class ContractStatistics:
    power_levels: int
    entries: int
    consumption: int
    subscription: int


@dataclass
class RunSummary:
    content_hash: str
    contract_types: list[str]
    statistics: dict[str, ContractStatistics]
    totals: ContractStatistics
    output_path: str | None = None
    status: str = "success"


def summarize(output: AggregateOutput) -> tuple[dict[str, ContractStatistics], ContractStatistics]:
    """Per contract type and overall entry counts."""
    statistics: dict[str, ContractStatistics] = {}
    totals = ContractStatistics(power_levels=0, entries=0, consumption=0, subscription=0)
    for contract_type, by_power in output.items():
        stats = ContractStatistics(power_levels=len(by_power), entries=0, consumption=0, subscription=0)
        for prices in by_power.values():
            stats.entries += len(prices)
            stats.consumption += sum(1 for p in prices if p.price_type == CONSUMPTION)
            stats.subscription += sum(1 for p in prices if p.price_type == SUBSCRIPTION)
        statistics[contract_type] = stats
        totals.power_levels += stats.power_levels
        totals.entries += stats.entries
        totals.consumption += stats.consumption
        totals.subscription += stats.subscription
    return statistics, totals


class NormalizationRunner:
    def __init__(
        self,
        writer: ArtifactWriter | None = None,
        progress_callback: Callable[[str], None] | None = None,
        registry: Sequence[ConverterRegistration] = DEFAULT_REGISTRY,
    ):
        self.writer = writer
        self.registry = registry
        self._progress_callback = progress_callback

    def run(self, config: dict[str, Any]) -> RunSummary:
        self._validate_config(config)
        self._emit("config validated")

        data_root = self._data_root(config)
        registrations = select_registrations(self.registry, config.get("contracts") or None)
        shapes = resolve_contract_shapes(config.get("extra_contracts"))
        currencies = set(CURRENCIES) | set(config.get("extra_currencies") or [])
        write_output = parse_config_bool(
            config.get("write_output"), default=True, field_name="write_output"
        )

        self._emit(f"running {len(registrations)} converters from {data_root}")
        output = aggregate(registrations, data_root, progress_callback=self._progress_callback)

        validate_aggregate(
            output,
            shapes=shapes,
            currencies=currencies,
            expected_contract_types=config.get("expected_contract_types") or (),
        )
        self._emit("validation passed")

        statistics, totals = summarize(output)
        summary = RunSummary(
            content_hash=stable_hash(to_payload(output)),
            contract_types=list(output),
            statistics=statistics,
            totals=totals,
        )
        if write_output:
            writer = self.writer or ArtifactWriter(self._output_path(config))
            summary.output_path = str(writer.write(output))
            self._emit(f"artifact written: {summary.output_path}")
        return summary

    def _data_root(self, config: dict[str, Any]) -> Path:
        return Path(
            os.getenv("TARIFF_NORMALIZER_DATA_ROOT") or config.get("data_root") or DEFAULT_DATA_ROOT
        )

    def _output_path(self, config: dict[str, Any]) -> Path:
        return Path(
            os.getenv("TARIFF_NORMALIZER_OUTPUT") or config.get("output_path") or DEFAULT_OUTPUT_PATH
        )

    def _validate_config(self, config: dict[str, Any]) -> None:
        if not isinstance(config, dict):
            raise ConfigValidationError("config must be a dict")

        data_root = self._data_root(config)
        if not data_root.is_dir():
            raise ConfigValidationError(f"data_root does not exist: {data_root}")

        for key in ("contracts", "expected_contract_types", "extra_currencies"):
            value = config.get(key)
            if value is None:
                continue
            if not isinstance(value, list) or any(not isinstance(v, str) or not v for v in value):
                raise ConfigValidationError(f"{key} must be a list of non-empty strings")

        extra_contracts = config.get("extra_contracts")
        if extra_contracts is not None:
            if not isinstance(extra_contracts, dict):
                raise ConfigValidationError("extra_contracts must map contract names to shapes")
            for contract, shape in extra_contracts.items():
                if not isinstance(shape, str) or shape not in _ALLOWED_SHAPES:
                    allowed = ", ".join(sorted(_ALLOWED_SHAPES))
                    raise ConfigValidationError(
                        f"extra_contracts.{contract} must be one of: {allowed}"
                    )

        try:
            parse_config_bool(config.get("write_output"), default=True, field_name="write_output")
        except ValueError as exc:
            raise ConfigValidationError(str(exc)) from exc

    def _emit(self, message: str) -> None:
        if self._progress_callback is not None:
            self._progress_callback(message)
