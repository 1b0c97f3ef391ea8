"""Run every registered converter and merge the results by contract type."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

from tariff_normalizer.records import AggregateOutput

from .errors import AggregationError
from .registry import ConverterRegistration, check_unique_names


def aggregate(
    registrations: Iterable[ConverterRegistration],
    data_root: str | Path,
    progress_callback: Callable[[str], None] | None = None,
) -> AggregateOutput:
    """Invoke each converter once. The first failure aborts the whole run."""
    registrations = list(registrations)
    check_unique_names(registrations)

    output: AggregateOutput = {}
    for registration in registrations:
        try:
            prices = registration.build(data_root).convert()
        except Exception as exc:  # noqa: BLE001
            raise AggregationError(registration.name, str(exc)) from exc
        output[registration.name] = prices
        if progress_callback is not None:
            progress_callback(f"converted {registration.name}: {len(prices)} power levels")
    return output
