"""Statically declared converter registry."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Sequence

from tariff_normalizer.convert import (
    CalendarTieredConverter,
    Converter,
    DualRateConverter,
    FlatRateConverter,
    StaticCatalogConverter,
    UniformCatalogConverter,
)

from .errors import ConfigValidationError


@dataclass(frozen=True)
class ConverterRegistration:
    """Contract-type name and a factory building its converter from the data root."""

    name: str
    factory: Callable[[Path], Converter]

    def build(self, data_root: str | Path) -> Converter:
        return self.factory(Path(data_root))


DEFAULT_REGISTRY: tuple[ConverterRegistration, ...] = (
    ConverterRegistration(
        "alpiq-base",
        lambda root: UniformCatalogConverter(root / "alpiq" / "base" / "contract.json"),
    ),
    ConverterRegistration(
        "es-base-tarif-bleu",
        lambda root: FlatRateConverter(
            root / "electricite-de-strasbourg" / "base-tarif-bleu" / "Option_Base.csv"
        ),
    ),
    ConverterRegistration(
        "es-peak-off-peak-tarif-bleu",
        lambda root: DualRateConverter(
            root / "electricite-de-strasbourg" / "peak-off-peak-tarif-bleu" / "Option_HPHC.csv"
        ),
    ),
    ConverterRegistration(
        "es-tempo-tarif-bleu",
        lambda root: CalendarTieredConverter(
            root / "electricite-de-strasbourg" / "tempo-tarif-bleu" / "Option_Tempo.csv"
        ),
    ),
    ConverterRegistration(
        "octopus-eco-conso-fixe-base",
        lambda root: StaticCatalogConverter(
            root / "octopus" / "eco-conso-fixe-base" / "contract.json",
            root / "octopus" / "eco-conso-fixe-base" / "subscription.json",
        ),
    ),
)


def check_unique_names(registry: Iterable[ConverterRegistration]) -> None:
    seen: set[str] = set()
    for registration in registry:
        if registration.name in seen:
            raise ConfigValidationError(f"duplicate contract type in registry: {registration.name}")
        seen.add(registration.name)


def select_registrations(
    registry: Sequence[ConverterRegistration],
    names: Sequence[str] | None = None,
) -> list[ConverterRegistration]:
    check_unique_names(registry)
    if not names:
        return list(registry)
    by_name = {registration.name: registration for registration in registry}
    unknown = [name for name in names if name not in by_name]
    if unknown:
        allowed = ", ".join(sorted(by_name))
        raise ConfigValidationError(f"unknown contract types {unknown}; registered: {allowed}")
    return [by_name[name] for name in dict.fromkeys(names)]
