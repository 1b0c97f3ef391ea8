"""Converters for semicolon-separated tariff tables."""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import pandas as pd

from tariff_normalizer.records import (
    CONSUMPTION,
    DAY_TYPES,
    DEFAULT_CURRENCY,
    OFF_PEAK_SLOTS,
    OFF_PEAK_TOKEN,
    PEAK_SLOTS,
    PEAK_TOKEN,
    SUBSCRIPTION,
    PowerLevelPrices,
    PriceRecord,
)
from tariff_normalizer.utils.units import convert_to_iso_date, monthly_subscription, scale_price

from .base import Converter, append_records
from .errors import SourceFormatError

START_DATE = "DATE_DEBUT"
END_DATE = "DATE_FIN"
POWER_LEVEL = "P_SOUSCRITE"
SUBSCRIPTION_PRICE = "PART_FIXE_TTC"

TIER_SUFFIXES = {"blue": "Bleu", "white": "Blanc", "red": "Rouge"}


def read_tariff_table(path: str | Path, required_columns: Sequence[str]) -> pd.DataFrame:
    """Read a ``;``-separated table as text and check its header.

    Columns are addressed by name. Empty cells come back as ``""``.
    """
    path = Path(path)
    try:
        frame = pd.read_csv(
            path,
            sep=";",
            dtype=str,
            index_col=False,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except FileNotFoundError as exc:
        raise SourceFormatError(f"tariff table not found: {path}") from exc
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise SourceFormatError(f"tariff table is unreadable: {path}: {exc}") from exc

    frame.columns = [str(col).strip() for col in frame.columns]
    missing = [col for col in required_columns if col not in frame.columns]
    if missing:
        raise SourceFormatError(f"{path.name} missing required columns: {missing}")
    frame = frame[list(required_columns)].fillna("")
    return frame.apply(lambda col: col.astype(str).str.strip())


@dataclass(frozen=True)
class _Period:
    power_level: str
    start_date: str | None
    end_date: str | None


class _TabularConverter(Converter):
    """Row-per-period table: each complete row yields records for one power level."""

    def __init__(
        self,
        path: str | Path,
        contract: str | None = None,
        price_columns: Sequence[str] | None = None,
        currency: str = DEFAULT_CURRENCY,
    ):
        self.path = Path(path)
        if contract is not None:
            self.contract = contract
        self.price_columns = list(price_columns or self.default_price_columns())
        self.currency = currency

    @abstractmethod
    def default_price_columns(self) -> list[str]:
        """Price columns in the order ``consumption_records`` expects them."""

    def convert(self) -> PowerLevelPrices:
        columns = [START_DATE, END_DATE, POWER_LEVEL, *self.price_columns, SUBSCRIPTION_PRICE]
        frame = read_tariff_table(self.path, columns)

        result: PowerLevelPrices = {}
        for row_no, row in enumerate(frame.to_dict(orient="records"), start=1):
            required = [row[POWER_LEVEL], row[START_DATE], row[SUBSCRIPTION_PRICE]]
            required += [row[col] for col in self.price_columns]
            if not all(required):
                continue
            period = _Period(
                power_level=row[POWER_LEVEL],
                start_date=convert_to_iso_date(row[START_DATE]),
                end_date=convert_to_iso_date(row[END_DATE]) if row[END_DATE] else None,
            )
            try:
                prices = [scale_price(row[col]) for col in self.price_columns]
                subscription = monthly_subscription(row[SUBSCRIPTION_PRICE])
            except ValueError as exc:
                raise SourceFormatError(f"{self.path.name} row {row_no}: {exc}") from exc

            records = self.consumption_records(period, prices)
            records.append(self._record(period, SUBSCRIPTION, subscription))
            append_records(result, period.power_level, records)
        return result

    @abstractmethod
    def consumption_records(self, period: _Period, prices: list[int]) -> list[PriceRecord]:
        """Consumption records for one row, in output order."""

    def _record(
        self,
        period: _Period,
        price_type: str,
        price: int,
        hour_slots: str | None = None,
        day_type: str | None = None,
    ) -> PriceRecord:
        return PriceRecord(
            contract=self.contract,
            price_type=price_type,
            currency=self.currency,
            price=price,
            start_date=period.start_date,
            end_date=period.end_date,
            hour_slots=hour_slots,
            day_type=day_type,
        )


class FlatRateConverter(_TabularConverter):
    """One consumption price per period (``base`` option)."""

    contract = "base"

    def default_price_columns(self) -> list[str]:
        return ["PART_VARIABLE_TTC"]

    def consumption_records(self, period: _Period, prices: list[int]) -> list[PriceRecord]:
        return [self._record(period, CONSUMPTION, prices[0])]


class DualRateConverter(_TabularConverter):
    """Off-peak and peak consumption prices (``HP/HC`` option).

    Hour slots are left as placeholder tokens for the deployment's own
    peak schedule.
    """

    contract = "peak-off-peak"

    def default_price_columns(self) -> list[str]:
        return ["PART_VARIABLE_HC_TTC", "PART_VARIABLE_HP_TTC"]

    def consumption_records(self, period: _Period, prices: list[int]) -> list[PriceRecord]:
        off_peak, peak = prices
        return [
            self._record(period, CONSUMPTION, off_peak, hour_slots=OFF_PEAK_TOKEN),
            self._record(period, CONSUMPTION, peak, hour_slots=PEAK_TOKEN),
        ]


class CalendarTieredConverter(_TabularConverter):
    """Day colour x off-peak/peak consumption prices (``tempo`` option)."""

    contract = "tempo"

    def default_price_columns(self) -> list[str]:
        columns: list[str] = []
        for day_type in DAY_TYPES:
            suffix = TIER_SUFFIXES[day_type]
            columns += [f"PART_VARIABLE_HC{suffix}_TTC", f"PART_VARIABLE_HP{suffix}_TTC"]
        return columns

    def consumption_records(self, period: _Period, prices: list[int]) -> list[PriceRecord]:
        records = []
        for tier, day_type in enumerate(DAY_TYPES):
            off_peak, peak = prices[2 * tier], prices[2 * tier + 1]
            records.append(
                self._record(period, CONSUMPTION, off_peak, hour_slots=OFF_PEAK_SLOTS, day_type=day_type)
            )
            records.append(
                self._record(period, CONSUMPTION, peak, hour_slots=PEAK_SLOTS, day_type=day_type)
            )
        return records
