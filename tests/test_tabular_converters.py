from __future__ import annotations

from pathlib import Path

import pytest

from tariff_normalizer.convert import (
    CalendarTieredConverter,
    DualRateConverter,
    FlatRateConverter,
    SourceFormatError,
    read_tariff_table,
)
from tariff_normalizer.records import (
    OFF_PEAK_SLOTS,
    OFF_PEAK_TOKEN,
    PEAK_SLOTS,
    PEAK_TOKEN,
    PriceRecord,
)

TEMPO_HEADER = (
    "DATE_DEBUT;DATE_FIN;P_SOUSCRITE;PART_FIXE_TTC;"
    "PART_VARIABLE_HCBleu_TTC;PART_VARIABLE_HPBleu_TTC;"
    "PART_VARIABLE_HCBlanc_TTC;PART_VARIABLE_HPBlanc_TTC;"
    "PART_VARIABLE_HCRouge_TTC;PART_VARIABLE_HPRouge_TTC"
)


def _write(tmp_path: Path, name: str, lines: list[str]) -> Path:
    path = tmp_path / name
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_flat_rate_emits_consumption_and_monthly_subscription(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "Option_Base.csv",
        [
            "DATE_DEBUT;DATE_FIN;P_SOUSCRITE;PART_FIXE_TTC;PART_VARIABLE_TTC",
            "01/08/2023;31/01/2024;6;157,56;0,2276",
            "01/02/2024;;6;151,08;0,2516",
        ],
    )

    result = FlatRateConverter(path).convert()

    assert list(result) == ["6"]
    first, sub, second, _ = result["6"]
    assert first == PriceRecord(
        contract="base",
        price_type="consumption",
        currency="euro",
        price=2276,
        start_date="2023-08-01",
        end_date="2024-01-31",
    )
    assert sub.price_type == "subscription"
    assert sub.price == 131_300
    assert (sub.start_date, sub.end_date) == ("2023-08-01", "2024-01-31")
    assert second.price == 2516
    assert second.end_date is None


def test_flat_rate_addresses_columns_by_header_name(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "Option_Base.csv",
        [
            "PART_VARIABLE_TTC;P_SOUSCRITE;EXTRA;PART_FIXE_TTC;DATE_FIN;DATE_DEBUT",
            "0,2016;9;x;196,44;;01/02/2025",
        ],
    )

    records = FlatRateConverter(path).convert()["9"]

    assert [r.price for r in records] == [2016, 163_700]
    assert all(r.start_date == "2025-02-01" for r in records)


def test_flat_rate_skips_incomplete_rows(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "Option_Base.csv",
        [
            "DATE_DEBUT;DATE_FIN;P_SOUSCRITE;PART_FIXE_TTC;PART_VARIABLE_TTC",
            "01/02/2025;;36;;",
            ";;6;151,08;0,2516",
            "01/02/2025;;;151,08;0,2516",
            "",
            "01/02/2025;;3;123,12;0,2016",
            "01/02/2025;;12",
        ],
    )

    result = FlatRateConverter(path).convert()

    assert list(result) == ["3"]
    assert len(result["3"]) == 2


def test_flat_rate_keeps_malformed_dates_as_null(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "Option_Base.csv",
        [
            "DATE_DEBUT;DATE_FIN;P_SOUSCRITE;PART_FIXE_TTC;PART_VARIABLE_TTC",
            "2025-02-01;;6;151,08;0,2516",
        ],
    )

    records = FlatRateConverter(path).convert()["6"]

    assert [r.start_date for r in records] == [None, None]


def test_flat_rate_reports_unparseable_price_with_row(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "Option_Base.csv",
        [
            "DATE_DEBUT;DATE_FIN;P_SOUSCRITE;PART_FIXE_TTC;PART_VARIABLE_TTC",
            "01/02/2025;;6;151,08;0,2516",
            "01/02/2025;;9;abc;0,2516",
        ],
    )

    with pytest.raises(SourceFormatError, match="row 2"):
        FlatRateConverter(path).convert()


def test_missing_subscription_header_fails_before_emitting(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "Option_Base.csv",
        [
            "DATE_DEBUT;DATE_FIN;P_SOUSCRITE;PART_VARIABLE_TTC",
            "01/02/2025;;6;0,2516",
        ],
    )

    with pytest.raises(SourceFormatError, match="PART_FIXE_TTC"):
        FlatRateConverter(path).convert()


def test_read_tariff_table_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SourceFormatError, match="not found"):
        read_tariff_table(tmp_path / "absent.csv", ["DATE_DEBUT"])


def test_dual_rate_end_to_end_scenario(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "Option_HPHC.csv",
        [
            "DATE_DEBUT;DATE_FIN;P_SOUSCRITE;PART_VARIABLE_HC_TTC;PART_VARIABLE_HP_TTC;PART_FIXE_TTC",
            "01/01/2023;;6;0,1234;0,2345;120,00",
            "01/01/2023;;6;;0,2345;120,00",
        ],
    )

    result = DualRateConverter(path).convert()

    off_peak, peak, subscription = result["6"]
    assert (off_peak.price, off_peak.hour_slots) == (1234, OFF_PEAK_TOKEN)
    assert (peak.price, peak.hour_slots) == (2345, PEAK_TOKEN)
    assert subscription.price == 100_000
    assert subscription.hour_slots is None
    for record in result["6"]:
        assert record.contract == "peak-off-peak"
        assert record.start_date == "2023-01-01"
        assert record.end_date is None
        assert record.day_type is None


def test_dual_rate_requires_both_variable_columns(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "Option_HPHC.csv",
        [
            "DATE_DEBUT;DATE_FIN;P_SOUSCRITE;PART_VARIABLE_HC_TTC;PART_FIXE_TTC",
            "01/01/2023;;6;0,1234;120,00",
        ],
    )

    with pytest.raises(SourceFormatError, match="PART_VARIABLE_HP_TTC"):
        DualRateConverter(path).convert()


def test_calendar_tiered_row_yields_seven_records(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "Option_Tempo.csv",
        [TEMPO_HEADER, "01/02/2025;;6;157,56;0,1288;0,1552;0,1447;0,1792;0,1518;0,6586"],
    )

    records = CalendarTieredConverter(path).convert()["6"]

    assert len(records) == 7
    consumption = [(r.day_type, r.hour_slots, r.price) for r in records[:6]]
    assert consumption == [
        ("blue", OFF_PEAK_SLOTS, 1288),
        ("blue", PEAK_SLOTS, 1552),
        ("white", OFF_PEAK_SLOTS, 1447),
        ("white", PEAK_SLOTS, 1792),
        ("red", OFF_PEAK_SLOTS, 1518),
        ("red", PEAK_SLOTS, 6586),
    ]
    subscription = records[6]
    assert subscription.price_type == "subscription"
    assert subscription.contract == "tempo"
    assert subscription.price == 131_300
    assert (subscription.hour_slots, subscription.day_type) == (None, None)


def test_calendar_tiered_skips_row_missing_any_tier_price(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "Option_Tempo.csv",
        [
            TEMPO_HEADER,
            "01/02/2025;;6;157,56;0,1288;0,1552;0,1447;0,1792;;0,6586",
            "01/02/2025;;9;;0,1288;0,1552;0,1447;0,1792;0,1518;0,6586",
            "01/02/2025;;12;232,20;0,1288;0,1552;0,1447;0,1792;0,1518;0,6586",
        ],
    )

    result = CalendarTieredConverter(path).convert()

    assert list(result) == ["12"]


def test_slot_partitions_cover_the_day_in_half_hours() -> None:
    peak = PEAK_SLOTS.split(",")
    off_peak = OFF_PEAK_SLOTS.split(",")
    assert len(peak) + len(off_peak) == 48
    assert not set(peak) & set(off_peak)
    assert peak[0] == "06:00"
    assert peak[-1] == "21:30"


def test_rows_with_trailing_separator_keep_their_columns(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "Option_Base.csv",
        [
            "DATE_DEBUT;DATE_FIN;P_SOUSCRITE;PART_FIXE_TTC;PART_VARIABLE_TTC",
            "01/02/2025;;6;151,08;0,2516;",
            "01/02/2024;31/01/2025;9;186,72;0,2516;",
        ],
    )

    result = FlatRateConverter(path).convert()

    assert list(result) == ["6", "9"]
    consumption, subscription = result["6"]
    assert (consumption.price, consumption.start_date, consumption.end_date) == (2516, "2025-02-01", None)
    assert subscription.price == 125_900
    assert result["9"][0].end_date == "2025-01-31"
