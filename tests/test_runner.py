from __future__ import annotations

from pathlib import Path

import pytest

from tariff_normalizer.pipeline import (
    AggregationError,
    ArtifactWriter,
    ConfigValidationError,
    ContractValidationError,
    NormalizationRunner,
    load_artifact,
    validate_aggregate,
)
from tariff_normalizer.utils.config import load_yaml


def _config(tmp_path: Path) -> dict:
    cfg = load_yaml("configs/pipeline.yaml")
    cfg["output_path"] = str(tmp_path / "out" / "contracts.json")
    return cfg


def test_runner_writes_validated_artifact(tmp_path: Path) -> None:
    messages: list[str] = []
    summary = NormalizationRunner(progress_callback=messages.append).run(_config(tmp_path))

    assert summary.status == "success"
    assert summary.contract_types == [
        "alpiq-base",
        "es-base-tarif-bleu",
        "es-peak-off-peak-tarif-bleu",
        "es-tempo-tarif-bleu",
        "octopus-eco-conso-fixe-base",
    ]
    assert summary.statistics["es-base-tarif-bleu"].power_levels == 3
    assert summary.statistics["es-tempo-tarif-bleu"].entries == 14
    assert summary.statistics["alpiq-base"].power_levels == 34
    assert summary.totals.subscription > 0
    assert messages[0] == "config validated"
    assert "validation passed" in messages

    payload = load_artifact(summary.output_path)
    validate_aggregate(payload)
    off_peak, peak, subscription = payload["es-peak-off-peak-tarif-bleu"]["6"][3:]
    assert off_peak["hour_slots"] == "TO_REPLACE_OFF_PEAK"
    assert peak["hour_slots"] == "TO_REPLACE_PEAK"
    assert subscription == {
        "contract": "peak-off-peak",
        "price_type": "subscription",
        "currency": "euro",
        "price": 137_200,
        "start_date": "2025-02-01",
        "end_date": None,
        "hour_slots": None,
        "day_type": None,
    }


def test_runner_is_deterministic(tmp_path: Path) -> None:
    cfg = _config(tmp_path)
    cfg["write_output"] = False

    first = NormalizationRunner().run(cfg)
    second = NormalizationRunner().run(cfg)

    assert first.output_path is None
    assert first.content_hash == second.content_hash


def test_runner_subset_and_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "env" / "contracts.json"
    monkeypatch.setenv("TARIFF_NORMALIZER_OUTPUT", str(target))
    cfg = _config(tmp_path)
    cfg["contracts"] = ["es-tempo-tarif-bleu"]
    cfg["expected_contract_types"] = ["es-tempo-tarif-bleu"]

    summary = NormalizationRunner().run(cfg)

    assert summary.output_path == str(target)
    assert list(load_artifact(target)) == ["es-tempo-tarif-bleu"]


def test_validation_failure_leaves_no_artifact(tmp_path: Path) -> None:
    cfg = _config(tmp_path)
    cfg["expected_contract_types"] = ["edf-tempo"]

    with pytest.raises(ContractValidationError, match="edf-tempo"):
        NormalizationRunner().run(cfg)

    assert not Path(cfg["output_path"]).exists()


def test_source_format_error_aborts_run(tmp_path: Path) -> None:
    source = tmp_path / "electricite-de-strasbourg" / "base-tarif-bleu"
    source.mkdir(parents=True)
    (source / "Option_Base.csv").write_text(
        "DATE_DEBUT;DATE_FIN;P_SOUSCRITE;PART_VARIABLE_TTC\n01/02/2025;;6;0,2016\n",
        encoding="utf-8",
    )
    cfg = _config(tmp_path)
    cfg["data_root"] = str(tmp_path)
    cfg["contracts"] = ["es-base-tarif-bleu"]

    with pytest.raises(AggregationError, match="PART_FIXE_TTC"):
        NormalizationRunner().run(cfg)


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"data_root": "does/not/exist"}, "data_root does not exist"),
        ({"contracts": "es-tempo-tarif-bleu"}, "contracts must be a list"),
        ({"extra_contracts": {"week-end": "weekly"}}, "extra_contracts.week-end"),
        ({"extra_contracts": {"week-end": ["dual"]}}, "extra_contracts.week-end"),
        ({"extra_currencies": [["chf"]]}, "extra_currencies must be a list"),
        ({"write_output": "maybe"}, "write_output"),
    ],
)
def test_invalid_config_is_rejected(tmp_path: Path, overrides: dict, message: str) -> None:
    cfg = _config(tmp_path)
    cfg.update(overrides)

    with pytest.raises(ConfigValidationError, match=message):
        NormalizationRunner().run(cfg)


def test_writer_replaces_previous_artifact(tmp_path: Path) -> None:
    path = tmp_path / "contracts.json"
    path.write_text("stale", encoding="utf-8")

    ArtifactWriter(path).write({"x": {}})

    assert load_artifact(path) == {"x": {}}
    assert sorted(p.name for p in tmp_path.iterdir()) == ["contracts.json"]
