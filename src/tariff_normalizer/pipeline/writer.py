"""JSON artifact for the aggregated price records."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from tariff_normalizer.records import AggregateOutput, PriceRecord


def to_payload(aggregate: AggregateOutput) -> dict[str, dict[str, list[dict[str, Any]]]]:
    return {
        contract_type: {
            power_level: [
                record.to_dict() if isinstance(record, PriceRecord) else dict(record)
                for record in prices
            ]
            for power_level, prices in by_power.items()
        }
        for contract_type, by_power in aggregate.items()
    }


def load_artifact(path: str | Path) -> Any:
    with Path(path).open("r", encoding="utf-8") as fh:
        return json.load(fh)


class ArtifactWriter:
    def __init__(self, path: str | Path = "build/contracts.json"):
        self.path = Path(path)

    def write(self, aggregate: AggregateOutput) -> Path:
        """Write through a temporary sibling so readers never see a partial file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(to_payload(aggregate), fh, ensure_ascii=False, indent=2)
                fh.write("\n")
            os.replace(tmp_path, self.path)
        finally:
            tmp_path.unlink(missing_ok=True)
        return self.path
