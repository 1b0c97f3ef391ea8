"""Command line interface for tariff-normalizer."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict

from tariff_normalizer.pipeline import (
    NormalizationRunner,
    PipelineError,
    load_artifact,
    validate_aggregate,
)
from tariff_normalizer.records import CURRENCIES, resolve_contract_shapes
from tariff_normalizer.utils.config import load_yaml


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Normalize electricity tariff sources into canonical price records"
    )
    parser.add_argument("--config", help="Path to YAML pipeline config")
    parser.add_argument(
        "--check",
        metavar="ARTIFACT",
        help="Validate an existing contracts JSON artifact instead of running converters",
    )
    parser.add_argument("--verbose", action="store_true", help="Print progress to stderr")
    return parser


def _progress(message: str) -> None:
    print(message, file=sys.stderr)


def _check_artifact(path: str, config: dict) -> dict:
    payload = load_artifact(path)
    validate_aggregate(
        payload,
        shapes=resolve_contract_shapes(config.get("extra_contracts")),
        currencies=set(CURRENCIES) | set(config.get("extra_currencies") or []),
        expected_contract_types=config.get("expected_contract_types") or (),
    )
    return {"status": "success", "checked": path, "contract_types": list(payload)}


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    if not args.config and not args.check:
        parser.error("one of --config or --check is required")
    config = load_yaml(args.config) if args.config else {}
    try:
        if args.check:
            payload = _check_artifact(args.check, config)
        else:
            runner = NormalizationRunner(progress_callback=_progress if args.verbose else None)
            payload = asdict(runner.run(config))
    except (PipelineError, ValueError, OSError) as exc:
        print(
            json.dumps(
                {
                    "status": "failed",
                    "failure_reason": str(exc),
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        raise SystemExit(2) from exc
    print(json.dumps(payload, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
