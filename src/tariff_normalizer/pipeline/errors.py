"""Pipeline-level exceptions."""

from __future__ import annotations


class PipelineError(RuntimeError):
    """Base runtime error for a normalization run."""


class ConfigValidationError(PipelineError):
    """Pipeline configuration is invalid."""


class AggregationError(PipelineError):
    """A registered converter failed; the run produced no output."""

    def __init__(self, contract_type: str, message: str):
        super().__init__(f"{contract_type}: {message}")
        self.contract_type = contract_type


class ContractValidationError(PipelineError):
    """Aggregated output breaks a canonical record rule."""

    def __init__(
        self,
        contract_type: str,
        power_level: str | None,
        index: int | None,
        reason: str,
    ):
        location = contract_type
        if power_level is not None:
            location += f"[{power_level}]"
        if index is not None:
            location += f"[{index}]"
        super().__init__(f"{location}: {reason}")
        self.contract_type = contract_type
        self.power_level = power_level
        self.index = index
        self.reason = reason
