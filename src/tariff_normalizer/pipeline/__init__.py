from .aggregator import aggregate
from .errors import (
    AggregationError,
    ConfigValidationError,
    ContractValidationError,
    PipelineError,
)
from .registry import DEFAULT_REGISTRY, ConverterRegistration, select_registrations
from .runner import ContractStatistics, NormalizationRunner, RunSummary, summarize
from .validator import validate_aggregate, validate_power_level, validate_price_record
from .writer import ArtifactWriter, load_artifact, to_payload

__all__ = [
    "AggregationError",
    "ArtifactWriter",
    "ConfigValidationError",
    "ContractStatistics",
    "ContractValidationError",
    "ConverterRegistration",
    "DEFAULT_REGISTRY",
    "NormalizationRunner",
    "PipelineError",
    "RunSummary",
    "aggregate",
    "load_artifact",
    "select_registrations",
    "summarize",
    "to_payload",
    "validate_aggregate",
    "validate_power_level",
    "validate_price_record",
]
