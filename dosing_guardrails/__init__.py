"""Safety bounds for automated insulin delivery therapy settings."""

from dosing_guardrails.core.exceptions import (
    EmptyInputListError,
    EmptyRangeError,
    GuardrailError,
    GuardrailInvariantError,
    IncompatibleUnitsError,
    InvalidSettingError,
    NoMatchingDiscreteValueError,
    UnknownParameterError,
)
from dosing_guardrails.core.guardrails import (
    CorrectionRangePreset,
    GlucoseRangeSchedule,
    GlucoseThreshold,
    Guardrail,
    GuardrailParameter,
    SafetyClassification,
)
from dosing_guardrails.core.quantity import Quantity, QuantityRange, Unit
from dosing_guardrails.logging_config import configure_logging

__version__ = "0.1.0"

__all__ = [
    "CorrectionRangePreset",
    "EmptyInputListError",
    "EmptyRangeError",
    "GlucoseRangeSchedule",
    "GlucoseThreshold",
    "Guardrail",
    "GuardrailError",
    "GuardrailInvariantError",
    "GuardrailParameter",
    "IncompatibleUnitsError",
    "InvalidSettingError",
    "NoMatchingDiscreteValueError",
    "Quantity",
    "QuantityRange",
    "SafetyClassification",
    "Unit",
    "UnknownParameterError",
    "configure_logging",
]
