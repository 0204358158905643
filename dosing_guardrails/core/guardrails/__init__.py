"""Therapy setting guardrails.

This package computes the bound envelopes for the dosing parameters of
an automated insulin delivery configuration: suspend threshold,
correction range and its workout / pre-meal overrides, insulin
sensitivity, carb ratio, basal rate, maximum basal rate and maximum
bolus. Each guardrail pairs an absolute bound (hard physiological or
device limit) with a recommended bound (the safer sub-range).

Several guardrails are derived from other settings or from the values
the pump reports as supported. Every function here is pure: it reads
only its arguments and the static policy, so callers are responsible
for passing a mutually consistent snapshot of related settings.

IMPORTANT: These guardrails are a software safety layer -- they do NOT
replace clinical judgment. Derivation never validates a chosen value;
use Guardrail.classify for that.
"""

from dosing_guardrails.core.guardrails.delivery import (
    basal_rate,
    maximum_basal_rate,
    maximum_bolus,
)
from dosing_guardrails.core.guardrails.enums import (
    CorrectionRangePreset,
    GuardrailParameter,
    SafetyClassification,
)
from dosing_guardrails.core.guardrails.glucose import (
    correction_range_override,
    max_suspend_threshold_value,
    min_correction_range_value,
    pre_meal_correction_range,
    workout_correction_range,
)
from dosing_guardrails.core.guardrails.matching import matching_or_truncated_value
from dosing_guardrails.core.guardrails.models import (
    GlucoseRangeSchedule,
    GlucoseThreshold,
    Guardrail,
)
from dosing_guardrails.core.guardrails.policy import (
    CARB_RATIO,
    CORRECTION_RANGE,
    INSULIN_SENSITIVITY,
    STATIC_GUARDRAILS,
    SUSPEND_THRESHOLD,
    static_guardrail,
)

__all__ = [
    "CARB_RATIO",
    "CORRECTION_RANGE",
    "CorrectionRangePreset",
    "GlucoseRangeSchedule",
    "GlucoseThreshold",
    "Guardrail",
    "GuardrailParameter",
    "INSULIN_SENSITIVITY",
    "STATIC_GUARDRAILS",
    "SUSPEND_THRESHOLD",
    "SafetyClassification",
    "basal_rate",
    "correction_range_override",
    "matching_or_truncated_value",
    "max_suspend_threshold_value",
    "maximum_basal_rate",
    "maximum_bolus",
    "min_correction_range_value",
    "pre_meal_correction_range",
    "static_guardrail",
    "workout_correction_range",
]
