"""Guardrail enums."""

from enum import StrEnum, auto


class SafetyClassification(StrEnum):
    """Where a chosen value sits relative to a guardrail."""

    below_recommended = auto()
    within_recommended = auto()
    above_recommended = auto()
    outside_absolute = auto()


class CorrectionRangePreset(StrEnum):
    """Temporary correction range overrides.

    ``workout``: raised target while exercising.
    ``pre_meal``: lowered target ahead of a meal.
    """

    workout = auto()
    pre_meal = auto()


class GuardrailParameter(StrEnum):
    """Therapy settings that carry a guardrail."""

    suspend_threshold = auto()
    correction_range = auto()
    workout_correction_range = auto()
    pre_meal_correction_range = auto()
    insulin_sensitivity = auto()
    carb_ratio = auto()
    basal_rate = auto()
    maximum_basal_rate = auto()
    maximum_bolus = auto()
