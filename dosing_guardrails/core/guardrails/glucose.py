"""Suspend threshold and correction range guardrails.

The suspend threshold and every correction range variant constrain one
another: a suspend threshold may never sit above any target floor, and
no target floor may sit below the suspend threshold. Results are
always expressed in mg/dL regardless of the input units.
"""

from collections.abc import Callable

from dosing_guardrails.core.guardrails.constants import (
    PRE_MEAL_RANGE_MAXIMUM_MGDL,
    WORKOUT_RANGE_ABSOLUTE_MGDL,
    WORKOUT_RANGE_RECOMMENDED_MGDL,
)
from dosing_guardrails.core.guardrails.enums import CorrectionRangePreset
from dosing_guardrails.core.guardrails.models import (
    GlucoseRangeSchedule,
    GlucoseThreshold,
    Guardrail,
)
from dosing_guardrails.core.guardrails.policy import CORRECTION_RANGE, SUSPEND_THRESHOLD
from dosing_guardrails.core.quantity import Quantity, QuantityRange, Unit
from dosing_guardrails.logging_config import get_logger

logger = get_logger(__name__)

_MGDL = Unit.milligrams_per_deciliter


def max_suspend_threshold_value(
    correction_range_schedule: GlucoseRangeSchedule | None = None,
    pre_meal_target_range: QuantityRange | None = None,
    workout_target_range: QuantityRange | None = None,
) -> Quantity:
    """Highest suspend threshold allowed by the configured target ranges.

    The minimum of the static suspend threshold ceiling and the floor of
    every range that is present. Absent inputs are ignored.
    """
    candidates = [
        SUSPEND_THRESHOLD.absolute_bounds.upper,
        correction_range_schedule.min_lower_bound()
        if correction_range_schedule is not None
        else None,
        pre_meal_target_range.lower if pre_meal_target_range is not None else None,
        workout_target_range.lower if workout_target_range is not None else None,
    ]
    return min(c for c in candidates if c is not None).to(_MGDL)


def min_correction_range_value(
    suspend_threshold: GlucoseThreshold | None = None,
) -> Quantity:
    """Lowest correction range floor allowed by the suspend threshold."""
    candidates = [
        CORRECTION_RANGE.absolute_bounds.lower,
        suspend_threshold.quantity if suspend_threshold is not None else None,
    ]
    return max(c for c in candidates if c is not None).to(_MGDL)


def workout_correction_range(
    correction_range_schedule_range: QuantityRange,
    suspend_threshold: GlucoseThreshold | None = None,
) -> Guardrail:
    """Guardrail for the workout override.

    The floor rises to the suspend threshold, and the recommended floor
    rises further to the top of the normal correction range since
    workouts intentionally run glucose higher.
    """
    unconstrained = Guardrail.from_values(
        absolute=WORKOUT_RANGE_ABSOLUTE_MGDL,
        recommended=WORKOUT_RANGE_RECOMMENDED_MGDL,
        unit=_MGDL,
    )
    candidates = [
        unconstrained.absolute_bounds.lower,
        suspend_threshold.quantity if suspend_threshold is not None else None,
    ]
    absolute_lower = max(c for c in candidates if c is not None).to(_MGDL)
    recommended_lower = max(
        absolute_lower, correction_range_schedule_range.upper
    ).to(_MGDL)

    return Guardrail(
        absolute_bounds=QuantityRange(
            absolute_lower, unconstrained.absolute_bounds.upper
        ),
        recommended_bounds=QuantityRange(
            recommended_lower, unconstrained.recommended_bounds.upper
        ),
        unit=_MGDL,
    )


def pre_meal_correction_range(
    correction_range_schedule_range: QuantityRange,
    suspend_threshold: GlucoseThreshold | None = None,
) -> Guardrail:
    """Guardrail for the pre-meal override.

    Bounded below by the suspend threshold (or the lowest allowed
    suspend threshold) and above by 130 mg/dL. The recommended ceiling
    tightens to the low end of the normal correction range.
    """
    maximum = Quantity(_MGDL, PRE_MEAL_RANGE_MAXIMUM_MGDL)
    absolute_lower = (
        suspend_threshold.quantity
        if suspend_threshold is not None
        else SUSPEND_THRESHOLD.absolute_bounds.lower
    ).to(_MGDL)
    recommended_upper = min(
        max(absolute_lower, correction_range_schedule_range.lower), maximum
    ).to(_MGDL)

    return Guardrail(
        absolute_bounds=QuantityRange(absolute_lower, maximum),
        recommended_bounds=QuantityRange(absolute_lower, recommended_upper),
        unit=_MGDL,
    )


_OVERRIDE_DERIVATIONS: dict[
    CorrectionRangePreset,
    Callable[[QuantityRange, GlucoseThreshold | None], Guardrail],
] = {
    CorrectionRangePreset.workout: workout_correction_range,
    CorrectionRangePreset.pre_meal: pre_meal_correction_range,
}


def correction_range_override(
    preset: CorrectionRangePreset | str,
    correction_range_schedule_range: QuantityRange,
    suspend_threshold: GlucoseThreshold | None = None,
) -> Guardrail:
    """Guardrail for a correction range override preset.

    Args:
        preset: Which override to derive.
        correction_range_schedule_range: Envelope of the normal correction
            range schedule (lowest lower bound to highest upper bound).
        suspend_threshold: The configured suspend threshold, if any.

    Returns:
        Guardrail in mg/dL.
    """
    preset = CorrectionRangePreset(preset)
    guardrail = _OVERRIDE_DERIVATIONS[preset](
        correction_range_schedule_range, suspend_threshold
    )
    logger.debug(
        "Derived correction range override guardrail",
        preset=str(preset),
        absolute_bounds=str(guardrail.absolute_bounds),
        recommended_bounds=str(guardrail.recommended_bounds),
    )
    return guardrail
