"""Basal rate, maximum basal rate and maximum bolus guardrails.

These bounds come from the pump: every bound lands on a rate or volume
the device reports as supported, never on an intermediate value.
Supported value lists may be passed in any order.
"""

from collections.abc import Sequence

from dosing_guardrails.core.exceptions import (
    EmptyInputListError,
    InvalidSettingError,
    NoMatchingDiscreteValueError,
)
from dosing_guardrails.core.guardrails.constants import (
    BASAL_RATE_ABSOLUTE_UNITS_PER_HOUR,
    BASAL_RATE_SUGGESTION_UNITS_PER_HOUR,
    DEFAULT_DECIMAL_PLACES,
    MAXIMUM_BASAL_RATE_DAILY_UNITS,
    MAXIMUM_BASAL_RATE_HIGH_SCALE_FACTOR,
    MAXIMUM_BASAL_RATE_LOW_SCALE_FACTOR,
    MAXIMUM_BASAL_RATE_SUGGESTION_UNITS_PER_HOUR,
    MAXIMUM_BOLUS_SUGGESTION_UNITS,
    MAXIMUM_BOLUS_THRESHOLD_UNITS,
    MAXIMUM_BOLUS_WARNING_THRESHOLD_UNITS,
)
from dosing_guardrails.core.guardrails.matching import matching_or_truncated_value
from dosing_guardrails.core.guardrails.models import Guardrail
from dosing_guardrails.core.guardrails.policy import CARB_RATIO
from dosing_guardrails.core.quantity import QuantityRange, Unit
from dosing_guardrails.logging_config import get_logger

logger = get_logger(__name__)

_UNITS_PER_HOUR = Unit.international_units_per_hour


def basal_rate(supported_basal_rates: Sequence[float]) -> Guardrail:
    """Guardrail for scheduled basal rates.

    Both bound sets span the supported rates inside 0.05-30 U/hr.

    Raises:
        EmptyInputListError: No supported rate falls inside the envelope.
    """
    minimum, maximum = BASAL_RATE_ABSOLUTE_UNITS_PER_HOUR
    allowed = sorted(r for r in supported_basal_rates if minimum <= r <= maximum)
    if not allowed:
        msg = f"no supported basal rate within {minimum}-{maximum} U/hr"
        raise EmptyInputListError(msg)

    return Guardrail.from_values(
        absolute=(allowed[0], allowed[-1]),
        recommended=(allowed[0], allowed[-1]),
        unit=_UNITS_PER_HOUR,
        starting_suggestion=BASAL_RATE_SUGGESTION_UNITS_PER_HOUR,
    )


def maximum_basal_rate(
    supported_basal_rates: Sequence[float],
    scheduled_basal_range: tuple[float, float] | None = None,
    lowest_carb_ratio: float | None = None,
    decimal_places: int = DEFAULT_DECIMAL_PLACES,
) -> Guardrail:
    """Guardrail for the maximum temporary basal rate.

    The ceiling is 70 U divided by the lowest carb ratio (or the lowest
    allowed carb ratio), truncated onto a supported rate. When scheduled
    basal rates are known the floor is the highest scheduled rate and
    the recommended range is 2.1x-6.4x that rate; otherwise both ranges
    start at the pump's lowest supported rate.

    Args:
        supported_basal_rates: Rates the pump accepts (U/hr).
        scheduled_basal_range: Lowest and highest scheduled basal rates.
        lowest_carb_ratio: Most aggressive configured carb ratio (g/U).
        decimal_places: Precision used when snapping onto supported rates.

    Raises:
        EmptyInputListError: ``supported_basal_rates`` is empty.
        InvalidSettingError: ``lowest_carb_ratio`` is not positive.
        NoMatchingDiscreteValueError: A derived bound is below every
            supported rate.
        EmptyRangeError: The highest scheduled rate exceeds the ceiling.
    """
    if not supported_basal_rates:
        msg = "no supported basal rates"
        raise EmptyInputListError(msg)
    if lowest_carb_ratio is not None and lowest_carb_ratio <= 0:
        msg = f"lowest carb ratio must be positive, got {lowest_carb_ratio}"
        raise InvalidSettingError(msg)

    rates = sorted(supported_basal_rates)
    carb_ratio = (
        lowest_carb_ratio
        if lowest_carb_ratio is not None
        else CARB_RATIO.absolute_bounds.lower.value_in(Unit.grams_per_unit)
    )
    absolute_upper = matching_or_truncated_value(
        MAXIMUM_BASAL_RATE_DAILY_UNITS / carb_ratio, rates, decimal_places
    )

    if scheduled_basal_range is not None:
        highest_scheduled = scheduled_basal_range[1]
        recommended_lower = matching_or_truncated_value(
            MAXIMUM_BASAL_RATE_LOW_SCALE_FACTOR * highest_scheduled,
            rates,
            decimal_places,
        )
        recommended_upper = matching_or_truncated_value(
            MAXIMUM_BASAL_RATE_HIGH_SCALE_FACTOR * highest_scheduled,
            rates,
            decimal_places,
        )
        absolute_bounds = QuantityRange.from_values(
            highest_scheduled, absolute_upper, _UNITS_PER_HOUR
        )
        recommended_bounds = QuantityRange.from_values(
            recommended_lower, recommended_upper, _UNITS_PER_HOUR
        ).clamped(to=absolute_bounds)
        logger.debug(
            "Derived maximum basal rate from scheduled basal",
            highest_scheduled=highest_scheduled,
            absolute_upper=absolute_upper,
        )
        return Guardrail(
            absolute_bounds=absolute_bounds,
            recommended_bounds=recommended_bounds,
            unit=_UNITS_PER_HOUR,
        )

    return Guardrail.from_values(
        absolute=(rates[0], absolute_upper),
        recommended=(rates[0], absolute_upper),
        unit=_UNITS_PER_HOUR,
        starting_suggestion=MAXIMUM_BASAL_RATE_SUGGESTION_UNITS_PER_HOUR,
    )


def maximum_bolus(supported_bolus_volumes: Sequence[float]) -> Guardrail:
    """Guardrail for the maximum single bolus.

    Absolute bounds span the supported volumes in (0, 30] U. The
    recommended range starts at the second-smallest volume and ends at
    the largest volume below the 20 U warning line.

    Raises:
        EmptyInputListError: Fewer than two supported volumes in (0, 30] U.
        NoMatchingDiscreteValueError: No supported volume is below 20 U.
    """
    volumes = sorted(
        v for v in supported_bolus_volumes if 0 < v <= MAXIMUM_BOLUS_THRESHOLD_UNITS
    )
    if len(volumes) < 2:
        msg = (
            f"need at least two supported bolus volumes within "
            f"(0, {MAXIMUM_BOLUS_THRESHOLD_UNITS:g}] U, got {len(volumes)}"
        )
        raise EmptyInputListError(msg)

    below_warning = [v for v in volumes if v < MAXIMUM_BOLUS_WARNING_THRESHOLD_UNITS]
    if not below_warning:
        msg = (
            f"no supported bolus volume below "
            f"{MAXIMUM_BOLUS_WARNING_THRESHOLD_UNITS:g} U"
        )
        raise NoMatchingDiscreteValueError(msg)

    return Guardrail.from_values(
        absolute=(volumes[0], volumes[-1]),
        recommended=(volumes[1], below_warning[-1]),
        unit=Unit.international_unit,
        starting_suggestion=MAXIMUM_BOLUS_SUGGESTION_UNITS,
    )
