"""Snap derived values onto the discrete values a pump supports."""

import math
from collections.abc import Sequence

from dosing_guardrails.core.exceptions import (
    EmptyInputListError,
    NoMatchingDiscreteValueError,
)
from dosing_guardrails.core.guardrails.constants import DEFAULT_DECIMAL_PLACES


def matching_or_truncated_value(
    target: float,
    supported_values: Sequence[float],
    decimal_places: int = DEFAULT_DECIMAL_PLACES,
) -> float:
    """Return the supported value matching ``target``, else the one just below it.

    ``target`` is rounded to ``decimal_places`` before looking for an
    exact match, so a derived value like 6.4 * 0.35 = 2.2399999... lands
    on a supported 2.24. Without a match the greatest supported value
    strictly below ``target`` is returned (truncation, never rounding up).

    Args:
        target: Derived value to snap.
        supported_values: Values the device accepts, in any order.
        decimal_places: Precision of the exact-match comparison.

    Returns:
        A member of ``supported_values``.

    Raises:
        EmptyInputListError: ``supported_values`` is empty.
        NoMatchingDiscreteValueError: ``target`` is below every supported value.
    """
    if not supported_values:
        msg = "no supported values to match against"
        raise EmptyInputListError(msg)

    rounded = round(target, decimal_places)
    candidates = sorted(supported_values)
    for value in candidates:
        if math.isclose(value, rounded, rel_tol=1e-9, abs_tol=1e-12):
            return value

    below = [value for value in candidates if value < target]
    if not below:
        msg = (
            f"target {target} is below every supported value "
            f"(smallest is {candidates[0]})"
        )
        raise NoMatchingDiscreteValueError(msg)
    return below[-1]
