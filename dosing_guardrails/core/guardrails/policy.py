"""Static guardrail policy.

The guardrails that do not depend on any other setting, plus a
read-only table keyed by parameter. Built once at import and never
mutated.
"""

from types import MappingProxyType
from typing import Final

from dosing_guardrails.core.exceptions import UnknownParameterError
from dosing_guardrails.core.guardrails.constants import (
    CARB_RATIO_ABSOLUTE,
    CARB_RATIO_RECOMMENDED,
    CARB_RATIO_SUGGESTION,
    CORRECTION_RANGE_ABSOLUTE_MGDL,
    CORRECTION_RANGE_RECOMMENDED_MGDL,
    CORRECTION_RANGE_SUGGESTION_MGDL,
    INSULIN_SENSITIVITY_ABSOLUTE,
    INSULIN_SENSITIVITY_RECOMMENDED,
    INSULIN_SENSITIVITY_SUGGESTION,
    SUSPEND_THRESHOLD_ABSOLUTE_MGDL,
    SUSPEND_THRESHOLD_RECOMMENDED_MGDL,
    SUSPEND_THRESHOLD_SUGGESTION_MGDL,
)
from dosing_guardrails.core.guardrails.enums import GuardrailParameter
from dosing_guardrails.core.guardrails.models import Guardrail
from dosing_guardrails.core.quantity import Unit

SUSPEND_THRESHOLD: Final[Guardrail] = Guardrail.from_values(
    absolute=SUSPEND_THRESHOLD_ABSOLUTE_MGDL,
    recommended=SUSPEND_THRESHOLD_RECOMMENDED_MGDL,
    unit=Unit.milligrams_per_deciliter,
    starting_suggestion=SUSPEND_THRESHOLD_SUGGESTION_MGDL,
)

CORRECTION_RANGE: Final[Guardrail] = Guardrail.from_values(
    absolute=CORRECTION_RANGE_ABSOLUTE_MGDL,
    recommended=CORRECTION_RANGE_RECOMMENDED_MGDL,
    unit=Unit.milligrams_per_deciliter,
    starting_suggestion=CORRECTION_RANGE_SUGGESTION_MGDL,
)

INSULIN_SENSITIVITY: Final[Guardrail] = Guardrail.from_values(
    absolute=INSULIN_SENSITIVITY_ABSOLUTE,
    recommended=INSULIN_SENSITIVITY_RECOMMENDED,
    unit=Unit.milligrams_per_deciliter_per_unit,
    starting_suggestion=INSULIN_SENSITIVITY_SUGGESTION,
)

CARB_RATIO: Final[Guardrail] = Guardrail.from_values(
    absolute=CARB_RATIO_ABSOLUTE,
    recommended=CARB_RATIO_RECOMMENDED,
    unit=Unit.grams_per_unit,
    starting_suggestion=CARB_RATIO_SUGGESTION,
)

STATIC_GUARDRAILS: Final = MappingProxyType(
    {
        GuardrailParameter.suspend_threshold: SUSPEND_THRESHOLD,
        GuardrailParameter.correction_range: CORRECTION_RANGE,
        GuardrailParameter.insulin_sensitivity: INSULIN_SENSITIVITY,
        GuardrailParameter.carb_ratio: CARB_RATIO,
    }
)


def static_guardrail(parameter: GuardrailParameter | str) -> Guardrail:
    """Look up the fixed guardrail for ``parameter``.

    Raises:
        UnknownParameterError: ``parameter`` is derived from other settings
            and has no fixed guardrail.
    """
    try:
        return STATIC_GUARDRAILS[GuardrailParameter(parameter)]
    except (KeyError, ValueError) as e:
        msg = f"{parameter} has no static guardrail"
        raise UnknownParameterError(msg) from e
