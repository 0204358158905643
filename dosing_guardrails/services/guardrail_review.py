"""Settings review service.

Derives every guardrail for a therapy settings snapshot in one pass.
Cross-parameter guardrails are computed from the same snapshot, so the
suspend threshold, correction range and overrides stay mutually
consistent.
"""

import uuid

from pydantic import ValidationError

from dosing_guardrails.config import settings
from dosing_guardrails.core.exceptions import GuardrailError
from dosing_guardrails.core.guardrails.delivery import (
    basal_rate,
    maximum_basal_rate,
    maximum_bolus,
)
from dosing_guardrails.core.guardrails.enums import (
    CorrectionRangePreset,
    GuardrailParameter,
)
from dosing_guardrails.core.guardrails.glucose import (
    correction_range_override,
    max_suspend_threshold_value,
    min_correction_range_value,
)
from dosing_guardrails.core.guardrails.models import Guardrail
from dosing_guardrails.core.guardrails.policy import STATIC_GUARDRAILS
from dosing_guardrails.logging_config import get_logger, review_id_ctx
from dosing_guardrails.schemas.therapy_settings import (
    GuardrailReview,
    TherapySettingsSnapshot,
)

logger = get_logger(__name__)

_OVERRIDE_PARAMETERS: dict[CorrectionRangePreset, GuardrailParameter] = {
    CorrectionRangePreset.workout: GuardrailParameter.workout_correction_range,
    CorrectionRangePreset.pre_meal: GuardrailParameter.pre_meal_correction_range,
}


def derive_guardrails(
    snapshot: TherapySettingsSnapshot,
    *,
    decimal_places: int | None = None,
    review_id: str | None = None,
) -> GuardrailReview:
    """Derive the guardrail of every therapy setting for ``snapshot``.

    Override guardrails are only derived when a correction range
    schedule is configured, since both depend on its envelope.

    Args:
        snapshot: Current settings.
        decimal_places: Precision for snapping onto supported pump rates.
            Defaults to ``settings.discrete_match_decimal_places``.
        review_id: Id attached to every log line of this pass. Generated
            when omitted.

    Returns:
        GuardrailReview holding one Guardrail per derived parameter.

    Raises:
        GuardrailError: A pump capability list cannot produce bounds.
        ValidationError: A derived guardrail violates its containment
            invariant.
    """
    if decimal_places is None:
        decimal_places = settings.discrete_match_decimal_places
    review_id = review_id or uuid.uuid4().hex[:12]

    token = review_id_ctx.set(review_id)
    try:
        review = _derive(snapshot, review_id, decimal_places)
    except (GuardrailError, ValidationError) as e:
        logger.error(
            "Guardrail derivation failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise
    finally:
        review_id_ctx.reset(token)
    return review


def _derive(
    snapshot: TherapySettingsSnapshot, review_id: str, decimal_places: int
) -> GuardrailReview:
    suspend_threshold = snapshot.suspend_threshold_value()
    schedule = snapshot.correction_range_schedule_value()

    guardrails: dict[GuardrailParameter, Guardrail] = dict(STATIC_GUARDRAILS)

    if schedule is not None:
        schedule_range = schedule.schedule_range()
        for preset, parameter in _OVERRIDE_PARAMETERS.items():
            guardrails[parameter] = correction_range_override(
                preset, schedule_range, suspend_threshold
            )

    guardrails[GuardrailParameter.basal_rate] = basal_rate(
        snapshot.supported_basal_rates
    )
    guardrails[GuardrailParameter.maximum_basal_rate] = maximum_basal_rate(
        snapshot.supported_basal_rates,
        scheduled_basal_range=snapshot.scheduled_basal_range(),
        lowest_carb_ratio=snapshot.lowest_carb_ratio(),
        decimal_places=decimal_places,
    )
    guardrails[GuardrailParameter.maximum_bolus] = maximum_bolus(
        snapshot.supported_bolus_volumes
    )

    review = GuardrailReview(
        review_id=review_id,
        guardrails=guardrails,
        max_suspend_threshold=max_suspend_threshold_value(
            schedule,
            snapshot.pre_meal_target_range_value(),
            snapshot.workout_target_range_value(),
        ),
        min_correction_range=min_correction_range_value(suspend_threshold),
    )

    logger.info(
        "Derived therapy setting guardrails",
        parameters=sorted(str(p) for p in guardrails),
        max_suspend_threshold=str(review.max_suspend_threshold),
        min_correction_range=str(review.min_correction_range),
    )
    return review
