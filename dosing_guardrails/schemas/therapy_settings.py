"""Therapy settings review schemas."""

from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dosing_guardrails.core.exceptions import UnknownParameterError
from dosing_guardrails.core.guardrails.enums import (
    GuardrailParameter,
    SafetyClassification,
)
from dosing_guardrails.core.guardrails.models import (
    GlucoseRangeSchedule,
    GlucoseThreshold,
    Guardrail,
)
from dosing_guardrails.core.quantity import Dimension, Quantity, QuantityRange, Unit

BasalRate = Annotated[float, Field(ge=0)]
CarbRatio = Annotated[float, Field(gt=0)]


class TherapySettingsSnapshot(BaseModel):
    """A consistent snapshot of the settings that constrain one another.

    Glucose values are expressed in ``glucose_unit``; basal rates in U/hr,
    bolus volumes in U and carb ratios in g/U. Every field except the
    pump's supported value lists is optional -- a first-time user may
    not have configured anything yet.
    """

    model_config = ConfigDict(frozen=True)

    glucose_unit: Unit = Unit.milligrams_per_deciliter
    suspend_threshold: float | None = Field(
        default=None,
        gt=0,
        description="Configured suspend threshold.",
    )
    correction_range_schedule: list[tuple[float, float]] | None = Field(
        default=None,
        min_length=1,
        description="Correction range (lower, upper) of each schedule entry.",
    )
    workout_target_range: tuple[float, float] | None = None
    pre_meal_target_range: tuple[float, float] | None = None
    basal_rate_schedule: list[BasalRate] | None = Field(
        default=None,
        min_length=1,
        description="Scheduled basal rates (U/hr).",
    )
    carb_ratio_schedule: list[CarbRatio] | None = Field(
        default=None,
        min_length=1,
        description="Scheduled carb ratios (g/U).",
    )
    supported_basal_rates: list[float] = Field(
        min_length=1,
        description="Basal rates the pump supports (U/hr).",
    )
    supported_bolus_volumes: list[float] = Field(
        min_length=1,
        description="Bolus volumes the pump supports (U).",
    )

    @model_validator(mode="after")
    def validate_ranges(self) -> Self:
        """Validate the glucose unit and that every range is ordered."""
        if self.glucose_unit.dimension != Dimension.glucose_concentration:
            msg = (
                "glucose_unit must be a glucose concentration unit, "
                f"got {self.glucose_unit}"
            )
            raise ValueError(msg)

        ranges = list(self.correction_range_schedule or [])
        for candidate in (self.workout_target_range, self.pre_meal_target_range):
            if candidate is not None:
                ranges.append(candidate)
        for lower, upper in ranges:
            if lower > upper:
                msg = f"range lower bound {lower} exceeds upper bound {upper}"
                raise ValueError(msg)
        return self

    def suspend_threshold_value(self) -> GlucoseThreshold | None:
        if self.suspend_threshold is None:
            return None
        return GlucoseThreshold.from_value(self.suspend_threshold, self.glucose_unit)

    def correction_range_schedule_value(self) -> GlucoseRangeSchedule | None:
        if self.correction_range_schedule is None:
            return None
        return GlucoseRangeSchedule.from_values(
            self.correction_range_schedule, self.glucose_unit
        )

    def workout_target_range_value(self) -> QuantityRange | None:
        if self.workout_target_range is None:
            return None
        return QuantityRange.from_values(*self.workout_target_range, self.glucose_unit)

    def pre_meal_target_range_value(self) -> QuantityRange | None:
        if self.pre_meal_target_range is None:
            return None
        return QuantityRange.from_values(*self.pre_meal_target_range, self.glucose_unit)

    def scheduled_basal_range(self) -> tuple[float, float] | None:
        if not self.basal_rate_schedule:
            return None
        return min(self.basal_rate_schedule), max(self.basal_rate_schedule)

    def lowest_carb_ratio(self) -> float | None:
        if not self.carb_ratio_schedule:
            return None
        return min(self.carb_ratio_schedule)


class GuardrailReview(BaseModel):
    """Every guardrail derived from one settings snapshot."""

    model_config = ConfigDict(frozen=True)

    review_id: str
    guardrails: dict[GuardrailParameter, Guardrail]
    max_suspend_threshold: Quantity
    min_correction_range: Quantity

    def guardrail(self, parameter: GuardrailParameter | str) -> Guardrail:
        """Return the guardrail for ``parameter``.

        Raises:
            UnknownParameterError: The guardrail was not derived, e.g. an
                override when no correction range schedule is configured.
        """
        try:
            return self.guardrails[GuardrailParameter(parameter)]
        except (KeyError, ValueError) as e:
            msg = f"no guardrail derived for {parameter}"
            raise UnknownParameterError(msg) from e

    def classify(
        self, parameter: GuardrailParameter | str, value: Quantity
    ) -> SafetyClassification:
        return self.guardrail(parameter).classify(value)
