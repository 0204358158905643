"""Guardrail models.

Pure data models for guardrail derivation. No I/O, no persistence.
A Guardrail validates its own containment invariant on construction,
so a derivation formula that produces inconsistent bounds fails
immediately instead of reaching a consumer.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Self

from pydantic import BaseModel, ConfigDict, model_validator

from dosing_guardrails.core.exceptions import (
    EmptyInputListError,
    GuardrailInvariantError,
)
from dosing_guardrails.core.guardrails.enums import SafetyClassification
from dosing_guardrails.core.quantity import Quantity, QuantityRange, Unit


class Guardrail(BaseModel):
    """Absolute and recommended bounds for one therapy setting.

    ``absolute_bounds`` is the hard device/physiological envelope and
    ``recommended_bounds`` the safer sub-range offered as the default
    zone. ``starting_suggestion`` is the value offered to a first-time
    user.
    """

    model_config = ConfigDict(frozen=True)

    absolute_bounds: QuantityRange
    recommended_bounds: QuantityRange
    unit: Unit
    starting_suggestion: Quantity | None = None

    @model_validator(mode="after")
    def check_containment(self) -> Self:
        """Enforce that recommended bounds lie within absolute bounds.

        The starting suggestion is not checked: the basal rate
        guardrail suggests 0 U/hr, below the lowest deliverable rate.
        """
        quantities = [
            self.absolute_bounds.lower,
            self.recommended_bounds.lower,
        ]
        if self.starting_suggestion is not None:
            quantities.append(self.starting_suggestion)
        for quantity in quantities:
            if quantity.dimension != self.unit.dimension:
                msg = f"{quantity} is not expressible in {self.unit}"
                raise GuardrailInvariantError(msg)

        if not self.absolute_bounds.contains_range(self.recommended_bounds):
            msg = (
                f"recommended bounds {self.recommended_bounds} are not within "
                f"absolute bounds {self.absolute_bounds}"
            )
            raise GuardrailInvariantError(msg)
        return self

    @classmethod
    def from_values(
        cls,
        absolute: tuple[float, float],
        recommended: tuple[float, float],
        unit: Unit | str,
        starting_suggestion: float | None = None,
    ) -> Self:
        """Build a guardrail from plain numbers expressed in ``unit``."""
        unit = Unit(unit)
        return cls(
            absolute_bounds=QuantityRange.from_values(*absolute, unit),
            recommended_bounds=QuantityRange.from_values(*recommended, unit),
            unit=unit,
            starting_suggestion=(
                Quantity(unit, starting_suggestion)
                if starting_suggestion is not None
                else None
            ),
        )

    @property
    def min_value(self) -> Quantity:
        return self.absolute_bounds.lower

    @property
    def max_value(self) -> Quantity:
        return self.absolute_bounds.upper

    def is_within_absolute(self, value: Quantity) -> bool:
        return self.absolute_bounds.contains(value)

    def is_within_recommended(self, value: Quantity) -> bool:
        return self.recommended_bounds.contains(value)

    def classify(self, value: Quantity) -> SafetyClassification:
        """Classify a chosen value against both bound sets."""
        if not self.is_within_absolute(value):
            return SafetyClassification.outside_absolute
        if value < self.recommended_bounds.lower:
            return SafetyClassification.below_recommended
        if value > self.recommended_bounds.upper:
            return SafetyClassification.above_recommended
        return SafetyClassification.within_recommended

    def all_values(self, stride: Quantity) -> list[Quantity]:
        """Every value from the absolute lower to upper bound, stepping by ``stride``.

        Values are expressed in the guardrail's unit. The upper bound is
        included only when it falls on a stride step.
        """
        step = stride.value_in(self.unit)
        if step <= 0:
            msg = f"stride must be positive, got {stride}"
            raise ValueError(msg)
        lower = self.absolute_bounds.lower.value_in(self.unit)
        upper = self.absolute_bounds.upper.value_in(self.unit)
        count = math.floor((upper - lower) / step + 1e-9) + 1
        return [Quantity(self.unit, round(lower + i * step, 10)) for i in range(count)]


@dataclass(frozen=True)
class GlucoseThreshold:
    """A glucose safety threshold, e.g. the configured suspend threshold."""

    quantity: Quantity

    @classmethod
    def from_value(
        cls, value: float, unit: Unit | str = Unit.milligrams_per_deciliter
    ) -> Self:
        return cls(Quantity(Unit(unit), value))


@dataclass(frozen=True)
class GlucoseRangeSchedule:
    """The correction ranges configured across a day.

    Only the aggregate envelope is used by guardrail derivation; entry
    timing is not modelled.
    """

    ranges: tuple[QuantityRange, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "ranges", tuple(self.ranges))
        if not self.ranges:
            msg = "glucose range schedule has no entries"
            raise EmptyInputListError(msg)

    @classmethod
    def from_values(
        cls,
        ranges: Iterable[tuple[float, float]],
        unit: Unit | str = Unit.milligrams_per_deciliter,
    ) -> Self:
        return cls(tuple(QuantityRange.from_values(lo, hi, unit) for lo, hi in ranges))

    def min_lower_bound(self) -> Quantity:
        return min(r.lower for r in self.ranges)

    def max_upper_bound(self) -> Quantity:
        return max(r.upper for r in self.ranges)

    def schedule_range(self) -> QuantityRange:
        """The envelope spanning every scheduled range."""
        return QuantityRange(self.min_lower_bound(), self.max_upper_bound())
