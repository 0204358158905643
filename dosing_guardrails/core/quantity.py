"""Unit-aware quantities and closed ranges.

A minimal quantity model for the clinical units the guardrails are
expressed in. Quantities are comparable only within one physical
dimension; glucose concentrations convert between mg/dL and mmol/L.
"""

import math
from dataclasses import dataclass
from enum import StrEnum
from functools import total_ordering
from typing import Final, Self

from dosing_guardrails.core.exceptions import EmptyRangeError, IncompatibleUnitsError

# mg/dL per mmol/L for glucose (molar mass of glucose / 10).
MGDL_PER_MMOLL: Final[float] = 18.0182

# Tolerance used for quantity equality after conversion.
_REL_TOLERANCE: Final[float] = 1e-9
_ABS_TOLERANCE: Final[float] = 1e-9


class Dimension(StrEnum):
    """Physical dimension a unit measures."""

    glucose_concentration = "glucose_concentration"
    insulin_sensitivity = "insulin_sensitivity"
    carb_ratio = "carb_ratio"
    insulin_rate = "insulin_rate"
    insulin = "insulin"


class Unit(StrEnum):
    """Units used by the dosing parameters."""

    milligrams_per_deciliter = "mg/dL"
    millimoles_per_liter = "mmol/L"
    milligrams_per_deciliter_per_unit = "mg/dL/U"
    millimoles_per_liter_per_unit = "mmol/L/U"
    grams_per_unit = "g/U"
    international_units_per_hour = "U/hr"
    international_unit = "U"

    @property
    def dimension(self) -> Dimension:
        return _UNIT_DIMENSIONS[self]

    @property
    def canonical_factor(self) -> float:
        """Multiplier converting this unit to its dimension's canonical unit."""
        return _CANONICAL_FACTORS[self]


_UNIT_DIMENSIONS: Final[dict[Unit, Dimension]] = {
    Unit.milligrams_per_deciliter: Dimension.glucose_concentration,
    Unit.millimoles_per_liter: Dimension.glucose_concentration,
    Unit.milligrams_per_deciliter_per_unit: Dimension.insulin_sensitivity,
    Unit.millimoles_per_liter_per_unit: Dimension.insulin_sensitivity,
    Unit.grams_per_unit: Dimension.carb_ratio,
    Unit.international_units_per_hour: Dimension.insulin_rate,
    Unit.international_unit: Dimension.insulin,
}

_CANONICAL_FACTORS: Final[dict[Unit, float]] = {
    Unit.milligrams_per_deciliter: 1.0,
    Unit.millimoles_per_liter: MGDL_PER_MMOLL,
    Unit.milligrams_per_deciliter_per_unit: 1.0,
    Unit.millimoles_per_liter_per_unit: MGDL_PER_MMOLL,
    Unit.grams_per_unit: 1.0,
    Unit.international_units_per_hour: 1.0,
    Unit.international_unit: 1.0,
}


@total_ordering
@dataclass(frozen=True, eq=False)
class Quantity:
    """An immutable (unit, value) pair.

    Ordering between quantities of different dimensions raises
    IncompatibleUnitsError. Equality is tolerance-based on the value
    converted to the dimension's canonical unit.
    """

    unit: Unit
    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "unit", Unit(self.unit))
        object.__setattr__(self, "value", float(self.value))

    @property
    def dimension(self) -> Dimension:
        return self.unit.dimension

    def value_in(self, unit: Unit | str) -> float:
        """Return the numeric value expressed in ``unit``."""
        target = Unit(unit)
        if target.dimension != self.dimension:
            msg = f"Cannot convert {self.unit} to {target}"
            raise IncompatibleUnitsError(msg)
        if target == self.unit:
            return self.value
        return self.value * self.unit.canonical_factor / target.canonical_factor

    def to(self, unit: Unit | str) -> "Quantity":
        return Quantity(Unit(unit), self.value_in(unit))

    def _canonical_against(self, other: "Quantity") -> tuple[float, float]:
        if other.dimension != self.dimension:
            msg = f"Cannot compare {self.unit} with {other.unit}"
            raise IncompatibleUnitsError(msg)
        return (
            self.value * self.unit.canonical_factor,
            other.value * other.unit.canonical_factor,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        if other.dimension != self.dimension:
            return False
        mine, theirs = self._canonical_against(other)
        return math.isclose(
            mine, theirs, rel_tol=_REL_TOLERANCE, abs_tol=_ABS_TOLERANCE
        )

    def __lt__(self, other: "Quantity") -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        mine, theirs = self._canonical_against(other)
        return mine < theirs and not self == other

    def __hash__(self) -> int:
        return hash((self.dimension, round(self.value * self.unit.canonical_factor, 6)))

    def __str__(self) -> str:
        return f"{self.value:g} {self.unit}"


@dataclass(frozen=True)
class QuantityRange:
    """Inclusive range ``lower...upper`` over quantities of one dimension."""

    lower: Quantity
    upper: Quantity

    def __post_init__(self) -> None:
        if self.upper < self.lower:
            msg = f"Range lower bound {self.lower} exceeds upper bound {self.upper}"
            raise EmptyRangeError(msg)

    @classmethod
    def from_values(cls, lower: float, upper: float, unit: Unit | str) -> Self:
        return cls(Quantity(Unit(unit), lower), Quantity(Unit(unit), upper))

    @property
    def unit(self) -> Unit:
        return self.lower.unit

    @property
    def dimension(self) -> Dimension:
        return self.lower.dimension

    def contains(self, value: Quantity) -> bool:
        return self.lower <= value <= self.upper

    def __contains__(self, value: object) -> bool:
        return isinstance(value, Quantity) and self.contains(value)

    def contains_range(self, other: "QuantityRange") -> bool:
        return self.lower <= other.lower and other.upper <= self.upper

    def clamped(self, to: "QuantityRange") -> "QuantityRange":
        """Clamp each bound of this range into ``to``.

        A range lying entirely outside ``to`` collapses onto the nearest
        bound of ``to``.
        """
        lower = min(max(self.lower, to.lower), to.upper)
        upper = max(min(self.upper, to.upper), to.lower)
        return QuantityRange(lower, upper)

    def in_unit(self, unit: Unit | str) -> "QuantityRange":
        return QuantityRange(self.lower.to(unit), self.upper.to(unit))

    def __str__(self) -> str:
        return f"{self.lower}...{self.upper}"
