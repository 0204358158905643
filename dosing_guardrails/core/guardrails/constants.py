"""Guardrail clinical constants.

All clinically significant values are defined here with documented
rationale. Glucose values are in mg/dL, rates in U/hr, volumes in U.
These are the unconstrained policy values; derived guardrails narrow
them using the user's other settings and the pump's capabilities.
"""

from typing import Final

# Suspend threshold: below this glucose level delivery is halted.
SUSPEND_THRESHOLD_ABSOLUTE_MGDL: Final[tuple[float, float]] = (67.0, 110.0)
SUSPEND_THRESHOLD_RECOMMENDED_MGDL: Final[tuple[float, float]] = (74.0, 80.0)
SUSPEND_THRESHOLD_SUGGESTION_MGDL: Final[float] = 80.0

# Correction range: glucose target the dosing algorithm aims for.
CORRECTION_RANGE_ABSOLUTE_MGDL: Final[tuple[float, float]] = (87.0, 180.0)
CORRECTION_RANGE_RECOMMENDED_MGDL: Final[tuple[float, float]] = (101.0, 115.0)
CORRECTION_RANGE_SUGGESTION_MGDL: Final[float] = 100.0

# Workout override runs glucose higher on purpose, so its envelope
# reaches 250 mg/dL before the suspend threshold floor is applied.
WORKOUT_RANGE_ABSOLUTE_MGDL: Final[tuple[float, float]] = (85.0, 250.0)
WORKOUT_RANGE_RECOMMENDED_MGDL: Final[tuple[float, float]] = (101.0, 180.0)

# Pre-meal override never targets above 130 mg/dL.
PRE_MEAL_RANGE_MAXIMUM_MGDL: Final[float] = 130.0

# Insulin sensitivity (mg/dL per U).
INSULIN_SENSITIVITY_ABSOLUTE: Final[tuple[float, float]] = (10.0, 500.0)
INSULIN_SENSITIVITY_RECOMMENDED: Final[tuple[float, float]] = (16.0, 399.0)
INSULIN_SENSITIVITY_SUGGESTION: Final[float] = 50.0

# Carb ratio (g per U).
CARB_RATIO_ABSOLUTE: Final[tuple[float, float]] = (2.0, 150.0)
CARB_RATIO_RECOMMENDED: Final[tuple[float, float]] = (4.0, 28.0)
CARB_RATIO_SUGGESTION: Final[float] = 15.0

# Scheduled basal rate envelope (U/hr) applied to the pump's supported rates.
BASAL_RATE_ABSOLUTE_UNITS_PER_HOUR: Final[tuple[float, float]] = (0.05, 30.0)
BASAL_RATE_SUGGESTION_UNITS_PER_HOUR: Final[float] = 0.0

# Maximum basal rate: 70 U is the daily-maximum proxy divided by the most
# aggressive (lowest) carb ratio to bound the basal ceiling.
MAXIMUM_BASAL_RATE_DAILY_UNITS: Final[float] = 70.0
# Recommended max basal scales with the highest scheduled basal rate.
MAXIMUM_BASAL_RATE_LOW_SCALE_FACTOR: Final[float] = 2.1
MAXIMUM_BASAL_RATE_HIGH_SCALE_FACTOR: Final[float] = 6.4
MAXIMUM_BASAL_RATE_SUGGESTION_UNITS_PER_HOUR: Final[float] = 3.0

# Maximum bolus (U): 30 U is the hard ceiling, 20 U the warning line.
MAXIMUM_BOLUS_THRESHOLD_UNITS: Final[float] = 30.0
MAXIMUM_BOLUS_WARNING_THRESHOLD_UNITS: Final[float] = 20.0
MAXIMUM_BOLUS_SUGGESTION_UNITS: Final[float] = 5.0

# Decimal places used when snapping derived rates onto supported values.
DEFAULT_DECIMAL_PLACES: Final[int] = 3
