"""Pytest configuration and shared fixtures.

Pump capability lists mirror real devices: a 0.05 U/hr basal increment
up to 30 U/hr and a 0.05 U bolus increment up to 30 U.
"""

import os

import pytest

# Pin snapping precision BEFORE importing settings
os.environ["GUARDRAILS_DISCRETE_MATCH_DECIMAL_PLACES"] = "3"

from dosing_guardrails.core.guardrails.models import GlucoseRangeSchedule


@pytest.fixture
def supported_basal_rates() -> list[float]:
    """0.05 to 30 U/hr in 0.05 U/hr steps."""
    return [i / 20 for i in range(1, 601)]


@pytest.fixture
def supported_bolus_volumes() -> list[float]:
    """0.05 to 30 U in 0.05 U steps."""
    return [i / 20 for i in range(1, 601)]


@pytest.fixture
def correction_range_schedule() -> GlucoseRangeSchedule:
    return GlucoseRangeSchedule.from_values([(100.0, 110.0), (105.0, 120.0)])
