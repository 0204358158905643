"""Tests for the settings review service and its schemas."""

import logging

import pytest
from pydantic import ValidationError

from dosing_guardrails.config import settings
from dosing_guardrails.core.exceptions import (
    EmptyInputListError,
    InvalidSettingError,
    UnknownParameterError,
)
from dosing_guardrails.core.guardrails.enums import (
    GuardrailParameter,
    SafetyClassification,
)
from dosing_guardrails.core.guardrails.policy import STATIC_GUARDRAILS
from dosing_guardrails.core.quantity import Quantity, QuantityRange, Unit
from dosing_guardrails.logging_config import review_id_ctx
from dosing_guardrails.schemas.therapy_settings import TherapySettingsSnapshot
from dosing_guardrails.services.guardrail_review import derive_guardrails

MGDL = Unit.milligrams_per_deciliter
UNITS_PER_HOUR = Unit.international_units_per_hour


@pytest.fixture
def snapshot(supported_basal_rates, supported_bolus_volumes) -> TherapySettingsSnapshot:
    return TherapySettingsSnapshot(
        suspend_threshold=75,
        correction_range_schedule=[(100, 110), (105, 120)],
        workout_target_range=(140, 160),
        pre_meal_target_range=(90, 100),
        basal_rate_schedule=[0.5, 1.0, 0.8],
        carb_ratio_schedule=[12, 10, 15],
        supported_basal_rates=supported_basal_rates,
        supported_bolus_volumes=supported_bolus_volumes,
    )


def _make_snapshot(**overrides) -> TherapySettingsSnapshot:
    defaults = {
        "supported_basal_rates": [i / 20 for i in range(1, 601)],
        "supported_bolus_volumes": [i / 20 for i in range(1, 601)],
    }
    defaults.update(overrides)
    return TherapySettingsSnapshot(**defaults)


# ---------------------------------------------------------------------------
# Snapshot schema
# ---------------------------------------------------------------------------


class TestTherapySettingsSnapshot:
    """Tests for snapshot validation and derived inputs."""

    def test_minimal_snapshot(self):
        """Only the pump capability lists are required."""
        snapshot = _make_snapshot()
        assert snapshot.suspend_threshold_value() is None
        assert snapshot.correction_range_schedule_value() is None
        assert snapshot.scheduled_basal_range() is None
        assert snapshot.lowest_carb_ratio() is None

    def test_derived_inputs(self, snapshot):
        """Accessors build typed values from the raw fields."""
        assert snapshot.suspend_threshold_value().quantity == Quantity(MGDL, 75)
        assert snapshot.correction_range_schedule_value().min_lower_bound() == Quantity(
            MGDL, 100
        )
        assert snapshot.workout_target_range_value() == QuantityRange.from_values(
            140, 160, MGDL
        )
        assert snapshot.scheduled_basal_range() == (0.5, 1.0)
        assert snapshot.lowest_carb_ratio() == 10

    def test_mmol_glucose_unit(self):
        """Glucose values keep the snapshot's mmol/L unit."""
        snapshot = _make_snapshot(
            glucose_unit="mmol/L",
            suspend_threshold=4.2,
            correction_range_schedule=[(5.5, 6.5)],
        )
        threshold = snapshot.suspend_threshold_value()
        assert threshold.quantity.unit is Unit.millimoles_per_liter

    def test_non_glucose_unit_rejected(self):
        """A non-glucose glucose_unit fails validation."""
        with pytest.raises(ValidationError, match="glucose concentration"):
            _make_snapshot(glucose_unit="U/hr")

    def test_reversed_range_rejected(self):
        """A target range with lower above upper fails validation."""
        with pytest.raises(ValidationError, match="exceeds upper bound"):
            _make_snapshot(pre_meal_target_range=(110, 90))

    def test_reversed_schedule_entry_rejected(self):
        """A reversed correction schedule entry fails validation."""
        with pytest.raises(ValidationError):
            _make_snapshot(correction_range_schedule=[(100, 110), (130, 120)])

    def test_empty_schedule_rejected(self):
        """An empty correction schedule fails validation."""
        with pytest.raises(ValidationError):
            _make_snapshot(correction_range_schedule=[])

    def test_empty_supported_rates_rejected(self):
        """An empty supported basal rate list fails validation."""
        with pytest.raises(ValidationError):
            _make_snapshot(supported_basal_rates=[])

    def test_non_positive_threshold_rejected(self):
        """A zero suspend threshold fails validation."""
        with pytest.raises(ValidationError):
            _make_snapshot(suspend_threshold=0)

    @pytest.mark.parametrize("carb_ratio", [0, -10.0])
    def test_non_positive_carb_ratio_rejected(self, carb_ratio):
        """Scheduled carb ratios must be positive."""
        with pytest.raises(ValidationError):
            _make_snapshot(carb_ratio_schedule=[12, carb_ratio])

    def test_negative_basal_rate_rejected(self):
        """Scheduled basal rates cannot be negative."""
        with pytest.raises(ValidationError):
            _make_snapshot(basal_rate_schedule=[0.5, -0.1])

    def test_zero_basal_rate_accepted(self):
        """A 0 U/hr scheduled basal rate is allowed."""
        snapshot = _make_snapshot(basal_rate_schedule=[0.0, 0.8])
        assert snapshot.scheduled_basal_range() == (0.0, 0.8)


# ---------------------------------------------------------------------------
# Review pass
# ---------------------------------------------------------------------------


class TestDeriveGuardrails:
    """Tests for the review pass."""

    def test_every_parameter_derived(self, snapshot):
        """A full snapshot yields a guardrail for every parameter."""
        review = derive_guardrails(snapshot)
        assert set(review.guardrails) == set(GuardrailParameter)

    def test_static_guardrails_unchanged(self, snapshot):
        """Static guardrails are passed through untouched."""
        review = derive_guardrails(snapshot)
        for parameter, guardrail in STATIC_GUARDRAILS.items():
            assert review.guardrail(parameter) == guardrail

    def test_cross_parameter_values(self, snapshot):
        """Suspend ceiling and correction floor come from the snapshot."""
        review = derive_guardrails(snapshot)
        # min of 110, schedule floor 100, pre-meal 90, workout 140
        assert review.max_suspend_threshold == Quantity(MGDL, 90)
        assert review.min_correction_range == Quantity(MGDL, 87)

    def test_overrides_use_schedule_envelope(self, snapshot):
        """Workout and pre-meal overrides use the schedule envelope."""
        review = derive_guardrails(snapshot)
        workout = review.guardrail(GuardrailParameter.workout_correction_range)
        pre_meal = review.guardrail(GuardrailParameter.pre_meal_correction_range)
        assert workout.absolute_bounds == QuantityRange.from_values(85, 250, MGDL)
        assert workout.recommended_bounds == QuantityRange.from_values(120, 180, MGDL)
        assert pre_meal.absolute_bounds == QuantityRange.from_values(75, 130, MGDL)
        assert pre_meal.recommended_bounds == QuantityRange.from_values(75, 100, MGDL)

    def test_maximum_basal_uses_schedule_and_carb_ratio(self, snapshot):
        """Maximum basal uses the scheduled rates and lowest carb ratio."""
        review = derive_guardrails(snapshot)
        guardrail = review.guardrail(GuardrailParameter.maximum_basal_rate)
        assert guardrail.absolute_bounds == QuantityRange.from_values(
            1.0, 7.0, UNITS_PER_HOUR
        )
        assert guardrail.recommended_bounds == QuantityRange.from_values(
            2.1, 6.4, UNITS_PER_HOUR
        )

    def test_overrides_absent_without_schedule(self):
        """No correction schedule means no override guardrails."""
        review = derive_guardrails(_make_snapshot())
        assert GuardrailParameter.workout_correction_range not in review.guardrails
        with pytest.raises(UnknownParameterError):
            review.guardrail(GuardrailParameter.pre_meal_correction_range)

    def test_classify(self, snapshot):
        """Review classifies values against the derived guardrail."""
        review = derive_guardrails(snapshot)
        assert (
            review.classify("maximum_bolus", Quantity(Unit.international_unit, 25))
            == SafetyClassification.above_recommended
        )
        assert (
            review.classify(
                GuardrailParameter.suspend_threshold, Quantity(MGDL, 60)
            )
            == SafetyClassification.outside_absolute
        )

    @pytest.mark.parametrize("decimal_places, expected_ceiling", [(2, 2.25), (3, 2.24)])
    def test_decimal_places_default_from_settings(
        self, monkeypatch, decimal_places, expected_ceiling
    ):
        """Snapping precision defaults to the configured setting."""
        monkeypatch.setattr(settings, "discrete_match_decimal_places", decimal_places)
        # 70 / 31.15 = 2.2472...
        snapshot = _make_snapshot(
            supported_basal_rates=[2.0, 2.24, 2.25],
            carb_ratio_schedule=[31.15],
        )
        review = derive_guardrails(snapshot)
        guardrail = review.guardrail(GuardrailParameter.maximum_basal_rate)
        ceiling = Quantity(UNITS_PER_HOUR, expected_ceiling)
        assert guardrail.absolute_bounds.upper == ceiling

    def test_explicit_decimal_places_override_settings(self, monkeypatch):
        """An explicit precision wins over settings."""
        monkeypatch.setattr(settings, "discrete_match_decimal_places", 3)
        snapshot = _make_snapshot(
            supported_basal_rates=[2.0, 2.24, 2.25],
            carb_ratio_schedule=[31.15],
        )
        review = derive_guardrails(snapshot, decimal_places=2)
        guardrail = review.guardrail(GuardrailParameter.maximum_basal_rate)
        assert guardrail.absolute_bounds.upper == Quantity(UNITS_PER_HOUR, 2.25)

    def test_review_id_passed_through(self, snapshot):
        """A caller-supplied review id is kept."""
        review = derive_guardrails(snapshot, review_id="review-1")
        assert review.review_id == "review-1"

    def test_review_id_generated(self, snapshot):
        """Each pass generates its own review id."""
        first = derive_guardrails(snapshot)
        second = derive_guardrails(snapshot)
        assert first.review_id != second.review_id

    def test_idempotent(self, snapshot):
        """Same snapshot and review id give equal reviews."""
        first = derive_guardrails(snapshot, review_id="same")
        second = derive_guardrails(snapshot, review_id="same")
        assert first == second

    def test_review_id_context_reset(self, snapshot):
        """The review id context is cleared after the pass."""
        derive_guardrails(snapshot, review_id="review-2")
        assert review_id_ctx.get() is None

    def test_logs_review(self, snapshot, caplog):
        """A successful pass logs one summary line."""
        with caplog.at_level(logging.INFO):
            derive_guardrails(snapshot, review_id="review-3")

        records = [
            r
            for r in caplog.records
            if r.getMessage() == "Derived therapy setting guardrails"
        ]
        assert len(records) == 1
        assert "maximum_bolus" in records[0].extra_fields["parameters"]

    def test_failure_logged_and_propagated(self, caplog):
        """Derivation errors are logged once and re-raised."""
        snapshot = _make_snapshot(supported_bolus_volumes=[35.0])

        with caplog.at_level(logging.ERROR):
            with pytest.raises(EmptyInputListError):
                derive_guardrails(snapshot, review_id="review-4")

        records = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(records) == 1
        assert records[0].extra_fields["error_type"] == "EmptyInputListError"
        assert review_id_ctx.get() is None

    def test_invalid_setting_logged_and_propagated(self, caplog):
        """A non-positive carb ratio reaching derivation is logged and re-raised."""
        # Bypass schema validation to reach the derivation-level check
        snapshot = TherapySettingsSnapshot.model_construct(
            carb_ratio_schedule=[0.0],
            supported_basal_rates=[0.05, 1.0, 5.0],
            supported_bolus_volumes=[0.5, 1.0, 25.0],
        )

        with caplog.at_level(logging.ERROR):
            with pytest.raises(InvalidSettingError):
                derive_guardrails(snapshot, review_id="review-5")

        records = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(records) == 1
        assert records[0].getMessage() == "Guardrail derivation failed"
        assert records[0].extra_fields["error_type"] == "InvalidSettingError"
