"""Tests for the scoring model and its persistence."""

import json

import pytest

from lead_intel_engine.core.config import (
    ScoringModel,
    ScoringModelManager,
    ScoringWeights,
    ScoringThresholds,
    ConversionFactor,
    DEFAULT_CONVERSION_MULTIPLIERS,
    model_to_dict,
    model_from_dict,
)


class TestScoringModel:
    """Validation of model parameters."""

    def test_default_weights_sum_to_one(self):
        assert ScoringModel().weights.total == pytest.approx(1.0)

    def test_rejects_weights_not_summing_to_one(self):
        with pytest.raises(ValueError, match="sum to 1.0"):
            ScoringModel(weights=ScoringWeights(profile=0.5))

    def test_rejects_incomplete_multipliers(self):
        multipliers = dict(DEFAULT_CONVERSION_MULTIPLIERS)
        del multipliers[ConversionFactor.RETURN_VISITOR]
        with pytest.raises(ValueError, match="return_visitor"):
            ScoringModel(conversion_multipliers=multipliers)

    def test_every_factor_has_a_default(self):
        assert set(DEFAULT_CONVERSION_MULTIPLIERS) == set(ConversionFactor)

    def test_round_trip_through_dict(self):
        model = ScoringModel(thresholds=ScoringThresholds(hot=85, warm=55, cold=25))
        restored = model_from_dict(json.loads(json.dumps(model_to_dict(model))))
        assert restored.thresholds == model.thresholds
        assert restored.weights == model.weights
        assert restored.conversion_multipliers == model.conversion_multipliers

    def test_rejects_non_object_payload(self):
        with pytest.raises(ValueError, match="JSON object"):
            model_from_dict([1, 2])

    def test_partial_dict_keeps_defaults(self):
        model = model_from_dict({"conversion_multipliers": {"high_engagement": 3.0}})
        assert model.multiplier(ConversionFactor.HIGH_ENGAGEMENT) == 3.0
        assert model.multiplier(ConversionFactor.LONG_SESSION) == 1.4
        assert model.thresholds.hot == 80


class TestScoringModelManager:
    """Tests for loading and saving the model."""

    @pytest.fixture
    def config_path(self, tmp_path):
        return tmp_path / "scoring_model.json"

    def test_missing_file_uses_defaults(self, config_path):
        manager = ScoringModelManager(config_path)
        assert manager.model == ScoringModel()
        assert not config_path.exists()

    def test_update_thresholds_persists(self, config_path):
        ScoringModelManager(config_path).update_thresholds(90, 60, 30)

        reloaded = ScoringModelManager(config_path)
        assert reloaded.model.thresholds == ScoringThresholds(hot=90, warm=60, cold=30)

    def test_update_weights_persists(self, config_path):
        manager = ScoringModelManager(config_path)
        manager.update_weights(profile=0.30, project=0.05)
        assert manager.updated_at is not None

        reloaded = ScoringModelManager(config_path)
        assert reloaded.model.weights.profile == 0.30
        assert reloaded.model.weights.project == 0.05

    def test_update_weights_rejects_bad_total(self, config_path):
        manager = ScoringModelManager(config_path)
        with pytest.raises(ValueError):
            manager.update_weights(profile=0.9)
        assert manager.model.weights.profile == 0.25

    def test_set_conversion_multiplier(self, config_path):
        ScoringModelManager(config_path).set_conversion_multiplier(
            ConversionFactor.BUDGET_OVER_1M, 2.5
        )
        data = json.loads(config_path.read_text())
        assert data["conversion_multipliers"]["budget_over_1m"] == 2.5
        assert "updated_at" in data

    def test_corrupt_file_falls_back_to_defaults(self, config_path, caplog):
        config_path.write_text("{not json")
        manager = ScoringModelManager(config_path)
        assert manager.model == ScoringModel()
        assert "Error loading scoring model" in caplog.text

    def test_non_object_file_falls_back_to_defaults(self, config_path, caplog):
        config_path.write_text("[1, 2]")
        manager = ScoringModelManager(config_path)
        assert manager.model == ScoringModel()
        assert "must be a JSON object" in caplog.text

    def test_invalid_weights_fall_back_to_defaults(self, config_path):
        config_path.write_text(json.dumps({"weights": {"profile": 0.9}}))
        assert ScoringModelManager(config_path).model.weights == ScoringWeights()
