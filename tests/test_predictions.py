"""Tests for conversion predictions."""

import pytest

from lead_intel_engine.core.config import (
    ScoringModel,
    ConversionFactor,
    DEFAULT_CONVERSION_MULTIPLIERS,
)
from lead_intel_engine.core.models import (
    LeadAttributes,
    ScoreBreakdown,
    Urgency,
    CompanySize,
    BudgetRange,
    ProjectTimeline,
)
from lead_intel_engine.core.predictions import ConversionPredictor
from lead_intel_engine.core.scorer import LeadScorer


class TestConversionPredictor:
    """Tests for ConversionPredictor."""

    def setup_method(self):
        self.scorer = LeadScorer()
        self.predictor = ConversionPredictor()

    def predict(self, lead, predictor=None):
        predictor = predictor or self.predictor
        return predictor.predict(lead, self.scorer.score(lead))

    def test_high_value_lead_saturates(self, high_value_lead):
        """Stacked positive multipliers clamp at certainty."""
        prediction = self.predict(high_value_lead)
        assert prediction.probability == 1.0
        assert prediction.confidence == 1.0
        assert prediction.time_to_conversion == 3
        assert prediction.estimated_value == 4500000

    def test_high_value_lead_factors(self, high_value_lead):
        factors = self.predict(high_value_lead).factors
        assert ConversionFactor.COMPANY_SIZE_LARGE in factors.positive
        assert ConversionFactor.INDUSTRY_OIL_GAS in factors.positive
        assert ConversionFactor.BUDGET_OVER_1M in factors.positive
        assert ConversionFactor.HIGH_ENGAGEMENT in factors.positive
        assert ConversionFactor.DOCUMENT_DOWNLOAD in factors.positive
        assert factors.negative == []

    def test_bare_lead(self):
        prediction = self.predict(LeadAttributes())
        assert prediction.probability == 0.05
        assert prediction.confidence == 0.5
        assert prediction.time_to_conversion == 200
        assert prediction.estimated_value == 50000
        assert prediction.factors.negative == [ConversionFactor.LOW_ENGAGEMENT]

    def test_negative_factors_divide_after_positive_multiply(self):
        """Clamping happens only once, after every factor has been applied."""
        multipliers = dict(DEFAULT_CONVERSION_MULTIPLIERS)
        multipliers[ConversionFactor.LOW_ENGAGEMENT] = 2.0
        predictor = ConversionPredictor(ScoringModel(conversion_multipliers=multipliers))

        lead = LeadAttributes(
            budget_range=BudgetRange.OVER_1M,
            company_size=CompanySize.LARGE,
            industry_sector="oil_gas",
        )
        breakdown = self.scorer.score(lead)
        assert breakdown.total == 20

        # 0.20 * 1.5 * 1.8 * 2.0 = 1.08, then / 2.0
        prediction = predictor.predict(lead, breakdown)
        assert prediction.probability == 0.54

    def test_probability_bounds(self):
        leads = [
            LeadAttributes(),
            LeadAttributes(urgency=Urgency.PLANNING, project_timeline=ProjectTimeline.PLANNING_PHASE),
            LeadAttributes(budget_range=BudgetRange.UNDER_10K, decision_authority="gatekeeper"),
        ]
        for lead in leads:
            prediction = self.predict(lead)
            assert 0.0 <= prediction.probability <= 1.0
            assert 0.0 <= prediction.confidence <= 1.0
            assert prediction.time_to_conversion >= 1

    def test_probability_from_zero_score(self):
        prediction = self.predictor.predict(LeadAttributes(), ScoreBreakdown(total=0))
        assert prediction.probability == 0.0
        assert prediction.time_to_conversion == 300

    def test_confidence_from_completeness(self):
        lead = LeadAttributes(name="Ali", email="ali@example.com", total_engagement_time=60)
        assert self.predict(lead).confidence == 0.66

    def test_planning_phase_stretches_timeline(self):
        lead = LeadAttributes(urgency=Urgency.PLANNING, project_timeline=ProjectTimeline.PLANNING_PHASE)
        assert self.predict(lead).time_to_conversion >= 180

    def test_immediate_timeline_caps_base_days(self):
        breakdown = ScoreBreakdown(total=90)
        planning = LeadAttributes(urgency=Urgency.PLANNING)
        capped = LeadAttributes(urgency=Urgency.PLANNING, project_timeline=ProjectTimeline.IMMEDIATE)
        assert (
            self.predictor.predict(capped, breakdown).time_to_conversion
            < self.predictor.predict(planning, breakdown).time_to_conversion
        )

    def test_string_urgency_uses_base_days(self):
        breakdown = ScoreBreakdown(total=0)
        as_enum = self.predictor.predict(LeadAttributes(urgency=Urgency.IMMEDIATE), breakdown)
        as_str = self.predictor.predict(LeadAttributes(urgency="immediate"), breakdown)
        assert as_enum.time_to_conversion == as_str.time_to_conversion == 30

    def test_deal_value(self, standard_lead):
        # 75k budget, medium company, construction
        assert self.predict(standard_lead).estimated_value == 135000

    def test_unknown_industry_counts_as_other(self):
        factors = self.predict(LeadAttributes(industry_sector="aerospace")).factors
        assert ConversionFactor.INDUSTRY_OTHER in factors.positive

    def test_to_dict(self, high_value_lead):
        data = self.predict(high_value_lead).to_dict()
        assert data["estimated_value"] == 4500000
        assert "industry_oil_gas" in data["factors"]["positive"]

    @pytest.mark.parametrize("engagement,factor", [
        (80, ConversionFactor.HIGH_ENGAGEMENT),
        (50, ConversionFactor.MEDIUM_ENGAGEMENT),
        (40, ConversionFactor.LOW_ENGAGEMENT),
    ])
    def test_engagement_bands(self, engagement, factor):
        factors = self.predictor.analyze_factors(
            LeadAttributes(), ScoreBreakdown(total=50, engagement=engagement)
        )
        assert factor in factors.positive + factors.negative

    def test_probability_rounds_half_up(self):
        # 0.15 * 1.5 * 1.3 * 2.0 = 0.585
        lead = LeadAttributes(
            company_size=CompanySize.LARGE,
            industry_sector="mining",
            budget_range=BudgetRange.OVER_1M,
        )
        prediction = self.predictor.predict(lead, ScoreBreakdown(total=15))
        assert prediction.probability == 0.59

    def test_small_probability_rounds_half_up(self):
        lead = LeadAttributes(company_size=CompanySize.LARGE)
        assert self.predictor.predict(lead, ScoreBreakdown(total=1)).probability == 0.02

    def test_unknown_tier_values_add_no_factor(self):
        lead = LeadAttributes(
            budget_range="huge",
            decision_authority="intern",
            urgency="someday",
            project_timeline="never",
        )
        prediction = self.predictor.predict(lead, ScoreBreakdown(total=40))
        assert prediction.factors.positive == []
        assert prediction.factors.negative == [ConversionFactor.LOW_ENGAGEMENT]
        assert prediction.probability == 0.4
