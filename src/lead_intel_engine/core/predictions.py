"""Heuristic conversion predictions for scored leads."""

from dataclasses import dataclass, field
from typing import Optional, Dict, List, Any

from .config import ScoringModel, ConversionFactor
from .models import (
    LeadAttributes,
    ScoreBreakdown,
    CompanySize,
    Urgency,
    ProjectTimeline,
    enum_value,
)
from .scorer import js_round


# Fields checked for data completeness when estimating confidence
COMPLETENESS_FIELDS = (
    "name", "email", "phone", "company", "company_size", "industry_sector",
    "decision_authority", "budget_range", "project_timeline", "message",
)

URGENCY_BASE_DAYS = {
    Urgency.IMMEDIATE.value: 3,
    Urgency.ONE_TO_TWO_WEEKS.value: 10,
    Urgency.PLANNING.value: 30,
}
DEFAULT_BASE_DAYS = 30


@dataclass(frozen=True)
class ConversionFactors:
    """Factors that raised or lowered the estimate."""
    positive: List[ConversionFactor] = field(default_factory=list)
    negative: List[ConversionFactor] = field(default_factory=list)


@dataclass(frozen=True)
class ConversionPrediction:
    """Estimated probability, timing and value of a lead converting."""
    probability: float  # 0-1
    confidence: float   # 0-1
    time_to_conversion: int  # days
    estimated_value: int
    factors: ConversionFactors = field(default_factory=ConversionFactors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'probability': self.probability,
            'confidence': self.confidence,
            'time_to_conversion': self.time_to_conversion,
            'estimated_value': self.estimated_value,
            'factors': {
                'positive': [f.value for f in self.factors.positive],
                'negative': [f.value for f in self.factors.negative],
            },
        }


class ConversionPredictor:
    """Predicts conversion from lead attributes and a score breakdown."""

    def __init__(self, model: Optional[ScoringModel] = None):
        self.model = model or ScoringModel()

    def predict(self, lead: LeadAttributes, breakdown: ScoreBreakdown) -> ConversionPrediction:
        """Predict likelihood, timing and value of conversion."""
        factors = self.analyze_factors(lead, breakdown)

        probability = breakdown.total / 100
        for factor in factors.positive:
            probability *= self.model.multiplier(factor)
        for factor in factors.negative:
            probability /= self.model.multiplier(factor)

        # Many positive tags saturate at 1.0 here; the clamp is the only cap
        probability = max(0.0, min(1.0, probability))

        confidence = self._calculate_confidence(lead)

        return ConversionPrediction(
            probability=js_round(probability * 100) / 100,
            confidence=js_round(confidence * 100) / 100,
            time_to_conversion=self._estimate_time_to_conversion(lead, probability),
            estimated_value=self._estimate_deal_value(lead),
            factors=factors,
        )

    def analyze_factors(self, lead: LeadAttributes, breakdown: ScoreBreakdown) -> ConversionFactors:
        """Collect positive and negative conversion factors."""
        positive: List[ConversionFactor] = []
        negative: List[ConversionFactor] = []

        if lead.company_size == CompanySize.LARGE:
            positive.append(ConversionFactor.COMPANY_SIZE_LARGE)
        elif lead.company_size == CompanySize.MEDIUM:
            positive.append(ConversionFactor.COMPANY_SIZE_MEDIUM)

        if lead.industry_sector:
            try:
                positive.append(ConversionFactor(f"industry_{lead.industry_sector}"))
            except ValueError:
                positive.append(ConversionFactor.INDUSTRY_OTHER)

        # Values outside a known tier contribute no tag
        for prefix, value in (
            ("budget", lead.budget_range),
            ("authority", lead.decision_authority),
            ("urgency", lead.urgency),
            ("timeline", lead.project_timeline),
        ):
            factor = _factor_for(prefix, value)
            if factor:
                positive.append(factor)

        if breakdown.engagement > 70:
            positive.append(ConversionFactor.HIGH_ENGAGEMENT)
        elif breakdown.engagement > 40:
            positive.append(ConversionFactor.MEDIUM_ENGAGEMENT)
        else:
            negative.append(ConversionFactor.LOW_ENGAGEMENT)

        if lead.page_views_count and lead.page_views_count > 3:
            positive.append(ConversionFactor.MULTIPLE_PAGES)
        if lead.total_engagement_time and lead.total_engagement_time > 300:
            positive.append(ConversionFactor.LONG_SESSION)
        if breakdown.engagement > 60:
            positive.append(ConversionFactor.FORM_COMPLETION)
        if lead.documents_downloaded and lead.documents_downloaded > 0:
            positive.append(ConversionFactor.DOCUMENT_DOWNLOAD)

        return ConversionFactors(positive=positive, negative=negative)

    def _calculate_confidence(self, lead: LeadAttributes) -> float:
        """Confidence based on data completeness."""
        confidence = 0.5

        completed = sum(1 for name in COMPLETENESS_FIELDS if getattr(lead, name))
        confidence += (completed / len(COMPLETENESS_FIELDS)) * 0.3

        if lead.total_engagement_time:
            confidence += 0.1
        if lead.page_views_count and lead.page_views_count > 1:
            confidence += 0.1

        return max(0.0, min(1.0, confidence))

    def _estimate_time_to_conversion(self, lead: LeadAttributes, probability: float) -> int:
        """Days until conversion; higher probability converts faster."""
        base_days = URGENCY_BASE_DAYS.get(enum_value(lead.urgency), DEFAULT_BASE_DAYS)

        if lead.project_timeline == ProjectTimeline.IMMEDIATE:
            base_days = min(base_days, 7)
        elif lead.project_timeline == ProjectTimeline.WITHIN_MONTH:
            base_days = min(base_days, 30)
        elif lead.project_timeline == ProjectTimeline.WITHIN_QUARTER:
            base_days = min(base_days, 90)
        elif lead.project_timeline == ProjectTimeline.PLANNING_PHASE:
            base_days = max(base_days, 180)

        return max(1, js_round(base_days / (probability + 0.1)))

    def _estimate_deal_value(self, lead: LeadAttributes) -> int:
        """Expected deal value from budget, company size and industry."""
        value = self.model.default_deal_value
        if lead.budget_range:
            value = self.model.budget_deal_values.get(enum_value(lead.budget_range), value)

        if lead.company_size:
            value *= self.model.company_size_value_factors.get(enum_value(lead.company_size), 1.0)

        if lead.industry_sector:
            value *= self.model.industry_value_factors.get(lead.industry_sector, 1.0)

        return js_round(value)


def _factor_for(prefix: str, value) -> Optional[ConversionFactor]:
    if not value:
        return None
    try:
        return ConversionFactor(f"{prefix}_{enum_value(value)}")
    except ValueError:
        return None
