"""Core scoring and prediction engine for lead qualification."""

from .models import (
    LeadAttributes,
    ScoreBreakdown,
    FactorDetail,
    Urgency,
    CompanySize,
    BudgetRange,
    DecisionAuthority,
    ProjectTimeline,
    DeviceType,
    LeadPriority,
)
from .config import ScoringModel, ScoringWeights, ScoringThresholds, ScoringModelManager, ConversionFactor
from .scorer import LeadScorer
from .predictions import ConversionPredictor, ConversionPrediction, ConversionFactors

__all__ = [
    "LeadAttributes",
    "ScoreBreakdown",
    "FactorDetail",
    "Urgency",
    "CompanySize",
    "BudgetRange",
    "DecisionAuthority",
    "ProjectTimeline",
    "DeviceType",
    "LeadPriority",
    "ScoringModel",
    "ScoringWeights",
    "ScoringThresholds",
    "ScoringModelManager",
    "ConversionFactor",
    "LeadScorer",
    "ConversionPredictor",
    "ConversionPrediction",
    "ConversionFactors",
]
