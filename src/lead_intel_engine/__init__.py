"""Lead Intelligence Engine - lead scoring, conversion prediction and follow-up scheduling."""

__version__ = "1.0.0"

from .core import (
    LeadScorer,
    ConversionPredictor,
    ScoringModel,
    LeadAttributes,
    ScoreBreakdown,
    ConversionPrediction,
)
from .follow_up import FollowUpScheduler, RoutingDecision

__all__ = [
    "LeadScorer",
    "ConversionPredictor",
    "ScoringModel",
    "LeadAttributes",
    "ScoreBreakdown",
    "ConversionPrediction",
    "FollowUpScheduler",
    "RoutingDecision",
]
