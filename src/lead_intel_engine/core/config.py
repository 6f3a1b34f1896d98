"""Scoring model configuration: dimension weights, tier tables and conversion multipliers."""

import json
import logging
import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Any

logger = logging.getLogger(__name__)


DIMENSIONS = ("profile", "behavior", "engagement", "urgency", "company", "project")


class ConversionFactor(str, Enum):
    """Tags that move the conversion probability up or down."""

    # Company size
    COMPANY_SIZE_LARGE = "company_size_large"
    COMPANY_SIZE_MEDIUM = "company_size_medium"
    COMPANY_SIZE_SMALL = "company_size_small"

    # Industry
    INDUSTRY_OIL_GAS = "industry_oil_gas"
    INDUSTRY_CONSTRUCTION = "industry_construction"
    INDUSTRY_MANUFACTURING = "industry_manufacturing"
    INDUSTRY_MINING = "industry_mining"
    INDUSTRY_UTILITIES = "industry_utilities"
    INDUSTRY_GOVERNMENT = "industry_government"
    INDUSTRY_TRANSPORTATION = "industry_transportation"
    INDUSTRY_OTHER = "industry_other"

    # Budget
    BUDGET_OVER_1M = "budget_over_1m"
    BUDGET_500K_1M = "budget_500k_1m"
    BUDGET_100K_500K = "budget_100k_500k"
    BUDGET_50K_100K = "budget_50k_100k"
    BUDGET_10K_50K = "budget_10k_50k"
    BUDGET_UNDER_10K = "budget_under_10k"

    # Decision authority
    AUTHORITY_DECISION_MAKER = "authority_decision_maker"
    AUTHORITY_INFLUENCER = "authority_influencer"
    AUTHORITY_END_USER = "authority_end_user"
    AUTHORITY_GATEKEEPER = "authority_gatekeeper"

    # Urgency
    URGENCY_IMMEDIATE = "urgency_immediate"
    URGENCY_1_2_WEEKS = "urgency_1-2_weeks"
    URGENCY_PLANNING = "urgency_planning"

    # Project timeline
    TIMELINE_IMMEDIATE = "timeline_immediate"
    TIMELINE_WITHIN_MONTH = "timeline_within_month"
    TIMELINE_WITHIN_QUARTER = "timeline_within_quarter"
    TIMELINE_WITHIN_YEAR = "timeline_within_year"
    TIMELINE_PLANNING_PHASE = "timeline_planning_phase"

    # Behavior
    HIGH_ENGAGEMENT = "high_engagement"
    MEDIUM_ENGAGEMENT = "medium_engagement"
    LOW_ENGAGEMENT = "low_engagement"
    MULTIPLE_PAGES = "multiple_pages"
    LONG_SESSION = "long_session"
    RETURN_VISITOR = "return_visitor"
    FORM_COMPLETION = "form_completion"
    DOCUMENT_DOWNLOAD = "document_download"


DEFAULT_CONVERSION_MULTIPLIERS: Dict[ConversionFactor, float] = {
    ConversionFactor.COMPANY_SIZE_LARGE: 1.5,
    ConversionFactor.COMPANY_SIZE_MEDIUM: 1.2,
    ConversionFactor.COMPANY_SIZE_SMALL: 1.0,

    ConversionFactor.INDUSTRY_OIL_GAS: 1.8,
    ConversionFactor.INDUSTRY_CONSTRUCTION: 1.6,
    ConversionFactor.INDUSTRY_MANUFACTURING: 1.4,
    ConversionFactor.INDUSTRY_MINING: 1.3,
    ConversionFactor.INDUSTRY_UTILITIES: 1.2,
    ConversionFactor.INDUSTRY_GOVERNMENT: 1.1,
    ConversionFactor.INDUSTRY_TRANSPORTATION: 1.0,
    ConversionFactor.INDUSTRY_OTHER: 1.0,

    ConversionFactor.BUDGET_OVER_1M: 2.0,
    ConversionFactor.BUDGET_500K_1M: 1.8,
    ConversionFactor.BUDGET_100K_500K: 1.5,
    ConversionFactor.BUDGET_50K_100K: 1.2,
    ConversionFactor.BUDGET_10K_50K: 1.0,
    ConversionFactor.BUDGET_UNDER_10K: 0.8,

    ConversionFactor.AUTHORITY_DECISION_MAKER: 1.8,
    ConversionFactor.AUTHORITY_INFLUENCER: 1.4,
    ConversionFactor.AUTHORITY_END_USER: 1.1,
    ConversionFactor.AUTHORITY_GATEKEEPER: 0.9,

    ConversionFactor.URGENCY_IMMEDIATE: 2.0,
    ConversionFactor.URGENCY_1_2_WEEKS: 1.5,
    ConversionFactor.URGENCY_PLANNING: 1.0,

    ConversionFactor.TIMELINE_IMMEDIATE: 2.0,
    ConversionFactor.TIMELINE_WITHIN_MONTH: 1.6,
    ConversionFactor.TIMELINE_WITHIN_QUARTER: 1.3,
    ConversionFactor.TIMELINE_WITHIN_YEAR: 1.1,
    ConversionFactor.TIMELINE_PLANNING_PHASE: 0.9,

    ConversionFactor.HIGH_ENGAGEMENT: 1.5,
    ConversionFactor.MEDIUM_ENGAGEMENT: 1.2,
    ConversionFactor.LOW_ENGAGEMENT: 1.0,
    ConversionFactor.MULTIPLE_PAGES: 1.3,
    ConversionFactor.LONG_SESSION: 1.4,
    ConversionFactor.RETURN_VISITOR: 1.6,
    ConversionFactor.FORM_COMPLETION: 1.8,
    ConversionFactor.DOCUMENT_DOWNLOAD: 1.5,
}


@dataclass(frozen=True)
class ScoringWeights:
    """Share of each dimension in the total score. Must sum to 1.0."""

    profile: float = 0.25
    behavior: float = 0.20
    engagement: float = 0.15
    urgency: float = 0.15
    company: float = 0.15
    project: float = 0.10

    def as_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in DIMENSIONS}

    @property
    def total(self) -> float:
        return sum(self.as_dict().values())


@dataclass(frozen=True)
class ScoringThresholds:
    """Score cut-offs for lead temperature and priority."""

    hot: int = 80
    warm: int = 50
    cold: int = 20


@dataclass(frozen=True)
class ScoringModel:
    """Immutable parameter set shared by the scorer, predictor and scheduler."""

    version: str = "1.0.0"
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    thresholds: ScoringThresholds = field(default_factory=ScoringThresholds)
    conversion_multipliers: Dict[ConversionFactor, float] = field(
        default_factory=lambda: dict(DEFAULT_CONVERSION_MULTIPLIERS)
    )

    # Profile
    personal_email_domains: frozenset = frozenset({
        "gmail.com", "yahoo.com", "hotmail.com", "outlook.com", "icloud.com",
        "aol.com", "live.com", "msn.com", "ymail.com", "mail.com",
    })
    authority_scores: Dict[str, int] = field(default_factory=lambda: {
        "decision_maker": 25,
        "influencer": 20,
        "end_user": 15,
        "gatekeeper": 10,
    })

    # Behavior
    device_scores: Dict[str, int] = field(default_factory=lambda: {
        "desktop": 15,
        "tablet": 10,
        "mobile": 5,
    })

    # Urgency
    urgency_scores: Dict[str, int] = field(default_factory=lambda: {
        "immediate": 50,
        "1-2_weeks": 30,
        "planning": 15,
    })
    timeline_scores: Dict[str, int] = field(default_factory=lambda: {
        "immediate": 25,
        "within_month": 20,
        "within_quarter": 15,
        "within_year": 10,
        "planning_phase": 5,
    })

    # Company
    company_size_scores: Dict[str, int] = field(default_factory=lambda: {
        "large": 40,
        "medium": 25,
        "small": 15,
    })
    industry_scores: Dict[str, int] = field(default_factory=lambda: {
        "oil_gas": 30,
        "construction": 25,
        "manufacturing": 20,
        "mining": 18,
        "utilities": 15,
        "government": 12,
        "transportation": 10,
        "other": 5,
    })

    # Project
    budget_scores: Dict[str, int] = field(default_factory=lambda: {
        "over_1m": 50,
        "500k_1m": 40,
        "100k_500k": 30,
        "50k_100k": 20,
        "10k_50k": 15,
        "under_10k": 10,
    })

    # Deal value estimation
    default_deal_value: float = 50000
    budget_deal_values: Dict[str, float] = field(default_factory=lambda: {
        "over_1m": 1500000,
        "500k_1m": 750000,
        "100k_500k": 300000,
        "50k_100k": 75000,
        "10k_50k": 30000,
        "under_10k": 7500,
    })
    company_size_value_factors: Dict[str, float] = field(default_factory=lambda: {
        "large": 1.5,
        "medium": 1.2,
    })
    industry_value_factors: Dict[str, float] = field(default_factory=lambda: {
        "oil_gas": 2.0,
        "construction": 1.5,
        "manufacturing": 1.3,
    })

    def __post_init__(self):
        if not math.isclose(self.weights.total, 1.0, abs_tol=1e-6):
            raise ValueError(
                f"Dimension weights must sum to 1.0, got {self.weights.total:.4f}"
            )
        missing = [f.value for f in ConversionFactor if f not in self.conversion_multipliers]
        if missing:
            raise ValueError(f"No conversion multiplier configured for: {', '.join(missing)}")

    def multiplier(self, factor: ConversionFactor) -> float:
        return self.conversion_multipliers[factor]


class ScoringModelManager:
    """Load, persist and adjust the scoring model."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize model manager."""
        self.config_path = config_path or Path.home() / ".lead-intel-engine" / "scoring_model.json"
        self.model = self._load_model()
        self.updated_at: Optional[datetime] = None

    def _load_model(self) -> ScoringModel:
        """Load the model from file, falling back to defaults."""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                return model_from_dict(data)
            except Exception as e:
                logger.error(f"Error loading scoring model from {self.config_path}: {e}")

        return ScoringModel()

    def save_model(self):
        """Save the model to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.updated_at = datetime.now()
        data = model_to_dict(self.model)
        data["updated_at"] = self.updated_at.isoformat()
        with open(self.config_path, 'w') as f:
            json.dump(data, f, indent=2)

    def update_weights(self, **weights: float):
        """Replace one or more dimension weights. The result must still sum to 1.0."""
        new_weights = replace(self.model.weights, **weights)
        self.model = replace(self.model, weights=new_weights)
        self.save_model()

    def update_thresholds(self, hot: int, warm: int, cold: int):
        """Update temperature thresholds."""
        self.model = replace(self.model, thresholds=ScoringThresholds(hot=hot, warm=warm, cold=cold))
        self.save_model()

    def set_conversion_multiplier(self, factor: ConversionFactor, multiplier: float):
        """Set multiplier for a conversion factor."""
        multipliers = dict(self.model.conversion_multipliers)
        multipliers[factor] = multiplier
        self.model = replace(self.model, conversion_multipliers=multipliers)
        self.save_model()


def model_to_dict(model: ScoringModel) -> Dict[str, Any]:
    """Serializable form of the tunable parts of a model."""
    return {
        "version": model.version,
        "weights": model.weights.as_dict(),
        "thresholds": {
            "hot": model.thresholds.hot,
            "warm": model.thresholds.warm,
            "cold": model.thresholds.cold,
        },
        "conversion_multipliers": {
            factor.value: value for factor, value in model.conversion_multipliers.items()
        },
    }


def model_from_dict(data: Dict[str, Any]) -> ScoringModel:
    """Build a model from its serialized form. Omitted sections keep defaults."""
    if not isinstance(data, dict):
        raise ValueError(f"Scoring model must be a JSON object, got {type(data).__name__}")

    multipliers = dict(DEFAULT_CONVERSION_MULTIPLIERS)
    for key, value in data.get("conversion_multipliers", {}).items():
        multipliers[ConversionFactor(key)] = float(value)

    return ScoringModel(
        version=data.get("version", "1.0.0"),
        weights=ScoringWeights(**data.get("weights", {})),
        thresholds=ScoringThresholds(**data.get("thresholds", {})),
        conversion_multipliers=multipliers,
    )
