"""Data models for inbound lead qualification."""

import logging
from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Optional, Dict, Any, Mapping, Type

logger = logging.getLogger(__name__)


class Urgency(str, Enum):
    """Urgency selected on the inquiry form."""

    IMMEDIATE = "immediate"
    ONE_TO_TWO_WEEKS = "1-2_weeks"
    PLANNING = "planning"


class CompanySize(str, Enum):
    """Company size bracket."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class BudgetRange(str, Enum):
    """Declared project budget."""

    UNDER_10K = "under_10k"
    FROM_10K_TO_50K = "10k_50k"
    FROM_50K_TO_100K = "50k_100k"
    FROM_100K_TO_500K = "100k_500k"
    FROM_500K_TO_1M = "500k_1m"
    OVER_1M = "over_1m"


class DecisionAuthority(str, Enum):
    """Role of the contact in the buying decision."""

    DECISION_MAKER = "decision_maker"
    INFLUENCER = "influencer"
    END_USER = "end_user"
    GATEKEEPER = "gatekeeper"


class ProjectTimeline(str, Enum):
    """When the project is expected to start."""

    IMMEDIATE = "immediate"
    WITHIN_MONTH = "within_month"
    WITHIN_QUARTER = "within_quarter"
    WITHIN_YEAR = "within_year"
    PLANNING_PHASE = "planning_phase"


class DeviceType(str, Enum):
    """Device the form was submitted from."""

    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"


class LeadPriority(str, Enum):
    """Handling priority for a lead or an action."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank, lower is more urgent."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    LeadPriority.CRITICAL: 0,
    LeadPriority.HIGH: 1,
    LeadPriority.MEDIUM: 2,
    LeadPriority.LOW: 3,
}


_ENUM_FIELDS: Dict[str, Type[Enum]] = {
    "urgency": Urgency,
    "company_size": CompanySize,
    "budget_range": BudgetRange,
    "decision_authority": DecisionAuthority,
    "project_timeline": ProjectTimeline,
    "device_type": DeviceType,
}


@dataclass(frozen=True)
class LeadAttributes:
    """A snapshot of an inbound lead: form fields plus browsing behavior."""

    id: Optional[str] = None

    # Contact info
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None

    # Firmographics
    company_size: Optional[CompanySize] = None
    industry_sector: Optional[str] = None

    # Deal
    budget_range: Optional[BudgetRange] = None
    decision_authority: Optional[DecisionAuthority] = None
    project_timeline: Optional[ProjectTimeline] = None
    quantity_estimate: Optional[str] = None
    product_category: Optional[str] = None

    # Behavior
    device_type: Optional[DeviceType] = None
    page_views_count: int = 0
    documents_downloaded: int = 0
    total_engagement_time: int = 0  # seconds
    referrer: Optional[str] = None
    message: Optional[str] = None

    urgency: Optional[Urgency] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeadAttributes":
        """Build a lead from a decoded form payload.

        Unknown keys are dropped. Categorical values outside the known set
        are treated as missing.
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}

        for key, value in data.items():
            if key not in known or value is None or value == "":
                continue

            enum_type = _ENUM_FIELDS.get(key)
            if enum_type is not None:
                try:
                    value = enum_type(value)
                except ValueError:
                    logger.warning(f"Ignoring unknown {key} value: {value!r}")
                    continue
            elif key in ("page_views_count", "documents_downloaded", "total_engagement_time"):
                try:
                    value = int(value)
                except (TypeError, ValueError):
                    logger.warning(f"Ignoring non-numeric {key} value: {value!r}")
                    continue
            elif key == "created_at" and isinstance(value, str):
                try:
                    value = datetime.fromisoformat(value)
                except ValueError:
                    logger.warning(f"Ignoring unparseable created_at: {value!r}")
                    continue
            elif key == "id":
                value = str(value)

            values[key] = value

        return cls(**values)


@dataclass(frozen=True)
class FactorDetail:
    """Justification for one scoring rule."""

    score: float
    weight: float
    reason: str


@dataclass(frozen=True)
class ScoreBreakdown:
    """Six-dimension weighted quality score of a lead."""

    total: int
    profile: float = 0
    behavior: float = 0
    engagement: float = 0
    urgency: float = 0
    company: float = 0
    project: float = 0
    details: Mapping[str, FactorDetail] = field(default_factory=dict)

    def __post_init__(self):
        # Factor details are read-only once built
        object.__setattr__(self, "details", MappingProxyType(dict(self.details)))

    def to_dict(self) -> Dict[str, Any]:
        """Plain representation for persistence."""
        return {
            "total": self.total,
            "profile": self.profile,
            "behavior": self.behavior,
            "engagement": self.engagement,
            "urgency": self.urgency,
            "company": self.company,
            "project": self.project,
            "details": {
                key: {"score": d.score, "weight": d.weight, "reason": d.reason}
                for key, d in self.details.items()
            },
        }


def enum_value(attr) -> Optional[str]:
    """Plain string for an enum or string attribute."""
    if attr is None:
        return None
    return getattr(attr, "value", attr)
