"""Follow-up actions, schedules and the routing decision they are built from."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, List, Any

from ..core.models import LeadPriority


class ActionType(str, Enum):
    """Kind of outreach step."""
    EMAIL = "email"
    PHONE_CALL = "phone_call"
    WHATSAPP = "whatsapp"
    MEETING = "meeting"
    PROPOSAL = "proposal"
    REMINDER = "reminder"


class ActionStatus(str, Enum):
    """Lifecycle of a follow-up action. Everything but PENDING is terminal."""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self is not ActionStatus.PENDING


class ConversionStatus(str, Enum):
    """Where a lead stands in the sales outcome."""
    ACTIVE = "active"
    NURTURING = "nurturing"
    CONVERTED = "converted"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self in (ConversionStatus.CONVERTED, ConversionStatus.LOST)


# Contact-generating action types that stamp last_contact_at on success
CONTACT_ACTION_TYPES = (ActionType.EMAIL, ActionType.PHONE_CALL)


@dataclass
class RoutingDecision:
    """Assignment of a lead to a salesperson, produced by the routing layer."""
    priority: LeadPriority = LeadPriority.MEDIUM
    assigned_to: Optional[str] = None
    team_name: Optional[str] = None
    estimated_response_time: int = 0  # minutes
    reasoning: List[str] = field(default_factory=list)


@dataclass
class FollowUpAction:
    """One scheduled outreach step for a lead."""
    id: str
    lead_id: str
    type: ActionType
    scheduled_at: datetime
    priority: LeadPriority
    assigned_to: str
    status: ActionStatus = ActionStatus.PENDING
    template: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def is_automated(self) -> bool:
        return bool(self.metadata.get('automated'))

    @property
    def sort_key(self):
        """Priority rank first, then scheduled time."""
        return (self.priority.rank, self.scheduled_at)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'lead_id': self.lead_id,
            'type': self.type.value,
            'scheduled_at': self.scheduled_at.isoformat(),
            'status': self.status.value,
            'priority': self.priority.value,
            'assigned_to': self.assigned_to,
            'template': self.template,
            'metadata': self.metadata,
            'created_at': self.created_at.isoformat(),
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
        }


@dataclass
class FollowUpSchedule:
    """All follow-up actions for one lead."""
    lead_id: str
    actions: List[FollowUpAction] = field(default_factory=list)
    sequence_id: Optional[str] = None
    next_action: Optional[FollowUpAction] = None
    last_contact_at: Optional[datetime] = None
    response_received: bool = False
    conversion_status: ConversionStatus = ConversionStatus.ACTIVE

    def refresh_next_action(self):
        """Point next_action at the first pending action, if any."""
        self.next_action = next(
            (a for a in self.actions if a.status == ActionStatus.PENDING),
            None
        )

    def pending_actions(self) -> List[FollowUpAction]:
        return [a for a in self.actions if a.status == ActionStatus.PENDING]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'lead_id': self.lead_id,
            'sequence_id': self.sequence_id,
            'actions': [a.to_dict() for a in self.actions],
            'next_action_id': self.next_action.id if self.next_action else None,
            'last_contact_at': self.last_contact_at.isoformat() if self.last_contact_at else None,
            'response_received': self.response_received,
            'conversion_status': self.conversion_status.value,
        }


@dataclass(frozen=True)
class FollowUpStatistics:
    """Aggregate figures for dashboards."""
    total_schedules: int
    active_schedules: int
    pending_actions: int
    completed_actions: int
    conversion_rate: float
    average_response_time_hours: float
