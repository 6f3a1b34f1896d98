"""Follow-up sequences and trigger-based sequence selection."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from ..core.models import LeadAttributes, ScoreBreakdown, LeadPriority
from .models import ActionType
from .templates import ScoreRange, attribute_allowed

logger = logging.getLogger(__name__)

AUTO_ASSIGN = "auto-assign"


@dataclass(frozen=True)
class SequenceTrigger:
    """Conditions a lead must meet to enter a sequence."""
    lead_score: Optional[ScoreRange] = None
    industry: Optional[List[str]] = None
    budget_range: Optional[List[str]] = None
    urgency: Optional[List[str]] = None
    no_response: bool = False

    def matches(self, lead: LeadAttributes, breakdown: ScoreBreakdown) -> bool:
        if self.lead_score and not self.lead_score.contains(breakdown.total):
            return False
        if not attribute_allowed(self.industry, lead.industry_sector):
            return False
        if not attribute_allowed(self.budget_range, lead.budget_range):
            return False
        if not attribute_allowed(self.urgency, lead.urgency):
            return False
        return True


@dataclass(frozen=True)
class ActionBlueprint:
    """Everything about an action except its lead, time and status."""
    type: ActionType
    priority: LeadPriority
    assigned_to: str = AUTO_ASSIGN
    template: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SequenceStep:
    """One step of a sequence, fired delay_hours after the schedule is built."""
    delay_hours: float
    action: ActionBlueprint


@dataclass(frozen=True)
class FollowUpSequence:
    """An ordered, trigger-gated list of follow-up steps."""
    id: str
    name: str
    steps: List[SequenceStep]
    triggers: SequenceTrigger = field(default_factory=SequenceTrigger)
    description: str = ""
    is_active: bool = True


def _step(delay_hours, action_type, priority, sequence_id, assigned_to=AUTO_ASSIGN,
          template=None, automated=True, **extra) -> SequenceStep:
    metadata = {'automated': automated, 'sequence': sequence_id}
    metadata.update(extra)
    return SequenceStep(
        delay_hours=delay_hours,
        action=ActionBlueprint(
            type=action_type,
            priority=priority,
            assigned_to=assigned_to,
            template=template,
            metadata=metadata,
        ),
    )


def default_sequences() -> List[FollowUpSequence]:
    """Built-in sequences in selection order."""
    high_value = 'high-value-sequence'
    standard = 'standard-sequence'
    urgent = 'urgent-sequence'
    nurturing = 'nurturing-sequence'
    senior = 'senior-sales-1'

    return [
        FollowUpSequence(
            id=high_value,
            name='High Value Lead Sequence',
            description='Intensive follow-up for high-value leads',
            triggers=SequenceTrigger(
                lead_score=ScoreRange(min=70),
                budget_range=['500k_1m', 'over_1m'],
            ),
            steps=[
                _step(0.5, ActionType.EMAIL, LeadPriority.CRITICAL, high_value,
                      assigned_to=senior, template='initial-response-high-value'),
                _step(2, ActionType.PHONE_CALL, LeadPriority.CRITICAL, high_value,
                      assigned_to=senior, template='urgent-phone-call'),
                _step(24, ActionType.PROPOSAL, LeadPriority.HIGH, high_value,
                      assigned_to=senior, automated=False, requires_manual=True),
                _step(72, ActionType.PHONE_CALL, LeadPriority.HIGH, high_value,
                      assigned_to=senior, follow_up='proposal'),
            ],
        ),
        FollowUpSequence(
            id=standard,
            name='Standard Lead Sequence',
            description='Regular follow-up for standard leads',
            triggers=SequenceTrigger(lead_score=ScoreRange(min=30, max=69)),
            steps=[
                _step(1, ActionType.EMAIL, LeadPriority.MEDIUM, standard,
                      template='initial-response-standard'),
                _step(4, ActionType.EMAIL, LeadPriority.MEDIUM, standard,
                      automated=False, requires_manual=True),
                _step(72, ActionType.EMAIL, LeadPriority.LOW, standard,
                      template='follow-up-no-response'),
                _step(168, ActionType.PHONE_CALL, LeadPriority.LOW, standard,
                      automated=False),
            ],
        ),
        FollowUpSequence(
            id=urgent,
            name='Urgent Lead Sequence',
            description='Immediate response for urgent inquiries',
            triggers=SequenceTrigger(urgency=['immediate']),
            steps=[
                _step(0.25, ActionType.PHONE_CALL, LeadPriority.CRITICAL, urgent,
                      template='urgent-phone-call'),
                _step(0.5, ActionType.WHATSAPP, LeadPriority.CRITICAL, urgent),
                _step(1, ActionType.EMAIL, LeadPriority.CRITICAL, urgent,
                      template='initial-response-high-value'),
            ],
        ),
        FollowUpSequence(
            id=nurturing,
            name='Lead Nurturing Sequence',
            description='Long-term nurturing for planning-phase leads',
            triggers=SequenceTrigger(
                lead_score=ScoreRange(max=40),
                urgency=['planning'],
            ),
            steps=[
                _step(2, ActionType.EMAIL, LeadPriority.LOW, nurturing,
                      template='initial-response-standard'),
                _step(168, ActionType.EMAIL, LeadPriority.LOW, nurturing,
                      content_type='educational'),
                _step(336, ActionType.EMAIL, LeadPriority.LOW, nurturing,
                      content_type='case_study'),
                _step(720, ActionType.EMAIL, LeadPriority.LOW, nurturing,
                      content_type='industry_update'),
            ],
        ),
    ]


class SequenceSelector:
    """Picks the first active sequence whose trigger matches a lead."""

    def __init__(self, sequences: Optional[List[FollowUpSequence]] = None):
        self.sequences: List[FollowUpSequence] = list(
            sequences if sequences is not None else default_sequences()
        )

    def select(self, lead: LeadAttributes, breakdown: ScoreBreakdown) -> Optional[FollowUpSequence]:
        """First match in declared order wins."""
        for sequence in self.sequences:
            if not sequence.is_active:
                continue
            # No-response sequences re-engage silent leads; they never start a schedule
            if sequence.triggers.no_response:
                continue
            if sequence.triggers.matches(lead, breakdown):
                logger.debug(f"Lead {lead.id} matched sequence {sequence.id}")
                return sequence
        return None

    def get(self, sequence_id: str) -> Optional[FollowUpSequence]:
        for sequence in self.sequences:
            if sequence.id == sequence_id:
                return sequence
        return None
