"""Follow-up scheduler - builds per-lead action schedules and tracks their lifecycle.

The scheduler is polled: an external job runner calls ``due_actions(now)``,
delivers what comes back, and reports the outcome through
``complete_action``. Responses and conversions are fed back through
``mark_response_received`` and ``update_conversion_status``, which skip
actions that should no longer fire.

Unknown lead or action ids are ignored: mutators return False and readers
return empty results.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from ..core.models import LeadAttributes, ScoreBreakdown, LeadPriority, Urgency, enum_value
from ..core.predictions import ConversionPrediction
from .models import (
    ActionStatus,
    ActionType,
    ConversionStatus,
    CONTACT_ACTION_TYPES,
    FollowUpAction,
    FollowUpSchedule,
    FollowUpStatistics,
    RoutingDecision,
)
from .sequences import SequenceSelector, AUTO_ASSIGN
from .templates import TemplateLibrary

logger = logging.getLogger(__name__)

DEFAULT_ASSIGNEE = "sales-rep-1"
DEFAULT_ACTION_DELAY = timedelta(hours=2)
HIGH_VALUE_TEMPLATE = "initial-response-high-value"
STANDARD_TEMPLATE = "initial-response-standard"


class FollowUpScheduler:
    """In-memory follow-up schedules keyed by lead id."""

    def __init__(
        self,
        templates: Optional[TemplateLibrary] = None,
        selector: Optional[SequenceSelector] = None,
        default_assignee: str = DEFAULT_ASSIGNEE,
        high_value_score: int = 50,
        now_fn: Callable[[], datetime] = datetime.now
    ):
        self.templates = templates or TemplateLibrary()
        self.selector = selector or SequenceSelector()
        self.default_assignee = default_assignee
        self.high_value_score = high_value_score
        self.now_fn = now_fn
        self.schedules: Dict[str, FollowUpSchedule] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def build_schedule(
        self,
        lead: LeadAttributes,
        breakdown: ScoreBreakdown,
        routing: RoutingDecision,
        prediction: Optional[ConversionPrediction] = None,
        now: Optional[datetime] = None
    ) -> FollowUpSchedule:
        """Create the schedule for a lead, replacing any existing one."""
        now = now or self.now_fn()
        lead_id = lead.id or f"temp_{int(now.timestamp() * 1000)}"
        assignee = routing.assigned_to or self.default_assignee

        sequence = self.selector.select(lead, breakdown)
        actions: List[FollowUpAction] = []

        if sequence:
            for index, step in enumerate(sequence.steps):
                blueprint = step.action
                metadata = dict(blueprint.metadata)
                metadata.update({
                    'sequence': sequence.id,
                    'lead_score': breakdown.total,
                    'conversion_probability': prediction.probability if prediction else None,
                    'estimated_value': prediction.estimated_value if prediction else None,
                })

                actions.append(FollowUpAction(
                    id=f"{lead_id}_{sequence.id}_{index}",
                    lead_id=lead_id,
                    type=blueprint.type,
                    scheduled_at=now + timedelta(hours=step.delay_hours),
                    priority=blueprint.priority,
                    assigned_to=assignee if blueprint.assigned_to == AUTO_ASSIGN else blueprint.assigned_to,
                    template=blueprint.template,
                    metadata=metadata,
                    created_at=now,
                ))
        else:
            template = (
                HIGH_VALUE_TEMPLATE if breakdown.total >= self.high_value_score
                else STANDARD_TEMPLATE
            )
            actions.append(FollowUpAction(
                id=f"{lead_id}_default_0",
                lead_id=lead_id,
                type=ActionType.EMAIL,
                scheduled_at=now + DEFAULT_ACTION_DELAY,
                priority=LeadPriority(routing.priority),
                assigned_to=assignee,
                template=template,
                metadata={
                    'automated': True,
                    'default': True,
                    'lead_score': breakdown.total,
                },
                created_at=now,
            ))

        schedule = FollowUpSchedule(
            lead_id=lead_id,
            sequence_id=sequence.id if sequence else None,
            actions=actions,
        )
        schedule.refresh_next_action()

        with self._lock:
            if lead_id in self.schedules:
                logger.info(f"Replacing existing follow-up schedule for lead {lead_id}")
            self.schedules[lead_id] = schedule

        logger.info(
            f"Scheduled {len(actions)} follow-up actions for lead {lead_id} "
            f"(sequence={schedule.sequence_id or 'default'}, score={breakdown.total})"
        )
        return schedule

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _snapshot(self) -> List[FollowUpSchedule]:
        with self._lock:
            return list(self.schedules.values())

    def get_schedule(self, lead_id: str) -> Optional[FollowUpSchedule]:
        with self._lock:
            return self.schedules.get(lead_id)

    def due_actions(self, now: Optional[datetime] = None) -> List[FollowUpAction]:
        """Pending actions that are due, most urgent priority first, then oldest."""
        now = now or self.now_fn()
        due = [
            action
            for schedule in self._snapshot()
            for action in schedule.actions
            if action.status == ActionStatus.PENDING and action.scheduled_at <= now
        ]
        due.sort(key=lambda a: a.sort_key)
        return due

    def pending_actions(self) -> List[FollowUpAction]:
        """All pending actions in time order."""
        pending = [
            action
            for schedule in self._snapshot()
            for action in schedule.pending_actions()
        ]
        pending.sort(key=lambda a: a.scheduled_at)
        return pending

    def actions_for_assignee(self, assignee_id: str) -> List[FollowUpAction]:
        """Pending actions for one salesperson, ordered like due_actions."""
        actions = [
            action
            for schedule in self._snapshot()
            for action in schedule.pending_actions()
            if action.assigned_to == assignee_id
        ]
        actions.sort(key=lambda a: a.sort_key)
        return actions

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def complete_action(
        self,
        action_id: str,
        success: bool = True,
        now: Optional[datetime] = None
    ) -> bool:
        """Record the outcome of a pending action."""
        now = now or self.now_fn()

        with self._lock:
            for schedule in self.schedules.values():
                action = next((a for a in schedule.actions if a.id == action_id), None)
                if action is None:
                    continue

                if action.status != ActionStatus.PENDING:
                    logger.debug(f"Ignoring completion of {action_id}: already {action.status.value}")
                    return False

                action.status = ActionStatus.COMPLETED if success else ActionStatus.FAILED
                action.completed_at = now
                schedule.refresh_next_action()

                if success and action.type in CONTACT_ACTION_TYPES:
                    schedule.last_contact_at = now

                logger.debug(f"Action {action_id} -> {action.status.value}")
                return True

        return False

    def mark_response_received(self, lead_id: str, now: Optional[datetime] = None) -> bool:
        """Lead replied: skip pending automated actions, keep manual ones."""
        now = now or self.now_fn()

        with self._lock:
            schedule = self.schedules.get(lead_id)
            if not schedule:
                return False

            schedule.response_received = True
            schedule.last_contact_at = now

            skipped = 0
            for action in schedule.actions:
                if action.status == ActionStatus.PENDING and action.is_automated:
                    action.status = ActionStatus.SKIPPED
                    skipped += 1

            schedule.refresh_next_action()

        logger.info(f"Response received from lead {lead_id}; skipped {skipped} automated actions")
        return True

    def update_conversion_status(self, lead_id: str, status: ConversionStatus) -> bool:
        """Move a lead's outcome forward. Converted and lost are final."""
        status = ConversionStatus(status)

        with self._lock:
            schedule = self.schedules.get(lead_id)
            if not schedule:
                return False

            if schedule.conversion_status.is_terminal:
                logger.debug(
                    f"Lead {lead_id} already {schedule.conversion_status.value}; "
                    f"ignoring {status.value}"
                )
                return False

            schedule.conversion_status = status

            if status.is_terminal:
                for action in schedule.actions:
                    if action.status == ActionStatus.PENDING:
                        action.status = ActionStatus.SKIPPED
                schedule.next_action = None
                logger.info(f"Lead {lead_id} {status.value}; remaining follow-ups skipped")

        return True

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def template_variables(
        self,
        lead: LeadAttributes,
        now: Optional[datetime] = None
    ) -> Dict[str, str]:
        """Values for every known template placeholder, with fallbacks."""
        now = now or self.now_fn()
        days_ago = (now - lead.created_at).days if lead.created_at else 0

        return {
            'name': lead.name or 'Valued Customer',
            'company': lead.company or 'Your Company',
            'product_category': lead.product_category or 'industrial supplies',
            'industry': lead.industry_sector or 'industrial',
            'budget_range': enum_value(lead.budget_range) or 'competitive pricing',
            'urgency_reason': (
                'urgent project requirements' if lead.urgency == Urgency.IMMEDIATE
                else 'project planning'
            ),
            'project_timeline': enum_value(lead.project_timeline) or 'as per your requirements',
            'delivery_timeline': '2-3 weeks',
            'years_experience': '15',
            'days_ago': str(max(0, days_ago)),
            'assigned_to_name': 'Sales Team',
        }

    def render_content(
        self,
        action: FollowUpAction,
        lead: LeadAttributes,
        now: Optional[datetime] = None
    ) -> str:
        """Message body for an action. Empty when there is no template to draft from."""
        rendered = self.templates.render(action.template, self.template_variables(lead, now))
        return rendered['content'] if rendered else ""

    def render_subject(
        self,
        action: FollowUpAction,
        lead: LeadAttributes,
        now: Optional[datetime] = None
    ) -> str:
        rendered = self.templates.render(action.template, self.template_variables(lead, now))
        return rendered['subject'] if rendered else ""

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def statistics(self) -> FollowUpStatistics:
        """Dashboard figures across all schedules."""
        schedules = self._snapshot()
        total = len(schedules)

        active = 0
        pending = 0
        completed = 0
        converted = 0
        response_hours: List[float] = []

        for schedule in schedules:
            if schedule.conversion_status in (ConversionStatus.ACTIVE, ConversionStatus.NURTURING):
                active += 1
            if schedule.conversion_status == ConversionStatus.CONVERTED:
                converted += 1

            pending += sum(1 for a in schedule.actions if a.status == ActionStatus.PENDING)
            completed += sum(1 for a in schedule.actions if a.status == ActionStatus.COMPLETED)

            if schedule.response_received and schedule.last_contact_at and schedule.actions:
                delta = schedule.last_contact_at - schedule.actions[0].created_at
                response_hours.append(delta.total_seconds() / 3600)

        return FollowUpStatistics(
            total_schedules=total,
            active_schedules=active,
            pending_actions=pending,
            completed_actions=completed,
            conversion_rate=converted / total if total else 0.0,
            average_response_time_hours=(
                sum(response_hours) / len(response_hours) if response_hours else 0.0
            ),
        )
