"""Automated follow-up sequences and scheduling."""

from .models import (
    ActionType,
    ActionStatus,
    ConversionStatus,
    RoutingDecision,
    FollowUpAction,
    FollowUpSchedule,
    FollowUpStatistics,
)
from .templates import FollowUpTemplate, TemplateConditions, TemplateLibrary, ScoreRange
from .sequences import FollowUpSequence, SequenceTrigger, SequenceStep, ActionBlueprint, SequenceSelector
from .scheduler import FollowUpScheduler

__all__ = [
    "ActionType",
    "ActionStatus",
    "ConversionStatus",
    "RoutingDecision",
    "FollowUpAction",
    "FollowUpSchedule",
    "FollowUpStatistics",
    "FollowUpTemplate",
    "TemplateConditions",
    "TemplateLibrary",
    "ScoreRange",
    "FollowUpSequence",
    "SequenceTrigger",
    "SequenceStep",
    "ActionBlueprint",
    "SequenceSelector",
    "FollowUpScheduler",
]
