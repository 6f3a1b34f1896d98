"""Tests for lead and follow-up data models."""

from datetime import datetime

import pytest

from lead_intel_engine.core.models import (
    LeadAttributes,
    LeadPriority,
    Urgency,
    BudgetRange,
    FactorDetail,
    ScoreBreakdown,
)
from lead_intel_engine.follow_up.models import (
    ActionStatus,
    ActionType,
    ConversionStatus,
    FollowUpAction,
    FollowUpSchedule,
)


class TestLeadAttributesFromDict:
    """Tests for decoding form payloads."""

    def test_known_fields_are_coerced(self):
        lead = LeadAttributes.from_dict({
            "id": 42,
            "name": "Khalid",
            "urgency": "1-2_weeks",
            "budget_range": "500k_1m",
            "page_views_count": "4",
            "created_at": "2026-01-01T08:30:00",
        })
        assert lead.id == "42"
        assert lead.urgency is Urgency.ONE_TO_TWO_WEEKS
        assert lead.budget_range is BudgetRange.FROM_500K_TO_1M
        assert lead.page_views_count == 4
        assert lead.created_at == datetime(2026, 1, 1, 8, 30)

    def test_unknown_keys_and_empty_values_dropped(self):
        lead = LeadAttributes.from_dict({"utm_source": "ad", "company": "", "phone": None})
        assert lead == LeadAttributes()

    def test_invalid_values_are_treated_as_missing(self, caplog):
        lead = LeadAttributes.from_dict({
            "urgency": "yesterday",
            "documents_downloaded": "lots",
            "created_at": "last week",
        })
        assert lead.urgency is None
        assert lead.documents_downloaded == 0
        assert lead.created_at is None
        assert "Ignoring unknown urgency" in caplog.text


class TestScoreBreakdown:

    def test_to_dict(self):
        breakdown = ScoreBreakdown(
            total=12,
            engagement=30,
            details={"form_completion": FactorDetail(30, 0.15, "Completed detailed inquiry form")},
        )
        data = breakdown.to_dict()
        assert data["total"] == 12
        assert data["details"]["form_completion"]["score"] == 30

    def test_details_are_read_only(self):
        details = {"form_completion": FactorDetail(30, 0.15, "Completed detailed inquiry form")}
        breakdown = ScoreBreakdown(total=5, engagement=30, details=details)

        with pytest.raises(TypeError):
            breakdown.details["form_completion"] = FactorDetail(100, 0.15, "patched")

        details.clear()
        assert "form_completion" in breakdown.details


class TestFollowUpModels:

    def test_priority_rank_order(self):
        ranks = [p.rank for p in (LeadPriority.CRITICAL, LeadPriority.HIGH, LeadPriority.MEDIUM, LeadPriority.LOW)]
        assert ranks == [0, 1, 2, 3]

    def test_terminal_statuses(self):
        assert not ActionStatus.PENDING.is_terminal
        assert ActionStatus.SKIPPED.is_terminal
        assert ConversionStatus.CONVERTED.is_terminal
        assert ConversionStatus.LOST.is_terminal
        assert not ConversionStatus.NURTURING.is_terminal

    def test_schedule_next_action(self):
        when = datetime(2026, 1, 5, 9, 0)
        first = FollowUpAction("a0", "lead", ActionType.EMAIL, when, LeadPriority.HIGH, "rep")
        second = FollowUpAction("a1", "lead", ActionType.PHONE_CALL, when, LeadPriority.HIGH, "rep")
        schedule = FollowUpSchedule(lead_id="lead", actions=[first, second])

        schedule.refresh_next_action()
        assert schedule.next_action is first

        first.status = ActionStatus.COMPLETED
        schedule.refresh_next_action()
        assert schedule.next_action is second
        assert schedule.to_dict()["next_action_id"] == "a1"
