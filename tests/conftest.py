"""Shared fixtures for engine tests."""

from datetime import datetime

import pytest

from lead_intel_engine.core.models import (
    LeadAttributes,
    Urgency,
    CompanySize,
    BudgetRange,
    DecisionAuthority,
    ProjectTimeline,
    DeviceType,
)


NOW = datetime(2026, 1, 5, 9, 0, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def high_value_lead():
    """Large oil & gas buyer with a big budget and an urgent need."""
    return LeadAttributes(
        id="lead-1",
        name="Omar Haddad",
        email="omar@gulfdrilling.com",
        phone="+966500000001",
        company="Gulf Drilling Co",
        company_size=CompanySize.LARGE,
        industry_sector="oil_gas",
        budget_range=BudgetRange.OVER_1M,
        decision_authority=DecisionAuthority.DECISION_MAKER,
        project_timeline=ProjectTimeline.IMMEDIATE,
        quantity_estimate="500 units",
        product_category="safety equipment",
        device_type=DeviceType.DESKTOP,
        page_views_count=6,
        documents_downloaded=2,
        total_engagement_time=900,
        referrer="https://www.linkedin.com/feed/",
        message=(
            "We are commissioning a new drilling site and need certified safety "
            "equipment, gas detectors and PPE for around 500 workers. Delivery must "
            "start within two weeks. Please send pricing for bulk orders and "
            "lead times for the full package."
        ),
        urgency=Urgency.IMMEDIATE,
    )


@pytest.fixture
def standard_lead():
    """Mid-sized construction contact with a moderate budget."""
    return LeadAttributes(
        id="lead-2",
        name="Sara Ali",
        email="sara@buildright.sa",
        phone="+966500000002",
        company="BuildRight",
        company_size=CompanySize.MEDIUM,
        industry_sector="construction",
        budget_range=BudgetRange.FROM_50K_TO_100K,
        device_type=DeviceType.DESKTOP,
        urgency=Urgency.ONE_TO_TWO_WEEKS,
    )


@pytest.fixture
def planning_lead():
    """Barely-qualified lead that is only planning."""
    return LeadAttributes(id="lead-3", urgency=Urgency.PLANNING)
