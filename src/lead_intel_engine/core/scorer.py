"""Lead scoring engine - weighted six-dimension quality score with per-factor reasons."""

import math
from typing import Dict, Optional
from urllib.parse import urlparse

from .config import ScoringModel
from .models import LeadAttributes, ScoreBreakdown, FactorDetail, LeadPriority, enum_value


def js_round(value: float) -> int:
    """Round half up, matching the score rounding used by the web front end."""
    return int(math.floor(value + 0.5))


class LeadScorer:
    """Scores leads from form fields and browsing behavior."""

    def __init__(self, model: Optional[ScoringModel] = None):
        """Initialize with an optional custom scoring model."""
        self.model = model or ScoringModel()

    def score(self, lead: LeadAttributes) -> ScoreBreakdown:
        """Score a lead. Missing attributes contribute nothing."""
        details: Dict[str, FactorDetail] = {}
        weights = self.model.weights

        profile = self._profile_score(lead, details)
        behavior = self._behavior_score(lead, details)
        engagement = self._engagement_score(lead, details)
        urgency = self._urgency_score(lead, details)
        company = self._company_score(lead, details)
        project = self._project_score(lead, details)

        total = js_round(
            profile * weights.profile
            + behavior * weights.behavior
            + engagement * weights.engagement
            + urgency * weights.urgency
            + company * weights.company
            + project * weights.project
        )

        return ScoreBreakdown(
            total=max(0, min(100, total)),
            profile=profile,
            behavior=behavior,
            engagement=engagement,
            urgency=urgency,
            company=company,
            project=project,
            details=details,
        )

    def _profile_score(self, lead: LeadAttributes, details: Dict[str, FactorDetail]) -> float:
        weight = self.model.weights.profile
        score = 0

        if lead.email:
            domain = lead.email.split("@")[1].lower() if "@" in lead.email else ""
            if domain and domain not in self.model.personal_email_domains:
                score += 20
                details["business_email"] = FactorDetail(
                    20, weight, "Business email domain indicates professional inquiry"
                )
            else:
                score += 5
                details["personal_email"] = FactorDetail(5, weight, "Personal email domain")

        if lead.company:
            score += 15
            details["company_provided"] = FactorDetail(15, weight, "Company name provided")

        if lead.phone:
            score += 10
            details["phone_provided"] = FactorDetail(
                10, weight, "Phone number provided for direct contact"
            )

        authority = enum_value(lead.decision_authority)
        if authority:
            authority_score = self.model.authority_scores.get(authority, 0)
            score += authority_score
            details["decision_authority"] = FactorDetail(
                authority_score, weight, f"Decision authority: {authority}"
            )

        return min(100, score)

    def _behavior_score(self, lead: LeadAttributes, details: Dict[str, FactorDetail]) -> float:
        weight = self.model.weights.behavior
        score = 0

        device = enum_value(lead.device_type)
        if device:
            device_score = self.model.device_scores.get(device, 5)
            score += device_score
            details["device_type"] = FactorDetail(device_score, weight, f"Accessed from {device}")

        if lead.page_views_count and lead.page_views_count > 1:
            page_score = min(25, lead.page_views_count * 5)
            score += page_score
            details["page_views"] = FactorDetail(
                page_score, weight, f"Viewed {lead.page_views_count} pages"
            )

        if lead.documents_downloaded and lead.documents_downloaded > 0:
            doc_score = min(20, lead.documents_downloaded * 10)
            score += doc_score
            details["documents_downloaded"] = FactorDetail(
                doc_score, weight, f"Downloaded {lead.documents_downloaded} documents"
            )

        if lead.referrer:
            host = referrer_host(lead.referrer)
            referrer_score = referrer_score_for(host)
            score += referrer_score
            details["referrer"] = FactorDetail(
                referrer_score, weight, f"Came from: {host or 'unknown'}"
            )

        return min(100, score)

    def _engagement_score(self, lead: LeadAttributes, details: Dict[str, FactorDetail]) -> float:
        weight = self.model.weights.engagement
        score = 0

        if lead.total_engagement_time:
            minutes = lead.total_engagement_time / 60
            time_score = min(40, minutes * 2)
            score += time_score
            details["engagement_time"] = FactorDetail(
                time_score, weight, f"Spent {js_round(minutes)} minutes on site"
            )

        # Reaching the scorer means the inquiry form was submitted
        score += 30
        details["form_completion"] = FactorDetail(30, weight, "Completed detailed inquiry form")

        if lead.message:
            length = len(lead.message)
            if length > 200:
                message_score = 20
            elif length > 100:
                message_score = 15
            elif length > 50:
                message_score = 10
            else:
                message_score = 5
            score += message_score
            details["message_detail"] = FactorDetail(
                message_score,
                weight,
                f"Provided {'detailed' if length > 200 else 'basic'} requirements",
            )

        return min(100, score)

    def _urgency_score(self, lead: LeadAttributes, details: Dict[str, FactorDetail]) -> float:
        weight = self.model.weights.urgency
        score = 0

        urgency = enum_value(lead.urgency)
        if urgency:
            urgency_score = self.model.urgency_scores.get(urgency, 0)
            score += urgency_score
            details["urgency_level"] = FactorDetail(urgency_score, weight, f"Urgency: {urgency}")

        timeline = enum_value(lead.project_timeline)
        if timeline:
            timeline_score = self.model.timeline_scores.get(timeline, 0)
            score += timeline_score
            details["project_timeline"] = FactorDetail(
                timeline_score, weight, f"Timeline: {timeline}"
            )

        return min(100, score)

    def _company_score(self, lead: LeadAttributes, details: Dict[str, FactorDetail]) -> float:
        weight = self.model.weights.company
        score = 0

        size = enum_value(lead.company_size)
        if size:
            size_score = self.model.company_size_scores.get(size, 0)
            score += size_score
            details["company_size"] = FactorDetail(size_score, weight, f"Company size: {size}")

        if lead.industry_sector:
            industry_score = self.model.industry_scores.get(
                lead.industry_sector, self.model.industry_scores["other"]
            )
            score += industry_score
            details["industry_sector"] = FactorDetail(
                industry_score, weight, f"Industry: {lead.industry_sector}"
            )

        return min(100, score)

    def _project_score(self, lead: LeadAttributes, details: Dict[str, FactorDetail]) -> float:
        weight = self.model.weights.project
        score = 0

        budget = enum_value(lead.budget_range)
        if budget:
            budget_score = self.model.budget_scores.get(budget, 0)
            score += budget_score
            details["budget_range"] = FactorDetail(budget_score, weight, f"Budget: {budget}")

        if lead.quantity_estimate:
            score += 20
            details["quantity_estimate"] = FactorDetail(20, weight, "Provided quantity estimate")

        if lead.product_category:
            score += 15
            details["product_category"] = FactorDetail(15, weight, "Specified product category")

        return min(100, score)

    def priority_for(self, score: int) -> LeadPriority:
        """Handling priority for a total score."""
        thresholds = self.model.thresholds
        if score >= thresholds.hot:
            return LeadPriority.CRITICAL
        if score >= thresholds.warm:
            return LeadPriority.HIGH
        if score >= thresholds.cold:
            return LeadPriority.MEDIUM
        return LeadPriority.LOW

    def temperature_for(self, score: int) -> str:
        """hot / warm / cold label for a total score."""
        thresholds = self.model.thresholds
        if score >= thresholds.hot:
            return "hot"
        if score >= thresholds.warm:
            return "warm"
        return "cold"

    def explain(self, breakdown: ScoreBreakdown) -> str:
        """Get a detailed explanation of a score breakdown."""
        lines = [
            f"Total Score: {breakdown.total} ({self.temperature_for(breakdown.total).upper()})",
            "",
            "Dimensions:",
        ]
        for name, weight in self.model.weights.as_dict().items():
            lines.append(f"  {name}: {getattr(breakdown, name):g} (x{weight:.2f})")

        lines.extend(["", "Factors:"])
        if not breakdown.details:
            lines.append("  (none)")
        else:
            for key, detail in sorted(
                breakdown.details.items(),
                key=lambda item: item[1].score,
                reverse=True
            ):
                lines.append(f"  +{detail.score:g}: {key} - {detail.reason}")

        return "\n".join(lines)


def referrer_host(referrer: str) -> Optional[str]:
    """Hostname of an absolute referrer URL, None if it cannot be parsed."""
    try:
        parsed = urlparse(referrer)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return (parsed.hostname or "").lower() or None


def referrer_score_for(host: Optional[str]) -> int:
    """Score a referrer host by source type."""
    if not host:
        return 5
    if "google" in host:
        return 15
    if "linkedin" in host:
        return 20
    if "industry" in host or "trade" in host:
        return 25
    if "facebook" in host or "twitter" in host:
        return 10
    return 12


def quick_score(lead: LeadAttributes) -> int:
    """Quick helper to score a lead and return just the total."""
    return LeadScorer().score(lead).total
