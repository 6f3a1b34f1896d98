"""Message templates for follow-up actions."""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Sequence

from ..core.models import LeadAttributes, ScoreBreakdown, enum_value
from .models import ActionType


PLACEHOLDER_PATTERN = re.compile(r'\{\{([a-z_]+)\}\}')


@dataclass(frozen=True)
class ScoreRange:
    """Inclusive score bounds. A None bound is not checked."""
    min: Optional[int] = None
    max: Optional[int] = None

    def contains(self, score: int) -> bool:
        if self.min is not None and score < self.min:
            return False
        if self.max is not None and score > self.max:
            return False
        return True


def attribute_allowed(allowed: Optional[Sequence[str]], value) -> bool:
    """Membership check that passes when either side is unspecified."""
    if not allowed or value is None:
        return True
    return enum_value(value) in allowed


@dataclass(frozen=True)
class TemplateConditions:
    """When a template is applicable."""
    lead_score: Optional[ScoreRange] = None
    industry: Optional[List[str]] = None
    budget_range: Optional[List[str]] = None
    urgency: Optional[List[str]] = None
    days_since_last_contact: Optional[int] = None

    def matches(
        self,
        lead: LeadAttributes,
        breakdown: ScoreBreakdown,
        days_since_last_contact: Optional[int] = None
    ) -> bool:
        if self.lead_score and not self.lead_score.contains(breakdown.total):
            return False
        if not attribute_allowed(self.industry, lead.industry_sector):
            return False
        if not attribute_allowed(self.budget_range, lead.budget_range):
            return False
        if not attribute_allowed(self.urgency, lead.urgency):
            return False
        if self.days_since_last_contact is not None:
            if days_since_last_contact is None or days_since_last_contact < self.days_since_last_contact:
                return False
        return True


@dataclass(frozen=True)
class FollowUpTemplate:
    """Reusable message blueprint."""
    id: str
    name: str
    type: ActionType
    content: str
    subject: Optional[str] = None
    variables: List[str] = field(default_factory=list)
    conditions: TemplateConditions = field(default_factory=TemplateConditions)
    is_active: bool = True


class TemplateLibrary:
    """Library of follow-up templates."""

    def __init__(
        self,
        templates: Optional[List[FollowUpTemplate]] = None,
        sender_company: str = "Al Mazahir Trading Est.",
        sender_phone: str = "+966-XXX-XXXX"
    ):
        self.sender_company = sender_company
        self.sender_phone = sender_phone
        self.templates: Dict[str, FollowUpTemplate] = {}

        for template in (templates if templates is not None else self._default_templates()):
            self.add(template)

    def add(self, template: FollowUpTemplate):
        """Register a template, replacing any with the same id."""
        self.templates[template.id] = template

    def get(self, template_id: Optional[str]) -> Optional[FollowUpTemplate]:
        if not template_id:
            return None
        return self.templates.get(template_id)

    def templates_for(
        self,
        lead: LeadAttributes,
        breakdown: ScoreBreakdown,
        days_since_last_contact: Optional[int] = None
    ) -> List[FollowUpTemplate]:
        """Active templates whose conditions match the lead."""
        return [
            t for t in self.templates.values()
            if t.is_active and t.conditions.matches(lead, breakdown, days_since_last_contact)
        ]

    def render(self, template_id: Optional[str], variables: Dict[str, Any]) -> Optional[Dict[str, str]]:
        """Render subject and content of a template. None if it does not exist."""
        template = self.get(template_id)
        if not template:
            return None

        return {
            'subject': substitute(template.subject or "", variables),
            'content': substitute(template.content, variables),
        }

    @staticmethod
    def extract_variables(text: str) -> List[str]:
        """Placeholder names used in a piece of text, in order of first use."""
        seen: List[str] = []
        for name in PLACEHOLDER_PATTERN.findall(text):
            if name not in seen:
                seen.append(name)
        return seen

    def _default_templates(self) -> List[FollowUpTemplate]:
        company = self.sender_company
        phone = self.sender_phone

        return [
            FollowUpTemplate(
                id='initial-response-high-value',
                name='Initial Response - High Value Lead',
                type=ActionType.EMAIL,
                subject=f'Thank you for your inquiry - {company}',
                content=f"""Dear {{{{name}}}},

Thank you for your inquiry regarding {{{{product_category}}}} for your {{{{industry}}}} operations. We appreciate your interest in {company}.

Based on your requirements for {{{{budget_range}}}} budget range, I would like to schedule a detailed discussion to understand your specific needs and provide you with a comprehensive solution.

Our expertise in {{{{industry}}}} sector includes:
- Premium quality industrial supplies
- Certified safety equipment
- Project management support
- Competitive pricing for bulk orders

I will call you within the next 2 hours to discuss your requirements in detail. Alternatively, you can reach me directly at {phone}.

Best regards,
{{{{assigned_to_name}}}}
{company}""",
                variables=['name', 'product_category', 'industry', 'budget_range', 'assigned_to_name'],
                conditions=TemplateConditions(
                    lead_score=ScoreRange(min=70),
                    budget_range=['500k_1m', 'over_1m'],
                ),
            ),
            FollowUpTemplate(
                id='initial-response-standard',
                name='Initial Response - Standard Lead',
                type=ActionType.EMAIL,
                subject=f'Your inquiry - {company}',
                content=f"""Dear {{{{name}}}},

Thank you for contacting {company} regarding {{{{product_category}}}}.

We have received your inquiry and our team is reviewing your requirements. We will respond with detailed information and pricing within 4 hours.

In the meantime, you can:
- Browse our product catalog
- Download our company brochure
- Contact us directly: {phone}

Best regards,
{{{{assigned_to_name}}}}
{company}""",
                variables=['name', 'product_category', 'assigned_to_name'],
                conditions=TemplateConditions(lead_score=ScoreRange(min=30, max=69)),
            ),
            FollowUpTemplate(
                id='follow-up-no-response',
                name='Follow-up - No Response',
                type=ActionType.EMAIL,
                subject=f'Following up on your inquiry - {company}',
                content=f"""Dear {{{{name}}}},

I wanted to follow up on the inquiry you submitted {{{{days_ago}}}} days ago regarding {{{{product_category}}}}.

We understand that you may be evaluating multiple suppliers. Here's why {company} stands out:

- {{{{years_experience}}}}+ years of experience in {{{{industry}}}}
- Certified quality management systems
- Competitive pricing with flexible payment terms
- Fast delivery across Saudi Arabia

Would you like to schedule a brief 15-minute call to discuss your requirements? I'm available at your convenience.

Best regards,
{{{{assigned_to_name}}}}
{company}""",
                variables=['name', 'days_ago', 'product_category', 'years_experience', 'industry', 'assigned_to_name'],
                conditions=TemplateConditions(days_since_last_contact=3),
            ),
            FollowUpTemplate(
                id='urgent-phone-call',
                name='Urgent Phone Call',
                type=ActionType.PHONE_CALL,
                content=(
                    'Call immediately for urgent inquiry. Mention: {{urgency_reason}}. '
                    'Budget: {{budget_range}}. Timeline: {{project_timeline}}.'
                ),
                variables=['urgency_reason', 'budget_range', 'project_timeline'],
                conditions=TemplateConditions(urgency=['immediate']),
            ),
            FollowUpTemplate(
                id='proposal-follow-up',
                name='Proposal Follow-up',
                type=ActionType.EMAIL,
                subject=f'Proposal for {{{{company}}}} - {company}',
                content=f"""Dear {{{{name}}}},

I hope this email finds you well. I wanted to follow up on the proposal we sent for your {{{{product_category}}}} requirements.

Our proposal includes:
- Detailed technical specifications
- Competitive pricing structure
- Delivery timeline: {{{{delivery_timeline}}}}
- Quality certifications and warranties

Do you have any questions about our proposal? I'm happy to schedule a call to discuss any aspects in detail.

Looking forward to your feedback.

Best regards,
{{{{assigned_to_name}}}}
{company}""",
                variables=['name', 'company', 'product_category', 'delivery_timeline', 'assigned_to_name'],
                conditions=TemplateConditions(lead_score=ScoreRange(min=60)),
            ),
        ]


def substitute(text: str, variables: Dict[str, Any]) -> str:
    """Replace every {{key}} placeholder that has a value, in a single pass.

    Substituted values are not scanned again, so a value that itself looks
    like a placeholder is inserted verbatim.
    """
    def replace(match):
        key = match.group(1)
        return str(variables[key]) if key in variables else match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace, text)
