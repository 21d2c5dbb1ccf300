"""Outreach email drafts for residential prospects.

Usage:
    >>> email = compose_outreach_email(prospect)
    >>> print(email.subject)
    Regarding Your Property's Tennis Court at 6548 E Ironwood Dr, Paradise Valley, AZ
"""

import html
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from .models import ResidentialProspect

DEFAULT_SENDER_NAME = "Mike Woelfel"
DEFAULT_COMPANY = "Elite Sports Builders"

SUBJECT_TEMPLATE = "Regarding Your Property's {court_type} Court at {address}"

BODY_TEMPLATE = """Dear {homeowner},

I hope this email finds you well. My name is {sender_first_name}, and I represent {company}, a leading local specialist in the installation and resurfacing of high-quality sports courts.

While reviewing properties in your area, I noticed your beautiful {court_type} court. Based on an initial visual assessment, it appears there may be some opportunities for surface rejuvenation to restore its original color and optimal playing condition.

We would be happy to provide a complimentary, no-obligation consultation to assess its condition and discuss potential resurfacing options that can protect your investment for years to come. Would you be available for a brief chat sometime next week?

Best regards,
{sender_name}
{company}"""


@dataclass
class OutreachEmail:
    """Outreach email draft.

    Attributes:
        prospect_id: Id of the prospect the email is addressed to.
        recipient: Homeowner name.
        subject: Email subject line.
        text_content: Plain text body.
        html_content: Body with newlines rendered as <br> tags.
        generated_at: Timestamp of generation.
    """
    prospect_id: str
    recipient: str
    subject: str
    text_content: str
    html_content: str
    generated_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "prospect_id": self.prospect_id,
            "recipient": self.recipient,
            "subject": self.subject,
            "text_content": self.text_content,
            "html_content": self.html_content,
            "generated_at": self.generated_at.isoformat(),
        }


def text_to_html(text: str) -> str:
    """Escape text for HTML and turn newlines into <br> tags."""
    return html.escape(text, quote=False).replace("\n", "<br>")


def compose_outreach_email(
    prospect: ResidentialProspect,
    sender_name: Optional[str] = None,
    company: Optional[str] = None,
) -> OutreachEmail:
    """Draft the resurfacing outreach email for a residential prospect.

    Args:
        prospect: Residential prospect to contact.
        sender_name: Full name signing the email.
        company: Company the sender represents.

    Returns:
        OutreachEmail with subject, plain text and HTML bodies.

    Raises:
        ValueError: If the prospect is not residential.
    """
    if not isinstance(prospect, ResidentialProspect):
        raise ValueError(
            f"Outreach emails are only drafted for residential prospects, "
            f"got {getattr(prospect, 'type', type(prospect).__name__)!r}"
        )

    sender_name = sender_name or DEFAULT_SENDER_NAME
    company = company or DEFAULT_COMPANY
    court_type = prospect.court_type.value

    subject = SUBJECT_TEMPLATE.format(court_type=court_type, address=prospect.address)
    text = BODY_TEMPLATE.format(
        homeowner=prospect.homeowner,
        sender_first_name=sender_name.split()[0],
        sender_name=sender_name,
        company=company,
        court_type=court_type,
    )

    return OutreachEmail(
        prospect_id=prospect.id,
        recipient=prospect.homeowner,
        subject=subject,
        text_content=text,
        html_content=text_to_html(text),
    )
