"""
Enquiry relay: turns a contact form submission into an email sent through the
Resend HTTP API.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from app.config import Settings
from app.schemas.enquiry import EnquiryRequest
from app.templating import templates

logger = logging.getLogger(__name__)

ENQUIRY_TYPE_LABELS = {
    "sale": "Property purchase / sale",
    "rent": "Long-term rent",
    "restoration": "Restoration / renovation",
    "other": "Other enquiry",
}

DEFAULT_DISPLAY_NAME = "Website visitor"


class EnquiryDeliveryError(Exception):
    pass


def _clean(value: Optional[str]) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


@dataclass
class EnquiryEmail:
    subject: str
    html: str
    reply_to: str


def enquiry_type_label(enquiry_type: Optional[str]) -> str:
    if not enquiry_type:
        return "Not specified"
    return ENQUIRY_TYPE_LABELS.get(enquiry_type, enquiry_type)


def property_label(enquiry: EnquiryRequest) -> Optional[str]:
    return _clean(enquiry.property_title) or _clean(enquiry.property_slug) or _clean(enquiry.property_id)


def property_url(enquiry: EnquiryRequest, site_url: str) -> Optional[str]:
    """Client-supplied URL first, else built from the site URL and slug (or id)"""
    explicit = _clean(enquiry.property_url)
    if explicit:
        return explicit

    key = _clean(enquiry.property_slug) or _clean(enquiry.property_id)
    site_url = (site_url or "").rstrip("/")
    if site_url and key:
        return f"{site_url}/properties/{key}"
    return None


def build_subject(enquiry: EnquiryRequest) -> str:
    custom = _clean(enquiry.subject)
    if custom:
        return custom

    label = property_label(enquiry)
    parts = [
        "New enquiry",
        f"(Property: {label})" if label else None,
        f"via {enquiry.source}" if enquiry.source else None,
        f"({enquiry_type_label(enquiry.enquiry_type)})" if enquiry.enquiry_type else None,
        f"from {enquiry.name or DEFAULT_DISPLAY_NAME}",
    ]
    return " ".join(part for part in parts if part)


def render_enquiry_email(enquiry: EnquiryRequest, site_url: str) -> EnquiryEmail:
    subject = build_subject(enquiry)
    html = templates.env.get_template("emails/enquiry.html").render(
        subject=subject,
        display_name=enquiry.name or DEFAULT_DISPLAY_NAME,
        email=enquiry.email,
        phone=enquiry.phone,
        enquiry_type_label=enquiry_type_label(enquiry.enquiry_type) if enquiry.enquiry_type else None,
        source=enquiry.source,
        property_label=property_label(enquiry),
        property_url=property_url(enquiry, site_url),
        message_lines=str(enquiry.message or "").split("\n"),
    )
    return EnquiryEmail(subject=subject, html=html, reply_to=enquiry.email)


class ResendMailer:
    """Minimal client for the Resend /emails endpoint"""

    def __init__(self, api_key: str, api_url: str, sender: str,
                 timeout: float = 10.0, client: Optional[httpx.Client] = None):
        self.api_url = api_url
        self.sender = sender
        self.client = client or httpx.Client(timeout=timeout)
        self.client.headers["Authorization"] = f"Bearer {api_key}"

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[httpx.Client] = None) -> "ResendMailer":
        return cls(
            api_key=settings.resend_api_key,
            api_url=settings.resend_api_url,
            sender=settings.enquiry_from_email,
            timeout=settings.http_timeout,
            client=client,
        )

    def send(self, to_email: str, email: EnquiryEmail) -> str:
        """Returns the provider message id"""
        payload = {
            "from": self.sender,
            "to": [to_email],
            "reply_to": email.reply_to,
            "subject": email.subject,
            "html": email.html,
        }
        try:
            response = self.client.post(self.api_url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Resend error {e.response.status_code}: {e.response.text}")
            raise EnquiryDeliveryError(f"Email provider returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Resend request failed: {e}")
            raise EnquiryDeliveryError(str(e)) from e

        try:
            message_id = response.json().get("id", "")
        except ValueError:
            message_id = ""
        logger.info(f"Enquiry email sent: {message_id}")
        return message_id


def relay_enquiry(enquiry: EnquiryRequest, mailer: ResendMailer, settings: Settings) -> str:
    email = render_enquiry_email(enquiry, settings.site_url)
    logger.info(f"Sending enquiry '{email.subject}'")
    return mailer.send(settings.enquiry_to_email, email)
