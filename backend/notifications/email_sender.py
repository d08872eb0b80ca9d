"""
Email sending via Resend API for notification system.
"""

import os
import uuid
from typing import Any

import resend
from dotenv import load_dotenv

from notifications.email_templates import EmailContent

load_dotenv()

# Initialize Resend with API key from environment
resend.api_key = os.getenv("RESEND_API_KEY")

EMAIL_FROM = os.getenv("EMAIL_FROM", "Voluna <notifications@voluna.org>")
EMAIL_REPLY_TO = os.getenv("EMAIL_REPLY_TO", "support@voluna.org")


def send_email(
    to: str | None,
    subject: str,
    html: str,
    text: str | None = None,
    reply_to: str | None = None,
) -> dict[str, Any]:
    """
    Send a single transactional email.

    Args:
        to: Recipient email address
        subject: Subject line
        html: HTML body
        text: Optional plain text body
        reply_to: Reply-To address (defaults to EMAIL_REPLY_TO)

    Returns:
        Dictionary with 'success' (bool), 'email_id' (str if success), 'error' (str if failed)
    """
    if not to:
        return {"success": False, "error": "No recipient email address"}

    params: dict[str, Any] = {
        "from": EMAIL_FROM,
        "to": to,
        "subject": subject,
        "html": html,
        "reply_to": reply_to or EMAIL_REPLY_TO,
        "headers": {"X-Entity-Ref-ID": uuid.uuid4().hex},
    }
    if text:
        params["text"] = text

    try:
        response = resend.Emails.send(params)
        return {"success": True, "email_id": response.get("id")}

    except Exception as e:
        return {"success": False, "error": str(e)}


def send_content(to: str | None, content: EmailContent) -> dict[str, Any]:
    """Send prepared template content."""
    return send_email(to, content.subject, content.html, content.text)
