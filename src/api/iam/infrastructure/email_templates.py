"""Subject lines and bodies for IAM e-mails.

Every interpolated value is HTML-escaped in the HTML variant.
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape

PRODUCT_NAME = "TracksCargo"


@dataclass(frozen=True)
class EmailContent:
    subject: str
    html: str
    text: str


def _wrap(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<title>{escape(title)}</title></head>"
        "<body style=\"font-family: sans-serif; color: #333;\">"
        "<div style=\"max-width: 600px; margin: 0 auto; padding: 20px;\">"
        f"<h1 style=\"color: #2563eb;\">{PRODUCT_NAME}</h1>"
        f"{body}"
        "</div></body></html>"
    )


def invitation_email(
    inviter_name: str,
    organization_name: str,
    role: str,
    link: str,
    expires_in_days: int,
) -> EmailContent:
    subject = f"You're invited to join {organization_name} on {PRODUCT_NAME}"
    html = _wrap(
        subject,
        f"<p><strong>{escape(inviter_name)}</strong> has invited you to join "
        f"<strong>{escape(organization_name)}</strong> as {escape(role)}.</p>"
        f"<p><a href=\"{escape(link, quote=True)}\">Accept Invitation</a></p>"
        f"<p>Or paste this link into your browser: {escape(link)}</p>"
        f"<p>This invitation expires in {expires_in_days} days.</p>",
    )
    text = (
        f"{inviter_name} has invited you to join {organization_name} "
        f"on {PRODUCT_NAME} as {role}.\n\n"
        f"Accept the invitation: {link}\n\n"
        f"This invitation expires in {expires_in_days} days.\n"
    )
    return EmailContent(subject=subject, html=html, text=text)


def welcome_email(user_name: str, organization_name: str) -> EmailContent:
    subject = f"Welcome to {organization_name} on {PRODUCT_NAME}!"
    html = _wrap(
        subject,
        f"<p>Hi {escape(user_name)},</p>"
        f"<p>You have joined <strong>{escape(organization_name)}</strong>. "
        "You can now track shipments with your team.</p>",
    )
    text = (
        f"Hi {user_name},\n\n"
        f"You have joined {organization_name} on {PRODUCT_NAME}. "
        "You can now track shipments with your team.\n"
    )
    return EmailContent(subject=subject, html=html, text=text)
