"""
Contact-form notifications sent over SMTP.
"""
import os
import smtplib
from email.message import EmailMessage
from html import escape
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)

EMAIL_HOST = os.getenv("EMAIL_HOST", "smtp.gmail.com")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", 587))
EMAIL_USER = os.getenv("EMAIL_USER")
EMAIL_PASSWORD = os.getenv("EMAIL_PASSWORD")
EMAIL_RECEIVER = os.getenv("EMAIL_RECEIVER", "info@kalmarstudio.com")


def render_contact_email(name: str, email: str, subject: Optional[str], message: str) -> str:
    rows = [
        ("Name", name),
        ("Email", email),
    ]
    if subject:
        rows.append(("Subject", subject))
    details = "".join(f"<p><strong>{label}:</strong> {escape(value)}</p>" for label, value in rows)
    return (
        "<html><body style=\"font-family:sans-serif;color:#484848\">"
        "<h1>New Contact Form Submission</h1>"
        f"{details}"
        "<p><strong>Message:</strong></p>"
        f"<p style=\"padding:10px;background-color:#f5f5f5\">{escape(message)}</p>"
        "</body></html>"
    )


def build_contact_message(name: str, email: str, subject: Optional[str], message: str) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = f"\"Contact Form\" <{EMAIL_USER}>"
    msg["To"] = EMAIL_RECEIVER
    msg["Subject"] = subject or "New Contact Form Submission"
    msg["Reply-To"] = email
    msg.set_content(f"{name} <{email}> wrote:\n\n{message}")
    msg.add_alternative(render_contact_email(name, email, subject, message), subtype="html")
    return msg


def send_contact_email(name: str, email: str, subject: Optional[str], message: str) -> None:
    """Deliver a contact submission to EMAIL_RECEIVER. SMTP errors propagate to the caller."""
    msg = build_contact_message(name, email, subject, message)
    with smtplib.SMTP(EMAIL_HOST, EMAIL_PORT, timeout=30) as smtp:
        smtp.starttls()
        if EMAIL_USER and EMAIL_PASSWORD:
            smtp.login(EMAIL_USER, EMAIL_PASSWORD)
        smtp.send_message(msg)
    logger.info("contact_email_sent", receiver=EMAIL_RECEIVER, sender=email)
