"""
Email Delivery

Two senders share one interface:
- ConsoleEmailSender logs the message instead of sending it (local development)
- ResendEmailSender delivers through the Resend API

``build_email_sender`` picks one at startup. Senders never raise: ``send``
returns False when delivery failed so callers can report it without undoing
their own work.
"""

import asyncio
import logging
from html import escape

import resend

from school_directory.core.config import Settings

logger = logging.getLogger(__name__)


class EmailSender:
    """Interface for outgoing email."""

    async def send(self, to_email: str, subject: str, html_content: str, text_content: str) -> bool:
        raise NotImplementedError


class ConsoleEmailSender(EmailSender):
    """Logs emails instead of sending them."""

    async def send(self, to_email: str, subject: str, html_content: str, text_content: str) -> bool:
        logger.info(
            f"EMAIL NOT SENT (console delivery) | TO: {to_email} | SUBJECT: {subject}\n{text_content}"
        )
        return True


class ResendEmailSender(EmailSender):
    """Sends emails through Resend."""

    def __init__(self, api_key: str, email_from: str):
        # The Resend SDK reads a module-level key
        resend.api_key = api_key
        self._email_from = email_from

    async def send(self, to_email: str, subject: str, html_content: str, text_content: str) -> bool:
        try:
            params: resend.Emails.SendParams = {
                "from": self._email_from,
                "to": [to_email],
                "subject": subject,
                "html": html_content,
                "text": text_content,
            }

            # Run sync Resend call in thread pool to avoid blocking event loop
            email = await asyncio.to_thread(resend.Emails.send, params)
            logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
            return True
        except Exception as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False


def build_email_sender(settings: Settings) -> EmailSender:
    """Select the email sender for this process."""
    if settings.resend_api_key:
        logger.info("Email delivery: Resend")
        return ResendEmailSender(settings.resend_api_key, settings.email_from)

    if settings.is_production:
        logger.error("RESEND_API_KEY not set in production - emails will only be logged")
    else:
        logger.warning("RESEND_API_KEY not set - logging emails instead of sending")
    return ConsoleEmailSender()


async def send_otp_email(
    sender: EmailSender,
    to_email: str,
    code: str,
    ttl_minutes: int,
) -> bool:
    """Send a login code."""
    safe_email = escape(to_email)

    text_content = (
        f"Your School Directory login code is {code}.\n"
        f"It expires in {ttl_minutes} minutes.\n"
        "If you didn't request this code, you can ignore this email."
    )
    html_content = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>
            body {{ font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 40px 20px; }}
            .header {{ color: #1a365d; margin-bottom: 24px; }}
            .code {{ display: inline-block; font-size: 32px; letter-spacing: 8px; font-weight: 700; background-color: #f3f4f6; padding: 16px 24px; border-radius: 8px; margin: 24px 0; }}
            .footer {{ margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <h1 class="header">Your Login Code</h1>

            <p>Use this code to sign in as <strong>{safe_email}</strong>:</p>

            <div class="code">{code}</div>

            <p><strong>This code expires in {ttl_minutes} minutes.</strong></p>

            <div class="footer">
                <p>If you didn't request this code, you can safely ignore this email.</p>
                <p>School Directory</p>
            </div>
        </div>
    </body>
    </html>
    """

    return await sender.send(
        to_email=to_email,
        subject="Your School Directory login code",
        html_content=html_content,
        text_content=text_content,
    )
