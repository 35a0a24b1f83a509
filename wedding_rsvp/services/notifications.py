"""
Email notifications for RSVP and address changes.

Delivery is best-effort: callers go through ``dispatch`` which logs and
swallows every failure so the triggering write is never affected.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from dataclasses import dataclass
from datetime import datetime
from email.message import EmailMessage
from email.utils import formataddr
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

from wedding_rsvp.core.config import settings
from wedding_rsvp.services.exceptions import NotificationError

logger = logging.getLogger(__name__)

RSVP_SUBMITTED = "rsvp_submitted"
ADDRESS_UPDATED = "address_updated"
WEEKLY_SUMMARY = "weekly_summary"


@dataclass
class NotificationResult:
    success: bool
    error: Optional[str] = None


def _format_timestamp(value: Any) -> str:
    if isinstance(value, datetime):
        return value.strftime("%A, %B %d, %Y %H:%M UTC")
    return str(value) if value else ""


def _rsvp_message(payload: Dict[str, Any]) -> Tuple[str, str]:
    name = payload.get("name", "A guest")
    if not payload.get("attending"):
        return f"RSVP declined: {name}", f"{name} will not be attending."

    lines = [f"{name} will be attending.", ""]
    lines.append(f"Dietary preference: {payload.get('dietary_preference') or 'not specified'}")
    if payload.get("allergies"):
        lines.append(f"Allergies: {payload['allergies']}")
    if payload.get("plus_one_attending"):
        lines.append("")
        lines.append(f"Plus one: {payload.get('plus_one_name') or 'name not given'}")
        lines.append(f"Plus one dietary preference: {payload.get('plus_one_dietary_preference') or 'not specified'}")
        if payload.get("plus_one_allergies"):
            lines.append(f"Plus one allergies: {payload['plus_one_allergies']}")
    return f"RSVP accepted: {name}", "\n".join(lines)


def _address_message(payload: Dict[str, Any]) -> Tuple[str, str]:
    name = payload.get("name", "A guest")
    invitation_name = payload.get("invitation_name")
    lines = ["New Address Received", "", f"Guest: {name}"]
    if invitation_name and invitation_name != name:
        lines.append(f"Name for Invitation: {invitation_name}")
    lines += ["", "Mailing Address:", payload.get("address_formatted") or ""]
    submitted = _format_timestamp(payload.get("address_updated_at"))
    if submitted:
        lines += ["", f"Submitted on {submitted}"]
    return f"New Address Submitted: {name}", "\n".join(lines)


def _summary_message(payload: Dict[str, Any]) -> Tuple[str, str]:
    lines = [
        f"Guests on the list: {payload['total']}",
        "",
        f"Addresses received: {payload['with_address']}",
        f"Addresses missing: {payload['without_address']}",
        f"Maximum headcount: {payload['max_headcount']}",
        "",
        f"RSVP yes: {payload['rsvp_yes']}",
        f"RSVP no: {payload['rsvp_no']}",
        f"RSVP pending: {payload['rsvp_pending']}",
    ]
    missing = payload.get("without_address_names") or []
    if missing:
        lines += ["", "Still waiting on an address from:"]
        lines += [f"  - {name}" for name in missing]
    return "Weekly guest list summary", "\n".join(lines)


_BUILDERS = {
    RSVP_SUBMITTED: _rsvp_message,
    ADDRESS_UPDATED: _address_message,
    WEEKLY_SUMMARY: _summary_message,
}


def build_message(event: str, payload: Dict[str, Any]) -> Tuple[str, str]:
    """Return (subject, plain-text body) for a notification event"""
    builder = _BUILDERS.get(event)
    if builder is None:
        raise NotificationError(f"Unknown notification event: {event}")
    subject, body = builder(payload)
    footer = f"\n\n---\nThis is an automated notification from {settings.SITE_NAME}."
    return subject, body + footer


class LogNotifier:
    """Sink used when SMTP is not configured; only logs the message"""

    async def notify(self, event: str, payload: Dict[str, Any]) -> NotificationResult:
        subject, _ = build_message(event, payload)
        logger.info("Notification (not emailed): %s", subject)
        return NotificationResult(success=True)


class SmtpNotifier:
    """Sends plain-text email over SMTP with implicit TLS"""

    def __init__(
        self,
        host: str,
        port: int,
        user: Optional[str],
        password: Optional[str],
        recipients: List[str],
        from_name: str,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.recipients = recipients
        self.from_name = from_name
        self.timeout = timeout

    def _send(self, subject: str, body: str) -> None:
        message = EmailMessage()
        message["From"] = formataddr((self.from_name, self.user or f"noreply@{self.host}"))
        message["To"] = ", ".join(self.recipients)
        message["Subject"] = subject
        message.set_content(body)

        context = ssl.create_default_context()
        with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context) as server:
            if self.user and self.password:
                server.login(self.user, self.password)
            server.send_message(message)

    async def notify(self, event: str, payload: Dict[str, Any]) -> NotificationResult:
        if not self.recipients:
            return NotificationResult(success=False, error="No notification recipients configured")
        subject, body = build_message(event, payload)
        try:
            await asyncio.to_thread(self._send, subject, body)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send %s email: %s", event, e)
            return NotificationResult(success=False, error=str(e))
        logger.info("Sent %s email to %d recipient(s)", event, len(self.recipients))
        return NotificationResult(success=True)


@lru_cache(maxsize=1)
def get_notifier():
    """FastAPI dependency returning the configured notification sink"""
    if settings.SMTP_HOST:
        return SmtpNotifier(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            user=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            recipients=list(settings.NOTIFICATION_RECIPIENTS),
            from_name=settings.MAIL_FROM_NAME,
            timeout=settings.SMTP_TIMEOUT,
        )
    return LogNotifier()


async def dispatch(notifier, event: str, payload: Dict[str, Any]) -> NotificationResult:
    """Send a notification, logging instead of raising on any failure"""
    try:
        result = await notifier.notify(event, payload)
    except Exception as e:
        logger.exception("Notification %s raised", event)
        return NotificationResult(success=False, error=str(e))
    if not result.success:
        logger.warning("Notification %s failed: %s", event, result.error)
    return result
