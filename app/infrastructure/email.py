"""Utility helpers for sending notification alert emails via SendGrid."""

from __future__ import annotations

import json
import logging
from html import escape
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.config import get_settings
from app.domain.entities import Notification

logger = logging.getLogger(__name__)


def _describe_sendgrid_body(body: Any) -> str | None:
    """Return a readable description for a SendGrid error payload."""

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body
    if not body:
        return None

    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list):
            messages = [
                str(item["message"])
                for item in errors
                if isinstance(item, dict) and item.get("message")
            ]
            if messages:
                return "; ".join(messages)
        return json.dumps(body, default=str)
    if isinstance(body, list):
        return "; ".join(str(item) for item in body)
    return str(body)


def _log_sendgrid_failure(status_code: Any, body: Any) -> None:
    details = _describe_sendgrid_body(body)
    if details:
        logger.error("SendGrid API request failed with status %s: %s", status_code, details)
    else:
        logger.error("SendGrid API request failed with status %s", status_code)


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        status_code = getattr(exc, "status_code", None)
        if status_code is None:
            logger.exception("Error sending email via SendGrid: %s", exc)
        else:
            _log_sendgrid_failure(status_code, getattr(exc, "body", None))
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        _log_sendgrid_failure(status_code, getattr(response, "body", None))
        return False

    return True


def send_notification_alert(notification: Notification) -> bool:
    """Forward a notification to the administrator mailbox when configured."""

    recipient = get_settings().notification_email_recipient
    if not recipient:
        return False

    treatment = notification.category.treatment
    subject = f"[{treatment.title}] {notification.message}"
    if len(subject) > 120:
        subject = subject[:117] + "..."
    parts = [
        f"<p><strong>{escape(treatment.title)}</strong></p>",
        f"<p>{escape(notification.message)}</p>",
    ]
    link = notification.resolved_link()
    if link:
        parts.append(f'<p><a href="{escape(link, quote=True)}">{escape(treatment.action_label)}</a></p>')
    if notification.created_at is not None:
        parts.append(f"<p><small>{notification.created_at.isoformat()}</small></p>")
    return send_email(subject, "".join(parts), recipient)


__all__ = ["send_email", "send_notification_alert"]
