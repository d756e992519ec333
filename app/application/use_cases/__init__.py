"""Aggregate application use cases."""

from .analytics import MetricsCollector, MetricsMonitor, compute_snapshot, record_event
from .auth import authenticate_admin
from .contact import list_contact_messages, submit_contact_message

__all__ = [
    "MetricsCollector",
    "MetricsMonitor",
    "authenticate_admin",
    "compute_snapshot",
    "list_contact_messages",
    "record_event",
    "submit_contact_message",
]
