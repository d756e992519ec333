from .analytics import AnalyticsEventCreate, AnalyticsEventRead, MetricsSnapshotRead
from .assistant import BlogDraftRequest, BlogDraftResponse
from .auth import Token
from .contact import ContactMessageCreate, ContactMessageRead
from .notification import (
    BulkDeletedRead,
    BulkModifiedRead,
    NotificationCreate,
    NotificationRead,
    UnreadCountRead,
)

__all__ = [
    "AnalyticsEventCreate",
    "AnalyticsEventRead",
    "BlogDraftRequest",
    "BlogDraftResponse",
    "BulkDeletedRead",
    "BulkModifiedRead",
    "ContactMessageCreate",
    "ContactMessageRead",
    "MetricsSnapshotRead",
    "NotificationCreate",
    "NotificationRead",
    "Token",
    "UnreadCountRead",
]
