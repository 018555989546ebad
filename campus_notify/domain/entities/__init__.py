"""Domain entities exposed by the application."""

from .audience import (
    AudienceResolution,
    Course,
    Department,
    Directory,
    SchoolClass,
    Student,
    TargetAudienceSpec,
    TargetType,
    Teacher,
)
from .batch import (
    BatchOperation,
    BatchResult,
    BatchScope,
    ConfirmationToken,
    SkippedRecord,
)
from .bulk_request import BulkNotificationRequest, Sender
from .filter_spec import DateRange, FilteredView, FilterSpec, SortField, SortOrder
from .notification import (
    NotificationCategory,
    NotificationPriority,
    NotificationRecord,
    NotificationStatus,
    NotificationType,
    UserRole,
)
from .stats import ActivityBucket, Lookback, StatsSnapshot
from .template import NotificationTemplate, TemplateVariable

__all__ = [
    "AudienceResolution",
    "Course",
    "Department",
    "Directory",
    "SchoolClass",
    "Student",
    "TargetAudienceSpec",
    "TargetType",
    "Teacher",
    "BatchOperation",
    "BatchResult",
    "BatchScope",
    "ConfirmationToken",
    "SkippedRecord",
    "BulkNotificationRequest",
    "Sender",
    "DateRange",
    "FilteredView",
    "FilterSpec",
    "SortField",
    "SortOrder",
    "NotificationCategory",
    "NotificationPriority",
    "NotificationRecord",
    "NotificationStatus",
    "NotificationType",
    "UserRole",
    "ActivityBucket",
    "Lookback",
    "StatsSnapshot",
    "NotificationTemplate",
    "TemplateVariable",
]
