from .audience import AudiencePreviewRead, TargetAudiencePayload
from .batch import (
    BatchRequest,
    BatchResultRead,
    ConfirmationRead,
    ConfirmationRequest,
    SkippedRead,
)
from .directory import DirectorySnapshot, StudentRead
from .filters import NotificationFilterParams
from .notification import (
    BroadcastCreate,
    BroadcastUpdate,
    FailureReport,
    FilteredViewRead,
    NotificationRead,
    RedispatchRequest,
    SenderPayload,
)
from .stats import ActivityBucketRead, StatsSnapshotRead

__all__ = [
    "ActivityBucketRead",
    "AudiencePreviewRead",
    "BatchRequest",
    "BatchResultRead",
    "BroadcastCreate",
    "BroadcastUpdate",
    "ConfirmationRead",
    "ConfirmationRequest",
    "DirectorySnapshot",
    "FailureReport",
    "FilteredViewRead",
    "NotificationFilterParams",
    "NotificationRead",
    "RedispatchRequest",
    "SenderPayload",
    "SkippedRead",
    "StatsSnapshotRead",
    "StudentRead",
    "TargetAudiencePayload",
]
