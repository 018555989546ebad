"""Exceptions raised by the notification core."""

from __future__ import annotations


class NotificationCoreError(ValueError):
    """Base class for contract violations reported by the core."""


class InvalidAudienceSpec(NotificationCoreError):
    """The audience specification is malformed or contradictory."""


class IllegalTransition(NotificationCoreError):
    """A lifecycle transition outside the allowed table was attempted."""

    reason = "illegal_transition"

    def __init__(self, record_id: str, source: str, target: str, detail: str | None = None) -> None:
        self.record_id = record_id
        self.source = source
        self.target = target
        message = f"Notification {record_id} cannot move from '{source}' to '{target}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class RetryLimitExceeded(IllegalTransition):
    """A failed notification was redispatched more times than allowed."""

    reason = "retry_limit_exceeded"


class UnknownRecipient(NotificationCoreError):
    """A specific recipient id is not present in the directory snapshot."""

    def __init__(self, recipient_id: str) -> None:
        self.recipient_id = recipient_id
        super().__init__(f"Recipient {recipient_id} is not in the directory")


class ConfirmationRequired(NotificationCoreError):
    """A destructive batch operation needs an explicit confirmation token."""

    def __init__(self, count: int, message: str | None = None) -> None:
        self.count = count
        super().__init__(
            message
            or f"Deleting all {count} notifications in an unfiltered view requires confirmation"
        )


__all__ = [
    "NotificationCoreError",
    "InvalidAudienceSpec",
    "IllegalTransition",
    "RetryLimitExceeded",
    "UnknownRecipient",
    "ConfirmationRequired",
]
