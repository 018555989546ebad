"""Multi-select over a filtered view and the batch operations it drives."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from hashlib import sha256

from campus_notify.application.use_cases.lifecycle import LifecycleEngine
from campus_notify.domain.entities import (
    BatchOperation,
    BatchResult,
    BatchScope,
    ConfirmationToken,
    FilteredView,
    FilterSpec,
    NotificationRecord,
    NotificationStatus,
)
from campus_notify.domain.errors import ConfirmationRequired, IllegalTransition

logger = logging.getLogger(__name__)

_EMPTY_VIEW = FilteredView(records=(), total_count=0, spec=FilterSpec())


class SelectionManager:
    """Track the records a user ticked in one view and act on them.

    The selection is always a subset of the ids visible in the current view:
    switching filters silently drops anything that is no longer on screen, so
    a batch never touches records the user cannot see.
    """

    def __init__(self, engine: LifecycleEngine, view: FilteredView | None = None) -> None:
        self._engine = engine
        self._view = view or _EMPTY_VIEW
        self._selected: set[str] = set()
        self._out_of_view: list[str] = []

    @property
    def view(self) -> FilteredView:
        return self._view

    @property
    def selected(self) -> frozenset[str]:
        return frozenset(self._selected)

    def is_selected(self, record_id: str) -> bool:
        return record_id in self._selected

    def set_view(self, view: FilteredView) -> None:
        self._view = view
        self._selected &= set(view.ids)

    def select_all(self, view: FilteredView | None = None) -> frozenset[str]:
        if view is not None:
            self._view = view
        self._selected = set(self._view.ids)
        self._out_of_view = []
        return self.selected

    def clear_selection(self) -> None:
        self._selected.clear()
        self._out_of_view = []

    def toggle(self, record_id: str) -> bool:
        """Flip ``record_id`` and return whether it is now selected."""

        if record_id in self._selected:
            self._selected.discard(record_id)
            return False
        if record_id not in self._view.ids:
            return False
        self._selected.add(record_id)
        return True

    def select(self, record_ids: Iterable[str]) -> frozenset[str]:
        """Replace the selection with ``record_ids`` that are in view.

        Ids missing from the view are kept aside and reported as
        ``not_in_view`` skips by the next ``selected`` batch.
        """

        visible = set(self._view.ids)
        requested = list(dict.fromkeys(record_ids))
        self._selected = {record_id for record_id in requested if record_id in visible}
        self._out_of_view = [record_id for record_id in requested if record_id not in visible]
        return self.selected

    def targets(self, scope: BatchScope) -> list[NotificationRecord]:
        """Return the records ``scope`` designates, in view order."""

        scope = BatchScope(scope)
        if scope is BatchScope.SELECTED:
            return [record for record in self._view.records if record.id in self._selected]
        if scope is BatchScope.ALL_READ:
            return [
                record
                for record in self._view.records
                if NotificationStatus(record.status) is NotificationStatus.READ
            ]
        return list(self._view.records)

    def requires_confirmation(self, operation: BatchOperation, scope: BatchScope) -> bool:
        return (
            BatchOperation(operation) is BatchOperation.DELETE
            and BatchScope(scope) is BatchScope.ALL_IN_VIEW
            and self._view.spec.is_unfiltered()
        )

    def request_confirmation(
        self, operation: BatchOperation, scope: BatchScope
    ) -> ConfirmationToken:
        """Describe what ``operation`` would touch so a human can confirm it."""

        targets = self.targets(scope)
        return ConfirmationToken(
            operation=BatchOperation(operation),
            scope=BatchScope(scope),
            count=len(targets),
            digest=_digest(record.id for record in targets),
        )

    def apply_batch(
        self,
        operation: BatchOperation,
        scope: BatchScope = BatchScope.SELECTED,
        *,
        confirmation_token: ConfirmationToken | str | None = None,
        now: datetime | None = None,
    ) -> BatchResult:
        """Run ``operation`` over ``scope`` record by record.

        Records whose transition is illegal are reported in
        ``BatchResult.skipped``; the rest are processed. The selection is
        cleared once the batch ran, whatever the outcome.
        """

        operation = BatchOperation(operation)
        scope = BatchScope(scope)
        targets = self.targets(scope)

        if self.requires_confirmation(operation, scope):
            expected = self.request_confirmation(operation, scope)
            if confirmation_token is None or str(confirmation_token) != str(expected):
                raise ConfirmationRequired(expected.count)

        result = BatchResult()
        if scope is BatchScope.SELECTED:
            for record_id in self._out_of_view:
                result.skip(record_id, "not_in_view", "the notification is no longer in the current view")
        try:
            for record in targets:
                try:
                    self._apply_one(operation, record, now=now)
                except IllegalTransition as exc:
                    result.skip(record.id, exc.reason, str(exc))
                else:
                    result.succeeded.append(record.id)
        finally:
            self.clear_selection()

        logger.info(
            "Batch %s over %s: %s succeeded, %s skipped",
            operation.value,
            scope.value,
            len(result.succeeded),
            len(result.skipped),
        )
        if result.skipped:
            logger.warning(
                "Skipped notifications in batch %s: %s",
                operation.value,
                ", ".join(result.skipped_ids),
            )
        return result

    def _apply_one(
        self, operation: BatchOperation, record: NotificationRecord, *, now: datetime | None
    ) -> None:
        if operation is BatchOperation.MARK_READ:
            self._engine.mark_read(record, now=now)
        elif operation is BatchOperation.MARK_UNREAD:
            self._engine.mark_unread(record, now=now)
        else:
            self._engine.archive(record, now=now)


def _digest(record_ids: Iterable[str]) -> str:
    joined = "\n".join(sorted(record_ids))
    return sha256(joined.encode()).hexdigest()[:16]


__all__ = ["SelectionManager"]
