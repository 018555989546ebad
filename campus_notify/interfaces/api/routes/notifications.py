"""Rutas del centro de notificaciones: listado, acciones y operaciones masivas."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from fastapi import APIRouter, Depends

from campus_notify.application.use_cases.filtering import filter_notifications
from campus_notify.application.use_cases.lifecycle import LifecycleEngine
from campus_notify.application.use_cases.selection import SelectionManager
from campus_notify.application.use_cases.stats import aggregate_stats
from campus_notify.domain.entities import FilteredView, Lookback, NotificationRecord
from campus_notify.infrastructure.locks import RecordLocks
from campus_notify.interfaces.api.dependencies import (
    get_engine,
    get_filter_params,
    get_locks,
    get_now,
    get_store,
)
from campus_notify.interfaces.api.routes_helpers import (
    not_found,
    record_to_read_model,
    refresh_view,
    to_http_exception,
)
from campus_notify.interfaces.api.schemas import (
    BatchRequest,
    BatchResultRead,
    ConfirmationRead,
    ConfirmationRequest,
    FailureReport,
    FilteredViewRead,
    NotificationFilterParams,
    NotificationRead,
    RedispatchRequest,
    StatsSnapshotRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=FilteredViewRead)
def list_notifications(
    params: NotificationFilterParams = Depends(get_filter_params),
    store=Depends(get_store),
    now: datetime = Depends(get_now),
) -> FilteredViewRead:
    """Devuelve la página de notificaciones que coincide con los filtros."""

    view = filter_notifications(
        store.list(recipient_id=params.recipient_id), params.to_domain(), now=now
    )
    return FilteredViewRead(
        records=[record_to_read_model(record) for record in view.records],
        total_count=view.total_count,
    )


@router.get("/stats", response_model=StatsSnapshotRead)
def read_stats(
    lookback: Lookback = Lookback.WEEK,
    recipient_id: str | None = None,
    sender_id: str | None = None,
    store=Depends(get_store),
    now: datetime = Depends(get_now),
) -> StatsSnapshotRead:
    """Devuelve los indicadores del panel para la ventana solicitada."""

    records = [
        record
        for record in store.list(recipient_id=recipient_id)
        if sender_id is None or record.sender_id == sender_id
    ]
    snapshot = aggregate_stats(records, lookback=lookback, now=now)
    return StatsSnapshotRead.model_validate(snapshot)


@router.post("/batch/confirmation", response_model=ConfirmationRead)
def request_batch_confirmation(
    payload: ConfirmationRequest,
    store=Depends(get_store),
    engine: LifecycleEngine = Depends(get_engine),
    now: datetime = Depends(get_now),
) -> ConfirmationRead:
    """Genera el token de confirmación para una operación masiva."""

    manager = SelectionManager(engine, _build_view(store, payload.filters, now))
    manager.select(payload.selected_ids)
    token = manager.request_confirmation(payload.operation, payload.scope)
    return ConfirmationRead(
        token=str(token),
        count=token.count,
        required=manager.requires_confirmation(payload.operation, payload.scope),
    )


@router.post("/batch", response_model=BatchResultRead)
def apply_batch(
    payload: BatchRequest,
    store=Depends(get_store),
    engine: LifecycleEngine = Depends(get_engine),
    locks: RecordLocks = Depends(get_locks),
    now: datetime = Depends(get_now),
) -> BatchResultRead:
    """Aplica marcar leído, no leído o eliminar sobre la vista actual."""

    view = _build_view(store, payload.filters, now)
    with locks.hold(view.ids):
        view = refresh_view(view, store.get_many(view.ids))
        manager = SelectionManager(engine, view)
        manager.select(payload.selected_ids)
        try:
            result = manager.apply_batch(
                payload.operation,
                payload.scope,
                confirmation_token=payload.confirmation_token,
                now=now,
            )
        except ValueError as exc:
            raise to_http_exception(exc) from exc
        store.save_many(view.records)
    return BatchResultRead.from_result(result)


@router.post("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: str,
    store=Depends(get_store),
    engine: LifecycleEngine = Depends(get_engine),
    locks: RecordLocks = Depends(get_locks),
    now: datetime = Depends(get_now),
) -> NotificationRead:
    """Marca una notificación como leída."""

    return _transition_one(store, locks, notification_id, lambda record: engine.mark_read(record, now=now))


@router.post("/{notification_id}/unread", response_model=NotificationRead)
def mark_unread(
    notification_id: str,
    store=Depends(get_store),
    engine: LifecycleEngine = Depends(get_engine),
    locks: RecordLocks = Depends(get_locks),
    now: datetime = Depends(get_now),
) -> NotificationRead:
    """Devuelve una notificación leída al estado entregada."""

    return _transition_one(store, locks, notification_id, lambda record: engine.mark_unread(record, now=now))


@router.post("/{notification_id}/delivered", response_model=NotificationRead)
def confirm_delivery(
    notification_id: str,
    store=Depends(get_store),
    engine: LifecycleEngine = Depends(get_engine),
    locks: RecordLocks = Depends(get_locks),
    now: datetime = Depends(get_now),
) -> NotificationRead:
    """Confirma que la notificación llegó al destinatario."""

    return _transition_one(
        store, locks, notification_id, lambda record: engine.confirm_delivery(record, now=now)
    )


@router.post("/{notification_id}/failed", response_model=NotificationRead)
def report_failure(
    notification_id: str,
    payload: FailureReport,
    store=Depends(get_store),
    engine: LifecycleEngine = Depends(get_engine),
    locks: RecordLocks = Depends(get_locks),
    now: datetime = Depends(get_now),
) -> NotificationRead:
    """Registra un error de envío informado por el transporte."""

    return _transition_one(
        store, locks, notification_id, lambda record: engine.mark_failed(record, payload.reason, now=now)
    )


@router.post("/{notification_id}/redispatch", response_model=NotificationRead)
def redispatch(
    notification_id: str,
    payload: RedispatchRequest,
    store=Depends(get_store),
    engine: LifecycleEngine = Depends(get_engine),
    locks: RecordLocks = Depends(get_locks),
    now: datetime = Depends(get_now),
) -> NotificationRead:
    """Vuelve a programar una notificación fallida."""

    return _transition_one(
        store,
        locks,
        notification_id,
        lambda record: engine.redispatch(
            record, attempt=payload.attempt, scheduled_at=payload.scheduled_at, now=now
        ),
    )


@router.post("/{notification_id}/click", response_model=NotificationRead)
def record_click(
    notification_id: str,
    store=Depends(get_store),
    engine: LifecycleEngine = Depends(get_engine),
    locks: RecordLocks = Depends(get_locks),
    now: datetime = Depends(get_now),
) -> NotificationRead:
    """Registra un clic en el enlace de la notificación."""

    return _transition_one(store, locks, notification_id, lambda record: engine.record_click(record, now=now))


@router.post("/{notification_id}/archive", response_model=NotificationRead)
def archive(
    notification_id: str,
    store=Depends(get_store),
    engine: LifecycleEngine = Depends(get_engine),
    locks: RecordLocks = Depends(get_locks),
    now: datetime = Depends(get_now),
) -> NotificationRead:
    """Archiva (elimina de las vistas) una notificación."""

    return _transition_one(store, locks, notification_id, lambda record: engine.archive(record, now=now))


def _build_view(store, params: NotificationFilterParams, now: datetime) -> FilteredView:
    return filter_notifications(
        store.list(recipient_id=params.recipient_id), params.to_domain(), now=now
    )


def _transition_one(
    store,
    locks: RecordLocks,
    notification_id: str,
    action: Callable[[NotificationRecord], NotificationRecord],
) -> NotificationRead:
    with locks.hold([notification_id]):
        record = store.get(notification_id)
        if record is None:
            raise not_found()
        try:
            action(record)
        except ValueError as exc:
            raise to_http_exception(exc) from exc
        store.save_many([record])
    return record_to_read_model(record)


__all__ = ["router"]
