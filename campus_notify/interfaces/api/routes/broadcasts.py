"""Rutas para crear y gestionar difusiones de notificaciones."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, status

from campus_notify.application.use_cases.broadcasts import (
    cancel_broadcast,
    create_broadcast,
    dispatch_broadcast,
    fire_due_scheduled,
    update_broadcast,
)
from campus_notify.application.use_cases.lifecycle import LifecycleEngine
from campus_notify.domain.entities import Directory, NotificationStatus, Sender
from campus_notify.infrastructure.locks import RecordLocks
from campus_notify.interfaces.api.dependencies import (
    get_directory,
    get_engine,
    get_locks,
    get_now,
    get_store,
)
from campus_notify.interfaces.api.routes_helpers import (
    not_found,
    record_to_read_model,
    to_http_exception,
)
from campus_notify.interfaces.api.schemas import (
    BatchResultRead,
    BroadcastCreate,
    BroadcastUpdate,
    NotificationRead,
)

router = APIRouter(prefix="/broadcasts", tags=["broadcasts"])


@router.post("/", response_model=list[NotificationRead], status_code=status.HTTP_201_CREATED)
def create_broadcast_route(
    payload: BroadcastCreate,
    store=Depends(get_store),
    directory: Directory = Depends(get_directory),
    engine: LifecycleEngine = Depends(get_engine),
    now: datetime = Depends(get_now),
) -> list[NotificationRead]:
    """Resuelve la audiencia y crea una notificación por destinatario."""

    sender = Sender(id=payload.sender.id, role=payload.sender.role, name=payload.sender.name)
    try:
        records = create_broadcast(payload.to_domain(), directory, sender=sender, now=now)
    except ValueError as exc:
        raise to_http_exception(exc) from exc

    if payload.dispatch_now:
        dispatch_broadcast(engine, records, now=now)

    store.add_many(records)
    return [record_to_read_model(record) for record in records]


@router.post("/fire-due", response_model=BatchResultRead)
def fire_due_route(
    store=Depends(get_store),
    engine: LifecycleEngine = Depends(get_engine),
    locks: RecordLocks = Depends(get_locks),
    now: datetime = Depends(get_now),
) -> BatchResultRead:
    """Envía las notificaciones programadas cuya hora ya llegó."""

    scheduled = [
        record
        for record in store.list()
        if NotificationStatus(record.status) is NotificationStatus.SCHEDULED
    ]
    ids = [record.id for record in scheduled]
    with locks.hold(ids):
        records = store.get_many(ids)
        result = fire_due_scheduled(engine, records, now=now)
        store.save_many(records)
    return BatchResultRead.from_result(result)


@router.post("/{broadcast_id}/dispatch", response_model=BatchResultRead)
def dispatch_broadcast_route(
    broadcast_id: str,
    store=Depends(get_store),
    engine: LifecycleEngine = Depends(get_engine),
    locks: RecordLocks = Depends(get_locks),
    now: datetime = Depends(get_now),
) -> BatchResultRead:
    """Envía de inmediato los borradores de una difusión."""

    records = _load_broadcast(store, broadcast_id)
    with locks.hold(record.id for record in records):
        records = store.get_many([record.id for record in records])
        result = dispatch_broadcast(engine, records, now=now)
        store.save_many(records)
    return BatchResultRead.from_result(result)


@router.post("/{broadcast_id}/cancel", response_model=BatchResultRead)
def cancel_broadcast_route(
    broadcast_id: str,
    store=Depends(get_store),
    engine: LifecycleEngine = Depends(get_engine),
    locks: RecordLocks = Depends(get_locks),
    now: datetime = Depends(get_now),
) -> BatchResultRead:
    """Cancela las notificaciones de la difusión que aún no se enviaron."""

    records = _load_broadcast(store, broadcast_id)
    with locks.hold(record.id for record in records):
        records = store.get_many([record.id for record in records])
        result = cancel_broadcast(engine, records, now=now)
        store.save_many(records)
    return BatchResultRead.from_result(result)


@router.patch("/{broadcast_id}", response_model=BatchResultRead)
def update_broadcast_route(
    broadcast_id: str,
    payload: BroadcastUpdate,
    store=Depends(get_store),
    locks: RecordLocks = Depends(get_locks),
) -> BatchResultRead:
    """Edita el contenido de una difusión pendiente de envío."""

    records = _load_broadcast(store, broadcast_id)
    with locks.hold(record.id for record in records):
        records = store.get_many([record.id for record in records])
        try:
            result = update_broadcast(records, payload.changes())
        except ValueError as exc:
            raise to_http_exception(exc) from exc
        store.save_many(records)
    return BatchResultRead.from_result(result)


def _load_broadcast(store, broadcast_id: str):
    records = list(store.list_by_broadcast(broadcast_id))
    if not records:
        raise not_found("Difusión no encontrada")
    return records


__all__ = ["router"]
