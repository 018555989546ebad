"""Rutas del selector de audiencia."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from campus_notify.application.use_cases.audience import (
    resolve_audience_detailed,
    search_students,
)
from campus_notify.domain.entities import Directory
from campus_notify.interfaces.api.dependencies import get_directory
from campus_notify.interfaces.api.routes_helpers import to_http_exception
from campus_notify.interfaces.api.schemas import (
    AudiencePreviewRead,
    StudentRead,
    TargetAudiencePayload,
)

router = APIRouter(prefix="/audience", tags=["audience"])


@router.post("/preview", response_model=AudiencePreviewRead)
def preview_audience_route(
    payload: TargetAudiencePayload,
    directory: Directory = Depends(get_directory),
) -> AudiencePreviewRead:
    """Calcula cuántos destinatarios alcanzaría la audiencia indicada."""

    try:
        resolution = resolve_audience_detailed(payload.to_domain(), directory)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return AudiencePreviewRead(
        recipient_count=len(resolution),
        dropped_ids=[entry.recipient_id for entry in resolution.dropped],
    )


@router.get("/students", response_model=list[StudentRead])
def search_students_route(
    search: str | None = None,
    directory: Directory = Depends(get_directory),
) -> list[StudentRead]:
    """Busca estudiantes por nombre, matrícula o correo."""

    return [
        StudentRead(
            id=student.id,
            name=student.name,
            student_number=student.student_number,
            email=student.email,
            class_id=student.class_id,
            department_id=student.department_id,
        )
        for student in search_students(directory, search)
    ]


__all__ = ["router"]
