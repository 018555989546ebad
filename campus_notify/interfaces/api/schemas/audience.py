"""Pydantic models describing audience specifications."""

from __future__ import annotations

from pydantic import BaseModel, Field

from campus_notify.domain.entities import TargetAudienceSpec, TargetType


class TargetAudiencePayload(BaseModel):
    """Audiencia declarada por quien redacta la notificación."""

    target_type: TargetType
    department_ids: list[str] = Field(default_factory=list)
    class_ids: list[str] = Field(default_factory=list)
    course_ids: list[str] = Field(default_factory=list)
    student_ids: list[str] = Field(default_factory=list)
    roles: list[str] = Field(default_factory=list)

    def to_domain(self) -> TargetAudienceSpec:
        return TargetAudienceSpec(
            target_type=self.target_type,
            department_ids=tuple(self.department_ids),
            class_ids=tuple(self.class_ids),
            course_ids=tuple(self.course_ids),
            student_ids=tuple(self.student_ids),
            roles=tuple(self.roles),
        )


class AudiencePreviewRead(BaseModel):
    """Cantidad de destinatarios que alcanzaría la audiencia."""

    recipient_count: int
    dropped_ids: list[str] = Field(default_factory=list)


__all__ = ["AudiencePreviewRead", "TargetAudiencePayload"]
