"""Expand an audience specification into concrete recipient identifiers."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from campus_notify.domain.entities import (
    AudienceResolution,
    Directory,
    TargetAudienceSpec,
    TargetType,
    UserRole,
)
from campus_notify.domain.errors import UnknownRecipient

from .validators import ensure_valid_audience

logger = logging.getLogger(__name__)


def resolve_audience(spec: TargetAudienceSpec, directory: Directory) -> set[str]:
    """Return the deduplicated set of recipient ids described by ``spec``."""

    return set(resolve_audience_detailed(spec, directory).recipient_ids)


def resolve_audience_detailed(
    spec: TargetAudienceSpec, directory: Directory
) -> AudienceResolution:
    """Resolve ``spec`` keeping directory order and reporting dropped ids.

    Unknown student ids in a ``specific_students`` spec are dropped rather than
    failing the whole resolution, so valid recipients still get the message.
    """

    ensure_valid_audience(spec)
    target_type = TargetType(spec.target_type)
    dropped: list[UnknownRecipient] = []

    if target_type is TargetType.ALL_STUDENTS:
        candidates = directory.student_ids()
    elif target_type is TargetType.ALL_TEACHERS:
        candidates = [teacher.id for teacher in directory.teachers]
    elif target_type is TargetType.ALL_USERS:
        candidates = directory.student_ids() + [teacher.id for teacher in directory.teachers]
    elif target_type is TargetType.ROLE_BASED:
        candidates = _role_members(directory, spec.roles)
    elif target_type is TargetType.DEPARTMENTS:
        candidates = _department_members(directory, spec.department_ids)
    elif target_type is TargetType.CLASS_STUDENTS:
        candidates = _class_members(directory, spec.class_ids)
    elif target_type is TargetType.COURSE_STUDENTS:
        candidates = _course_members(directory, spec.course_ids)
    else:
        candidates, dropped = _specific_students(directory, spec.student_ids)

    recipients = tuple(_unique(candidates))
    logger.debug(
        "Resolved audience %s to %s recipients (%s dropped)",
        target_type.value,
        len(recipients),
        len(dropped),
    )
    return AudienceResolution(recipient_ids=recipients, dropped=tuple(dropped))


def preview_audience(spec: TargetAudienceSpec, directory: Directory) -> int:
    """Return how many recipients ``spec`` would reach."""

    return len(resolve_audience_detailed(spec, directory))


def _unique(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    unique: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        unique.append(value)
    return unique


def _role_members(directory: Directory, roles: Iterable[str]) -> list[str]:
    wanted = set(roles)
    members: list[str] = []
    if UserRole.STUDENT.value in wanted:
        members.extend(directory.student_ids())
    if UserRole.TEACHER.value in wanted:
        members.extend(teacher.id for teacher in directory.teachers)
    return members


def _department_members(directory: Directory, department_ids: Iterable[str]) -> list[str]:
    wanted = set(department_ids)
    known = {department.id for department in directory.departments}
    _log_unknown("department", wanted - known)

    members: list[str] = []
    for department in directory.departments:
        if department.id not in wanted:
            continue
        for school_class in department.classes:
            members.extend(student.id for student in school_class.students)
    return members


def _class_members(directory: Directory, class_ids: Iterable[str]) -> list[str]:
    wanted = set(class_ids)
    members: list[str] = []
    known: set[str] = set()
    for school_class in directory.iter_classes():
        known.add(school_class.id)
        if school_class.id in wanted:
            members.extend(student.id for student in school_class.students)
    _log_unknown("class", wanted - known)
    return members


def _course_members(directory: Directory, course_ids: Iterable[str]) -> list[str]:
    wanted = set(course_ids)
    enrolled_students = set(directory.student_ids())
    members: list[str] = []
    known: set[str] = set()
    for course in directory.courses:
        known.add(course.id)
        if course.id not in wanted:
            continue
        for student_id in course.student_ids:
            if student_id in enrolled_students:
                members.append(student_id)
            else:
                logger.warning(
                    "Course %s lists student %s who is not in the directory",
                    course.id,
                    student_id,
                )
    _log_unknown("course", wanted - known)
    return members


def _specific_students(
    directory: Directory, student_ids: Iterable[str]
) -> tuple[list[str], list[UnknownRecipient]]:
    known = set(directory.student_ids())
    members: list[str] = []
    dropped: list[UnknownRecipient] = []
    for student_id in student_ids:
        if student_id in known:
            members.append(student_id)
            continue
        unknown = UnknownRecipient(student_id)
        logger.warning("Dropping recipient: %s", unknown)
        dropped.append(unknown)
    return members, dropped


def _log_unknown(kind: str, ids: set[str]) -> None:
    if ids:
        logger.warning("Ignoring unknown %s ids: %s", kind, ", ".join(sorted(ids)))


__all__ = ["resolve_audience", "resolve_audience_detailed", "preview_audience"]
