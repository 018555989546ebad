"""Validation helpers for audience specifications."""

from campus_notify.domain.entities import TargetAudienceSpec, TargetType, UserRole
from campus_notify.domain.errors import InvalidAudienceSpec

_QUALIFIER_FIELDS = ("department_ids", "class_ids", "course_ids", "student_ids", "roles")

# Qualifier list each target type requires; ``None`` means it takes none.
REQUIRED_QUALIFIER: dict[TargetType, str | None] = {
    TargetType.ALL_USERS: None,
    TargetType.ALL_STUDENTS: None,
    TargetType.ALL_TEACHERS: None,
    TargetType.ROLE_BASED: "roles",
    TargetType.CLASS_STUDENTS: "class_ids",
    TargetType.COURSE_STUDENTS: "course_ids",
    TargetType.DEPARTMENTS: "department_ids",
    TargetType.SPECIFIC_STUDENTS: "student_ids",
}

_RESOLVABLE_ROLES = {UserRole.STUDENT.value, UserRole.TEACHER.value}


def ensure_valid_audience(spec: TargetAudienceSpec) -> TargetAudienceSpec:
    """Return ``spec`` unchanged or raise :class:`InvalidAudienceSpec`."""

    try:
        target_type = TargetType(spec.target_type)
    except ValueError as exc:
        raise InvalidAudienceSpec(f"Unknown target type '{spec.target_type}'") from exc

    required = REQUIRED_QUALIFIER[target_type]
    for name in _QUALIFIER_FIELDS:
        if name == required:
            continue
        if getattr(spec, name):
            raise InvalidAudienceSpec(
                f"'{name}' must be empty when target type is '{target_type.value}'"
            )

    if required is not None and not any(_clean(getattr(spec, required))):
        raise InvalidAudienceSpec(
            f"Target type '{target_type.value}' requires at least one entry in '{required}'"
        )

    if target_type is TargetType.ROLE_BASED:
        unsupported = sorted({role for role in spec.roles if role not in _RESOLVABLE_ROLES})
        if unsupported:
            raise InvalidAudienceSpec(
                f"Roles {', '.join(unsupported)} cannot be used as an audience"
            )

    return spec


def _clean(values) -> list[str]:
    return [value.strip() for value in values if isinstance(value, str) and value.strip()]


__all__ = ["ensure_valid_audience", "REQUIRED_QUALIFIER"]
