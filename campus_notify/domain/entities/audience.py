"""Audience specifications and the directory snapshot they resolve against."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from campus_notify.domain.errors import UnknownRecipient


class TargetType(str, Enum):
    ALL_USERS = "all_users"
    ALL_STUDENTS = "all_students"
    ALL_TEACHERS = "all_teachers"
    ROLE_BASED = "role_based"
    CLASS_STUDENTS = "class_students"
    COURSE_STUDENTS = "course_students"
    DEPARTMENTS = "departments"
    SPECIFIC_STUDENTS = "specific_students"

    @classmethod
    def _missing_(cls, value: object) -> "TargetType | None":
        # The authoring form historically submitted "classes".
        if isinstance(value, str) and value.strip().lower() == "classes":
            return cls.CLASS_STUDENTS
        return None


@dataclass(frozen=True)
class TargetAudienceSpec:
    """Declarative description of who should receive a notification."""

    target_type: TargetType
    department_ids: tuple[str, ...] = ()
    class_ids: tuple[str, ...] = ()
    course_ids: tuple[str, ...] = ()
    student_ids: tuple[str, ...] = ()
    roles: tuple[str, ...] = ()


@dataclass(frozen=True)
class Student:
    id: str
    name: str
    student_number: str = ""
    email: str = ""
    class_id: str | None = None
    department_id: str | None = None


@dataclass(frozen=True)
class Teacher:
    id: str
    name: str
    email: str = ""


@dataclass(frozen=True)
class SchoolClass:
    id: str
    name: str
    department_id: str
    students: tuple[Student, ...] = ()


@dataclass(frozen=True)
class Department:
    id: str
    name: str
    classes: tuple[SchoolClass, ...] = ()


@dataclass(frozen=True)
class Course:
    id: str
    name: str
    student_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class Directory:
    """Read-only roster snapshot supplied by the user service."""

    departments: tuple[Department, ...] = ()
    courses: tuple[Course, ...] = ()
    teachers: tuple[Teacher, ...] = ()

    def iter_classes(self):
        for department in self.departments:
            yield from department.classes

    def iter_students(self):
        for school_class in self.iter_classes():
            yield from school_class.students

    def student_ids(self) -> list[str]:
        """Return every student id once, in directory order."""

        seen: set[str] = set()
        ordered: list[str] = []
        for student in self.iter_students():
            if student.id not in seen:
                seen.add(student.id)
                ordered.append(student.id)
        return ordered


@dataclass(frozen=True)
class AudienceResolution:
    """Outcome of resolving a spec: recipients plus the ids that were dropped."""

    recipient_ids: tuple[str, ...]
    dropped: tuple[UnknownRecipient, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.recipient_ids)


__all__ = [
    "TargetType",
    "TargetAudienceSpec",
    "Student",
    "Teacher",
    "SchoolClass",
    "Department",
    "Course",
    "Directory",
    "AudienceResolution",
]
