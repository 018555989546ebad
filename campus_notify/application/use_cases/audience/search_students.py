"""Roster search used by the audience picker."""

from __future__ import annotations

from campus_notify.domain.entities import Directory, Student


def search_students(directory: Directory, term: str | None) -> list[Student]:
    """Return students whose name, student number or email contains ``term``."""

    students: list[Student] = []
    seen: set[str] = set()
    for student in directory.iter_students():
        if student.id in seen:
            continue
        seen.add(student.id)
        students.append(student)

    needle = (term or "").strip().lower()
    if not needle:
        return students

    return [
        student
        for student in students
        if needle in student.name.lower()
        or needle in student.student_number.lower()
        or needle in student.email.lower()
    ]


__all__ = ["search_students"]
