"""Shared fixtures for the notification core tests."""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from campus_notify.application.use_cases.lifecycle import LifecycleEngine
from campus_notify.domain.entities import (
    Course,
    Department,
    Directory,
    NotificationCategory,
    NotificationPriority,
    NotificationRecord,
    NotificationStatus,
    NotificationType,
    SchoolClass,
    Student,
    Teacher,
    UserRole,
)

NOW = datetime(2024, 1, 22, 12, 0, tzinfo=timezone.utc)


def _student(student_id: str, class_id: str, department_id: str, name: str) -> Student:
    return Student(
        id=student_id,
        name=name,
        student_number=f"2021{student_id.zfill(3)}",
        email=f"{name.lower()}@example.com",
        class_id=class_id,
        department_id=department_id,
    )


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def engine() -> LifecycleEngine:
    return LifecycleEngine(clock=lambda: NOW, max_redispatch_attempts=3)


@pytest.fixture()
def directory() -> Directory:
    """Department CS with classes A (1, 2, 3) and B (3, 4); EE with class C (5)."""

    class_a = SchoolClass(
        id="A",
        name="Embedded",
        department_id="CS",
        students=(
            _student("1", "A", "CS", "Alice"),
            _student("2", "A", "CS", "Bruno"),
            _student("3", "A", "CS", "Chen"),
        ),
    )
    class_b = SchoolClass(
        id="B",
        name="ARM",
        department_id="CS",
        students=(
            _student("3", "B", "CS", "Chen"),
            _student("4", "B", "CS", "Dana"),
        ),
    )
    class_c = SchoolClass(
        id="C",
        name="IoT",
        department_id="EE",
        students=(_student("5", "C", "EE", "Emil"),),
    )
    return Directory(
        departments=(
            Department(id="CS", name="Computer Science", classes=(class_a, class_b)),
            Department(id="EE", name="Electronics", classes=(class_c,)),
        ),
        courses=(Course(id="stm32", name="STM32 Lab", student_ids=("2", "5", "ghost")),),
        teachers=(Teacher(id="t1", name="Prof. Liu", email="liu@example.com"),),
    )


@pytest.fixture()
def make_record():
    """Return a factory building records with sensible defaults."""

    counter = itertools.count(1)

    def factory(**overrides) -> NotificationRecord:
        index = next(counter)
        status = NotificationStatus(overrides.pop("status", NotificationStatus.DELIVERED))
        values = {
            "id": f"n{index:03d}",
            "type": NotificationType.ANNOUNCEMENT,
            "category": NotificationCategory.ACADEMIC,
            "priority": NotificationPriority.NORMAL,
            "status": status,
            "title": f"Notice {index}",
            "content": "Lab session moved to room 204.",
            "sender_id": "t1",
            "sender_role": UserRole.TEACHER,
            "sender_name": "Prof. Liu",
            "recipient_id": "1",
            "created_at": NOW - timedelta(hours=index),
        }
        if status is NotificationStatus.READ:
            values["read_at"] = NOW
        values.update(overrides)
        return NotificationRecord(**values)

    return factory
