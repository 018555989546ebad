"""Pydantic models describing the roster snapshot supplied by the user service."""

from __future__ import annotations

from pydantic import BaseModel, Field

from campus_notify.domain.entities import (
    Course,
    Department,
    Directory,
    SchoolClass,
    Student,
    Teacher,
)


class StudentPayload(BaseModel):
    id: str
    name: str
    student_number: str = ""
    email: str = ""


class SchoolClassPayload(BaseModel):
    id: str
    name: str
    students: list[StudentPayload] = Field(default_factory=list)


class DepartmentPayload(BaseModel):
    id: str
    name: str
    classes: list[SchoolClassPayload] = Field(default_factory=list)


class CoursePayload(BaseModel):
    id: str
    name: str
    student_ids: list[str] = Field(default_factory=list)


class TeacherPayload(BaseModel):
    id: str
    name: str
    email: str = ""


class DirectorySnapshot(BaseModel):
    """Departamentos, clases, cursos y docentes disponibles para el envío."""

    departments: list[DepartmentPayload] = Field(default_factory=list)
    courses: list[CoursePayload] = Field(default_factory=list)
    teachers: list[TeacherPayload] = Field(default_factory=list)

    def to_domain(self) -> Directory:
        return Directory(
            departments=tuple(
                Department(
                    id=department.id,
                    name=department.name,
                    classes=tuple(
                        SchoolClass(
                            id=school_class.id,
                            name=school_class.name,
                            department_id=department.id,
                            students=tuple(
                                Student(
                                    id=student.id,
                                    name=student.name,
                                    student_number=student.student_number,
                                    email=student.email,
                                    class_id=school_class.id,
                                    department_id=department.id,
                                )
                                for student in school_class.students
                            ),
                        )
                        for school_class in department.classes
                    ),
                )
                for department in self.departments
            ),
            courses=tuple(
                Course(id=course.id, name=course.name, student_ids=tuple(course.student_ids))
                for course in self.courses
            ),
            teachers=tuple(
                Teacher(id=teacher.id, name=teacher.name, email=teacher.email)
                for teacher in self.teachers
            ),
        )


class StudentRead(BaseModel):
    """Estudiante devuelto por la búsqueda del selector de audiencia."""

    id: str
    name: str
    student_number: str
    email: str
    class_id: str | None = None
    department_id: str | None = None


__all__ = [
    "CoursePayload",
    "DepartmentPayload",
    "DirectorySnapshot",
    "SchoolClassPayload",
    "StudentPayload",
    "StudentRead",
    "TeacherPayload",
]
