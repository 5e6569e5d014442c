from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import StudentStatus


@dataclass(frozen=True)
class Student:
    """The subset of a student row the attendance reports need."""

    id: int
    name: str
    student_id: str
    class_name: Optional[str]
    section: Optional[str]
    school_id: int
    status: StudentStatus = StudentStatus.ACTIVE
    guardian_phone: Optional[str] = None
    email: Optional[str] = None

    @property
    def class_label(self) -> str:
        return f"{self.class_name}-{self.section}"
