from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def list_active(
        self,
        *,
        school_id: int,
        class_name: Optional[str] = None,
        section: Optional[str] = None,
    ) -> Sequence[Student]:
        raise NotImplementedError

    def get(self, *, school_id: int, student_id: int) -> Optional[Student]:
        """The student with this id in this school, whatever its status."""

        raise NotImplementedError
