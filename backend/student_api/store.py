"""In-memory student store.

`StudentStore` owns every student record for the lifetime of the
process. A single reader/writer lock covers both the id -> student map
and the id counter: reads run in parallel, mutations are serialized
against everything else. Stored `Student` values are frozen, so handing
them out never exposes mutable internal state.

Validation happens before any lock is taken and never touches the store.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from .errors import StudentNotFoundError, StudentValidationError
from .schemas import Student, StudentIn
from .utils.locks import ReadWriteLock
from .validation import validate_student

logger = logging.getLogger("student_api.store")


class StudentStore:
    """Concurrent keyed collection of students with id allocation."""

    def __init__(self):
        self._lock = ReadWriteLock()
        self._students: Dict[int, Student] = {}
        self._next_id = 1

    def create(self, candidate: StudentIn) -> Student:
        """Validate `candidate` and store it under a freshly allocated id.

        Any id carried by the candidate is ignored. Raises
        `StudentValidationError` without mutating anything when the
        candidate is invalid.
        """
        _raise_if_invalid(candidate)
        with self._lock.write_locked():
            student = _build(self._next_id, candidate)
            self._students[student.id] = student
            self._next_id += 1
        logger.debug("created student id=%s", student.id)
        return student

    def list(self) -> List[Student]:
        """Return a snapshot of all students ordered by id."""
        with self._lock.read_locked():
            snapshot = list(self._students.values())
        snapshot.sort(key=lambda s: s.id)
        return snapshot

    def get(self, student_id: int) -> Student:
        """Return the student stored under `student_id`."""
        with self._lock.read_locked():
            student = self._students.get(student_id)
        if student is None:
            raise StudentNotFoundError(student_id)
        return student

    def update(self, student_id: int, candidate: StudentIn) -> Student:
        """Replace every field of the student at `student_id`.

        The stored id is always `student_id`, whatever the candidate says.
        Validation runs before the existence check.
        """
        _raise_if_invalid(candidate)
        with self._lock.write_locked():
            if student_id not in self._students:
                raise StudentNotFoundError(student_id)
            student = _build(student_id, candidate)
            self._students[student_id] = student
        logger.debug("updated student id=%s", student_id)
        return student

    def delete(self, student_id: int) -> None:
        """Remove the student at `student_id`; its id is never reissued."""
        with self._lock.write_locked():
            if self._students.pop(student_id, None) is None:
                raise StudentNotFoundError(student_id)
        logger.debug("deleted student id=%s", student_id)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._students)


def _raise_if_invalid(candidate: StudentIn) -> None:
    errors = validate_student(candidate)
    if errors:
        raise StudentValidationError(errors)


def _build(student_id: int, candidate: StudentIn) -> Student:
    return Student(id=student_id, **candidate.model_dump(exclude={"id"}))
