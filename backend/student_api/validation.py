"""Field validation for candidate students."""

from typing import List

from .schemas import FieldError, StudentIn

MIN_AGE = 0
MAX_AGE = 150


def validate_student(candidate: StudentIn) -> List[FieldError]:
    """Return every field violation of `candidate`, in field order.

    All checks run; an empty list means the candidate is valid.
    """
    errors: List[FieldError] = []
    if candidate.name == "":
        errors.append(FieldError(field="name", message="Name is required"))
    if candidate.age < MIN_AGE or candidate.age > MAX_AGE:
        errors.append(FieldError(field="age", message=f"Age must be between {MIN_AGE} and {MAX_AGE}"))
    if candidate.email == "":
        errors.append(FieldError(field="email", message="Email is required"))
    return errors
