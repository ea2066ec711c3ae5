"""
Explicit validation of inbound payloads.

Each ``validate_*`` function takes the raw payload and returns a
``ValidationResult`` holding either the parsed request or a list of
``FieldError``.  Routes call ``ensure_valid`` to turn a failed result
into a ``ValidationError`` before the service is invoked.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from classroom_api.app.core.errors import FieldError, ValidationError
from classroom_api.app.schemas.teacher import (
    NOTIFICATION_REQUIRED,
    STUDENT_EMAIL_INVALID,
    STUDENT_EMAILS_INVALID,
    STUDENTS_REQUIRED,
    TEACHER_EMAIL_INVALID,
    TEACHERS_REQUIRED,
    NotificationRequest,
    RegisterRequest,
    SuspendRequest,
)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

# Messages for errors raised by pydantic itself (missing field, wrong
# type) rather than by our validators.
_MISSING_MESSAGES: Dict[str, str] = {
    "teacher": TEACHER_EMAIL_INVALID,
    "students": STUDENTS_REQUIRED,
    "student": STUDENT_EMAIL_INVALID,
    "notification": NOTIFICATION_REQUIRED,
}
_INVALID_MESSAGES: Dict[str, str] = {
    "teacher": TEACHER_EMAIL_INVALID,
    "students": STUDENT_EMAILS_INVALID,
    "student": STUDENT_EMAIL_INVALID,
    "notification": NOTIFICATION_REQUIRED,
}


@dataclass
class ValidationResult(Generic[T]):
    value: Optional[T] = None
    errors: List[FieldError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _field_errors(exc: PydanticValidationError) -> List[FieldError]:
    errors = []
    for error in exc.errors():
        loc = error.get("loc") or ()
        name = str(loc[0]) if loc else "body"
        kind = error.get("type", "")
        if kind == "extra_forbidden":
            message = f"property {name} should not exist"
        elif kind == "missing":
            message = _MISSING_MESSAGES.get(name, f"{name} is required")
        elif kind in {"teacher_email", "student_email", "student_emails", "students_required", "notification_required"}:
            message = error["msg"]
        else:
            message = _INVALID_MESSAGES.get(name, error.get("msg", "Invalid value"))
        errors.append(FieldError(field=name, message=message))
    return errors


def _validate_model(model: Type[M], payload: Any) -> ValidationResult[M]:
    if not isinstance(payload, dict):
        return ValidationResult(errors=[FieldError("body", "Request body must be a JSON object")])
    try:
        return ValidationResult(value=model.model_validate(payload))
    except PydanticValidationError as exc:
        return ValidationResult(errors=_field_errors(exc))


def validate_register(payload: Any) -> ValidationResult[RegisterRequest]:
    return _validate_model(RegisterRequest, payload)


def validate_suspend(payload: Any) -> ValidationResult[SuspendRequest]:
    return _validate_model(SuspendRequest, payload)


def validate_notification(payload: Any) -> ValidationResult[NotificationRequest]:
    return _validate_model(NotificationRequest, payload)


def validate_common_students(teachers: Optional[Sequence[str]]) -> ValidationResult[List[str]]:
    """Validate the ``teacher`` query parameters.

    Only presence is checked; unknown teachers are reported by the
    service as not found.
    """
    emails = [email for email in (teachers or []) if email]
    if not emails:
        return ValidationResult(errors=[FieldError("teacher", TEACHERS_REQUIRED)])
    return ValidationResult(value=emails)


def ensure_valid(result: ValidationResult[T]) -> T:
    """Return the validated value or raise ``ValidationError``."""
    if not result.is_valid:
        raise ValidationError.from_field_errors(result.errors)
    return result.value
