"""
Pydantic schemas for the teacher/student endpoints.

Request models reject unknown fields and validate emails with
pydantic's ``EmailStr`` checker, while keeping the address exactly as
the client sent it.  Validator failures use ``PydanticCustomError`` so
that the message shown to the client is the one written here.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

TEACHER_EMAIL_INVALID = "Teacher email must be a valid email"
STUDENT_EMAIL_INVALID = "Student email must be a valid email"
STUDENT_EMAILS_INVALID = "All student emails must be valid"
STUDENTS_REQUIRED = "At least one student must be provided"
TEACHERS_REQUIRED = "At least one teacher must be provided"
NOTIFICATION_REQUIRED = "Notification text cannot be empty"

_email_adapter = TypeAdapter(EmailStr)


def is_valid_email(value: object) -> bool:
    """Return ``True`` if ``value`` is a syntactically valid email string."""
    if not isinstance(value, str):
        return False
    try:
        _email_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


class RegisterRequest(BaseModel):
    """Body of ``POST /register``."""

    model_config = ConfigDict(extra="forbid")

    teacher: str = Field(..., examples=["teacherken@gmail.com"])
    students: List[str] = Field(..., examples=[["studentjon@gmail.com", "studenthon@gmail.com"]])

    @field_validator("teacher")
    @classmethod
    def validate_teacher(cls, v: str) -> str:
        if not is_valid_email(v):
            raise PydanticCustomError("teacher_email", TEACHER_EMAIL_INVALID)
        return v

    @field_validator("students")
    @classmethod
    def validate_students(cls, v: List[str]) -> List[str]:
        if not v:
            raise PydanticCustomError("students_required", STUDENTS_REQUIRED)
        if not all(is_valid_email(email) for email in v):
            raise PydanticCustomError("student_emails", STUDENT_EMAILS_INVALID)
        return v


class SuspendRequest(BaseModel):
    """Body of ``POST /suspend``."""

    model_config = ConfigDict(extra="forbid")

    student: str = Field(..., examples=["studentmary@gmail.com"])

    @field_validator("student")
    @classmethod
    def validate_student(cls, v: str) -> str:
        if not is_valid_email(v):
            raise PydanticCustomError("student_email", STUDENT_EMAIL_INVALID)
        return v


class NotificationRequest(BaseModel):
    """Body of ``POST /retrievefornotifications``."""

    model_config = ConfigDict(extra="forbid")

    teacher: str = Field(..., examples=["teacherken@gmail.com"])
    notification: str = Field(..., examples=["Hello students! @studentagnes@gmail.com"])

    @field_validator("teacher")
    @classmethod
    def validate_teacher(cls, v: str) -> str:
        if not is_valid_email(v):
            raise PydanticCustomError("teacher_email", TEACHER_EMAIL_INVALID)
        return v

    @field_validator("notification")
    @classmethod
    def validate_notification(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError("notification_required", NOTIFICATION_REQUIRED)
        return v


class CommonStudentsResponse(BaseModel):
    students: List[str]


class NotificationResponse(BaseModel):
    recipients: List[str]
