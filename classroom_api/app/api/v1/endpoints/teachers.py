"""
Teacher/student endpoints for API v1.

These routes let teachers register students, look up students common
to several teachers, suspend a student and compute the recipients of
a notification.  Payloads are validated with the functions in
``api.validation`` before the service is called; failures are turned
into responses by the handlers in ``api.errors``.

Each route opens the service scope itself, so its transaction has
committed by the time the route returns.
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from classroom_api.app.api.deps import ServiceScope, get_service_scope
from classroom_api.app.api.validation import (
    ensure_valid,
    validate_common_students,
    validate_notification,
    validate_register,
    validate_suspend,
)
from classroom_api.app.schemas.teacher import CommonStudentsResponse, NotificationResponse

router = APIRouter()


@router.post("/register", status_code=status.HTTP_204_NO_CONTENT)
async def register(
    payload: Any = Body(None),
    service_scope: ServiceScope = Depends(get_service_scope),
) -> None:
    """Register one or more students to a teacher.

    Unknown teachers and students are created.  Registering a student
    who is already registered to the teacher has no effect.
    """
    data = ensure_valid(validate_register(payload))
    with service_scope() as service:
        await service.register(data.teacher, data.students)
    return None


@router.get("/commonstudents", response_model=CommonStudentsResponse)
async def common_students(
    teacher: Optional[List[str]] = Query(None),
    service_scope: ServiceScope = Depends(get_service_scope),
) -> CommonStudentsResponse:
    """Return students registered to all of the given teachers.

    Pass ``teacher`` once per teacher, e.g.
    ``/commonstudents?teacher=a@x.com&teacher=b@x.com``.  Returns 404
    if any teacher is unknown.
    """
    teacher_emails = ensure_valid(validate_common_students(teacher))
    with service_scope() as service:
        students = await service.get_common_students(teacher_emails)
    return CommonStudentsResponse(students=students)


@router.post("/suspend", status_code=status.HTTP_204_NO_CONTENT)
async def suspend(
    payload: Any = Body(None),
    service_scope: ServiceScope = Depends(get_service_scope),
) -> None:
    """Suspend a student.  Returns 404 if the student does not exist."""
    data = ensure_valid(validate_suspend(payload))
    with service_scope() as service:
        await service.suspend_student(data.student)
    return None


@router.post("/retrievefornotifications", response_model=NotificationResponse)
async def retrieve_for_notifications(
    payload: Any = Body(None),
    service_scope: ServiceScope = Depends(get_service_scope),
) -> NotificationResponse:
    """Return the students who should receive a notification.

    Recipients are the teacher's non‑suspended students plus any
    non‑suspended students @‑mentioned in the text.
    """
    data = ensure_valid(validate_notification(payload))
    with service_scope() as service:
        recipients = await service.get_notification_recipients(data.teacher, data.notification)
    return NotificationResponse(recipients=recipients)
