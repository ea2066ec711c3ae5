"""
Service layer for teachers and their students.

``TeacherService`` implements the four operations exposed by the API:

* ``register`` – link students to a teacher, creating either side on
  first reference;
* ``get_common_students`` – students registered to every given teacher;
* ``suspend_student`` – stop a student from receiving notifications;
* ``get_notification_recipients`` – active students of a teacher plus
  active students @‑mentioned in the notification text.

The service talks to storage only through ``TeacherStore`` and
``StudentStore``.  It does not commit; the caller runs each operation
inside a transaction (see ``api.deps``).  Store failures other than
the documented ``ConflictError`` propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from classroom_api.app.core.errors import NotFoundError, ValidationError
from classroom_api.app.repositories.base import StudentStore, TeacherStore
from classroom_api.app.services.mentions import extract_mentioned_emails


class TeacherService:
    """Association logic over the teacher/student relation."""

    def __init__(self, teachers: TeacherStore, students: StudentStore) -> None:
        self.teachers = teachers
        self.students = students

    async def register(self, teacher_email: str, student_emails: Sequence[str]) -> None:
        """Register ``student_emails`` to the teacher ``teacher_email``.

        Missing teacher and student records are created; new students
        start out active.  Pairs that are already linked are skipped,
        so registering the same students again changes nothing.
        """
        logger = logging.getLogger(__name__)
        if not student_emails:
            raise ValidationError("At least one student must be provided")

        teacher = self.teachers.find_by_email(teacher_email)
        if teacher is None:
            teacher = self.teachers.create(teacher_email)
            logger.info("Created teacher %s", teacher_email)

        added = 0
        for student_email in student_emails:
            student = self.students.find_by_email(student_email)
            if student is None:
                student = self.students.create(student_email)
                logger.info("Created student %s", student_email)
            if teacher.add_student(student):
                added += 1

        self.teachers.save(teacher)
        logger.info(
            "Registered %s new student(s) to teacher %s (%s requested)",
            added,
            teacher_email,
            len(student_emails),
        )

    async def get_common_students(self, teacher_emails: Sequence[str]) -> List[str]:
        """Return emails of students registered to all of ``teacher_emails``.

        Every teacher must exist; otherwise ``NotFoundError`` lists the
        missing ones.  The order of the result carries no meaning.
        """
        if not teacher_emails:
            raise ValidationError("At least one teacher must be provided")

        requested = list(dict.fromkeys(teacher_emails))
        teachers = self.teachers.find_by_emails_in(requested)

        if len(teachers) != len(requested):
            found = {teacher.email for teacher in teachers}
            missing = [email for email in requested if email not in found]
            raise NotFoundError(f"Teacher(s) not found: {', '.join(missing)}")

        if len(teachers) == 1:
            return teachers[0].student_emails

        counts: Dict[str, int] = {}
        for teacher in teachers:
            for email in dict.fromkeys(teacher.student_emails):
                counts[email] = counts.get(email, 0) + 1

        common = [email for email, count in counts.items() if count == len(teachers)]
        logging.getLogger(__name__).debug(
            "Common students for %s: %s", ", ".join(requested), common
        )
        return common

    async def suspend_student(self, student_email: str) -> None:
        """Mark a student as suspended.  Suspending twice is allowed."""
        student = self.students.find_by_email(student_email)
        if student is None:
            raise NotFoundError(f"Student with email {student_email} not found")
        if student.suspended:
            logging.getLogger(__name__).info("Student %s is already suspended", student_email)
            return
        student.suspended = True
        self.students.save(student)
        logging.getLogger(__name__).info("Suspended student %s", student_email)

    async def get_notification_recipients(self, teacher_email: str, notification: str) -> List[str]:
        """Return the emails that should receive ``notification``.

        Recipients are the teacher's active students followed by the
        active students mentioned in the text.  Mentions of unknown or
        suspended students are dropped silently.  Each email appears
        once.
        """
        teacher = self.teachers.find_by_email(teacher_email)
        if teacher is None:
            raise NotFoundError(f"Teacher with email {teacher_email} not found")

        registered = [student.email for student in teacher.students if not student.suspended]

        mentioned_emails = extract_mentioned_emails(notification)
        mentioned: List[str] = []
        if mentioned_emails:
            active = {
                student.email
                for student in self.students.find_by_emails_in(mentioned_emails, suspended=False)
            }
            mentioned = [email for email in mentioned_emails if email in active]

        recipients = list(dict.fromkeys(registered + mentioned))
        logging.getLogger(__name__).debug(
            "Notification from %s goes to %s recipient(s)", teacher_email, len(recipients)
        )
        return recipients
