"""
Record types and store interfaces.

The services depend only on ``TeacherStore`` and ``StudentStore``.
A backend implements both against the same underlying storage so
that a teacher's student list always refers to stored students.

Records handed out by a store are detached copies.  Changes become
visible to other readers only after the record is passed to
``save``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Optional


@dataclass
class StudentRecord:
    email: str
    suspended: bool = False
    id: Optional[int] = None


@dataclass
class TeacherRecord:
    email: str
    students: List[StudentRecord] = field(default_factory=list)
    id: Optional[int] = None

    @property
    def student_emails(self) -> List[str]:
        return [student.email for student in self.students]

    def has_student(self, email: str) -> bool:
        return any(student.email == email for student in self.students)

    def add_student(self, student: StudentRecord) -> bool:
        """Link ``student`` unless already linked.  Returns ``True`` if added."""
        if self.has_student(student.email):
            return False
        self.students.append(student)
        return True


class StudentStore(ABC):
    """Data access for students."""

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[StudentRecord]:
        """Return the student with ``email`` or ``None``."""

    @abstractmethod
    def find_by_emails_in(
        self, emails: Iterable[str], suspended: Optional[bool] = None
    ) -> List[StudentRecord]:
        """Return students whose email is in ``emails``.

        When ``suspended`` is given, only students with that flag are
        returned.  Emails without a matching student are skipped.
        """

    @abstractmethod
    def create(self, email: str) -> StudentRecord:
        """Persist a new, active student.

        Raises ``ConflictError`` if the email is already taken.
        """

    @abstractmethod
    def save(self, student: StudentRecord) -> None:
        """Persist the ``suspended`` flag of a stored student."""


class TeacherStore(ABC):
    """Data access for teachers and their student links."""

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[TeacherRecord]:
        """Return the teacher with ``email``, including linked students."""

    @abstractmethod
    def find_by_emails_in(self, emails: Iterable[str]) -> List[TeacherRecord]:
        """Return the teachers whose email is in ``emails``, with students."""

    @abstractmethod
    def create(self, email: str) -> TeacherRecord:
        """Persist a new teacher with no students.

        Raises ``ConflictError`` if the email is already taken.
        """

    @abstractmethod
    def save(self, teacher: TeacherRecord) -> None:
        """Persist links for every student in ``teacher.students``.

        Links that already exist are left alone and links are never
        removed.  Each student must already be stored.
        """
