"""
In‑memory implementation of the record stores.

``MemoryDatabase`` holds the rows of the three tables as plain
Python structures and enforces the same uniqueness rules as the
SQLite schema.  It is used when ``STORAGE_BACKEND=memory`` and in
tests.  ``MemoryDatabase.transaction`` restores a snapshot if the
block raises, which gives each request the same all‑or‑nothing
behaviour as the SQLite backend.
"""

from __future__ import annotations

import copy
import itertools
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from classroom_api.app.core.errors import ConflictError
from classroom_api.app.repositories.base import (
    StudentRecord,
    StudentStore,
    TeacherRecord,
    TeacherStore,
)


class MemoryDatabase:
    """Process‑local storage shared by the memory stores."""

    def __init__(self) -> None:
        # email -> {"id": int, "email": str, "suspended": bool}
        self.students: Dict[str, dict] = {}
        # id -> the same row objects as ``students``
        self.students_by_id: Dict[int, dict] = {}
        # email -> {"id": int, "email": str}
        self.teachers: Dict[str, dict] = {}
        # teacher id -> student ids in registration order
        self.links: Dict[int, List[int]] = {}
        # (teacher_id, student_id) pairs already present in ``links``
        self.link_pairs: Set[Tuple[int, int]] = set()
        self._student_ids = itertools.count(1)
        self._teacher_ids = itertools.count(1)
        self._lock = threading.Lock()

    def next_student_id(self) -> int:
        return next(self._student_ids)

    def next_teacher_id(self) -> int:
        return next(self._teacher_ids)

    def add_student_row(self, row: dict) -> None:
        self.students[row["email"]] = row
        self.students_by_id[row["id"]] = row

    def student_by_id(self, student_id: int) -> dict:
        return self.students_by_id[student_id]

    def add_link(self, teacher_id: int, student_id: int) -> bool:
        """Record a link; return False if it already existed."""
        pair = (teacher_id, student_id)
        if pair in self.link_pairs:
            return False
        self.link_pairs.add(pair)
        self.links.setdefault(teacher_id, []).append(student_id)
        return True

    def linked_student_ids(self, teacher_id: int) -> List[int]:
        return self.links.get(teacher_id, [])

    def _state(self) -> tuple:
        return (self.students, self.students_by_id, self.teachers, self.links, self.link_pairs)

    @contextmanager
    def transaction(self) -> Iterator["MemoryDatabase"]:
        """Serialize access and undo all changes if the block raises.

        The snapshot is deep‑copied in one call so both student indexes
        keep pointing at shared rows after a restore.  Do not nest.
        """
        with self._lock:
            snapshot = copy.deepcopy(self._state())
            try:
                yield self
            except BaseException:
                (
                    self.students,
                    self.students_by_id,
                    self.teachers,
                    self.links,
                    self.link_pairs,
                ) = snapshot
                raise

    def clear(self) -> None:
        with self._lock:
            for table in self._state():
                table.clear()


def _to_student(row: dict) -> StudentRecord:
    return StudentRecord(id=row["id"], email=row["email"], suspended=row["suspended"])


class MemoryStudentStore(StudentStore):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def find_by_email(self, email: str) -> Optional[StudentRecord]:
        row = self._db.students.get(email)
        return _to_student(row) if row else None

    def find_by_emails_in(
        self, emails: Iterable[str], suspended: Optional[bool] = None
    ) -> List[StudentRecord]:
        found = []
        for email in dict.fromkeys(emails):
            row = self._db.students.get(email)
            if row is None:
                continue
            if suspended is not None and row["suspended"] != suspended:
                continue
            found.append(_to_student(row))
        return sorted(found, key=lambda student: student.id)

    def create(self, email: str) -> StudentRecord:
        if email in self._db.students:
            raise ConflictError(f"Student with email {email} already exists")
        row = {"id": self._db.next_student_id(), "email": email, "suspended": False}
        self._db.add_student_row(row)
        return _to_student(row)

    def save(self, student: StudentRecord) -> None:
        row = self._db.students.get(student.email)
        if row is None or row["id"] != student.id:
            raise ValueError(f"Student {student.email} has not been created yet")
        row["suspended"] = bool(student.suspended)


class MemoryTeacherStore(TeacherStore):
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    def _load(self, row: dict) -> TeacherRecord:
        teacher = TeacherRecord(id=row["id"], email=row["email"])
        for student_id in self._db.linked_student_ids(row["id"]):
            teacher.students.append(_to_student(self._db.student_by_id(student_id)))
        return teacher

    def find_by_email(self, email: str) -> Optional[TeacherRecord]:
        row = self._db.teachers.get(email)
        return self._load(row) if row else None

    def find_by_emails_in(self, emails: Iterable[str]) -> List[TeacherRecord]:
        rows = [self._db.teachers[email] for email in dict.fromkeys(emails) if email in self._db.teachers]
        return [self._load(row) for row in sorted(rows, key=lambda row: row["id"])]

    def create(self, email: str) -> TeacherRecord:
        if email in self._db.teachers:
            raise ConflictError(f"Teacher with email {email} already exists")
        row = {"id": self._db.next_teacher_id(), "email": email}
        self._db.teachers[email] = row
        return TeacherRecord(id=row["id"], email=email)

    def save(self, teacher: TeacherRecord) -> None:
        row = self._db.teachers.get(teacher.email)
        if row is None or row["id"] != teacher.id:
            raise ValueError(f"Teacher {teacher.email} has not been created yet")
        for student in teacher.students:
            stored = self._db.students.get(student.email)
            if stored is None or stored["id"] != student.id:
                raise ValueError(f"Student {student.email} has not been created yet")
            self._db.add_link(teacher.id, student.id)
