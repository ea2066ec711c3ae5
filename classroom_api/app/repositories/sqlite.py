"""
SQLite implementation of the record stores.

Both stores are bound to a single connection supplied by the caller,
normally the one opened by ``core.db.transaction`` for the current
request.  The stores never commit; the transaction owner does.

All queries use parameterized statements.
"""

from __future__ import annotations

import sqlite3
from typing import Dict, Iterable, List, Optional

from classroom_api.app.core.errors import ConflictError
from classroom_api.app.repositories.base import (
    StudentRecord,
    StudentStore,
    TeacherRecord,
    TeacherStore,
)


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


def _is_unique_violation(exc: sqlite3.IntegrityError) -> bool:
    return "UNIQUE constraint failed" in str(exc)


def _row_to_student(row: sqlite3.Row) -> StudentRecord:
    return StudentRecord(id=row["id"], email=row["email"], suspended=bool(row["suspended"]))


class SQLiteStudentStore(StudentStore):
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def find_by_email(self, email: str) -> Optional[StudentRecord]:
        row = self._conn.execute(
            "SELECT id, email, suspended FROM student WHERE email = ?",
            (email,),
        ).fetchone()
        return _row_to_student(row) if row else None

    def find_by_emails_in(
        self, emails: Iterable[str], suspended: Optional[bool] = None
    ) -> List[StudentRecord]:
        emails = list(dict.fromkeys(emails))
        if not emails:
            return []
        query = f"SELECT id, email, suspended FROM student WHERE email IN ({_placeholders(len(emails))})"
        params: List[object] = list(emails)
        if suspended is not None:
            query += " AND suspended = ?"
            params.append(int(suspended))
        rows = self._conn.execute(query + " ORDER BY id", params).fetchall()
        return [_row_to_student(row) for row in rows]

    def create(self, email: str) -> StudentRecord:
        try:
            cursor = self._conn.execute(
                "INSERT INTO student (email, suspended) VALUES (?, 0)",
                (email,),
            )
        except sqlite3.IntegrityError as exc:
            if _is_unique_violation(exc):
                raise ConflictError(f"Student with email {email} already exists") from exc
            raise
        return StudentRecord(id=cursor.lastrowid, email=email, suspended=False)

    def save(self, student: StudentRecord) -> None:
        if student.id is None:
            raise ValueError(f"Student {student.email} has not been created yet")
        self._conn.execute(
            "UPDATE student SET suspended = ? WHERE id = ?",
            (int(student.suspended), student.id),
        )


class SQLiteTeacherStore(TeacherStore):
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def find_by_email(self, email: str) -> Optional[TeacherRecord]:
        teachers = self.find_by_emails_in([email])
        return teachers[0] if teachers else None

    def find_by_emails_in(self, emails: Iterable[str]) -> List[TeacherRecord]:
        emails = list(dict.fromkeys(emails))
        if not emails:
            return []
        rows = self._conn.execute(
            f"SELECT id, email FROM teacher WHERE email IN ({_placeholders(len(emails))}) ORDER BY id",
            emails,
        ).fetchall()
        teachers: Dict[int, TeacherRecord] = {
            row["id"]: TeacherRecord(id=row["id"], email=row["email"]) for row in rows
        }
        if not teachers:
            return []
        # One query for all links; rowid keeps registration order.
        link_rows = self._conn.execute(
            f"""
            SELECT ts.teacher_id, s.id, s.email, s.suspended
            FROM teacher_student ts
            JOIN student s ON s.id = ts.student_id
            WHERE ts.teacher_id IN ({_placeholders(len(teachers))})
            ORDER BY ts.rowid
            """,
            list(teachers),
        ).fetchall()
        for row in link_rows:
            teachers[row["teacher_id"]].students.append(_row_to_student(row))
        return list(teachers.values())

    def create(self, email: str) -> TeacherRecord:
        try:
            cursor = self._conn.execute(
                "INSERT INTO teacher (email) VALUES (?)",
                (email,),
            )
        except sqlite3.IntegrityError as exc:
            if _is_unique_violation(exc):
                raise ConflictError(f"Teacher with email {email} already exists") from exc
            raise
        return TeacherRecord(id=cursor.lastrowid, email=email)

    def save(self, teacher: TeacherRecord) -> None:
        if teacher.id is None:
            raise ValueError(f"Teacher {teacher.email} has not been created yet")
        linked = {
            row["student_id"]
            for row in self._conn.execute(
                "SELECT student_id FROM teacher_student WHERE teacher_id = ?",
                (teacher.id,),
            ).fetchall()
        }
        for student in teacher.students:
            if student.id is None:
                raise ValueError(f"Student {student.email} has not been created yet")
            if student.id in linked:
                continue
            try:
                self._conn.execute(
                    "INSERT INTO teacher_student (teacher_id, student_id) VALUES (?, ?)",
                    (teacher.id, student.id),
                )
            except sqlite3.IntegrityError as exc:
                if _is_unique_violation(exc):
                    raise ConflictError(
                        f"Student {student.email} is already registered to teacher {teacher.email}"
                    ) from exc
                raise
            linked.add(student.id)
