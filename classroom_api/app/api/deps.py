"""
Request‑scoped dependencies.

``get_service_scope`` hands routes the ``teacher_service`` context
manager.  A route opens it around its service call, so the
transaction commits (or rolls back) before the route returns and a
failed commit reaches the client as an error instead of a success.
"""

from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator

from classroom_api.app.core.config import settings
from classroom_api.app.core.db import transaction
from classroom_api.app.repositories.memory import (
    MemoryDatabase,
    MemoryStudentStore,
    MemoryTeacherStore,
)
from classroom_api.app.repositories.sqlite import SQLiteStudentStore, SQLiteTeacherStore
from classroom_api.app.services.teacher_service import TeacherService

# Shared by all requests when STORAGE_BACKEND=memory.
memory_database = MemoryDatabase()

ServiceScope = Callable[[], ContextManager[TeacherService]]


@contextmanager
def teacher_service() -> Iterator[TeacherService]:
    """Yield a ``TeacherService`` bound to one transaction on the configured backend."""
    if settings.storage_backend == "memory":
        with memory_database.transaction() as db:
            yield TeacherService(MemoryTeacherStore(db), MemoryStudentStore(db))
        return
    with transaction() as conn:
        yield TeacherService(SQLiteTeacherStore(conn), SQLiteStudentStore(conn))


def get_service_scope() -> ServiceScope:
    return teacher_service
