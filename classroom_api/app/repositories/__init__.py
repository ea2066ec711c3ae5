"""
Record stores for teachers and students.

``base`` defines the record types and the store interfaces used by
the services.  ``sqlite`` and ``memory`` provide the two backends.
"""

from .base import StudentRecord, StudentStore, TeacherRecord, TeacherStore  # noqa: F401
