"""
Unit tests for TeacherService, run against both storage backends
"""
from unittest.mock import MagicMock

import pytest

from classroom_api.app.core.errors import ConflictError, NotFoundError, ValidationError
from classroom_api.app.repositories.base import StudentRecord, StudentStore, TeacherRecord, TeacherStore
from classroom_api.app.services.teacher_service import TeacherService

KEN = "teacherken@gmail.com"
JOE = "teacherjoe@gmail.com"


class TestRegister:
    """Test registering students to a teacher"""

    @pytest.mark.asyncio
    async def test_creates_teacher_and_students(self, service):
        await service.register(KEN, ["studentjon@gmail.com", "studenthon@gmail.com"])

        teacher = service.teachers.find_by_email(KEN)
        assert teacher is not None
        assert set(teacher.student_emails) == {"studentjon@gmail.com", "studenthon@gmail.com"}
        student = service.students.find_by_email("studentjon@gmail.com")
        assert student.suspended is False

    @pytest.mark.asyncio
    async def test_registering_twice_keeps_one_link(self, service):
        await service.register(KEN, ["studentjon@gmail.com"])
        await service.register(KEN, ["studentjon@gmail.com"])

        teacher = service.teachers.find_by_email(KEN)
        assert teacher.student_emails == ["studentjon@gmail.com"]

    @pytest.mark.asyncio
    async def test_duplicate_emails_in_one_request(self, service):
        await service.register(KEN, ["studentjon@gmail.com", "studentjon@gmail.com"])

        teacher = service.teachers.find_by_email(KEN)
        assert teacher.student_emails == ["studentjon@gmail.com"]

    @pytest.mark.asyncio
    async def test_student_shared_between_teachers(self, service):
        await service.register(KEN, ["studentjon@gmail.com"])
        await service.register(JOE, ["studentjon@gmail.com"])

        assert service.teachers.find_by_email(KEN).student_emails == ["studentjon@gmail.com"]
        assert service.teachers.find_by_email(JOE).student_emails == ["studentjon@gmail.com"]
        assert len(service.students.find_by_emails_in(["studentjon@gmail.com"])) == 1

    @pytest.mark.asyncio
    async def test_existing_suspension_is_kept(self, service):
        await service.register(KEN, ["studentmary@gmail.com"])
        await service.suspend_student("studentmary@gmail.com")
        await service.register(JOE, ["studentmary@gmail.com"])

        assert service.students.find_by_email("studentmary@gmail.com").suspended is True

    @pytest.mark.asyncio
    async def test_empty_student_list(self, service):
        with pytest.raises(ValidationError):
            await service.register(KEN, [])


class TestCommonStudents:
    """Test common student lookup"""

    @pytest.mark.asyncio
    async def test_single_teacher_returns_all_students(self, service):
        await service.register(KEN, ["a@gmail.com", "b@gmail.com", "c@gmail.com"])

        result = await service.get_common_students([KEN])

        assert set(result) == {"a@gmail.com", "b@gmail.com", "c@gmail.com"}
        assert len(result) == 3

    @pytest.mark.asyncio
    async def test_multiple_teachers_returns_intersection(self, service):
        await service.register(
            KEN,
            ["commonstudent1@gmail.com", "commonstudent2@gmail.com", "student_only_under_teacher_ken@gmail.com"],
        )
        await service.register(JOE, ["commonstudent1@gmail.com", "commonstudent2@gmail.com"])

        result = await service.get_common_students([KEN, JOE])

        assert set(result) == {"commonstudent1@gmail.com", "commonstudent2@gmail.com"}
        assert "student_only_under_teacher_ken@gmail.com" not in result

    @pytest.mark.asyncio
    async def test_no_common_students(self, service):
        await service.register(KEN, ["a@gmail.com"])
        await service.register(JOE, ["b@gmail.com"])

        assert await service.get_common_students([KEN, JOE]) == []

    @pytest.mark.asyncio
    async def test_repeated_teacher_counts_once(self, service):
        await service.register(KEN, ["a@gmail.com", "b@gmail.com"])

        result = await service.get_common_students([KEN, KEN])

        assert set(result) == {"a@gmail.com", "b@gmail.com"}

    @pytest.mark.asyncio
    async def test_empty_list(self, service):
        with pytest.raises(ValidationError) as exc_info:
            await service.get_common_students([])
        assert exc_info.value.message == "At least one teacher must be provided"

    @pytest.mark.asyncio
    async def test_unknown_teacher_is_named(self, service):
        await service.register(KEN, ["a@gmail.com"])

        with pytest.raises(NotFoundError) as exc_info:
            await service.get_common_students([KEN, "unknown@gmail.com"])

        assert "unknown@gmail.com" in exc_info.value.message
        assert KEN not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_all_missing_teachers_are_named(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            await service.get_common_students(["x@gmail.com", "y@gmail.com"])

        assert exc_info.value.message == "Teacher(s) not found: x@gmail.com, y@gmail.com"


class TestSuspend:
    """Test suspending students"""

    @pytest.mark.asyncio
    async def test_suspend_student(self, service):
        await service.register(KEN, ["studentmary@gmail.com"])

        await service.suspend_student("studentmary@gmail.com")

        assert service.students.find_by_email("studentmary@gmail.com").suspended is True

    @pytest.mark.asyncio
    async def test_suspend_twice_is_allowed(self, service):
        await service.register(KEN, ["studentmary@gmail.com"])

        await service.suspend_student("studentmary@gmail.com")
        await service.suspend_student("studentmary@gmail.com")

        assert service.students.find_by_email("studentmary@gmail.com").suspended is True

    @pytest.mark.asyncio
    async def test_unknown_student(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            await service.suspend_student("nonexistent@gmail.com")
        assert exc_info.value.message == "Student with email nonexistent@gmail.com not found"


class TestNotificationRecipients:
    """Test notification recipient computation"""

    @pytest.mark.asyncio
    async def test_registered_and_mentioned_students(self, service):
        await service.register(KEN, ["studentbob@gmail.com", "studentagnes@gmail.com", "studentmiche@gmail.com"])
        await service.suspend_student("studentmiche@gmail.com")

        result = await service.get_notification_recipients(
            KEN, "Hello students! @studentagnes@gmail.com @studentmiche@gmail.com"
        )

        assert set(result) == {"studentbob@gmail.com", "studentagnes@gmail.com"}
        assert len(result) == 2

    @pytest.mark.asyncio
    async def test_mentioned_student_of_another_teacher(self, service):
        await service.register(KEN, ["a@x.com", "b@x.com"])
        await service.register(JOE, ["c@x.com"])

        result = await service.get_notification_recipients(KEN, "hi @c@x.com")

        assert set(result) == {"a@x.com", "b@x.com", "c@x.com"}
        assert len(result) == 3

    @pytest.mark.asyncio
    async def test_unknown_mention_is_dropped(self, service):
        await service.register(KEN, ["a@x.com"])

        result = await service.get_notification_recipients(KEN, "hi @ghost@x.com")

        assert result == ["a@x.com"]

    @pytest.mark.asyncio
    async def test_suspended_student_excluded_even_when_mentioned(self, service):
        await service.register(KEN, ["a@x.com", "b@x.com"])
        await service.suspend_student("b@x.com")

        result = await service.get_notification_recipients(KEN, "hey @b@x.com @b@x.com")

        assert result == ["a@x.com"]

    @pytest.mark.asyncio
    async def test_mention_of_registered_student_not_duplicated(self, service):
        await service.register(KEN, ["a@x.com"])

        result = await service.get_notification_recipients(KEN, "@a@x.com @a@x.com")

        assert result == ["a@x.com"]

    @pytest.mark.asyncio
    async def test_unknown_teacher(self, service):
        with pytest.raises(NotFoundError) as exc_info:
            await service.get_notification_recipients("nonexistent@gmail.com", "Hello students!")
        assert exc_info.value.message == "Teacher with email nonexistent@gmail.com not found"


@pytest.mark.asyncio
async def test_register_common_suspend_scenario(service):
    """Register two teachers, look up common students, then suspend one"""
    k, p = "k@school.com", "p@school.com"
    j, h = "j@school.com", "h@school.com"

    await service.register(k, [j, h])
    assert set(await service.get_common_students([k])) == {j, h}

    await service.register(p, [j])
    assert set(await service.get_common_students([k, p])) == {j}

    await service.suspend_student(j)
    recipients = await service.get_notification_recipients(k, "hello")
    assert j not in recipients
    assert recipients == [h]


class TestStoreContract:
    """Check the calls the service makes on mocked stores"""

    @pytest.fixture
    def mocked(self):
        teachers = MagicMock(spec=TeacherStore)
        students = MagicMock(spec=StudentStore)
        return TeacherService(teachers, students), teachers, students

    @pytest.mark.asyncio
    async def test_register_creates_missing_teacher_and_saves_once(self, mocked):
        service, teachers, students = mocked
        teachers.find_by_email.return_value = None
        teachers.create.return_value = TeacherRecord(id=1, email="new@x.com")
        students.find_by_email.return_value = StudentRecord(id=7, email="s@x.com")

        await service.register("new@x.com", ["s@x.com"])

        teachers.create.assert_called_once_with("new@x.com")
        students.create.assert_not_called()
        teachers.save.assert_called_once()
        saved = teachers.save.call_args.args[0]
        assert saved.student_emails == ["s@x.com"]

    @pytest.mark.asyncio
    async def test_conflict_from_store_propagates(self, mocked):
        service, teachers, students = mocked
        teachers.find_by_email.return_value = None
        teachers.create.side_effect = ConflictError("Teacher with email t@x.com already exists")

        with pytest.raises(ConflictError):
            await service.register("t@x.com", ["s@x.com"])
        teachers.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_unexpected_store_failure_is_not_reinterpreted(self, mocked):
        service, _, students = mocked
        students.find_by_email.side_effect = RuntimeError("disk I/O error")

        with pytest.raises(RuntimeError, match="disk I/O error"):
            await service.suspend_student("s@x.com")

    @pytest.mark.asyncio
    async def test_suspend_already_suspended_does_not_write(self, mocked):
        service, _, students = mocked
        students.find_by_email.return_value = StudentRecord(id=1, email="s@x.com", suspended=True)

        await service.suspend_student("s@x.com")

        students.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_mentions_skips_student_lookup(self, mocked):
        service, teachers, students = mocked
        teachers.find_by_email.return_value = TeacherRecord(
            id=1, email="t@x.com", students=[StudentRecord(id=1, email="a@x.com")]
        )

        assert await service.get_notification_recipients("t@x.com", "hello") == ["a@x.com"]
        students.find_by_emails_in.assert_not_called()
