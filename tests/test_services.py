from datetime import date, timedelta

import pytest

from conftest import MEMBER_ID
from studylog.messaging.vocabulary import MessageSource
from studylog.services.exceptions import AuthenticationError, NotFoundError, ValidationError
from studylog.services.feedback_service import FeedbackService
from studylog.services.member_service import MemberService, UserRole
from studylog.services.message_service import MessageService
from studylog.services.record_service import RecordService
from studylog.services.reflection_service import ReflectionService

TODAY = date(2024, 5, 10)


def add_record(service, day_offset=0, subject="math", total=10, correct=8, emotion="good", **kwargs):
    return service.create_record(
        member_id=MEMBER_ID,
        subject=subject,
        questions_total=total,
        questions_correct=correct,
        emotion=emotion,
        record_date=TODAY - timedelta(days=day_offset),
        **kwargs,
    )


class TestRecordService:
    def test_create_record_defaults(self, db_session):
        record = add_record(RecordService(db_session), comment="  分数  ")

        assert record.id is not None
        assert record.date == TODAY
        assert record.study_date == TODAY
        assert record.content_type == "class"
        assert record.attempt_number == 1
        assert record.comment == "分数"

    def test_attempt_number_increments_per_content(self, db_session):
        service = RecordService(db_session)
        first = add_record(service, correct=5)
        second = add_record(service, correct=8)
        other_subject = add_record(service, subject="science")
        homework = add_record(service, content_type="homework")

        assert (first.attempt_number, second.attempt_number) == (1, 2)
        assert other_subject.attempt_number == 1
        assert homework.attempt_number == 1

    @pytest.mark.parametrize("kwargs", [
        {"correct": 11, "total": 10},
        {"total": 0, "correct": 0},
        {"total": 101, "correct": 1},
        {"subject": "english"},
        {"emotion": "angry"},
        {"content_type": "exam"},
        {"comment": "あ" * 301},
    ])
    def test_invalid_record_is_rejected(self, db_session, kwargs):
        with pytest.raises(ValidationError):
            add_record(RecordService(db_session), **kwargs)

    def test_future_record_date_is_rejected(self, db_session):
        with pytest.raises(ValidationError):
            RecordService(db_session).create_record(
                MEMBER_ID, "math", 10, 5, "good", record_date=date.today() + timedelta(days=2)
            )

    def test_unknown_member_is_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            RecordService(db_session).create_record("00000000", "math", 10, 5, "good")

    def test_list_records_filter_and_sort(self, db_session):
        service = RecordService(db_session)
        add_record(service, day_offset=2, subject="math", correct=9)
        add_record(service, day_offset=1, subject="science", correct=3)
        add_record(service, day_offset=0, subject="math", correct=5)

        by_date = service.list_records(MEMBER_ID)
        assert [r.date for r in by_date] == [TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=2)]

        math_only = service.list_records(MEMBER_ID, subject="math")
        assert {r.subject for r in math_only} == {"math"}

        by_accuracy = service.list_records(MEMBER_ID, sort="accuracy", order="asc")
        assert [r.questions_correct for r in by_accuracy] == [3, 5, 9]

        with pytest.raises(ValidationError):
            service.list_records(MEMBER_ID, sort="name")

    def test_study_history(self, db_session):
        service = RecordService(db_session)
        add_record(service, day_offset=0, total=20, correct=18)
        add_record(service, day_offset=1, total=8, correct=7)
        add_record(service, day_offset=3, subject="social", total=5, correct=3)
        add_record(service, day_offset=40, subject="social", total=5, correct=5)

        history = service.get_study_history(MEMBER_ID, today=TODAY)

        assert history.total_days == 3
        assert history.continuation_days == 2
        assert history.subject_accuracy["math"].correct == 25
        assert history.subject_accuracy["math"].total == 28
        assert history.subject_accuracy["social"].total == 5
        assert history.recent_records[0].questions_total == 20

    def test_dashboard(self, db_session):
        service = RecordService(db_session)
        add_record(service, day_offset=0, total=10, correct=5, emotion="hard")
        add_record(service, day_offset=0, total=10, correct=9, emotion="good")
        add_record(service, day_offset=1, subject="science", total=10, correct=7, emotion="normal")
        add_record(service, day_offset=8, subject="science", total=10, correct=4, emotion="hard")

        dashboard = service.get_dashboard(MEMBER_ID, today=TODAY)

        assert dashboard["continue_days"] == 2
        assert dashboard["total_sessions"] == 4

        [today_record] = dashboard["today_records"]
        assert today_record["attempt_number"] == 2
        assert [a["accuracy"] for a in today_record["history"]] == [50, 90]
        assert today_record["improvement"] == 40

        stats = {s["subject"]: s for s in dashboard["subject_stats"]}
        assert set(stats) == {"math", "science"}
        assert stats["science"]["label"] == "理科"
        assert stats["science"]["accuracy"] == 55

        # 同数时 good 优先
        assert dashboard["recent_emotions"][0] == {"date": TODAY, "emotion": "good", "emoji": "😊"}

        weekly = dashboard["weekly_comparison"]
        assert weekly["this_week"]["accuracy"] == 70
        assert weekly["last_week"]["accuracy"] == 40
        assert weekly["accuracy_delta"] == 30

    def test_dashboard_without_records(self, db_session):
        dashboard = RecordService(db_session).get_dashboard(MEMBER_ID, today=TODAY)
        assert dashboard["continue_days"] == 0
        assert dashboard["subject_stats"] == []
        assert dashboard["weekly_comparison"]["accuracy_delta"] is None


class TestFeedbackService:
    def test_reaction_and_comment(self, db_session):
        record = add_record(RecordService(db_session))
        service = FeedbackService(db_session)

        service.send_reaction(record.id, "parent", "clap")
        service.send_comment(record.id, "teacher", "  よくできました  ")

        feedbacks = service.list_record_feedbacks(record.id)
        assert len(feedbacks) == 2
        assert {f.message for f in feedbacks} == {None, "よくできました"}
        assert len(service.list_member_feedbacks(MEMBER_ID)) == 2

    def test_personalized_message_appends_missing_emoji(self, db_session):
        record = add_record(RecordService(db_session))
        service = FeedbackService(db_session)

        appended = service.send_personalized_message(record.id, "parent", "毎日えらいね", "💝")
        kept = service.send_personalized_message(record.id, "parent", "算数90%😊", "😊")

        assert appended.message == "毎日えらいね💝"
        assert kept.message == "算数90%😊"

    def test_invalid_feedback(self, db_session):
        record = add_record(RecordService(db_session))
        service = FeedbackService(db_session)

        with pytest.raises(ValidationError):
            service.send_comment(record.id, "parent", "   ")
        with pytest.raises(ValidationError):
            service.send_comment(record.id, "student", "hi")
        with pytest.raises(ValidationError):
            service.send_reaction(record.id, "parent", "heart")
        with pytest.raises(NotFoundError):
            service.send_reaction(9999, "parent", "clap")


class TestReflectionService:
    def test_save_is_upsert_by_date(self, db_session):
        service = ReflectionService(db_session)
        first = service.save_reflection(MEMBER_ID, "計算ミスが多かった", "  ", reflection_date=TODAY)
        second = service.save_reflection(MEMBER_ID, "見直しをした", "途中式を書く", reflection_date=TODAY)

        assert first.id == second.id
        assert second.reflection_content == "見直しをした"
        assert second.improvement_points == "途中式を書く"
        assert len(service.list_reflections(MEMBER_ID)) == 1

    def test_blank_improvement_points_become_null(self, db_session):
        reflection = ReflectionService(db_session).save_reflection(
            MEMBER_ID, "がんばった", "   ", reflection_date=TODAY
        )
        assert reflection.improvement_points is None

    def test_teacher_comment(self, db_session):
        service = ReflectionService(db_session)
        reflection = service.save_reflection(MEMBER_ID, "がんばった", reflection_date=TODAY)

        updated = service.add_teacher_comment(reflection.id, "いい振り返りです")
        assert updated.teacher_comment == "いい振り返りです"

        with pytest.raises(NotFoundError):
            service.add_teacher_comment(9999, "comment")
        with pytest.raises(ValidationError):
            service.save_reflection(MEMBER_ID, "  ", reflection_date=TODAY)


class TestMemberService:
    def test_validate_member(self, db_session):
        service = MemberService(db_session)
        assert service.validate_member(MEMBER_ID).name == "テスト生徒１"
        assert service.validate_member("00000000") is None
        assert len(service.list_members()) == 15

    def test_student_login_needs_no_password(self, db_session):
        context = MemberService(db_session).login(MEMBER_ID, UserRole.STUDENT)
        assert context.authenticated
        assert context.role == UserRole.STUDENT

    def test_parent_password_flow(self, db_session):
        service = MemberService(db_session)

        context = service.login(MEMBER_ID, "parent")
        assert context.needs_password_setup
        assert not context.authenticated

        with pytest.raises(ValidationError):
            service.set_password(MEMBER_ID, "parent", "123")
        service.set_password(MEMBER_ID, "parent", "1234")

        assert service.login(MEMBER_ID, "parent", "1234").authenticated
        with pytest.raises(AuthenticationError):
            service.login(MEMBER_ID, "parent", "9999")
        # 老师的口令独立
        assert not service.is_password_set(MEMBER_ID, "teacher")

        assert service.reset_password(MEMBER_ID, "parent")
        assert not service.reset_password(MEMBER_ID, "parent")
        assert service.login(MEMBER_ID, "parent").needs_password_setup

    def test_student_role_has_no_password(self, db_session):
        with pytest.raises(ValidationError):
            MemberService(db_session).set_password(MEMBER_ID, "student", "1234")


class TestMessageService:
    @pytest.mark.asyncio
    async def test_generate_for_record_stores_batch(self, db_session, orchestrator):
        record = add_record(RecordService(db_session), total=20, correct=18)
        service = MessageService(db_session, orchestrator=orchestrator)

        _, messages = await service.generate_for_record(record.id, "parent", today=TODAY)

        assert len(messages) == 3
        assert all(m.source == MessageSource.FALLBACK for m in messages)
        [batch] = service.list_generated(record.id)
        assert batch.sender_type == "parent"
        assert [m["source"] for m in batch.messages] == ["fallback"] * 3

    @pytest.mark.asyncio
    async def test_history_failure_uses_single_record_history(self, db_session, orchestrator, monkeypatch):
        record_service = RecordService(db_session)
        add_record(record_service, day_offset=1)
        record = add_record(record_service, total=20, correct=18)
        service = MessageService(db_session, orchestrator=orchestrator)

        def broken_history(*args, **kwargs):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(service.record_service, "get_study_history", broken_history)
        captured = {}
        original = orchestrator.generate_personalized_messages

        async def capture(study_data, history, audience):
            captured["history"] = history
            return await original(study_data, history, audience)

        monkeypatch.setattr(orchestrator, "generate_personalized_messages", capture)

        _, messages = await service.generate_for_record(record.id, "teacher", today=TODAY)

        assert len(messages) == 3
        assert captured["history"].total_days == 1
        assert captured["history"].continuation_days == 1
        assert captured["history"].subject_accuracy["math"].total == 20

    @pytest.mark.asyncio
    async def test_next_day_generation_keeps_streak(self, db_session, orchestrator):
        record_service = RecordService(db_session)
        for offset in (3, 2):
            add_record(record_service, day_offset=offset)
        latest = add_record(record_service, day_offset=1, total=20, correct=18)
        service = MessageService(db_session, orchestrator=orchestrator)

        # 记录的第二天（今天无记录）生成消息
        _, messages = await service.generate_for_record(latest.id, "parent", today=TODAY)

        assert messages[2].message.startswith("3日")
        assert not any(m.message.startswith("0日") for m in messages)

    @pytest.mark.asyncio
    async def test_missing_record(self, db_session, orchestrator):
        with pytest.raises(NotFoundError):
            await MessageService(db_session, orchestrator=orchestrator).generate_for_record(9999, "parent")
