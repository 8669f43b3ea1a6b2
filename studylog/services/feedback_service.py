import logging
from typing import List

from sqlalchemy.orm import Session

from studylog.messaging.vocabulary import AudienceType, ReactionType
from studylog.models.feedback import Feedback
from studylog.repositories.feedback_repository import FeedbackRepository
from studylog.repositories.study_record_repository import StudyRecordRepository
from studylog.services.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 500


class FeedbackService:
    """
    保护者/指导者对学习记录的反馈
    同一内容重复发送会产生多条记录，这是可接受的。
    """

    def __init__(self, db: Session):
        self.db = db
        self.feedback_repo = FeedbackRepository(db)
        self.record_repo = StudyRecordRepository(db)

    def send_reaction(self, record_id: int, sender_type: str, reaction_type: str) -> Feedback:
        """发送 👏/👍/💪 反应"""
        sender = self._sender(sender_type)
        try:
            reaction = ReactionType(reaction_type)
        except ValueError:
            raise ValidationError(f"不明なリアクションです: {reaction_type}")
        self._ensure_record(record_id)

        feedback = self.feedback_repo.create(
            record_id=record_id,
            sender_type=sender.value,
            reaction_type=reaction.value,
            message=None,
        )
        logger.info(f"反应已发送: 记录{record_id}, {sender.value}, {reaction.value}")
        return feedback

    def send_comment(self, record_id: int, sender_type: str, message: str) -> Feedback:
        """发送自由文字消息"""
        sender = self._sender(sender_type)
        text = (message or "").strip()
        if not text:
            raise ValidationError("コメントを入力してください")
        if len(text) > MAX_MESSAGE_LENGTH:
            raise ValidationError(f"コメントは{MAX_MESSAGE_LENGTH}文字以内で入力してください")
        self._ensure_record(record_id)

        feedback = self.feedback_repo.create(
            record_id=record_id,
            sender_type=sender.value,
            reaction_type=None,
            message=text,
        )
        logger.info(f"消息已发送: 记录{record_id}, {sender.value}")
        return feedback

    def send_personalized_message(self, record_id: int, sender_type: str,
                                  message: str, emoji: str = "") -> Feedback:
        """发送从3条候选中选出的个性化消息；消息里没有该表情时补在末尾"""
        text = (message or "").strip()
        if emoji and emoji not in text:
            text = f"{text}{emoji}"
        return self.send_comment(record_id, sender_type, text)

    def list_record_feedbacks(self, record_id: int) -> List[Feedback]:
        self._ensure_record(record_id)
        return self.feedback_repo.get_by_record(record_id)

    def list_member_feedbacks(self, member_id: str) -> List[Feedback]:
        return self.feedback_repo.get_member_feedbacks(member_id)

    def _ensure_record(self, record_id: int) -> None:
        if not self.record_repo.get_by_id(record_id):
            raise NotFoundError(f"学習記録 {record_id} が見つかりません")

    @staticmethod
    def _sender(sender_type: str) -> AudienceType:
        try:
            return AudienceType(sender_type)
        except ValueError:
            raise ValidationError(f"不明な送信者です: {sender_type}")
