import logging
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from studylog.messaging.history import degenerate_history
from studylog.messaging.orchestrator import MessageOrchestrator
from studylog.messaging.values import PersonalizedMessage, StudyData, StudyHistory
from studylog.messaging.vocabulary import AudienceType
from studylog.models.generated_message import GeneratedMessage
from studylog.models.study_record import StudyRecord
from studylog.repositories.generated_message_repository import GeneratedMessageRepository
from studylog.services.record_service import RecordService

logger = logging.getLogger(__name__)


class MessageService:
    """为学习记录生成3条候选鼓励消息"""

    def __init__(self, db: Session, orchestrator: Optional[MessageOrchestrator] = None):
        self.db = db
        self.record_service = RecordService(db)
        self.generated_repo = GeneratedMessageRepository(db)
        self.orchestrator = orchestrator or MessageOrchestrator()

    async def generate_for_record(self, record_id: int, sender_type: AudienceType,
                                  today: Optional[date] = None) -> Tuple[StudyRecord, List[PersonalizedMessage]]:
        """
        为指定记录生成消息
        - 履历获取失败时改用只含本条记录的履历
        - 生成结果写入 generated_messages，写入失败只记录日志
        """
        record = self.record_service.get_record(record_id)
        study_data = StudyData.from_record(record)

        try:
            history = self.record_service.get_study_history(record.member_id, today=today)
        except Exception as e:
            logger.error(f"获取学习履历失败，使用单条记录履历: {e}")
            self.db.rollback()
            history = degenerate_history(study_data)

        messages = await self.orchestrator.generate_personalized_messages(study_data, history, sender_type)
        self._store_batch(record.id, AudienceType(sender_type), messages)
        return record, messages

    async def generate(self, study_data: StudyData, history: StudyHistory,
                       sender_type: AudienceType) -> List[PersonalizedMessage]:
        """不落库的生成（调用方自带学习数据与履历）"""
        return await self.orchestrator.generate_personalized_messages(study_data, history, sender_type)

    def list_generated(self, record_id: int) -> List[GeneratedMessage]:
        self.record_service.get_record(record_id)
        return self.generated_repo.get_by_record(record_id)

    def _store_batch(self, record_id: int, sender_type: AudienceType,
                     messages: List[PersonalizedMessage]) -> None:
        try:
            self.generated_repo.create(
                record_id=record_id,
                sender_type=sender_type.value,
                messages=[m.model_dump(mode="json") for m in messages],
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"保存生成消息失败: 记录{record_id}, {e}")
