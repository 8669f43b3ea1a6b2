from typing import List
from sqlalchemy.orm import Session

from studylog.models.generated_message import GeneratedMessage
from studylog.repositories.base import BaseRepository


class GeneratedMessageRepository(BaseRepository[GeneratedMessage]):
    def __init__(self, db: Session):
        super().__init__(db, GeneratedMessage)
    
    def get_by_record(self, record_id: int) -> List[GeneratedMessage]:
        """某条记录的生成历史（新的在前）"""
        return self.db.query(GeneratedMessage).filter(
            GeneratedMessage.record_id == record_id
        ).order_by(GeneratedMessage.generated_at.desc(), GeneratedMessage.id.desc()).all()
