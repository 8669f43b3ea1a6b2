from typing import List
from sqlalchemy.orm import Session

from studylog.models.feedback import Feedback
from studylog.models.study_record import StudyRecord
from studylog.repositories.base import BaseRepository


class FeedbackRepository(BaseRepository[Feedback]):
    def __init__(self, db: Session):
        super().__init__(db, Feedback)
    
    def get_by_record(self, record_id: int) -> List[Feedback]:
        return self.db.query(Feedback).filter(
            Feedback.record_id == record_id
        ).order_by(Feedback.created_at.desc(), Feedback.id.desc()).all()
    
    def get_member_feedbacks(self, member_id: str) -> List[Feedback]:
        """获取某成员所有记录收到的反馈（新的在前）"""
        return self.db.query(Feedback).join(StudyRecord).filter(
            StudyRecord.member_id == member_id
        ).order_by(Feedback.created_at.desc(), Feedback.id.desc()).all()
