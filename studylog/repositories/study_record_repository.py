from typing import List, Optional
from datetime import date
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func

from studylog.models.study_record import StudyRecord
from studylog.repositories.base import BaseRepository


class StudyRecordRepository(BaseRepository[StudyRecord]):
    def __init__(self, db: Session):
        super().__init__(db, StudyRecord)
    
    def get_member_records(self, member_id: str, subject: Optional[str] = None,
                           with_feedbacks: bool = False) -> List[StudyRecord]:
        """获取成员全部记录（新的在前）"""
        query = self.for_member(member_id)
        if subject:
            query = query.filter(StudyRecord.subject == subject)
        if with_feedbacks:
            query = query.options(selectinload(StudyRecord.feedbacks))
        return query.order_by(
            StudyRecord.study_date.desc(),
            StudyRecord.date.desc(),
            StudyRecord.id.desc()
        ).all()
    
    def get_records_since_date(self, member_id: str, since_date: date) -> List[StudyRecord]:
        """获取指定日期（含）之后的记录，按记录日倒序"""
        return self.for_member(member_id).filter(
            StudyRecord.date >= since_date
        ).order_by(StudyRecord.date.desc(), StudyRecord.id.desc()).all()
    
    def get_max_attempt_number(self, member_id: str, study_date: date,
                               subject: str, content_type: str) -> int:
        """同一学习内容（实施日+科目+授业/宿题）已有的最大挑战次数"""
        result = self.db.query(func.max(StudyRecord.attempt_number)).filter(
            StudyRecord.member_id == member_id,
            StudyRecord.study_date == study_date,
            StudyRecord.subject == subject,
            StudyRecord.content_type == content_type
        ).scalar()
        return result or 0
