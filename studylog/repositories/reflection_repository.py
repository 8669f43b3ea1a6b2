from typing import List, Optional
from datetime import date
from sqlalchemy.orm import Session

from studylog.models.reflection import Reflection
from studylog.repositories.base import BaseRepository


class ReflectionRepository(BaseRepository[Reflection]):
    def __init__(self, db: Session):
        super().__init__(db, Reflection)
    
    def get_member_reflections(self, member_id: str) -> List[Reflection]:
        """新的日期在前"""
        return self.list_member(member_id, Reflection.date.desc())
    
    def get_by_date(self, member_id: str, reflection_date: date) -> Optional[Reflection]:
        return self.get_first_by(member_id=member_id, date=reflection_date)
