from typing import Optional, List
from sqlalchemy.orm import Session
from studylog.models.member import Member, RolePassword
from studylog.repositories.base import BaseRepository


class MemberRepository(BaseRepository[Member]):
    def __init__(self, db: Session):
        super().__init__(db, Member)
    
    def get_by_member_id(self, member_id: str) -> Optional[Member]:
        """根据会员号获取成员"""
        return self.get_first_by(member_id=member_id)
    
    def get_active_members(self) -> List[Member]:
        """获取所有有效成员"""
        return self.db.query(Member).filter(Member.is_active == True).order_by(Member.id).all()


class RolePasswordRepository(BaseRepository[RolePassword]):
    def __init__(self, db: Session):
        super().__init__(db, RolePassword)
    
    def get_for_role(self, member_id: str, role: str) -> Optional[RolePassword]:
        return self.get_first_by(member_id=member_id, role=role)
    
    def upsert(self, member_id: str, role: str, password_hash: str) -> RolePassword:
        """存在则覆盖口令，不存在则新建"""
        existing = self.get_for_role(member_id, role)
        if existing:
            return self.update(existing.id, password_hash=password_hash)
        return self.create(member_id=member_id, role=role, password_hash=password_hash)
