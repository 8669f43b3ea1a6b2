from sqlalchemy import Column, String, Boolean, UniqueConstraint, CheckConstraint
from .base import BaseModel

"""
成员模型  
会员号（8位数字字符串）与姓名；保护者/指导者模式的口令按 (会员号, 角色) 单独保存。
"""

class Member(BaseModel):
    __tablename__ = "members"

    member_id = Column(String(20), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    is_active = Column(Boolean, default=True)

class RolePassword(BaseModel):
    __tablename__ = "role_passwords"
    __table_args__ = (
        UniqueConstraint("member_id", "role", name="uq_role_password_member_role"),
        CheckConstraint("role IN ('parent', 'teacher')", name="ck_role_password_role"),
    )

    member_id = Column(String(20), index=True, nullable=False)
    role = Column(String(20), nullable=False)
    password_hash = Column(String(128), nullable=False)
