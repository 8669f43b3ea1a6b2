#!/usr/bin/env python3
"""
成员服务模块
会员号校验，以及保护者/指导者模式的简易口令（4位以上）。
口令只是家庭内防误操作的门槛，不是访问控制。
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from sqlalchemy.orm import Session

from studylog.config.settings import settings
from studylog.models.member import Member
from studylog.repositories.member_repository import MemberRepository, RolePasswordRepository
from studylog.services.exceptions import AuthenticationError, NotFoundError, ValidationError
from studylog.utils.helpers import hash_password

logger = logging.getLogger(__name__)


class UserRole(str, Enum):
    STUDENT = "student"
    PARENT = "parent"
    TEACHER = "teacher"


PROTECTED_ROLES = (UserRole.PARENT, UserRole.TEACHER)


@dataclass
class AuthContext:
    """一次登录的结果，由调用方显式持有并传递"""
    member_id: str
    name: str
    role: UserRole
    authenticated: bool
    needs_password_setup: bool = False


class MemberService:
    def __init__(self, db: Session):
        self.db = db
        self.member_repo = MemberRepository(db)
        self.password_repo = RolePasswordRepository(db)

    def validate_member(self, member_id: str) -> Optional[Member]:
        """会员号存在且有效时返回成员"""
        member = self.member_repo.get_by_member_id(member_id.strip())
        if member and member.is_active:
            return member
        return None

    def get_member(self, member_id: str) -> Member:
        member = self.validate_member(member_id)
        if not member:
            raise NotFoundError(f"会員番号 {member_id} は登録されていません")
        return member

    def list_members(self) -> List[Member]:
        return self.member_repo.get_active_members()

    def is_password_set(self, member_id: str, role: UserRole) -> bool:
        role = self._protected_role(role)
        return self.password_repo.get_for_role(member_id, role.value) is not None

    def set_password(self, member_id: str, role: UserRole, password: str) -> None:
        role = self._protected_role(role)
        self.get_member(member_id)
        if not password or len(password) < settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(f"パスワードは{settings.MIN_PASSWORD_LENGTH}文字以上で設定してください")
        self.password_repo.upsert(member_id, role.value, hash_password(member_id, role.value, password))
        logger.info(f"设置口令: 成员{member_id}, 角色{role.value}")

    def verify_password(self, member_id: str, role: UserRole, password: str) -> bool:
        role = self._protected_role(role)
        stored = self.password_repo.get_for_role(member_id, role.value)
        if not stored:
            return False
        return stored.password_hash == hash_password(member_id, role.value, password or "")

    def reset_password(self, member_id: str, role: UserRole) -> bool:
        """删除口令（管理用），返回是否确实删除了"""
        role = self._protected_role(role)
        stored = self.password_repo.get_for_role(member_id, role.value)
        if not stored:
            return False
        self.password_repo.delete_instance(stored)
        logger.info(f"重置口令: 成员{member_id}, 角色{role.value}")
        return True

    def login(self, member_id: str, role: UserRole, password: Optional[str] = None) -> AuthContext:
        """
        登录
        - 学生模式只需有效的会员号
        - 保护者/指导者模式：未设置口令时返回 needs_password_setup，已设置则校验口令
        """
        member = self.get_member(member_id)
        role = UserRole(role)

        if role == UserRole.STUDENT:
            return AuthContext(member.member_id, member.name, role, authenticated=True)

        if not self.is_password_set(member.member_id, role):
            return AuthContext(member.member_id, member.name, role,
                               authenticated=False, needs_password_setup=True)

        if not self.verify_password(member.member_id, role, password):
            logger.info(f"口令校验失败: 成员{member.member_id}, 角色{role.value}")
            raise AuthenticationError("パスワードが正しくありません")

        return AuthContext(member.member_id, member.name, role, authenticated=True)

    @staticmethod
    def _protected_role(role) -> UserRole:
        role = UserRole(role)
        if role not in PROTECTED_ROLES:
            raise ValidationError("パスワードは保護者・指導者モードのみ設定できます")
        return role
