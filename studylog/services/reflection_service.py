import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from studylog.models.reflection import Reflection
from studylog.repositories.member_repository import MemberRepository
from studylog.repositories.reflection_repository import ReflectionRepository
from studylog.services.exceptions import NotFoundError, ValidationError
from studylog.utils.helpers import today_local

logger = logging.getLogger(__name__)


class ReflectionService:
    """振り返り（每日反思）服务"""

    def __init__(self, db: Session):
        self.db = db
        self.reflection_repo = ReflectionRepository(db)
        self.member_repo = MemberRepository(db)

    def list_reflections(self, member_id: str) -> List[Reflection]:
        return self.reflection_repo.get_member_reflections(member_id)

    def save_reflection(self, member_id: str, reflection_content: str,
                        improvement_points: Optional[str] = None,
                        reflection_date: Optional[date] = None) -> Reflection:
        """
        保存反思：同一天已有则更新内容，否则新建
        
        Args:
            member_id: 会员号
            reflection_content: 反思内容（必填）
            improvement_points: 改进点（空白视为未填写）
            reflection_date: 日期，默认今天
        """
        if not self.member_repo.get_by_member_id(member_id):
            raise NotFoundError(f"会員番号 {member_id} は登録されていません")

        content = (reflection_content or "").strip()
        if not content:
            raise ValidationError("日付と振り返り内容は必須です")
        points = (improvement_points or "").strip() or None
        reflection_date = reflection_date or today_local()

        existing = self.reflection_repo.get_by_date(member_id, reflection_date)
        if existing:
            logger.info(f"更新反思: 成员{member_id}, {reflection_date}")
            return self.reflection_repo.update(
                existing.id,
                reflection_content=content,
                improvement_points=points,
            )

        logger.info(f"新建反思: 成员{member_id}, {reflection_date}")
        return self.reflection_repo.create(
            member_id=member_id,
            date=reflection_date,
            reflection_content=content,
            improvement_points=points,
        )

    def add_teacher_comment(self, reflection_id: int, comment: str) -> Reflection:
        text = (comment or "").strip()
        if not text:
            raise ValidationError("コメントを入力してください")
        reflection = self.reflection_repo.update(reflection_id, teacher_comment=text)
        if not reflection:
            raise NotFoundError(f"振り返り {reflection_id} が見つかりません")
        logger.info(f"指导者评语已保存: 反思{reflection_id}")
        return reflection
