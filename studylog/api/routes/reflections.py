import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from studylog.utils.database import get_db
from studylog.services.exceptions import ServiceError
from studylog.services.reflection_service import ReflectionService
from studylog.api.schemas.reflection_schemas import (
    ReflectionSave, TeacherCommentUpdate, ReflectionResponse
)

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("/member/{member_id}", response_model=List[ReflectionResponse])
async def list_reflections(member_id: str, db: Session = Depends(get_db)):
    """
    反思列表（新的在前）
    """
    return ReflectionService(db).list_reflections(member_id)

@router.put("", response_model=ReflectionResponse)
async def save_reflection(body: ReflectionSave, db: Session = Depends(get_db)):
    """
    保存当天的反思（已存在则更新）
    """
    try:
        return ReflectionService(db).save_reflection(
            member_id=body.member_id,
            reflection_content=body.reflection_content,
            improvement_points=body.improvement_points,
            reflection_date=body.date,
        )
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"保存反思失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="振り返りの保存に失敗しました"
        )

@router.put("/{reflection_id}/teacher-comment", response_model=ReflectionResponse)
async def add_teacher_comment(reflection_id: int, body: TeacherCommentUpdate,
                              db: Session = Depends(get_db)):
    """
    指导者评语
    """
    try:
        return ReflectionService(db).add_teacher_comment(reflection_id, body.teacher_comment)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"保存指导者评语失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="先生コメントの保存に失敗しました"
        )
