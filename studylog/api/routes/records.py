import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from studylog.utils.database import get_db
from studylog.services.exceptions import ServiceError
from studylog.services.record_service import RecordService
from studylog.messaging.values import StudyHistory
from studylog.messaging.vocabulary import Subject
from studylog.api.schemas.record_schemas import (
    StudyRecordCreate, StudyRecordResponse, StudyRecordWithFeedbacks, DashboardResponse
)

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("", response_model=StudyRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_record(body: StudyRecordCreate, db: Session = Depends(get_db)):
    """
    提交学习记录
    """
    try:
        return RecordService(db).create_record(
            member_id=body.member_id,
            subject=body.subject.value,
            questions_total=body.questions_total,
            questions_correct=body.questions_correct,
            emotion=body.emotion.value,
            comment=body.comment,
            content_type=body.content_type.value,
            study_date=body.study_date,
            record_date=body.date,
        )
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"保存学习记录失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="学習記録の保存に失敗しました"
        )

@router.get("/member/{member_id}", response_model=List[StudyRecordWithFeedbacks])
async def list_records(
    member_id: str,
    subject: Optional[Subject] = Query(None, description="科目筛选"),
    sort: str = Query("date", description="排序: date / accuracy / emotion"),
    order: str = Query("desc", description="asc / desc"),
    db: Session = Depends(get_db)
):
    """
    学习履历（附反馈）
    """
    try:
        return RecordService(db).list_records(
            member_id, subject=subject.value if subject else None, sort=sort, order=order
        )
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"获取学习履历失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="履歴データの読み込みに失敗しました"
        )

@router.get("/member/{member_id}/history", response_model=StudyHistory, response_model_by_alias=True)
async def get_study_history(member_id: str, db: Session = Depends(get_db)):
    """
    消息生成用的学习履历汇总
    """
    try:
        return RecordService(db).get_study_history(member_id)
    except Exception as e:
        logger.error(f"汇总学习履历失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="学習履歴の集計に失敗しました"
        )

@router.get("/member/{member_id}/dashboard", response_model=DashboardResponse)
async def get_dashboard(member_id: str, db: Session = Depends(get_db)):
    """
    仪表盘统计
    """
    try:
        return RecordService(db).get_dashboard(member_id)
    except Exception as e:
        logger.error(f"获取仪表盘数据失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="データの取得に失敗しました"
        )

@router.get("/{record_id}", response_model=StudyRecordWithFeedbacks)
async def get_record(record_id: int, db: Session = Depends(get_db)):
    """
    获取单条学习记录
    """
    return RecordService(db).get_record(record_id)
