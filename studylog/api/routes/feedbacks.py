import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from studylog.utils.database import get_db
from studylog.services.exceptions import ServiceError
from studylog.services.feedback_service import FeedbackService
from studylog.api.schemas.feedback_schemas import (
    FeedbackResponse, ReactionCreate, CommentCreate, PersonalizedFeedbackCreate
)

logger = logging.getLogger(__name__)
router = APIRouter()

def _send(action: str, send):
    try:
        return send()
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"{action}失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="送信に失敗しました"
        )

@router.post("/reaction", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
async def send_reaction(body: ReactionCreate, db: Session = Depends(get_db)):
    """
    发送反应（👏/👍/💪）
    """
    service = FeedbackService(db)
    return _send("发送反应", lambda: service.send_reaction(
        body.record_id, body.sender_type.value, body.reaction_type.value
    ))

@router.post("/comment", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
async def send_comment(body: CommentCreate, db: Session = Depends(get_db)):
    """
    发送文字消息
    """
    service = FeedbackService(db)
    return _send("发送消息", lambda: service.send_comment(
        body.record_id, body.sender_type.value, body.message
    ))

@router.post("/personalized", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
async def send_personalized(body: PersonalizedFeedbackCreate, db: Session = Depends(get_db)):
    """
    发送选中的个性化消息
    """
    service = FeedbackService(db)
    return _send("发送个性化消息", lambda: service.send_personalized_message(
        body.record_id, body.sender_type.value, body.message, body.emoji
    ))

@router.get("/record/{record_id}", response_model=List[FeedbackResponse])
async def list_record_feedbacks(record_id: int, db: Session = Depends(get_db)):
    return FeedbackService(db).list_record_feedbacks(record_id)

@router.get("/member/{member_id}", response_model=List[FeedbackResponse])
async def list_member_feedbacks(member_id: str, db: Session = Depends(get_db)):
    """
    某成员收到的全部反馈（新的在前）
    """
    return FeedbackService(db).list_member_feedbacks(member_id)
