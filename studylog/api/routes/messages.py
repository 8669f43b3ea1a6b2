import logging
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from studylog.utils.database import get_db
from studylog.api.dependencies import get_message_orchestrator
from studylog.messaging.history import degenerate_history
from studylog.messaging.orchestrator import MessageOrchestrator
from studylog.messaging.vocabulary import AudienceType
from studylog.services.message_service import MessageService
from studylog.api.schemas.message_schemas import (
    GenerateMessagesRequest, MessagesResponse, RecordMessagesResponse, GeneratedBatchResponse
)

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/generate", response_model=MessagesResponse)
async def generate_messages(
    body: GenerateMessagesRequest,
    orchestrator: MessageOrchestrator = Depends(get_message_orchestrator)
):
    """
    无状态生成：请求体自带学习数据与履历，总是返回3条消息
    """
    history = body.study_history or degenerate_history(body.study_data)
    messages = await orchestrator.generate_personalized_messages(
        body.study_data, history, body.sender_type
    )
    return {"messages": messages}

@router.post("/records/{record_id}", response_model=RecordMessagesResponse)
async def generate_for_record(
    record_id: int,
    sender_type: AudienceType = Query(..., description="parent / teacher"),
    db: Session = Depends(get_db),
    orchestrator: MessageOrchestrator = Depends(get_message_orchestrator)
):
    """
    为已保存的学习记录生成3条候选消息
    """
    service = MessageService(db, orchestrator=orchestrator)
    record, messages = await service.generate_for_record(record_id, sender_type)
    return {"record_id": record.id, "sender_type": sender_type, "messages": messages}

@router.get("/records/{record_id}", response_model=List[GeneratedBatchResponse])
async def list_generated(
    record_id: int,
    db: Session = Depends(get_db),
    orchestrator: MessageOrchestrator = Depends(get_message_orchestrator)
):
    """
    某条记录的生成历史
    """
    return MessageService(db, orchestrator=orchestrator).list_generated(record_id)
