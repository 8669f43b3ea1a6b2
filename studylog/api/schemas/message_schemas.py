from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

from studylog.messaging.values import PersonalizedMessage, StudyData, StudyHistory
from studylog.messaging.vocabulary import AudienceType

class GenerateMessagesRequest(BaseModel):
    """无状态生成接口的请求体（字段名与前端一致）"""
    study_data: StudyData = Field(..., alias="studyData")
    study_history: Optional[StudyHistory] = Field(default=None, alias="studyHistory")
    sender_type: AudienceType = Field(..., alias="senderType")

    model_config = ConfigDict(
        populate_by_name=True
    )

class MessagesResponse(BaseModel):
    messages: List[PersonalizedMessage]

class RecordMessagesResponse(MessagesResponse):
    record_id: int
    sender_type: AudienceType

class GeneratedBatchResponse(BaseModel):
    id: int
    record_id: int
    sender_type: AudienceType
    messages: List[PersonalizedMessage]
    generated_at: datetime

    model_config = ConfigDict(
        from_attributes=True
    )
