from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from studylog.messaging.vocabulary import AudienceType, ReactionType

class FeedbackResponse(BaseModel):
    id: int
    record_id: int
    sender_type: AudienceType
    reaction_type: Optional[ReactionType] = None
    reaction_label: Optional[str] = None
    message: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(
        from_attributes=True
    )

class ReactionCreate(BaseModel):
    record_id: int
    sender_type: AudienceType
    reaction_type: ReactionType

class CommentCreate(BaseModel):
    record_id: int
    sender_type: AudienceType
    message: str = Field(..., max_length=500)

class PersonalizedFeedbackCreate(BaseModel):
    record_id: int
    sender_type: AudienceType
    message: str = Field(..., max_length=500)
    emoji: str = ""
