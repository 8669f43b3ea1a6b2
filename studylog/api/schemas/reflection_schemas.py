from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
import datetime as dt

class ReflectionSave(BaseModel):
    member_id: str
    date: Optional[dt.date] = None
    reflection_content: str = Field(..., min_length=1)
    improvement_points: Optional[str] = None

class TeacherCommentUpdate(BaseModel):
    teacher_comment: str = Field(..., min_length=1)

class ReflectionResponse(BaseModel):
    id: int
    member_id: str
    date: dt.date
    reflection_content: str
    improvement_points: Optional[str] = None
    teacher_comment: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = ConfigDict(
        from_attributes=True
    )
