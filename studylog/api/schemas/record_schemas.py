from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional
import datetime as dt

from studylog.api.schemas.feedback_schemas import FeedbackResponse
from studylog.messaging.vocabulary import ContentType, Emotion, Subject

class StudyRecordCreate(BaseModel):
    member_id: str
    subject: Subject
    questions_total: int = Field(..., ge=1, le=100)
    questions_correct: int = Field(..., ge=0)
    emotion: Emotion
    comment: Optional[str] = Field(default=None, max_length=300)
    content_type: ContentType = ContentType.CLASS
    study_date: Optional[dt.date] = None
    date: Optional[dt.date] = None

    @model_validator(mode="after")
    def check_correct_not_above_total(self):
        if self.questions_correct > self.questions_total:
            raise ValueError("正答数は問題数以下にしてください")
        return self

class StudyRecordResponse(BaseModel):
    id: int
    member_id: str
    date: dt.date
    study_date: dt.date
    subject: Subject
    content_type: ContentType
    attempt_number: int
    questions_total: int
    questions_correct: int
    emotion: Emotion
    comment: Optional[str] = None
    created_at: dt.datetime

    model_config = ConfigDict(
        from_attributes=True
    )

class StudyRecordWithFeedbacks(StudyRecordResponse):
    feedbacks: List[FeedbackResponse] = []

class AttemptEntry(BaseModel):
    attempt: int
    correct: int
    total: int
    accuracy: int
    record_date: dt.date
    emotion: Emotion

class TodayRecord(BaseModel):
    id: int
    study_date: dt.date
    subject: Subject
    subject_label: str
    content_type: ContentType
    content_type_label: str
    attempt_number: int
    questions_total: int
    questions_correct: int
    accuracy: int
    emotion: Emotion
    comment: Optional[str] = None
    history: List[AttemptEntry]
    improvement: Optional[int] = None

class SubjectStat(BaseModel):
    subject: Subject
    label: str
    icon: str
    total_questions: int
    total_correct: int
    accuracy: int

class EmotionEntry(BaseModel):
    date: dt.date
    emotion: Emotion
    emoji: str

class WeekSummary(BaseModel):
    records: int
    total_questions: int
    total_correct: int
    accuracy: Optional[int] = None

class WeeklyComparison(BaseModel):
    this_week: WeekSummary
    last_week: WeekSummary
    accuracy_delta: Optional[int] = None

class DashboardResponse(BaseModel):
    member_id: str
    today: dt.date
    continue_days: int
    today_records: List[TodayRecord]
    subject_stats: List[SubjectStat]
    recent_emotions: List[EmotionEntry]
    weekly_comparison: WeeklyComparison
    total_sessions: int
