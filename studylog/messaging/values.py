import datetime as dt
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from studylog.messaging.vocabulary import Emotion, MessageType, MessageSource

"""
消息生成用的值对象。
字段名使用 snake_case，同时接受/输出前端使用的 camelCase 别名。
"""


class StudyData(BaseModel):
    """一次练习的结果"""
    model_config = ConfigDict(populate_by_name=True)

    subject: str
    questions_total: int = Field(alias="questionsTotal", ge=1)
    questions_correct: int = Field(alias="questionsCorrect", ge=0)
    emotion: Emotion
    comment: Optional[str] = Field(default=None, max_length=300)
    date: dt.date

    @model_validator(mode="after")
    def check_correct_not_above_total(self):
        if self.questions_correct > self.questions_total:
            raise ValueError("questions_correct must not exceed questions_total")
        return self

    @classmethod
    def from_record(cls, record) -> "StudyData":
        """由 StudyRecord ORM 对象构造"""
        return cls(
            subject=record.subject,
            questions_total=record.questions_total,
            questions_correct=record.questions_correct,
            emotion=record.emotion,
            comment=record.comment or None,
            date=record.date,
        )


class SubjectAccuracy(BaseModel):
    correct: int = 0
    total: int = 0


class StudyHistory(BaseModel):
    """由学习记录汇总得到的履历，不落库"""
    model_config = ConfigDict(populate_by_name=True)

    recent_records: List[StudyData] = Field(default_factory=list, alias="recentRecords")
    total_days: int = Field(default=0, alias="totalDays", ge=0)
    continuation_days: int = Field(default=0, alias="continuationDays", ge=0)
    subject_accuracy: Dict[str, SubjectAccuracy] = Field(default_factory=dict, alias="subjectAccuracy")


class PersonalizedMessage(BaseModel):
    message: str
    emoji: str
    type: MessageType
    source: Optional[MessageSource] = None
