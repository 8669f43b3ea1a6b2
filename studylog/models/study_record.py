from sqlalchemy import Column, String, Integer, Date, Text, CheckConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel


"""
学习记录模型  
学生每次练习提交一条记录：科目、授业/宿题、第几次挑战、题数、正答数、心情、备注。
date 是记录日，study_date 是学习内容的实施日。记录只追加，不修改。
"""

class StudyRecord(BaseModel):
    __tablename__ = "study_records"
    __table_args__ = (
        CheckConstraint(
            "subject IN ('aptitude', 'japanese', 'math', 'science', 'social')",
            name="ck_study_record_subject"
        ),
        CheckConstraint("content_type IN ('class', 'homework')", name="ck_study_record_content_type"),
        CheckConstraint("questions_total >= 1 AND questions_total <= 100", name="ck_study_record_total"),
        CheckConstraint("questions_correct >= 0", name="ck_study_record_correct_min"),
        CheckConstraint("questions_correct <= questions_total", name="valid_correct_answers"),
        CheckConstraint("emotion IN ('good', 'normal', 'hard')", name="ck_study_record_emotion"),
    )

    member_id = Column(String(20), index=True, nullable=False)
    date = Column(Date, index=True, nullable=False)
    study_date = Column(Date, nullable=False)
    subject = Column(String(20), nullable=False)
    content_type = Column(String(20), nullable=False, default="class")
    attempt_number = Column(Integer, nullable=False, default=1)
    questions_total = Column(Integer, nullable=False)
    questions_correct = Column(Integer, nullable=False)
    emotion = Column(String(10), nullable=False)
    comment = Column(Text)

    feedbacks = relationship(
        "Feedback",
        back_populates="record",
        cascade="all, delete-orphan",
        order_by="Feedback.created_at.desc()"
    )
