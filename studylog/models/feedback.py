from sqlalchemy import Column, String, Integer, ForeignKey, Text, CheckConstraint
from sqlalchemy.orm import relationship
from studylog.messaging.vocabulary import REACTION_LABELS
from .base import BaseModel


"""
反馈模型  
保护者/指导者对某条学习记录的反应（clap/thumbs/muscle）或文字消息，两者至少有一个。
"""

class Feedback(BaseModel):
    __tablename__ = "feedbacks"
    __table_args__ = (
        CheckConstraint("sender_type IN ('parent', 'teacher')", name="ck_feedback_sender_type"),
        CheckConstraint(
            "reaction_type IS NULL OR reaction_type IN ('clap', 'thumbs', 'muscle')",
            name="ck_feedback_reaction_type"
        ),
        CheckConstraint("reaction_type IS NOT NULL OR message IS NOT NULL", name="feedback_content_check"),
    )

    record_id = Column(Integer, ForeignKey("study_records.id", ondelete="CASCADE"), index=True, nullable=False)
    sender_type = Column(String(20), nullable=False)
    reaction_type = Column(String(10))
    message = Column(Text)

    record = relationship("StudyRecord", back_populates="feedbacks")

    @property
    def reaction_label(self):
        """例如 "👏 すごい！"；文字消息时为 None"""
        if not self.reaction_type:
            return None
        return " ".join(REACTION_LABELS.get(self.reaction_type, (self.reaction_type,)))
