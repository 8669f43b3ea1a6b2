from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, JSON

from .base import BaseModel, utc_now


"""
生成消息记录  
每次为某条学习记录生成的3条候选消息（含 source 标记），仅作审计，不作为缓存使用。
"""

class GeneratedMessage(BaseModel):
    __tablename__ = "generated_messages"

    record_id = Column(Integer, ForeignKey("study_records.id", ondelete="CASCADE"), index=True, nullable=False)
    sender_type = Column(String(20), nullable=False)
    messages = Column(JSON, nullable=False)
    generated_at = Column(DateTime, default=utc_now)
