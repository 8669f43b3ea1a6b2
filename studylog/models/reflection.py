from sqlalchemy import Column, String, Date, Text, UniqueConstraint
from .base import BaseModel


"""
振り返り（反思日记）模型  
学生每天一条，同一天重复提交时覆盖内容；指导者可以追加评语。
"""

class Reflection(BaseModel):
    __tablename__ = "reflections"
    __table_args__ = (
        UniqueConstraint("member_id", "date", name="uq_reflection_member_date"),
    )

    member_id = Column(String(20), index=True, nullable=False)
    date = Column(Date, nullable=False)
    reflection_content = Column(Text, nullable=False)
    improvement_points = Column(Text)
    teacher_comment = Column(Text)
