from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from .base import Base, utcnow


class ScheduleTemplateModel(Base):
    __tablename__ = "schedule_templates"

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday ... 6 = Saturday
    time_slot = Column(String(5), nullable=False)  # "HH:MM"
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
