from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from .base import Base, utcnow

TASK_STATUS_PENDING = "pending"
TASK_STATUS_IN_PROGRESS = "in_progress"
TASK_STATUS_COMPLETED = "completed"


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    creator_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    executor_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    thanked_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    status = Column(String, nullable=False, default=TASK_STATUS_PENDING)
    executed_at = Column(DateTime(timezone=True), nullable=True)
    thanked_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
