from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from .base import Base, utcnow


class GroupModel(Base):
    __tablename__ = "groups"
    __table_args__ = (
        UniqueConstraint(
            "channel_id",
            "line_group_id",
            name="uq_groups_channel_line_group",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    channel_id = Column(Integer, ForeignKey("channels.id"), index=True, nullable=False)
    line_group_id = Column(String, index=True, nullable=False)
    name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
