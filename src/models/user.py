"""User database model.

A user is one LINE member as seen inside one group: the same person in two
groups is two rows with independent point balances.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from .base import Base, utcnow


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("line_user_id", "group_id", name="uq_users_line_user_group"),
        CheckConstraint("points >= 0", name="ck_users_points_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    line_user_id = Column(String, index=True, nullable=False)
    display_name = Column(String, nullable=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), index=True, nullable=False)
    points = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
