"""
Activity — one action a user performed on a cat. Append-only.
"""
from datetime import datetime
from sqlalchemy import Integer, DateTime, Enum, ForeignKey, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum

from meowpair.db.base import Base
from meowpair.models.user import User


class CatAction(str, enum.Enum):
    feed = "feed"
    cuddle = "cuddle"
    love = "love"


class Activity(Base):
    __tablename__ = "activities"
    __table_args__ = (
        Index("ix_activities_session_created", "session_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    session_id: Mapped[int] = mapped_column(ForeignKey("cat_sessions.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    action: Mapped[CatAction] = mapped_column(
        Enum(CatAction, name="cat_action_enum"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    user: Mapped[User] = relationship(lazy="joined")
