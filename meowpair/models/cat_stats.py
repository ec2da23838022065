from __future__ import annotations

from datetime import datetime

from sqlalchemy import Integer, DateTime, ForeignKey, CheckConstraint, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from meowpair.db.base import Base
from meowpair.models.cat_session import CatSession


class CatStats(Base):
    __tablename__ = "cat_stats"
    __table_args__ = (
        UniqueConstraint("session_id", name="uq_cat_stats_session"),
        CheckConstraint("love BETWEEN 0 AND 100", name="ck_cat_stats_love"),
        CheckConstraint("hunger BETWEEN 0 AND 100", name="ck_cat_stats_hunger"),
        CheckConstraint("happiness BETWEEN 0 AND 100", name="ck_cat_stats_happiness"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    session_id: Mapped[int] = mapped_column(ForeignKey("cat_sessions.id"), nullable=False)
    love: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    hunger: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    happiness: Mapped[int] = mapped_column(Integer, nullable=False, default=75)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    session: Mapped[CatSession] = relationship(back_populates="stats")
