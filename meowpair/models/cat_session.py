"""
CatSession — one virtual cat shared by an owner and an optional partner.

Owner and partner are fixed at creation. Every session has exactly one
CatStats row, created in the same transaction (see services/sessions.py).
"""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from meowpair.db.base import Base
from meowpair.models.user import User

if TYPE_CHECKING:
    from meowpair.models.cat_stats import CatStats

DEFAULT_SESSION_NAME = "cattyyy"


class CatSession(Base):
    __tablename__ = "cat_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    partner_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False, default=DEFAULT_SESSION_NAME)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    owner: Mapped[User] = relationship(foreign_keys=[owner_id], lazy="joined")
    partner: Mapped[Optional[User]] = relationship(foreign_keys=[partner_id], lazy="joined")
    stats: Mapped[Optional["CatStats"]] = relationship(back_populates="session", uselist=False)
