"""
LogEntry — write-only diagnostic trail.

Nothing in the application reads these rows back; they exist for operators.

context: JSON-encoded dict stored as Text (no external deps).
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from meowpair.db.base import Base


class LogLevel(str, enum.Enum):
    info = "info"
    warn = "warn"
    error = "error"


class LogEntry(Base):
    __tablename__ = "log_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    level: Mapped[LogLevel] = mapped_column(
        Enum(LogLevel, name="log_level_enum"), nullable=False, index=True
    )
    message: Mapped[str] = mapped_column(String(512), nullable=False)
    context: Mapped[str | None] = mapped_column(
        Text, nullable=True,
        comment="JSON-encoded dict with request-specific details",
    )
    fid: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
