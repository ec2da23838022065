from datetime import datetime
from sqlalchemy import Integer, String, DateTime, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from meowpair.db.base import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("fid", name="uq_users_fid"),
        UniqueConstraint("address", name="uq_users_address"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    fid: Mapped[int] = mapped_column(Integer, nullable=False)
    address: Mapped[str | None] = mapped_column(
        String(42), nullable=True,
        comment="Lower-case 0x-prefixed wallet address",
    )
    username: Mapped[str] = mapped_column(String(128), nullable=False)
    pfp_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
