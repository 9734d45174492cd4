from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


class Account(Base):
	__tablename__ = "users"
	__table_args__ = (
		UniqueConstraint("email", name="uq_users_email"),
	)

	id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
	email: Mapped[str] = mapped_column(String(320), nullable=False)
	password: Mapped[str] = mapped_column(String(255), nullable=False)
	# name and role are nullable for accounts created before they existed
	name: Mapped[str | None] = mapped_column(String(255))
	role: Mapped[str | None] = mapped_column(String(32))
	token_version: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
	created_at: Mapped[datetime] = mapped_column(
		DateTime(timezone=True), server_default=func.now(), nullable=False
	)
	updated_at: Mapped[datetime] = mapped_column(
		DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
	)

	def __repr__(self) -> str:
		return f"Account(id={self.id!s}, email={self.email!r}, role={self.role!r})"
