from __future__ import annotations

from pydantic import BaseModel

from .roles import Role


class ValidationResult(BaseModel):
	"""Answer to a token validation query, shared by the authority and the gateway."""

	email: str | None = None
	role: Role | None = None
	name: str | None = None
	valid: bool = False

	@classmethod
	def invalid(cls) -> ValidationResult:
		return cls(valid=False)
