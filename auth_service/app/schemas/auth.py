from uuid import UUID

from pydantic import BaseModel, EmailStr, field_validator
from pydantic_core import PydanticCustomError
from pydantic.networks import validate_email


class RegisterInput(BaseModel):
	name: str
	email: EmailStr
	password: str

	@field_validator("name", "password")
	@classmethod
	def _not_blank(cls, value: str) -> str:
		if not value.strip():
			raise PydanticCustomError("blank", "Field must not be blank")
		return value


class LoginInput(BaseModel):
	email: str
	password: str

	@field_validator("email")
	@classmethod
	def _normalize_email(cls, value: str) -> str:
		# Same normalisation as registration; a malformed address simply won't match
		try:
			return validate_email(value)[1]
		except PydanticCustomError:
			return value


class TokenOut(BaseModel):
	token: str


class AccountOut(BaseModel):
	id: UUID
	name: str | None = None
	email: str
	role: str | None = None

	model_config = {"from_attributes": True}


class RegisterOut(AccountOut):
	message: str = "User registered successfully"


class UpdateRoleInput(BaseModel):
	role: str
