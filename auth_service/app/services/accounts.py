from __future__ import annotations

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from common import (
	AuthorizationFailure,
	EmailAlreadyExists,
	InvalidCredentials,
	NotFound,
	Role,
	UnknownRoleError,
	ValidationFailure,
	ValidationResult,
	parse_role,
	resolve_role,
)

from ..config import get_settings
from ..models import Account
from ..security import (
	TokenError,
	create_access_token,
	decode_token,
	dummy_verify_password,
	get_password_hash,
	verify_password,
)

LOGGER = logging.getLogger(__name__)

ROLE_CHOICES = ", ".join(role.value for role in Role)


def _require_admin(requester_role: Role) -> None:
	if requester_role is not Role.ADMINISTRATOR:
		raise AuthorizationFailure("Administrator role required")


class AccountService:
	"""Account lifecycle and token issuance/validation on top of one DB session."""

	def __init__(self, db: AsyncSession):
		self.db = db
		self.settings = get_settings()

	async def get_by_email(self, email: str) -> Account | None:
		stmt = select(Account).where(Account.email == email)
		return await self.db.scalar(stmt)

	async def authenticate(self, email: str, password: str) -> str:
		account = await self.get_by_email(email)
		if account is None:
			await run_in_threadpool(dummy_verify_password)
			LOGGER.info("Login rejected: no matching account")
			raise InvalidCredentials()

		if not await run_in_threadpool(verify_password, password, account.password):
			LOGGER.info("Login rejected for account %s", account.id)
			raise InvalidCredentials()

		try:
			role = resolve_role(account.role, self.settings.missing_role_fallback)
		except UnknownRoleError:
			LOGGER.warning("Account %s has unrecognised role %r", account.id, account.role)
			raise InvalidCredentials()

		LOGGER.info("Issued access token for account %s (role %s)", account.id, role.value)
		return create_access_token(
			email=account.email,
			role=role,
			name=account.name,
			token_version=account.token_version or 0,
		)

	async def register(self, *, name: str, email: str, password: str) -> Account:
		hashed_password = await run_in_threadpool(get_password_hash, password)

		if await self.get_by_email(email) is not None:
			await self.db.rollback()
			raise EmailAlreadyExists("Email already registered")

		account = Account(
			name=name,
			email=email,
			password=hashed_password,
			role=Role.default().value,
		)
		self.db.add(account)
		try:
			await self.db.commit()
		except IntegrityError as exc:
			# a concurrent registration inserted the same email first
			await self.db.rollback()
			raise EmailAlreadyExists("Email already registered") from exc

		await self.db.refresh(account)
		LOGGER.info("Registered account %s with role %s", account.id, account.role)
		return account

	async def validate_token(self, token: str) -> ValidationResult:
		"""Check signature and expiry. Never writes and never raises for a bad token."""
		try:
			claims = decode_token(token)
			role = resolve_role(claims.get("role"), self.settings.missing_role_fallback)
		except (TokenError, UnknownRoleError):
			return ValidationResult.invalid()

		if self.settings.enforce_token_version and not await self._is_current_version(claims):
			return ValidationResult.invalid()

		name = claims.get("name")
		return ValidationResult(
			email=claims["sub"],
			role=role,
			name=name if isinstance(name, str) else None,
			valid=True,
		)

	async def _is_current_version(self, claims: dict) -> bool:
		account = await self.get_by_email(claims["sub"])
		if account is None:
			return False
		version = claims.get("ver", 0)
		return isinstance(version, int) and version == (account.token_version or 0)

	async def list_accounts(self, requester_role: Role) -> Sequence[Account]:
		_require_admin(requester_role)
		result = await self.db.execute(select(Account).order_by(Account.email))
		return result.scalars().all()

	async def update_role(self, requester_role: Role, account_id: UUID, new_role: object) -> Account:
		_require_admin(requester_role)

		try:
			role = parse_role(new_role)
		except UnknownRoleError as exc:
			raise ValidationFailure(f"Role must be one of: {ROLE_CHOICES}") from exc

		account = await self._lock_account(account_id)
		previous_role = account.role
		account.role = role.value
		# tokens minted before this change stop validating when versions are enforced
		account.token_version = (account.token_version or 0) + 1
		await self.db.commit()
		await self.db.refresh(account)

		LOGGER.info("Role of account %s changed from %s to %s", account.id, previous_role, role.value)
		return account

	async def _lock_account(self, account_id: UUID) -> Account:
		stmt = select(Account).where(Account.id == account_id).with_for_update()
		account = await self.db.scalar(stmt)
		if not account:
			raise NotFound("User not found")
		return account
