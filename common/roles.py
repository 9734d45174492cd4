from __future__ import annotations

from enum import Enum


class UnknownRoleError(ValueError):
	"""Raised when a role value is outside the closed enumeration."""

	def __init__(self, value: object):
		self.value = value
		super().__init__(f"Unknown role: {value!r}")


class Role(str, Enum):
	ADMINISTRATOR = "ADMINISTRATOR"
	CLINICIAN = "CLINICIAN"
	FRONT_DESK = "FRONT_DESK"

	@classmethod
	def default(cls) -> Role:
		"""Role given to newly registered accounts (least privilege)."""
		return cls.FRONT_DESK


# Values written by deployments that predate the current role names.
LEGACY_ROLE_ALIASES: dict[str, Role] = {
	"ADMIN": Role.ADMINISTRATOR,
	"DOCTOR": Role.CLINICIAN,
	"RECEPTIONIST": Role.FRONT_DESK,
}

# Legacy accounts and tokens carry no role at all and have always been treated
# as administrative. Services can override this through MISSING_ROLE_FALLBACK.
MISSING_ROLE_FALLBACK = Role.ADMINISTRATOR


def parse_role(value: object) -> Role:
	"""Strict parser for role input: only canonical member names are accepted."""
	if isinstance(value, Role):
		return value
	if isinstance(value, str):
		try:
			return Role(value)
		except ValueError:
			pass
	raise UnknownRoleError(value)


def resolve_role(value: object, fallback: Role = MISSING_ROLE_FALLBACK) -> Role:
	"""
	Resolve a stored or claimed role value.

	This is the single place where an absent role is turned into a concrete one.
	Absent values resolve to ``fallback``; legacy aliases are mapped to their
	current names; anything else raises ``UnknownRoleError``.
	"""
	if value is None or value == "":
		return fallback
	if isinstance(value, str) and value in LEGACY_ROLE_ALIASES:
		return LEGACY_ROLE_ALIASES[value]
	return parse_role(value)
