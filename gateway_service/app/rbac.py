"""
Static method/role matrix applied to protected resources (patient records).

A method missing from the matrix, or a role missing from a method's entry, is denied.
"""

from common import Role


AUTHORIZATION_MATRIX: dict[str, frozenset[Role]] = {
	"GET": frozenset({Role.ADMINISTRATOR, Role.CLINICIAN, Role.FRONT_DESK}),
	"POST": frozenset({Role.ADMINISTRATOR, Role.FRONT_DESK}),
	"PUT": frozenset({Role.ADMINISTRATOR, Role.CLINICIAN}),
	"DELETE": frozenset({Role.ADMINISTRATOR}),
}


def is_authorized(method: str, role: Role) -> bool:
	allowed = AUTHORIZATION_MATRIX.get(method.upper())
	if allowed is None:
		return False
	return role in allowed
