from .auth import (
	AccountOut,
	LoginInput,
	RegisterInput,
	RegisterOut,
	TokenOut,
	UpdateRoleInput,
)

__all__ = [
	"AccountOut",
	"LoginInput",
	"RegisterInput",
	"RegisterOut",
	"TokenOut",
	"UpdateRoleInput",
]
