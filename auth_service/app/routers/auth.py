from uuid import UUID

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.ext.asyncio import AsyncSession

from common import AuthenticationFailure, ValidationResult, extract_bearer_token

from ..database import get_db
from ..schemas import (
	AccountOut,
	LoginInput,
	RegisterInput,
	RegisterOut,
	TokenOut,
	UpdateRoleInput,
)
from ..services import AccountService


router = APIRouter(tags=["auth"])


def get_account_service(db: AsyncSession = Depends(get_db)) -> AccountService:
	return AccountService(db)


async def get_requester(
	authorization: str | None = Header(default=None),
	service: AccountService = Depends(get_account_service),
) -> ValidationResult:
	"""Identity of the caller, established by the same check the gateway relies on."""
	token = extract_bearer_token(authorization)
	if token is None:
		raise AuthenticationFailure("Not authenticated")
	result = await service.validate_token(token)
	if not result.valid:
		raise AuthenticationFailure("Not authenticated")
	return result


@router.post("/login", response_model=TokenOut)
async def login(data: LoginInput, service: AccountService = Depends(get_account_service)) -> TokenOut:
	token = await service.authenticate(data.email, data.password)
	return TokenOut(token=token)


@router.post("/register", response_model=RegisterOut, status_code=status.HTTP_201_CREATED)
async def register(
	data: RegisterInput, service: AccountService = Depends(get_account_service)
) -> RegisterOut:
	account = await service.register(name=data.name, email=data.email, password=data.password)
	return RegisterOut.model_validate(account)


@router.get("/validate", response_model=ValidationResult, response_model_exclude_none=True)
async def validate(
	authorization: str | None = Header(default=None),
	service: AccountService = Depends(get_account_service),
) -> ValidationResult:
	token = extract_bearer_token(authorization)
	if token is None:
		raise AuthenticationFailure()
	result = await service.validate_token(token)
	if not result.valid:
		raise AuthenticationFailure()
	return result


@router.get("/users", response_model=list[AccountOut])
async def list_users(
	requester: ValidationResult = Depends(get_requester),
	service: AccountService = Depends(get_account_service),
) -> list[AccountOut]:
	accounts = await service.list_accounts(requester.role)
	return [AccountOut.model_validate(account) for account in accounts]


@router.put("/users/{user_id}/role", response_model=AccountOut)
async def update_user_role(
	user_id: UUID,
	data: UpdateRoleInput,
	requester: ValidationResult = Depends(get_requester),
	service: AccountService = Depends(get_account_service),
) -> AccountOut:
	account = await service.update_role(requester.role, user_id, data.role)
	return AccountOut.model_validate(account)
