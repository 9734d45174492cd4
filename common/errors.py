from __future__ import annotations

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class ServiceError(Exception):
	"""Base for failures a service reports to its caller as a typed result."""

	status_code: int = status.HTTP_400_BAD_REQUEST

	def __init__(self, message: str | None = None):
		super().__init__(message or self.__class__.__name__)
		self.message = message

	@property
	def headers(self) -> dict[str, str] | None:
		return None


class AuthenticationFailure(ServiceError):
	status_code = status.HTTP_401_UNAUTHORIZED

	@property
	def headers(self) -> dict[str, str] | None:
		return {"WWW-Authenticate": "Bearer"}


class InvalidCredentials(AuthenticationFailure):
	pass


class AuthorizationFailure(ServiceError):
	status_code = status.HTTP_403_FORBIDDEN


class Conflict(ServiceError):
	status_code = status.HTTP_409_CONFLICT


class EmailAlreadyExists(Conflict):
	pass


class NotFound(ServiceError):
	status_code = status.HTTP_404_NOT_FOUND


class ValidationFailure(ServiceError):
	status_code = status.HTTP_400_BAD_REQUEST


def error_response(exc: ServiceError) -> Response:
	if exc.message is None:
		return Response(status_code=exc.status_code, headers=exc.headers)
	return JSONResponse({"detail": exc.message}, status_code=exc.status_code, headers=exc.headers)


def install_error_handlers(app: FastAPI) -> None:
	"""Map typed service errors and request validation errors to HTTP responses."""

	@app.exception_handler(ServiceError)
	async def _service_error(_: Request, exc: ServiceError) -> Response:
		return error_response(exc)

	@app.exception_handler(RequestValidationError)
	async def _request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
		return JSONResponse(
			{"detail": jsonable_encoder(exc.errors())},
			status_code=status.HTTP_400_BAD_REQUEST,
		)
