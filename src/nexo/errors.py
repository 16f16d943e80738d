"""
nexo/errors.py — Taxonomia de erros e handlers da API.

Toda falha chega ao cliente como:
    {"success": false, "error": "<mensagem legível>"}

Nunca devolvemos stack trace nem texto cru do banco.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError


class NexoError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(NexoError):
    """Entrada malformada."""
    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(NexoError):
    """Falha de autenticação. O subtipo só aparece no log."""
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "auth"


class MissingCredential(AuthError):
    kind = "missing"


class InvalidFormat(AuthError):
    kind = "invalid_format"


class KeyNotFound(AuthError):
    kind = "not_found"


class KeyDisabled(AuthError):
    kind = "disabled"


class KeyExpired(AuthError):
    kind = "expired"


class SessionError(AuthError):
    kind = "session"


class Forbidden(NexoError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(NexoError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(NexoError):
    """Violação de unicidade no banco. O cliente pode tentar de novo."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def _nexo_error_handler(request: Request, exc: NexoError) -> JSONResponse:
    return error_response(exc.message, exc.status_code)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ())[1:])

    if first.get("type") == "json_invalid" or not field:
        message = "Invalid JSON body"
    elif first.get("type") == "value_error" and first.get("ctx", {}).get("error"):
        message = str(first["ctx"]["error"])
    else:
        message = f"Invalid value for '{field}'"
    return error_response(message, status.HTTP_400_BAD_REQUEST)


async def _database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"💥 Erro de banco em {request.method} {request.url.path}: {exc}")
    return error_response("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NexoError, _nexo_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, _database_error_handler)
