"""
Taxonomie des erreurs GeneDetective et leur rendu HTTP.

Chaque erreur porte:
- status_code: code HTTP renvoyé au client
- detail: message public, volontairement générique pour 401 et 500
- reason: raison précise, uniquement loguée côté serveur

Le corps de réponse est toujours ``{"error": detail}``.
"""

import logging
from enum import Enum

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AuthFailure(str, Enum):
    """Raisons d'un échec d'authentification (401)."""

    NO_TOKEN = "no_token"
    MALFORMED_TOKEN = "malformed_token"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED_TOKEN = "expired_token"
    UNKNOWN_IDENTITY = "unknown_identity"


class AuthzFailure(str, Enum):
    ROLE_DENIED = "role_denied"


class NotFoundReason(str, Enum):
    ROLE_RECORD_MISSING = "role_record_missing"
    PATIENT_SCOPE_MISSING = "patient_scope_missing"
    RECORD_MISSING = "record_missing"


class ValidationReason(str, Enum):
    MISSING_REQUIRED_FIELD = "missing_required_field"
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_CREDENTIALS = "invalid_credentials"
    PRECONDITION_FAILED = "precondition_failed"


class GeneDetectiveError(Exception):
    """Exception de base pour toutes les erreurs exposées au client."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None, reason: Enum | None = None):
        self.detail = detail or self.default_detail
        self.reason = reason
        super().__init__(self.detail)

    def to_response(self) -> dict:
        return {"error": self.detail}


class AuthError(GeneDetectiveError):
    """
    Échec d'authentification (401).

    Le message public ne distingue pas un token expiré d'une signature invalide
    ou d'une identité inconnue: seule l'absence de token a un message dédié.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid token."

    def __init__(self, reason: AuthFailure):
        detail = (
            "Access denied. No token provided."
            if reason is AuthFailure.NO_TOKEN
            else self.default_detail
        )
        super().__init__(detail=detail, reason=reason)


class AuthzError(GeneDetectiveError):
    """Rôle non autorisé pour l'endpoint (403)."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied. Insufficient permissions."

    def __init__(self, reason: AuthzFailure = AuthzFailure.ROLE_DENIED):
        super().__init__(reason=reason)


class NotFoundError(GeneDetectiveError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"

    def __init__(
        self,
        detail: str | None = None,
        reason: NotFoundReason = NotFoundReason.RECORD_MISSING,
    ):
        super().__init__(detail=detail, reason=reason)


class ValidationError(GeneDetectiveError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Missing or invalid field"

    def __init__(
        self,
        detail: str | None = None,
        reason: ValidationReason = ValidationReason.MISSING_REQUIRED_FIELD,
    ):
        super().__init__(detail=detail, reason=reason)


class DuplicateEmailError(ValidationError):
    default_detail = "User with this email already exists"

    def __init__(self):
        super().__init__(reason=ValidationReason.DUPLICATE_EMAIL)


class InvalidCredentialsError(ValidationError):
    """Email inconnu ou mot de passe erroné: les deux cas sont indiscernables."""

    default_detail = "Invalid email or password"

    def __init__(self):
        super().__init__(reason=ValidationReason.INVALID_CREDENTIALS)


class AnalysisPreconditionError(ValidationError):
    default_detail = "No genetic data found for analysis"

    def __init__(self):
        super().__init__(reason=ValidationReason.PRECONDITION_FAILED)


class StorageError(GeneDetectiveError):
    """
    Échec du moteur de stockage (500).

    L'exception d'origine est conservée dans ``original`` pour les logs,
    jamais renvoyée au client.
    """

    def __init__(self, message: str = "Storage operation failed", original: Exception | None = None):
        super().__init__()
        self.message = message
        self.original = original

    def __str__(self) -> str:
        return self.message


class ConstraintViolationError(StorageError):
    """Violation d'une contrainte d'intégrité (unicité, clé étrangère)."""


async def _gene_detective_error_handler(request: Request, exc: GeneDetectiveError) -> JSONResponse:
    if isinstance(exc, StorageError):
        logger.error(
            f"Storage error on {request.method} {request.url.path}: {exc} ({exc.original!r})"
        )
    elif exc.reason is not None:
        logger.info(
            f"{request.method} {request.url.path} -> {exc.status_code} ({exc.reason.value})"
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": ValidationError.default_detail,
            "details": jsonable_encoder(exc.errors()),
        },
    )


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = "Route not found" if exc.status_code == status.HTTP_404_NOT_FOUND else exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail},
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": GeneDetectiveError.default_detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Enregistre les handlers qui produisent le corps ``{"error": ...}``."""
    app.add_exception_handler(GeneDetectiveError, _gene_detective_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


__all__ = [
    "AnalysisPreconditionError",
    "AuthError",
    "AuthFailure",
    "AuthzError",
    "AuthzFailure",
    "ConstraintViolationError",
    "DuplicateEmailError",
    "GeneDetectiveError",
    "InvalidCredentialsError",
    "NotFoundError",
    "NotFoundReason",
    "StorageError",
    "ValidationError",
    "ValidationReason",
    "register_exception_handlers",
]
