"""
Émission et vérification des tokens d'identité signés (JWT HS256).

Le payload contient exactement ``userId``, ``email`` et ``role``, plus ``iat``
et ``exp``. La vérification ne consulte jamais la base: elle prouve seulement
que le token a été signé avec le secret du processus et qu'il n'a pas expiré.
Il n'existe pas d'état révoqué; un token reste valide jusqu'à son expiration.
"""

import logging
from datetime import UTC, datetime, timedelta

import jwt
from opentelemetry import trace
from pydantic import BaseModel, ConfigDict

from genedetective.core.config import settings

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

REQUIRED_CLAIMS = ["userId", "email", "role", "exp", "iat"]


class TokenError(Exception):
    """Échec de vérification d'un token."""


class MalformedTokenError(TokenError):
    pass


class BadSignatureError(TokenError):
    pass


class ExpiredTokenError(TokenError):
    pass


class TokenClaims(BaseModel):
    """Claims décodés d'un token. Jamais utilisés seuls pour autoriser."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    email: str
    role: int
    expires_at: datetime


def issue_token(
    user_id: int,
    email: str,
    role: int,
    *,
    expires_delta: timedelta | None = None,
    now: datetime | None = None,
) -> str:
    issued_at = now or datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    payload = {
        "userId": int(user_id),
        "email": email,
        "role": int(role),
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> TokenClaims:
    """
    Vérifie la signature et l'expiration d'un token.

    Raises:
        MalformedTokenError: token illisible ou claims manquants/invalides
        BadSignatureError: signature ne correspondant pas au secret
        ExpiredTokenError: date d'expiration dépassée
    """
    with tracer.start_as_current_span("verify_token") as span:
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET,
                algorithms=[settings.JWT_ALGORITHM],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            span.set_attribute("auth.token_error", "expired")
            raise ExpiredTokenError("Token has expired") from e
        except jwt.InvalidSignatureError as e:
            span.set_attribute("auth.token_error", "bad_signature")
            raise BadSignatureError("Token signature verification failed") from e
        except jwt.InvalidTokenError as e:
            span.set_attribute("auth.token_error", "malformed")
            raise MalformedTokenError(f"Malformed token: {e}") from e

        try:
            claims = TokenClaims(
                user_id=payload["userId"],
                email=payload["email"],
                role=payload["role"],
                expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
            )
        except (ValueError, TypeError) as e:
            span.set_attribute("auth.token_error", "malformed")
            raise MalformedTokenError(f"Invalid token claims: {e}") from e

        span.set_attribute("auth.user_id", claims.user_id)
        return claims
