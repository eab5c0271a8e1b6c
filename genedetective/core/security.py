import logging
from collections.abc import Iterable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from opentelemetry import trace
from pydantic import BaseModel
from sqlalchemy import select

from genedetective.core.data_access import DataAccess, get_data_access
from genedetective.core.exceptions import AuthError, AuthFailure, AuthzError
from genedetective.core.tokens import (
    BadSignatureError,
    ExpiredTokenError,
    TokenClaims,
    TokenError,
    verify_token,
)
from genedetective.models import Role, users_table

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

# auto_error=False: l'absence de token doit produire notre propre 401
security_scheme = HTTPBearer(auto_error=False)

_TOKEN_FAILURES: dict[type[TokenError], AuthFailure] = {
    ExpiredTokenError: AuthFailure.EXPIRED_TOKEN,
    BadSignatureError: AuthFailure.BAD_SIGNATURE,
}


class CurrentUser(BaseModel):
    """Identité résolue depuis la ligne ``users`` courante (jamais depuis le token)."""

    id: int
    full_name: str
    email: str
    role: Role

    @property
    def is_patient(self) -> bool:
        return self.role is Role.PATIENT

    @property
    def is_counselor(self) -> bool:
        return self.role is Role.COUNSELOR


async def extract_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
) -> str:
    """Extrait le token du header ``Authorization: Bearer <token>``."""
    if credentials is None or not credentials.credentials:
        logger.warning("No authentication token found in request")
        raise AuthError(AuthFailure.NO_TOKEN)
    return credentials.credentials


async def get_token_claims(token: str = Depends(extract_token)) -> TokenClaims:
    """Vérifie le token et traduit les échecs en ``AuthError``."""
    try:
        return verify_token(token)
    except TokenError as e:
        reason = _TOKEN_FAILURES.get(type(e), AuthFailure.MALFORMED_TOKEN)
        logger.warning(f"Token rejected ({reason.value}): {e}")
        raise AuthError(reason) from e


async def resolve_identity(dal: DataAccess, claims: TokenClaims) -> CurrentUser:
    """
    Charge l'utilisateur courant par l'id contenu dans le token.

    L'email et le rôle du token sont ignorés: seul le rôle de la ligne
    ``users`` relue fait foi. Un token valide pour un utilisateur supprimé est
    rejeté ici, même si sa signature est correcte.

    Raises:
        AuthError(UNKNOWN_IDENTITY): aucun utilisateur avec cet id
    """
    with tracer.start_as_current_span("resolve_identity") as span:
        span.set_attribute("auth.user_id", claims.user_id)
        row = await dal.fetch_one(
            select(
                users_table.c.id,
                users_table.c.full_name,
                users_table.c.email,
                users_table.c.user_role,
            ).where(users_table.c.id == claims.user_id)
        )
        if row is None:
            logger.warning(f"Token for unknown user {claims.user_id} rejected")
            span.set_attribute("auth.error", True)
            raise AuthError(AuthFailure.UNKNOWN_IDENTITY)

        try:
            role = Role(row["user_role"])
        except ValueError as e:
            logger.error(f"User {row['id']} has unsupported role {row['user_role']}")
            raise AuthError(AuthFailure.UNKNOWN_IDENTITY) from e

        return CurrentUser(
            id=row["id"], full_name=row["full_name"], email=row["email"], role=role
        )


async def get_current_user(
    claims: TokenClaims = Depends(get_token_claims),
    dal: DataAccess = Depends(get_data_access),
) -> CurrentUser:
    return await resolve_identity(dal, claims)


def authorize(role: Role | int, allowed_roles: Iterable[Role | int]) -> None:
    """
    Test d'appartenance du rôle à l'ensemble autorisé.

    Raises:
        AuthzError(ROLE_DENIED): rôle absent de ``allowed_roles``
    """
    allowed = {int(r) for r in allowed_roles}
    if int(role) not in allowed:
        raise AuthzError()


def require_roles(*roles: Role):
    """
    Dependency factory for role-based access control.

    The role checker depends on ``get_current_user``, so identity resolution
    (401) always runs before the role check (403).

    Examples:
        @router.get("/history", dependencies=[Depends(require_roles(Role.PATIENT))])

        @router.get("/genetic-data")
        async def read(user: CurrentUser = Depends(require_roles(Role.PATIENT, Role.COUNSELOR))):
            ...
    """

    async def role_checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        with tracer.start_as_current_span("check_user_roles") as span:
            span.set_attribute("auth.required_roles", ",".join(r.name for r in roles))
            span.set_attribute("auth.user_id", current_user.id)
            try:
                authorize(current_user.role, roles)
            except AuthzError:
                logger.warning(
                    f"Access denied for user {current_user.id}. "
                    f"Required roles: {[r.name for r in roles]}. "
                    f"User role: {current_user.role.name}"
                )
                span.set_attribute("auth.access_denied", True)
                raise
            span.set_attribute("auth.access_granted", True)
            return current_user

    return role_checker
