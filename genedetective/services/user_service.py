"""Service metier pour les utilisateurs et leurs enregistrements de role.

Ce module implemente:
- l'inscription (utilisateur + extension de role dans une seule transaction)
- l'authentification par email/mot de passe
- la lecture du profil courant
- la suppression d'un compte avec propagation explicite aux enregistrements
  dependants
"""

import logging

from opentelemetry import trace
from starlette.concurrency import run_in_threadpool
from sqlalchemy import delete, insert, select

from genedetective.core.data_access import DataAccess
from genedetective.core.exceptions import (
    ConstraintViolationError,
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
)
from genedetective.core.passwords import dummy_verify, hash_password, verify_password
from genedetective.core.security import CurrentUser
from genedetective.core.tokens import issue_token
from genedetective.models import (
    ROLE_RECORD_TABLES,
    Role,
    counselors_table,
    gene_expressions_table,
    genetic_data_table,
    patients_table,
    recommendations_table,
    researchers_table,
    users_table,
)
from genedetective.schemas.auth import RegisterRequest

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


async def get_user_by_email(dal: DataAccess, email: str) -> dict | None:
    return await dal.fetch_one(
        select(
            users_table.c.id,
            users_table.c.full_name,
            users_table.c.email,
            users_table.c.password_hash,
            users_table.c.user_role,
        ).where(users_table.c.email == email)
    )


async def register_user(dal: DataAccess, data: RegisterRequest) -> tuple[CurrentUser, str]:
    """
    Inscrit un utilisateur et crée son enregistrement de rôle.

    Les deux insertions partagent une transaction: un échec entre les deux
    annule aussi la création de l'utilisateur.

    Returns:
        (utilisateur créé, token signé)

    Raises:
        DuplicateEmailError: email déjà utilisé
    """
    with tracer.start_as_current_span("register_user") as span:
        span.set_attribute("user.role", data.user_role.name)

        if await get_user_by_email(dal, data.email) is not None:
            raise DuplicateEmailError()

        password_hash = await run_in_threadpool(hash_password, data.password)

        try:
            async with dal.transaction():
                result = await dal.mutate(
                    insert(users_table).values(
                        full_name=data.full_name,
                        email=data.email,
                        password_hash=password_hash,
                        date_birth=data.date_of_birth,
                        user_role=int(data.user_role),
                    )
                )
                user_id = result.inserted_id
                await dal.mutate(
                    insert(ROLE_RECORD_TABLES[data.user_role]).values(user_id=user_id)
                )
        except ConstraintViolationError as e:
            # Course entre la vérification et l'insertion: l'unicité de l'email tranche
            logger.warning(f"Registration constraint violation for role {data.user_role.name}: {e}")
            raise DuplicateEmailError() from e

        span.set_attribute("user.id", user_id)
        logger.info(f"User {user_id} registered with role {data.user_role.name}")

        user = CurrentUser(
            id=user_id, full_name=data.full_name, email=data.email, role=data.user_role
        )
        return user, issue_token(user.id, user.email, user.role)


async def authenticate(dal: DataAccess, email: str, password: str) -> tuple[CurrentUser, str]:
    """
    Vérifie les identifiants et émet un token.

    Raises:
        InvalidCredentialsError: email inconnu ou mot de passe erroné (indiscernables)
    """
    row = await get_user_by_email(dal, email)
    if row is None:
        await run_in_threadpool(dummy_verify)
        raise InvalidCredentialsError()

    if not await run_in_threadpool(verify_password, password, row["password_hash"]):
        raise InvalidCredentialsError()

    user = CurrentUser(
        id=row["id"],
        full_name=row["full_name"],
        email=row["email"],
        role=Role(row["user_role"]),
    )
    return user, issue_token(user.id, user.email, user.role)


async def get_profile(dal: DataAccess, user: CurrentUser) -> dict:
    """Retourne les champs utilisateur enrichis des champs propres au rôle."""
    row = await dal.fetch_one(
        select(
            users_table.c.id,
            users_table.c.full_name,
            users_table.c.email,
            users_table.c.user_role,
            users_table.c.date_birth,
        ).where(users_table.c.id == user.id)
    )
    if row is None:
        raise NotFoundError("User not found")

    profile = dict(row)
    role_columns = {
        Role.PATIENT: [patients_table.c.medical_history],
        Role.COUNSELOR: [counselors_table.c.specialization],
        Role.RESEARCHER: [researchers_table.c.institution, researchers_table.c.research_area],
    }[user.role]
    role_table = ROLE_RECORD_TABLES[user.role]
    extra = await dal.fetch_one(select(*role_columns).where(role_table.c.user_id == user.id))
    if extra:
        profile.update(extra)
    return profile


async def delete_user(dal: DataAccess, user_id: int) -> bool:
    """
    Supprime un utilisateur et tout ce qui en dépend, dans une transaction.

    La propagation est explicite (enfants avant parent) et ne dépend donc pas
    du support ON DELETE CASCADE du moteur. Les recommandations écrites par un
    conseiller supprimé restent attachées au patient, sans auteur.

    Returns:
        True si l'utilisateur existait
    """
    with tracer.start_as_current_span("delete_user") as span:
        span.set_attribute("user.id", user_id)
        async with dal.transaction():
            patient_ids = select(patients_table.c.id).where(patients_table.c.user_id == user_id)
            counselor_ids = select(counselors_table.c.id).where(
                counselors_table.c.user_id == user_id
            )

            for table in (genetic_data_table, gene_expressions_table, recommendations_table):
                await dal.mutate(delete(table).where(table.c.patient_id.in_(patient_ids)))
            await dal.mutate(
                recommendations_table.update()
                .where(recommendations_table.c.counselor_id.in_(counselor_ids))
                .values(counselor_id=None)
            )
            for table in ROLE_RECORD_TABLES.values():
                await dal.mutate(delete(table).where(table.c.user_id == user_id))

            result = await dal.mutate(delete(users_table).where(users_table.c.id == user_id))

        deleted = result.affected_count > 0
        if deleted:
            logger.info(f"User {user_id} deleted with dependent records")
        return deleted
