"""Résolution du périmètre patient d'une requête.

Règles de propriété:
- Patient: le périmètre est dérivé de son propre user id (lookup 1:1 dans
  ``patients``). Un patient ne peut jamais désigner le dossier d'un autre.
- Counselor: l'id patient doit être fourni explicitement. Aucune relation
  d'affectation conseiller/patient n'est vérifiée: tout conseiller peut
  adresser tout patient. Cette politique est à confirmer par le système
  qui adopte ce service.
"""

import logging

from sqlalchemy import select

from genedetective.core.data_access import DataAccess
from genedetective.core.exceptions import AuthzError, NotFoundError, NotFoundReason, ValidationError
from genedetective.core.security import CurrentUser
from genedetective.models import counselors_table, patients_table

logger = logging.getLogger(__name__)


async def get_own_patient_id(dal: DataAccess, user: CurrentUser) -> int:
    row = await dal.fetch_one(
        select(patients_table.c.id).where(patients_table.c.user_id == user.id)
    )
    if row is None:
        raise NotFoundError("Patient record not found", NotFoundReason.ROLE_RECORD_MISSING)
    return row["id"]


async def resolve_patient_scope(
    dal: DataAccess, user: CurrentUser, requested_patient_id: int | None = None
) -> int:
    """
    Retourne l'id patient (``patients.id``) que l'appelant peut adresser.

    Raises:
        NotFoundError(ROLE_RECORD_MISSING): patient sans enregistrement ``patients``
        ValidationError(MISSING_REQUIRED_FIELD): conseiller sans id patient
        AuthzError: tout autre rôle
    """
    if user.is_patient:
        # L'id éventuellement fourni par un patient est ignoré
        return await get_own_patient_id(dal, user)

    if user.is_counselor:
        if not requested_patient_id:
            raise ValidationError("Patient ID required")
        logger.debug(f"Counselor {user.id} addressing patient {requested_patient_id}")
        return int(requested_patient_id)

    raise AuthzError()


async def ensure_patient_exists(dal: DataAccess, patient_id: int) -> None:
    row = await dal.fetch_one(select(patients_table.c.id).where(patients_table.c.id == patient_id))
    if row is None:
        raise NotFoundError("Patient record not found", NotFoundReason.PATIENT_SCOPE_MISSING)


async def get_counselor_id(dal: DataAccess, user: CurrentUser) -> int:
    row = await dal.fetch_one(
        select(counselors_table.c.id).where(counselors_table.c.user_id == user.id)
    )
    if row is None:
        raise NotFoundError("Counselor record not found", NotFoundReason.ROLE_RECORD_MISSING)
    return row["id"]
