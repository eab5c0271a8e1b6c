"""Service metier pour l'historique medical et les donnees genetiques."""

import json
from typing import Any

from sqlalchemy import insert, select, update

from genedetective.core.data_access import DataAccess
from genedetective.core.exceptions import NotFoundError, NotFoundReason
from genedetective.models import genetic_data_table, patients_table


def _loads(value: str | None) -> Any:
    return json.loads(value) if value else None


async def get_medical_history(dal: DataAccess, user_id: int) -> str | None:
    row = await dal.fetch_one(
        select(patients_table.c.medical_history).where(patients_table.c.user_id == user_id)
    )
    if row is None:
        raise NotFoundError("Patient record not found", NotFoundReason.ROLE_RECORD_MISSING)
    return row["medical_history"]


async def update_medical_history(dal: DataAccess, user_id: int, medical_history: str) -> None:
    result = await dal.mutate(
        update(patients_table)
        .where(patients_table.c.user_id == user_id)
        .values(medical_history=medical_history)
    )
    if result.affected_count == 0:
        raise NotFoundError("Patient record not found", NotFoundReason.ROLE_RECORD_MISSING)


async def add_genetic_data(
    dal: DataAccess, patient_id: int, genetic_data_raw: Any, ancestry_data: Any
) -> int:
    """Ajoute un échantillon (jamais de mise à jour en place)."""
    result = await dal.mutate(
        insert(genetic_data_table).values(
            patient_id=patient_id,
            genetic_data_raw=json.dumps(genetic_data_raw),
            ancestry_data=json.dumps(ancestry_data),
        )
    )
    return result.inserted_id


async def get_current_genetic_data(dal: DataAccess, patient_id: int) -> dict | None:
    """Échantillon le plus récent du patient, ou None."""
    row = await dal.fetch_one(
        select(
            genetic_data_table.c.genetic_data_raw,
            genetic_data_table.c.ancestry_data,
            genetic_data_table.c.created_at,
        )
        .where(genetic_data_table.c.patient_id == patient_id)
        .order_by(genetic_data_table.c.created_at.desc(), genetic_data_table.c.id.desc())
        .limit(1)
    )
    if row is None:
        return None
    return {
        "genetic_data_raw": _loads(row["genetic_data_raw"]),
        "ancestry_data": _loads(row["ancestry_data"]),
        "created_at": row["created_at"],
    }
