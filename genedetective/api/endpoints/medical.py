"""Endpoints pour l'historique médical et les données génétiques."""

from fastapi import APIRouter, Depends, Query

from genedetective.core.data_access import DataAccess, get_data_access
from genedetective.core.exceptions import NotFoundError
from genedetective.core.security import CurrentUser, require_roles
from genedetective.models import Role
from genedetective.schemas.medical import (
    GeneticDataResponse,
    GeneticDataUpload,
    MedicalHistoryResponse,
    MedicalHistoryUpdate,
    MessageResponse,
)
from genedetective.services import medical_service
from genedetective.services.ownership import get_own_patient_id, resolve_patient_scope

router = APIRouter()


@router.put("/history", response_model=MessageResponse, summary="Mettre à jour l'historique")
async def update_history(
    payload: MedicalHistoryUpdate,
    current_user: CurrentUser = Depends(require_roles(Role.PATIENT)),
    dal: DataAccess = Depends(get_data_access),
) -> MessageResponse:
    await medical_service.update_medical_history(dal, current_user.id, payload.medical_history)
    return MessageResponse(message="Medical history updated successfully")


@router.get("/history", response_model=MedicalHistoryResponse, summary="Lire l'historique")
async def get_history(
    current_user: CurrentUser = Depends(require_roles(Role.PATIENT)),
    dal: DataAccess = Depends(get_data_access),
) -> MedicalHistoryResponse:
    history = await medical_service.get_medical_history(dal, current_user.id)
    return MedicalHistoryResponse(medical_history=history)


@router.post("/genetic-data", response_model=MessageResponse, summary="Déposer des données")
async def upload_genetic_data(
    payload: GeneticDataUpload,
    current_user: CurrentUser = Depends(require_roles(Role.PATIENT)),
    dal: DataAccess = Depends(get_data_access),
) -> MessageResponse:
    patient_id = await get_own_patient_id(dal, current_user)
    await medical_service.add_genetic_data(
        dal, patient_id, payload.genetic_data_raw, payload.ancestry_data
    )
    return MessageResponse(message="Genetic data uploaded successfully")


@router.get(
    "/genetic-data",
    response_model=GeneticDataResponse,
    summary="Lire l'échantillon courant",
    description="Patients: leur propre échantillon. Conseillers: patientId obligatoire.",
)
async def get_genetic_data(
    patient_id: int | None = Query(None, alias="patientId", gt=0),
    current_user: CurrentUser = Depends(require_roles(Role.PATIENT, Role.COUNSELOR)),
    dal: DataAccess = Depends(get_data_access),
) -> GeneticDataResponse:
    scope_id = await resolve_patient_scope(dal, current_user, patient_id)
    sample = await medical_service.get_current_genetic_data(dal, scope_id)
    if sample is None:
        raise NotFoundError("No genetic data found")
    return GeneticDataResponse.model_validate(sample)
