"""Endpoints pour les analyses géniques et les recommandations."""

from fastapi import APIRouter, Depends, Query

from genedetective.core.data_access import DataAccess, get_data_access
from genedetective.core.security import CurrentUser, require_roles
from genedetective.models import Role
from genedetective.schemas.analysis import (
    AnalysisResultsResponse,
    AnalyzeRequest,
    AnalyzeResponse,
    RecommendationCreate,
    RecommendationItem,
    RecommendationListResponse,
)
from genedetective.schemas.medical import MessageResponse
from genedetective.services import analysis_service
from genedetective.services.analysis_engine import GeneAnalyzer, get_analyzer
from genedetective.services.ownership import (
    ensure_patient_exists,
    get_counselor_id,
    resolve_patient_scope,
)

router = APIRouter()

patient_or_counselor = require_roles(Role.PATIENT, Role.COUNSELOR)


@router.post("/analyze", response_model=AnalyzeResponse, summary="Lancer une analyse")
async def analyze(
    payload: AnalyzeRequest,
    current_user: CurrentUser = Depends(patient_or_counselor),
    dal: DataAccess = Depends(get_data_access),
    analyzer: GeneAnalyzer = Depends(get_analyzer),
) -> AnalyzeResponse:
    patient_id = await resolve_patient_scope(dal, current_user, payload.patient_id)
    results = await analysis_service.run_analysis(dal, analyzer, patient_id)
    return AnalyzeResponse(message="Analysis completed successfully", results=results)


@router.get("/results", response_model=AnalysisResultsResponse, summary="Lister les analyses")
async def get_results(
    patient_id: int | None = Query(None, alias="patientId", gt=0),
    current_user: CurrentUser = Depends(patient_or_counselor),
    dal: DataAccess = Depends(get_data_access),
) -> AnalysisResultsResponse:
    scope_id = await resolve_patient_scope(dal, current_user, patient_id)
    results = await analysis_service.list_analysis_results(dal, scope_id)
    return AnalysisResultsResponse(results=results)


@router.post(
    "/recommendations",
    response_model=MessageResponse,
    summary="Enregistrer des recommandations",
)
async def create_recommendation(
    payload: RecommendationCreate,
    current_user: CurrentUser = Depends(require_roles(Role.COUNSELOR)),
    dal: DataAccess = Depends(get_data_access),
) -> MessageResponse:
    counselor_id = await get_counselor_id(dal, current_user)
    await ensure_patient_exists(dal, payload.patient_id)
    await analysis_service.add_recommendation(
        dal, counselor_id, payload.patient_id, payload.recommendations
    )
    return MessageResponse(message="Recommendations saved successfully")


@router.get(
    "/recommendations",
    response_model=RecommendationListResponse,
    summary="Lister les recommandations",
)
async def get_recommendations(
    patient_id: int | None = Query(None, alias="patientId", gt=0),
    current_user: CurrentUser = Depends(patient_or_counselor),
    dal: DataAccess = Depends(get_data_access),
) -> RecommendationListResponse:
    scope_id = await resolve_patient_scope(dal, current_user, patient_id)
    items = await analysis_service.list_recommendations(dal, scope_id)
    return RecommendationListResponse(
        recommendations=[RecommendationItem.model_validate(item) for item in items]
    )
