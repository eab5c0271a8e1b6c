"""Schémas Pydantic pour les analyses et recommandations."""

from datetime import datetime
from typing import Any

from genedetective.schemas.utils import CamelModel, PatientId


class AnalyzeRequest(CamelModel):
    # Obligatoire pour un conseiller, ignoré pour un patient
    patient_id: PatientId | None = None


class AnalyzeResponse(CamelModel):
    message: str
    results: dict[str, Any]


class AnalysisResultsResponse(CamelModel):
    results: list[dict[str, Any]]


class RecommendationCreate(CamelModel):
    patient_id: PatientId
    recommendations: Any


class RecommendationItem(CamelModel):
    id: int
    counselor_id: int | None = None
    recommendations: Any = None
    created_at: datetime | None = None


class RecommendationListResponse(CamelModel):
    recommendations: list[RecommendationItem]
