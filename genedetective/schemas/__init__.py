"""Schemas Pydantic pour validation des donnees."""

from genedetective.schemas.analysis import (
    AnalysisResultsResponse,
    AnalyzeRequest,
    AnalyzeResponse,
    RecommendationCreate,
    RecommendationItem,
    RecommendationListResponse,
)
from genedetective.schemas.auth import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    UserProfile,
    UserSummary,
)
from genedetective.schemas.medical import (
    GeneticDataResponse,
    GeneticDataUpload,
    MedicalHistoryResponse,
    MedicalHistoryUpdate,
    MessageResponse,
)

__all__ = [
    "AnalysisResultsResponse",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "AuthResponse",
    "GeneticDataResponse",
    "GeneticDataUpload",
    "LoginRequest",
    "MedicalHistoryResponse",
    "MedicalHistoryUpdate",
    "MessageResponse",
    "ProfileResponse",
    "RecommendationCreate",
    "RecommendationItem",
    "RecommendationListResponse",
    "RegisterRequest",
    "UserProfile",
    "UserSummary",
]
