"""Schémas Pydantic pour l'historique médical et les données génétiques."""

from datetime import datetime
from typing import Any

from genedetective.schemas.utils import CamelModel


class MedicalHistoryUpdate(CamelModel):
    medical_history: str


class MedicalHistoryResponse(CamelModel):
    medical_history: str | None = None


class GeneticDataUpload(CamelModel):
    genetic_data_raw: Any = None
    ancestry_data: dict[str, Any] | None = None


class GeneticDataResponse(CamelModel):
    genetic_data_raw: Any = None
    ancestry_data: dict[str, Any] | None = None
    created_at: datetime | None = None


class MessageResponse(CamelModel):
    message: str
