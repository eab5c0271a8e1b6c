import logging
from datetime import UTC, datetime
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy import text

from genedetective.core.data_access import DataAccess, get_data_access

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    status: Literal["OK"] = Field(..., description="The status of the health check")
    message: str
    timestamp: datetime


@router.get("/health", tags=["health"], response_model=HealthResponse)
async def health(dal: DataAccess = Depends(get_data_access)):
    # StorageError remonte en 500 via les handlers d'exception
    await dal.fetch_one(text("SELECT 1"))
    return HealthResponse(
        status="OK",
        message="GeneDetective API is running",
        timestamp=datetime.now(UTC),
    )
