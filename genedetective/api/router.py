from fastapi import APIRouter

from genedetective.api import health
from genedetective.api.endpoints import analysis, auth, medical

router = APIRouter()

router.include_router(health.router, tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(medical.router, prefix="/medical", tags=["medical"])
router.include_router(analysis.router, prefix="/analysis", tags=["analysis"])
