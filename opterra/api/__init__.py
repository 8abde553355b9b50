"""
API Module - FastAPI Assessment Service

Public API:
- app: FastAPI application instance
- router: Assessment routes (mounted under API_V1_STR)
"""

from .main import app
from .routes import router
from .schemas import AssessmentRequest, ProjectionRequest

__all__ = [
    "app",
    "router",
    "AssessmentRequest",
    "ProjectionRequest",
]
