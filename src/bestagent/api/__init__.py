"""HTTP layer: FastAPI app, routes and response shaping."""

from bestagent.api.app import create_app
from bestagent.api.service import CustomerStatusService, build_service

__all__ = ["create_app", "CustomerStatusService", "build_service"]
