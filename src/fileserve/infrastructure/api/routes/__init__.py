"""API route modules."""

from fileserve.infrastructure.api.routes.batch_router import router as batch_router
from fileserve.infrastructure.api.routes.files_router import router as files_router

__all__ = ["batch_router", "files_router"]
