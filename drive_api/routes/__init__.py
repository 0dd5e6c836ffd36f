from .auth import router as auth_router
from .files import router as files_router
from .folders import router as folders_router
from .shared import router as shared_router

__all__ = ["auth_router", "files_router", "folders_router", "shared_router"]
