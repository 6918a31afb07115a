import logging

from .config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

from .common import app
from .routers.counseling.endpoints import router as CounselingEndpoints
from .routers.profile.endpoints import router as ProfileEndpoints
from .routers.storage.endpoints import router as StorageEndpoints
from .routers.system.endpoints import router as SystemEndpoints

logger = logging.getLogger(__name__)

API_PREFIX = "/api"

# Include routers
app.include_router(SystemEndpoints, prefix=API_PREFIX)
app.include_router(CounselingEndpoints, prefix=API_PREFIX)
app.include_router(ProfileEndpoints, prefix=API_PREFIX)
app.include_router(StorageEndpoints, prefix=API_PREFIX)

logger.info(f"BeMore API configured for {settings.environment}")
