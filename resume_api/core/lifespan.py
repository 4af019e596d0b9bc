from contextlib import asynccontextmanager
import logging

from resume_api.ai.factory import get_ai_client
from resume_api.services.analysis_service import AnalysisService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    service = getattr(app.state, "analysis_service", None)
    owns_service = service is None
    if owns_service:
        invoker = get_ai_client()
        service = AnalysisService(invoker)
        app.state.analysis_service = service
        logger.info("ai_client_ready invoker=%s", type(invoker).__name__)

    yield

    if owns_service:
        await service.invoker.aclose()
        app.state.analysis_service = None
