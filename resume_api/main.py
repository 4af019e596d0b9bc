import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from resume_api.api.health import router as health_router
from resume_api.api.resume import router as resume_router
from resume_api.core.config import settings
from resume_api.core.errors import ApiError, api_error_handler, validation_error_handler
from resume_api.core.lifespan import lifespan
from resume_api.core.rate_limit import limiter
from resume_api.services.analysis_service import AnalysisService

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)


def create_app(service: AnalysisService | None = None) -> FastAPI:
    app = FastAPI(title="Resume ATS API", version="0.1.0", lifespan=lifespan)
    app.state.analysis_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allowed_origins),
        allow_origin_regex=(settings.cors_allow_origin_regex or "").strip() or None,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.include_router(health_router, prefix="/api", tags=["Health"])
    app.include_router(resume_router, prefix="/api", tags=["Resume"])
    return app


app = create_app()
