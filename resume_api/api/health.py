from fastapi import APIRouter, Request

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Report liveness and whether an analysis backend is attached.",
)
async def health_check(request: Request):
    service = getattr(request.app.state, "analysis_service", None)
    return {"status": "healthy", "aiConfigured": service is not None}
