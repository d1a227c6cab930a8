"""
Module 09D - Health Route

Liveness only. Never loads the proof bundle, so it answers even when
no airdrop can be served.
"""

from fastapi import APIRouter

from api.models.responses import HealthResponse


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report that the API process is up."""
    return HealthResponse(ok=True)


# Load balancers that probe "/" get the same answer
router.add_api_route("/", health_check, methods=["GET"], response_model=HealthResponse)
