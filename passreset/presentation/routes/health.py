from fastapi import APIRouter

from passreset.schemas.responses import HealthOut

router = APIRouter()


@router.get("/healthz", response_model=HealthOut)
async def healthz() -> HealthOut:
    return HealthOut()
