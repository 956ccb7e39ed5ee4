from fastapi import APIRouter

router = APIRouter()


@router.get("/health", tags=["health"], summary="Liveness probe")
async def health() -> dict:
    return {"status": "ok"}
