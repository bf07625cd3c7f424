from typing import Any, Dict

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """Liveness probe; touches no chain state."""
    return {"status": "ok"}
