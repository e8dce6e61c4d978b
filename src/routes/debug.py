# src/routes/debug.py
from fastapi import APIRouter, Depends
from typing import Any, Optional
from core.debug import DebugContext
from core.dependencies import get_debug_context, require_admin
from models.doctor import Doctor
from schemas.report_schemas import DebugStats
from utils.exceptions import NotFoundException

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get(
    "/stats",
    response_model=DebugStats,
    summary="Request statistics",
    description="Call count, error rate and average latency; only when debug tooling is on",
)
async def debug_stats(
    context: Optional[DebugContext] = Depends(get_debug_context),
    current_user: Doctor = Depends(require_admin),
) -> Any:
    if context is None:
        raise NotFoundException("Not found")
    return context.snapshot()
