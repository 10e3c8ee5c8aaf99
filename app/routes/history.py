import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.config import Limit, get_global_limit, normalize_analysis_type
from app.dependencies.auth import get_current_user_id
from app.schemas.analysis_schemas import HistoryResponse
from app.services.history_store import list_history

router = APIRouter(prefix="/history", tags=["History"])
logger = logging.getLogger(__name__)


# =====================================================
# LIST HISTORY (per analysis type, newest first)
# =====================================================
@router.get("/{analysis_type}", response_model=HistoryResponse)
def get_history(
    analysis_type: str,
    limit: int = Query(20, ge=1, le=get_global_limit(Limit.HISTORY_PAGE_MAX)),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user_id),
):
    try:
        resolved_type = normalize_analysis_type(analysis_type)
    except ValueError:
        raise HTTPException(status_code=404, detail="Unknown analysis type")

    try:
        rows = list_history(user_id, resolved_type, limit=limit, offset=offset)
    except Exception:
        logger.exception("Failed to load history: user_id=%s type=%s", user_id, resolved_type.value)
        raise HTTPException(status_code=503, detail="History unavailable")

    return HistoryResponse(
        analysis_type=resolved_type.value,
        limit=limit,
        offset=offset,
        history=rows,
    )
