import logging

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies.auth import get_current_user_id
from app.schemas.analysis_schemas import ProfileUpdateRequest
from app.services.identity import update_user_profile

router = APIRouter(prefix="/profile", tags=["Profile"])
logger = logging.getLogger(__name__)


@router.put("/")
def update_profile(
    payload: ProfileUpdateRequest,
    user_id: str = Depends(get_current_user_id),
):
    try:
        updated = update_user_profile(user_id, name=payload.name, phone=payload.phone)
    except Exception:
        logger.exception("Profile update failed: user_id=%s", user_id)
        raise HTTPException(status_code=500, detail="Failed to update profile")

    return {"status": "profile_updated", "updated_fields": sorted(updated)}
