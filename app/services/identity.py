import logging
from typing import Optional

from app.services.supabase_client import get_supabase, is_supabase_configured

logger = logging.getLogger(__name__)


def get_user_id_from_token(token: Optional[str]) -> Optional[str]:
    """
    Resolve a bearer token to a Supabase user id.

    Returns None for a missing, invalid or expired token, and when Supabase is
    not configured. Callers treat None as an anonymous request.
    """
    if not token:
        return None

    if not is_supabase_configured():
        logger.warning("Supabase not configured; treating request as anonymous")
        return None

    try:
        response = get_supabase().auth.get_user(token)
    except Exception:
        logger.exception("Error verifying access token")
        return None

    user = getattr(response, "user", None)
    if user is None or not getattr(user, "id", None):
        return None
    return str(user.id)


def update_user_profile(user_id: str, name: Optional[str], phone: Optional[str]) -> dict:
    attributes: dict = {}
    if name is not None:
        attributes["user_metadata"] = {"full_name": name, "display_name": name}
    if phone is not None:
        attributes["phone"] = phone

    if not attributes:
        return {}

    get_supabase().auth.admin.update_user_by_id(user_id, attributes)
    return attributes
