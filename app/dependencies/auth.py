from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.errors import AuthRequiredError, raise_http_error
from app.services.identity import get_user_id_from_token

security_optional = HTTPBearer(auto_error=False)


def get_current_user_id_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
) -> Optional[str]:
    token = credentials.credentials if credentials else None
    user_id = get_user_id_from_token(token)
    request.state.user_id = user_id
    return user_id


def get_current_user_id(
    user_id: Optional[str] = Depends(get_current_user_id_optional),
) -> str:
    if not user_id:
        raise_http_error(AuthRequiredError("Authentication required"))
    return user_id
