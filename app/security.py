import hmac
import logging
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    return authorization.split(" ", 1)[1].strip() or None


def require_admin(
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[Optional[str], Header()] = None,
) -> None:
    """Gate for /api/admin: 401 without a token, 403 with a token that is not the admin one"""
    token = _bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    if not settings.admin_api_token or not hmac.compare_digest(token.encode(), settings.admin_api_token.encode()):
        logger.warning("Rejected admin request with an invalid token")
        raise HTTPException(status_code=403, detail="Admin access required")
