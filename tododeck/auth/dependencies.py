from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from tododeck.api.errors import Unauthorized
from tododeck.auth.utils import resolve_user_id
from tododeck.database.connection import get_db
from tododeck.models.user import User
import logging

logger = logging.getLogger(__name__)

# Missing credentials are reported as a bodiless 401 by the error handlers
security = HTTPBearer(auto_error=False)

@dataclass(frozen=True)
class RequestContext:
    """Authenticated caller and the instant the request is evaluated at"""
    user_id: int
    now: datetime

def get_request_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> RequestContext:
    """Resolve the bearer token into a per-request context"""
    if credentials is None:
        raise Unauthorized()

    try:
        user_id = resolve_user_id(credentials.credentials)
    except ValueError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise Unauthorized()

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        logger.warning(f"Bearer token refers to unknown user {user_id}")
        raise Unauthorized()

    return RequestContext(user_id=user.id, now=datetime.now(timezone.utc))
