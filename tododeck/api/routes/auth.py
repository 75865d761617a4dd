from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import func
from sqlalchemy.orm import Session
from datetime import datetime, timezone
from tododeck.auth.utils import create_access_token, verify_password
from tododeck.config.settings import settings
from tododeck.database.connection import get_db
from tododeck.models.user import User
from tododeck.schemas.token import AccessTokenResponse, TokenRequest
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/oauth", tags=["Authentication"])

def oauth_error(error: str, description: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": error, "error_description": description}
    )

@router.post("/token", response_model=AccessTokenResponse)
def issue_token(token_request: TokenRequest, db: Session = Depends(get_db)):
    """
    Exchange email and password for a bearer token
    - **grant_type**: must be "password"
    - **username**: the user's email address
    - **password**: the user's password
    """
    if token_request.grant_type != "password":
        return oauth_error("unsupported_grant_type", "Only the password grant is supported")

    email = (token_request.username or "").lower()
    user = db.query(User).filter(func.lower(User.email) == email).first()

    if not user or not verify_password(token_request.password or "", user.hashed_password):
        logger.warning(f"Rejected credentials for {email!r}")
        return oauth_error("invalid_grant", "Invalid email or password")

    access_token = create_access_token(user.id)
    logger.info(f"Issued access token for user {user.id}")

    return AccessTokenResponse(
        access_token=access_token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        created_at=int(datetime.now(timezone.utc).timestamp())
    )
