from pydantic import BaseModel
from typing import Optional

class TokenRequest(BaseModel):
    """Resource owner password credentials grant"""
    grant_type: str
    username: Optional[str] = None
    password: Optional[str] = None

class AccessTokenResponse(BaseModel):
    """Schema for access token"""
    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    created_at: int
