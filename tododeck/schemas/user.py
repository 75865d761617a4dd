from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from typing import Optional
from tododeck.config.validators import validate_password

class UserCreate(BaseModel):
    """Schema for signing up a new user"""
    model_config = ConfigDict(extra="ignore")

    email: EmailStr
    password: Optional[str]

    @field_validator("email", mode="before")
    @classmethod
    def validate_email_present(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("can't be blank")
        return v

    @field_validator("password")
    @classmethod
    def validate_password_present(cls, v):
        is_valid, errors = validate_password(v)
        if not is_valid:
            raise ValueError(", ".join(errors))
        return v
