from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from tododeck.api.dependencies import request_body
from tododeck.api.errors import JsonApiResponse, ValidationFailed
from tododeck.auth.utils import hash_password
from tododeck.config.helpers import commit_or_raise
from tododeck.database.connection import get_db
from tododeck.models.user import User
from tododeck.schemas.jsonapi import parse_document, validate_attributes
from tododeck.schemas.serializers import document, serialize_user
from tododeck.schemas.user import UserCreate
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"], default_response_class=JsonApiResponse)

@router.post("", status_code=status.HTTP_201_CREATED)
def register(body: bytes = Depends(request_body), db: Session = Depends(get_db)):
    """
    Sign up a new user
    - **email**: required, must be a valid and unused email address
    - **password**: required, cannot be blank
    """
    payload = parse_document(body, "users")
    attributes = validate_attributes(UserCreate, payload.attributes)

    existing_user = db.query(User).filter(
        func.lower(User.email) == attributes.email.lower()
    ).first()
    if existing_user:
        raise ValidationFailed(["Email has already been taken"])

    new_user = User(
        email=attributes.email,
        hashed_password=hash_password(attributes.password)
    )
    db.add(new_user)
    commit_or_raise(db)
    db.refresh(new_user)

    logger.info(f"Registered user {new_user.id}")
    return document(serialize_user(new_user))
