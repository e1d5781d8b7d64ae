from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Any
import logging

from app.api.endpoints.auth import normalize_email
from app.core.auth import get_current_user
from app.core.security import PASSWORD_RULE_MESSAGE, get_password_hash, is_valid_password
from app.db.database import get_db
from app.db import models
from app.schemas.user import AccountUpdate, UserResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=UserResponse)
def read_account(
    current_user: models.User = Depends(get_current_user),
) -> Any:
    """Get the signed-in user."""
    return current_user


@router.patch("", response_model=UserResponse)
def update_account(
    request: AccountUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """Update name, email and optionally the password of the signed-in user."""
    name = (request.name or "").strip()
    email = normalize_email(request.email)
    password = request.password or ""

    if not name or not email:
        raise HTTPException(status_code=400, detail="Name and email are required.")

    taken = db.query(models.User).filter(
        models.User.email == email,
        models.User.id != current_user.id,
    ).first()
    if taken:
        raise HTTPException(status_code=409, detail="That email is already in use.")

    if password and not is_valid_password(password):
        raise HTTPException(status_code=400, detail=PASSWORD_RULE_MESSAGE)

    current_user.name = name
    current_user.email = email
    if password:
        current_user.password_hash = get_password_hash(password)

    db.commit()
    db.refresh(current_user)
    logger.info(f"User {current_user.id} updated their account")
    return current_user
