"""
Credential auth endpoints: sign-up, sign-in/out and password reset.
Sessions are signed tokens carried in an HttpOnly cookie (or a bearer header).
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import (
    PASSWORD_RULE_MESSAGE,
    create_access_token,
    get_password_hash,
    is_valid_password,
    verify_password,
)
from app.db.database import get_db
from app.db import models
from app.schemas.user import (
    ResetPasswordRequest,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
    UserResponse,
)
from app.services.resources import seed_user_defaults

router = APIRouter()
logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


@router.post("/signup", response_model=UserResponse)
def sign_up(
    request: SignUpRequest,
    db: Session = Depends(get_db),
) -> Any:
    """Create an account seeded with a default template and prompt."""
    name = (request.name or "").strip()
    email = normalize_email(request.email)
    password = request.password or ""

    if not name or not email or not password:
        raise HTTPException(status_code=400, detail="Name, email, and password are required.")
    if not is_valid_password(password):
        raise HTTPException(status_code=400, detail=PASSWORD_RULE_MESSAGE)

    existing = db.query(models.User).filter(models.User.email == email).first()
    if existing:
        raise HTTPException(status_code=409, detail="An account with this email already exists.")

    try:
        user = models.User(
            name=name,
            email=email,
            password_hash=get_password_hash(password),
            role_id=models.USER_ROLE_ID,
        )
        db.add(user)
        db.flush()
        seed_user_defaults(db, user)
        db.commit()
        db.refresh(user)
    except Exception as e:
        logger.error(f"Error creating account for {email}: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(f"Created account {user.id} ({user.email})")
    return user


@router.post("/sign-in", response_model=SessionResponse)
def sign_in(
    request: SignInRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> Any:
    """Check credentials and start a session."""
    email = normalize_email(request.email)
    password = request.password or ""

    if not email or not password:
        raise HTTPException(status_code=400, detail="Email and password are required.")

    user = db.query(models.User).filter(models.User.email == email).first()
    if user is None or not verify_password(password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password.")

    token = create_access_token(user.id)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    logger.info(f"User {user.id} signed in")
    return {"access_token": token, "token_type": "bearer", "user": user}


@router.post("/sign-out")
def sign_out(response: Response) -> Any:
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"ok": True}


@router.post("/reset-password")
def reset_password(
    request: ResetPasswordRequest,
    db: Session = Depends(get_db),
) -> Any:
    """Set a new password for an account by email."""
    if not settings.PASSWORD_RESET_ENABLED:
        raise HTTPException(status_code=403, detail="Password reset is disabled.")

    email = normalize_email(request.email)
    password = request.password or ""
    if not email or not password:
        raise HTTPException(status_code=400, detail="Email and new password are required.")
    if not is_valid_password(password):
        raise HTTPException(status_code=400, detail=PASSWORD_RULE_MESSAGE)

    user = db.query(models.User).filter(models.User.email == email).first()
    if user is None:
        raise HTTPException(status_code=404, detail="Account not found.")

    user.password_hash = get_password_hash(password)
    db.commit()
    logger.info(f"Password reset for user {user.id}")
    return {"ok": True}
