"""Admin endpoints for managing user accounts."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Any, List
import logging

from app.api.endpoints.auth import normalize_email
from app.core.auth import require_admin
from app.core.security import get_password_hash
from app.db.database import get_db
from app.db import models
from app.schemas.user import AdminUserCreate, AdminUserUpdate, UserResponse
from app.services.resources import delete_user_cascade, seed_user_defaults

router = APIRouter()
logger = logging.getLogger(__name__)

VALID_ROLE_IDS = (models.USER_ROLE_ID, models.ADMIN_ROLE_ID)


def get_user_or_404(db: Session, user_id: str) -> models.User:
    user = db.query(models.User).filter(models.User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found.")
    return user


@router.get("/users", response_model=List[UserResponse])
def read_users(
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    """All users, oldest first."""
    return db.query(models.User).order_by(models.User.created_at, models.User.email).all()


@router.post("/users", response_model=UserResponse)
def create_user(
    request: AdminUserCreate,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    """Create a user (admin only). New users get the default template and prompt."""
    name = (request.name or "").strip()
    email = normalize_email(request.email)
    password = request.password or ""

    if not name or not email or not password:
        raise HTTPException(status_code=400, detail="Name, email, and password are required.")
    if request.role_id not in VALID_ROLE_IDS:
        raise HTTPException(status_code=400, detail="Invalid role.")

    existing = db.query(models.User).filter(models.User.email == email).first()
    if existing:
        raise HTTPException(status_code=409, detail="A user with this email already exists.")

    user = models.User(
        name=name,
        email=email,
        password_hash=get_password_hash(password),
        role_id=request.role_id,
    )
    try:
        db.add(user)
        db.flush()
        seed_user_defaults(db, user)
        db.commit()
        db.refresh(user)
    except Exception as e:
        logger.error(f"Error creating user {email}: {str(e)}")
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(f"Admin {admin.email} created user {user.id} ({user.email}) role={user.role_id}")
    return user


@router.patch("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    request: AdminUserUpdate,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    name = (request.name or "").strip()
    email = normalize_email(request.email)
    password = request.password or ""

    if not name or not email:
        raise HTTPException(status_code=400, detail="Name and email are required.")
    if request.role_id is not None and request.role_id not in VALID_ROLE_IDS:
        raise HTTPException(status_code=400, detail="Invalid role.")

    conflict = db.query(models.User).filter(
        models.User.email == email,
        models.User.id != user_id,
    ).first()
    if conflict:
        raise HTTPException(status_code=409, detail="Email is already in use.")

    user = get_user_or_404(db, user_id)
    user.name = name
    user.email = email
    if request.role_id is not None:
        user.role_id = request.role_id
    if password:
        user.password_hash = get_password_hash(password)

    db.commit()
    db.refresh(user)
    logger.info(f"Admin {admin.email} updated user {user.id}")
    return user


@router.delete("/users/{user_id}", response_model=UserResponse)
def delete_user(
    user_id: str,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    """Delete a user together with their runs, configs, templates and prompts."""
    user = get_user_or_404(db, user_id)
    deleted = UserResponse.model_validate(user)

    try:
        delete_user_cascade(db, user)
    except Exception as e:
        logger.error(f"Error deleting user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(f"Admin {admin.email} deleted user {user_id}")
    return deleted
