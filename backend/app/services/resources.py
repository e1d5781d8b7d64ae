"""
Shared persistence helpers for user-owned resources (templates, prompts, GitHub and
OpenAI configs): default-flag maintenance, fallback resolution and new-user seeding.
"""

import logging
from pathlib import Path
from typing import Optional, Type

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db import models

logger = logging.getLogger(__name__)

SEED_DIR = Path(__file__).resolve().parent.parent / "seed"
DEFAULT_TEMPLATE_NAME = "Default Resume Template"
DEFAULT_PROMPT_NAME = "Default Resume Prompt"


def count_owned(db: Session, resource: Type[models.Base], user_id: str) -> int:
    return db.query(func.count(resource.id)).filter(resource.user_id == user_id).scalar() or 0


def get_owned(db: Session, resource: Type[models.Base], record_id: int, user_id: Optional[str] = None):
    """Fetch a record by id, scoped to its owner unless ``user_id`` is None (admin)."""
    query = db.query(resource).filter(resource.id == record_id)
    if user_id is not None:
        query = query.filter(resource.user_id == user_id)
    return query.first()


def list_owned(db: Session, resource: Type[models.Base], user_id: str):
    return (
        db.query(resource)
        .filter(resource.user_id == user_id)
        .order_by(resource.updated_at.desc(), resource.id.desc())
        .all()
    )


def mark_default(db: Session, resource: Type[models.Base], user_id: str, record_id: int):
    """
    Make ``record_id`` the owner's only default. Clears every flag for the owner and
    then sets the chosen row; returns the record, or None when it is not owned.
    """
    db.query(resource).filter(resource.user_id == user_id).update(
        {resource.is_default: False}, synchronize_session=False
    )
    updated = db.query(resource).filter(resource.id == record_id, resource.user_id == user_id).update(
        {resource.is_default: True}, synchronize_session=False
    )
    if not updated:
        db.rollback()
        return None
    db.commit()
    return get_owned(db, resource, record_id, user_id)


def create_owned(db: Session, resource: Type[models.Base], user_id: str, is_default: bool, **fields):
    """
    Insert a resource for ``user_id``. The first resource of a type is always the default,
    and a new default displaces the previous one.
    """
    should_be_default = bool(is_default) or count_owned(db, resource, user_id) == 0
    record = resource(user_id=user_id, is_default=should_be_default, **fields)
    db.add(record)
    db.commit()
    db.refresh(record)

    if record.is_default:
        record = mark_default(db, resource, user_id, record.id)
    return record


def resolve_owned(db: Session, resource: Type[models.Base], user_id: str):
    """Owner's default record, falling back to any record they own."""
    record = (
        db.query(resource)
        .filter(resource.user_id == user_id, resource.is_default.is_(True))
        .first()
    )
    if record is None:
        record = db.query(resource).filter(resource.user_id == user_id).order_by(resource.id).first()
    return record


def get_default(db: Session, resource: Type[models.Base], user_id: str):
    return (
        db.query(resource)
        .filter(resource.user_id == user_id, resource.is_default.is_(True))
        .first()
    )


def count_runs_using(db: Session, column, record_id: int, user_id: str) -> int:
    return db.query(func.count(models.Run.id)).filter(
        column == record_id,
        models.Run.user_id == user_id,
    ).scalar() or 0


def read_seed(filename: str) -> str:
    return (SEED_DIR / filename).read_text(encoding="utf-8")


def seed_user_defaults(db: Session, user: models.User) -> None:
    """
    Give a new account a starter template and prompt profile. Only flushes; the caller
    commits so the account and its defaults land together.
    """
    db.add(models.Template(
        user_id=user.id,
        name=DEFAULT_TEMPLATE_NAME,
        content=read_seed("default-template.tex"),
        is_default=True,
    ))
    db.add(models.Prompt(
        user_id=user.id,
        name=DEFAULT_PROMPT_NAME,
        content=read_seed("default-prompt.txt"),
        is_default=True,
    ))
    db.flush()
    logger.info(f"Seeded default template and prompt for user {user.id}")


def delete_user_cascade(db: Session, user: models.User) -> None:
    """Delete a user and everything they own in one transaction."""
    # Runs go first since they reference templates and prompts
    try:
        for model in (models.Run, models.GithubConfig, models.OpenAiConfig, models.Template, models.Prompt):
            db.query(model).filter(model.user_id == user.id).delete(synchronize_session=False)
        db.delete(user)
        db.commit()
    except Exception:
        db.rollback()
        raise
