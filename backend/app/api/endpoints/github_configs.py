from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Any, List
import logging

from app.core.auth import get_current_user
from app.core.crypto import encrypt_secret
from app.db.database import get_db
from app.db import models
from app.schemas.integration import GithubConfigCreate, GithubConfigResponse, GithubConfigUpdate
from app.services import resources

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[GithubConfigResponse])
def read_github_configs(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """List the user's GitHub configs. Tokens are never returned."""
    return resources.list_owned(db, models.GithubConfig, current_user.id)


@router.post("", response_model=GithubConfigResponse)
def create_github_config(
    request: GithubConfigCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    name = (request.name or "").strip()
    owner = (request.owner or "").strip()
    repo = (request.repo or "").strip()
    token = (request.token or "").strip()

    if not name or not owner or not repo or not token:
        raise HTTPException(status_code=400, detail="Name, owner, repo, and token are required.")

    record = resources.create_owned(
        db, models.GithubConfig, current_user.id, request.is_default,
        name=name, owner=owner, repo=repo, token=encrypt_secret(token),
    )
    logger.info(f"User {current_user.id} added GitHub config {record.id} for {owner}/{repo}")
    return record


@router.patch("/{config_id}", response_model=GithubConfigResponse)
def update_github_config(
    config_id: int,
    request: GithubConfigUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    name = (request.name or "").strip()
    owner = (request.owner or "").strip()
    repo = (request.repo or "").strip()
    token = (request.token or "").strip()

    if not name or not owner or not repo:
        raise HTTPException(status_code=400, detail="Name, owner, and repo are required.")

    config = resources.get_owned(db, models.GithubConfig, config_id, current_user.id)
    if not config:
        raise HTTPException(status_code=404, detail="Config not found.")

    config.name = name
    config.owner = owner
    config.repo = repo
    if token:
        config.token = encrypt_secret(token)
    db.commit()
    db.refresh(config)
    return config


@router.delete("/{config_id}", response_model=GithubConfigResponse)
def delete_github_config(
    config_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    config = resources.get_owned(db, models.GithubConfig, config_id, current_user.id)
    if not config:
        raise HTTPException(status_code=404, detail="Config not found.")

    deleted = GithubConfigResponse.model_validate(config)
    db.delete(config)
    db.commit()
    return deleted


@router.patch("/{config_id}/default", response_model=GithubConfigResponse)
def set_default_github_config(
    config_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    config = resources.mark_default(db, models.GithubConfig, current_user.id, config_id)
    if not config:
        raise HTTPException(status_code=404, detail="Config not found.")
    return config
