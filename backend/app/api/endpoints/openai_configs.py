from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Any, List
import logging

from app.core.auth import get_current_user
from app.core.crypto import encrypt_secret
from app.db.database import get_db
from app.db import models
from app.schemas.integration import OpenAiConfigCreate, OpenAiConfigResponse, OpenAiConfigUpdate
from app.services import resources

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[OpenAiConfigResponse])
def read_openai_configs(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """List the user's OpenAI configs without their API keys."""
    return resources.list_owned(db, models.OpenAiConfig, current_user.id)


@router.post("", response_model=OpenAiConfigResponse)
def create_openai_config(
    request: OpenAiConfigCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    name = (request.name or "").strip()
    api_key = (request.api_key or "").strip()
    model = (request.model or "").strip()

    if not name or not api_key or not model:
        raise HTTPException(status_code=400, detail="Name, API key, and model are required.")

    record = resources.create_owned(
        db, models.OpenAiConfig, current_user.id, request.is_default,
        name=name, api_key=encrypt_secret(api_key), model=model,
    )
    logger.info(f"User {current_user.id} added OpenAI config {record.id} ({model})")
    return record


@router.patch("/{config_id}", response_model=OpenAiConfigResponse)
def update_openai_config(
    config_id: int,
    request: OpenAiConfigUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    name = (request.name or "").strip()
    api_key = (request.api_key or "").strip()
    model = (request.model or "").strip()

    if not name or not model:
        raise HTTPException(status_code=400, detail="Name and model are required.")

    config = resources.get_owned(db, models.OpenAiConfig, config_id, current_user.id)
    if not config:
        raise HTTPException(status_code=404, detail="Config not found.")

    config.name = name
    config.model = model
    if api_key:
        config.api_key = encrypt_secret(api_key)
    db.commit()
    db.refresh(config)
    return config


@router.delete("/{config_id}", response_model=OpenAiConfigResponse)
def delete_openai_config(
    config_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    config = resources.get_owned(db, models.OpenAiConfig, config_id, current_user.id)
    if not config:
        raise HTTPException(status_code=404, detail="Config not found.")

    deleted = OpenAiConfigResponse.model_validate(config)
    db.delete(config)
    db.commit()
    return deleted


@router.patch("/{config_id}/default", response_model=OpenAiConfigResponse)
def set_default_openai_config(
    config_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    config = resources.mark_default(db, models.OpenAiConfig, current_user.id, config_id)
    if not config:
        raise HTTPException(status_code=404, detail="Config not found.")
    return config
