from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Any, List
import logging

from app.core.auth import get_current_user
from app.db.database import get_db
from app.db import models
from app.schemas.prompt import PromptCreate, PromptResponse, PromptUpdate
from app.services import resources

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[PromptResponse])
def read_prompts(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """List the user's prompt profiles, most recently updated first."""
    return resources.list_owned(db, models.Prompt, current_user.id)


@router.post("", response_model=PromptResponse)
def create_prompt(
    request: PromptCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    name = (request.name or "").strip()
    content = (request.content or "").strip()
    if not name or not content:
        raise HTTPException(status_code=400, detail="Name and content are required.")

    record = resources.create_owned(
        db, models.Prompt, current_user.id, request.is_default,
        name=name, content=content,
    )
    logger.info(f"User {current_user.id} created prompt {record.id}")
    return record


@router.patch("/{prompt_id}", response_model=PromptResponse)
def update_prompt(
    prompt_id: int,
    request: PromptUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    name = (request.name or "").strip()
    content = (request.content or "").strip()
    if not name or not content:
        raise HTTPException(status_code=400, detail="Name and content are required.")

    prompt = resources.get_owned(db, models.Prompt, prompt_id, current_user.id)
    if not prompt:
        raise HTTPException(status_code=404, detail="Prompt not found.")

    prompt.name = name
    prompt.content = content
    db.commit()
    db.refresh(prompt)
    return prompt


@router.delete("/{prompt_id}", response_model=PromptResponse)
def delete_prompt(
    prompt_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """Delete a prompt unless a run still references it."""
    if resources.count_runs_using(db, models.Run.prompt_id, prompt_id, current_user.id) > 0:
        raise HTTPException(
            status_code=409,
            detail="Prompt is used by existing runs and cannot be deleted.",
        )

    prompt = resources.get_owned(db, models.Prompt, prompt_id, current_user.id)
    if not prompt:
        raise HTTPException(status_code=404, detail="Prompt not found.")

    deleted = PromptResponse.model_validate(prompt)
    db.delete(prompt)
    db.commit()
    return deleted


@router.patch("/{prompt_id}/default", response_model=PromptResponse)
def set_default_prompt(
    prompt_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    prompt = resources.mark_default(db, models.Prompt, current_user.id, prompt_id)
    if not prompt:
        raise HTTPException(status_code=404, detail="Prompt not found.")
    return prompt
