from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Any, List
import logging

from app.core.auth import get_current_user
from app.db.database import get_db
from app.db import models
from app.schemas.template import TemplateCreate, TemplateResponse, TemplateUpdate
from app.services import resources

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[TemplateResponse])
def read_templates(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """List the user's LaTeX templates, most recently updated first."""
    return resources.list_owned(db, models.Template, current_user.id)


@router.post("", response_model=TemplateResponse)
def create_template(
    request: TemplateCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    name = (request.name or "").strip()
    content = (request.content or "").strip()
    if not name or not content:
        raise HTTPException(status_code=400, detail="Name and content are required.")

    record = resources.create_owned(
        db, models.Template, current_user.id, request.is_default,
        name=name, content=content,
    )
    logger.info(f"User {current_user.id} created template {record.id}")
    return record


@router.patch("/{template_id}", response_model=TemplateResponse)
def update_template(
    template_id: int,
    request: TemplateUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    name = (request.name or "").strip()
    content = (request.content or "").strip()
    if not name or not content:
        raise HTTPException(status_code=400, detail="Name and content are required.")

    template = resources.get_owned(db, models.Template, template_id, current_user.id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found.")

    template.name = name
    template.content = content
    db.commit()
    db.refresh(template)
    return template


@router.delete("/{template_id}", response_model=TemplateResponse)
def delete_template(
    template_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """Delete a template unless a run still references it."""
    if resources.count_runs_using(db, models.Run.template_id, template_id, current_user.id) > 0:
        raise HTTPException(
            status_code=409,
            detail="Template is used by existing runs and cannot be deleted.",
        )

    template = resources.get_owned(db, models.Template, template_id, current_user.id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found.")

    deleted = TemplateResponse.model_validate(template)
    db.delete(template)
    db.commit()
    return deleted


@router.patch("/{template_id}/default", response_model=TemplateResponse)
def set_default_template(
    template_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    template = resources.mark_default(db, models.Template, current_user.id, template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found.")
    return template
