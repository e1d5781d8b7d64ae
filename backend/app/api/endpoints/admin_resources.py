"""
Admin endpoints for any user's templates, prompts, integration configs and runs.

Config listings here return decrypted secrets so admins can audit them.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Any, List
import logging

from app.api.endpoints.admin import get_user_or_404
from app.core.auth import require_admin
from app.core.crypto import decrypt_secret, encrypt_secret
from app.db.database import get_db
from app.db import models
from app.schemas.integration import (
    AdminGithubConfigResponse,
    AdminOpenAiConfigResponse,
    GithubConfigCreate,
    GithubConfigUpdate,
    OpenAiConfigCreate,
    OpenAiConfigUpdate,
)
from app.schemas.prompt import PromptCreate, PromptResponse, PromptUpdate
from app.schemas.run import RunResponse
from app.schemas.template import TemplateCreate, TemplateResponse, TemplateUpdate
from app.services import resources

router = APIRouter()
logger = logging.getLogger(__name__)


def _github_view(config: models.GithubConfig, token: str = None) -> AdminGithubConfigResponse:
    view = AdminGithubConfigResponse.model_validate(config)
    view.token = token if token is not None else (decrypt_secret(config.token) if config.token else "")
    return view


def _openai_view(config: models.OpenAiConfig, api_key: str = None) -> AdminOpenAiConfigResponse:
    view = AdminOpenAiConfigResponse.model_validate(config)
    view.api_key = api_key if api_key is not None else (decrypt_secret(config.api_key) if config.api_key else "")
    return view


def _require_name_and_content(request) -> tuple:
    name = (request.name or "").strip()
    content = (request.content or "").strip()
    if not name or not content:
        raise HTTPException(status_code=400, detail="Name and content are required.")
    return name, content


# Templates

@router.get("/users/{user_id}/templates", response_model=List[TemplateResponse])
def read_user_templates(
    user_id: str,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    return resources.list_owned(db, models.Template, user_id)


@router.post("/users/{user_id}/templates", response_model=TemplateResponse)
def create_user_template(
    user_id: str,
    request: TemplateCreate,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    name, content = _require_name_and_content(request)
    get_user_or_404(db, user_id)
    record = resources.create_owned(
        db, models.Template, user_id, request.is_default, name=name, content=content
    )
    logger.info(f"Admin {admin.email} created template {record.id} for user {user_id}")
    return record


@router.patch("/templates/{template_id}", response_model=TemplateResponse)
def update_any_template(
    template_id: int,
    request: TemplateUpdate,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    name, content = _require_name_and_content(request)
    template = resources.get_owned(db, models.Template, template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found.")

    template.name = name
    template.content = content
    db.commit()
    db.refresh(template)
    return template


@router.delete("/templates/{template_id}", response_model=TemplateResponse)
def delete_any_template(
    template_id: int,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    template = resources.get_owned(db, models.Template, template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found.")

    if resources.count_runs_using(db, models.Run.template_id, template_id, template.user_id) > 0:
        raise HTTPException(
            status_code=409,
            detail="Template is used by existing runs and cannot be deleted.",
        )

    deleted = TemplateResponse.model_validate(template)
    db.delete(template)
    db.commit()
    logger.info(f"Admin {admin.email} deleted template {template_id}")
    return deleted


# Prompts

@router.get("/users/{user_id}/prompts", response_model=List[PromptResponse])
def read_user_prompts(
    user_id: str,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    return resources.list_owned(db, models.Prompt, user_id)


@router.post("/users/{user_id}/prompts", response_model=PromptResponse)
def create_user_prompt(
    user_id: str,
    request: PromptCreate,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    name, content = _require_name_and_content(request)
    get_user_or_404(db, user_id)
    record = resources.create_owned(
        db, models.Prompt, user_id, request.is_default, name=name, content=content
    )
    logger.info(f"Admin {admin.email} created prompt {record.id} for user {user_id}")
    return record


@router.patch("/prompts/{prompt_id}", response_model=PromptResponse)
def update_any_prompt(
    prompt_id: int,
    request: PromptUpdate,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    name, content = _require_name_and_content(request)
    prompt = resources.get_owned(db, models.Prompt, prompt_id)
    if not prompt:
        raise HTTPException(status_code=404, detail="Prompt not found.")

    prompt.name = name
    prompt.content = content
    db.commit()
    db.refresh(prompt)
    return prompt


@router.delete("/prompts/{prompt_id}", response_model=PromptResponse)
def delete_any_prompt(
    prompt_id: int,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    prompt = resources.get_owned(db, models.Prompt, prompt_id)
    if not prompt:
        raise HTTPException(status_code=404, detail="Prompt not found.")

    if resources.count_runs_using(db, models.Run.prompt_id, prompt_id, prompt.user_id) > 0:
        raise HTTPException(
            status_code=409,
            detail="Prompt is used by existing runs and cannot be deleted.",
        )

    deleted = PromptResponse.model_validate(prompt)
    db.delete(prompt)
    db.commit()
    logger.info(f"Admin {admin.email} deleted prompt {prompt_id}")
    return deleted


# GitHub configs

@router.get("/users/{user_id}/github-configs", response_model=List[AdminGithubConfigResponse])
def read_user_github_configs(
    user_id: str,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    configs = resources.list_owned(db, models.GithubConfig, user_id)
    return [_github_view(config) for config in configs]


@router.post("/users/{user_id}/github-configs", response_model=AdminGithubConfigResponse)
def create_user_github_config(
    user_id: str,
    request: GithubConfigCreate,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    name = (request.name or "").strip()
    owner = (request.owner or "").strip()
    repo = (request.repo or "").strip()
    token = (request.token or "").strip()
    if not name or not owner or not repo or not token:
        raise HTTPException(status_code=400, detail="Name, owner, repo, and token are required.")

    get_user_or_404(db, user_id)
    record = resources.create_owned(
        db, models.GithubConfig, user_id, request.is_default,
        name=name, owner=owner, repo=repo, token=encrypt_secret(token),
    )
    logger.info(f"Admin {admin.email} added GitHub config {record.id} for user {user_id}")
    return _github_view(record, token)


@router.patch("/github-configs/{config_id}", response_model=AdminGithubConfigResponse)
def update_any_github_config(
    config_id: int,
    request: GithubConfigUpdate,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    name = (request.name or "").strip()
    owner = (request.owner or "").strip()
    repo = (request.repo or "").strip()
    token = (request.token or "").strip()
    if not name or not owner or not repo:
        raise HTTPException(status_code=400, detail="Name, owner, and repo are required.")

    config = resources.get_owned(db, models.GithubConfig, config_id)
    if not config:
        raise HTTPException(status_code=404, detail="Config not found.")

    config.name = name
    config.owner = owner
    config.repo = repo
    if token:
        config.token = encrypt_secret(token)
    db.commit()
    db.refresh(config)
    return _github_view(config)


@router.delete("/github-configs/{config_id}", response_model=AdminGithubConfigResponse)
def delete_any_github_config(
    config_id: int,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    config = resources.get_owned(db, models.GithubConfig, config_id)
    if not config:
        raise HTTPException(status_code=404, detail="Config not found.")

    deleted = _github_view(config)
    db.delete(config)
    db.commit()
    return deleted


# OpenAI configs

@router.get("/users/{user_id}/openai-configs", response_model=List[AdminOpenAiConfigResponse])
def read_user_openai_configs(
    user_id: str,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    configs = resources.list_owned(db, models.OpenAiConfig, user_id)
    return [_openai_view(config) for config in configs]


@router.post("/users/{user_id}/openai-configs", response_model=AdminOpenAiConfigResponse)
def create_user_openai_config(
    user_id: str,
    request: OpenAiConfigCreate,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    name = (request.name or "").strip()
    api_key = (request.api_key or "").strip()
    model = (request.model or "").strip()
    if not name or not api_key or not model:
        raise HTTPException(status_code=400, detail="Name, API key, and model are required.")

    get_user_or_404(db, user_id)
    record = resources.create_owned(
        db, models.OpenAiConfig, user_id, request.is_default,
        name=name, api_key=encrypt_secret(api_key), model=model,
    )
    logger.info(f"Admin {admin.email} added OpenAI config {record.id} for user {user_id}")
    return _openai_view(record, api_key)


@router.patch("/openai-configs/{config_id}", response_model=AdminOpenAiConfigResponse)
def update_any_openai_config(
    config_id: int,
    request: OpenAiConfigUpdate,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    name = (request.name or "").strip()
    api_key = (request.api_key or "").strip()
    model = (request.model or "").strip()
    if not name or not model:
        raise HTTPException(status_code=400, detail="Name and model are required.")

    config = resources.get_owned(db, models.OpenAiConfig, config_id)
    if not config:
        raise HTTPException(status_code=404, detail="Config not found.")

    config.name = name
    config.model = model
    if api_key:
        config.api_key = encrypt_secret(api_key)
    db.commit()
    db.refresh(config)
    return _openai_view(config)


@router.delete("/openai-configs/{config_id}", response_model=AdminOpenAiConfigResponse)
def delete_any_openai_config(
    config_id: int,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    config = resources.get_owned(db, models.OpenAiConfig, config_id)
    if not config:
        raise HTTPException(status_code=404, detail="Config not found.")

    deleted = _openai_view(config)
    db.delete(config)
    db.commit()
    return deleted


# Runs

@router.get("/users/{user_id}/runs", response_model=List[RunResponse])
def read_user_runs(
    user_id: str,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    return db.query(models.Run).filter(
        models.Run.user_id == user_id
    ).order_by(models.Run.created_at.desc(), models.Run.id.desc()).all()


@router.delete("/runs/{run_id}", response_model=RunResponse)
def delete_any_run(
    run_id: int,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Any:
    run = db.query(models.Run).filter(models.Run.id == run_id).first()
    if not run:
        raise HTTPException(status_code=404, detail="Run not found.")

    deleted = RunResponse.model_validate(run)
    db.delete(run)
    db.commit()
    logger.info(f"Admin {admin.email} deleted run {run_id}")
    return deleted
