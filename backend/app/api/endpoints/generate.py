# File: backend/app/api/endpoints/generate.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Any, Optional
import logging

from app.core.auth import get_current_user
from app.core.config import settings
from app.core.crypto import decrypt_secret
from app.db.database import get_db
from app.db import models
from app.llm.openai_client import DEFAULT_MODEL, OpenAIClient, OpenAIError
from app.llm.prompt_builder import build_prompt
from app.schemas.run import GenerateRequest, GenerateResponse
from app.services import resources
from app.services.github_storage import (
    GitHubError,
    MissingGitHubConfig,
    build_overleaf_url,
    build_resume_filename,
    upload_latex,
)
from app.utils.latex_validation import validate_latex_output

router = APIRouter()
logger = logging.getLogger(__name__)


def _resolve_selected(
    db: Session,
    model,
    user_id: str,
    selected_id: Optional[int],
    not_found: str,
):
    """Explicit id (must be owned) -> owner's default -> any owned record."""
    if selected_id:
        record = resources.get_owned(db, model, selected_id, user_id)
        if not record:
            raise HTTPException(status_code=404, detail=not_found)
        return record
    return resources.resolve_owned(db, model, user_id)


def _resolve_config(
    db: Session,
    model,
    user_id: str,
    selected_id: Optional[int],
    not_found: str,
):
    """Explicit id (must be owned) -> owner's default -> None (environment fallback)."""
    if selected_id:
        record = resources.get_owned(db, model, selected_id, user_id)
        if not record:
            raise HTTPException(status_code=404, detail=not_found)
        return record
    return resources.get_default(db, model, user_id)


@router.post("", response_model=GenerateResponse)
async def generate_resume(
    request: GenerateRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Tailor a resume to a job description.

    Resolves the template and prompt profile, asks the model for job metadata and the
    tailored LaTeX, validates it, uploads it to GitHub and records the run. Output that
    fails validation is returned as a 422 and nothing is uploaded or stored.
    """
    job_description = (request.job_description or "").strip()
    if not job_description:
        raise HTTPException(status_code=400, detail="Job description is required.")

    template = _resolve_selected(
        db, models.Template, current_user.id, request.template_id, "Selected template not found."
    )
    prompt = _resolve_selected(
        db, models.Prompt, current_user.id, request.prompt_id, "Selected prompt not found."
    )
    if not template or not prompt:
        raise HTTPException(status_code=400, detail="Template or prompt profile not configured.")

    github_config = _resolve_config(
        db, models.GithubConfig, current_user.id, request.github_config_id,
        "Selected GitHub config not found.",
    )
    openai_config = _resolve_config(
        db, models.OpenAiConfig, current_user.id, request.openai_config_id,
        "Selected OpenAI config not found.",
    )

    api_key = decrypt_secret(openai_config.api_key) if openai_config else settings.OPENAI_API_KEY
    if not api_key:
        raise HTTPException(status_code=400, detail="OpenAI API key not configured.")
    model_name = (openai_config.model if openai_config else None) or settings.OPENAI_MODEL or DEFAULT_MODEL

    prompt_text = build_prompt(job_description, template.content, prompt.content)
    client = OpenAIClient(api_key, model=model_name)

    try:
        job_info = await client.extract_job_info(job_description)
        latex = await client.generate_latex(prompt_text)
    except OpenAIError as e:
        logger.error(f"Generation failed for user {current_user.id}: {str(e)}")
        raise HTTPException(status_code=502, detail=str(e))

    validation = validate_latex_output(latex)
    if not validation.valid:
        logger.warning(f"Generated LaTeX rejected for user {current_user.id}: {validation.errors}")
        raise HTTPException(
            status_code=422,
            detail={"error": "Validation failed.", "details": validation.errors},
        )

    filename = build_resume_filename(
        user_name=current_user.name,
        company=job_info["company"],
        title=job_info["title"],
        job_id=job_info["id"],
    )
    try:
        upload = await upload_latex(
            latex,
            token=decrypt_secret(github_config.token) if github_config else None,
            owner=github_config.owner if github_config else None,
            repo=github_config.repo if github_config else None,
            filename=filename,
        )
    except MissingGitHubConfig as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GitHubError as e:
        raise HTTPException(status_code=502, detail=str(e))

    overleaf_url = build_overleaf_url(upload.download_url)

    run = models.Run(
        user_id=current_user.id,
        job_description=job_description,
        template_id=template.id,
        prompt_id=prompt.id,
        output_url=upload.download_url,
        overleaf_url=overleaf_url,
        status="ready",
    )
    db.add(run)
    db.commit()
    db.refresh(run)
    logger.info(f"Run {run.id} ready for user {current_user.id}: {upload.path}")

    return {
        "run_id": run.id,
        "output_url": upload.download_url,
        "overleaf_url": overleaf_url,
        "latex": latex,
    }
