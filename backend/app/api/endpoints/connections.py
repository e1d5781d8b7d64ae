"""Connection checks for GitHub and OpenAI credentials before they are saved or used."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Any
import logging

from app.core.auth import get_current_user
from app.core.crypto import decrypt_secret
from app.db.database import get_db
from app.db import models
from app.llm.openai_client import OpenAIClient, OpenAIError
from app.schemas.integration import ConnectionTestResponse, GithubTestRequest, OpenAiTestRequest
from app.services import resources
from app.services.github_storage import GitHubError, check_repository

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/github/test", response_model=ConnectionTestResponse)
async def test_github_connection(
    request: GithubTestRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Check that a token can reach a repository. Uses the saved config when ``config_id``
    is given, otherwise the explicit fields, with blanks filled from the default config.
    """
    owner = (request.owner or "").strip()
    repo = (request.repo or "").strip()
    token = (request.token or "").strip()

    if request.config_id:
        config = resources.get_owned(db, models.GithubConfig, request.config_id, current_user.id)
        if config:
            owner = config.owner
            repo = config.repo
            token = decrypt_secret(config.token)
    elif not owner or not repo or not token:
        default = resources.get_default(db, models.GithubConfig, current_user.id)
        if default:
            owner = owner or default.owner
            repo = repo or default.repo
            token = token or decrypt_secret(default.token)

    if not owner or not repo or not token:
        raise HTTPException(status_code=400, detail="Owner, repo, and token are required.")

    try:
        await check_repository(token, owner, repo)
    except GitHubError as e:
        logger.warning(f"GitHub connection test failed for {owner}/{repo}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return {"ok": True}


@router.post("/openai/test", response_model=ConnectionTestResponse)
async def test_openai_connection(
    request: OpenAiTestRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """Check that an API key can list models."""
    api_key = (request.api_key or "").strip()

    if request.config_id:
        config = resources.get_owned(db, models.OpenAiConfig, request.config_id, current_user.id)
        if config:
            api_key = decrypt_secret(config.api_key)
    elif not api_key:
        default = resources.get_default(db, models.OpenAiConfig, current_user.id)
        api_key = decrypt_secret(default.api_key) if default else ""

    if not api_key:
        raise HTTPException(status_code=400, detail="OpenAI API key is required.")

    try:
        await OpenAIClient(api_key).list_models()
    except OpenAIError as e:
        logger.warning(f"OpenAI connection test failed for user {current_user.id}: {e}")
        raise HTTPException(status_code=400, detail=str(e) or "Connection failed.")

    return {"ok": True}
