"""
GitHub storage service. Uploads generated LaTeX through the contents API.
All generated resume output goes through this module.
"""

import base64
import logging
import random
import re
import string
from datetime import datetime
from typing import NamedTuple, Optional
from urllib.parse import quote

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

UPLOAD_ROOT = "custom"
COMMIT_MESSAGE = "Resume upload"
OVERLEAF_SNIP_URL = "https://www.overleaf.com/docs?snip_uri="
_SUFFIX_CHARS = string.ascii_lowercase + string.digits


class GitHubError(Exception):
    """Raised when GitHub is misconfigured or rejects a request."""


class MissingGitHubConfig(GitHubError):
    """No token, owner or repo from the user config or the environment."""


class UploadResult(NamedTuple):
    download_url: str
    path: str


def normalize_part(value: Optional[str], fallback: str) -> str:
    """Collapse non-alphanumeric runs to underscores and trim them from the ends."""
    cleaned = re.sub(r"[^A-Za-z0-9]+", "_", value or "").strip("_")
    return cleaned or fallback


def random_suffix(length: int = 5) -> str:
    return "".join(random.choice(_SUFFIX_CHARS) for _ in range(length))


def build_resume_filename(
    user_name: Optional[str] = None,
    company: Optional[str] = None,
    title: Optional[str] = None,
    job_id: Optional[str] = None,
) -> str:
    """e.g. ``Jane_Doe_Acme_Backend_Engineer_R123_x8k2p``; an empty job id is dropped."""
    parts = [
        normalize_part(user_name, "User"),
        normalize_part(company, "Company"),
        normalize_part(title, "Role"),
        normalize_part(job_id, ""),
        random_suffix(5),
    ]
    return "_".join(part for part in parts if part)


def build_upload_path(filename: Optional[str], now: Optional[datetime] = None) -> str:
    """``custom/<Mon DD, YYYY>/<filename>.tex``"""
    now = now or datetime.now()
    date_folder = now.strftime("%b %d, %Y")
    name = normalize_part(filename, now.isoformat())
    return f"{UPLOAD_ROOT}/{date_folder}/{name}.tex"


def build_overleaf_url(download_url: str) -> str:
    return f"{OVERLEAF_SNIP_URL}{quote(download_url, safe='')}"


def _headers(token: str) -> dict:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github.v3+json",
    }


async def upload_latex(
    content: str,
    token: Optional[str] = None,
    owner: Optional[str] = None,
    repo: Optional[str] = None,
    filename: Optional[str] = None,
) -> UploadResult:
    """
    Commit a LaTeX file to the repository. Missing token/owner/repo fall back to the
    GITHUB_* environment settings one field at a time.
    """
    token = token or settings.GITHUB_TOKEN
    owner = owner or settings.GITHUB_OWNER
    repo = repo or settings.GITHUB_REPO
    if not token or not owner or not repo:
        raise MissingGitHubConfig("Missing GitHub configuration.")

    path = build_upload_path(filename)
    url = f"{settings.GITHUB_API_URL}/repos/{owner}/{repo}/contents/{quote(path)}"
    payload = {
        "message": COMMIT_MESSAGE,
        "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
    }

    try:
        async with httpx.AsyncClient() as client:
            response = await client.put(url, headers=_headers(token), json=payload, timeout=30.0)
    except httpx.HTTPError as e:
        logger.error(f"GitHub upload to {owner}/{repo} failed: {e}")
        raise GitHubError(f"GitHub upload failed: {e}")

    if not response.is_success:
        logger.error(f"GitHub upload failed with status {response.status_code}: {response.text}")
        raise GitHubError(response.text or "GitHub upload failed.")

    download_url = response.json()["content"]["download_url"]
    logger.info(f"Uploaded {len(content)} chars to {owner}/{repo}/{path}")
    return UploadResult(download_url=download_url, path=path)


async def check_repository(token: str, owner: str, repo: str) -> None:
    """Confirm the token can see the repository. Raises GitHubError otherwise."""
    url = f"{settings.GITHUB_API_URL}/repos/{owner}/{repo}"
    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(url, headers=_headers(token), timeout=30.0)
    except httpx.HTTPError as e:
        raise GitHubError(f"GitHub connection failed: {e}")

    if not response.is_success:
        raise GitHubError(response.text or "GitHub connection failed.")
