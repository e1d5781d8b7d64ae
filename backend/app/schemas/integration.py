from pydantic import BaseModel
from typing import Optional
from datetime import datetime


# GitHub

class GithubConfigCreate(BaseModel):
    name: Optional[str] = None
    owner: Optional[str] = None
    repo: Optional[str] = None
    token: Optional[str] = None
    is_default: bool = False


class GithubConfigUpdate(BaseModel):
    """A blank token keeps the stored one."""
    name: Optional[str] = None
    owner: Optional[str] = None
    repo: Optional[str] = None
    token: Optional[str] = None


class GithubConfigResponse(BaseModel):
    id: int
    user_id: str
    name: str
    owner: str
    repo: str
    is_default: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminGithubConfigResponse(GithubConfigResponse):
    token: str = ""


class GithubTestRequest(BaseModel):
    config_id: Optional[int] = None
    owner: Optional[str] = None
    repo: Optional[str] = None
    token: Optional[str] = None


# OpenAI

class OpenAiConfigCreate(BaseModel):
    name: Optional[str] = None
    api_key: Optional[str] = None
    model: Optional[str] = None
    is_default: bool = False


class OpenAiConfigUpdate(BaseModel):
    """A blank api_key keeps the stored one."""
    name: Optional[str] = None
    api_key: Optional[str] = None
    model: Optional[str] = None


class OpenAiConfigResponse(BaseModel):
    id: int
    user_id: str
    name: str
    model: str
    is_default: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminOpenAiConfigResponse(OpenAiConfigResponse):
    api_key: str = ""


class OpenAiTestRequest(BaseModel):
    config_id: Optional[int] = None
    api_key: Optional[str] = None


class ConnectionTestResponse(BaseModel):
    ok: bool
