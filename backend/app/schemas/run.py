from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class RunResponse(BaseModel):
    id: int
    user_id: str
    job_description: str
    template_id: Optional[int] = None
    prompt_id: Optional[int] = None
    output_url: Optional[str] = None
    overleaf_url: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GenerateRequest(BaseModel):
    job_description: Optional[str] = None
    template_id: Optional[int] = None  # falls back to the default, then any template
    prompt_id: Optional[int] = None
    github_config_id: Optional[int] = None  # falls back to the default, then environment
    openai_config_id: Optional[int] = None


class GenerateResponse(BaseModel):
    run_id: int
    output_url: str
    overleaf_url: str
    latex: str
