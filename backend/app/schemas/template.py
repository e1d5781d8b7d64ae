from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class TemplateCreate(BaseModel):
    name: Optional[str] = None
    content: Optional[str] = None  # LaTeX source
    is_default: bool = False


class TemplateUpdate(BaseModel):
    name: Optional[str] = None
    content: Optional[str] = None


class TemplateResponse(BaseModel):
    id: int
    user_id: str
    name: str
    content: str
    is_default: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
