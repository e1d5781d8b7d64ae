from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class PromptCreate(BaseModel):
    name: Optional[str] = None
    content: Optional[str] = None  # may use {{JOB_DESCRIPTION}} and {{TEMPLATE}}
    is_default: bool = False


class PromptUpdate(BaseModel):
    name: Optional[str] = None
    content: Optional[str] = None


class PromptResponse(BaseModel):
    id: int
    user_id: str
    name: str
    content: str
    is_default: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
