from pydantic import BaseModel
from typing import Optional


class PreviewRequest(BaseModel):
    content: Optional[str] = None
    name: Optional[str] = None
