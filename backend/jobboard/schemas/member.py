from pydantic import BaseModel
from typing import Optional


class UnsubscribeResponse(BaseModel):
    success: bool
    message: str
    portal_url: Optional[str] = None
