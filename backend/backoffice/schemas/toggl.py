"""
Toggl import schemas.
"""

from pydantic import BaseModel
from typing import Optional, List


class TogglClientResponse(BaseModel):
    id: int
    name: str
    notes: Optional[str] = None
    imported: bool = False  # Already linked to a local client


class TogglClientListResponse(BaseModel):
    items: List[TogglClientResponse]


class TogglConnectionResponse(BaseModel):
    success: bool
    email: Optional[str] = None
    error: Optional[str] = None
