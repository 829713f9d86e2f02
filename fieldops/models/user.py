"""Pydantic models for Users (read-only here, owned by the auth layer)."""
from typing import List, Literal, Optional

from pydantic import Field

from fieldops.models.base import ApplicationModel


class UserResponse(ApplicationModel):
    """Response model for User."""
    id: str = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email")
    role: Literal['admin', 'engineer'] = Field(..., description="User role")
    region_id: Optional[str] = Field(None, description="Home region")
    assigned_regions: List[str] = Field(default=[], description="Regions an engineer may see")
