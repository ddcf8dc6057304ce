"""
Job Pydantic schemas.
"""

from typing import List, Literal, Optional

from pydantic import Field

from app.schemas.base import ApiModel, StrictApiModel, UtcDatetime


JobStatus = Literal["active", "archived"]
JobSort = Literal["order", "createdAt"]


class JobCreate(StrictApiModel):
    """Schema for creating a job. Position is always assigned by the server."""

    title: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=100)
    status: JobStatus = "active"
    tags: List[str] = Field(default_factory=list)
    department: Optional[str] = Field(default=None, max_length=100)
    location: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)


class JobUpdate(StrictApiModel):
    """
    Schema for a partial job update.

    There is no ``order`` field: positions change only through the reorder
    endpoint.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=100)
    status: Optional[JobStatus] = None
    tags: Optional[List[str]] = None
    department: Optional[str] = Field(default=None, max_length=100)
    location: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)


class JobRead(ApiModel):
    """Schema for reading job data (API response)."""

    id: str
    title: str
    slug: str
    status: JobStatus
    tags: List[str]
    order: int
    department: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    created_at: UtcDatetime


class JobReorderRequest(StrictApiModel):
    """Move a job from one position to another."""

    from_order: int = Field(..., ge=0)
    to_order: int = Field(..., ge=0)


class ReorderResult(ApiModel):
    success: bool = True
