"""Pydantic schemas for the review team."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TeamMemberCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: int
    username: str = Field(..., min_length=1, max_length=100)
    role: str = Field("analyst", max_length=50)
    department: str | None = Field(None, max_length=100)
    specializations: list[str] = Field(default_factory=list)
    max_assignments: int = Field(10, ge=1, le=1000)


class TeamMemberUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    username: str | None = Field(None, min_length=1, max_length=100)
    role: str | None = Field(None, max_length=50)
    department: str | None = Field(None, max_length=100)
    specializations: list[str] | None = None
    max_assignments: int | None = Field(None, ge=1, le=1000)
    is_active: bool | None = None


class TeamMemberRead(BaseModel):
    id: int
    user_id: int
    username: str
    role: str
    department: str | None
    specializations: list[str]
    max_assignments: int
    current_assignments: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DeactivateResponse(BaseModel):
    member: TeamMemberRead
    unassigned_review_ids: list[int]
