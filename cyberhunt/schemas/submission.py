"""Pydantic schemas for programs and submissions."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cyberhunt.db.enums import SubmissionSeverity, SubmissionStatus


class ProgramCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=200)


class ProgramRead(BaseModel):
    id: int
    name: str
    company_id: int
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class SubmissionCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    program_id: int
    title: str = Field(..., min_length=1, max_length=300)
    description: str = Field(..., min_length=1, max_length=50000)
    type: str = Field(..., min_length=1, max_length=100)
    severity: SubmissionSeverity


class SubmissionRead(BaseModel):
    id: int
    program_id: int
    reporter_id: int
    title: str
    description: str
    type: str
    severity: SubmissionSeverity
    status: SubmissionStatus
    reward: int | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
