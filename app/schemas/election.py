"""Election, candidate and results schemas."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.services.voting_rules import ElectionPhase
from app.utils.time import parse_timestamp


class ElectionType(StrEnum):
    """Who an election is held for."""

    CAMPUS_WIDE = "campus-wide"
    DEPARTMENT = "department"


class ElectionCreate(BaseModel):
    """Request body for creating an election."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=5)
    description: str = Field(..., min_length=10)
    department: str | None = None
    start_date: datetime
    end_date: datetime
    type: ElectionType = ElectionType.CAMPUS_WIDE

    @model_validator(mode="after")
    def check_window(self) -> "ElectionCreate":
        if parse_timestamp(self.end_date) <= parse_timestamp(self.start_date):
            raise ValueError("End date must be after start date")
        if self.type == ElectionType.DEPARTMENT and not self.department:
            raise ValueError("Department is required for department elections")
        return self


class ElectionUpdate(BaseModel):
    """Partial update for an election; the merged window is re-validated."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(None, min_length=5)
    description: str | None = Field(None, min_length=10)
    department: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    type: ElectionType | None = None


class ElectionResponse(BaseModel):
    """Election representation with its read-time phase."""

    id: str
    title: str
    description: str
    department: str | None = None
    start_date: datetime
    end_date: datetime
    type: ElectionType
    phase: ElectionPhase
    created_by: str
    created_at: datetime
    updated_at: datetime


class CandidateCreate(BaseModel):
    """Request body for adding a candidate to an election."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=3)
    department: str = Field(..., min_length=2)
    manifesto: str = Field(..., min_length=10)
    photo_url: str | None = None
    election_id: str = Field(..., min_length=1)


class CandidateUpdate(BaseModel):
    """Partial candidate update. The owning election cannot be changed."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(None, min_length=3)
    department: str | None = Field(None, min_length=2)
    manifesto: str | None = Field(None, min_length=10)
    photo_url: str | None = None


class CandidateResponse(BaseModel):
    """Candidate representation."""

    id: str
    name: str
    department: str
    manifesto: str
    photo_url: str | None = None
    election_id: str
    created_at: datetime


class CandidateResult(CandidateResponse):
    """Candidate with its tallied votes."""

    vote_count: int
    percentage: float


class ElectionResults(BaseModel):
    """Ranked results for one election."""

    election: ElectionResponse
    results: list[CandidateResult] = Field(default_factory=list)
    total_votes: int


class DashboardSummary(BaseModel):
    """Admin dashboard counters."""

    total_elections: int
    active_elections: int
    upcoming_elections: int
    completed_elections: int
    total_candidates: int
    total_students: int
    total_votes: int
