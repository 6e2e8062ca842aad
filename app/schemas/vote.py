"""Vote, voting history and live feed schemas."""

from datetime import datetime

from pydantic import BaseModel

from app.schemas.election import CandidateResponse, ElectionResponse


class VoteCreate(BaseModel):
    """Request body for casting a vote."""

    election_id: str
    candidate_id: str


class VoteResponse(BaseModel):
    """A single recorded vote."""

    id: str
    election_id: str
    candidate_id: str
    voter_id: str
    created_at: datetime


class VotingHistoryEntry(BaseModel):
    """A vote joined with the election and candidate it refers to."""

    vote: VoteResponse
    election: ElectionResponse
    candidate: CandidateResponse


class VoterActivityResponse(BaseModel):
    """Live feed entry broadcast after a vote."""

    id: str
    voter_id: str
    voter_name: str
    voter_initials: str
    election_id: str
    election_title: str
    created_at: datetime
    relative_time: str = "now"
