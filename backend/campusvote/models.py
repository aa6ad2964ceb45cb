from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from campusvote.status import ElectionStatus, ensure_utc


class _Record(BaseModel):
    # Persisted and served with camelCase keys (hasVoted, imageUrl, ...).
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Voter(_Record):
    id: str
    name: str
    code: str
    has_voted: bool = False


class Candidate(_Record):
    id: int
    name: str
    bio: str
    image_url: str
    data_ai_hint: Optional[str] = None


class CandidateWithCount(Candidate):
    vote_count: int = 0


class Vote(_Record):
    id: int
    voter_id: str
    candidate_id: int
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class WinnerEntry(_Record):
    id: int
    name: str
    vote_count: int


class PastWinner(_Record):
    date: datetime
    winners: List[WinnerEntry]
    total_votes: int

    @field_validator("date")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class ElectionDocument(_Record):
    """The whole database: one JSON document."""

    users: List[Voter] = Field(default_factory=list)
    candidates: List[Candidate] = Field(default_factory=list)
    votes: List[Vote] = Field(default_factory=list)
    past_winners: List[PastWinner] = Field(default_factory=list)
    election_start: Optional[datetime] = None
    election_end: Optional[datetime] = None

    @field_validator("election_start", "election_end")
    @classmethod
    def _utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    def find_voter(self, voter_id: str) -> Optional[Voter]:
        return next((u for u in self.users if u.id == voter_id), None)

    def find_candidate(self, candidate_id: int) -> Optional[Candidate]:
        return next((c for c in self.candidates if c.id == candidate_id), None)


# ---------------- Inputs ----------------
class CandidateIn(_Record):
    name: str = Field(min_length=3)
    bio: str = Field(min_length=10)
    image_url: str
    data_ai_hint: Optional[str] = None

    @field_validator("name", "bio", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("image_url")
    @classmethod
    def _http_url(cls, v: str) -> str:
        parsed = urlparse(v.strip())
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Please enter a valid image URL.")
        return v.strip()

    @field_validator("data_ai_hint")
    @classmethod
    def _blank_hint(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()


# ---------------- Results ----------------
class ActionResult(_Record):
    success: bool
    message: str
    error: Optional[str] = None


class VotersResult(ActionResult):
    voters: List[Voter] = Field(default_factory=list)


class AddVotersResult(VotersResult):
    added_count: int = 0
    skipped_count: int = 0


class CandidatesResult(ActionResult):
    candidates: List[CandidateWithCount] = Field(default_factory=list)


class ElectionStatusInfo(_Record):
    status: ElectionStatus
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class ResultsSummary(_Record):
    status: ElectionStatus
    candidates: List[CandidateWithCount]
    total_votes: int
    total_voters: int
    turnout: float
    winners: List[CandidateWithCount] = Field(default_factory=list)


__all__ = [
    "Voter",
    "Candidate",
    "CandidateWithCount",
    "Vote",
    "WinnerEntry",
    "PastWinner",
    "ElectionDocument",
    "CandidateIn",
    "ActionResult",
    "VotersResult",
    "AddVotersResult",
    "CandidatesResult",
    "ElectionStatusInfo",
    "ResultsSummary",
]
