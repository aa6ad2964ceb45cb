from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from campusvote.dependencies import get_election_service
from campusvote.models import (
    ActionResult,
    AddVotersResult,
    CandidateIn,
    CandidatesResult,
    CandidateWithCount,
    ElectionStatusInfo,
    PastWinner,
    ResultsSummary,
    Voter,
    VotersResult,
)
from campusvote.routers import respond
from campusvote.security import require_admin
from campusvote.service import ElectionService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# ---------------- Payloads ----------------
class VoterPayload(BaseModel):
    name: str = Field(max_length=120)


class BulkVotersPayload(BaseModel):
    voters: List[VoterPayload]


class SchedulePayload(BaseModel):
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class Dashboard(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    election: ElectionStatusInfo
    results: ResultsSummary
    past_winners: List[PastWinner]


@router.get("/dashboard", response_model=Dashboard)
def dashboard(service: ElectionService = Depends(get_election_service)):
    return Dashboard(
        election=service.get_election_status(),
        results=service.get_results(),
        past_winners=service.get_past_winners(),
    )


# ---------------- Voters ----------------
@router.get("/voters", response_model=List[Voter])
def list_voters(service: ElectionService = Depends(get_election_service)):
    return service.get_users()


@router.post("/voters", response_model=VotersResult, status_code=201)
def add_voter(payload: VoterPayload, service: ElectionService = Depends(get_election_service)):
    return respond(service.add_voter(payload.name))


@router.post("/voters/bulk", response_model=AddVotersResult, status_code=201)
def add_voters(payload: BulkVotersPayload, service: ElectionService = Depends(get_election_service)):
    return respond(service.add_voters([v.name for v in payload.voters]))


@router.delete("/voters/{voter_id}", response_model=ActionResult)
def delete_voter(voter_id: str, service: ElectionService = Depends(get_election_service)):
    return respond(service.delete_voter(voter_id))


# ---------------- Candidates ----------------
@router.get("/candidates", response_model=List[CandidateWithCount])
def list_candidates(service: ElectionService = Depends(get_election_service)):
    return service.get_candidates()


@router.post("/candidates", response_model=CandidatesResult, status_code=201)
def add_candidate(payload: CandidateIn, service: ElectionService = Depends(get_election_service)):
    return respond(service.add_candidate(payload))


@router.delete("/candidates/{candidate_id}", response_model=ActionResult)
def delete_candidate(candidate_id: int, service: ElectionService = Depends(get_election_service)):
    return respond(service.delete_candidate(candidate_id))


# ---------------- Election lifecycle ----------------
@router.get("/election", response_model=ElectionStatusInfo)
def election_status(service: ElectionService = Depends(get_election_service)):
    return service.get_election_status()


@router.post("/election/schedule", response_model=ActionResult)
def set_schedule(payload: SchedulePayload, service: ElectionService = Depends(get_election_service)):
    return respond(service.set_election_schedule(payload.start, payload.end))


@router.post("/election/end", response_model=ActionResult)
def end_election(service: ElectionService = Depends(get_election_service)):
    return respond(service.end_election_now())


@router.post("/election/reset", response_model=ActionResult)
def reset_votes(service: ElectionService = Depends(get_election_service)):
    return respond(service.reset_votes())


# ---------------- History ----------------
@router.get("/history", response_model=List[PastWinner])
def past_winners(service: ElectionService = Depends(get_election_service)):
    return service.get_past_winners()


@router.post("/history/clear", response_model=ActionResult)
def clear_history(service: ElectionService = Depends(get_election_service)):
    return respond(service.clear_history())
