from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from campusvote.dependencies import get_election_service
from campusvote.models import ActionResult, CandidateWithCount, ElectionStatusInfo, Voter
from campusvote.routers import respond
from campusvote.security import get_current_voter
from campusvote.service import ElectionService

router = APIRouter(prefix="/ballot", tags=["ballot"])


class VoteRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    candidate_id: int


class BallotView(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    voter_id: str
    name: str
    has_voted: bool
    election: ElectionStatusInfo
    candidates: List[CandidateWithCount]
    total_votes: int


@router.get("", response_model=BallotView)
def get_ballot(
    voter: Voter = Depends(get_current_voter),
    service: ElectionService = Depends(get_election_service),
):
    return BallotView(
        voter_id=voter.id,
        name=voter.name,
        has_voted=voter.has_voted,
        election=service.get_election_status(),
        candidates=service.get_candidates(),
        total_votes=service.get_total_votes(),
    )


@router.post("/vote", response_model=ActionResult)
def cast_vote(
    payload: VoteRequest,
    voter: Voter = Depends(get_current_voter),
    service: ElectionService = Depends(get_election_service),
):
    return respond(service.cast_vote(voter.id, payload.candidate_id))
