from __future__ import annotations

from datetime import datetime

from campusvote.errors import AlreadyVoted, ElectionNotActive, UnknownCandidate, UnknownVoter
from campusvote.identity import next_id
from campusvote.models import ElectionDocument, Vote
from campusvote.status import ElectionStatus, compute_status


def cast_vote(doc: ElectionDocument, voter_id: str, candidate_id: int, now: datetime) -> Vote:
    """
    Apply one vote to ``doc`` in memory and return the new Vote record.

    Checks run in a fixed order (status, voter, already voted, candidate) and
    nothing is mutated unless all of them pass. Persisting is the caller's job.
    """
    if compute_status(now, doc.election_start, doc.election_end) != ElectionStatus.ACTIVE:
        raise ElectionNotActive("The election is not currently active.")

    voter = doc.find_voter(voter_id)
    if voter is None:
        raise UnknownVoter("Voter not found. Please log in again.")
    if voter.has_voted:
        raise AlreadyVoted("You have already cast your vote.")

    if doc.find_candidate(candidate_id) is None:
        raise UnknownCandidate("The selected candidate does not exist.")

    vote = Vote(
        id=next_id(v.id for v in doc.votes),
        voter_id=voter.id,
        candidate_id=candidate_id,
        timestamp=now,
    )
    voter.has_voted = True
    doc.votes.append(vote)
    return vote


__all__ = ["cast_vote"]
