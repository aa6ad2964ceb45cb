from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from campusvote.errors import ElectionAlreadyEnded
from campusvote.models import CandidateWithCount, ElectionDocument, PastWinner, WinnerEntry
from campusvote.status import ElectionStatus, compute_status, ensure_utc


def candidates_with_counts(doc: ElectionDocument) -> List[CandidateWithCount]:
    """Tally the vote log per candidate, ordered by candidate id."""
    counts = Counter(v.candidate_id for v in doc.votes)
    return [
        CandidateWithCount(**c.model_dump(), vote_count=counts.get(c.id, 0))
        for c in sorted(doc.candidates, key=lambda c: c.id)
    ]


def compute_winners(candidates: Sequence[CandidateWithCount]) -> List[CandidateWithCount]:
    """
    Every candidate sharing the highest count wins (N-way ties included).

    No candidates or no votes at all means no result rather than a tie.
    """
    if not candidates:
        return []
    if total_votes(candidates) == 0:
        return []
    top = max(c.vote_count for c in candidates)
    return [c for c in candidates if c.vote_count == top]


def total_votes(candidates: Sequence[CandidateWithCount]) -> int:
    """Votes counted toward some candidate; votes for removed candidates are excluded."""
    return sum(c.vote_count for c in candidates)


def turnout(votes: int, total_voters: int) -> float:
    if total_voters <= 0:
        return 0.0
    return votes / total_voters


def end_election(doc: ElectionDocument, now: datetime) -> Optional[PastWinner]:
    """
    Close the election at ``now`` and archive the winners.

    Returns the archived record, or ``None`` when no votes were cast.
    """
    now = ensure_utc(now)
    if compute_status(now, doc.election_start, doc.election_end) == ElectionStatus.ENDED:
        raise ElectionAlreadyEnded("The election has already ended.")

    if doc.election_start is None or doc.election_start >= now:
        doc.election_start = now - timedelta(seconds=1)
    doc.election_end = now

    tallies = candidates_with_counts(doc)
    tallied = total_votes(tallies)
    if tallied == 0:
        return None

    record = PastWinner(
        date=now,
        winners=[WinnerEntry(id=c.id, name=c.name, vote_count=c.vote_count) for c in compute_winners(tallies)],
        total_votes=tallied,
    )
    doc.past_winners.append(record)
    return record


def reset_votes(doc: ElectionDocument) -> None:
    """Drop every vote and unschedule the election; people and history stay."""
    doc.votes = []
    for voter in doc.users:
        voter.has_voted = False
    doc.election_start = None
    doc.election_end = None


def clear_history(doc: ElectionDocument) -> None:
    doc.past_winners = []


__all__ = [
    "candidates_with_counts",
    "compute_winners",
    "total_votes",
    "turnout",
    "end_election",
    "reset_votes",
    "clear_history",
]
