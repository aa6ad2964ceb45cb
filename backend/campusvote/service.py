from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator, List, Optional, Sequence

from campusvote.core.logger import election_logger as logger
from campusvote.errors import DuplicateVoter, ElectionError, UnknownCandidate, UnknownVoter, ValidationError
from campusvote.identity import new_candidate_id, new_voter_id, new_voting_code, normalize_code
from campusvote.models import (
    ActionResult,
    AddVotersResult,
    Candidate,
    CandidateIn,
    CandidatesResult,
    CandidateWithCount,
    ElectionDocument,
    ElectionStatusInfo,
    PastWinner,
    ResultsSummary,
    Voter,
    VotersResult,
)
from campusvote.results import (
    candidates_with_counts,
    clear_history,
    compute_winners,
    end_election,
    reset_votes,
    total_votes,
    turnout,
)
from campusvote.status import ElectionStatus, compute_status, utcnow, validate_schedule
from campusvote.store import RecordStore
from campusvote.voting import cast_vote


def _name_key(name: str) -> str:
    return name.strip().casefold()


def _clean_name(name: str) -> str:
    cleaned = " ".join((name or "").split())
    if not cleaned:
        raise ValidationError("Voter name is required.")
    return cleaned


def _new_voter(doc: ElectionDocument, name: str) -> Voter:
    return Voter(
        id=new_voter_id(u.id for u in doc.users),
        name=name,
        code=new_voting_code(u.code for u in doc.users),
        has_voted=False,
    )


class ElectionService:
    """
    The operations the UI layer calls.

    Each mutation is one load -> mutate -> save unit run under a process-local
    lock. Separate processes sharing the same data file are not coordinated.
    Mutations report failures as ``ActionResult`` objects; reads return empty
    values rather than raising.
    """

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = utcnow) -> None:
        self.store = store
        self.clock = clock
        self._lock = threading.Lock()

    @contextmanager
    def _mutation(self) -> Iterator[ElectionDocument]:
        with self._lock:
            doc = self.store.load()
            yield doc
            self.store.save(doc)

    def _status(self, doc: ElectionDocument) -> ElectionStatus:
        return compute_status(self.clock(), doc.election_start, doc.election_end)

    # ---------------- Voters ----------------
    def add_voter(self, name: str) -> VotersResult:
        try:
            with self._mutation() as doc:
                cleaned = _clean_name(name)
                if any(_name_key(u.name) == _name_key(cleaned) for u in doc.users):
                    raise DuplicateVoter(f"A voter named '{cleaned}' already exists.")
                voter = _new_voter(doc, cleaned)
                doc.users.append(voter)
        except ElectionError as exc:
            return VotersResult(success=False, message=exc.message, error=exc.code, voters=self.get_users())
        logger.info(f"Voter added id={voter.id} name={voter.name}")
        return VotersResult(success=True, message=f"Voter '{voter.name}' added.", voters=doc.users)

    def add_voters(self, names: Sequence[str]) -> AddVotersResult:
        """Bulk insert; blank names and duplicates (existing or repeated) are skipped."""
        added = skipped = 0
        try:
            with self._mutation() as doc:
                seen = {_name_key(u.name) for u in doc.users}
                for raw in names:
                    cleaned = " ".join((raw or "").split())
                    if not cleaned or _name_key(cleaned) in seen:
                        skipped += 1
                        continue
                    seen.add(_name_key(cleaned))
                    doc.users.append(_new_voter(doc, cleaned))
                    added += 1
        except ElectionError as exc:
            return AddVotersResult(success=False, message=exc.message, error=exc.code, voters=self.get_users())
        logger.info(f"Bulk voter import added={added} skipped={skipped}")
        return AddVotersResult(
            success=True,
            message=f"Added {added} voter(s), skipped {skipped}.",
            voters=doc.users,
            added_count=added,
            skipped_count=skipped,
        )

    def delete_voter(self, voter_id: str) -> ActionResult:
        try:
            with self._mutation() as doc:
                voter = doc.find_voter(voter_id)
                if voter is None:
                    raise UnknownVoter("Voter not found.")
                doc.users = [u for u in doc.users if u.id != voter_id]
                doc.votes = [v for v in doc.votes if v.voter_id != voter_id]
        except ElectionError as exc:
            return ActionResult(success=False, message=exc.message, error=exc.code)
        logger.info(f"Voter deleted id={voter_id}")
        return ActionResult(success=True, message=f"Voter '{voter.name}' deleted.")

    def authenticate_student(self, name: str, code: str) -> Optional[Voter]:
        key, wanted = _name_key(name or ""), normalize_code(code)
        if not key or not wanted:
            return None
        for voter in self.store.load().users:
            if _name_key(voter.name) == key and voter.code.upper() == wanted:
                return voter
        return None

    # ---------------- Candidates ----------------
    def add_candidate(self, data: CandidateIn) -> CandidatesResult:
        try:
            with self._mutation() as doc:
                candidate = Candidate(
                    id=new_candidate_id(c.id for c in doc.candidates),
                    **data.model_dump(),
                )
                doc.candidates.append(candidate)
        except ElectionError as exc:
            return CandidatesResult(success=False, message=exc.message, error=exc.code, candidates=self.get_candidates())
        logger.info(f"Candidate added id={candidate.id} name={candidate.name}")
        return CandidatesResult(
            success=True,
            message="Candidate added successfully.",
            candidates=candidates_with_counts(doc),
        )

    def delete_candidate(self, candidate_id: int) -> ActionResult:
        try:
            with self._mutation() as doc:
                candidate = doc.find_candidate(candidate_id)
                if candidate is None:
                    raise UnknownCandidate("Candidate not found.")
                dropped = {v.voter_id for v in doc.votes if v.candidate_id == candidate_id}
                doc.candidates = [c for c in doc.candidates if c.id != candidate_id]
                doc.votes = [v for v in doc.votes if v.candidate_id != candidate_id]
                # Their vote is gone, so they may vote again.
                for voter in doc.users:
                    if voter.id in dropped:
                        voter.has_voted = False
        except ElectionError as exc:
            return ActionResult(success=False, message=exc.message, error=exc.code)
        logger.info(f"Candidate deleted id={candidate_id} votes_removed={len(dropped)}")
        return ActionResult(success=True, message=f"Candidate '{candidate.name}' deleted.")

    # ---------------- Voting ----------------
    def cast_vote(self, voter_id: str, candidate_id: int) -> ActionResult:
        try:
            with self._mutation() as doc:
                vote = cast_vote(doc, voter_id, candidate_id, self.clock())
        except ElectionError as exc:
            logger.info(f"Vote rejected voter={voter_id} candidate={candidate_id} reason={exc.code}")
            return ActionResult(success=False, message=exc.message, error=exc.code)
        logger.info(f"Vote cast id={vote.id} voter={voter_id} candidate={candidate_id}")
        return ActionResult(success=True, message="Your vote has been cast successfully!")

    # ---------------- Election lifecycle ----------------
    def set_election_schedule(
        self, start: Optional[datetime], end: Optional[datetime]
    ) -> ActionResult:
        try:
            start, end = validate_schedule(start, end)
            with self._mutation() as doc:
                doc.election_start, doc.election_end = start, end
        except ElectionError as exc:
            return ActionResult(success=False, message=exc.message, error=exc.code)
        if start is None:
            logger.info("Election schedule cleared")
            return ActionResult(success=True, message="Election schedule cleared.")
        logger.info(f"Election scheduled start={start.isoformat()} end={end.isoformat()}")
        return ActionResult(success=True, message="Election schedule updated.")

    def end_election_now(self) -> ActionResult:
        try:
            with self._mutation() as doc:
                record = end_election(doc, self.clock())
        except ElectionError as exc:
            return ActionResult(success=False, message=exc.message, error=exc.code)
        if record is None:
            logger.info("Election ended with no votes; nothing archived")
            return ActionResult(success=True, message="Election ended. No votes were cast.")
        names = ", ".join(w.name for w in record.winners)
        logger.info(f"Election ended total_votes={record.total_votes} winners={names}")
        return ActionResult(success=True, message=f"Election ended. Winner(s): {names}.")

    def reset_votes(self) -> ActionResult:
        try:
            with self._mutation() as doc:
                reset_votes(doc)
        except ElectionError as exc:
            return ActionResult(success=False, message=exc.message, error=exc.code)
        logger.info("All votes reset")
        return ActionResult(success=True, message="All votes have been reset.")

    def clear_history(self) -> ActionResult:
        try:
            with self._mutation() as doc:
                clear_history(doc)
        except ElectionError as exc:
            return ActionResult(success=False, message=exc.message, error=exc.code)
        logger.info("Past winners history cleared")
        return ActionResult(success=True, message="Election history cleared.")

    # ---------------- Reads ----------------
    def get_election_status(self) -> ElectionStatusInfo:
        doc = self.store.load()
        return ElectionStatusInfo(
            status=self._status(doc), start=doc.election_start, end=doc.election_end
        )

    def get_candidates(self) -> List[CandidateWithCount]:
        return candidates_with_counts(self.store.load())

    def get_users(self) -> List[Voter]:
        return self.store.load().users

    def get_voter(self, voter_id: str) -> Optional[Voter]:
        return self.store.load().find_voter(voter_id)

    def get_past_winners(self) -> List[PastWinner]:
        return self.store.load().past_winners

    def get_total_votes(self) -> int:
        return total_votes(candidates_with_counts(self.store.load()))

    def get_total_voters(self) -> int:
        return len(self.store.load().users)

    def get_turnout(self) -> float:
        doc = self.store.load()
        return turnout(total_votes(candidates_with_counts(doc)), len(doc.users))

    def get_results(self, final_only: bool = False) -> ResultsSummary:
        """Tallies and leaders; with ``final_only`` winners are withheld until the election ends."""
        doc = self.store.load()
        tallies = candidates_with_counts(doc)
        status = self._status(doc)
        show_winners = not final_only or status == ElectionStatus.ENDED
        tallied = total_votes(tallies)
        return ResultsSummary(
            status=status,
            candidates=tallies,
            total_votes=tallied,
            total_voters=len(doc.users),
            turnout=turnout(tallied, len(doc.users)),
            winners=compute_winners(tallies) if show_winners else [],
        )


__all__ = ["ElectionService"]
