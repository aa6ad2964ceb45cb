import threading
from datetime import timedelta

from campusvote.models import CandidateIn, Vote
from campusvote.status import ElectionStatus


def _candidate(name: str = "Alice Johnson") -> CandidateIn:
    return CandidateIn(
        name=name,
        bio="Committed to student voice and campus improvements.",
        image_url="https://picsum.photos/400/400?random=1",
    )


def _assert_invariant(service) -> None:
    votes = service.store.load().votes
    for voter in service.get_users():
        assert voter.has_voted == (sum(v.voter_id == voter.id for v in votes) == 1)


# ---------------- Voters ----------------
def test_add_voter_assigns_id_and_code(service):
    result = service.add_voter("  Ada   Lovelace ")
    assert result.success
    [voter] = result.voters
    assert voter.name == "Ada Lovelace"
    assert len(voter.code) == 8 and voter.code == voter.code.upper()
    assert voter.has_voted is False
    assert service.get_total_voters() == 1


def test_add_voter_rejects_duplicate_name_case_insensitive(service):
    service.add_voter("Ada Lovelace")
    result = service.add_voter("ada lovelace")
    assert not result.success
    assert result.error == "duplicate_voter"
    assert len(result.voters) == 1


def test_add_voter_rejects_blank_name(service):
    result = service.add_voter("   ")
    assert not result.success
    assert result.error == "validation_error"
    assert service.get_users() == []


def test_add_voters_skips_duplicates_and_blanks(service):
    service.add_voter("Ada")
    result = service.add_voters(["Grace", "ADA", "", "Linus", "grace"])
    assert result.success
    assert result.added_count == 2
    assert result.skipped_count == 3
    assert sorted(v.name for v in result.voters) == ["Ada", "Grace", "Linus"]
    codes = [v.code for v in result.voters]
    assert len(set(codes)) == len(codes)


def test_delete_voter_cascades_votes(open_service):
    service = open_service
    service.add_candidate(_candidate())
    ada = service.add_voter("Ada").voters[0]
    service.add_voter("Grace")
    assert service.cast_vote(ada.id, 1).success

    result = service.delete_voter(ada.id)
    assert result.success
    assert service.get_total_votes() == 0
    assert [v.name for v in service.get_users()] == ["Grace"]


def test_delete_unknown_voter(service):
    result = service.delete_voter("missing")
    assert not result.success
    assert result.error == "unknown_voter"


def test_authenticate_student_is_case_insensitive(service):
    voter = service.add_voter("Ada Lovelace").voters[0]
    assert service.authenticate_student("ada lovelace", voter.code.lower()).id == voter.id
    assert service.authenticate_student("Ada Lovelace", "WRONG123") is None
    assert service.authenticate_student("", voter.code) is None


# ---------------- Candidates ----------------
def test_add_candidate_ids_are_monotonic(service):
    service.add_candidate(_candidate("Alice Johnson"))
    service.add_candidate(_candidate("Bob Williams"))
    service.delete_candidate(1)
    result = service.add_candidate(_candidate("Charlie Brown"))
    assert result.success
    assert [c.id for c in result.candidates] == [2, 3]
    assert all(c.vote_count == 0 for c in result.candidates)


def test_delete_candidate_removes_its_votes_from_tallies(open_service):
    service = open_service
    service.add_candidate(_candidate("Alice Johnson"))
    service.add_candidate(_candidate("Bob Williams"))
    voters = service.add_voters(["A", "B", "C"]).voters
    service.cast_vote(voters[0].id, 1)
    service.cast_vote(voters[1].id, 1)
    service.cast_vote(voters[2].id, 2)

    result = service.delete_candidate(1)
    assert result.success
    assert [(c.id, c.vote_count) for c in service.get_candidates()] == [(2, 1)]
    assert service.get_total_votes() == 1
    # Voters whose ballot was removed may vote again.
    assert service.cast_vote(voters[0].id, 2).success
    _assert_invariant(service)


def test_delete_unknown_candidate(service):
    result = service.delete_candidate(42)
    assert not result.success
    assert result.error == "unknown_candidate"


# ---------------- Voting ----------------
def test_cast_vote_twice_only_records_once(open_service):
    service = open_service
    service.add_candidate(_candidate())
    voter = service.add_voter("Ada").voters[0]

    first = service.cast_vote(voter.id, 1)
    second = service.cast_vote(voter.id, 1)

    assert first.success
    assert not second.success and second.error == "already_voted"
    assert service.get_total_votes() == 1
    _assert_invariant(service)


def test_concurrent_votes_for_one_voter_record_once(open_service):
    service = open_service
    service.add_candidate(_candidate())
    voter = service.add_voter("Ada").voters[0]
    start = threading.Barrier(8)
    results = []

    def vote():
        start.wait()
        results.append(service.cast_vote(voter.id, 1))

    threads = [threading.Thread(target=vote) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sum(r.success for r in results) == 1
    assert {r.error for r in results if not r.success} == {"already_voted"}
    assert service.get_total_votes() == 1
    _assert_invariant(service)


def test_cast_vote_when_not_active(service):
    service.add_candidate(_candidate())
    voter = service.add_voter("Ada").voters[0]
    result = service.cast_vote(voter.id, 1)
    assert not result.success
    assert result.error == "election_not_active"


def test_cast_vote_follows_wall_clock(open_service, clock):
    service = open_service
    service.add_candidate(_candidate())
    voter = service.add_voter("Ada").voters[0]
    clock.advance(hours=2)
    assert service.get_election_status().status == ElectionStatus.ENDED
    assert service.cast_vote(voter.id, 1).error == "election_not_active"


# ---------------- Schedule ----------------
def test_set_schedule_and_status(service, clock):
    start, end = clock.now + timedelta(hours=1), clock.now + timedelta(hours=3)
    assert service.set_election_schedule(start, end).success
    info = service.get_election_status()
    assert info.status == ElectionStatus.UPCOMING
    assert (info.start, info.end) == (start, end)

    clock.advance(hours=1)
    assert service.get_election_status().status == ElectionStatus.ACTIVE


def test_set_schedule_rejects_inverted_window(service, clock):
    result = service.set_election_schedule(clock.now, clock.now - timedelta(minutes=1))
    assert not result.success
    assert result.error == "invalid_schedule"
    assert service.get_election_status().status == ElectionStatus.NOT_SET


def test_clearing_schedule(open_service):
    assert open_service.set_election_schedule(None, None).success
    assert open_service.get_election_status().status == ElectionStatus.NOT_SET


# ---------------- End / reset / history ----------------
def test_end_election_now_archives_once(open_service):
    service = open_service
    service.add_candidate(_candidate("Alice Johnson"))
    service.add_candidate(_candidate("Bob Williams"))
    a, b, c = service.add_voters(["A", "B", "C"]).voters
    service.cast_vote(a.id, 1)
    service.cast_vote(b.id, 2)
    service.cast_vote(c.id, 2)

    result = service.end_election_now()
    assert result.success
    assert "Bob Williams" in result.message
    [record] = service.get_past_winners()
    assert record.total_votes == 3
    assert [(w.id, w.vote_count) for w in record.winners] == [(2, 2)]
    assert service.get_election_status().status == ElectionStatus.ENDED

    again = service.end_election_now()
    assert not again.success and again.error == "election_already_ended"
    assert len(service.get_past_winners()) == 1


def test_end_election_without_votes(open_service):
    assert open_service.end_election_now().success
    assert open_service.get_past_winners() == []


def test_reset_votes(open_service):
    service = open_service
    service.add_candidate(_candidate())
    voter = service.add_voter("Ada").voters[0]
    service.cast_vote(voter.id, 1)
    service.end_election_now()

    assert service.reset_votes().success
    assert service.get_total_votes() == 0
    assert service.get_users()[0].has_voted is False
    assert len(service.get_candidates()) == 1
    assert len(service.get_past_winners()) == 1
    assert service.get_election_status().status == ElectionStatus.NOT_SET


def test_clear_history(open_service):
    service = open_service
    service.add_candidate(_candidate())
    service.cast_vote(service.add_voter("Ada").voters[0].id, 1)
    service.end_election_now()
    assert service.clear_history().success
    assert service.get_past_winners() == []


# ---------------- Reads ----------------
def test_results_and_turnout(open_service):
    service = open_service
    service.add_candidate(_candidate("Alice Johnson"))
    service.add_candidate(_candidate("Bob Williams"))
    voters = service.add_voters(["A", "B", "C", "D"]).voters
    service.cast_vote(voters[0].id, 1)
    service.cast_vote(voters[1].id, 2)

    summary = service.get_results()
    assert summary.total_votes == 2
    assert summary.total_voters == 4
    assert summary.turnout == 0.5
    assert sorted(w.id for w in summary.winners) == [1, 2]
    assert service.get_results(final_only=True).winners == []


def test_reads_on_empty_store(service):
    assert service.get_candidates() == []
    assert service.get_users() == []
    assert service.get_past_winners() == []
    assert service.get_total_votes() == 0
    assert service.get_turnout() == 0.0
    assert service.get_voter("nobody") is None


def test_orphaned_votes_are_not_tallied(open_service):
    service = open_service
    service.add_candidate(_candidate())
    service.add_voter("Ada")
    doc = service.store.load()
    doc.votes.append(Vote(id=1, voter_id="gone", candidate_id=77, timestamp=service.clock()))
    service.store.save(doc)
    assert [c.vote_count for c in service.get_candidates()] == [0]
    assert service.get_total_votes() == 0
    assert service.get_turnout() == 0.0
    summary = service.get_results()
    assert (summary.total_votes, summary.turnout) == (0, 0.0)


def test_persistence_failure_is_reported_not_raised(service, tmp_path):
    service.store.path = tmp_path
    result = service.add_voter("Ada")
    assert not result.success
    assert result.error == "persistence_error"
