from __future__ import annotations


class ElectionError(Exception):
    """Base class for failures surfaced to callers as a result message."""

    code = "election_error"
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ElectionError):
    code = "validation_error"
    status_code = 400


class InvalidSchedule(ValidationError):
    code = "invalid_schedule"


class DuplicateVoter(ValidationError):
    code = "duplicate_voter"


class NotFoundError(ElectionError):
    code = "not_found"
    status_code = 404


class UnknownVoter(NotFoundError):
    code = "unknown_voter"


class UnknownCandidate(NotFoundError):
    code = "unknown_candidate"


class StateConflictError(ElectionError):
    code = "state_conflict"
    status_code = 409


class ElectionNotActive(StateConflictError):
    code = "election_not_active"


class AlreadyVoted(StateConflictError):
    code = "already_voted"


class ElectionAlreadyEnded(StateConflictError):
    code = "election_already_ended"


class PersistenceError(ElectionError):
    code = "persistence_error"
    status_code = 500


def status_for(code: str) -> int:
    """HTTP status for an error ``code`` carried on a failed result."""
    pending = [ElectionError]
    while pending:
        cls = pending.pop()
        if cls.code == code:
            return cls.status_code
        pending.extend(cls.__subclasses__())
    return 400


__all__ = [
    "ElectionError",
    "ValidationError",
    "InvalidSchedule",
    "DuplicateVoter",
    "NotFoundError",
    "UnknownVoter",
    "UnknownCandidate",
    "StateConflictError",
    "ElectionNotActive",
    "AlreadyVoted",
    "ElectionAlreadyEnded",
    "PersistenceError",
    "status_for",
]
