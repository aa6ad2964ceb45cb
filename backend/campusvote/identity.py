from __future__ import annotations

import secrets
from typing import Callable, Collection, Iterable

# No I, O, 0 or 1: codes are read off paper and typed by hand.
ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
VOTING_CODE_LENGTH = 8
VOTER_ID_BYTES = 8


def _generate_voting_code() -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(VOTING_CODE_LENGTH))


def _generate_voter_id() -> str:
    return secrets.token_hex(VOTER_ID_BYTES)


def _unique(generate: Callable[[], str], taken: Collection[str]) -> str:
    while True:
        candidate = generate()
        if candidate not in taken:
            return candidate


def new_voter_id(existing_ids: Iterable[str]) -> str:
    return _unique(_generate_voter_id, set(existing_ids))


def new_voting_code(existing_codes: Iterable[str]) -> str:
    """Draw codes until one is not already assigned (compared upper-cased)."""
    taken = {code.upper() for code in existing_codes}
    return _unique(_generate_voting_code, taken)


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def next_id(existing_ids: Iterable[int]) -> int:
    """Next integer id: highest existing id plus one, starting at 1."""
    return max(existing_ids, default=0) + 1


def new_candidate_id(existing_ids: Iterable[int]) -> int:
    return next_id(existing_ids)


__all__ = [
    "ALPHABET",
    "VOTING_CODE_LENGTH",
    "new_voter_id",
    "new_voting_code",
    "normalize_code",
    "next_id",
    "new_candidate_id",
]
