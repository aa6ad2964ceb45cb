from __future__ import annotations

import hashlib
import json
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_DATA_FILE = BASE_DIR / "data" / "election.json"
BACKUPS_DIR = BASE_DIR / "backups"

COLLECTIONS = ("users", "candidates", "votes", "pastWinners")


def _ensure_dirs() -> None:
    BACKUPS_DIR.mkdir(parents=True, exist_ok=True)
    DEFAULT_DATA_FILE.parent.mkdir(parents=True, exist_ok=True)


def resolve_data_path() -> Path:
    """
    Resolve the election data file (in order):
      1. ELECTION_DATA_FILE env var.
      2. Default backend/data/election.json.
    """
    _ensure_dirs()
    data_file_env = os.getenv("ELECTION_DATA_FILE")
    if data_file_env:
        return Path(data_file_env)
    return DEFAULT_DATA_FILE


def sha256_file(path: Path, chunk_size: int = 1024 * 1024) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()


def document_check(path: Path) -> Tuple[bool, str]:
    """Confirm the file parses as an election document (a JSON object)."""
    try:
        doc = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        return False, f"invalid: {exc}"
    if not isinstance(doc, dict):
        return False, "invalid: top-level value is not an object"
    return True, "ok"


def record_counts(path: Path) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    try:
        doc = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {name: -1 for name in COLLECTIONS}
    for name in COLLECTIONS:
        value = doc.get(name) if isinstance(doc, dict) else None
        counts[name] = len(value) if isinstance(value, list) else 0
    return counts


def now_ts() -> str:
    return time.strftime("%Y%m%d-%H%M%S")


@dataclass
class SnapshotMeta:
    timestamp: str
    data_file: str
    snapshot_file: str
    snapshot_size: int
    sha256: str
    document_check: str
    record_counts: Dict[str, int]

    def to_json(self) -> str:
        return json.dumps(self.__dict__, indent=2)


def latest_snapshot() -> Optional[Path]:
    snapshots = sorted(BACKUPS_DIR.glob("snapshot-*.election.json"))
    return snapshots[-1] if snapshots else None


def meta_path_for(snapshot: Path) -> Path:
    return snapshot.with_name(snapshot.name.replace(".election.json", ".meta.json"))
