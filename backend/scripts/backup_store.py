from __future__ import annotations

import argparse
import shutil

from _backup_utils import (
    BACKUPS_DIR,
    SnapshotMeta,
    document_check,
    meta_path_for,
    now_ts,
    record_counts,
    resolve_data_path,
    sha256_file,
)


def backup_store() -> int:
    data_path = resolve_data_path()
    if not data_path.exists():
        print(f"[ERR] Data file not found: {data_path}")
        return 2

    BACKUPS_DIR.mkdir(parents=True, exist_ok=True)
    ts = now_ts()
    snapshot = BACKUPS_DIR / f"snapshot-{ts}.election.json"
    meta_path = meta_path_for(snapshot)

    shutil.copy2(data_path, snapshot)

    sha = sha256_file(snapshot)
    ok, check_msg = document_check(snapshot)
    counts = record_counts(snapshot)

    meta = SnapshotMeta(
        timestamp=ts,
        data_file=str(data_path),
        snapshot_file=str(snapshot),
        snapshot_size=snapshot.stat().st_size,
        sha256=sha,
        document_check=check_msg,
        record_counts=counts,
    )
    meta_path.write_text(meta.to_json(), encoding="utf-8")

    print(
        "[OK] Backup created:\n"
        f"- DATA: {data_path}\n"
        f"- SNAPSHOT: {snapshot}\n"
        f"- META: {meta_path}"
    )
    print(f"[INFO] sha256={sha} document_check={check_msg} votes={counts['votes']}")
    return 0 if ok else 1


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create a timestamped snapshot of the election data file with metadata."
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = _parse_args()
    raise SystemExit(backup_store())
