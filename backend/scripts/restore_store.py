from __future__ import annotations

import argparse
import json
import shutil
import time
from pathlib import Path
from typing import Optional

from _backup_utils import (
    document_check,
    latest_snapshot,
    meta_path_for,
    resolve_data_path,
    sha256_file,
)


def restore_store(snapshot: Optional[Path]) -> int:
    data_path = resolve_data_path()
    target_snapshot = snapshot or latest_snapshot()
    if target_snapshot is None:
        print("[ERR] No snapshots found.")
        return 2

    meta_path = meta_path_for(target_snapshot)
    if not meta_path.exists():
        print(f"[ERR] Metadata file missing: {meta_path}")
        return 3

    meta = json.loads(meta_path.read_text(encoding="utf-8"))
    expected_sha = meta.get("sha256")

    actual_sha = sha256_file(target_snapshot)
    if expected_sha and actual_sha != expected_sha:
        print(f"[ERR] SHA256 mismatch! expected={expected_sha} actual={actual_sha}")
        return 4

    data_path.parent.mkdir(parents=True, exist_ok=True)
    if data_path.exists():
        ts = time.strftime("%Y%m%d-%H%M%S")
        pre_restore = data_path.with_name(f"{data_path.stem}.pre-restore.{ts}.json")
        shutil.copy2(data_path, pre_restore)
        print(f"[INFO] Current data backed up to: {pre_restore}")

    shutil.copy2(target_snapshot, data_path)
    print(f"[OK] Restored snapshot to: {data_path}")

    ok, check_msg = document_check(data_path)
    print(f"[INFO] document_check={check_msg}")
    return 0 if ok else 5


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Restore an election data snapshot into the live data file."
    )
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help="Path to a specific snapshot (*.election.json). If omitted, uses latest.",
    )
    return parser.parse_args()


if __name__ == "__main__":
    options = _parse_args()
    raise SystemExit(restore_store(options.snapshot))
