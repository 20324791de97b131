from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, List


def ensure_csv(path: Path, headers: List[str]) -> None:
    if path.exists():
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=headers, lineterminator="\n")
        w.writeheader()


def append_row(path: Path, headers: List[str], row: Dict[str, Any]) -> None:
    ensure_csv(path, headers)
    with path.open("a", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=headers, extrasaction="ignore", lineterminator="\n")
        w.writerow({h: ("" if row.get(h) is None else row.get(h)) for h in headers})


def read_csv(path: Path) -> List[Dict[str, str]]:
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        return [dict(row) for row in reader]


def require_headers(path: Path, required: List[str]) -> None:
    if not path.exists():
        raise FileNotFoundError(str(path))
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        headers = next(reader, None)
    if headers is None:
        raise ValueError(f"CSV has no header: {path}")
    missing = [h for h in required if h not in headers]
    if missing:
        raise ValueError(f"CSV missing headers {missing}: {path}")
