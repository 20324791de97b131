from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from ..contracts import SeedRepository
from ..errors import ValidationError
from ..models import StepRecord, StepRecordStatus
from ...utils.csvio import append_row, ensure_csv, read_csv, require_headers
from ...utils.time import utcnow_iso

DATASEED_STEPS_LOG_HEADERS = [
    "order",
    "name",
    "status",
    "validation_hash",
    "recorded_at",
]


def _as_int(s: str) -> Optional[int]:
    ss = str(s or "").strip()
    if not ss:
        return None
    try:
        return int(ss)
    except ValueError:
        return None


def _normalize_step_row(row: Dict[str, str]) -> Optional[StepRecord]:
    order = _as_int(row.get("order", ""))
    if order is None:
        return None
    return StepRecord(
        order=order,
        name=str(row.get("name", "")),
        status=StepRecordStatus.parse(row.get("status", "")),
        validation_hash=str(row.get("validation_hash", "")),
        recorded_at=str(row.get("recorded_at", "")),
    )


class CsvSeedRepository(SeedRepository):
    """SeedRepository backed by an append-only CSV.

    Saving appends a row; reading keeps the latest row per order, which gives
    upsert semantics without rewriting the file.
    """

    def __init__(self, state_dir: Path):
        self.state_dir = Path(state_dir)
        self.steps_log = self.state_dir / "dataseed_steps_log.csv"
        ensure_csv(self.steps_log, DATASEED_STEPS_LOG_HEADERS)
        try:
            require_headers(self.steps_log, DATASEED_STEPS_LOG_HEADERS)
        except (FileNotFoundError, ValueError) as e:
            raise ValidationError(f"unusable data seed state log: {e}") from e

    def get_data_seed_steps(self) -> List[StepRecord]:
        latest: Dict[int, StepRecord] = {}
        for row in read_csv(self.steps_log):
            rec = _normalize_step_row(row)
            if rec is None:
                continue
            latest[rec.order] = rec
        return [latest[o] for o in sorted(latest)]

    def save_data_seed_step(self, record: StepRecord) -> None:
        append_row(
            self.steps_log,
            DATASEED_STEPS_LOG_HEADERS,
            {
                "order": record.order,
                "name": record.name,
                "status": record.status.label,
                "validation_hash": record.validation_hash,
                "recorded_at": record.recorded_at or utcnow_iso(),
            },
        )

    def describe(self) -> dict:
        return {"class": self.__class__.__name__, "steps_log": str(self.steps_log)}
