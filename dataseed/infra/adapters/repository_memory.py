from __future__ import annotations

from typing import Dict, List

from ..contracts import SeedRepository
from ..models import StepRecord


class InMemorySeedRepository(SeedRepository):
    """SeedRepository held in a dict keyed by order. Nothing survives the process."""

    def __init__(self) -> None:
        self._steps: Dict[int, StepRecord] = {}

    @property
    def steps(self) -> Dict[int, StepRecord]:
        return dict(self._steps)

    def get_data_seed_steps(self) -> List[StepRecord]:
        return list(self._steps.values())

    def save_data_seed_step(self, record: StepRecord) -> None:
        self._steps[record.order] = record

    def describe(self) -> dict:
        return {"class": self.__class__.__name__, "steps": len(self._steps)}
