from __future__ import annotations

from typing import Callable, List, Optional

from ..infra.contracts import ContentHasher, DefinitionSource, SeedRepository, TypeRegistry
from ..infra.models import (
    ORDER_KEY,
    CandidateStep,
    Codes,
    ExecutedStep,
    IgnoreSettings,
    KeyCode,
    Response,
    StepRecord,
)
from .executor import execute_step
from .hashing import Sha256ContentHasher
from .loader import load_candidates
from .status_reducer import summarize_steps
from .validator import validate_candidates


def _find_candidate(candidates: List[CandidateStep], order: int) -> Optional[CandidateStep]:
    for c in candidates:
        if c.order == order:
            return c
    return None


def _is_complete(records: List[StepRecord], order: int) -> bool:
    return any(r.order == order and r.is_complete for r in records)


class DataSeedRunner:
    """Discovers step definitions, validates them against recorded state and runs due steps.

    Every public operation reloads definitions and repository state, so calls are
    independent. There is no locking: callers must serialize invocations that
    share a repository.
    """

    def __init__(
        self,
        *,
        source: DefinitionSource,
        repository: SeedRepository,
        registry: TypeRegistry,
        hasher: Optional[ContentHasher] = None,
        echo: Optional[Callable[[str], None]] = print,
    ):
        self.source = source
        self.repository = repository
        self.registry = registry
        self.hasher = hasher if hasher is not None else Sha256ContentHasher()
        self._echo = echo

    def _log(self, msg: str) -> None:
        if self._echo is not None:
            self._echo(f"[dataseed] {msg}")

    def _load(self) -> Response:
        loaded = load_candidates(self.source, self.registry, self.hasher)
        if not loaded.success:
            self._log(f"failed to load step definitions errors={len(loaded.errors)}")
        return loaded

    def _validate(self, candidates, records, ignore: IgnoreSettings, scope: Optional[int] = None) -> Response:
        res = validate_candidates(candidates, records, self.registry, ignore, scope)
        if not res.success:
            self._log(f"validation failed errors={[e.render() for e in res.errors]}")
        return res

    def _execute(self, candidate: CandidateStep) -> ExecutedStep:
        self._log(f"running step order={candidate.order} name={candidate.name!r} items={len(candidate.step.items)}")
        record = execute_step(candidate, self.registry, self.repository)
        self._log(f"recorded step order={record.order} status={record.status.label}")
        return ExecutedStep(order=record.order, name=record.name)

    def run(self) -> Response:
        """Run every step not yet recorded complete, in ascending order.

        Returns the steps executed by this call. Item decode and handler failures
        are raised; steps completed before the failure stay recorded.
        """
        loaded = self._load()
        if not loaded.success:
            return loaded
        candidates: List[CandidateStep] = loaded.data
        records = self.repository.get_data_seed_steps()

        validated = self._validate(candidates, records, IgnoreSettings())
        if not validated.success:
            return validated

        executed: List[ExecutedStep] = []
        for cand in sorted(candidates, key=lambda c: c.order):
            if _is_complete(records, cand.order):
                self._log(f"skipping step order={cand.order} (already complete)")
                continue
            executed.append(self._execute(cand))
        return Response.ok(executed)

    def get_step_summaries(self) -> Response:
        loaded = self._load()
        if not loaded.success:
            return loaded
        records = self.repository.get_data_seed_steps()
        return Response.ok(summarize_steps(loaded.data, records))

    def validate_steps(self, ignore: Optional[IgnoreSettings] = None) -> Response:
        loaded = self._load()
        if not loaded.success:
            return loaded
        records = self.repository.get_data_seed_steps()
        return self._validate(loaded.data, records, ignore or IgnoreSettings())

    def validate_step(self, order: int, ignore: Optional[IgnoreSettings] = None) -> Response:
        loaded = self._load()
        if not loaded.success:
            return loaded
        if _find_candidate(loaded.data, order) is None:
            return Response.failed([KeyCode(ORDER_KEY, Codes.NOT_FOUND)])
        records = self.repository.get_data_seed_steps()
        return self._validate(loaded.data, records, ignore or IgnoreSettings(), scope=order)

    def run_step(self, order: int, ignore: Optional[IgnoreSettings] = None) -> Response:
        """Run a single step by order, subject to validation scoped to that step."""
        loaded = self._load()
        if not loaded.success:
            return loaded
        candidate = _find_candidate(loaded.data, order)
        if candidate is None:
            return Response.failed([KeyCode(ORDER_KEY, Codes.NOT_FOUND)])

        records = self.repository.get_data_seed_steps()
        if _is_complete(records, order):
            return Response.failed([KeyCode(ORDER_KEY, Codes.ALREADY_RUN)])

        validated = self._validate(loaded.data, records, ignore or IgnoreSettings(), scope=order)
        if not validated.success:
            return validated

        return Response.ok([self._execute(candidate)])
