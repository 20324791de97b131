from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..infra.models import CandidateStep, StepRecord, StepStatus, StepSummary


def reduce_step_status(candidate: Optional[CandidateStep], record: Optional[StepRecord]) -> StepStatus:
    """Compute the presentation status of one step order.

    Canonical outputs:
      - PENDING: defined in a file, never recorded
      - COMPLETE: defined and recorded with the same content hash
      - VALIDATION_HASH_MISMATCH: defined and recorded, but the content changed since
      - MISSING_IN_FILE: recorded, but no definition exists any more
    """
    if candidate is None:
        return StepStatus.MISSING_IN_FILE
    if record is None:
        return StepStatus.PENDING
    if record.validation_hash != candidate.validation_hash:
        return StepStatus.VALIDATION_HASH_MISMATCH
    return StepStatus.COMPLETE


def summarize_steps(candidates: Sequence[CandidateStep], records: Sequence[StepRecord]) -> List[StepSummary]:
    """Merge discovered and recorded steps into a status view sorted by order.

    Content hashes are never exposed in the summary view.
    """
    by_order: Dict[int, StepRecord] = {}
    for r in records:
        by_order.setdefault(r.order, r)

    out: List[StepSummary] = []
    defined = set()
    for c in candidates:
        defined.add(c.order)
        out.append(StepSummary(order=c.order, name=c.name, status=reduce_step_status(c, by_order.get(c.order))))

    for r in records:
        if r.order in defined:
            continue
        out.append(StepSummary(order=r.order, name=r.name, status=reduce_step_status(None, r)))

    return sorted((s.without_hash() for s in out), key=lambda s: s.order)
