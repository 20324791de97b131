"""Validation rules applied to a discovered candidate set.

Each rule is a pure function of (candidates, records, registry, scope) that
returns zero or more KeyCode violations. Rules never short-circuit each other;
`validate_candidates` concatenates every applicable rule's output so a single
report shows all problems.

Scoping: when `scope` (a step order) is given, a rule's violations count only
if that rule's violating set includes the scoped order.
"""
from __future__ import annotations

from collections import Counter
from typing import Callable, Dict, List, Optional, Sequence

from ..infra.contracts import TypeRegistry
from ..infra.models import (
    ITEM_TYPE_KEY,
    ORDER_KEY,
    VALIDATION_HASH_KEY,
    CandidateStep,
    Codes,
    IgnoreSettings,
    KeyCode,
    Response,
    StepRecord,
)

Rule = Callable[[Sequence[CandidateStep], Sequence[StepRecord], TypeRegistry, Optional[int]], List[KeyCode]]


def _in_scope(orders: Sequence[int], scope: Optional[int]) -> bool:
    return scope is None or scope in orders


def _type_labels(candidates: Sequence[CandidateStep]) -> List[str]:
    return [f"{c.order}-{c.step.item_type}" for c in candidates]


def max_completed_order(records: Sequence[StepRecord]) -> int:
    return max((r.order for r in records if r.is_complete), default=0)


def completed_orders(records: Sequence[StepRecord]) -> set:
    return {r.order for r in records if r.is_complete}


def check_duplicates(candidates, records, registry, scope) -> List[KeyCode]:
    counts = Counter(c.order for c in candidates)
    dups = sorted(o for o, n in counts.items() if n > 1)
    if not dups or not _in_scope(dups, scope):
        return []
    return [KeyCode.with_list(ORDER_KEY, Codes.DUPLICATE, dups)]


def check_negative_orders(candidates, records, registry, scope) -> List[KeyCode]:
    negative = [c.order for c in candidates if c.order < 0]
    if not negative or not _in_scope(negative, scope):
        return []
    return [KeyCode.with_list(ORDER_KEY, Codes.INVALID, negative)]


def check_unresolved_types(candidates, records, registry, scope) -> List[KeyCode]:
    unknown = [c for c in candidates if c.resolved_type is None]
    if not unknown or not _in_scope([c.order for c in unknown], scope):
        return []
    return [KeyCode.with_list(ITEM_TYPE_KEY, Codes.NOT_FOUND, _type_labels(unknown))]


def check_unmapped_types(candidates, records, registry, scope) -> List[KeyCode]:
    unmapped = [c for c in candidates if c.resolved_type is not None and registry.handler_for(c.resolved_type) is None]
    if not unmapped or not _in_scope([c.order for c in unmapped], scope):
        return []
    return [KeyCode.with_list(ITEM_TYPE_KEY, Codes.UNMAPPED, _type_labels(unmapped))]


def check_hash_mismatches(candidates, records, registry, scope) -> List[KeyCode]:
    recorded: Dict[int, str] = {r.order: r.validation_hash for r in records}
    mismatched = [c.order for c in candidates if c.order in recorded and recorded[c.order] != c.validation_hash]
    if not mismatched or not _in_scope(mismatched, scope):
        return []
    return [KeyCode.with_list(VALIDATION_HASH_KEY, Codes.MISMATCH, mismatched)]


def check_out_of_order(candidates, records, registry, scope) -> List[KeyCode]:
    done = completed_orders(records)
    highest = max_completed_order(records)
    late = sorted(
        c.order
        for c in candidates
        if c.order not in done and (scope is None or c.order == scope) and c.order <= highest
    )
    if not late:
        return []
    return [KeyCode.with_list(ORDER_KEY, Codes.OUT_OF_ORDER, late)]


STRUCTURAL_RULES: List[Rule] = [
    check_duplicates,
    check_negative_orders,
    check_unresolved_types,
    check_unmapped_types,
]


def rules_for(ignore: IgnoreSettings) -> List[Rule]:
    rules = list(STRUCTURAL_RULES)
    if not ignore.hash_mismatch:
        rules.append(check_hash_mismatches)
    if not ignore.out_of_order:
        rules.append(check_out_of_order)
    return rules


def validate_candidates(
    candidates: Sequence[CandidateStep],
    records: Sequence[StepRecord],
    registry: TypeRegistry,
    ignore: Optional[IgnoreSettings] = None,
    scope: Optional[int] = None,
) -> Response:
    """Run every applicable rule and aggregate all violations into one Response."""
    errors: List[KeyCode] = []
    for rule in rules_for(ignore or IgnoreSettings()):
        errors.extend(rule(candidates, records, registry, scope))
    if errors:
        return Response.failed(errors)
    return Response.ok()
