from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

import jsonschema
import yaml

from ..infra.contracts import ContentHasher, DefinitionSource, TypeRegistry
from ..infra.models import Codes, CandidateStep, KeyCode, RawDefinition, Response, StepDefinition
from ..utils.yamlio import loads_structured

# Folded (lower-case, separator-free) spelling -> canonical definition field.
_FIELD_ALIASES: Dict[str, str] = {
    "order": "order",
    "name": "name",
    "itemtype": "itemType",
    "items": "items",
}

STEP_DEFINITION_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["order", "name", "itemType", "items"],
    "properties": {
        "order": {"type": "integer"},
        "name": {"type": "string"},
        "itemType": {"type": "string"},
        "items": {"type": "array", "items": {"type": "object"}},
    },
}


def _canonical_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in data.items():
        folded = str(k).replace("_", "").replace("-", "").lower()
        canon = _FIELD_ALIASES.get(folded)
        if canon is None:
            continue
        out.setdefault(canon, v)
    return out


def parse_definition(raw: RawDefinition) -> Tuple[Optional[StepDefinition], List[KeyCode]]:
    """Decode one raw definition. Returns (definition, []) or (None, [error])."""
    if not str(raw.content or "").strip():
        return None, [KeyCode(raw.source_id, Codes.EMPTY_FILE)]

    try:
        data = loads_structured(raw.content, raw.source_id)
    except (ValueError, yaml.YAMLError) as e:
        return None, [KeyCode(raw.source_id, Codes.FAILED_TO_PARSE, str(e))]

    if data is None:
        return None, [KeyCode(raw.source_id, Codes.NULL_RESULT)]
    if not isinstance(data, dict):
        return None, [KeyCode(raw.source_id, Codes.FAILED_TO_PARSE, f"expected an object, got {type(data).__name__}")]

    fields = _canonical_fields(data)
    try:
        jsonschema.validate(instance=fields, schema=STEP_DEFINITION_SCHEMA)
    except jsonschema.ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "$"
        return None, [KeyCode(raw.source_id, Codes.FAILED_TO_PARSE, f"{where}: {e.message}")]

    step = StepDefinition(
        order=int(fields["order"]),
        name=str(fields["name"]),
        item_type=str(fields["itemType"]),
        items=list(fields["items"]),
    )
    return step, []


def load_candidate(raw: RawDefinition, registry: TypeRegistry, hasher: ContentHasher) -> Tuple[Optional[CandidateStep], List[KeyCode]]:
    step, errors = parse_definition(raw)
    if step is None:
        return None, errors
    return (
        CandidateStep(
            step=step,
            resolved_type=registry.resolve_type(step.item_type),
            validation_hash=hasher.hash(raw.content),
            source_id=raw.source_id,
        ),
        [],
    )


def load_candidates_from(definitions: Iterable[RawDefinition], registry: TypeRegistry, hasher: ContentHasher) -> Response:
    """Load every definition, collecting per-file errors without stopping.

    Success carries the full candidate list in source order; failure carries every load error.
    """
    candidates: List[CandidateStep] = []
    errors: List[KeyCode] = []
    for raw in definitions:
        cand, errs = load_candidate(raw, registry, hasher)
        if cand is not None:
            candidates.append(cand)
        errors.extend(errs)
    if errors:
        return Response.failed(errors)
    return Response.ok(candidates)


def load_candidates(source: DefinitionSource, registry: TypeRegistry, hasher: ContentHasher) -> Response:
    return load_candidates_from(source.iter_definitions(), registry, hasher)
