from __future__ import annotations

from ..common.codec import copy_item, decode_item
from ..infra.contracts import SeedRepository, TypeRegistry
from ..infra.errors import CodecError, ItemDecodeError, UnmappedTypeError
from ..infra.models import CandidateStep, StepRecord, StepRecordStatus
from ..utils.time import utcnow_iso


def execute_step(candidate: CandidateStep, registry: TypeRegistry, repository: SeedRepository) -> StepRecord:
    """Run every item of a step through its handler, then record the step complete.

    Items are processed one at a time in declaration order. An undecodable item
    raises ItemDecodeError; handler exceptions propagate unchanged. Either way the
    step is not recorded, so the next run retries it from the first item.
    """
    step = candidate.step
    item_type = candidate.resolved_type
    handler = registry.handler_for(item_type) if item_type is not None else None
    if item_type is None or handler is None:
        raise UnmappedTypeError(order=step.order, item_type=step.item_type)

    for index, raw_item in enumerate(step.items):
        try:
            typed = decode_item(copy_item(raw_item), item_type)
        except CodecError as e:
            raise ItemDecodeError(order=step.order, index=index, item_type=step.item_type, reason=str(e)) from e
        if typed is None:
            raise ItemDecodeError(order=step.order, index=index, item_type=step.item_type)
        handler(typed)

    record = StepRecord(
        order=step.order,
        name=step.name,
        status=StepRecordStatus.COMPLETE,
        validation_hash=candidate.validation_hash,
        recorded_at=utcnow_iso(),
    )
    repository.save_data_seed_step(record)
    return record
