from __future__ import annotations

from .models import (
    Codes,
    KeyCode,
    Response,
    StepDefinition,
    CandidateStep,
    StepRecord,
    StepRecordStatus,
    StepStatus,
    StepSummary,
    ExecutedStep,
    IgnoreSettings,
    RawDefinition,
)

from .errors import (
    InfraError,
    NotFoundError,
    ValidationError,
    ConflictError,
    CodecError,
    StepExecutionError,
    ItemDecodeError,
    UnmappedTypeError,
)

from .contracts import (
    DefinitionSource,
    ContentHasher,
    SeedRepository,
    TypeRegistry,
)

__all__ = [
    "Codes",
    "KeyCode",
    "Response",
    "StepDefinition",
    "CandidateStep",
    "StepRecord",
    "StepRecordStatus",
    "StepStatus",
    "StepSummary",
    "ExecutedStep",
    "IgnoreSettings",
    "RawDefinition",
    "InfraError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "CodecError",
    "StepExecutionError",
    "ItemDecodeError",
    "UnmappedTypeError",
    "DefinitionSource",
    "ContentHasher",
    "SeedRepository",
    "TypeRegistry",
]
