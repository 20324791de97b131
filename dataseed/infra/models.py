from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, List, Optional, Union

# Field names used as error keys. They mirror the attribute names below so
# callers can match errors to the offending field.
ORDER_KEY = "order"
ITEM_TYPE_KEY = "item_type"
VALIDATION_HASH_KEY = "validation_hash"

# The rendered form of a KeyCode joins its parts with this delimiter.
KEY_CODE_DELIMITER = ":"


class Codes:
    """Canonical error codes surfaced through Response.errors."""

    EMPTY_FILE = "EmptyFile"
    FAILED_TO_PARSE = "FailedToParse"
    NULL_RESULT = "NullResult"

    DUPLICATE = "Duplicate"
    INVALID = "Invalid"
    NOT_FOUND = "NotFound"
    UNMAPPED = "Unmapped"
    MISMATCH = "Mismatch"
    OUT_OF_ORDER = "OutOfOrder"
    ALREADY_RUN = "AlreadyRun"


def sanitize_detail(text: str) -> str:
    return str(text).replace(KEY_CODE_DELIMITER, "=")


Detail = Union[str, List[str], None]


@dataclass(frozen=True)
class KeyCode:
    """A single reported problem: which field/file, what went wrong, optional payload."""

    key: str
    code: str
    detail: Detail = None

    def __post_init__(self) -> None:
        if isinstance(self.detail, str):
            object.__setattr__(self, "detail", sanitize_detail(self.detail))
        elif self.detail is not None:
            object.__setattr__(self, "detail", [str(d) for d in self.detail])

    @classmethod
    def with_list(cls, key: str, code: str, values: Iterable[Any]) -> "KeyCode":
        return cls(key=key, code=code, detail=[str(v) for v in values])

    def render(self) -> str:
        parts = [self.key, self.code]
        if isinstance(self.detail, list):
            parts.append(",".join(self.detail))
        elif self.detail:
            parts.append(self.detail)
        return KEY_CODE_DELIMITER.join(parts)


@dataclass
class Response:
    """Outcome of a runner operation. Always check `success` before using `data`."""

    success: bool = False
    errors: List[KeyCode] = field(default_factory=list)
    data: Any = None

    @classmethod
    def ok(cls, data: Any = None) -> "Response":
        return cls(success=True, errors=[], data=data)

    @classmethod
    def failed(cls, errors: Iterable[KeyCode]) -> "Response":
        return cls(success=False, errors=list(errors), data=None)

    def codes(self) -> List[str]:
        return [e.code for e in self.errors]

    def has_error(self, code: str, key: Optional[str] = None) -> bool:
        return any(e.code == code and (key is None or e.key == key) for e in self.errors)

    def __bool__(self) -> bool:
        return self.success


class StepRecordStatus(Enum):
    """Persisted status of a step. Repositories only ever write COMPLETE."""

    UNKNOWN = 0
    COMPLETE = 1

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: Any) -> "StepRecordStatus":
        if isinstance(value, cls):
            return value
        s = str(value or "").strip()
        for member in cls:
            if s.lower() == member.name.lower() or s == str(member.value):
                return member
        return cls.UNKNOWN


class StepStatus(Enum):
    """Derived status shown by step summaries. Never persisted."""

    PENDING = "Pending"
    COMPLETE = "Complete"
    MISSING_IN_FILE = "MissingInFile"
    VALIDATION_HASH_MISMATCH = "ValidationHashMismatch"


@dataclass(frozen=True)
class IgnoreSettings:
    hash_mismatch: bool = False
    out_of_order: bool = False


@dataclass(frozen=True)
class RawDefinition:
    """Raw step definition text plus the identifier used when reporting errors."""

    source_id: str
    content: str


@dataclass(frozen=True)
class StepDefinition:
    """Authored step: an ordered batch of items of a single logical type."""

    order: int
    name: str
    item_type: str
    items: List[Any] = field(default_factory=list)


@dataclass(frozen=True)
class CandidateStep:
    """A loaded step definition, its resolved item type (None if unknown) and content hash.

    Built once per discovery pass and discarded at the end of the operation.
    """

    step: StepDefinition
    resolved_type: Optional[type]
    validation_hash: str
    source_id: str = ""

    @property
    def order(self) -> int:
        return self.step.order

    @property
    def name(self) -> str:
        return self.step.name


@dataclass(frozen=True)
class StepRecord:
    """Repository row: a step that has been recorded as run, keyed by order."""

    order: int
    name: str
    status: StepRecordStatus = StepRecordStatus.COMPLETE
    validation_hash: str = ""
    recorded_at: str = ""

    @property
    def is_complete(self) -> bool:
        return self.status is StepRecordStatus.COMPLETE


@dataclass(frozen=True)
class StepSummary:
    order: int
    name: str
    status: StepStatus
    validation_hash: str = ""

    def without_hash(self) -> "StepSummary":
        return replace(self, validation_hash="")

    def to_dict(self) -> dict:
        return {"order": self.order, "name": self.name, "status": self.status.value}


@dataclass(frozen=True)
class ExecutedStep:
    """A step executed by the current call."""

    order: int
    name: str
    status: StepRecordStatus = StepRecordStatus.COMPLETE

    def to_dict(self) -> dict:
        return {"order": self.order, "name": self.name, "status": self.status.label}
