from __future__ import annotations


class InfraError(Exception):
    """Base class for data seed errors raised as exceptions (never aggregated into a Response)."""


class NotFoundError(InfraError):
    """Raised when a configured folder, file, or registry cannot be found."""


class ValidationError(InfraError):
    """Raised when a runtime profile or registry declaration fails validation."""


class ConflictError(InfraError):
    """Raised when a type name is registered twice with different item types."""


class CodecError(InfraError):
    """Raised when a semi-structured value cannot be decoded into its target type."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class StepExecutionError(InfraError):
    """Fatal failure while executing a step. The step is left unrecorded."""

    def __init__(self, message: str, *, order: int):
        self.order = order
        super().__init__(message)


class ItemDecodeError(StepExecutionError):
    """Raised when an item cannot be decoded into the step's declared item type."""

    def __init__(self, *, order: int, index: int, item_type: str, reason: str = ""):
        self.index = index
        self.item_type = item_type
        self.reason = reason
        msg = f"Failed to parse item {index} to {item_type}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, order=order)


class UnmappedTypeError(StepExecutionError):
    """Raised when a step is executed for an item type that has no registered handler."""

    def __init__(self, *, order: int, item_type: str):
        self.item_type = item_type
        super().__init__(f"No handler registered for item type {item_type!r} (step {order})", order=order)
