from __future__ import annotations

import dataclasses
import importlib
from typing import Callable, Dict, List, Optional

from ..contracts import ItemHandler, TypeRegistry
from ..errors import ConflictError, NotFoundError, ValidationError


class TableTypeRegistry(TypeRegistry):
    """Explicit table of seedable item types and their handlers.

    Names match exactly. A type may be registered without a handler, in which
    case validation reports it as unmapped.
    """

    def __init__(self) -> None:
        self._types: Dict[str, type] = {}
        self._handlers: Dict[type, ItemHandler] = {}

    def register(self, name: str, item_type: type, handler: Optional[ItemHandler] = None) -> None:
        key = str(name or "").strip()
        if not key:
            raise ValidationError("item type name must be non-empty")
        if not dataclasses.is_dataclass(item_type):
            raise ValidationError(f"item type for {key!r} must be a dataclass, got {item_type!r}")
        existing = self._types.get(key)
        if existing is not None and existing is not item_type:
            raise ConflictError(f"item type name {key!r} already registered for {existing.__name__}")
        self._types[key] = item_type
        if handler is not None:
            self._handlers[item_type] = handler

    def handler(self, name: str, item_type: type) -> Callable[[ItemHandler], ItemHandler]:
        """Decorator form of register()."""

        def _wrap(fn: ItemHandler) -> ItemHandler:
            self.register(name, item_type, fn)
            return fn

        return _wrap

    def resolve_type(self, name: str) -> Optional[type]:
        return self._types.get(str(name or "").strip())

    def handler_for(self, item_type: type) -> Optional[ItemHandler]:
        return self._handlers.get(item_type)

    def names(self) -> List[str]:
        return sorted(self._types)

    def describe(self) -> dict:
        return {
            "class": self.__class__.__name__,
            "types": self.names(),
            "mapped": sorted(n for n, t in self._types.items() if t in self._handlers),
        }


def import_registry(ref: str) -> TypeRegistry:
    """Import a registry from 'package.module:attribute'.

    The attribute may be a registry instance or a zero-argument factory returning one.
    """
    s = str(ref or "").strip()
    module_name, sep, attr = s.partition(":")
    if not sep or not module_name or not attr:
        raise ValidationError(f"registry reference must look like 'package.module:attribute', got {s!r}")
    try:
        mod = importlib.import_module(module_name)
    except ImportError as e:
        raise NotFoundError(f"registry module not importable: {module_name!r} ({e})") from e
    if not hasattr(mod, attr):
        raise NotFoundError(f"registry attribute {attr!r} not found in {module_name!r}")
    obj = getattr(mod, attr)
    if not (hasattr(obj, "resolve_type") and hasattr(obj, "handler_for")) and callable(obj):
        obj = obj()
    if not (hasattr(obj, "resolve_type") and hasattr(obj, "handler_for")):
        raise ValidationError(f"{s!r} does not provide resolve_type/handler_for")
    return obj
