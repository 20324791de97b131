"""Decode semi-structured items (JSON/YAML objects) into host item types.

Item types are dataclasses. Field names match case-insensitively and ignore
``_``/``-`` separators, so ``itemType``, ``item_type`` and ``ItemType`` all
map onto a field named ``item_type``. Enum fields accept a member name in any
case (``value1``, ``Value1``, ``VALUE1``) or a member value.
"""
from __future__ import annotations

import copy
import dataclasses
import json
import types
import typing
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Type, TypeVar

from ..infra.errors import CodecError

T = TypeVar("T")

_NONE_TYPE = type(None)
_UNION_ORIGINS: tuple = (typing.Union,)
if hasattr(types, "UnionType"):
    _UNION_ORIGINS += (types.UnionType,)


def fold_key(name: str) -> str:
    return str(name).replace("_", "").replace("-", "").lower()


def fold_keys(obj: Dict[str, Any]) -> Dict[str, Any]:
    """Map folded key -> value. First occurrence wins on collisions."""
    out: Dict[str, Any] = {}
    for k, v in obj.items():
        out.setdefault(fold_key(k), v)
    return out


def encode_item(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def copy_item(value: Any) -> Any:
    """Return an independent copy of a semi-structured item (re-encode, re-decode)."""
    try:
        return json.loads(encode_item(value))
    except (TypeError, ValueError):
        return copy.deepcopy(value)


def decode_item(value: Any, target: Type[T]) -> T:
    """Decode `value` strictly into an instance of `target`.

    Raises CodecError naming the failing field path.
    """
    if not dataclasses.is_dataclass(target):
        raise CodecError(f"target {getattr(target, '__name__', target)!r} is not a dataclass")
    if value is None:
        raise CodecError("item is null")
    return _decode(value, target, "$")


def _decode(value: Any, tp: Any, path: str) -> Any:
    if tp is Any:
        return value

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin in _UNION_ORIGINS:
        if value is None and _NONE_TYPE in args:
            return None
        last: CodecError = CodecError(f"no union member accepts {value!r}", path)
        for arg in args:
            if arg is _NONE_TYPE:
                continue
            try:
                return _decode(value, arg, path)
            except CodecError as e:
                last = e
        raise last

    if value is None:
        raise CodecError("value is required", path)

    if origin in (list, tuple, set, frozenset):
        if not isinstance(value, list):
            raise CodecError(f"expected array, got {type(value).__name__}", path)
        inner = args[0] if args else Any
        items = [_decode(v, inner, f"{path}[{i}]") for i, v in enumerate(value)]
        return origin(items) if origin is not list else items

    if origin is dict:
        if not isinstance(value, dict):
            raise CodecError(f"expected object, got {type(value).__name__}", path)
        inner = args[1] if len(args) > 1 else Any
        return {str(k): _decode(v, inner, f"{path}.{k}") for k, v in value.items()}

    if dataclasses.is_dataclass(tp):
        return _decode_dataclass(value, tp, path)

    if isinstance(tp, type) and issubclass(tp, Enum):
        return _decode_enum(value, tp, path)

    if tp is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        raise CodecError(f"expected boolean, got {value!r}", path)

    if tp is int:
        if isinstance(value, bool):
            raise CodecError(f"expected integer, got {value!r}", path)
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise CodecError(f"expected integer, got {value!r}", path)

    if tp is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        raise CodecError(f"expected number, got {value!r}", path)

    if tp is Decimal:
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise CodecError(f"expected number, got {value!r}", path)
        try:
            # str() keeps 1.11 as Decimal("1.11") rather than the binary float expansion.
            return Decimal(str(value))
        except InvalidOperation:
            raise CodecError(f"expected number, got {value!r}", path)

    if tp is str:
        if isinstance(value, str):
            return value
        raise CodecError(f"expected string, got {type(value).__name__}", path)

    if tp is datetime:
        return _decode_datetime(value, path)

    if tp is date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        return _decode_datetime(value, path).date() if "T" in str(value) else _decode_date(value, path)

    if isinstance(tp, type) and isinstance(value, tp):
        return value

    raise CodecError(f"unsupported field type {tp!r}", path)


def _decode_dataclass(value: Any, tp: Any, path: str) -> Any:
    if not isinstance(value, dict):
        raise CodecError(f"expected object, got {type(value).__name__}", path)
    try:
        hints = typing.get_type_hints(tp)
    except Exception as e:
        raise CodecError(f"cannot resolve annotations of {tp.__name__}: {e}", path)

    folded = fold_keys(value)
    kwargs: Dict[str, Any] = {}
    for f in dataclasses.fields(tp):
        if not f.init:
            continue
        key = fold_key(f.name)
        if key not in folded:
            has_default = f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
            if not has_default:
                raise CodecError("missing required field", f"{path}.{f.name}")
            continue
        kwargs[f.name] = _decode(folded[key], hints.get(f.name, Any), f"{path}.{f.name}")
    try:
        return tp(**kwargs)
    except (TypeError, ValueError) as e:
        raise CodecError(str(e), path)


def _decode_enum(value: Any, tp: Type[Enum], path: str) -> Enum:
    if isinstance(value, str):
        wanted = fold_key(value)
        for member in tp:
            if fold_key(member.name) == wanted:
                return member
    for member in tp:
        if member.value == value and type(member.value) is type(value):
            return member
    allowed = [m.name for m in tp]
    raise CodecError(f"{value!r} is not a valid {tp.__name__} (allowed: {allowed})", path)


def _decode_date(value: Any, path: str) -> date:
    if not isinstance(value, str):
        raise CodecError(f"expected ISO date string, got {value!r}", path)
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise CodecError(str(e), path)


def _decode_datetime(value: Any, path: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        raise CodecError(f"expected ISO datetime string, got {value!r}", path)
    s = value.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError as e:
        raise CodecError(str(e), path)
