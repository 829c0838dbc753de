"""Value coercion engine.

Converts untyped row values into attribute values of a known destination
kind. Dispatch goes through ``_CONVERTERS``, keyed by ``ValueKind``.
"""

from __future__ import annotations

import types
import typing
from collections.abc import Callable, MutableSequence, Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any, Union

from row_graph.core.enums import ValueKind
from row_graph.core.exceptions import CoercionError, TypeMismatchError
from row_graph.mapping.plan import ANY_TYPE, FieldType

_LIST_ORIGINS = (list, Sequence, MutableSequence)


def source_kind(value: Any) -> str:
    """Name the kind of a source value for error messages."""
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (list, tuple)):
        return "list"
    return type(value).__name__


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def unwrap_optional(hint: Any) -> tuple[Any, bool]:
    """Strip ``None`` from a ``X | None`` hint. Returns (hint, was_optional)."""
    origin = typing.get_origin(hint)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(args) == 1 and len(args) != len(typing.get_args(hint)):
            return args[0], True
    return hint, False


def list_element(hint: Any) -> Any | None:
    """Return the element hint of a list-shaped hint, or None."""
    origin = typing.get_origin(hint)
    if hint is list or origin in _LIST_ORIGINS:
        args = typing.get_args(hint)
        return args[0] if args else Any
    return None


def field_type_for(hint: Any, unsigned: bool = False) -> FieldType:
    """Derive the destination ``FieldType`` of an annotation."""
    if typing.get_origin(hint) is typing.Annotated:
        hint = typing.get_args(hint)[0]

    inner, optional = unwrap_optional(hint)
    if optional:
        return FieldType(ValueKind.OPTIONAL, element=field_type_for(inner, unsigned))

    element = list_element(hint)
    if element is not None:
        return FieldType(ValueKind.LIST, element=field_type_for(element, unsigned))

    if hint is Any or not isinstance(hint, type):
        return ANY_TYPE
    if hint is bool:
        return FieldType(ValueKind.BOOL)
    if hint is int:
        return FieldType(ValueKind.UINT if unsigned else ValueKind.INT)
    if hint is float:
        return FieldType(ValueKind.FLOAT)
    if hint is str:
        return FieldType(ValueKind.STR)
    if hint is datetime:
        return FieldType(ValueKind.DATETIME)
    return FieldType(ValueKind.COMPOSITE, python_type=hint)


# --- Converters ---


def _to_int(value: Any, field_type: FieldType, current: Any) -> int:
    if _is_integer(value):
        return value
    if isinstance(value, (float, Decimal)):
        try:
            return int(value)  # truncates toward zero
        except (ValueError, OverflowError):
            raise CoercionError(f"cannot truncate non-finite value {value} to int") from None
    raise TypeMismatchError("int", source_kind(value))


def _to_uint(value: Any, field_type: FieldType, current: Any) -> int:
    if not _is_integer(value):
        raise TypeMismatchError("uint", source_kind(value))
    if value < 0:
        raise CoercionError(f"cannot assign negative value {value} to unsigned field")
    return value


def _to_float(value: Any, field_type: FieldType, current: Any) -> float:
    if isinstance(value, float):
        return value
    if _is_integer(value) or isinstance(value, Decimal):
        return float(value)
    raise TypeMismatchError("float", source_kind(value))


def _to_str(value: Any, field_type: FieldType, current: Any) -> str:
    if isinstance(value, str):
        return value
    raise TypeMismatchError("str", source_kind(value))


def _to_bool(value: Any, field_type: FieldType, current: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise TypeMismatchError("bool", source_kind(value))


def _to_datetime(value: Any, field_type: FieldType, current: Any) -> datetime:
    if type(value) is datetime:
        return value
    raise TypeMismatchError("datetime", source_kind(value))


def _to_composite(value: Any, field_type: FieldType, current: Any) -> Any:
    if field_type.python_type is not None and isinstance(value, field_type.python_type):
        return value
    raise TypeMismatchError(field_type.describe(), source_kind(value))


def _to_list(value: Any, field_type: FieldType, current: Any) -> list[Any]:
    element = field_type.element or ANY_TYPE
    result = list(current) if current is not None else []
    items = value if isinstance(value, (list, tuple)) else [value]
    for item in items:
        result.append(convert(item, element))
    return result


def _to_optional(value: Any, field_type: FieldType, current: Any) -> Any:
    if value is None:
        return None
    return convert(value, field_type.element or ANY_TYPE, current)


def _to_any(value: Any, field_type: FieldType, current: Any) -> Any:
    return value


_CONVERTERS: dict[ValueKind, Callable[[Any, FieldType, Any], Any]] = {
    ValueKind.INT: _to_int,
    ValueKind.UINT: _to_uint,
    ValueKind.FLOAT: _to_float,
    ValueKind.STR: _to_str,
    ValueKind.BOOL: _to_bool,
    ValueKind.DATETIME: _to_datetime,
    ValueKind.COMPOSITE: _to_composite,
    ValueKind.LIST: _to_list,
    ValueKind.OPTIONAL: _to_optional,
    ValueKind.ANY: _to_any,
}


def convert(value: Any, field_type: FieldType, current: Any = None) -> Any:
    """Convert ``value`` to ``field_type``.

    ``current`` is the attribute's present value; LIST destinations append
    to it rather than replacing it.

    Raises:
        CoercionError: If the value cannot be represented in the destination kind.
    """
    if value is None and field_type.kind not in (ValueKind.OPTIONAL, ValueKind.ANY):
        raise TypeMismatchError(field_type.describe(), "None")
    return _CONVERTERS[field_type.kind](value, field_type, current)
