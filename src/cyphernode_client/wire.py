"""Mapping between dataclasses and the gateway's JSON members.

Attributes are snake_case in Python; the JSON member name is attached to the
field with ``wire()``. Fields declared without ``wire()`` use their attribute
name unchanged.

Decoding is strict: a missing required member or a value of the wrong JSON
type raises ``InternalError``. Unknown members are ignored. A field without
a default is required even when its type is ``Optional``: the member must be
present, though it may be ``null``.
"""

from dataclasses import MISSING, field, fields, is_dataclass
from enum import Enum
from typing import Any, Union, get_args, get_origin, get_type_hints

from cyphernode_client.errors import InternalError


WIRE_NAME = "wire_name"


def wire(name: str, **kwargs: Any) -> Any:
    """Declare a dataclass field whose JSON member is ``name``."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[WIRE_NAME] = name
    return field(metadata=metadata, **kwargs)


def wire_name(f) -> str:
    """JSON member name of a dataclass field."""
    return f.metadata.get(WIRE_NAME, f.name)


def _is_required(f) -> bool:
    return f.default is MISSING and f.default_factory is MISSING


def to_wire(value: Any) -> Any:
    """Convert a dataclass (or nested value) to JSON-ready data.

    ``None`` attributes of optional fields are left out of the resulting
    object; required fields holding ``None`` are written as ``null``.
    """
    if is_dataclass(value) and not isinstance(value, type):
        out = {}
        for f in fields(value):
            v = getattr(value, f.name)
            if v is None and not _is_required(f):
                continue
            out[wire_name(f)] = to_wire(v)
        return out
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    if isinstance(value, dict):
        return {k: to_wire(v) for k, v in value.items()}
    return value


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or str(tp)


def _mismatch(where: str, expected: str, data: Any) -> InternalError:
    return InternalError(
        f"{where}: expected {expected}, got {type(data).__name__}"
    )


def from_wire(tp: Any, data: Any, where: str = "") -> Any:
    """Build a value of type ``tp`` from decoded JSON data.

    Args:
        tp: Target type (dataclass, list[...], dict[...], Optional, primitive)
        data: Decoded JSON value
        where: Location used in error messages

    Raises:
        InternalError: If the data does not match the type
    """
    where = where or _type_name(tp)

    if tp is Any:
        return data

    origin = get_origin(tp)

    if origin is Union:
        args = get_args(tp)
        if data is None and type(None) in args:
            return None
        for arg in args:
            if arg is type(None):
                continue
            try:
                return from_wire(arg, data, where)
            except InternalError:
                continue
        expected = " or ".join(_type_name(a) for a in args)
        raise _mismatch(where, expected, data)

    if origin is list or tp is list:
        if not isinstance(data, list):
            raise _mismatch(where, "array", data)
        args = get_args(tp)
        item = args[0] if args else Any
        return [from_wire(item, v, f"{where}[{i}]") for i, v in enumerate(data)]

    if origin is dict or tp is dict:
        if not isinstance(data, dict):
            raise _mismatch(where, "object", data)
        args = get_args(tp)
        value_type = args[1] if args else Any
        return {k: from_wire(value_type, v, f"{where}.{k}") for k, v in data.items()}

    if is_dataclass(tp):
        return _from_object(tp, data, where)

    if isinstance(tp, type) and issubclass(tp, Enum):
        try:
            return tp(data)
        except ValueError:
            raise InternalError(f"{where}: {data!r} is not a valid {tp.__name__}")

    # bool is a subclass of int, so it is checked first and excluded from numbers
    if tp is bool:
        if not isinstance(data, bool):
            raise _mismatch(where, "boolean", data)
        return data

    if tp is int:
        if isinstance(data, bool) or not isinstance(data, int):
            raise _mismatch(where, "integer", data)
        return data

    if tp is float:
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            raise _mismatch(where, "number", data)
        return float(data)

    if tp is str:
        if not isinstance(data, str):
            raise _mismatch(where, "string", data)
        return data

    raise TypeError(f"Unsupported wire type: {tp!r}")


def _from_object(tp: Any, data: Any, where: str) -> Any:
    if not isinstance(data, dict):
        raise _mismatch(where, "object", data)

    hints = get_type_hints(tp)
    kwargs = {}
    for f in fields(tp):
        if not f.init:
            continue
        key = wire_name(f)
        if key not in data:
            if _is_required(f):
                raise InternalError(f"{where}: missing required field {key!r}")
            continue
        kwargs[f.name] = from_wire(hints[f.name], data[key], f"{where}.{key}")

    return tp(**kwargs)
