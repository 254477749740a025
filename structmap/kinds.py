"""
Value kinds, declared kinds, zero values and the emptiness rule.

Kinds are coarse categories shared by runtime values and declared field
types. Field.set() compares the two, so a float cannot be written into an int
field and a list cannot be written into a mapping field.
"""

from __future__ import annotations

import enum
import inspect
import numbers
from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Literal, TypeVar, get_args, get_origin

import pydantic

from structmap.introspection import is_record, is_record_type, record_fields, unwrap_annotation


class Kind(enum.StrEnum):
    """Category of a value or of a declared field type."""

    NONE = 'none'
    BOOL = 'bool'
    INT = 'int'
    FLOAT = 'float'
    COMPLEX = 'complex'
    DECIMAL = 'decimal'
    STRING = 'string'
    BYTES = 'bytes'
    SEQUENCE = 'sequence'
    SET = 'set'
    MAPPING = 'mapping'
    STRUCT = 'struct'
    OBJECT = 'object'
    ANY = 'any'  # declared only: Any, object, TypeVars and multi-type unions


# Order matters: bool before int, str/bytes before Sequence, records before containers
_CLASS_KINDS: tuple[tuple[type, Kind], ...] = (
    (bool, Kind.BOOL),
    (int, Kind.INT),
    (float, Kind.FLOAT),
    (complex, Kind.COMPLEX),
    (Decimal, Kind.DECIMAL),
    (str, Kind.STRING),
    (bytes, Kind.BYTES),
    (bytearray, Kind.BYTES),
)


def _class_kind(cls: type) -> Kind:
    for base, kind in _CLASS_KINDS:
        if issubclass(cls, base):
            return kind
    if is_record_type(cls):
        return Kind.STRUCT
    if issubclass(cls, Mapping):
        return Kind.MAPPING
    if issubclass(cls, Set):
        return Kind.SET
    if issubclass(cls, Sequence):
        return Kind.SEQUENCE
    return Kind.OBJECT


def kind_of(value: Any) -> Kind:
    """Kind of a runtime value."""
    if value is None:
        return Kind.NONE
    return _class_kind(type(value))


# ==============================================================================
# Declared types
# ==============================================================================


@dataclass(frozen=True)
class TypeInfo:
    """What a field's declared type allows."""

    kind: Kind
    nullable: bool
    cls: type | None  # concrete class for STRUCT / OBJECT / container kinds, None when loose
    markers: tuple[Any, ...]

    def accepts(self, value: Any) -> bool:
        """Kind check used by Field.set(). No coercion is attempted."""
        if value is None:
            return self.nullable or self.kind in (Kind.NONE, Kind.ANY)
        if self.kind is Kind.ANY:
            return True
        if kind_of(value) is not self.kind:
            return False
        if self.kind in (Kind.STRUCT, Kind.OBJECT) and self.cls is not None:
            return isinstance(value, self.cls)
        return True


def describe(annotation: Any) -> TypeInfo:
    """
    Describe a declared field type.

    Args:
        annotation: declared type as found on the record class, Annotated extras included

    Returns:
        TypeInfo with the declared kind, nullability, concrete class and markers
    """
    unwrapped = unwrap_annotation(annotation)
    base = unwrapped.base

    def info(kind: Kind, cls: type | None = None) -> TypeInfo:
        return TypeInfo(kind=kind, nullable=unwrapped.nullable, cls=cls, markers=unwrapped.markers)

    if base is None or base is type(None):
        return info(Kind.NONE)
    if base is Any or base is object or isinstance(base, TypeVar):
        return info(Kind.ANY)

    origin = get_origin(base)
    if origin is Literal:
        kinds = {kind_of(choice) for choice in get_args(base)}
        return info(kinds.pop()) if len(kinds) == 1 else info(Kind.ANY)

    cls = origin if isinstance(origin, type) else base
    if not isinstance(cls, type):
        return info(Kind.ANY)
    return info(_class_kind(cls), cls)


# ==============================================================================
# Zero values
# ==============================================================================


def zero_value(annotation: Any) -> Any:
    """
    The zero value of a declared type.

    None for optional and loose types, the empty value of builtin scalars and
    containers, and a record whose fields all hold their own zero values for
    record types. Other classes are default-constructed when possible.
    """
    type_info = describe(annotation)
    if type_info.nullable:
        return None

    cls = type_info.cls
    match type_info.kind:
        case Kind.NONE | Kind.ANY:
            return None
        case Kind.BOOL:
            return False
        case Kind.INT:
            return 0
        case Kind.FLOAT:
            return 0.0
        case Kind.COMPLEX:
            return 0j
        case Kind.DECIMAL:
            return Decimal(0)
        case Kind.STRING:
            return ''
        case Kind.BYTES:
            return bytearray() if cls is not None and issubclass(cls, bytearray) else b''
        case Kind.SEQUENCE:
            return _empty_container(cls, tuple)
        case Kind.SET:
            return _empty_container(cls, frozenset)
        case Kind.MAPPING:
            return _empty_container(cls, dict)
        case Kind.STRUCT:
            return zero_record(cls)
    try:
        return cls() if cls is not None else None
    except (TypeError, ValueError):
        return None


def _empty_container(cls: type | None, fallback: type) -> Any:
    if cls is None or inspect.isabstract(cls):
        return fallback()
    return cls()


def zero_record(record_type: Any) -> Any:
    """Build an instance of record_type with every init field set to its zero value."""
    kwargs = {
        spec.init_name: zero_value(spec.annotation) for spec in record_fields(record_type) if spec.init_name is not None
    }
    if issubclass(record_type, pydantic.BaseModel):
        # Zero values may violate validators; construct without validation
        return record_type.model_construct(**kwargs)
    return record_type(**kwargs)


# ==============================================================================
# Emptiness
# ==============================================================================


def is_empty(value: Any, _seen: frozenset[int] = frozenset()) -> bool:
    """
    The emptiness rule shared by omitempty, Field.is_zero() and the aggregate predicates.

    Empty values: None, False, numeric zero, '' and b'', zero-length sequences,
    sets and mappings, enum members whose value is empty, and records all of
    whose exported fields are empty. A record with no exported fields is empty
    when all of its fields, private ones included, are empty.

    A record that refers back to one of its enclosing records is not empty:
    the back-reference is a set value, like any other non-None reference.
    """
    if value is None:
        return True
    if is_record(value):
        if id(value) in _seen:
            return False
        seen = _seen | {id(value)}
        specs = record_fields(type(value))
        exported = [spec for spec in specs if spec.exported]
        return all(is_empty(getattr(value, spec.name, None), seen) for spec in exported or specs)
    if isinstance(value, enum.Enum):
        return is_empty(value.value)
    if isinstance(value, bool):
        return not value
    if isinstance(value, numbers.Number):
        return value == 0
    if isinstance(value, (str, bytes, bytearray, Sequence, Set, Mapping)):
        return len(value) == 0
    return False
