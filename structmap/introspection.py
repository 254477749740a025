"""
Introspection utilities for records.

A record is an instance of a dataclass, an attrs class or a Pydantic model.
This module detects records, unwraps the single-level Ref wrapper, and turns a
record class into an ordered tuple of FieldSpec descriptors. Everything above
this layer (kinds, Field, Struct) works on FieldSpec and never touches the
dataclasses / attrs / Pydantic APIs directly.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Union, get_args, get_origin

import attrs
import pydantic

from structmap.exceptions import NotStructError

# ==============================================================================
# Records and references
# ==============================================================================


@dataclass(frozen=True, slots=True)
class Ref:
    """
    By-reference handle to a record.

    Passing Ref(record) instead of record asks for a mutable binding: field
    accessors built through it report can_set() and write into the record.
    Only one level is unwrapped; Ref(Ref(record)) is not a struct.
    """

    target: Any


def is_record_type(tp: Any) -> bool:
    """True for dataclass, attrs and Pydantic model classes."""
    if not isinstance(tp, type):
        return False
    return issubclass(tp, pydantic.BaseModel) or dataclasses.is_dataclass(tp) or attrs.has(tp)


def is_record(value: Any) -> bool:
    """True for record instances (classes themselves are not records)."""
    return not isinstance(value, type) and is_record_type(type(value))


def unwrap_root(value: Any) -> tuple[Any, bool]:
    """
    Normalize an encoder root.

    Returns:
        (record, bound) where bound is True when the record came through a Ref

    Raises:
        NotStructError: value is neither a record nor a single Ref to one
    """
    if isinstance(value, Ref):
        if is_record(value.target):
            return value.target, True
        raise NotStructError(value)
    if is_record(value):
        return value, False
    raise NotStructError(value)


def is_frozen(record_type: type) -> bool:
    """Whether instances of record_type reject attribute assignment."""
    if issubclass(record_type, pydantic.BaseModel):
        return bool(record_type.model_config.get('frozen', False))
    if dataclasses.is_dataclass(record_type):
        return record_type.__dataclass_params__.frozen  # type: ignore[attr-defined]
    if attrs.has(record_type):
        return getattr(record_type.__setattr__, '__name__', '') == '_frozen_setattrs'
    return False


# ==============================================================================
# Annotations
# ==============================================================================


@dataclass(frozen=True)
class UnwrappedType:
    """A declared type stripped of aliases, Annotated wrappers and None members."""

    base: Any
    markers: tuple[Any, ...]
    nullable: bool


def unwrap_annotation(annotation: Any) -> UnwrappedType:
    """
    Peel a declared type down to its base type.

    Handles Python 3.12+ type aliases, Annotated (metadata is collected into
    markers), NewType, and Optional / `X | None` unions. A union with more than
    one non-None member is returned as-is for the caller to treat as loose.
    """
    markers: list[Any] = []
    nullable = False

    while True:
        if isinstance(annotation, typing.TypeAliasType):
            annotation = annotation.__value__
            continue

        if isinstance(annotation, typing.NewType):
            annotation = annotation.__supertype__
            continue

        origin = get_origin(annotation)
        if origin is Annotated:
            base, *extras = get_args(annotation)
            markers.extend(extras)
            annotation = base
            continue

        if origin is Union or origin is types.UnionType:
            args = get_args(annotation)
            members = [arg for arg in args if arg is not types.NoneType]
            if len(members) < len(args):
                nullable = True
            if len(members) == 1:
                annotation = members[0]
                continue
            annotation = Union[tuple(members)]

        return UnwrappedType(base=annotation, markers=tuple(markers), nullable=nullable)


# ==============================================================================
# Field descriptors
# ==============================================================================


@dataclass(frozen=True)
class FieldSpec:
    """Static description of one declared field of a record class."""

    name: str
    annotation: Any  # Annotated extras included
    metadata: Mapping[str, Any]  # dataclass / attrs field metadata
    frozen: bool = False  # per-field freeze (Pydantic Field(frozen=True))
    init_name: str | None = None  # __init__ keyword, None when not an init argument

    @property
    def exported(self) -> bool:
        return not self.name.startswith('_')


def record_fields(record_type: type) -> tuple[FieldSpec, ...]:
    """
    Describe the fields of a record class in declaration order.

    Args:
        record_type: dataclass, attrs or Pydantic model class

    Returns:
        Tuple of FieldSpec, exported and non-exported alike

    Raises:
        NotStructError: record_type is not a record class
    """
    if not is_record_type(record_type):
        raise NotStructError(record_type)

    if issubclass(record_type, pydantic.BaseModel):
        return _pydantic_fields(record_type)
    if dataclasses.is_dataclass(record_type):
        return _dataclass_fields(record_type)
    return _attrs_fields(record_type)


def _type_hints(record_type: type) -> dict[str, Any]:
    """Resolved annotations with Annotated extras kept; empty when forward refs cannot be resolved."""
    try:
        return typing.get_type_hints(record_type, include_extras=True)
    except (NameError, TypeError, AttributeError):
        return {}


def _declared(hints: Mapping[str, Any], name: str, raw: Any) -> Any:
    if name in hints:
        return hints[name]
    if raw is None or isinstance(raw, str):
        return Any
    return raw


def _pydantic_fields(model: type[pydantic.BaseModel]) -> tuple[FieldSpec, ...]:
    specs = []
    for field_name, field_info in model.model_fields.items():
        annotation = field_info.annotation
        if field_info.metadata:
            annotation = Annotated[annotation, *field_info.metadata]
        specs.append(
            FieldSpec(
                name=field_name,
                annotation=annotation,
                metadata={},
                frozen=bool(field_info.frozen),
                init_name=field_name,
            )
        )

    # Private attributes live outside model_fields and are never exported
    for attr_name in model.__private_attributes__:
        specs.append(FieldSpec(name=attr_name, annotation=Any, metadata={}))

    return tuple(specs)


def _dataclass_fields(record_type: type) -> tuple[FieldSpec, ...]:
    hints = _type_hints(record_type)
    return tuple(
        FieldSpec(
            name=field.name,
            annotation=_declared(hints, field.name, field.type),
            metadata=field.metadata,
            init_name=field.name if field.init else None,
        )
        for field in dataclasses.fields(record_type)
    )


def _attrs_fields(record_type: type) -> tuple[FieldSpec, ...]:
    hints = _type_hints(record_type)
    return tuple(
        FieldSpec(
            name=attribute.name,
            annotation=_declared(hints, attribute.name, attribute.type),
            metadata=attribute.metadata,
            init_name=attribute.alias if attribute.init else None,
        )
        for attribute in attrs.fields(record_type)
    )
