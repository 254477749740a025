"""
Field accessor: a bound handle to one field slot of one record instance.

Accessors are cheap, call-local views. They keep a reference to the record
they were built from, so set() and set_zero() write straight into it.
"""

from __future__ import annotations

from typing import Any

import pydantic

from structmap.exceptions import (
    FieldNotFoundError,
    NotExportedError,
    NotSettableError,
    NotStructError,
    TypeMismatchError,
)
from structmap.introspection import FieldSpec, is_frozen, is_record, record_fields
from structmap.kinds import Kind, describe, is_empty, kind_of, zero_value
from structmap.markers import Embedded, Tags


class Field:
    """
    A single record field with high level operations around it.

    Built by Struct.fields() / Struct.field() and by Field.fields() for nested
    records. `bound` is True when the root was passed as a Ref; the accessor
    is settable only then, and only if neither the record class nor the field
    itself is frozen.
    """

    def __init__(self, owner: Any, spec: FieldSpec, bound: bool = False) -> None:
        self._owner = owner
        self._spec = spec
        self._bound = bound
        self._type = describe(spec.annotation)
        self._settable = bound and not spec.frozen and not is_frozen(type(owner))

    def __repr__(self) -> str:
        return f'Field({type(self._owner).__name__}.{self.name}, kind={self.kind})'

    # -- metadata ------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._spec.name

    @property
    def kind(self) -> Kind:
        """Declared kind of the field, such as Kind.STRING or Kind.STRUCT."""
        return self._type.kind

    def is_exported(self) -> bool:
        return self._spec.exported

    def is_anonymous(self) -> bool:
        """True if the field is marked Embedded()."""
        return any(isinstance(marker, Embedded) for marker in self._type.markers)

    def can_set(self) -> bool:
        return self._settable

    def can_interface(self) -> bool:
        """Whether value() can be used without raising."""
        return self.is_exported()

    def tag(self, key: str) -> str:
        """
        Raw annotation string stored under key, '' if absent.

        Tags(...) markers in the declared type win over dataclass / attrs field
        metadata; among several Tags markers the last one holding key wins.
        """
        for marker in reversed(self._type.markers):
            if isinstance(marker, Tags) and key in marker.keys():
                return marker.get(key)
        raw = self._spec.metadata.get(key, '')
        return raw if isinstance(raw, str) else ''

    # -- value access --------------------------------------------------------

    def value(self) -> Any:
        """Current value of the field. Raises NotExportedError for non-exported fields."""
        if not self.is_exported():
            raise NotExportedError(self.name)
        return getattr(self._owner, self.name)

    def is_zero(self) -> bool:
        """True if the field holds its empty value. Raises NotExportedError for non-exported fields."""
        return is_empty(self.value())

    def set(self, value: Any) -> None:
        """
        Write value into the field.

        No coercion is attempted; on any failure the field keeps its prior value.

        Raises:
            NotExportedError: the field is not exported
            NotSettableError: the accessor is a read-only view or the record is frozen
            TypeMismatchError: value's kind differs from the declared kind, or a
                Pydantic model validating assignments rejects it
        """
        if not self.is_exported():
            raise NotExportedError(self.name)
        if not self._settable:
            raise NotSettableError(self.name)
        if not self._type.accepts(value):
            raise TypeMismatchError(self.name, got=kind_of(value), want=self.kind)
        try:
            setattr(self._owner, self.name, value)
        except pydantic.ValidationError as e:
            raise TypeMismatchError(self.name, got=kind_of(value), want=self.kind) from e

    def set_zero(self) -> None:
        """Set the field to the zero value of its declared type. Same errors as set()."""
        self.set(zero_value(self._spec.annotation))

    # -- nested records ------------------------------------------------------

    def fields(self) -> list[Field]:
        """
        Accessors for the exported fields of the nested record held by this field.

        Raises:
            NotExportedError: the field is not exported
            NotStructError: the field does not currently hold a record
        """
        nested = self.value()
        if not is_record(nested):
            raise NotStructError(nested)
        return [Field(nested, spec, self._bound) for spec in record_fields(type(nested)) if spec.exported]

    def field(self, name: str) -> Field | None:
        """
        Look up one field of the nested record by exact name.

        Returns None when the field holds no record or no field has that name.
        Non-exported nested fields are found too; their accessors refuse reads.
        """
        if not self.is_exported():
            return None
        nested = getattr(self._owner, self.name)
        if not is_record(nested):
            return None
        for spec in record_fields(type(nested)):
            if spec.name == name:
                return Field(nested, spec, self._bound)
        return None

    def must_field(self, name: str) -> Field:
        """Like field(), but a missing field is a programming error and raises FieldNotFoundError."""
        found = self.field(name)
        if found is None:
            raise FieldNotFoundError(name, owner=f'{type(self._owner).__name__}.{self.name}')
        return found
