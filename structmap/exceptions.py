"""
Shared exceptions for structmap.

Exception Hierarchy:
    StructMapError (base)
    ├── NotStructError (root value is not a record, also a TypeError)
    └── FieldAccessError (field-level read/write/lookup failures)
        ├── NotExportedError (field is private to its record)
        ├── NotSettableError (accessor is a read-only view)
        ├── TypeMismatchError (assigned value has the wrong kind, also a TypeError)
        └── FieldNotFoundError (nested lookup by name failed, also a LookupError)
"""

from __future__ import annotations


class StructMapError(Exception):
    """Base exception for all structmap errors."""


class NotStructError(StructMapError, TypeError):
    """Raised when a value that must be a record (or a single Ref to one) is not."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f'structmap: expected a record or a Ref to one, got {type(value).__name__}')


class FieldAccessError(StructMapError):
    """Base exception for failures on a single field."""

    def __init__(self, field_name: str, message: str) -> None:
        self.field_name = field_name
        super().__init__(message)


class NotExportedError(FieldAccessError):
    """Raised when reading, writing or zero-checking a non-exported field."""

    def __init__(self, field_name: str) -> None:
        super().__init__(field_name, f'structmap: field {field_name!r} is not exported')


class NotSettableError(FieldAccessError):
    """Raised when writing through an accessor that is not bound to a Ref root, or to a frozen record."""

    def __init__(self, field_name: str) -> None:
        super().__init__(field_name, f'structmap: field {field_name!r} is not settable')


class TypeMismatchError(FieldAccessError, TypeError):
    """Raised when an assigned value's kind differs from the field's declared kind."""

    def __init__(self, field_name: str, got: str, want: str) -> None:
        self.got = got
        self.want = want
        super().__init__(field_name, f'structmap: wrong kind for field {field_name!r}. got: {got} want: {want}')


class FieldNotFoundError(FieldAccessError, LookupError):
    """Raised by must_field() when no field with the given name exists."""

    def __init__(self, field_name: str, owner: str) -> None:
        self.owner = owner
        super().__init__(field_name, f'structmap: field {field_name!r} not found in {owner}')
