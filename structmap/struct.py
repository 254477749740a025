"""
Struct encoder: turns records into mappings, name lists and value lists.

All views share one traversal (Struct._entries) so that map(), values() and
names() agree on which fields appear, under which key, and in which order.

Example:
    >>> @dataclass
    ... class Server:
    ...     name: str
    ...     id: Annotated[int, Tags(map='id,string')]
    ...     desc: Annotated[str, Tags(map='desc,omitempty')] = ''
    >>> to_map(Server('gopher', 42))
    {'name': 'gopher', 'id': '42'}
"""

from __future__ import annotations

import enum
import numbers
from collections.abc import Iterator, Mapping, MutableMapping, Sequence, Set
from dataclasses import dataclass
from typing import Any

from structmap.config.encoder import settings
from structmap.exceptions import FieldNotFoundError
from structmap.field import Field
from structmap.introspection import Ref, is_record, record_fields, unwrap_root
from structmap.kinds import is_empty, kind_of
from structmap.protocols import LoggerProtocol, NullLogger
from structmap.tags import Annotation, parse_tag

# ==============================================================================
# Traversal
# ==============================================================================


@dataclass(frozen=True)
class _Entry:
    """One field that survived filtering. children is set when the field was recursed into."""

    name: str
    value: Any
    children: tuple[_Entry, ...] | None = None


def _build_map(entries: Sequence[_Entry]) -> dict[str, Any]:
    return {
        entry.name: _build_map(entry.children) if entry.children is not None else entry.value for entry in entries
    }


def _flatten_values(entries: Sequence[_Entry]) -> list[Any]:
    out: list[Any] = []
    for entry in entries:
        if entry.children is not None:
            out.extend(_flatten_values(entry.children))
        else:
            out.append(entry.value)
    return out


class Struct:
    """
    Encoder bound to one root record.

    A nested record that refers back to a record already being encoded is
    kept as a leaf value instead of being recursed into again.

    Args:
        record: a record, or Ref(record) for settable field accessors
        tag_key: tag key to read annotations from (default: settings.DEFAULT_TAG_KEY, 'map')
        logger: receives debug and warning diagnostics (default: NullLogger)

    Raises:
        NotStructError: record is neither a record nor a single Ref to one
    """

    def __init__(self, record: Any, tag_key: str | None = None, logger: LoggerProtocol | None = None) -> None:
        self.raw, self._bound = unwrap_root(record)
        self.tag_key = tag_key or settings.DEFAULT_TAG_KEY
        self.logger = logger or NullLogger()
        self._path = frozenset({id(self.raw)})

    def __repr__(self) -> str:
        return f'Struct({self.name()}, tag_key={self.tag_key!r})'

    # -- raw enumeration -----------------------------------------------------

    def name(self) -> str:
        """Declared type name of the root record."""
        return type(self.raw).__name__

    def fields(self) -> list[Field]:
        """Accessors for the exported direct fields, in declaration order, without annotation filtering."""
        return [Field(self.raw, spec, self._bound) for spec in record_fields(type(self.raw)) if spec.exported]

    def field(self, name: str) -> Field | None:
        """Accessor for the direct field called name (exact match), None if there is none."""
        for spec in record_fields(type(self.raw)):
            if spec.name == name:
                return Field(self.raw, spec, self._bound)
        return None

    def must_field(self, name: str) -> Field:
        """Like field(), but raises FieldNotFoundError."""
        found = self.field(name)
        if found is None:
            raise FieldNotFoundError(name, owner=self.name())
        return found

    # -- filtered views ------------------------------------------------------

    def map(self) -> dict[str, Any]:
        """
        Convert the record to a dict.

        Keys follow field declaration order. Nested records become nested
        dicts unless tagged omitnested or opaque (no exported fields).
        """
        return _build_map(self._entries())

    def fill_map(self, out: MutableMapping[str, Any] | None) -> None:
        """Write the result of map() into out. Does nothing when out is None."""
        if out is None:
            return
        out.update(self.map())

    def values(self) -> list[Any]:
        """Values in map() order, with nested records' values spliced in place."""
        return _flatten_values(self._entries())

    def names(self) -> list[str]:
        """Top-level keys map() would produce, in the same order."""
        return [entry.name for entry in self._entries()]

    # -- predicates ----------------------------------------------------------

    def has_zero(self) -> bool:
        """True if any exported, non-ignored field is empty, looking inside nested records."""
        for field, annotation in self._eligible():
            value = field.value()
            if self._recurses(value, annotation):
                if self._nested(value).has_zero():
                    return True
                continue
            if is_empty(value):
                return True
        return False

    def is_zero(self) -> bool:
        """True if every exported, non-ignored field is empty, looking inside nested records."""
        for field, annotation in self._eligible():
            value = field.value()
            if self._recurses(value, annotation):
                if not self._nested(value).is_zero():
                    return False
                continue
            if not is_empty(value):
                return False
        return True

    # -- internals -----------------------------------------------------------

    def _eligible(self) -> Iterator[tuple[Field, Annotation]]:
        """Exported fields whose annotation does not ignore them."""
        for field in self.fields():
            annotation = parse_tag(field.tag(self.tag_key))
            if annotation.ignore:
                continue
            yield field, annotation

    def _nested(self, record: Any) -> Struct:
        nested = Struct(Ref(record) if self._bound else record, tag_key=self.tag_key, logger=self.logger)
        nested._path = self._path | nested._path
        return nested

    def _recurses(self, value: Any, annotation: Annotation) -> bool:
        if annotation.omitnested or not is_record(value):
            return False
        if not any(spec.exported for spec in record_fields(type(value))):
            self.logger.debug(f'{type(value).__name__} has no exported fields; encoding it as a leaf value')
            return False
        if id(value) in self._path:
            self.logger.debug(f'{type(value).__name__} refers back to an enclosing record; encoding it as a leaf value')
            return False
        return True

    def _entries(self) -> list[_Entry]:
        entries: list[_Entry] = []
        for field, annotation in self._eligible():
            key = annotation.name or field.name
            value = field.value()

            if self._recurses(value, annotation):
                if annotation.omitempty and is_empty(value):
                    continue
                children = tuple(self._nested(value)._entries())
                if annotation.omitempty and not children:
                    continue
                entries.append(_Entry(key, value, children))
                continue

            if annotation.omitempty and is_empty(value):
                continue
            if annotation.string:
                value = self._stringify(field.name, value)
            entries.append(_Entry(key, value))
        return entries

    def _stringify(self, field_name: str, value: Any) -> Any:
        """
        Best-effort text form of a scalar for the `string` option.

        Unsupported kinds, and conversions that raise, keep the original value.
        """
        if isinstance(value, enum.Enum) and isinstance(value.value, (str, bool, numbers.Number)):
            return self._stringify(field_name, value.value)
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            if settings.STRING_BOOL_STYLE == 'lower':
                return 'true' if value else 'false'
            return str(value)
        if not (isinstance(value, numbers.Number) or _has_own_str(value)):
            self.logger.debug(
                f'{self.name()}.{field_name}: string option not supported for kind {kind_of(value)}; keeping value'
            )
            return value
        try:
            return str(value)
        except Exception as e:
            self.logger.warning(f'{self.name()}.{field_name}: string conversion failed ({e!r}); keeping value')
            return value


def _has_own_str(value: Any) -> bool:
    """Whether value's class supplies its own __str__ (UUID, Path, datetime...), records and containers excluded."""
    if is_record(value) or isinstance(value, (Mapping, Set, Sequence, bytes, bytearray)):
        return False
    return type(value).__str__ is not object.__str__


# ==============================================================================
# Module-level helpers
# ==============================================================================


def to_map(record: Any, tag_key: str | None = None) -> dict[str, Any]:
    """Convert a record to a dict. See Struct.map()."""
    return Struct(record, tag_key).map()


def fill_map(record: Any, out: MutableMapping[str, Any] | None, tag_key: str | None = None) -> None:
    """Write to_map(record) into out. See Struct.fill_map()."""
    Struct(record, tag_key).fill_map(out)


def values(record: Any, tag_key: str | None = None) -> list[Any]:
    """Field values in to_map() order, nested values spliced in. See Struct.values()."""
    return Struct(record, tag_key).values()


def names(record: Any, tag_key: str | None = None) -> list[str]:
    """Keys to_map() would produce. See Struct.names()."""
    return Struct(record, tag_key).names()


def fields(record: Any) -> list[Field]:
    """Exported direct field accessors. Pass Ref(record) for settable ones."""
    return Struct(record).fields()


def name(record: Any) -> str:
    """Declared type name of the record."""
    return Struct(record).name()


def has_zero(record: Any, tag_key: str | None = None) -> bool:
    """True if any exported, non-ignored field is empty. See Struct.has_zero()."""
    return Struct(record, tag_key).has_zero()


def is_zero(record: Any, tag_key: str | None = None) -> bool:
    """True if all exported, non-ignored fields are empty. See Struct.is_zero()."""
    return Struct(record, tag_key).is_zero()


def is_struct(value: Any) -> bool:
    """True if value is a record or a single Ref to one."""
    if isinstance(value, Ref):
        return is_record(value.target)
    return is_record(value)
