"""
structmap - tag-driven conversion of records into dicts.

Records are dataclass, attrs or Pydantic model instances. Per-field
annotations (Tags markers or field metadata) control the key each field is
written under and whether it is ignored, omitted when empty, kept as a
nested record, or converted to text:

    @dataclass
    class Server:
        name: str
        id: Annotated[int, Tags(map='id,string')]
        desc: Annotated[str, Tags(map='desc,omitempty')] = ''
        _token: str = ''

    to_map(Server('gopher', 42))    # {'name': 'gopher', 'id': '42'}
    names(Server('gopher', 42))     # ['name', 'id']

Pass Ref(record) instead of record to get field accessors that can write.
"""

from __future__ import annotations

from structmap.config.encoder import EncoderSettings, settings
from structmap.exceptions import (
    FieldAccessError,
    FieldNotFoundError,
    NotExportedError,
    NotSettableError,
    NotStructError,
    StructMapError,
    TypeMismatchError,
)
from structmap.field import Field
from structmap.introspection import Ref
from structmap.kinds import Kind
from structmap.logger import ConsoleLogger
from structmap.markers import Embedded, Tags
from structmap.protocols import LoggerProtocol, NullLogger
from structmap.struct import (
    Struct,
    fields,
    fill_map,
    has_zero,
    is_struct,
    is_zero,
    name,
    names,
    to_map,
    values,
)

__all__ = [
    'ConsoleLogger',
    'Embedded',
    'EncoderSettings',
    'Field',
    'FieldAccessError',
    'FieldNotFoundError',
    'Kind',
    'LoggerProtocol',
    'NotExportedError',
    'NotSettableError',
    'NotStructError',
    'NullLogger',
    'Ref',
    'Struct',
    'StructMapError',
    'Tags',
    'TypeMismatchError',
    'fields',
    'fill_map',
    'has_zero',
    'is_struct',
    'is_zero',
    'name',
    'names',
    'settings',
    'to_map',
    'values',
]
