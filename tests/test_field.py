"""
Tests for the Field accessor: metadata, reads, writes and nested lookups.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated

import attrs
import pydantic
import pytest

from structmap import (
    Embedded,
    FieldNotFoundError,
    Kind,
    NotExportedError,
    NotSettableError,
    NotStructError,
    Ref,
    Struct,
    Tags,
    TypeMismatchError,
    to_map,
)


@dataclass
class Base:
    created_by: str = ''
    revision: int = 0


@dataclass
class Other:
    created_by: str = ''


@dataclass
class Document:
    title: Annotated[str, Tags(map='title', json='documentTitle')]
    base: Annotated[Base, Embedded()] = field(default_factory=Base)
    desc: Annotated[str, Tags(map='desc,omitempty')] = ''
    pages: list[str] = field(default_factory=list)
    meta: dict[str, int] = field(default_factory=dict)
    rating: float | None = None
    both: Annotated[str, Tags(map='from-tag')] = field(default='', metadata={'map': 'from-metadata'})
    _draft: bool = True


@dataclass(frozen=True)
class Point:
    x: int = 0
    y: int = 0


@attrs.frozen
class FrozenJob:
    job_id: int = 0


class Profile(pydantic.BaseModel):
    handle: str
    user_id: int = pydantic.Field(default=0, frozen=True)


class Quota(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(validate_assignment=True)

    limit: Annotated[int, pydantic.Field(ge=0)] = 10


def make_document() -> Document:
    return Document('Guide', Base('ann', 3), pages=['intro'])


# ==============================================================================
# Metadata
# ==============================================================================


def test_metadata_accessors() -> None:
    struct = Struct(make_document())
    title = struct.must_field('title')
    base = struct.must_field('base')
    draft = struct.must_field('_draft')

    assert title.name == 'title'
    assert title.tag('json') == 'documentTitle'
    assert title.tag('yaml') == ''
    assert title.is_exported() is True
    assert title.is_anonymous() is False
    assert base.is_anonymous() is True
    assert draft.is_exported() is False
    assert draft.can_interface() is False


def test_tags_marker_wins_over_field_metadata() -> None:
    assert Struct(make_document()).must_field('both').tag('map') == 'from-tag'


@pytest.mark.parametrize(
    ('field_name', 'kind'),
    [
        ('title', Kind.STRING),
        ('base', Kind.STRUCT),
        ('pages', Kind.SEQUENCE),
        ('meta', Kind.MAPPING),
        ('rating', Kind.FLOAT),
        ('_draft', Kind.BOOL),
    ],
    ids=lambda value: str(value),
)
def test_declared_kinds(field_name: str, kind: Kind) -> None:
    assert Struct(make_document()).must_field(field_name).kind is kind


def test_can_set_requires_ref() -> None:
    document = make_document()

    assert Struct(document).must_field('title').can_set() is False
    assert Struct(Ref(document)).must_field('title').can_set() is True


@pytest.mark.parametrize(
    ('record', 'field_name'),
    [(Point(), 'x'), (FrozenJob(), 'job_id'), (Profile(handle='ann'), 'user_id')],
    ids=['frozen-dataclass', 'frozen-attrs', 'frozen-pydantic-field'],
)
def test_frozen_fields_are_not_settable(record: object, field_name: str) -> None:
    accessor = Struct(Ref(record)).must_field(field_name)

    assert accessor.can_set() is False
    with pytest.raises(NotSettableError):
        accessor.set(5)


def test_unfrozen_pydantic_field_is_settable() -> None:
    profile = Profile(handle='ann')

    Struct(Ref(profile)).must_field('handle').set('bob')

    assert profile.handle == 'bob'


# ==============================================================================
# Reads
# ==============================================================================


def test_value_and_is_zero() -> None:
    struct = Struct(make_document())

    assert struct.must_field('title').value() == 'Guide'
    assert struct.must_field('title').is_zero() is False
    assert struct.must_field('desc').is_zero() is True
    assert struct.must_field('rating').is_zero() is True


def test_non_exported_field_never_leaks() -> None:
    draft = Struct(Ref(make_document())).must_field('_draft')

    with pytest.raises(NotExportedError):
        draft.value()
    with pytest.raises(NotExportedError):
        draft.is_zero()
    with pytest.raises(NotExportedError):
        draft.set(False)
    with pytest.raises(NotExportedError):
        draft.fields()


# ==============================================================================
# Writes
# ==============================================================================


def test_set_writes_into_source_record() -> None:
    document = make_document()

    Struct(Ref(document)).must_field('title').set('Manual')

    assert document.title == 'Manual'


def test_set_without_ref_fails() -> None:
    document = make_document()

    with pytest.raises(NotSettableError):
        Struct(document).must_field('title').set('Manual')
    assert document.title == 'Guide'


@pytest.mark.parametrize(
    ('field_name', 'value'),
    [
        ('title', 42),
        ('pages', 'not a list'),
        ('meta', ['a']),
        ('rating', 1),
        ('title', None),
        ('base', Other('bob')),
    ],
    ids=['int-into-str', 'str-into-list', 'list-into-dict', 'int-into-float', 'none-into-str', 'wrong-record'],
)
def test_set_rejects_kind_mismatch(field_name: str, value: object) -> None:
    """A mismatched write fails and leaves the prior value in place."""
    document = make_document()
    accessor = Struct(Ref(document)).must_field(field_name)
    before = accessor.value()

    with pytest.raises(TypeMismatchError):
        accessor.set(value)

    assert accessor.value() == before


def test_set_bool_into_int_is_a_mismatch() -> None:
    accessor = Struct(Ref(make_document())).must_field('base').must_field('revision')

    with pytest.raises(TypeMismatchError) as exc_info:
        accessor.set(True)

    assert exc_info.value.got == Kind.BOOL
    assert exc_info.value.want == Kind.INT


def test_set_rejected_by_pydantic_validation() -> None:
    """A value of the right kind that fails model validation is a kind mismatch and leaves the field unchanged."""
    quota = Quota()
    accessor = Struct(Ref(quota)).must_field('limit')

    with pytest.raises(TypeMismatchError) as exc_info:
        accessor.set(-1)

    assert isinstance(exc_info.value.__cause__, pydantic.ValidationError)
    assert quota.limit == 10


def test_set_none_into_optional() -> None:
    document = Document('Guide', rating=4.5)

    Struct(Ref(document)).must_field('rating').set(None)

    assert document.rating is None


def test_set_zero_per_kind() -> None:
    document = make_document()
    document.desc = 'long'
    document.meta = {'a': 1}
    document.rating = 2.0
    struct = Struct(Ref(document))

    for field_name in ('title', 'desc', 'pages', 'meta', 'rating', 'base'):
        struct.must_field(field_name).set_zero()

    assert document.title == ''
    assert document.desc == ''
    assert document.pages == []
    assert document.meta == {}
    assert document.rating is None
    assert document.base == Base('', 0)


def test_set_zero_keeps_omitempty_outcome() -> None:
    """An already-empty omitempty field stays omitted after set_zero()."""
    document = make_document()
    before = to_map(document)

    Struct(Ref(document)).must_field('desc').set_zero()

    assert to_map(document) == before
    assert 'desc' not in before


# ==============================================================================
# Nested records
# ==============================================================================


def test_nested_fields() -> None:
    base = Struct(make_document()).must_field('base')

    assert [f.name for f in base.fields()] == ['created_by', 'revision']
    assert base.must_field('created_by').value() == 'ann'
    assert base.field('missing') is None
    assert base.field('Created_By') is None


def test_nested_must_field_raises() -> None:
    base = Struct(make_document()).must_field('base')

    with pytest.raises(FieldNotFoundError) as exc_info:
        base.must_field('missing')

    assert exc_info.value.field_name == 'missing'


def test_nested_fields_on_non_record() -> None:
    title = Struct(make_document()).must_field('title')

    with pytest.raises(NotStructError):
        title.fields()
    assert title.field('anything') is None


def test_nested_write_through_ref() -> None:
    document = make_document()

    Struct(Ref(document)).must_field('base').must_field('revision').set(4)

    assert document.base.revision == 4
    assert Struct(document).must_field('base').must_field('revision').can_set() is False


def test_struct_must_field_raises() -> None:
    with pytest.raises(FieldNotFoundError):
        Struct(make_document()).must_field('Title')
