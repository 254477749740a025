"""
Field markers for tag-driven encoding.

Markers are attached to a field's declared type with the Annotated pattern,
which works the same way for dataclasses, attrs classes and Pydantic models:

    @dataclass
    class Server:
        id: Annotated[int, Tags(map='id,string')]
        base: Annotated[Base, Embedded()]
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, init=False)
class Tags:
    """
    Raw annotation strings for one field, keyed by tag key.

    Each value uses the `name[,option...]` syntax, for example
    `Tags(map='id,string,omitempty', json='id')`. Parsing happens in
    structmap.tags; this marker only stores the strings.
    """

    items: tuple[tuple[str, str], ...]

    def __init__(self, **tags: str) -> None:
        for key, raw in tags.items():
            if not isinstance(raw, str):
                raise TypeError(f'Tags value for {key!r} must be a str, got {type(raw).__name__}')
        object.__setattr__(self, 'items', tuple(tags.items()))

    def get(self, key: str) -> str:
        """Return the raw string stored under key, or '' if absent."""
        for item_key, raw in self.items:
            if item_key == key:
                return raw
        return ''

    def keys(self) -> list[str]:
        return [key for key, _ in self.items]


@dataclass(frozen=True)
class Embedded:
    """Mark a record-typed field as embedded (anonymous) in its parent."""

    pass
