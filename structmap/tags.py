"""
Parsing of per-field annotation strings.

Syntax: `name[,option1[,option2...]]`. A name of exactly `-` ignores the
field. Recognized options are omitempty, omitnested and string; anything
else is dropped without error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Literal

type TagOption = Literal['omitempty', 'omitnested', 'string']

OMITEMPTY: Final = 'omitempty'
OMITNESTED: Final = 'omitnested'
STRING: Final = 'string'
IGNORE_NAME: Final = '-'

KNOWN_OPTIONS: Final[frozenset[str]] = frozenset({OMITEMPTY, OMITNESTED, STRING})


@dataclass(frozen=True)
class Annotation:
    """A parsed annotation string."""

    name: str = ''
    options: tuple[TagOption, ...] = ()

    @property
    def ignore(self) -> bool:
        return self.name == IGNORE_NAME

    def has(self, option: TagOption) -> bool:
        """Whether option is set. Always False for ignored fields."""
        return not self.ignore and option in self.options

    @property
    def omitempty(self) -> bool:
        return self.has(OMITEMPTY)

    @property
    def omitnested(self) -> bool:
        return self.has(OMITNESTED)

    @property
    def string(self) -> bool:
        return self.has(STRING)


def parse_tag(raw: str) -> Annotation:
    """
    Parse a raw annotation string.

    Example:
        >>> parse_tag('id,string,bogus,string')
        Annotation(name='id', options=('string',))
    """
    name, *tokens = raw.split(',')
    options: list[TagOption] = []
    for token in tokens:
        token = token.strip()
        if token in KNOWN_OPTIONS and token not in options:
            options.append(token)  # type: ignore[arg-type]
    return Annotation(name=name.strip(), options=tuple(options))
