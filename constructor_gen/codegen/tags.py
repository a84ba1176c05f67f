"""
Struct tag resolution.

Turns the raw tag text attached to a Go struct field into the three skip
directives understood by the generator.
"""

from dataclasses import dataclass
from functools import reduce
from typing import Iterable, List, Tuple

CONSTRUCTOR_KEY = "constructor"

# Older tag namespaces, only the full-skip marker is honoured for them
LEGACY_KEYS = ("newc", "gonstructor")

SKIP_MARKER = "-"
SKIP_GETTER = "getter:false"
SKIP_SETTER = "setter:false"


@dataclass(frozen=True)
class TagDirectives:
    """Skip flags resolved from one field tag."""

    skip_all: bool = False
    skip_accessor: bool = False
    skip_mutator: bool = False

    def as_tuple(self) -> Tuple[bool, bool, bool]:
        return (self.skip_all, self.skip_accessor, self.skip_mutator)


NO_DIRECTIVES = TagDirectives()


def tokenize_tag(raw_tag: str) -> List[Tuple[str, str]]:
    """
    Split raw tag text into ``(key, value)`` pairs.

    Surrounding backticks are removed, tokens are separated by whitespace and
    values lose their surrounding double quotes. Tokens without a ``:`` are
    dropped.

    Args:
        raw_tag: Tag text as written in the source, e.g. ``json:"id" constructor:"-"``

    Returns:
        List of key/value pairs in source order
    """
    if not raw_tag:
        return []

    pairs = []
    for part in raw_tag.strip().strip("`").split():
        key, sep, value = part.partition(":")
        if not sep or not key:
            continue
        pairs.append((key, value.strip('"')))
    return pairs


def _apply_token(acc: TagDirectives, token: Tuple[str, str]) -> TagDirectives:
    """Fold one token into the accumulator. Flags are only ever added."""
    key, value = token

    if key == CONSTRUCTOR_KEY:
        if value == SKIP_MARKER:
            return TagDirectives(True, acc.skip_accessor, acc.skip_mutator)
        return TagDirectives(
            acc.skip_all,
            acc.skip_accessor or SKIP_GETTER in value,
            acc.skip_mutator or SKIP_SETTER in value,
        )

    if key in LEGACY_KEYS and value == SKIP_MARKER:
        return TagDirectives(True, acc.skip_accessor, acc.skip_mutator)

    return acc


def resolve_tokens(tokens: Iterable[Tuple[str, str]]) -> TagDirectives:
    """Resolve already tokenized tag pairs."""
    return reduce(_apply_token, tokens, NO_DIRECTIVES)


def resolve_tag(raw_tag: str) -> TagDirectives:
    """
    Resolve the skip directives for a field tag.

    Args:
        raw_tag: Raw tag text, may be empty

    Returns:
        TagDirectives with the resolved flags
    """
    return resolve_tokens(tokenize_tag(raw_tag))


def should_skip_field(raw_tag: str) -> bool:
    """Return True when the tag removes the field from generation entirely."""
    return resolve_tag(raw_tag).skip_all
