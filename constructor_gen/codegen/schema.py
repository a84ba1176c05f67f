"""
Struct and field models consumed by the generator.

A Struct is built once from parsed Go source and never mutated afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from .tags import resolve_tag


class StructNotFoundError(LookupError):
    """Raised when the requested struct type cannot be found."""

    pass


class Visibility(Enum):
    """Go identifier visibility."""

    EXPORTED = "exported"
    PRIVATE = "private"

    @classmethod
    def of(cls, name: str) -> "Visibility":
        """Visibility of an identifier, decided by its first character."""
        if name and name[0].isupper():
            return cls.EXPORTED
        return cls.PRIVATE


@dataclass(frozen=True)
class Field:
    """A single struct field with its resolved skip directives."""

    name: str
    type: str
    visibility: Visibility = Visibility.PRIVATE
    tag: str = ""
    skip_all: bool = False
    skip_accessor: bool = False
    skip_mutator: bool = False
    embedded: bool = False

    @classmethod
    def from_declaration(
        cls, name: str, type_spelling: str, tag: str = "", embedded: bool = False
    ) -> "Field":
        """
        Build a field from parsed declaration parts.

        Visibility comes from the field name, skip flags from the tag.
        """
        directives = resolve_tag(tag)
        return cls(
            name=name,
            type=type_spelling,
            visibility=Visibility.of(name),
            tag=tag,
            skip_all=directives.skip_all,
            skip_accessor=directives.skip_accessor,
            skip_mutator=directives.skip_mutator,
            embedded=embedded,
        )

    @property
    def exported(self) -> bool:
        return self.visibility is Visibility.EXPORTED

    @property
    def in_constructor(self) -> bool:
        """Whether the field takes part in any construction pattern."""
        return not self.skip_all and not self.skip_mutator

    @property
    def has_accessor(self) -> bool:
        """Whether the field is eligible for a generated getter."""
        return (
            not self.skip_all
            and not self.skip_accessor
            and self.visibility is Visibility.PRIVATE
        )


@dataclass(frozen=True)
class Struct:
    """A Go struct type: name, declaring package and ordered fields."""

    type_name: str
    package: str
    fields: Tuple[Field, ...] = ()
    # Package qualifier -> import path, from the declaring file
    imports: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "imports", MappingProxyType(dict(self.imports)))

    def get_field(self, name: str) -> Optional[Field]:
        """Get field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def constructor_fields(self) -> Tuple[Field, ...]:
        """Fields that become parameters, builder mutators and options."""
        return tuple(f for f in self.fields if f.in_constructor)

    def accessor_fields(self) -> Tuple[Field, ...]:
        """Private fields that receive a getter."""
        return tuple(f for f in self.fields if f.has_accessor)

    def summary(self) -> Dict[str, int]:
        """Field counts used in generation metadata."""
        return {
            "total_fields": len(self.fields),
            "constructor_fields": len(self.constructor_fields()),
            "accessor_fields": len(self.accessor_fields()),
            "skipped_fields": sum(1 for f in self.fields if f.skip_all),
        }
