"""
Naming utilities for generated Go symbols.

Only the first character of an identifier is ever changed, so acronyms
keep their casing past the first letter ("HTTPClient" -> "hTTPClient").
"""

from typing import Optional

# Go reserved words
GO_RESERVED_WORDS = {
    "break",
    "case",
    "chan",
    "const",
    "continue",
    "default",
    "defer",
    "else",
    "fallthrough",
    "for",
    "func",
    "go",
    "goto",
    "if",
    "import",
    "interface",
    "map",
    "package",
    "range",
    "return",
    "select",
    "struct",
    "switch",
    "type",
    "var",
}

ACCESSOR_PREFIX = "Get"
OPTION_PREFIX = "With"


def to_lower_initial(name: str) -> str:
    """Lower-case the first character of an identifier."""
    if not name:
        return ""
    return name[0].lower() + name[1:]


def to_upper_initial(name: str) -> str:
    """Upper-case the first character of an identifier."""
    if not name:
        return ""
    return name[0].upper() + name[1:]


def is_go_keyword(name: str) -> bool:
    return name in GO_RESERVED_WORDS


def accessor_name(field_name: str) -> str:
    """Getter name for a field: ``Get`` + UpperInitial."""
    return ACCESSOR_PREFIX + to_upper_initial(field_name)


def mutator_name(field_name: str, prefix: Optional[str] = None) -> str:
    """Builder method name: optional prefix + UpperInitial."""
    return (prefix or "") + to_upper_initial(field_name)


def option_name(field_name: str) -> str:
    """Functional option constructor name: ``With`` + UpperInitial."""
    return OPTION_PREFIX + to_upper_initial(field_name)


def parameter_name(field_name: str) -> str:
    """
    Parameter name for a field.

    Exported fields are lower-cased at the first character. A result that
    is a Go keyword ("Type" -> "type") gets a trailing underscore.
    """
    name = to_lower_initial(field_name)
    if is_go_keyword(name):
        return f"{name}_"
    return name


def receiver_name(type_name: str) -> str:
    """Method receiver for a type: its first character, lower-cased."""
    if not type_name or not type_name[0].isalpha():
        return "v"
    return type_name[0].lower()
