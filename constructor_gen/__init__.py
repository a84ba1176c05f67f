"""
constructor_gen

Generates constructor code (all-args constructors, builders, functional
options and getters) for Go structs.
"""

from .codegen import (
    ConfigurationError,
    GenerationConfig,
    GenerationResult,
    Pattern,
    Struct,
    StructNotFoundError,
    __version__,
    generate_code,
    generate_from_source,
    parse_struct,
    quick_generate,
)

__all__ = [
    "ConfigurationError",
    "GenerationConfig",
    "GenerationResult",
    "Pattern",
    "Struct",
    "StructNotFoundError",
    "__version__",
    "generate_code",
    "generate_from_source",
    "parse_struct",
    "quick_generate",
]
