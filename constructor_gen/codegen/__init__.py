"""
Constructor code generation.

Generates all-args constructors, builders, functional options and getters
for Go structs.
"""

from .config import (
    ConfigManager,
    ConfigurationError,
    GenerationConfig,
    Pattern,
    ToolConfig,
    load_config,
    parse_patterns,
)
from .generator import (
    ConstructorGenerator,
    GenerationResult,
    GeneratorError,
    generate_code,
)
from .naming import to_lower_initial, to_upper_initial
from .parser import ParseError, list_struct_names, parse_struct, parse_struct_file
from .schema import Field, Struct, StructNotFoundError, Visibility
from .tags import TagDirectives, resolve_tag, should_skip_field

__version__ = "1.0.0"


# Convenience functions
def generate_from_source(source, type_name, config=None, filename="<source>"):
    """
    Generate constructor code from Go source text.

    Args:
        source: Go source containing the struct
        type_name: Struct to generate for
        config: GenerationConfig, or a dict of configuration overrides
        filename: Used in error messages

    Returns:
        GenerationResult with generated code
    """
    try:
        if not isinstance(config, GenerationConfig):
            overrides = {**(config or {}), "type_name": type_name}
            config, _ = load_config(custom_config=overrides)
        struct = parse_struct(source, type_name, filename=filename)
    except (ConfigurationError, ParseError, StructNotFoundError) as e:
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)

    return generate_code(struct, config)


def quick_generate(source, type_name, **options):
    """
    Quick code generation from Go source.

    Args:
        source: Go source text
        type_name: Struct to generate for
        **options: Configuration keys, e.g. ``patterns="builder"``

    Returns:
        Generated code string
    """
    result = generate_from_source(source, type_name, options)

    if result.success:
        return result.code
    raise result.exception


# Export main interfaces
__all__ = [
    "ConfigManager",
    "ConfigurationError",
    "ConstructorGenerator",
    "Field",
    "GenerationConfig",
    "GenerationResult",
    "GeneratorError",
    "ParseError",
    "Pattern",
    "Struct",
    "StructNotFoundError",
    "TagDirectives",
    "ToolConfig",
    "Visibility",
    "generate_code",
    "generate_from_source",
    "list_struct_names",
    "load_config",
    "parse_patterns",
    "parse_struct",
    "parse_struct_file",
    "quick_generate",
    "resolve_tag",
    "should_skip_field",
    "to_lower_initial",
    "to_upper_initial",
]
