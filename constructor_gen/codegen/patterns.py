"""
Emission strategies for the construction patterns.

Each strategy is a plain function ``(Struct, GenerationConfig) -> str`` that
renders one Go template. They share the field-selection helpers below and
hold no state, so calling one twice with the same inputs yields the same text.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

from .config import GenerationConfig, Pattern
from .naming import (
    accessor_name,
    mutator_name,
    option_name,
    parameter_name,
    receiver_name,
)
from .schema import Field, Struct
from .templates import TemplateEngine, get_default_template_engine

BUILDER_RECEIVER = "b"

Strategy = Callable[[Struct, GenerationConfig, Optional[TemplateEngine]], str]


def constructor_name(type_name: str) -> str:
    return f"New{type_name}"


def builder_name(type_name: str) -> str:
    return f"{type_name}Builder"


def option_type_name(type_name: str) -> str:
    return f"{type_name}Option"


def options_constructor_name(type_name: str) -> str:
    return f"New{type_name}WithOptions"


def return_type(config: GenerationConfig) -> str:
    """``T`` when returning by value, ``*T`` otherwise."""
    if config.return_by_value:
        return config.type_name
    return f"*{config.type_name}"


def _allocation(config: GenerationConfig) -> str:
    if config.return_by_value:
        return config.type_name
    return f"&{config.type_name}"


def _keyed_values(fields: Sequence[Field], value_of: Callable[[Field], str]) -> List[Dict[str, str]]:
    """Composite literal entries with keys padded the way gofmt aligns them."""
    width = max((len(f.name) for f in fields), default=0) + 1
    return [
        {"key": f"{f.name}:".ljust(width), "value": value_of(f)} for f in fields
    ]


def _aligned_declarations(fields: Sequence[Field]) -> List[Dict[str, str]]:
    width = max((len(f.name) for f in fields), default=0)
    return [{"decl": f"{f.name.ljust(width)} {f.type}"} for f in fields]


def _engine(engine: Optional[TemplateEngine]) -> TemplateEngine:
    return engine or get_default_template_engine()


def _base_context(config: GenerationConfig) -> Dict[str, Any]:
    return {
        "type_name": config.type_name,
        "return_type": return_type(config),
        "return_by_value": config.return_by_value,
        "alloc": _allocation(config),
        "init_hook": config.init_hook,
    }


def emit_all_args(
    struct: Struct, config: GenerationConfig, engine: Optional[TemplateEngine] = None
) -> str:
    """
    Render the all-arguments constructor ``New<T>``.

    Constructor fields become positional parameters in declaration order;
    each one is assigned to its same-named field.
    """
    fields = struct.constructor_fields()
    context = _base_context(config)
    context.update(
        {
            "func_name": constructor_name(config.type_name),
            "params": [f"{parameter_name(f.name)} {f.type}" for f in fields],
            "assignments": _keyed_values(fields, lambda f: parameter_name(f.name)),
        }
    )
    return _engine(engine).render_template("allargs.go.j2", context)


def emit_builder(
    struct: Struct, config: GenerationConfig, engine: Optional[TemplateEngine] = None
) -> str:
    """
    Render the builder type, its constructor, one mutator per constructor
    field and the terminal ``Build`` method.
    """
    fields = struct.constructor_fields()
    context = _base_context(config)
    context.update(
        {
            "builder_name": builder_name(config.type_name),
            "recv": BUILDER_RECEIVER,
            "fields": _aligned_declarations(fields),
            "mutators": [
                {
                    "name": mutator_name(f.name, config.mutator_prefix),
                    "field": f.name,
                    "param": parameter_name(f.name),
                    "type": f.type,
                }
                for f in fields
            ],
            "assignments": _keyed_values(
                fields, lambda f: f"{BUILDER_RECEIVER}.{f.name}"
            ),
        }
    )
    return _engine(engine).render_template("builder.go.j2", context)


def emit_options(
    struct: Struct, config: GenerationConfig, engine: Optional[TemplateEngine] = None
) -> str:
    """
    Render the functional options: the ``<T>Option`` type, one ``With<Field>``
    per constructor field and the variadic ``New<T>WithOptions``.
    """
    fields = struct.constructor_fields()
    context = _base_context(config)
    context.update(
        {
            "option_type": option_type_name(config.type_name),
            "func_name": options_constructor_name(config.type_name),
            "options": [
                {
                    "name": option_name(f.name),
                    "field": f.name,
                    "param": parameter_name(f.name),
                    "type": f.type,
                }
                for f in fields
            ],
        }
    )
    return _engine(engine).render_template("options.go.j2", context)


def emit_accessors(
    struct: Struct, config: GenerationConfig, engine: Optional[TemplateEngine] = None
) -> str:
    """Render ``Get<Field>`` methods for every accessor field."""
    fields = struct.accessor_fields()
    if not fields:
        return ""

    context = {
        "type_name": config.type_name,
        "recv": receiver_name(config.type_name),
        "accessors": [
            {"name": accessor_name(f.name), "field": f.name, "type": f.type}
            for f in fields
        ],
    }
    return _engine(engine).render_template("accessors.go.j2", context)


STRATEGIES: Dict[Pattern, Strategy] = {
    Pattern.ALL_ARGS: emit_all_args,
    Pattern.BUILDER: emit_builder,
    Pattern.OPTIONS: emit_options,
}


def emit_pattern(
    pattern: Pattern,
    struct: Struct,
    config: GenerationConfig,
    engine: Optional[TemplateEngine] = None,
) -> str:
    """Dispatch to the strategy for ``pattern``."""
    return STRATEGIES[pattern](struct, config, engine)


def generated_symbols(pattern: Pattern, struct: Struct, config: GenerationConfig) -> List[str]:
    """Package-level names a pattern declares, in emission order."""
    fields = struct.constructor_fields()
    type_name = config.type_name

    if pattern is Pattern.ALL_ARGS:
        return [constructor_name(type_name)]
    if pattern is Pattern.BUILDER:
        return [builder_name(type_name), f"New{builder_name(type_name)}"]
    return [
        option_type_name(type_name),
        *(option_name(f.name) for f in fields),
        options_constructor_name(type_name),
    ]
