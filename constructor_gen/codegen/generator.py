"""
Constructor code generator.

Validates a generation request, runs the requested pattern strategies and
assembles the final Go file.
"""

import re
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

from ..logging_config import get_logger
from .config import ConfigurationError, GenerationConfig, Pattern
from .naming import accessor_name, mutator_name, parameter_name
from .patterns import BUILDER_RECEIVER, emit_accessors, emit_pattern, generated_symbols
from .schema import Field, Struct, StructNotFoundError
from .templates import TemplateEngine, TemplateError, get_default_template_engine

logger = get_logger(__name__)

TOOL_NAME = "constructor-gen"

# Local variable used by the all-args constructor and option closures
VALUE_VAR = "v"

_QUALIFIER_RE = re.compile(r"(?<![\w.])([^\W\d]\w*)\.[^\W\d]")


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


def validate_request(struct: Optional[Struct], config: GenerationConfig) -> None:
    """
    Check the preconditions the generator owns.

    Raises:
        ConfigurationError: Empty type name or empty pattern set
        StructNotFoundError: No struct, or a struct with a different name
    """
    if not config.type_name:
        raise ConfigurationError("Type name must not be empty")

    if not config.patterns:
        raise ConfigurationError("At least one constructor type must be requested")

    if struct is None:
        raise StructNotFoundError(f"struct {config.type_name} not found")

    if struct.type_name != config.type_name:
        raise StructNotFoundError(
            f"struct {config.type_name} not found (got {struct.type_name})"
        )


def type_qualifiers(type_spelling: str) -> List[str]:
    """Package qualifiers referenced by a type, e.g. ``map[string]time.Time`` -> ["time"]."""
    return _QUALIFIER_RE.findall(type_spelling)


def format_import(qualifier: str, path: str) -> str:
    """Format one import spec, adding an alias only when the path needs one."""
    if path.rsplit("/", 1)[-1] == qualifier:
        return f'"{path}"'
    return f'{qualifier} "{path}"'


class ConstructorGenerator:
    """Generates constructor code for one struct."""

    def __init__(
        self,
        config: GenerationConfig,
        engine: Optional[TemplateEngine] = None,
        header: bool = True,
    ):
        """
        Initialize generator.

        Args:
            config: Generation settings
            engine: Template engine, defaults to the bundled Go templates
            header: Emit the "Code generated ... DO NOT EDIT." line
        """
        self.config = config
        self.header = header
        self._engine = engine

    @property
    def template_engine(self) -> TemplateEngine:
        if self._engine is None:
            self._engine = get_default_template_engine()
        return self._engine

    def generate(self, struct: Struct) -> str:
        """
        Generate the complete Go file for ``struct``.

        Raises:
            ConfigurationError: Invalid request
            StructNotFoundError: Struct does not match the requested type
            GeneratorError: Template rendering failed
        """
        validate_request(struct, self.config)

        logger.debug(
            "Generating %s for %s",
            ", ".join(p.value for p in self.config.ordered_patterns()),
            struct.type_name,
        )

        try:
            sections = [
                emit_pattern(pattern, struct, self.config, self.template_engine)
                for pattern in self.config.ordered_patterns()
            ]
            if self.config.emit_accessors:
                sections.append(
                    emit_accessors(struct, self.config, self.template_engine)
                )

            parts = [self._render_package_declaration(struct)]
            imports_section = self._render_imports_section(struct)
            if imports_section:
                parts.append(imports_section)
            parts.extend(section for section in sections if section.strip())
        except TemplateError as e:
            raise GeneratorError(str(e)) from e

        code = "\n\n".join(part.strip("\n") for part in parts) + "\n"
        return self.format_code(code)

    def _render_package_declaration(self, struct: Struct) -> str:
        context = {
            "header": self.header,
            "tool": TOOL_NAME,
            "package_name": struct.package or "main",
        }
        return self.template_engine.render_template("package.go.j2", context)

    def _render_imports_section(self, struct: Struct) -> str:
        imports = self.get_import_statements(struct)
        if not imports:
            return ""
        return self.template_engine.render_template(
            "imports.go.j2", {"imports": imports}
        )

    def emitted_fields(self, struct: Struct) -> List[Field]:
        """Fields whose types appear in the generated code."""
        seen = list(struct.constructor_fields())
        if self.config.emit_accessors:
            for f in struct.accessor_fields():
                if f not in seen:
                    seen.append(f)
        return seen

    def get_import_statements(self, struct: Struct) -> List[str]:
        """Import specs needed by the field types used in generated code."""
        qualifiers = set()
        for f in self.emitted_fields(struct):
            qualifiers.update(type_qualifiers(f.type))

        imports = [
            format_import(q, struct.imports[q]) for q in qualifiers if q in struct.imports
        ]
        return sorted(imports, key=lambda spec: spec.rsplit(" ", 1)[-1])

    def validate_struct(self, struct: Struct) -> List[str]:
        """
        Report conditions that will likely produce unusable Go code.

        Generation never renames anything; these are warnings only.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []
        config = self.config
        ctor_fields = struct.constructor_fields()

        if not struct.fields:
            warnings.append(f"Struct {struct.type_name} has no fields")
        elif not ctor_fields:
            warnings.append(
                f"Struct {struct.type_name} has no constructor fields - "
                f"constructors will take no values"
            )

        warnings.extend(
            _duplicates(
                (parameter_name(f.name) for f in ctor_fields),
                "Constructor fields map to the same parameter name",
            )
        )

        if Pattern.BUILDER in config.patterns:
            mutators = [mutator_name(f.name, config.mutator_prefix) for f in ctor_fields]
            warnings.extend(_duplicates(mutators, "Duplicate builder method"))
            field_names = {f.name for f in ctor_fields}
            for name in mutators:
                if name in field_names or name == "Build":
                    warnings.append(
                        f"Builder method {name} collides with a builder field "
                        f"or method; set a setter prefix"
                    )
            warnings.extend(
                _shadowed(ctor_fields, BUILDER_RECEIVER, "builder receiver")
            )

        if config.patterns & {Pattern.ALL_ARGS, Pattern.OPTIONS}:
            warnings.extend(_shadowed(ctor_fields, VALUE_VAR, "local variable"))

        if config.emit_accessors:
            accessors = [accessor_name(f.name) for f in struct.accessor_fields()]
            warnings.extend(_duplicates(accessors, "Duplicate accessor"))
            all_names = {f.name for f in struct.fields}
            for name in accessors:
                if name in all_names:
                    warnings.append(
                        f"Accessor {name} collides with field {struct.type_name}.{name}"
                    )

        symbols = []
        for pattern in config.ordered_patterns():
            symbols.extend(generated_symbols(pattern, struct, config))
        warnings.extend(_duplicates(symbols, "Duplicate generated symbol"))

        for f in self.emitted_fields(struct):
            for qualifier in sorted(set(type_qualifiers(f.type))):
                if qualifier not in struct.imports:
                    warnings.append(
                        f"Package {qualifier} used by {struct.type_name}.{f.name} "
                        f"is not imported by the source file"
                    )

        return warnings

    def format_code(self, code: str) -> str:
        """Strip trailing whitespace and collapse runs of blank lines."""
        result_lines = []
        blank_count = 0

        for line in code.split("\n"):
            line = line.rstrip()
            if not line:
                blank_count += 1
                if blank_count <= 1:
                    result_lines.append(line)
            else:
                blank_count = 0
                result_lines.append(line)

        return "\n".join(result_lines)


def _duplicates(names: Iterable[str], message: str) -> List[str]:
    counts = Counter(names)
    return [f"{message}: {name}" for name, count in counts.items() if count > 1]


def _shadowed(fields: Iterable[Field], identifier: str, role: str) -> List[str]:
    return [
        f"Parameter for field {f.name} shadows the {role} '{identifier}'"
        for f in fields
        if parameter_name(f.name) == identifier
    ]


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(
    struct: Optional[Struct],
    config: GenerationConfig,
    header: bool = True,
    engine: Optional[TemplateEngine] = None,
) -> GenerationResult:
    """
    Generate constructor code with error handling.

    Args:
        struct: Parsed struct model
        config: Generation settings
        header: Emit the generated-code header line
        engine: Optional template engine override

    Returns:
        GenerationResult with code, warnings, and metadata. On failure
        ``success`` is False and ``code`` is empty.
    """
    generator = ConstructorGenerator(config, engine=engine, header=header)
    try:
        code = generator.generate(struct)
        warnings = generator.validate_struct(struct)
    except (ConfigurationError, StructNotFoundError, GeneratorError) as e:
        logger.error("Code generation failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)

    for warning in warnings:
        logger.warning(warning)

    metadata = {
        "type_name": struct.type_name,
        "package": struct.package,
        "patterns": [p.value for p in config.ordered_patterns()],
        "init_hook": config.init_hook,
        "return_by_value": config.return_by_value,
        "imports": generator.get_import_statements(struct),
        **struct.summary(),
    }
    logger.info(
        "Generated %s constructors for %s",
        ", ".join(metadata["patterns"]),
        struct.type_name,
    )
    return GenerationResult(code, warnings, metadata)
