"""
Command-line interface for constructor generation.

Typical use is from a ``go:generate`` directive:

    //go:generate constructor-gen --type=Service --constructor-types=builder --setter-prefix=With
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from .codegen import (
    ConfigurationError,
    GenerationConfig,
    ParseError,
    StructNotFoundError,
    ToolConfig,
    __version__,
    generate_code,
    load_config,
    parse_struct,
)
from .codegen.generator import GenerationResult
from .logging_config import configure_logging, get_logger
from .utils import (
    SourceLoaderError,
    default_output_path,
    find_source_file,
    load_go_source,
    write_generated_code,
)

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="constructor-gen",
        description="Generate constructors, builders, functional options and getters for Go structs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  constructor-gen --type User
  constructor-gen --type Service --constructor-types builder --setter-prefix With --init initialize
  constructor-gen --type Server --constructor-types options --with-getter --stdout
  constructor-gen --type Repository --constructor-types allArgs,builder,options --config gen.json
        """.strip(),
    )

    parser.add_argument(
        "--type", "-t", dest="type_name", help="[mandatory] Struct type to generate for"
    )
    parser.add_argument(
        "--constructor-types",
        "--constructorTypes",
        dest="patterns",
        metavar="TYPES",
        help="Comma-separated constructor types: allArgs,builder,options (default: allArgs)",
    )
    parser.add_argument(
        "--output", "-o", help="Output file (default: <source_dir>/<type>_gen.go)"
    )
    parser.add_argument(
        "--init",
        dest="init_hook",
        metavar="METHOD",
        help="Method to call on the new instance before it is returned",
    )
    parser.add_argument(
        "--return-value",
        "--returnValue",
        dest="return_by_value",
        action="store_true",
        default=None,
        help="Return a value instead of a pointer",
    )
    parser.add_argument(
        "--setter-prefix",
        "--setterPrefix",
        dest="mutator_prefix",
        metavar="PREFIX",
        help="Prefix for builder setter methods (e.g. With)",
    )
    parser.add_argument(
        "--with-getter",
        "--withGetter",
        dest="emit_accessors",
        action="store_true",
        default=None,
        help="Generate getters for private fields",
    )

    source_group = parser.add_argument_group("source and output")
    source_group.add_argument(
        "--file", "-f", help="Go file declaring the struct (default: search --dir)"
    )
    source_group.add_argument(
        "--dir", default=".", help="Directory to search for the struct (default: .)"
    )
    source_group.add_argument(
        "--config", metavar="FILE", help="JSON configuration file"
    )
    source_group.add_argument(
        "--stdout",
        action="store_true",
        help="Print the generated code instead of writing a file",
    )
    source_group.add_argument(
        "--no-header",
        dest="header",
        action="store_false",
        default=None,
        help="Omit the 'Code generated ... DO NOT EDIT.' line",
    )

    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--verbose", "-v", action="store_true", help="Show generation metadata"
    )
    info_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING, INFO with --verbose)",
    )
    info_group.add_argument(
        "--version", action="store_true", help="Show version information and exit"
    )

    return parser


class CLIHandler:
    """Run one generation request from parsed arguments."""

    def __init__(
        self, console: Optional[Console] = None, err_console: Optional[Console] = None
    ) -> None:
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    def run(self, args: argparse.Namespace) -> int:
        """Run the generation and report the outcome.

        Returns:
            Exit code (0 for success, 1 for failure).
        """
        try:
            config, tool_config = self._build_config(args)
            source_file = self._locate_source(args, config)
            struct = self._parse(source_file, config.type_name)
        except CLIError as e:
            self.err_console.print(f"[red]✗ Error:[/red] {e}")
            return 1

        result = generate_code(struct, config, header=tool_config.header)
        if not result.success:
            self.err_console.print(f"[red]✗ {result.error_message}[/red]")
            return 1

        if args.stdout:
            self._print_code(result.code)
        else:
            output = Path(tool_config.output_file) if tool_config.output_file else (
                default_output_path(source_file, config.type_name)
            )
            try:
                write_generated_code(output, result.code)
            except SourceLoaderError as e:
                self.err_console.print(f"[red]✗ Error:[/red] {e}")
                return 1
            self.console.print(
                f"[green]✓[/green] Generated constructor code in [cyan]{output}[/cyan]"
            )

        if args.verbose:
            self._print_metadata(result)
        self._print_warnings(result.warnings)
        return 0

    def _build_config(self, args: argparse.Namespace) -> tuple[GenerationConfig, ToolConfig]:
        overrides: Dict[str, Any] = {
            "type_name": args.type_name,
            "patterns": args.patterns,
            "init_hook": args.init_hook,
            "return_by_value": args.return_by_value,
            "mutator_prefix": args.mutator_prefix,
            "emit_accessors": args.emit_accessors,
            "output_file": args.output,
            "header": args.header,
        }
        try:
            config, tool_config = load_config(custom_config=overrides, config_file=args.config)
        except ConfigurationError as e:
            raise CLIError(str(e)) from e

        if not config.type_name:
            raise CLIError("--type is mandatory")

        logger.debug("Effective configuration: %s", config)
        return config, tool_config

    def _locate_source(self, args: argparse.Namespace, config: GenerationConfig) -> Path:
        if args.file:
            return Path(args.file)
        try:
            return find_source_file(config.type_name, args.dir)
        except SourceLoaderError as e:
            raise CLIError(str(e)) from e

    def _parse(self, source_file: Path, type_name: str):
        try:
            source = load_go_source(source_file)
            return parse_struct(source, type_name, filename=str(source_file))
        except (FileNotFoundError, SourceLoaderError) as e:
            raise CLIError(str(e)) from e
        except (ParseError, StructNotFoundError) as e:
            raise CLIError(f"parsing struct: {e}") from e

    def _print_code(self, code: str) -> None:
        """Highlight code on a terminal, write it verbatim when piped."""
        if self.console.is_terminal:
            self.console.print(Syntax(code, "go", theme="monokai", word_wrap=True))
        else:
            self.console.file.write(code)
            self.console.file.flush()

    def _print_metadata(self, result: GenerationResult) -> None:
        metadata_table = Table(
            title="📊 Generation Metadata",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold cyan",
        )
        metadata_table.add_column("Property", style="bold")
        metadata_table.add_column("Value", style="green")

        for key, value in result.metadata.items():
            if isinstance(value, list):
                value = ", ".join(str(v) for v in value) or "-"
            metadata_table.add_row(key.replace("_", " ").title(), str(value))

        self.err_console.print()
        self.err_console.print(metadata_table)

    def _print_warnings(self, warnings: List[str]) -> None:
        if not warnings:
            return
        self.err_console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in warnings:
            self.err_console.print(f"  [yellow]•[/yellow] {warning}")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``constructor-gen`` command."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.version:
        Console().print(f"constructor-gen version {__version__}")
        return 0

    level = args.log_level or ("INFO" if args.verbose else "WARNING")
    configure_logging(getattr(logging, level))

    if not args.type_name and not args.config:
        Console(stderr=True).print("[red]✗ Error:[/red] --type is mandatory\n")
        parser.print_usage(sys.stderr)
        return 1

    return CLIHandler().run(args)


if __name__ == "__main__":
    sys.exit(main())
