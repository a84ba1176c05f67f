"""Utility functions for locating, reading and writing Go source files.

This module provides the file-level plumbing around the generator: finding
the file that declares a struct, loading it and persisting the result.
"""

import os
from pathlib import Path

from .codegen.parser import ParseError, list_struct_names, prepare_source
from .logging_config import get_logger

logger = get_logger(__name__)

GENERATED_SUFFIX = "_gen.go"


class SourceLoaderError(Exception):
    """Custom exception for source discovery and I/O errors."""

    pass


def load_go_source(file_path: str | Path) -> str:
    """Load Go source text from a local file.

    Args:
        file_path: Path to the Go file.

    Returns:
        The file contents.

    Raises:
        FileNotFoundError: If file doesn't exist.
        SourceLoaderError: If file cannot be read.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to load Go source from file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".go":
        logger.warning(f"File does not have .go extension: {file_path}")

    try:
        source = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading file {file_path}: {e}", exc_info=True)
        raise SourceLoaderError(f"Error reading file {file_path}: {e}") from e

    logger.info(f"Loaded Go source from {file_path}")
    return source


def declares_struct(file_path: str | Path, type_name: str) -> bool:
    """Check whether a Go file declares the struct ``type_name``.

    Files that cannot be read or scanned are treated as not declaring it.
    """
    try:
        source = load_go_source(file_path)
        text = prepare_source(source, str(file_path))
        return type_name in list_struct_names(text)
    except (SourceLoaderError, ParseError) as e:
        logger.warning(f"Skipping {file_path}: {e}")
        return False


def find_source_file(type_name: str, directory: str | Path = ".") -> Path:
    """Find the Go file that declares ``type_name``.

    When run by ``go generate`` the ``GOFILE`` environment variable names the
    file that holds the directive, and it is used as-is. Otherwise every
    ``*.go`` file in ``directory`` is scanned in name order, skipping
    generated ``*_gen.go`` files.

    Args:
        type_name: Struct type to look for.
        directory: Directory to scan.

    Returns:
        Path of the declaring file.

    Raises:
        SourceLoaderError: If no file declares the struct.
    """
    directory = Path(directory)

    gofile = os.environ.get("GOFILE")
    if gofile:
        logger.debug(f"Using GOFILE={gofile}")
        return directory / gofile

    if not directory.is_dir():
        logger.error(f"Not a directory: {directory}")
        raise SourceLoaderError(f"Not a directory: {directory}")

    for candidate in sorted(directory.glob("*.go")):
        if candidate.name.endswith(GENERATED_SUFFIX):
            continue
        if declares_struct(candidate, type_name):
            logger.info(f"Found struct {type_name} in {candidate}")
            return candidate

    logger.error(f"Struct {type_name} not found in {directory}")
    raise SourceLoaderError(
        f"could not find struct {type_name} in directory {directory}"
    )


def default_output_path(source_file: str | Path, type_name: str) -> Path:
    """Output path next to the source: ``<dir>/<lowercase type>_gen.go``."""
    return Path(source_file).parent / f"{type_name.lower()}{GENERATED_SUFFIX}"


def write_generated_code(output_path: str | Path, code: str) -> Path:
    """Write generated code to ``output_path``.

    Raises:
        SourceLoaderError: If the file cannot be written.
    """
    output_path = Path(output_path)
    try:
        output_path.write_text(code, encoding="utf-8")
    except OSError as e:
        logger.error(f"Error writing output file {output_path}: {e}")
        raise SourceLoaderError(
            f"Error writing output file {output_path}: {e}"
        ) from e

    logger.info(f"Wrote generated code to {output_path}")
    return output_path
