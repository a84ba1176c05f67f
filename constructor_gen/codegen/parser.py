"""
Go struct extraction.

Reads Go source text and builds the Struct model for one named struct type.
This is not a full Go parser: it understands package clauses, import
declarations and struct type declarations, which is all the generator needs.

Structural searches run over a *masked* copy of the comment-free source in
which the contents of string, raw string and rune literals are replaced by
placeholder characters. Offsets are identical in both copies, so positions
found in the masked text are used to slice the real text.
"""

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from ..logging_config import get_logger
from .schema import Field, Struct, StructNotFoundError

logger = get_logger(__name__)

MASK_CHAR = "x"

_PAIRS = {"{": "}", "(": ")", "[": "]"}
_CLOSERS = {v: k for k, v in _PAIRS.items()}

_PACKAGE_RE = re.compile(r"\bpackage\s+([^\W\d]\w*)")
_IMPORT_GROUP_RE = re.compile(r"\bimport\s*\(")
_IMPORT_SINGLE_RE = re.compile(r'\bimport\s+(?:([^\W\d]\w*|\.)\s+)?"')
_IMPORT_SPEC_RE = re.compile(r'(?:([^\W\d]\w*|\.)\s+)?"([^"]*)"')
_TYPE_GROUP_RE = re.compile(r"\btype\s*\(")
_TYPE_SINGLE_RE = re.compile(r"\btype\s+([^\W\d]\w*)")
_SPEC_NAME_RE = re.compile(r"\s*([^\W\d]\w*)")
_STRUCT_OPEN_RE = re.compile(r"\s*(?:=\s*)?struct\s*\{")
_GENERIC_RE = re.compile(r"\s*\[")
_NAMED_FIELD_RE = re.compile(
    r"([^\W\d]\w*(?:\s*,\s*[^\W\d]\w*)*)\s+(\S.*)", re.DOTALL
)
_MAJOR_VERSION_RE = re.compile(r"^v\d+$")


class ParseError(Exception):
    """Raised when Go source is malformed beyond what the scanner tolerates."""

    pass


@dataclass(frozen=True)
class SourceText:
    """Comment-free source and its literal-masked twin."""

    code: str
    masked: str
    filename: str = "<source>"

    def line_of(self, offset: int) -> int:
        return self.code.count("\n", 0, offset) + 1


def _scan_literal(source: str, start: int, filename: str) -> int:
    """Return the index just past the literal opening at ``start``."""
    quote = source[start]
    i = start + 1
    n = len(source)
    while i < n:
        ch = source[i]
        if quote != "`" and ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n" and quote != "`":
            break
        i += 1
    line = source.count("\n", 0, start) + 1
    raise ParseError(f"{filename}:{line}: unterminated literal")


def prepare_source(source: str, filename: str = "<source>") -> SourceText:
    """
    Strip comments and build the masked copy of ``source``.

    Line comments become nothing, block comments become a single space or
    the newlines they contained, so line structure is preserved.
    """
    code: List[str] = []
    masked: List[str] = []
    i = 0
    n = len(source)

    while i < n:
        ch = source[i]
        nxt = source[i + 1] if i + 1 < n else ""

        if ch == "/" and nxt == "/":
            end = source.find("\n", i)
            i = n if end == -1 else end
            continue

        if ch == "/" and nxt == "*":
            end = source.find("*/", i + 2)
            if end == -1:
                line = source.count("\n", 0, i) + 1
                raise ParseError(f"{filename}:{line}: unterminated block comment")
            replacement = "\n" * source.count("\n", i, end) or " "
            code.append(replacement)
            masked.append(replacement)
            i = end + 2
            continue

        if ch in "\"'`":
            end = _scan_literal(source, i, filename)
            literal = source[i:end]
            code.append(literal)
            inner = "".join("\n" if c == "\n" else MASK_CHAR for c in literal[1:-1])
            masked.append(ch + inner + ch)
            i = end
            continue

        code.append(ch)
        masked.append(ch)
        i += 1

    return SourceText("".join(code), "".join(masked), filename)


def find_matching(masked: str, open_index: int, filename: str = "<source>") -> int:
    """Index of the bracket closing the one at ``open_index``."""
    stack = []
    for i in range(open_index, len(masked)):
        ch = masked[i]
        if ch in _PAIRS:
            stack.append(ch)
        elif ch in _CLOSERS:
            if not stack or stack[-1] != _CLOSERS[ch]:
                line = masked.count("\n", 0, i) + 1
                raise ParseError(f"{filename}:{line}: unbalanced '{ch}'")
            stack.pop()
            if not stack:
                return i
    line = masked.count("\n", 0, open_index) + 1
    raise ParseError(f"{filename}:{line}: unclosed '{masked[open_index]}'")


def split_top_level(masked: str, start: int, end: int) -> List[Tuple[int, int]]:
    """
    Split ``masked[start:end]`` at newlines and semicolons outside brackets.

    Returns:
        (start, end) spans of the non-blank pieces
    """
    spans = []
    depth = 0
    piece_start = start
    for i in range(start, end):
        ch = masked[i]
        if ch in _PAIRS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
        elif depth == 0 and ch in "\n;":
            if masked[piece_start:i].strip():
                spans.append((piece_start, i))
            piece_start = i + 1
    if masked[piece_start:end].strip():
        spans.append((piece_start, end))
    return spans


def normalize_type(type_text: str) -> str:
    """
    Collapse whitespace in a type spelling onto one line.

    Line breaks inside inline struct or interface types turn into ``; ``.
    """
    lines = [line.strip() for line in type_text.strip().splitlines() if line.strip()]
    if not lines:
        return ""

    result = lines[0]
    for line in lines[1:]:
        if result.endswith(("{", "(", "[", ",")) or line.startswith(("}", ")", "]")):
            result = f"{result} {line}"
        else:
            result = f"{result}; {line}"
    return re.sub(r"[ \t]+", " ", result)


def default_package_name(import_path: str) -> str:
    """
    Best guess at the package name an import path declares.

    Drops a trailing major version element ("/v2") or suffix (".v3") and a
    leading "go-" from the final element.
    """
    parts = [p for p in import_path.split("/") if p]
    if not parts:
        return ""
    if len(parts) > 1 and _MAJOR_VERSION_RE.match(parts[-1]):
        parts.pop()
    name = re.sub(r"\.v\d+$", "", parts[-1])
    if name.startswith("go-"):
        name = name[3:]
    return name.rsplit("-", 1)[-1].replace(".", "_")


def parse_package(text: SourceText) -> str:
    match = _PACKAGE_RE.search(text.masked)
    return match.group(1) if match else ""


def parse_imports(text: SourceText) -> Dict[str, str]:
    """
    Collect import declarations as a qualifier -> import path map.

    Blank (``_``) and dot imports are ignored because they introduce no
    qualifier.
    """
    imports: Dict[str, str] = {}

    def add(alias: Optional[str], path: str):
        if alias in ("_", "."):
            return
        qualifier = alias or default_package_name(path)
        if qualifier:
            imports[qualifier] = path

    for match in _IMPORT_GROUP_RE.finditer(text.masked):
        close = find_matching(text.masked, match.end() - 1, text.filename)
        body = text.code[match.end() : close]
        for alias, path in _IMPORT_SPEC_RE.findall(body):
            add(alias or None, path)

    for match in _IMPORT_SINGLE_RE.finditer(text.masked):
        spec = _IMPORT_SPEC_RE.match(text.code, match.start(1) if match.group(1) else match.end() - 1)
        if spec:
            add(spec.group(1), spec.group(2))

    return imports


def _iter_type_specs(text: SourceText) -> Iterator[Tuple[str, int]]:
    """Yield (type name, offset just past the name) for every type spec."""
    masked = text.masked

    for match in _TYPE_SINGLE_RE.finditer(masked):
        yield match.group(1), match.end(1)

    for match in _TYPE_GROUP_RE.finditer(masked):
        close = find_matching(masked, match.end() - 1, text.filename)
        for start, _ in split_top_level(masked, match.end(), close):
            name = _SPEC_NAME_RE.match(masked, start)
            if name:
                yield name.group(1), name.end(1)


def _struct_body(text: SourceText, name_end: int) -> Optional[Tuple[int, int]]:
    """(open, close) brace offsets if the spec after ``name_end`` is a struct."""
    match = _STRUCT_OPEN_RE.match(text.masked, name_end)
    if not match:
        return None
    open_index = match.end() - 1
    return open_index, find_matching(text.masked, open_index, text.filename)


def list_struct_names(source: Union[str, SourceText]) -> List[str]:
    """Names of all struct types declared in ``source``, in source order."""
    text = source if isinstance(source, SourceText) else prepare_source(source)
    found = []
    for name, name_end in sorted(_iter_type_specs(text), key=lambda item: item[1]):
        if _STRUCT_OPEN_RE.match(text.masked, name_end) and name not in found:
            found.append(name)
    return found


def _split_tag(text: SourceText, start: int, end: int) -> Tuple[int, str]:
    """
    Separate a trailing tag literal from a field declaration.

    Returns:
        (end offset of the declaration without tag, raw tag text)
    """
    masked = text.masked
    stripped_end = end
    while stripped_end > start and masked[stripped_end - 1].isspace():
        stripped_end -= 1

    if stripped_end == start:
        return end, ""

    quote = masked[stripped_end - 1]
    if quote not in "`\"":
        return end, ""

    open_index = masked.rfind(quote, start, stripped_end - 1)
    if open_index == -1:
        return end, ""

    literal = text.code[open_index:stripped_end]
    if quote == "`":
        return open_index, literal[1:-1]
    try:
        return open_index, json.loads(literal)
    except ValueError:
        logger.debug("Keeping undecodable tag literal %s verbatim", literal)
        return open_index, literal[1:-1]


def embedded_field_name(type_spelling: str) -> str:
    """Field name Go gives an embedded type: ``*pkg.Base[T]`` -> ``Base``."""
    base = type_spelling.lstrip("*").strip()
    bracket = base.find("[")
    if bracket != -1:
        base = base[:bracket]
    return base.rsplit(".", 1)[-1]


def parse_field_declaration(text: SourceText, start: int, end: int) -> List[Field]:
    """Turn one field declaration line into one or more Field models."""
    decl_end, tag = _split_tag(text, start, end)
    masked_decl = text.masked[start:decl_end]
    offset = len(masked_decl) - len(masked_decl.lstrip())
    masked_decl = masked_decl.strip()
    if not masked_decl:
        return []

    decl_start = start + offset
    match = _NAMED_FIELD_RE.fullmatch(masked_decl)
    if match:
        names = [n.strip() for n in match.group(1).split(",")]
        type_start = decl_start + match.start(2)
        type_spelling = normalize_type(text.code[type_start : decl_start + len(masked_decl)])
        return [Field.from_declaration(n, type_spelling, tag) for n in names]

    type_spelling = normalize_type(text.code[decl_start : decl_start + len(masked_decl)])
    return [
        Field.from_declaration(
            embedded_field_name(type_spelling), type_spelling, tag, embedded=True
        )
    ]


def parse_struct(
    source: Union[str, SourceText], type_name: str, filename: str = "<source>"
) -> Struct:
    """
    Extract the struct ``type_name`` from Go source.

    Args:
        source: Go source text
        type_name: Name of the struct type to extract
        filename: Used in error messages

    Returns:
        Struct model with fields in declaration order

    Raises:
        StructNotFoundError: The type is missing or is not a struct
        ParseError: The source is malformed
    """
    text = source if isinstance(source, SourceText) else prepare_source(source, filename)

    declared_other = False
    for name, name_end in _iter_type_specs(text):
        if name != type_name:
            continue

        body = _struct_body(text, name_end)
        if body is None:
            if _GENERIC_RE.match(text.masked, name_end):
                logger.warning(
                    "Type %s in %s has type parameters, which are not supported",
                    type_name,
                    text.filename,
                )
            declared_other = True
            continue

        open_index, close_index = body
        fields: List[Field] = []
        for start, end in split_top_level(text.masked, open_index + 1, close_index):
            fields.extend(parse_field_declaration(text, start, end))

        struct = Struct(
            type_name=type_name,
            package=parse_package(text),
            fields=fields,
            imports=parse_imports(text),
        )
        logger.info(
            "Parsed struct %s from %s (line %d, %d fields)",
            type_name,
            text.filename,
            text.line_of(open_index),
            len(fields),
        )
        return struct

    if declared_other:
        raise StructNotFoundError(
            f"type {type_name} in file {text.filename} is not a struct"
        )
    raise StructNotFoundError(f"struct {type_name} not found in file {text.filename}")


def parse_struct_file(path: Union[str, Path], type_name: str) -> Struct:
    """Read ``path`` and extract the struct ``type_name`` from it."""
    path = Path(path)
    source = path.read_text(encoding="utf-8")
    return parse_struct(source, type_name, filename=str(path))
