from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping, Optional, Tuple, Union

# ---- Aliases for clarity ----
VariableBinding = Mapping[str, str]  # identifier -> bound string literal value
Severity = Literal["warning", "error"]

DEFAULT_MARKER = "constSysfsExpr"
DEFAULT_INCLUDE = "**/*"
DEFAULT_ENCODING = "utf8"


# ---- Locations ----

@dataclass(frozen=True)
class SourceLocation:
    """Position of a node in the original module: 1-based line, 0-based column (characters)."""
    module_id: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.module_id}:{self.line}:{self.column}"


# ---- Marker call arguments ----

@dataclass(frozen=True)
class OptionProperty:
    """
    One recognized key of an options object literal.

    value is None when the property value is not a string literal;
    node_type keeps the grammar type of that value for diagnostics.
    """
    key: str
    value: Optional[str]
    node_type: str
    location: SourceLocation


OptionsLiteral = Tuple[OptionProperty, ...]


@dataclass(frozen=True)
class LiteralArg:
    value: str


@dataclass(frozen=True)
class VariableRef:
    name: str
    location: SourceLocation


@dataclass(frozen=True)
class OptionsOnly:
    options: OptionsLiteral


ArgumentForm = Union[LiteralArg, VariableRef, OptionsOnly]


@dataclass(frozen=True)
class EmbedCall:
    """
    One matched marker invocation.

    start/end are character offsets into the module text (half-open range).
    options holds the second argument of the (path, options) shape.
    """
    start: int
    end: int
    form: ArgumentForm
    location: SourceLocation
    options: OptionsLiteral = ()


# ---- Resolution ----

@dataclass(frozen=True)
class OptionsSpec:
    base_path: str = ""
    include: str = DEFAULT_INCLUDE
    encoding: str = DEFAULT_ENCODING


@dataclass(frozen=True)
class ResolvedCall:
    """Options of a call after argument resolution, with the path or pattern to search for."""
    path_or_pattern: str
    options: OptionsSpec


@dataclass(frozen=True)
class SearchPlan:
    """
    Where and how to look for files.

    root is absolute and file names are relative to it; pattern is
    relative to root but may leave it through ".." or an absolute prefix.
    single_file is True when pattern names one existing regular file.
    """
    root: str
    pattern: str
    single_file: bool


@dataclass(frozen=True)
class FileRecord:
    content: str
    file_path: str  # absolute
    file_name: str  # relative to the search root

    def to_json_obj(self) -> dict:
        # Key order is part of the embedded literal
        return {"content": self.content, "filePath": self.file_path, "fileName": self.file_name}


EmbedResult = Union[FileRecord, Tuple[FileRecord, ...]]


# ---- Diagnostics ----

@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    message: str
    location: Optional[SourceLocation] = None

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return f"{self.location}: {self.message}"


# ---- Transform output ----

@dataclass(frozen=True)
class TransformStats:
    calls_matched: int = 0
    calls_rewritten: int = 0
    files_embedded: int = 0
