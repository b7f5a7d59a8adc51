from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class Position(_Record):
    """Zero-based line/column pair."""

    line: int
    column: int


class PrototypeDeclaration(_Record):
    name: str
    start: int
    end: int


class PrototypeBlock(_Record):
    name: str
    body_start: int
    body_end: int


class PropSource(str, Enum):
    STYLEGUIDE = "styleguide"
    DEFAULT = "default"


class PropDefinition(_Record):
    prototype_name: str
    prop_path: tuple[str, ...] = Field(min_length=1)
    start: int
    end: int
    source: PropSource

    @property
    def dotted_path(self) -> str:
        return ".".join(self.prop_path)


class StyleguideWarning(_Record):
    message: str
    line: int
    column: int
    key: str


class ParsedProps(_Record):
    props: tuple[PropDefinition, ...] = ()
    warnings: tuple[StyleguideWarning, ...] = ()


class IndexedPrototype(PrototypeDeclaration):
    file_id: str
    start_position: Position
    end_position: Position


class IndexedProp(PropDefinition):
    file_id: str


class DiagnosticSeverity(str, Enum):
    WARNING = "warning"


class Diagnostic(_Record):
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    start_offset: int
    end_offset: int
    start: Position
    end: Position
