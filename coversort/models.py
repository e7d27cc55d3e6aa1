"""Data models for rules, derived targets, and pipeline outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass
class Rule:
    """A domain -> folder mapping."""

    domain: str  # bare hostname, no scheme, no "www."
    folder: str = ""  # vault-relative; empty means vault root

    def to_dict(self) -> dict[str, str]:
        return {"domain": self.domain, "folder": self.folder}


@dataclass(frozen=True)
class TargetAsset:
    """Where a fetched cover image lands inside the vault."""

    base_name: str
    extension: str  # always starts with "."
    folder: str
    full_path: str

    @property
    def file_name(self) -> str:
        return f"{self.base_name}{self.extension}"


class ErrorKind(str, Enum):
    """Reasons a pipeline run stops early."""

    NOT_APPLICABLE = "not_applicable"  # nothing to do, not a failure
    PARSE_ERROR = "parse_error"
    NETWORK_ERROR = "network_error"
    STORAGE_ERROR = "storage_error"


@dataclass
class PipelineError:
    """Why a run was abandoned, with context for diagnostics."""

    kind: ErrorKind
    message: str
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message, "context": dict(self.context)}


@dataclass
class SortResult:
    """Outcome of one pipeline run over a single note."""

    note_path: str
    image_url: str | None = None
    target: TargetAsset | None = None
    bytes_written: int = 0
    error: PipelineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def not_applicable(self) -> bool:
        return self.error is not None and self.error.kind == ErrorKind.NOT_APPLICABLE
