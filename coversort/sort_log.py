"""
Sort log: append-only record of pipeline runs.

Each run that got past the "nothing to do" checks is written as one JSON
line to .coversort/sorts.log inside the vault, so failed downloads and
replaced files can be traced after the fact.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import CONFIG_DIR_NAME
from .models import SortResult

SORTED = "sorted"


@dataclass
class SortRecord:
    """A single sort log entry."""
    timestamp: str
    note: str
    outcome: str  # "sorted" or an ErrorKind value
    image_url: str | None = None
    target: str | None = None
    bytes_written: int = 0
    message: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, dropping empty optional fields."""
        d: dict[str, Any] = {
            "timestamp": self.timestamp,
            "note": self.note,
            "outcome": self.outcome,
        }
        if self.image_url:
            d["image_url"] = self.image_url
        if self.target:
            d["target"] = self.target
        if self.bytes_written:
            d["bytes_written"] = self.bytes_written
        if self.message:
            d["message"] = self.message
        if self.context:
            d["context"] = self.context
        return d

    @classmethod
    def from_dict(cls, data: dict) -> "SortRecord":
        return cls(
            timestamp=data["timestamp"],
            note=data["note"],
            outcome=data["outcome"],
            image_url=data.get("image_url"),
            target=data.get("target"),
            bytes_written=data.get("bytes_written", 0),
            message=data.get("message"),
            context=data.get("context", {}),
        )

    @property
    def ok(self) -> bool:
        return self.outcome == SORTED


def get_sort_log_path(vault_path: Path) -> Path:
    return vault_path / CONFIG_DIR_NAME / "sorts.log"


def record_from_result(result: SortResult) -> SortRecord:
    """Build a log record from a pipeline result."""
    record = SortRecord(
        timestamp=datetime.now(timezone.utc).isoformat(),
        note=result.note_path,
        outcome=SORTED if result.ok else result.error.kind.value,
        image_url=result.image_url,
        target=result.target.full_path if result.target else None,
        bytes_written=result.bytes_written,
    )
    if result.error is not None:
        record.message = result.error.message
        record.context = dict(result.error.context)
    return record


def log_sort(vault_path: Path, result: SortResult) -> SortRecord:
    """Append a pipeline result to the sort log and return the record."""
    record = record_from_result(result)

    log_path = get_sort_log_path(vault_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    # JSON Lines: one object per line
    with log_path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(record.to_dict()) + "\n")

    return record


def read_sort_log(vault_path: Path, last_n: int | None = None) -> list[SortRecord]:
    """
    Read entries from the sort log.

    Args:
        vault_path: Path to the vault directory
        last_n: If specified, return only the last N entries

    Returns:
        List of records, oldest first
    """
    log_path = get_sort_log_path(vault_path)
    if not log_path.exists():
        return []

    entries = []
    with log_path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                entries.append(SortRecord.from_dict(json.loads(line)))
            except (json.JSONDecodeError, KeyError, TypeError):
                continue  # Skip malformed lines

    if last_n is not None:
        return entries[-last_n:] if last_n > 0 else []
    return entries


def format_sort_record(record: SortRecord) -> str:
    """Format a record for human-readable display."""
    icon = "+" if record.ok else "!"
    lines = [f"{icon} [{record.outcome}] {record.note}"]

    if record.image_url:
        lines.append(f"  image: {record.image_url}")
    if record.target:
        lines.append(f"  saved: {record.target} ({record.bytes_written} bytes)")
    if record.message:
        lines.append(f"  error: {record.message}")
    for key, value in record.context.items():
        lines.append(f"  {key}: {value}")

    return "\n".join(lines)
