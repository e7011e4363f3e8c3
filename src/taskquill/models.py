"""Task data models consumed by the prompt generators."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """Lifecycle state of a task."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class RelatedFileType(StrEnum):
    """How a file relates to a task."""

    TO_MODIFY = "TO_MODIFY"
    REFERENCE = "REFERENCE"
    CREATE = "CREATE"
    DEPENDENCY = "DEPENDENCY"
    OTHER = "OTHER"


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO8601 string, epoch milliseconds or datetime.

    Naive values are assumed to be UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError) as exc:
            raise ValueError(f"Timestamp out of range: {value!r}") from exc
    elif isinstance(value, str):
        # fromisoformat() accepts a trailing "Z" on current interpreters
        parsed = datetime.fromisoformat(value.strip())
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _optional_int(value: Any) -> int | None:
    """Convert a line number, rejecting values int() cannot hold."""
    if value is None:
        return None
    try:
        return int(value)
    except OverflowError as exc:
        raise ValueError(f"Line number out of range: {value!r}") from exc


def _first(data: dict[str, Any], *keys: str) -> Any:
    """Return the first present key among snake_case/camelCase spellings."""
    for key in keys:
        if key in data:
            return data[key]
    return None


@dataclass(frozen=True)
class RelatedFile:
    """A file associated with a task."""

    path: str
    type: str  # RelatedFileType value; unknown tags kept verbatim
    description: str | None = None
    line_start: int | None = None
    line_end: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RelatedFile:
        """Create a RelatedFile from a dictionary."""
        type_raw = data.get("type") or RelatedFileType.OTHER
        description = data.get("description")
        line_start = _first(data, "line_start", "lineStart")
        line_end = _first(data, "line_end", "lineEnd")
        return cls(
            path=str(data.get("path", "")),
            type=str(type_raw),
            description=str(description) if description is not None else None,
            line_start=_optional_int(line_start),
            line_end=_optional_int(line_end),
        )


@dataclass(frozen=True)
class Task:
    """Immutable snapshot of a task as supplied by the task store."""

    id: str
    name: str
    description: str
    status: str  # TaskStatus value
    updated_at: datetime
    notes: str | None = None
    related_files: tuple[RelatedFile, ...] = ()

    # Carried for completeness; not rendered by the update report
    dependencies: tuple[str, ...] = ()
    implementation_guide: str | None = None
    verification_criteria: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """Create a Task from a parsed JSON/YAML mapping.

        Accepts both snake_case and camelCase keys. Unknown keys are ignored.
        """
        files_raw = _first(data, "related_files", "relatedFiles") or []
        related_files = tuple(
            RelatedFile.from_dict(f) for f in files_raw if isinstance(f, dict)
        )

        deps_raw = data.get("dependencies") or []
        dependencies: list[str] = []
        for dep in deps_raw:
            # Task stores emit either bare ids or {"taskId": ...} records
            if isinstance(dep, dict):
                dep_id = _first(dep, "task_id", "taskId")
                if dep_id is not None:
                    dependencies.append(str(dep_id))
            else:
                dependencies.append(str(dep))

        updated_raw = _first(data, "updated_at", "updatedAt")
        created_raw = _first(data, "created_at", "createdAt")
        notes = data.get("notes")
        guide = _first(data, "implementation_guide", "implementationGuide")
        criteria = _first(data, "verification_criteria", "verificationCriteria")

        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            status=str(data.get("status", TaskStatus.PENDING)),
            updated_at=(
                parse_timestamp(updated_raw)
                if updated_raw is not None
                else datetime.now(UTC)
            ),
            notes=str(notes) if notes is not None else None,
            related_files=related_files,
            dependencies=tuple(dependencies),
            implementation_guide=str(guide) if guide is not None else None,
            verification_criteria=str(criteria) if criteria is not None else None,
            created_at=parse_timestamp(created_raw) if created_raw is not None else None,
        )
