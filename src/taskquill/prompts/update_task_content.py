"""Prompt generator for the update_task_content tool response."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from taskquill.models import RelatedFile, Task
from taskquill.prompts.override import OverrideResolver, apply_override
from taskquill.prompts.substitution import generate_prompt
from taskquill.templates.base import TemplateStore

logger = logging.getLogger(__name__)

PROMPT_NAME = "UPDATE_TASK_CONTENT"
TEMPLATE_FOLDER = "updateTaskContent"

NOT_FOUND_TEMPLATE = f"{TEMPLATE_FOLDER}/notFound.md"
VALIDATION_TEMPLATE = f"{TEMPLATE_FOLDER}/validation.md"
EMPTY_UPDATE_TEMPLATE = f"{TEMPLATE_FOLDER}/emptyUpdate.md"
SUCCESS_TEMPLATE = f"{TEMPLATE_FOLDER}/success.md"
FILE_DETAILS_TEMPLATE = f"{TEMPLATE_FOLDER}/fileDetails.md"
INDEX_TEMPLATE = f"{TEMPLATE_FOLDER}/index.md"

# Every template the report can load
UPDATE_TASK_CONTENT_TEMPLATES: tuple[str, ...] = (
    NOT_FOUND_TEMPLATE,
    VALIDATION_TEMPLATE,
    EMPTY_UPDATE_TEMPLATE,
    SUCCESS_TEMPLATE,
    FILE_DETAILS_TEMPLATE,
    INDEX_TEMPLATE,
)

MAX_FIELD_LENGTH = 100
ELLIPSIS = "..."
NOTES_PREFIX = "- **Notes:** "


@dataclass(frozen=True)
class UpdateTaskContentParams:
    """Signals reported by the task store for one update request."""

    task_id: str
    task: Task | None = None  # None: no task with task_id exists
    success: bool = False
    message: str | None = None
    validation_error: str | None = None
    empty_update: bool = False
    updated_task: Task | None = None


# Outcome variants, in precedence order


@dataclass(frozen=True)
class TaskNotFound:
    task_id: str


@dataclass(frozen=True)
class ValidationFailed:
    error: str


@dataclass(frozen=True)
class EmptyUpdate:
    pass


@dataclass(frozen=True)
class UpdateCompleted:
    success: bool
    message: str = ""
    updated_task: Task | None = None

    @property
    def title(self) -> str:
        return "Success" if self.success else "Failure"


Outcome = TaskNotFound | ValidationFailed | EmptyUpdate | UpdateCompleted


def classify_outcome(params: UpdateTaskContentParams) -> Outcome:
    """Pick the single rendering path for an update; first match wins.

    1. Task missing
    2. Validation error
    3. Empty update
    4. Completed (success or failure)
    """
    if params.task is None:
        return TaskNotFound(task_id=params.task_id)
    if params.validation_error:
        return ValidationFailed(error=params.validation_error)
    if params.empty_update:
        return EmptyUpdate()
    return UpdateCompleted(
        success=bool(params.success),
        message=params.message or "",
        updated_task=params.updated_task,
    )


def truncate_field(value: str, limit: int = MAX_FIELD_LENGTH) -> str:
    """Cut ``value`` to ``limit`` characters plus an ellipsis when longer."""
    if len(value) > limit:
        return f"{value[:limit]}{ELLIPSIS}"
    return value


def format_notes(notes: str | None, limit: int = MAX_FIELD_LENGTH) -> str:
    """Render the notes line, or nothing when there are no notes."""
    if not notes:
        return ""
    return f"{NOTES_PREFIX}{truncate_field(notes, limit)}\n"


def format_timestamp(value: datetime) -> str:
    """Format as ISO8601 UTC with milliseconds, e.g. 2025-01-02T03:04:05.000Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    utc = value.astimezone(UTC)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def group_related_files(
    files: Iterable[RelatedFile] | None,
) -> dict[str, list[RelatedFile]]:
    """Group files by type tag, keeping first-seen group and file order."""
    groups: dict[str, list[RelatedFile]] = {}
    for related in files or ():
        groups.setdefault(related.type, []).append(related)
    return groups


def summarize_related_files(
    files: Sequence[RelatedFile] | None, template: str
) -> str:
    """Render one file-group summary fragment per type tag."""
    parts: list[str] = []
    for file_type, group in group_related_files(files).items():
        files_list = ", ".join(f"`{related.path}`" for related in group)
        parts.append(
            generate_prompt(
                template,
                {
                    "fileType": file_type,
                    "fileCount": len(group),
                    "filesList": files_list,
                },
            )
        )
    return "".join(parts)


def render_success_details(task: Task, store: TemplateStore) -> str:
    """Render the detail block for a successfully updated task."""
    files_content = ""
    if task.related_files:
        files_content = summarize_related_files(
            task.related_files, store.load(FILE_DETAILS_TEMPLATE)
        )

    return generate_prompt(
        store.load(SUCCESS_TEMPLATE),
        {
            "taskName": task.name,
            "taskDescription": truncate_field(task.description),
            "taskNotes": format_notes(task.notes),
            "taskStatus": task.status,
            "taskUpdatedAt": format_timestamp(task.updated_at),
            "filesContent": files_content,
        },
    )


def render_outcome(outcome: Outcome, store: TemplateStore) -> str:
    """Compose the report text for a classified outcome."""
    match outcome:
        case TaskNotFound(task_id=task_id):
            return generate_prompt(store.load(NOT_FOUND_TEMPLATE), {"taskId": task_id})
        case ValidationFailed(error=error):
            return generate_prompt(store.load(VALIDATION_TEMPLATE), {"error": error})
        case EmptyUpdate():
            return generate_prompt(store.load(EMPTY_UPDATE_TEMPLATE), {})
        case UpdateCompleted(updated_task=updated_task):
            content = outcome.message
            if outcome.success and updated_task is not None:
                content += render_success_details(updated_task, store)
            return generate_prompt(
                store.load(INDEX_TEMPLATE),
                {"responseTitle": outcome.title, "message": content},
            )
    raise TypeError(f"Unknown outcome: {outcome!r}")


def get_update_task_content_prompt(
    params: UpdateTaskContentParams,
    store: TemplateStore,
    resolver: OverrideResolver | None = None,
) -> str:
    """Build the full update_task_content response.

    Args:
        params: Signals from the task store for this request.
        store: Where template bodies come from.
        resolver: Optional override lookup; None disables overrides.

    Returns:
        The composed text after any operator override.
    """
    outcome = classify_outcome(params)
    logger.debug("update_task_content outcome for %s: %s", params.task_id, outcome)
    prompt = render_outcome(outcome, store)
    return apply_override(prompt, PROMPT_NAME, resolver)
