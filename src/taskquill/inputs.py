"""Parsing of render requests from YAML/JSON files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from taskquill.models import Task
from taskquill.prompts.update_task_content import UpdateTaskContentParams


class InputError(Exception):
    """Raised when a render request cannot be read or parsed."""


def _pick(data: dict[str, Any], snake: str, camel: str) -> Any:
    if snake in data:
        return data[snake]
    return data.get(camel)


def _task_or_none(value: Any, field_name: str) -> Task | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise InputError(f"'{field_name}' must be a mapping, got {type(value).__name__}")
    try:
        return Task.from_dict(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InputError(f"Invalid '{field_name}': {exc}") from exc


def _flag(value: Any, field_name: str) -> bool:
    """Read an optional boolean field; strings like "false" are rejected."""
    if value is None:
        return False
    if not isinstance(value, bool):
        raise InputError(
            f"'{field_name}' must be true or false, got {type(value).__name__}"
        )
    return value


def params_from_dict(data: dict[str, Any]) -> UpdateTaskContentParams:
    """Build render params from a mapping with snake_case or camelCase keys."""
    task_id = _pick(data, "task_id", "taskId")
    if task_id is None:
        raise InputError("Missing required field 'task_id'")

    message = data.get("message")
    validation_error = _pick(data, "validation_error", "validationError")

    return UpdateTaskContentParams(
        task_id=str(task_id),
        task=_task_or_none(data.get("task"), "task"),
        success=_flag(data.get("success"), "success"),
        message=str(message) if message is not None else None,
        validation_error=(
            str(validation_error) if validation_error is not None else None
        ),
        empty_update=_flag(
            _pick(data, "empty_update", "emptyUpdate"), "empty_update"
        ),
        updated_task=_task_or_none(
            _pick(data, "updated_task", "updatedTask"), "updated_task"
        ),
    )


def parse_params(text: str) -> UpdateTaskContentParams:
    """Parse a YAML or JSON document into render params."""
    try:
        # JSON is a subset of YAML
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise InputError(f"Invalid YAML/JSON input: {exc}") from exc
    if not isinstance(data, dict):
        raise InputError("Input must be a mapping of render parameters")
    return params_from_dict(data)


def load_params_file(path: Path) -> UpdateTaskContentParams:
    """Read and parse a render request file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InputError(f"Cannot read {path}: {exc}") from exc
    return parse_params(text)
