"""Tests for task models and render request parsing."""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from taskquill.inputs import InputError, load_params_file, parse_params
from taskquill.models import RelatedFile, RelatedFileType, Task, TaskStatus, parse_timestamp

TASK_JSON = {
    "id": "T-1",
    "name": "Refactor loader",
    "description": "Split it",
    "notes": "Careful",
    "status": "in_progress",
    "updatedAt": "2025-01-02T03:04:05.000Z",
    "createdAt": "2025-01-01T00:00:00Z",
    "relatedFiles": [
        {"path": "src/a.py", "type": "TO_MODIFY", "lineStart": 3, "lineEnd": 9},
        {"path": "docs/b.md", "type": "REFERENCE", "description": "spec"},
    ],
    "dependencies": [{"taskId": "T-0"}, "T-00"],
    "implementationGuide": "Move functions",
    "extraField": "ignored",
}


class TestParseTimestamp:
    """Tests for timestamp parsing."""

    def test_iso_with_z(self) -> None:
        """Test parsing a Z-suffixed ISO string."""
        assert parse_timestamp("2025-01-02T03:04:05Z") == datetime(
            2025, 1, 2, 3, 4, 5, tzinfo=UTC
        )

    def test_naive_assumed_utc(self) -> None:
        """Test that naive values get UTC."""
        assert parse_timestamp(datetime(2025, 1, 2)).tzinfo is UTC

    def test_epoch_millis(self) -> None:
        """Test parsing epoch milliseconds."""
        assert parse_timestamp(0) == datetime(1970, 1, 1, tzinfo=UTC)

    def test_invalid(self) -> None:
        """Test that unsupported values raise ValueError."""
        with pytest.raises(ValueError):
            parse_timestamp(["nope"])


class TestTaskFromDict:
    """Tests for Task.from_dict."""

    def test_camel_case_keys(self) -> None:
        """Test parsing the task tool's camelCase payload."""
        task = Task.from_dict(TASK_JSON)

        assert task.id == "T-1"
        assert task.status == TaskStatus.IN_PROGRESS
        assert task.notes == "Careful"
        assert task.updated_at == datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)
        assert task.created_at == datetime(2025, 1, 1, tzinfo=UTC)
        assert task.related_files == (
            RelatedFile(path="src/a.py", type="TO_MODIFY", line_start=3, line_end=9),
            RelatedFile(path="docs/b.md", type="REFERENCE", description="spec"),
        )
        assert task.dependencies == ("T-0", "T-00")
        assert task.implementation_guide == "Move functions"

    def test_snake_case_keys(self) -> None:
        """Test parsing snake_case keys."""
        task = Task.from_dict(
            {
                "id": "T-2",
                "name": "n",
                "description": "d",
                "status": "completed",
                "updated_at": "2025-01-02T00:00:00+00:00",
                "related_files": [{"path": "x.py"}],
            }
        )
        assert task.related_files[0].type == RelatedFileType.OTHER
        assert task.notes is None

    def test_unknown_file_type_kept(self) -> None:
        """Test that unknown type tags survive verbatim."""
        related = RelatedFile.from_dict({"path": "x", "type": "fixture"})
        assert related.type == "fixture"

    def test_null_file_type_is_other(self) -> None:
        """Test that a null type tag falls back to OTHER."""
        related = RelatedFile.from_dict({"path": "x", "type": None})
        assert related.type == RelatedFileType.OTHER


class TestParseParams:
    """Tests for render request parsing."""

    def test_json_document(self) -> None:
        """Test parsing a JSON request."""
        params = parse_params(
            json.dumps(
                {
                    "taskId": "T-1",
                    "task": TASK_JSON,
                    "success": True,
                    "message": "Done",
                    "updatedTask": TASK_JSON,
                }
            )
        )
        assert params.task_id == "T-1"
        assert params.task is not None
        assert params.success is True
        assert params.message == "Done"
        assert params.updated_task == params.task
        assert params.empty_update is False
        assert params.validation_error is None

    def test_yaml_document(self) -> None:
        """Test parsing a YAML request with snake_case keys."""
        params = parse_params(
            "task_id: T-42\ntask: null\nvalidation_error: name is required\n"
        )
        assert params.task_id == "T-42"
        assert params.task is None
        assert params.validation_error == "name is required"

    def test_missing_task_id(self) -> None:
        """Test that task_id is required."""
        with pytest.raises(InputError, match="task_id"):
            parse_params("success: true\n")

    def test_non_mapping(self) -> None:
        """Test that a list document is rejected."""
        with pytest.raises(InputError):
            parse_params("- a\n")

    def test_invalid_yaml(self) -> None:
        """Test that malformed documents are rejected."""
        with pytest.raises(InputError):
            parse_params("task_id: [unclosed\n")

    def test_task_must_be_mapping(self) -> None:
        """Test that a scalar task is rejected."""
        with pytest.raises(InputError, match="task"):
            parse_params("task_id: T-1\ntask: yes-please\n")

    def test_bad_timestamp(self) -> None:
        """Test that an invalid timestamp becomes an InputError."""
        with pytest.raises(InputError):
            parse_params('task_id: T-1\ntask: {updatedAt: "not a date"}\n')

    def test_load_params_file(self, tmp_path: Path) -> None:
        """Test reading a request from disk."""
        path = tmp_path / "request.yaml"
        path.write_text("task_id: T-1\nempty_update: true\ntask: {name: x}\n")
        params = load_params_file(path)
        assert params.empty_update is True

    def test_load_params_file_missing(self, tmp_path: Path) -> None:
        """Test that unreadable files raise InputError."""
        with pytest.raises(InputError, match="Cannot read"):
            load_params_file(tmp_path / "missing.yaml")

    def test_epoch_out_of_range(self) -> None:
        """Test that an epoch too large for the platform is an InputError."""
        with pytest.raises(InputError, match="out of range"):
            parse_params("task_id: T\nupdated_task: {updatedAt: 1.0e+30}\n")

    def test_infinite_line_number(self) -> None:
        """Test that an infinite line number is an InputError."""
        with pytest.raises(InputError, match="out of range"):
            parse_params(
                "task_id: T\n"
                "task:\n"
                "  relatedFiles:\n"
                "    - {path: a.py, type: REFERENCE, lineStart: .inf}\n"
            )

    @pytest.mark.parametrize("field", ["success", "empty_update", "emptyUpdate"])
    def test_string_flags_rejected(self, field: str) -> None:
        """Test that a quoted "false" is not read as true."""
        with pytest.raises(InputError, match="true or false"):
            parse_params(f'task_id: T-1\n{field}: "false"\n')

    def test_null_flags_default_false(self) -> None:
        """Test that null flags count as false."""
        params = parse_params("task_id: T-1\nsuccess: null\nempty_update: null\n")
        assert params.success is False
        assert params.empty_update is False
