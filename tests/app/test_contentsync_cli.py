from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

import pytest

from contentsync import main as main_module
from contentsync.domain.types import (
    GroupOutcome,
    GroupState,
    Operation,
    ReconciliationResult,
)

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "sync.env"
    path.write_text("", encoding="utf-8")
    return path


def _result(operation: Operation, *states: GroupState) -> ReconciliationResult:
    return ReconciliationResult(
        operation=operation,
        outcomes=[GroupOutcome(common_id=index, state=state) for index, state in enumerate(states)],
    )


def test_operation_passes_filter_and_locale(
    monkeypatch: pytest.MonkeyPatch, config_file: Path
) -> None:
    captured: dict[str, object] = {}

    def fake_run(operation: Operation, **kwargs: object) -> ReconciliationResult:
        captured["operation"] = operation
        captured.update(kwargs)
        return _result(operation, GroupState.APPLIED)

    monkeypatch.setattr(main_module, "run_operation", fake_run)

    main_module.main(
        [
            "insert",
            "mapping.json",
            str(config_file),
            "contentlang='de-DE'",
            "--delete-locale",
            "fr-FR",
        ]
    )

    assert captured["operation"] is Operation.INSERT
    assert captured["mapping_path"] == "mapping.json"
    assert captured["where"] == ("contentlang", "de-DE")
    assert captured["delete_locale"] == "fr-FR"


def test_operation_without_filter(monkeypatch: pytest.MonkeyPatch, config_file: Path) -> None:
    captured: dict[str, object] = {}

    def fake_run(operation: Operation, **kwargs: object) -> ReconciliationResult:
        captured.update(kwargs)
        return _result(operation)

    monkeypatch.setattr(main_module, "run_operation", fake_run)

    main_module.main(["delete", "mapping.json", str(config_file)])

    assert captured["where"] is None
    assert captured["delete_locale"] is None


def test_invalid_filter_exits_with_usage_error(
    monkeypatch: pytest.MonkeyPatch, config_file: Path
) -> None:
    def fake_run(*_: object, **__: object) -> ReconciliationResult:
        raise AssertionError("must not run")

    monkeypatch.setattr(main_module, "run_operation", fake_run)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["update", "mapping.json", str(config_file), "no-equals-sign"])

    assert excinfo.value.code == 2


def test_unknown_operation_exits_with_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["upsert", "mapping.json", "sync.env"])

    assert excinfo.value.code == 2


def test_failed_groups_exit_with_error(monkeypatch: pytest.MonkeyPatch, config_file: Path) -> None:
    def fake_run(operation: Operation, **_: object) -> ReconciliationResult:
        return _result(operation, GroupState.APPLIED, GroupState.FAILED)

    monkeypatch.setattr(main_module, "run_operation", fake_run)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["publish", "mapping.json", str(config_file)])

    assert excinfo.value.code == 1


def test_missing_config_file_exits_with_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["draft", "mapping.json", str(tmp_path / "absent.env")])

    assert excinfo.value.code == 1


def test_map_command_generates_mapping(monkeypatch: pytest.MonkeyPatch, config_file: Path) -> None:
    captured: dict[str, object] = {}

    def fake_generate(**kwargs: object) -> Path:
        captured.update(kwargs)
        return config_file

    monkeypatch.setattr(main_module, "generate_mapping", fake_generate)

    main_module.main(["map", "mapping.json", str(config_file)])

    assert captured == {"mapping_path": "mapping.json"}


def test_cli_reads_the_named_config_file_only(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("CONTENTFUL_CONTENT_TYPE", "placeholder")
    monkeypatch.delenv("CONTENTFUL_CONTENT_TYPE")
    (tmp_path / ".env").write_text("CONTENTFUL_CONTENT_TYPE=from-dotenv\n", encoding="utf-8")
    config_path = tmp_path / "sync.env"
    config_path.write_text("CONTENTFUL_CONTENT_TYPE=from-config\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    captured: dict[str, str | None] = {}

    def fake_run(operation: Operation, **_: object) -> ReconciliationResult:
        captured["content_type"] = os.environ.get("CONTENTFUL_CONTENT_TYPE")
        return _result(operation)

    monkeypatch.setattr(main_module, "run_operation", fake_run)
    monkeypatch.setattr(main_module, "signal", lambda *_: None)
    monkeypatch.setattr(sys, "argv", ["contentsync", "update", "mapping.json", str(config_path)])

    main_module.cli()

    assert captured["content_type"] == "from-config"
