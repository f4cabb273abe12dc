"""Integration tests for the command-line entry point"""
import json

import pytest

from student_hub import config
from student_hub.main import build_parser, main, run
from student_hub.services.container import build_container
from student_hub.storage.backends.memory import MemoryBackend
from student_hub.storage.keys import StorageKey


@pytest.fixture
def file_config(monkeypatch, tmp_path):
    """Point the configured file backend at a temp directory"""
    monkeypatch.setattr(config, "STORAGE_BACKEND", "file")
    monkeypatch.setattr(config, "DATA_PATH", tmp_path / "data")
    monkeypatch.setattr(config, "STORAGE_NAMESPACE", "cli")
    return tmp_path


def test_parser_rejects_unknown_category():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["complete", "juggling"])


def test_run_complete(capsys):
    container = build_container(MemoryBackend())
    args = build_parser().parse_args(["complete", "meal", "--name", "Risotto"])

    assert run(args, container) == 0

    out = capsys.readouterr().out
    assert "+10 points" in out
    assert "First Steps" in out
    assert container.storage.get(StorageKey.MEALS_COOKED_COUNT) == 1


def test_run_status(capsys):
    container = build_container(MemoryBackend())

    assert run(build_parser().parse_args(["status"]), container) == 0

    out = capsys.readouterr().out
    assert "Student (free)" in out
    assert "Level 1" in out
    assert "ACHIEVEMENTS (0/9)" in out


def test_main_persists_between_invocations(file_config, capsys):
    assert main(["complete", "study"]) == 0
    assert main(["status"]) == 0

    out = capsys.readouterr().out
    assert "First Steps ✅" in out
    assert (file_config / "data" / "cli.json").exists()


def test_export_reset_import(file_config, capsys):
    backup = file_config / "backup.json"
    main(["complete", "cleaning"])

    assert main(["export", str(backup)]) == 0
    exported = json.loads(backup.read_text(encoding="utf-8"))
    assert exported["CLEANING_TASKS_COUNT"] == 1

    assert main(["reset"]) == 0
    assert main(["import", str(backup)]) == 0

    container = build_container()
    assert container.storage.get(StorageKey.CLEANING_TASKS_COUNT) == 1
    assert container.engine.load_state().total_points == exported["PROGRESSION"]["total_points"]


def test_import_missing_file(file_config):
    assert main(["import", str(file_config / "missing.json")]) == 1


def test_invalid_config_exit_code(monkeypatch):
    monkeypatch.setattr(config, "STORAGE_BACKEND", "cloud")
    assert main(["status"]) == 2
