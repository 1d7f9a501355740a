from __future__ import annotations

import json

from permflow.permission import InMemoryHistoryStore, JsonFileHistoryStore

CAMERA = "android.permission.CAMERA"
MIC = "android.permission.RECORD_AUDIO"


def test_in_memory_store_defaults_to_not_requested() -> None:
    store = InMemoryHistoryStore()
    assert store.was_requested(CAMERA) is False

    store.mark_requested(CAMERA)
    store.mark_requested(MIC)
    assert store.snapshot() == {CAMERA: True, MIC: True}

    store.clear(CAMERA)
    assert store.was_requested(CAMERA) is False
    assert store.was_requested(MIC) is True

    store.clear_all()
    assert store.snapshot() == {}


def test_json_store_persists_flat_prefixed_keys(tmp_path) -> None:
    path = tmp_path / "state" / "history.json"
    store = JsonFileHistoryStore(str(path))

    store.mark_requested(CAMERA)

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "permission_requested_android.permission.CAMERA": True,
    }
    assert JsonFileHistoryStore(str(path)).was_requested(CAMERA) is True


def test_json_store_clear_and_clear_all(tmp_path) -> None:
    path = tmp_path / "history.json"
    store = JsonFileHistoryStore(str(path))
    store.mark_requested(CAMERA)
    store.mark_requested(MIC)

    store.clear(CAMERA)
    reopened = JsonFileHistoryStore(str(path))
    assert reopened.was_requested(CAMERA) is False
    assert reopened.was_requested(MIC) is True

    store.clear_all()
    assert json.loads(path.read_text(encoding="utf-8")) == {}


def test_json_store_treats_corrupt_file_as_empty(tmp_path, isolated_logs) -> None:
    path = tmp_path / "history.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonFileHistoryStore(str(path))

    assert store.was_requested(CAMERA) is False

    store.mark_requested(CAMERA)
    assert store.was_requested(CAMERA) is True

    log_text = (isolated_logs / "permflow_test.jsonl").read_text(encoding="utf-8")
    assert "history_read_failed" in log_text


def test_json_store_ignores_non_object_file(tmp_path) -> None:
    path = tmp_path / "history.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    assert JsonFileHistoryStore(str(path)).was_requested(CAMERA) is False


def test_json_store_write_failure_is_not_raised(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    store = JsonFileHistoryStore(str(blocker / "history.json"))

    store.mark_requested(CAMERA)

    # The write failed but the in-process view still reflects it
    assert store.was_requested(CAMERA) is True
    assert not (blocker / "history.json").exists()
