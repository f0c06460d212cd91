# tests/test_task_codec.py

from __future__ import annotations

from pathlib import Path

import pytest

from task_tracker.tasks import task_codec
from task_tracker.tasks.task_codec import (
    TaskFileCorrupt,
    decode_tasks,
    encode_tasks,
    load_tasks,
    save_tasks,
)
from task_tracker.tasks.task_models import Task, TaskStatus


def test_encode_empty_list() -> None:
    assert encode_tasks([]) == "[]\n"


def test_encode_layout_and_field_order() -> None:
    text = encode_tasks(
        [
            Task(1, "Buy milk", TaskStatus.TODO),
            Task(2, "Write spec", TaskStatus.IN_PROGRESS),
        ]
    )
    assert text == (
        "[\n"
        "  {\n"
        '    "id": 1,\n'
        '    "description": "Buy milk",\n'
        '    "status": "TODO"\n'
        "  },\n"
        "  {\n"
        '    "id": 2,\n'
        '    "description": "Write spec",\n'
        '    "status": "IN_PROGRESS"\n'
        "  }\n"
        "]\n"
    )


def test_encode_escapes_quotes_and_backslashes() -> None:
    text = encode_tasks([Task(1, 'say "hi" \\ now', TaskStatus.DONE)])
    assert '"description": "say \\"hi\\" \\\\ now"' in text


def test_round_trip_preserves_awkward_descriptions() -> None:
    tasks = [
        Task(1, 'He said "hello"', TaskStatus.TODO),
        Task(2, "C:\\temp\\new", TaskStatus.IN_PROGRESS),
        Task(3, 'ends with backslash \\', TaskStatus.DONE),
        Task(4, "braces {inside}, and commas", TaskStatus.TODO),
        Task(5, "line one\nline two\tTabbed", TaskStatus.TODO),
        Task(6, "Buy 2% milk ✓ café", TaskStatus.DONE),
        Task(10, '\\"', TaskStatus.TODO),
    ]
    assert decode_tasks(encode_tasks(tasks)) == tasks


@pytest.mark.parametrize("text", ["", "   \n", "[]", "[]\n", "[ \n ]"])
def test_decode_empty_forms(text: str) -> None:
    assert decode_tasks(text) == []


def test_decode_compact_document() -> None:
    text = '[{"id":3,"description":"x","status":"DONE"},{"id":1,"description":"y","status":"TODO"}]'
    assert decode_tasks(text) == [
        Task(3, "x", TaskStatus.DONE),
        Task(1, "y", TaskStatus.TODO),
    ]


def test_decode_is_lenient_with_hand_edits() -> None:
    text = """
    [
      { id: 2, description: Buy milk , status: in-progress },
      {"status": "done", "note": "ignored", "id": "7", "description": "Reordered"},
    ]
    """
    assert decode_tasks(text) == [
        Task(2, "Buy milk", TaskStatus.IN_PROGRESS),
        Task(7, "Reordered", TaskStatus.DONE),
    ]


def test_decode_bare_value_may_contain_quotes() -> None:
    text = "[{ id: 1, description: 5\" nails, status: TODO }]"
    assert decode_tasks(text) == [Task(1, '5" nails', TaskStatus.TODO)]


def test_decode_unescapes_quotes() -> None:
    text = '[{"id": 1, "description": "say \\"hi\\"", "status": "TODO"}]'
    assert decode_tasks(text)[0].description == 'say "hi"'


def test_decode_keeps_unknown_escapes_literally() -> None:
    text = '[{"id": 1, "description": "C:\\dir", "status": "TODO"}]'
    assert decode_tasks(text)[0].description == "C:\\dir"


@pytest.mark.parametrize(
    "text",
    [
        "not json at all",
        "[",
        '{"id": 1, "description": "x", "status": "TODO"}',
        '[{"id": 1, "description": "x"}]',
        '[{"description": "x", "status": "TODO"}]',
        '[{"id": 1, "status": "TODO"}]',
        '[{"id": 0, "description": "x", "status": "TODO"}]',
        '[{"id": -3, "description": "x", "status": "TODO"}]',
        '[{"id": "abc", "description": "x", "status": "TODO"}]',
        '[{"id": 1, "description": "x", "status": "LATER"}]',
        '[{"id": 1, "description": "   ", "status": "TODO"}]',
        '[{"id": 1, "description": "a", "status": "TODO"}, {"id": 1, "description": "b", "status": "DONE"}]',
        '[{"id": 1, "description": "a", "status": "TODO"} {"id": 2, "description": "b", "status": "TODO"}]',
        '[{"id": 1, "description": "a", "status": "TODO"}, 42]',
        '[{"id": 1, "description": {"nested": 1}, "status": "TODO"}]',
        '[{"id": 1, "description": "never closed, "status": "TODO"}]',
        '[{"id": 1, "id": 2, "description": "a", "status": "TODO"}]',
        '[{"id": 1, "description": "a" trailing, "status": "TODO"}]',
        '[{"id": 1, "description": "a", "status": "TODO"]',
        '[{"id": ' + "9" * 5000 + ', "description": "x", "status": "TODO"}]',
    ],
)
def test_decode_rejects_corrupt_documents(text: str) -> None:
    with pytest.raises(TaskFileCorrupt):
        decode_tasks(text)


def test_load_missing_file_is_empty(tmp_path: Path) -> None:
    assert load_tasks(tmp_path / "tasks.json") == []


def test_load_non_utf8_is_corrupt(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_bytes(b"[\xff\xfe]")
    with pytest.raises(TaskFileCorrupt):
        load_tasks(path)


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text("old contents", "utf-8")
    tasks = [Task(1, 'quote " inside', TaskStatus.TODO)]

    save_tasks(path, tasks)

    assert load_tasks(path) == tasks
    assert path.read_text("utf-8").startswith("[\n")
    assert not (tmp_path / "tasks.json.tmp").exists()


def test_failed_save_keeps_previous_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "tasks.json"
    save_tasks(path, [Task(1, "keep me", TaskStatus.TODO)])
    before = path.read_text("utf-8")

    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(task_codec.os, "replace", boom)
    with pytest.raises(OSError):
        save_tasks(path, [Task(2, "lost", TaskStatus.TODO)])

    assert path.read_text("utf-8") == before
    assert not (tmp_path / "tasks.json.tmp").exists()


def test_save_into_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        save_tasks(tmp_path / "missing" / "tasks.json", [])


def test_load_ignores_utf8_bom(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_bytes(b"\xef\xbb\xbf" + encode_tasks([Task(1, "edited in notepad", TaskStatus.TODO)]).encode("utf-8"))

    assert load_tasks(path) == [Task(1, "edited in notepad", TaskStatus.TODO)]


def test_unencodable_description_leaves_file_untouched(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    save_tasks(path, [Task(1, "keep me", TaskStatus.TODO)])
    before = path.read_bytes()

    with pytest.raises(UnicodeEncodeError):
        save_tasks(path, [Task(1, "bad \udcff byte", TaskStatus.TODO)])

    assert path.read_bytes() == before
    assert not (tmp_path / "tasks.json.tmp").exists()
