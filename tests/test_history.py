import json
import re

from history import (
    MAX_HISTORY,
    HistoryStore,
    enhance_sample_history,
    image_sample_history,
    make_entry,
)

PARAMS = {"style": "Anime", "size": "Square (1024x1024)", "quality": "HD"}


def entry(n):
    return make_entry(f"prompt {n}", PARAMS, {"image_url": "", "enhanced_prompt": str(n)})


def test_load_missing_file_is_empty(tmp_path):
    store = HistoryStore(str(tmp_path / "history.json"))
    assert store.entries == []


def test_load_corrupt_file_is_empty(tmp_path):
    path = tmp_path / "history.json"
    path.write_text("{not json", encoding="utf-8")
    assert HistoryStore(str(path)).entries == []


def test_load_non_list_is_empty(tmp_path):
    path = tmp_path / "history.json"
    path.write_text(json.dumps({"id": "x"}), encoding="utf-8")
    assert HistoryStore(str(path)).entries == []


def test_load_drops_non_object_items(tmp_path):
    path = tmp_path / "history.json"
    path.write_text(json.dumps([{"id": "a"}, "junk", 3]), encoding="utf-8")
    assert HistoryStore(str(path)).entries == [{"id": "a"}]


def test_make_entry_shape():
    item = make_entry("a cat", PARAMS, None, summary="s")
    assert re.fullmatch(r"gen-\d+-[a-z0-9]{7}", item["id"])
    assert item["prompt"] == "a cat"
    assert item["style"] == "Anime"
    assert item["result"] is None
    assert item["summary"] == "s"
    assert isinstance(item["timestamp"], int)


def test_append_caps_at_fifty_newest_first(tmp_path):
    store = HistoryStore(str(tmp_path / "history.json"))
    for n in range(55):
        store.append(entry(n))

    entries = store.entries
    assert len(entries) == MAX_HISTORY
    assert [e["prompt"] for e in entries] == [f"prompt {n}" for n in range(54, 4, -1)]


def test_append_persists(tmp_path):
    path = tmp_path / "nested" / "history.json"
    store = HistoryStore(str(path))
    first = store.append(entry(1))

    reloaded = HistoryStore(str(path))
    assert reloaded.entries == [first]


def test_entries_is_a_copy(tmp_path):
    store = HistoryStore(str(tmp_path / "history.json"))
    store.append(entry(1))
    store.entries.clear()
    assert len(store.entries) == 1


def test_clear_removes_file(tmp_path):
    path = tmp_path / "history.json"
    store = HistoryStore(str(path))
    store.append(entry(1))
    assert path.exists()

    store.clear()
    assert store.entries == []
    assert not path.exists()
    store.clear()


def test_sample_mode_round_trip_restores_persisted(tmp_path):
    path = tmp_path / "history.json"
    store = HistoryStore(str(path), sample=image_sample_history)
    store.append(entry(1))
    store.append(entry(2))
    persisted = store.entries

    store.set_sample_mode(True)
    assert store.sample_mode
    assert [e["id"] for e in store.entries] == ["sample-1", "sample-2"]
    assert json.loads(path.read_text(encoding="utf-8")) == persisted

    store.set_sample_mode(False)
    assert not store.sample_mode
    assert store.entries == persisted


def test_append_in_sample_mode_does_not_touch_file(tmp_path):
    path = tmp_path / "history.json"
    store = HistoryStore(str(path), sample=enhance_sample_history)
    store.append(entry(1))
    before = path.read_text(encoding="utf-8")

    store.replace_with_sample()
    store.append(entry(2))
    assert store.entries[0]["prompt"] == "prompt 2"
    assert path.read_text(encoding="utf-8") == before

    store.restore()
    assert [e["prompt"] for e in store.entries] == ["prompt 1"]


def test_unwritable_path_is_ignored(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    store = HistoryStore(str(blocker / "history.json"))
    store.append(entry(1))
    assert len(store.entries) == 1


def test_sample_datasets_are_well_formed():
    for sample in (image_sample_history(), enhance_sample_history()):
        assert sample
        for item in sample:
            assert {"id", "prompt", "style", "size", "quality", "result", "timestamp"} <= set(item)
