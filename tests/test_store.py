import logging

from drill_game.store import JsonFileStore, MemoryStore, SavedState


def test_missing_file_loads_defaults(tmp_path):
    store = JsonFileStore(tmp_path / "state.json")
    assert store.load() == SavedState(level=1, streak=0)


def test_round_trip(tmp_path):
    store = JsonFileStore(tmp_path / "state.json")
    store.save(6, 12)
    assert JsonFileStore(tmp_path / "state.json").load() == SavedState(level=6, streak=12)


def test_malformed_file_loads_defaults(tmp_path, caplog):
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        assert JsonFileStore(path).load() == SavedState()
    assert "could not read state" in caplog.text


def test_out_of_range_values_fall_back(tmp_path):
    path = tmp_path / "state.json"
    path.write_text('{"level": 42, "streak": -3}', encoding="utf-8")
    assert JsonFileStore(path).load() == SavedState()
    path.write_text('{"level": "7", "streak": 2}', encoding="utf-8")
    assert JsonFileStore(path).load() == SavedState(level=1, streak=2)
    path.write_text("[1, 2]", encoding="utf-8")
    assert JsonFileStore(path).load() == SavedState()


def test_write_failure_is_swallowed(tmp_path, caplog):
    store = JsonFileStore(tmp_path / "missing-dir" / "state.json")
    with caplog.at_level(logging.WARNING):
        store.save(3, 1)
    assert "could not write state" in caplog.text
    assert store.load() == SavedState()


def test_memory_store():
    store = MemoryStore()
    assert store.load() == SavedState()
    store.save(11, 4)
    assert store.load() == SavedState(level=11, streak=4)
