# =============================================================================
# tests/unit/test_settings_store.py
# =============================================================================

import pytest

from racf_core.errors import StorageError
from racf_core.offline.settings_store import SettingsStore


def test_missing_file_returns_default(settings_store):
    assert settings_store.get("flag", "default") == "default"


def test_set_persists_across_instances(tmp_path):
    SettingsStore(tmp_path / "settings.json").set("flag", True)
    assert SettingsStore(tmp_path / "settings.json").get("flag") is True


def test_set_keeps_other_keys(settings_store):
    settings_store.set("a", 1)
    settings_store.set("b", 2)
    assert settings_store.get("a") == 1


def test_corrupt_file_raises_on_read(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError):
        SettingsStore(path).get("flag")


def test_set_replaces_corrupt_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2]", encoding="utf-8")
    store = SettingsStore(path)

    store.set("flag", True)

    assert store.get("flag") is True


def test_unwritable_location_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")

    with pytest.raises(StorageError) as exc_info:
        SettingsStore(blocker / "settings.json").set("flag", True)
    assert exc_info.value.details["operation"] == "write"
