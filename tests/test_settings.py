import pytest
import yaml
from pydantic import ValidationError

from txtai_thinking.settings import DEFAULT_TEMPLATE, SettingsStore, ThinkingSettings


def test_defaults_without_file(tmp_path):
    cfg = SettingsStore(str(tmp_path / "missing.yaml")).load()
    assert cfg.enabled is False
    assert cfg.api_url == "http://localhost:8000/api/search"
    assert cfg.query_messages == 2
    assert cfg.score_threshold == 0.25
    assert cfg.chunk_boundary == ""
    assert cfg.template == DEFAULT_TEMPLATE
    assert "TXTAI_TEXT" in cfg.template


def test_missing_keys_take_defaults(tmp_path):
    path = tmp_path / "partial.yaml"
    path.write_text("enabled: true\nquery_messages: 4\nsomething_else: x\n", encoding="utf-8")

    cfg = SettingsStore(str(path)).load()

    assert cfg.enabled is True
    assert cfg.query_messages == 4
    assert cfg.score_threshold == 0.25


def test_load_is_lazy_and_cached(tmp_path):
    store = SettingsStore(str(tmp_path / "s.yaml"))
    assert store.load() is store.load()


def test_update_persists(tmp_path):
    path = tmp_path / "nested" / "s.yaml"
    store = SettingsStore(str(path))
    store.update({"api_url": "http://other/api/search", "chunk_boundary": "###"})

    on_disk = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert on_disk["api_url"] == "http://other/api/search"
    assert on_disk["chunk_boundary"] == "###"

    reloaded = SettingsStore(str(path)).load()
    assert reloaded.chunk_boundary == "###"


def test_update_rejects_invalid_values(tmp_path):
    store = SettingsStore(str(tmp_path / "s.yaml"))
    with pytest.raises(ValidationError):
        store.update({"score_threshold": 2})
    assert store.load().score_threshold == 0.25


@pytest.mark.parametrize("field,value", [
    ("query_messages", -1),
    ("score_threshold", -0.1),
    ("request_timeout", 0),
])
def test_field_constraints(field, value):
    with pytest.raises(ValidationError):
        ThinkingSettings(**{field: value})
