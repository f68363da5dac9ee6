import pytest

from html_serializer import Config, load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "HTML_SERIALIZER_DEFAULT_BLOCK",
        "HTML_SERIALIZER_MAX_DEPTH",
        "HTML_SERIALIZER_UNKNOWN_ELEMENTS",
        "HTML_SERIALIZER_PARSER",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = Config()
    assert config.default_block == "paragraph"
    assert config.max_depth == 128
    assert config.unknown_elements == "drop"
    assert config.parser == "html.parser"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("HTML_SERIALIZER_MAX_DEPTH", "42")
    monkeypatch.setenv("HTML_SERIALIZER_UNKNOWN_ELEMENTS", "UNWRAP")
    config = Config()
    assert config.max_depth == 42
    assert config.unknown_elements == "unwrap"


def test_env_ignored_when_disabled(monkeypatch):
    monkeypatch.setenv("HTML_SERIALIZER_MAX_DEPTH", "42")
    assert Config(use_env=False).max_depth == 128


def test_explicit_values_win_over_env(monkeypatch):
    monkeypatch.setenv("HTML_SERIALIZER_MAX_DEPTH", "42")
    monkeypatch.setenv("HTML_SERIALIZER_DEFAULT_BLOCK", "quote")
    config = Config(max_depth=5)
    assert config.max_depth == 5
    assert config.default_block == "quote"


def test_yaml_values_win_over_env(tmp_path, monkeypatch):
    monkeypatch.setenv("HTML_SERIALIZER_UNKNOWN_ELEMENTS", "unwrap")
    path = tmp_path / "serializer.yaml"
    path.write_text("unknown_elements: drop\n", encoding="utf-8")
    assert load_config(path).unknown_elements == "drop"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_depth": 0},
        {"max_depth": "deep"},
        {"unknown_elements": "explode"},
        {"default_block": ""},
    ],
)
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        Config(use_env=False, **kwargs)


def test_load_config_from_yaml(tmp_path):
    path = tmp_path / "serializer.yaml"
    path.write_text("max_depth: 64\nunknown_elements: unwrap\n", encoding="utf-8")
    config = load_config(path)
    assert config.max_depth == 64
    assert config.unknown_elements == "unwrap"
    assert config.default_block == "paragraph"


def test_load_config_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == Config()


def test_load_config_without_path():
    assert load_config() == Config()


def test_load_config_rejects_unknown_keys(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("max_depth: 10\ncolour: blue\n", encoding="utf-8")
    with pytest.raises(ValueError, match="colour"):
        load_config(path)


def test_load_config_rejects_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        load_config(path)
