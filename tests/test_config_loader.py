from pathlib import Path

import pytest
import toml

from themepreview.config.loader import build_config, load_and_merge_configs
from themepreview.config.settings import CacheBackendKind, PreviewConfig
from themepreview.exceptions import ConfigError


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    proj = tmp_path / "shop-theme"
    proj.mkdir()
    (proj / ".themepreview.toml").write_text(toml.dumps({
        "library": "components",
        "cache_ttl_minutes": 15,
        "profiles": {
            "ci": {"cache_backend": "sqlite", "cache_path": "build/previews.db", "batch_workers": 2},
        },
    }))
    return proj


def test_defaults_without_any_files(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = build_config()
    assert config == PreviewConfig()
    assert config.cache_backend is CacheBackendKind.MEMORY
    assert (config.cache_ttl_minutes, config.max_batch_size, config.batch_workers) == (60, 20, 8)


def test_project_file_and_profile_are_layered(project_dir, monkeypatch):
    monkeypatch.chdir(project_dir)
    config = build_config(profile="ci")
    assert config.library_dir == Path("components")
    assert config.cache_ttl_minutes == 15
    assert config.cache_backend is CacheBackendKind.SQLITE
    assert config.cache_path == Path("build/previews.db")
    assert config.batch_workers == 2


def test_overrides_win_and_none_is_ignored(project_dir, monkeypatch):
    monkeypatch.chdir(project_dir)
    config = build_config({"cache_ttl_minutes": 90, "library_dir": None}, profile="ci")
    assert config.cache_ttl_minutes == 90
    assert config.library_dir == Path("components")


def test_unknown_profile_falls_back_to_file_values(project_dir, monkeypatch):
    monkeypatch.chdir(project_dir)
    assert build_config(profile="nope").cache_backend is CacheBackendKind.MEMORY


def test_user_file_is_overridden_by_project_file(project_dir, tmp_path, monkeypatch):
    user_file = tmp_path / "user.toml"
    user_file.write_text(toml.dumps({"cache_ttl_minutes": 5, "max_batch_size": 10, "profiles": {"mine": {"batch_workers": 4}}}))
    merged = load_and_merge_configs(project_dir=project_dir, user_config_file=user_file)
    assert merged["cache_ttl_minutes"] == 15
    assert merged["max_batch_size"] == 10
    assert set(merged["profiles"]) == {"mine", "ci"}


def test_pyproject_tool_table_is_read(tmp_path):
    (tmp_path / "pyproject.toml").write_text(toml.dumps({"tool": {"themepreview": {"max_batch_size": 5}}, "project": {"name": "x"}}))
    assert load_and_merge_configs(project_dir=tmp_path) == {"max_batch_size": 5}


def test_invalid_toml_is_ignored(tmp_path):
    (tmp_path / "themepreview.toml").write_text("this is = = not toml")
    assert load_and_merge_configs(project_dir=tmp_path) == {}


def test_invalid_numbers_raise_config_error():
    with pytest.raises(ConfigError, match="cache_ttl_minutes"):
        build_config(file_data={"cache_ttl_minutes": "soon"})
    with pytest.raises(ConfigError, match="positive"):
        build_config(file_data={"batch_workers": 0})


def test_unknown_override_raises_config_error():
    with pytest.raises(ConfigError):
        build_config({"colour": "blue"}, file_data={})


def test_cache_backend_from_string_falls_back_to_memory():
    assert CacheBackendKind.from_string("SQLite") is CacheBackendKind.SQLITE
    assert CacheBackendKind.from_string("redis") is CacheBackendKind.MEMORY
    assert CacheBackendKind.from_string(None) is CacheBackendKind.MEMORY
