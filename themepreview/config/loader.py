# themepreview/config/loader.py
"""
Handles loading and merging of configuration from TOML files, and building
the effective PreviewConfig from file values, an optional profile and
command line overrides.
"""
import toml
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from dataclasses import fields as dataclass_fields
import structlog

from themepreview.exceptions import ConfigError

from .settings import CacheBackendKind, PreviewConfig

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".themepreview.toml", "themepreview.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "themepreview"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

CONFIG_KEY_TO_PREVIEWCONFIG_ATTR_MAP: Dict[str, str] = {
    "library": "library_dir",
    "library_dir": "library_dir",
    "cache_backend": "cache_backend",
    "cache_path": "cache_path",
    "cache_ttl_minutes": "cache_ttl_minutes",
    "max_batch_size": "max_batch_size",
    "batch_workers": "batch_workers",
}

_INT_ATTRS = ("cache_ttl_minutes", "max_batch_size", "batch_workers")


def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file():
        return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (toml.TomlDecodeError, OSError) as e:
        log.error("config_file_load_error", path=str(file_path), error=str(e))
        return {}
    if file_path.name == "pyproject.toml":
        return data.get("tool", {}).get("themepreview", {})
    return data


def load_and_merge_configs(project_dir: Optional[Path] = None, user_config_file: Optional[Path] = None) -> Dict[str, Any]:
    """User-level settings first, then the first project file found; project values and profiles win."""
    user_config_file = user_config_file or USER_CONFIG_FILE
    merged_toml_data: Dict[str, Any] = {}
    if user_config_file.is_file():
        log.info("loading_user_global_config", path=str(user_config_file))
        merged_toml_data.update(_load_toml_file_data(user_config_file))

    base_dir = project_dir or Path.cwd()
    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = base_dir / filename
        if not candidate.is_file():
            continue
        project_settings = _load_toml_file_data(candidate)
        if not project_settings:
            continue
        log.info("loading_project_local_config", path=str(candidate))
        user_profiles = merged_toml_data.get("profiles", {})
        project_profiles = project_settings.pop("profiles", {})
        if isinstance(user_profiles, dict) and isinstance(project_profiles, dict):
            user_profiles.update(project_profiles)
            merged_toml_data["profiles"] = user_profiles
        elif isinstance(project_profiles, dict):
            merged_toml_data["profiles"] = project_profiles
        merged_toml_data.update(project_settings)
        break

    if not merged_toml_data:
        log.debug("no_configuration_files_loaded")
    return merged_toml_data


def _apply_table(options: Dict[str, Any], table: Mapping[str, Any]) -> None:
    for toml_key, attr in CONFIG_KEY_TO_PREVIEWCONFIG_ATTR_MAP.items():
        if toml_key in table:
            options[attr] = table[toml_key]


def _coerce(attr: str, value: Any) -> Any:
    if attr in ("library_dir", "cache_path"):
        return Path(str(value))
    if attr == "cache_backend":
        return value if isinstance(value, CacheBackendKind) else CacheBackendKind.from_string(str(value))
    if attr in _INT_ATTRS:
        try:
            number = int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Configuration value '{attr}' must be an integer, got {value!r}") from e
        if number < 1:
            raise ConfigError(f"Configuration value '{attr}' must be positive, got {number}")
        return number
    return value


def build_config(
    overrides: Optional[Mapping[str, Any]] = None,
    profile: Optional[str] = None,
    file_data: Optional[Mapping[str, Any]] = None,
) -> PreviewConfig:
    """Layers config file values, then the named profile, then `overrides` (None values are ignored)."""
    raw = dict(file_data) if file_data is not None else load_and_merge_configs()
    options: Dict[str, Any] = {}
    _apply_table(options, raw)

    if profile:
        profiles = raw.get("profiles", {})
        profile_values = profiles.get(profile) if isinstance(profiles, dict) else None
        if profile_values:
            log.info("applying_profile_settings", profile=profile)
            _apply_table(options, profile_values)
        else:
            log.warning("profile_not_found_in_config_files", profile_name=profile)

    valid_fields = {f.name for f in dataclass_fields(PreviewConfig) if f.init}
    for attr, value in (overrides or {}).items():
        if value is None:
            continue
        if attr not in valid_fields:
            raise ConfigError(f"Unknown configuration option '{attr}'")
        options[attr] = value

    final_kwargs = {attr: _coerce(attr, value) for attr, value in options.items()}
    config = PreviewConfig(**final_kwargs)
    log.debug("preview_config_built", **{k: str(v) for k, v in final_kwargs.items()})
    return config
