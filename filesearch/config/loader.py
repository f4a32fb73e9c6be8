"""
Handles loading, merging, and saving of configurations from/to TOML files.
"""
import toml
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import asdict, fields as dataclass_fields, MISSING
from enum import Enum
import structlog

from filesearch.exceptions import ConfigError

from .settings import OutputFormat, RunOptions

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".filesearch.toml", "filesearch.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "filesearch"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

# toml key -> RunOptions attribute
CONFIG_KEY_TO_OPTION_ATTR_MAP: Dict[str, str] = {
    "root": "root",
    "included_filenames": "included_filenames",
    "included_extensions": "included_extensions",
    "excluded_dirs": "excluded_dirs",
    "output_format": "output_format",
    "output_file": "output_file",
    "console_show_summary": "console_show_summary",
}

# always written on save, even when equal to the default, so a profile pins its filters.
ALWAYS_SAVE_ATTRS = ("included_filenames", "included_extensions", "excluded_dirs")

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file():
        return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (OSError, toml.TomlDecodeError) as e:
        log.error("config_file_load_error", path=str(file_path), error=str(e))
        return {}
    return data.get("tool", {}).get("filesearch", {}) if file_path.name == "pyproject.toml" else data

def load_and_merge_configs(cwd: Optional[Path] = None) -> Dict[str, Any]:
    # user config first, then the first project config found in cwd; project values win.
    cwd = cwd if cwd is not None else Path.cwd()
    merged_toml_data: Dict[str, Any] = {}
    if USER_CONFIG_FILE.is_file():
        log.info("loading_user_global_config", path=str(USER_CONFIG_FILE))
        merged_toml_data.update(_load_toml_file_data(USER_CONFIG_FILE))

    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = cwd / filename
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
            if user_profiles:
                merged_toml_data["profiles"] = user_profiles
        elif project_profiles:
            # a malformed profiles value is kept so options_from_toml can reject it.
            merged_toml_data["profiles"] = project_profiles
        merged_toml_data.update(project_settings)
        break

    if not merged_toml_data:
        log.debug("no_configuration_files_loaded")
    return merged_toml_data

def _coerce_option_value(attr: str, value: Any) -> Any:
    # converts raw toml values into the types RunOptions expects.
    if attr in ("root", "output_file"):
        if not isinstance(value, str):
            raise ConfigError(f"config key '{attr}' must be a path string, got {type(value).__name__}")
        return Path(value) if value else None
    if attr == "excluded_dirs":
        return tuple(Path(v) for v in _as_list(attr, value))
    if attr in ("included_filenames", "included_extensions"):
        return tuple(str(v) for v in _as_list(attr, value))
    if attr == "output_format":
        if not isinstance(value, str):
            raise ConfigError(f"config key '{attr}' must be a string, got {type(value).__name__}")
        return OutputFormat.from_string(value)
    if attr == "console_show_summary":
        return bool(value)
    return value

def _as_list(attr: str, value: Any) -> list:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ConfigError(f"config key '{attr}' must be a string or a list, got {type(value).__name__}")

def options_from_toml(raw_config: Dict[str, Any], profile_name: Optional[str] = None) -> Dict[str, Any]:
    # flattens top-level settings and the named profile into RunOptions keyword values.
    values: Dict[str, Any] = {}
    for toml_key, attr in CONFIG_KEY_TO_OPTION_ATTR_MAP.items():
        if toml_key in raw_config:
            values[attr] = _coerce_option_value(attr, raw_config[toml_key])

    if profile_name:
        profiles = raw_config.get("profiles", {})
        if not isinstance(profiles, dict):
            raise ConfigError(f"config key 'profiles' must be a table, got {type(profiles).__name__}")
        profile_values = profiles.get(profile_name, {})
        if not isinstance(profile_values, dict):
            raise ConfigError(f"profile '{profile_name}' must be a table, got {type(profile_values).__name__}")
        if profile_values:
            log.info("applying_profile_settings", profile=profile_name)
            for toml_key, attr in CONFIG_KEY_TO_OPTION_ATTR_MAP.items():
                if toml_key in profile_values:
                    values[attr] = _coerce_option_value(attr, profile_values[toml_key])
        else:
            log.warning("profile_not_found_in_config_files", profile_name=profile_name)
    return values

def save_config_to_profile(options_to_save: RunOptions, profile_name: str, cwd: Optional[Path] = None) -> bool:
    cwd = cwd if cwd is not None else Path.cwd()
    target_toml_path = cwd / ".filesearch.toml"
    if not target_toml_path.exists():
        alt_path = cwd / "filesearch.toml"
        if alt_path.exists():
            target_toml_path = alt_path
    log.info("attempting_to_save_profile", profile=profile_name, path=str(target_toml_path))

    profile_data: Dict[str, Any] = {}
    options_dict = asdict(options_to_save)
    option_fields = {f.name: f for f in dataclass_fields(RunOptions)}

    for toml_key, attr in CONFIG_KEY_TO_OPTION_ATTR_MAP.items():
        value = options_dict[attr]
        field_def = option_fields[attr]
        default_val = field_def.default_factory() if field_def.default_factory is not MISSING else field_def.default
        if value == default_val and attr not in ALWAYS_SAVE_ATTRS:
            continue

        if isinstance(value, Path):
            profile_data[toml_key] = str(value)
        elif isinstance(value, (list, tuple)):
            profile_data[toml_key] = [str(v) for v in value]
        elif isinstance(value, Enum):
            profile_data[toml_key] = value.value
        elif value is not None:
            profile_data[toml_key] = value

    if not profile_data:
        log.info("no_options_to_save_for_profile", profile=profile_name)
        return False

    existing_data: Dict[str, Any] = {}
    if target_toml_path.exists():
        try:
            existing_data = toml.load(target_toml_path)
        except (OSError, toml.TomlDecodeError) as e:
            raise ConfigError(f"Could not read existing TOML {target_toml_path} to save profile: {e}") from e

    if profile_name.upper() == "DEFAULT":
        profiles_bak = existing_data.pop("profiles", None)
        existing_data.update(profile_data)
        if profiles_bak is not None:
            existing_data["profiles"] = profiles_bak
    else:
        existing_profiles = existing_data.setdefault("profiles", {})
        if not isinstance(existing_profiles, dict):
            raise ConfigError(f"Cannot save profile '{profile_name}': 'profiles' in {target_toml_path} is not a table")
        existing_profiles[profile_name] = profile_data

    try:
        with target_toml_path.open("w", encoding="utf-8") as f:
            toml.dump(existing_data, f)
    except OSError as e:
        raise ConfigError(f"Error writing profile '{profile_name}' to {target_toml_path}: {e}") from e
    log.info("profile_saved_successfully", profile=profile_name, path=str(target_toml_path))
    return True
