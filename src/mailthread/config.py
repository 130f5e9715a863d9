from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from mailthread.core.threads import ThreadingOptions

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}

# Keys of the "threading" section in a JSON config file.
CONFIG_FILE_KEYS = {
    "subjectNormalization": "subject_normalization",
    "referencesTracking": "references_tracking",
    "participantGrouping": "participant_grouping",
    "timeWindowHours": "time_window_hours",
}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return _parse_bool(name, raw)


def _env_hours(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number of hours, got {raw!r}") from exc


def _file_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _parse_bool(key, value)
    raise ValueError(f"{key} in config file must be a boolean, got {value!r}")


def _file_hours(key: str, value: Any) -> float:
    # bool is an int subclass; true must not read as one hour
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"{key} in config file must be a number of hours, got {value!r}")
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{key} in config file must be a number of hours, got {value!r}") from exc


def _load_config_file(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8-sig") as fh:
        payload = json.load(fh)
    section = payload.get("threading", {}) if isinstance(payload, dict) else {}
    if not isinstance(section, dict):
        raise ValueError(f"'threading' section in {path} must be an object")

    values: dict[str, Any] = {}
    for file_key, attr in CONFIG_FILE_KEYS.items():
        if file_key in section:
            key = file_key
        elif attr in section:
            key = attr
        else:
            continue
        if attr == "time_window_hours":
            values[attr] = _file_hours(key, section[key])
        else:
            values[attr] = _file_bool(key, section[key])
    return values


@dataclass(slots=True)
class Settings:
    root_dir: Path
    logs_dir: Path
    exports_dir: Path
    config_path: Path | None = None
    subject_normalization: bool = True
    references_tracking: bool = True
    participant_grouping: bool = True
    time_window_hours: float = 24
    console_log_level: str = "WARNING"

    @classmethod
    def load(cls, base_dir: Path | None = None, config_path: Path | None = None) -> Settings:
        load_dotenv(override=False)

        root_env = os.getenv("MAILTHREAD_HOME")
        root_dir = Path(root_env).expanduser().resolve() if root_env else (base_dir or Path.cwd()).resolve()

        logs_dir = Path(os.getenv("MAILTHREAD_LOG_DIR", root_dir / "logs")).expanduser().resolve()
        exports_dir = Path(os.getenv("MAILTHREAD_EXPORT_DIR", root_dir / "exports")).expanduser().resolve()

        config_env = os.getenv("MAILTHREAD_CONFIG")
        if config_path is None and config_env:
            config_path = Path(config_env)
        if config_path is not None:
            config_path = config_path.expanduser().resolve()

        file_values = _load_config_file(config_path) if config_path and config_path.exists() else {}
        defaults = ThreadingOptions()

        subject_normalization = _env_bool(
            "MAILTHREAD_SUBJECT_NORMALIZATION",
            file_values.get("subject_normalization", defaults.subject_normalization),
        )
        references_tracking = _env_bool(
            "MAILTHREAD_REFERENCES_TRACKING",
            file_values.get("references_tracking", defaults.references_tracking),
        )
        participant_grouping = _env_bool(
            "MAILTHREAD_PARTICIPANT_GROUPING",
            file_values.get("participant_grouping", defaults.participant_grouping),
        )
        time_window_hours = _env_hours(
            "MAILTHREAD_TIME_WINDOW_HOURS",
            file_values.get("time_window_hours", defaults.time_window_hours),
        )

        console_log_level = os.getenv("MAILTHREAD_CONSOLE_LOG_LEVEL", "WARNING").strip().upper()

        return cls(
            root_dir=root_dir,
            logs_dir=logs_dir,
            exports_dir=exports_dir,
            config_path=config_path,
            subject_normalization=subject_normalization,
            references_tracking=references_tracking,
            participant_grouping=participant_grouping,
            time_window_hours=time_window_hours,
            console_log_level=console_log_level,
        )

    def threading_options(self, **overrides: Any) -> ThreadingOptions:
        values = {
            "subject_normalization": self.subject_normalization,
            "references_tracking": self.references_tracking,
            "participant_grouping": self.participant_grouping,
            "time_window_hours": self.time_window_hours,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return ThreadingOptions(**values)

    def ensure_directories(self) -> None:
        for path in [self.root_dir, self.logs_dir, self.exports_dir]:
            path.mkdir(parents=True, exist_ok=True)
