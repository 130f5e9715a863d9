from __future__ import annotations

import platform
import sys

from mailthread.config import Settings


def run_doctor_checks(settings: Settings) -> list[dict[str, str]]:
    checks: list[dict[str, str]] = []

    checks.append(
        {
            "check": "python_version",
            "status": "ok" if sys.version_info >= (3, 11) else "warn",
            "detail": platform.python_version(),
        }
    )

    for name, path in (("logs_dir", settings.logs_dir), ("exports_dir", settings.exports_dir)):
        checks.append(
            {
                "check": name,
                "status": "ok" if path.exists() else "warn",
                "detail": str(path),
            }
        )

    if settings.config_path is not None:
        checks.append(
            {
                "check": "config_file",
                "status": "ok" if settings.config_path.exists() else "warn",
                "detail": str(settings.config_path),
            }
        )

    try:
        options = settings.threading_options()
        checks.append(
            {
                "check": "threading_options",
                "status": "ok",
                "detail": (
                    f"subject_normalization={options.subject_normalization}, "
                    f"references_tracking={options.references_tracking}, "
                    f"participant_grouping={options.participant_grouping}, "
                    f"time_window_hours={options.time_window_hours:g}"
                ),
            }
        )
    except ValueError as exc:
        checks.append(
            {
                "check": "threading_options",
                "status": "error",
                "detail": str(exc),
            }
        )

    return checks
