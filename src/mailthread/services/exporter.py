from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from mailthread.core.threads import EmailThread

SUPPORTED_FORMATS = {"csv", "xlsx"}


def thread_summary(thread: EmailThread) -> dict[str, Any]:
    return {
        "id": thread.id,
        "subject": thread.subject,
        "messageCount": thread.message_count,
        "participants": list(thread.participants),
        "lastMessageAt": thread.last_message_at.isoformat(),
        "messageIds": thread.message_ids,
    }


def export_threads(threads: list[EmailThread], formats: list[str], out_dir: Path) -> list[Path]:
    unknown = [item for item in formats if item not in SUPPORTED_FORMATS]
    if unknown:
        raise ValueError(f"Unsupported export formats: {unknown}")

    out_dir.mkdir(parents=True, exist_ok=True)
    rows = []
    for thread in threads:
        summary = thread_summary(thread)
        rows.append(
            {
                "thread_id": summary["id"],
                "subject": summary["subject"],
                "message_count": summary["messageCount"],
                "participants": ", ".join(summary["participants"]),
                "last_message_at": summary["lastMessageAt"],
                "message_ids": ", ".join(summary["messageIds"]),
            }
        )
    df = pd.DataFrame(
        rows,
        columns=["thread_id", "subject", "message_count", "participants", "last_message_at", "message_ids"],
    )

    created_files: list[Path] = []
    if "csv" in formats:
        csv_path = (out_dir / "mailthread_threads.csv").resolve()
        df.to_csv(csv_path, index=False, encoding="utf-8-sig")
        created_files.append(csv_path)

    if "xlsx" in formats:
        xlsx_path = (out_dir / "mailthread_threads.xlsx").resolve()
        with pd.ExcelWriter(xlsx_path, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="threads")
        created_files.append(xlsx_path)

    return created_files
