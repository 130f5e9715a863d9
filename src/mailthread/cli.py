from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import NoReturn

import typer
from rich import print
from rich.markup import escape
from rich.table import Table

from mailthread.config import Settings
from mailthread.core.ids import random_thread_id, stable_thread_id
from mailthread.core.logging import configure_logging, get_logger
from mailthread.core.threads import (
    EmailMessage,
    EmailProcessingError,
    EmailThread,
    ThreadingOptions,
    ThreadingService,
    normalize_subject,
)
from mailthread.parsers import load_messages, messages_from_json, parse_message
from mailthread.services import export_threads, run_doctor_checks, thread_summary

app = typer.Typer(no_args_is_help=True, help="mailthread CLI: group email messages into conversation threads")

CONFIG_OPTION = typer.Option(None, "--config", help="JSON config file with a 'threading' section")
FILE_OPTION = typer.Option(None, "--file", help="JSON file with a list of messages")
DATA_OPTION = typer.Option(None, "--data", help="Messages as a JSON string")
SUBJECT_OPTION = typer.Option(
    None, "--subject-normalization/--no-subject-normalization", help="Match on normalized subjects"
)
REFERENCES_OPTION = typer.Option(None, "--references/--no-references", help="Match on reply headers")
PARTICIPANTS_OPTION = typer.Option(
    None, "--participants/--no-participants", help="Require shared participants for subject matches"
)
WINDOW_OPTION = typer.Option(None, "--time-window-hours", min=1, max=168, help="Subject match window (1-168)")
STABLE_IDS_OPTION = typer.Option(False, "--stable-ids", help="Derive thread ids from the first Message-ID")


def _load_settings(config: Path | None = None) -> Settings:
    try:
        settings = Settings.load(config_path=config)
        settings.ensure_directories()
    except (ValueError, OSError) as exc:
        _fail(exc)
    return settings


def _build_options(
    settings: Settings,
    subject_normalization: bool | None,
    references: bool | None,
    participants: bool | None,
    time_window_hours: float | None,
) -> ThreadingOptions:
    try:
        return settings.threading_options(
            subject_normalization=subject_normalization,
            references_tracking=references,
            participant_grouping=participants,
            time_window_hours=time_window_hours,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _read_messages(file: Path | None, data: str | None) -> list[EmailMessage]:
    if data:
        return messages_from_json(data)
    if file:
        return load_messages(file)
    raise typer.BadParameter("Provide either --file or --data")


def _fail(exc: Exception) -> NoReturn:
    print(f"[red]Error[/red]: {escape(str(exc))}")
    if isinstance(exc, EmailProcessingError) and exc.details:
        print(f"[bright_black]Details: {escape(str(exc.details))}[/bright_black]")
    raise typer.Exit(1)


def _build_service(settings: Settings, options: ThreadingOptions, stable_ids: bool, command: str) -> ThreadingService:
    correlation_id = uuid.uuid4().hex
    configure_logging(
        settings.logs_dir,
        correlation_id=correlation_id,
        console_level=settings.console_log_level,
    )
    return ThreadingService(
        options=options,
        id_factory=stable_thread_id if stable_ids else random_thread_id,
        logger=get_logger(f"mailthread.{command}", correlation_id),
    )


def _print_threads(threads: list[EmailThread]) -> None:
    table = Table("id", "subject", "messages", "participants", "last message")
    for thread in threads:
        table.add_row(
            thread.id,
            escape(thread.subject),
            str(thread.message_count),
            escape(", ".join(thread.participants)),
            thread.last_message_at.isoformat(),
        )
    print(table)


@app.command("group")
def group_command(
    file: Path | None = FILE_OPTION,
    data: str | None = DATA_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print thread summaries as JSON"),
    stable_ids: bool = STABLE_IDS_OPTION,
    subject_normalization: bool | None = SUBJECT_OPTION,
    references: bool | None = REFERENCES_OPTION,
    participants: bool | None = PARTICIPANTS_OPTION,
    time_window_hours: float | None = WINDOW_OPTION,
    config: Path | None = CONFIG_OPTION,
) -> None:
    settings = _load_settings(config)
    options = _build_options(settings, subject_normalization, references, participants, time_window_hours)
    try:
        messages = _read_messages(file, data)
    except (EmailProcessingError, OSError) as exc:
        _fail(exc)

    service = _build_service(settings, options, stable_ids, "group")
    threads = service.group_messages_into_threads(messages)

    if as_json:
        typer.echo(json.dumps([thread_summary(thread) for thread in threads], indent=2, ensure_ascii=False))
        return
    print(f"[green]Grouped {len(messages)} messages into {len(threads)} threads[/green]")
    _print_threads(threads)


@app.command("find")
def find_command(
    message: Path = typer.Option(..., "--message", help="JSON file with the message to place"),
    file: Path | None = FILE_OPTION,
    data: str | None = DATA_OPTION,
    stable_ids: bool = STABLE_IDS_OPTION,
    subject_normalization: bool | None = SUBJECT_OPTION,
    references: bool | None = REFERENCES_OPTION,
    participants: bool | None = PARTICIPANTS_OPTION,
    time_window_hours: float | None = WINDOW_OPTION,
    config: Path | None = CONFIG_OPTION,
) -> None:
    settings = _load_settings(config)
    options = _build_options(settings, subject_normalization, references, participants, time_window_hours)
    try:
        messages = _read_messages(file, data)
        with message.open("r", encoding="utf-8-sig") as fh:
            candidate = parse_message(json.load(fh))
    except (EmailProcessingError, OSError, json.JSONDecodeError) as exc:
        _fail(exc)

    service = _build_service(settings, options, stable_ids, "find")
    threads = service.group_messages_into_threads(messages)
    thread = service.find_thread_for_message(threads, candidate)
    if thread is None:
        print(f"[yellow]No matching thread[/yellow] for message {escape(candidate.id)}")
        return
    print(f"[green]Message {escape(candidate.id)} belongs to thread {thread.id}[/green]")
    typer.echo(json.dumps(thread_summary(thread), indent=2, ensure_ascii=False))


@app.command("subject")
def subject_command(
    text: str = typer.Argument(..., help="Raw subject line"),
    raw: bool = typer.Option(False, "--raw", help="Disable normalization"),
) -> None:
    typer.echo(normalize_subject(text, enabled=not raw))


@app.command("export")
def export_command(
    file: Path | None = FILE_OPTION,
    data: str | None = DATA_OPTION,
    format: str = typer.Option("csv", help="Comma-separated formats: csv,xlsx"),
    out: Path | None = typer.Option(None, help="Export directory"),
    stable_ids: bool = STABLE_IDS_OPTION,
    config: Path | None = CONFIG_OPTION,
) -> None:
    formats = [item.strip().lower() for item in format.split(",") if item.strip()]
    unknown = [item for item in formats if item not in {"csv", "xlsx"}]
    if unknown or not formats:
        raise typer.BadParameter(f"Unsupported formats: {unknown or format}")

    settings = _load_settings(config)
    options = _build_options(settings, None, None, None, None)
    try:
        messages = _read_messages(file, data)
    except (EmailProcessingError, OSError) as exc:
        _fail(exc)

    service = _build_service(settings, options, stable_ids, "export")
    threads = service.group_messages_into_threads(messages)
    files = export_threads(threads, formats=formats, out_dir=(out or settings.exports_dir).resolve())

    print("[green]Export finished[/green]")
    for file_path in files:
        print(f"- {file_path}")


@app.command("doctor")
def doctor_command(config: Path | None = CONFIG_OPTION) -> None:
    settings = _load_settings(config)
    checks = run_doctor_checks(settings)

    print("Doctor results:")
    for check in checks:
        status = check["status"].upper()
        print(f"- [{status}] {escape(check['check'])}: {escape(check['detail'])}")
    if any(check["status"] == "error" for check in checks):
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
