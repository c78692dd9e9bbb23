from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, NoReturn, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from shift_schedule.auth import CredentialStore
from shift_schedule.config import Settings, get_settings
from shift_schedule.core.fields import LookupSelector, RecordForm
from shift_schedule.editor import RecordEditor
from shift_schedule.errors import RecordValidationError, ShiftScheduleError
from shift_schedule.infrastructure.db_factory import get_database
from shift_schedule.reports import (
    ReportQuery,
    format_cell,
    monthly_summary,
    render_report,
    run_report,
    shifts_by_date,
    shifts_by_department,
    shifts_by_supervisor,
)
from shift_schedule.utils.logging import configure_logging

app = typer.Typer(help="Shift Schedule record manager CLI.")
report_app = typer.Typer(help="Shift reports.")
app.add_typer(report_app, name="report")

DB_OPTION = typer.Option(
    None,
    "--db",
    help="Database file (.accdb, .mdb, .db, .sqlite). Defaults to SHIFT_DB_PATH.",
)


def _settings() -> Settings:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json, force=False)
    return settings


def _editor(db: Optional[Path]) -> RecordEditor:
    return RecordEditor.from_settings(_settings(), db_path=db)


def _fail(exc: Exception) -> NoReturn:
    if isinstance(exc, RecordValidationError):
        typer.echo(f"Record rejected for table '{exc.table}':", err=True)
        for issue in exc.issues:
            typer.echo(f"  {issue.message}", err=True)
    else:
        typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


def _parse_assignments(assignments: List[str]) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for item in assignments:
        column, sep, value = item.partition("=")
        if not sep or not column.strip():
            raise typer.BadParameter(f"Expected COLUMN=VALUE, got '{item}'", param_hint="--set")
        values[column.strip()] = value
    return values


def _print_form(form: RecordForm) -> None:
    table = Table(title=f"{form.table} (id: {form.id_column})", box=box.ROUNDED)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Input")
    table.add_column("Value", style="green")
    for field in form.fields:
        shape = field.shape
        value = format_cell(field.initial)
        if isinstance(shape, LookupSelector):
            label = shape.label_for(field.initial)
            if label is not None:
                value = f"{value} ({label})"
            kind = f"lookup: {shape.lookup_table} [{len(shape.entries)}]"
        else:
            kind = shape.kind
        if field.read_only:
            kind += " (read-only)"
        table.add_row(field.label, kind, value)
    console = Console()
    console.print(table)
    for warning in form.warnings:
        console.print(
            f"[yellow]Lookup {warning.lookup_table} for {warning.column} unavailable: "
            f"{warning.message}[/yellow]"
        )


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_path or '<unset>'} engine={settings.db_engine or 'auto'} | "
        f"env={settings.app_env} log={settings.log_level} | "
        f"users={settings.credentials_table} overrides={settings.overrides_file or 'built-in'}"
    )


@app.command()
def tables(db: Optional[Path] = DB_OPTION) -> None:
    """List browsable tables."""
    try:
        names = _editor(db).visible_tables()
    except ShiftScheduleError as exc:
        _fail(exc)
    for name in names:
        typer.echo(name)


@app.command()
def schema(table: str, db: Optional[Path] = DB_OPTION) -> None:
    """Show the columns of TABLE."""
    try:
        editor = _editor(db)
        columns = editor.catalog.get_schema(table)
        id_column = editor.identity.get_id_column(table) if columns else None
    except ShiftScheduleError as exc:
        _fail(exc)
    if not columns:
        _fail(ShiftScheduleError(f"Table '{table}' has no columns or does not exist"))

    grid = Table(title=table, box=box.ROUNDED)
    grid.add_column("Column", style="cyan", no_wrap=True)
    grid.add_column("Declared")
    grid.add_column("Type", style="green")
    grid.add_column("Required", justify="center")
    for column in columns:
        name = column.name + (" (id)" if column.name == id_column else "")
        grid.add_row(
            name,
            column.declared_type,
            column.semantic_type.value,
            "yes" if column.required else "",
        )
    Console().print(grid)


@app.command()
def form(
    table: str,
    record_id: Optional[int] = typer.Option(None, "--id", help="Edit form for this row."),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Show the input form of TABLE for a new row or for an existing one."""
    try:
        editor = _editor(db)
        if record_id is None:
            record_form = editor.new_record_form(table)
        else:
            record_form = editor.edit_record_form(table, record_id)
    except ShiftScheduleError as exc:
        _fail(exc)
    if record_form is None:
        _fail(ShiftScheduleError(f"No row {record_id} in table '{table}'"))
    _print_form(record_form)


@app.command()
def show(table: str, db: Optional[Path] = DB_OPTION) -> None:
    """Print every row of TABLE."""
    try:
        result = _editor(db).read_table(table)
    except ShiftScheduleError as exc:
        _fail(exc)
    render_report(result, table)


@app.command()
def add(
    table: str,
    assignments: List[str] = typer.Option([], "--set", "-s", help="COLUMN=VALUE, repeatable."),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Insert a row into TABLE."""
    raw = _parse_assignments(assignments)
    try:
        editor = _editor(db)
        record_form = editor.new_record_form(table)
        values = editor.parse_form_input(record_form, raw)
        new_id = editor.insert(table, values)
    except ShiftScheduleError as exc:
        _fail(exc)
    typer.echo(f"Record {new_id} added to {table}.")


@app.command()
def edit(
    table: str,
    record_id: int,
    assignments: List[str] = typer.Option([], "--set", "-s", help="COLUMN=VALUE, repeatable."),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Update row RECORD_ID of TABLE."""
    raw = _parse_assignments(assignments)
    try:
        editor = _editor(db)
        record_form = editor.edit_record_form(table, record_id)
        if record_form is None:
            _fail(ShiftScheduleError(f"No row {record_id} in table '{table}'"))
        values = editor.parse_form_input(record_form, raw)
        values[record_form.id_column] = record_id
        updated = editor.update(table, values)
    except ShiftScheduleError as exc:
        _fail(exc)
    if not updated:
        _fail(ShiftScheduleError(f"No row {record_id} in table '{table}' was updated"))
    typer.echo(f"Record {record_id} of {table} updated.")


@app.command()
def delete(
    table: str,
    record_id: int,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Delete row RECORD_ID of TABLE."""
    if not yes:
        typer.confirm(f"Delete record {record_id} from {table}?", abort=True)
    try:
        deleted = _editor(db).delete(table, record_id)
    except ShiftScheduleError as exc:
        _fail(exc)
    if not deleted:
        _fail(ShiftScheduleError(f"No row {record_id} in table '{table}'"))
    typer.echo(f"Record {record_id} deleted from {table}.")


@app.command()
def query(sql: str, db: Optional[Path] = DB_OPTION) -> None:
    """Run an SQL statement as written and print its rows."""
    try:
        result = _editor(db).store.query(sql)
    except ShiftScheduleError as exc:
        _fail(exc)
    render_report(result, "Query result")


def _report(report: ReportQuery, db: Optional[Path]) -> None:
    try:
        result = run_report(_editor(db).store, report)
    except ShiftScheduleError as exc:
        _fail(exc)
    render_report(result, report.title)


@report_app.command("date")
def report_by_date(
    date_from: datetime = typer.Option(..., "--from", formats=["%Y-%m-%d", "%d.%m.%Y"]),
    date_to: datetime = typer.Option(..., "--to", formats=["%Y-%m-%d", "%d.%m.%Y"]),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Shifts within a date range."""
    try:
        report = shifts_by_date(date_from, date_to)
    except ValueError as exc:
        _fail(exc)
    _report(report, db)


@report_app.command("department")
def report_by_department(department: str, db: Optional[Path] = DB_OPTION) -> None:
    """Shifts of one department."""
    _report(shifts_by_department(department), db)


@report_app.command("supervisor")
def report_by_supervisor(supervisor: str, db: Optional[Path] = DB_OPTION) -> None:
    """Shifts of one shift supervisor."""
    _report(shifts_by_supervisor(supervisor), db)


@report_app.command("summary")
def report_summary(
    month: int = typer.Option(..., "--month", "-m", min=1, max=12),
    year: int = typer.Option(..., "--year", "-y", min=2000, max=2100),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Per-department totals for one month."""
    _report(monthly_summary(month, year), db)


@app.command()
def register(
    username: str,
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, confirmation_prompt=True, help="New password."
    ),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Create a user account."""
    settings = _settings()
    if not username.strip():
        _fail(ShiftScheduleError("Username cannot be empty"))
    if len(password) < settings.min_password_length:
        _fail(
            ShiftScheduleError(
                f"Password must be at least {settings.min_password_length} characters long"
            )
        )
    try:
        created = CredentialStore(get_database(settings, db), settings).register(username, password)
    except ShiftScheduleError as exc:
        _fail(exc)
    if not created:
        _fail(ShiftScheduleError(f"User '{username}' already exists"))
    typer.echo(f"User {username} registered.")


@app.command()
def login(
    username: str,
    password: str = typer.Option(..., prompt=True, hide_input=True),
    db: Optional[Path] = DB_OPTION,
) -> None:
    """Check a username and password."""
    settings = _settings()
    try:
        ok = CredentialStore(get_database(settings, db), settings).authenticate(username, password)
    except ShiftScheduleError as exc:
        _fail(exc)
    if not ok:
        _fail(ShiftScheduleError("Invalid username or password"))
    typer.echo(f"Welcome, {username}.")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
