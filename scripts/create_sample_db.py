"""
Sample database script for the Shift Schedule record manager.

Creates a SQLite copy of the shift schedule schema (reference tables, shifts
and the credentials table) and fills it with a small deterministic data set.
The file can be opened by every command of the CLI with `--db`.
"""

from __future__ import annotations

import sqlite3
import sys
from pathlib import Path

import typer

app = typer.Typer(help="Create a SQLite shift schedule database with sample data.")

SCHEMA = """
CREATE TABLE [Подразделения] (
    [ID_подразделения] INTEGER PRIMARY KEY,
    [Подразделение] TEXT NOT NULL
);
CREATE TABLE [Руководители] (
    [ID_руководителя] INTEGER PRIMARY KEY,
    [ФИО_руководителя] TEXT NOT NULL
);
CREATE TABLE [Начальники смен] (
    [ID_начальника_смены] INTEGER PRIMARY KEY,
    [ФИО_начальника_смены] TEXT NOT NULL
);
CREATE TABLE [Количество рабочих] (
    [ID_количества_рабочих] INTEGER PRIMARY KEY,
    [Количество рабочих] INTEGER NOT NULL
);
CREATE TABLE [Длительности смен] (
    [ID_длительности_смены] INTEGER PRIMARY KEY,
    [Начало смены] DATETIME,
    [Окончание смены] DATETIME,
    [Длительность смены] INTEGER NOT NULL
);
CREATE TABLE [Смены] (
    [Код смены] INTEGER PRIMARY KEY,
    [Дата] DATETIME NOT NULL,
    [ID_подразделения] INTEGER REFERENCES [Подразделения] ([ID_подразделения]),
    [ID_руководителя] INTEGER REFERENCES [Руководители] ([ID_руководителя]),
    [ID_начальника_смены] INTEGER REFERENCES [Начальники смен] ([ID_начальника_смены]),
    [ID_количества_рабочих] INTEGER REFERENCES [Количество рабочих] ([ID_количества_рабочих]),
    [ID_длительности_смены] INTEGER REFERENCES [Длительности смен] ([ID_длительности_смены]),
    [Ночная смена] BIT,
    [Доплата] CURRENCY,
    [Примечание] TEXT
);
CREATE TABLE [Users] (
    [ID] INTEGER PRIMARY KEY,
    [Username] TEXT NOT NULL UNIQUE,
    [PasswordHash] TEXT NOT NULL
);
"""

DEPARTMENTS = [(1, "Цех 1"), (2, "Цех 2"), (3, "Склад")]
MANAGERS = [(1, "Иванов И.И."), (2, "Петров П.П.")]
SUPERVISORS = [(1, "Сидоров С.С."), (2, "Кузнецов К.К.")]
WORKER_COUNTS = [(1, 10), (2, 15), (3, 20)]
# Times of day are stored on 1999-12-30, the Access zero date.
SHIFT_DURATIONS = [
    (1, "1999-12-30 08:00:00", "1999-12-30 16:00:00", 8),
    (2, "1999-12-30 08:00:00", "1999-12-30 20:00:00", 12),
    (3, "1999-12-30 20:00:00", "1999-12-30 08:00:00", 12),
]
SHIFTS = [
    (1, "2024-03-01 00:00:00", 1, 1, 1, 1, 1, 0, None, None),
    (2, "2024-03-02 00:00:00", 1, 1, 2, 2, 2, 0, None, "Инвентаризация"),
    (3, "2024-03-15 00:00:00", 2, 2, 1, 3, 1, 0, None, None),
    (4, "2024-04-01 00:00:00", 3, 2, 2, 1, 3, 1, "1500.00", None),
]


def create_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(SCHEMA)


def seed(conn: sqlite3.Connection) -> None:
    conn.executemany("INSERT INTO [Подразделения] VALUES (?, ?)", DEPARTMENTS)
    conn.executemany("INSERT INTO [Руководители] VALUES (?, ?)", MANAGERS)
    conn.executemany("INSERT INTO [Начальники смен] VALUES (?, ?)", SUPERVISORS)
    conn.executemany("INSERT INTO [Количество рабочих] VALUES (?, ?)", WORKER_COUNTS)
    conn.executemany("INSERT INTO [Длительности смен] VALUES (?, ?, ?, ?)", SHIFT_DURATIONS)
    conn.executemany("INSERT INTO [Смены] VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)", SHIFTS)


def create_sample_database(path: Path, with_data: bool = True) -> Path:
    """Create the schema (and optionally the sample rows) in a new file at `path`."""
    conn = sqlite3.connect(str(path))
    try:
        create_schema(conn)
        if with_data:
            seed(conn)
        conn.commit()
    finally:
        conn.close()
    return path


@app.command()
def main(
    path: Path = typer.Argument(Path("shift_schedule.db"), help="Target SQLite file."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file."),
    empty: bool = typer.Option(False, "--empty", help="Create the schema only."),
) -> None:
    """
    Create a sample shift schedule database.
    """
    if path.exists():
        if not force:
            typer.echo(f"{path} already exists; use --force to overwrite.", err=True)
            sys.exit(1)
        path.unlink()

    create_sample_database(path, with_data=not empty)
    typer.echo(f"Created {path} ({'schema only' if empty else 'with sample data'}).")


if __name__ == "__main__":
    app()
