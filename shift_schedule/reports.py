"""
Shift reports: fixed queries over the shifts table and a rich renderer.

Every report left-joins the shifts table with its reference tables. The join
chain is parenthesized the way the Access engine requires; SQLite accepts the
same text. Criteria are always bound as parameters.

Usage:
    from shift_schedule.reports import monthly_summary, render_report, run_report

    report = monthly_summary(month=3, year=2024)
    render_report(run_report(store, report), report.title)
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Optional, Tuple

from pydantic import BaseModel
from rich import box
from rich.console import Console
from rich.table import Table

from shift_schedule.core.record_store import QueryResult, RecordStore
from shift_schedule.utils.logging import get_logger

log = get_logger(__name__)

_SHIFT_COLUMNS = """
    s.[Код смены],
    s.[Дата],
    p.[Подразделение],
    r.[ФИО_руководителя],
    n.[ФИО_начальника_смены],
    k.[Количество рабочих],
    d.[Длительность смены]"""

_SHIFT_JOINS = """
    FROM (((([Смены] s
    LEFT JOIN [Подразделения] p ON s.[ID_подразделения] = p.[ID_подразделения])
    LEFT JOIN [Руководители] r ON s.[ID_руководителя] = r.[ID_руководителя])
    LEFT JOIN [Начальники смен] n ON s.[ID_начальника_смены] = n.[ID_начальника_смены])
    LEFT JOIN [Количество рабочих] k ON s.[ID_количества_рабочих] = k.[ID_количества_рабочих])
    LEFT JOIN [Длительности смен] d ON s.[ID_длительности_смены] = d.[ID_длительности_смены]"""

_SUMMARY_JOINS = """
    FROM (([Смены] s
    LEFT JOIN [Подразделения] p ON s.[ID_подразделения] = p.[ID_подразделения])
    LEFT JOIN [Количество рабочих] k ON s.[ID_количества_рабочих] = k.[ID_количества_рабочих])
    LEFT JOIN [Длительности смен] d ON s.[ID_длительности_смены] = d.[ID_длительности_смены]"""


class ReportQuery(BaseModel):
    title: str
    sql: str
    params: Tuple[Any, ...] = ()

    model_config = {"frozen": True}


def _day_start(value: date) -> datetime:
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time())


def _shift_listing(where: str) -> str:
    return f"SELECT{_SHIFT_COLUMNS}{_SHIFT_JOINS}\n    WHERE {where}\n    ORDER BY s.[Дата]"


def shifts_by_date(date_from: date, date_to: date) -> ReportQuery:
    """
    Shifts dated from `date_from` through `date_to`, both days included.

    Raises
    ------
    ValueError
        If `date_from` is after `date_to`.
    """
    start, end = _day_start(date_from), _day_start(date_to)
    if start > end:
        raise ValueError("Start date cannot be later than end date")
    return ReportQuery(
        title=f"Shifts {start:%d.%m.%Y} - {end:%d.%m.%Y}",
        sql=_shift_listing("s.[Дата] >= ? AND s.[Дата] < ?"),
        params=(start, end + timedelta(days=1)),
    )


def shifts_by_department(department: str) -> ReportQuery:
    return ReportQuery(
        title=f"Shifts of department {department}",
        sql=_shift_listing("p.[Подразделение] = ?"),
        params=(department,),
    )


def shifts_by_supervisor(supervisor: str) -> ReportQuery:
    return ReportQuery(
        title=f"Shifts of supervisor {supervisor}",
        sql=_shift_listing("n.[ФИО_начальника_смены] = ?"),
        params=(supervisor,),
    )


def monthly_summary(month: int, year: int) -> ReportQuery:
    """Per department: number of shifts, total workers and total hours in the month."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    sql = (
        "SELECT\n"
        "    p.[Подразделение],\n"
        "    COUNT(s.[Код смены]) AS [Количество смен],\n"
        "    SUM(k.[Количество рабочих]) AS [Общее количество рабочих],\n"
        "    SUM(d.[Длительность смены]) AS [Общая длительность (часов)]"
        f"{_SUMMARY_JOINS}\n"
        "    WHERE s.[Дата] >= ? AND s.[Дата] < ?\n"
        "    GROUP BY p.[Подразделение]"
    )
    return ReportQuery(title=f"Summary for {month:02d}.{year}", sql=sql, params=(start, end))


def run_report(store: RecordStore, report: ReportQuery) -> QueryResult:
    result = store.query(report.sql, report.params)
    log.info("Report generated", extra={"report": report.title, "rows": len(result)})
    return result


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.time() == time():
            return f"{value:%d.%m.%Y}"
        return f"{value:%d.%m.%Y %H:%M}"
    if isinstance(value, Decimal):
        return f"{value.normalize():f}" if value == value.to_integral_value() else str(value)
    return str(value)


def render_report(result: QueryResult, title: str, console: Optional[Console] = None) -> None:
    """Render query rows as a rich table."""
    console = console or Console()

    if not result.rows:
        console.print(f"[yellow]{title}: no rows to display.[/yellow]")
        return

    table = Table(title=title, box=box.ROUNDED, caption=f"{len(result)} row(s)")
    for index, column in enumerate(result.columns):
        table.add_column(column, style="cyan" if index == 0 else None, no_wrap=index == 0)
    for row in result.rows:
        table.add_row(*(format_cell(value) for value in row))

    console.print(table)


__all__ = [
    "ReportQuery",
    "format_cell",
    "monthly_summary",
    "render_report",
    "run_report",
    "shifts_by_date",
    "shifts_by_department",
    "shifts_by_supervisor",
]
