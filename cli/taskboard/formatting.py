"""Rich table formatting helpers for taskboard CLI."""

from rich.console import Console
from rich.table import Table
from rich import box
from typing import Iterable, Optional

console = Console()


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
):
    """Print a formatted table."""
    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        border_style="dim",
    )
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*row)
    console.print(table)


def print_status(label: str, value: str, color: str = "green"):
    """Print a status line with colored value."""
    console.print(f"[bold]{label}:[/bold] [{color}]{value}[/{color}]")


def format_ts(ts) -> str:
    """Format epoch ms timestamp to readable string."""
    if not ts or not isinstance(ts, (int, float)):
        return "-"
    try:
        from datetime import datetime

        return datetime.fromtimestamp(ts / 1000).strftime("%Y-%m-%d %H:%M")
    except (OverflowError, OSError, ValueError):
        return str(ts)


def truncate(text: Optional[str], width: int = 60) -> str:
    """Single-line preview of ``text``; '-' when empty."""
    if not text:
        return "-"
    text = " ".join(text.split())
    if len(text) <= width:
        return text
    return text[: width - 3] + "..."


def print_board(columns: Iterable[dict], tasks: Iterable[dict]):
    """Render a board: one table per column, tasks sorted by order."""
    from taskboard.projection import column_id_of

    tasks = list(tasks)
    columns = sorted(columns, key=lambda c: c.get("order", 0))
    if not columns:
        console.print("[yellow]Board has no columns[/yellow]")
        return

    for column in columns:
        in_column = sorted(
            (t for t in tasks if column_id_of(t["column"]) == column["id"]),
            key=lambda t: (t.get("order", 0), t.get("created_at") or 0, t["id"]),
        )
        rows = [
            [str(t.get("order", 0)), t["id"], t.get("title", ""), truncate(t.get("description"))]
            for t in in_column
        ]
        print_table(
            ["Order", "ID", "Title", "Description"],
            rows,
            title=f"{column.get('name', '?')} ({len(rows)})  [dim]{column['id']}[/dim]",
        )


def error_detail(e: Exception) -> str:
    """The server's ``detail`` message for an HTTP error, else ``str(e)``."""
    import httpx

    if isinstance(e, httpx.HTTPStatusError):
        try:
            detail = e.response.json().get("detail")
        except ValueError:
            detail = None
        if isinstance(detail, str) and detail:
            return detail
    return str(e)
