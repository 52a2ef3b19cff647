"""Task commands, including drag-style moves between and within columns."""

import asyncio
from typing import Optional

import httpx
import typer
from taskboard.client import TaskBoardClient
from taskboard.formatting import print_table, truncate, error_detail, console
from taskboard.projection import BoardProjection, MoveIntent, column_id_of

app = typer.Typer(help="Task management")


def _get_client(ctx: typer.Context) -> TaskBoardClient:
    if ctx.obj and "client" in ctx.obj:
        return ctx.obj["client"]
    return TaskBoardClient()


@app.command("list")
def list_tasks(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
    column_id: Optional[str] = typer.Option(
        None, "--column", "-c", help="Only tasks in this column"
    ),
):
    """List a project's tasks."""
    client = _get_client(ctx)
    try:
        tasks = client.list_tasks(project_id)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    if column_id:
        tasks = [t for t in tasks if column_id_of(t["column"]) == column_id]
    if not tasks:
        console.print("[yellow]No tasks found[/yellow]")
        return

    rows = []
    for t in tasks:
        column = t.get("column")
        column_name = column.get("name", "?") if isinstance(column, dict) else column
        rows.append(
            [
                t["id"],
                t.get("title", ""),
                column_name,
                str(t.get("order", 0)),
                truncate(t.get("description"), 40),
            ]
        )
    print_table(["ID", "Title", "Column", "Order", "Description"], rows, title="Tasks")


@app.command("add")
def add_task(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
    column_id: str = typer.Argument(..., help="Column ID"),
    title: str = typer.Argument(..., help="Task title"),
    description: Optional[str] = typer.Option(
        None, "--description", "-d", help="Task description"
    ),
):
    """Add a task at the bottom of a column."""
    client = _get_client(ctx)
    try:
        task = client.create_task(project_id, column_id, title, description)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[green]Created task {task['id']} at position {task.get('order')}[/green]"
    )


@app.command("edit")
def edit_task(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
    task_id: str = typer.Argument(..., help="Task ID"),
    title: str = typer.Option(..., "--title", "-t", help="Task title"),
    description: Optional[str] = typer.Option(
        None, "--description", "-d", help="Task description"
    ),
):
    """Change a task's title and description. Its position is kept."""
    client = _get_client(ctx)
    try:
        client.update_task(project_id, task_id, title, description)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Updated task {task_id}[/green]")


@app.command("delete")
def delete_task(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
    task_id: str = typer.Argument(..., help="Task ID"),
):
    """Delete a task."""
    client = _get_client(ctx)
    try:
        client.delete_task(project_id, task_id)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Deleted task {task_id}[/green]")


def _print_column(projection: BoardProjection, column_id: str):
    column = projection.get_column(column_id)
    rows = [
        [str(t.order), t.id, t.title] for t in projection.tasks_in(column_id)
    ]
    print_table(
        ["Order", "ID", "Title"],
        rows,
        title=column.name if column else column_id,
    )


@app.command("move")
def move_task(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
    task_id: str = typer.Argument(..., help="Task to move"),
    over_id: str = typer.Argument(
        ..., help="Task to drop in front of, or column to drop at the end of"
    ),
    order: Optional[int] = typer.Option(
        None, "--order", "-o", min=0, help="Exact position when dropping on a column"
    ),
):
    """Move a task the way a board drag-and-drop does.

    The board is rearranged locally first, then the move is sent to the
    server. If the server rejects it, the previous layout is kept.
    """
    client = _get_client(ctx)
    try:
        project = client.get_project(project_id)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    projection = BoardProjection(project.get("columns", []), project.get("tasks", []))
    task = projection.get_task(task_id)
    if task is None:
        console.print(f"[red]Error: Task {task_id} not found[/red]")
        raise typer.Exit(1)

    if order is not None:
        if projection.get_column(over_id) is None:
            console.print("[red]Error: --order needs a column ID as drop target[/red]")
            raise typer.Exit(1)
        intent = MoveIntent(task.id, task.column_id, over_id, order)
    else:
        intent = projection.plan_drop(task_id, over_id)
    if intent is None:
        console.print("[yellow]Nothing to move[/yellow]")
        return

    async def mover(moved_id: str, column_id: str, target: int) -> dict:
        return await asyncio.to_thread(client.move_task, moved_id, column_id, target)

    projection.apply(intent)
    outcome = asyncio.run(projection.confirm(intent, mover))

    if not outcome.ok:
        console.print(f"[red]Move failed: {error_detail(outcome.error)}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[green]Moved task {task_id} to position {intent.order}[/green]"
    )
    _print_column(projection, intent.column_id)
