"""Kanban column commands."""

import httpx
import typer
from taskboard.client import TaskBoardClient
from taskboard.formatting import print_table, error_detail, console

app = typer.Typer(help="Kanban column management")


def _get_client(ctx: typer.Context) -> TaskBoardClient:
    if ctx.obj and "client" in ctx.obj:
        return ctx.obj["client"]
    return TaskBoardClient()


@app.command("list")
def list_columns(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
):
    """List a project's columns in board order."""
    client = _get_client(ctx)
    try:
        columns = client.list_columns(project_id)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    if not columns:
        console.print("[yellow]No columns found[/yellow]")
        return

    rows = [[str(c.get("order", 0)), c["id"], c.get("name", "?")] for c in columns]
    print_table(["Order", "ID", "Name"], rows, title="Columns")


@app.command("add")
def add_column(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
    name: str = typer.Argument(..., help="Column name"),
):
    """Append a column to the right end of the board."""
    client = _get_client(ctx)
    try:
        column = client.create_column(project_id, name)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[green]Created column {column['id']} ({column.get('name')}) "
        f"at position {column.get('order')}[/green]"
    )


@app.command("rename")
def rename_column(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
    column_id: str = typer.Argument(..., help="Column ID"),
    name: str = typer.Argument(..., help="New column name"),
):
    """Rename a column."""
    client = _get_client(ctx)
    try:
        client.rename_column(project_id, column_id, name)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Renamed column {column_id} to {name}[/green]")


@app.command("delete")
def delete_column(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
    column_id: str = typer.Argument(..., help="Column ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a column together with every task in it."""
    if not yes:
        typer.confirm(f"Delete column {column_id} and its tasks?", abort=True)

    client = _get_client(ctx)
    try:
        client.delete_column(project_id, column_id)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Deleted column {column_id}[/green]")
