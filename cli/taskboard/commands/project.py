"""Project management commands."""

from typing import Optional

import httpx
import typer
from taskboard.client import TaskBoardClient
from taskboard.formatting import (
    print_table,
    print_board,
    format_ts,
    truncate,
    error_detail,
    console,
)

app = typer.Typer(help="Project management")


def _get_client(ctx: typer.Context) -> TaskBoardClient:
    if ctx.obj and "client" in ctx.obj:
        return ctx.obj["client"]
    return TaskBoardClient()


@app.command("list")
def list_projects(ctx: typer.Context):
    """List your projects, newest first."""
    client = _get_client(ctx)
    try:
        projects = client.list_projects()
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    if not projects:
        console.print("[yellow]No projects found[/yellow]")
        return

    rows = [
        [
            p.get("id", "?"),
            p.get("name", "?"),
            truncate(p.get("description"), 50),
            format_ts(p.get("created_at")),
        ]
        for p in projects
    ]
    print_table(["ID", "Name", "Description", "Created"], rows, title="Projects")


@app.command("create")
def create_project(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Project name"),
    description: Optional[str] = typer.Option(
        None, "--description", "-d", help="Project description"
    ),
):
    """Create a project with the default To Do / In Progress / Done columns."""
    client = _get_client(ctx)
    try:
        project = client.create_project(name, description)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Created project {project['id']}[/green]")
    columns = project.get("columns", [])
    if columns:
        console.print(
            "[dim]Columns: " + ", ".join(c.get("name", "?") for c in columns) + "[/dim]"
        )


@app.command("show")
def show_project(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
):
    """Show a project's board."""
    client = _get_client(ctx)
    try:
        project = client.get_project(project_id)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold cyan]{project.get('name', project_id)}[/bold cyan]")
    console.print(f"[dim]ID: {project.get('id')}[/dim]\n")
    if project.get("description"):
        console.print(f"{project['description']}\n")

    print_board(project.get("columns", []), project.get("tasks", []))


@app.command("update")
def update_project(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    description: Optional[str] = typer.Option(
        None, "--description", "-d", help="New description"
    ),
):
    """Update a project's name and/or description."""
    if name is None and description is None:
        console.print("[yellow]Nothing to update: pass --name or --description[/yellow]")
        raise typer.Exit(1)

    client = _get_client(ctx)
    try:
        project = client.update_project(project_id, name=name, description=description)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Updated project {project.get('id', project_id)}[/green]")


@app.command("delete")
def delete_project(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a project with all of its columns and tasks."""
    if not yes:
        typer.confirm(f"Delete project {project_id} and all of its tasks?", abort=True)

    client = _get_client(ctx)
    try:
        client.delete_project(project_id)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Deleted project {project_id}[/green]")
