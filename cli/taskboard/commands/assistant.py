"""Project assistant commands."""

from typing import Optional

import httpx
import typer
from rich.markdown import Markdown
from taskboard.client import TaskBoardClient
from taskboard.formatting import error_detail, console

app = typer.Typer(help="Ask the project assistant")


def _get_client(ctx: typer.Context) -> TaskBoardClient:
    if ctx.obj and "client" in ctx.obj:
        return ctx.obj["client"]
    return TaskBoardClient()


@app.command("summarize")
def summarize(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
):
    """Summarize the project's tasks column by column."""
    client = _get_client(ctx)
    try:
        with console.status("Summarizing..."):
            summary = client.summarize(project_id)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    console.print(Markdown(summary))


@app.command("ask")
def ask(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project ID"),
    question: str = typer.Argument(..., help="Question about the project"),
    task_id: Optional[str] = typer.Option(
        None, "--task", "-t", help="Focus the question on one task"
    ),
):
    """Ask a question about the project or one of its tasks."""
    client = _get_client(ctx)
    try:
        with console.status("Thinking..."):
            answer = client.ask(project_id, question, task_id=task_id)
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {error_detail(e)}[/red]")
        raise typer.Exit(1)

    console.print(Markdown(answer))
