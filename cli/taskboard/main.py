"""Taskboard CLI entry point."""

from typing import Optional

import httpx
import typer
from taskboard.commands import project, column, task, assistant
from taskboard.client import TaskBoardClient
from taskboard.formatting import print_status, error_detail, console

app = typer.Typer(
    name="taskboard",
    help="Taskboard CLI - multi-user kanban boards",
    no_args_is_help=True,
)

app.add_typer(project.app, name="project")
app.add_typer(column.app, name="column")
app.add_typer(task.app, name="task")
app.add_typer(assistant.app, name="ai")


@app.callback()
def main(
    ctx: typer.Context,
    url: str = typer.Option(
        "http://localhost:8000", "--url", envvar="TASKBOARD_URL", help="Server URL"
    ),
    token: Optional[str] = typer.Option(
        None, "--token", envvar="TASKBOARD_TOKEN", help="Access token"
    ),
):
    """Taskboard CLI"""
    from taskboard.auth import get_access_token

    ctx.ensure_object(dict)
    ctx.obj["url"] = url

    # Explicit --token > env var > stored credentials
    if not token:
        token = get_access_token(url)

    ctx.obj["token"] = token
    ctx.obj["client"] = TaskBoardClient(base_url=url, token=token)


def _get_client(ctx: typer.Context) -> TaskBoardClient:
    """Get the client from context, with fallback."""
    if ctx.obj:
        return ctx.obj.get("client", TaskBoardClient())
    return TaskBoardClient()


def _get_url(ctx: typer.Context) -> str:
    """Get the server URL from context."""
    if ctx.obj:
        return ctx.obj.get("url", "http://localhost:8000")
    return "http://localhost:8000"


def _store_session(server_url: str, result: dict) -> None:
    from taskboard import auth

    auth.save_tokens(
        server_url=server_url,
        access_token=result["accessToken"],
        expires_in=result.get("expiresIn", 86400),
        user=result.get("user"),
    )
    user = result.get("user") or {}
    name = user.get("displayName") or user.get("email") or "unknown"
    console.print(f"[green]Logged in as {name}[/green]")


@app.command()
def status(ctx: typer.Context):
    """Show taskboard server status."""
    client = _get_client(ctx)
    try:
        result = client.get_status()
    except httpx.HTTPError as e:
        console.print(f"[red]Error connecting to server: {e}[/red]")
        raise typer.Exit(1)

    print_status(
        "Server",
        result.get("status", "unknown"),
        "green" if result.get("status") == "ok" else "yellow",
    )
    print_status("Version", result.get("version", "unknown"))
    db_ok = result.get("database", False)
    print_status(
        "Database", "connected" if db_ok else "unavailable", "green" if db_ok else "red"
    )
    redis_ok = result.get("redis", False)
    print_status(
        "Redis",
        "connected" if redis_ok else "disconnected",
        "green" if redis_ok else "dim",
    )
    print_status("Auth", "enabled" if result.get("auth_enabled") else "disabled")


@app.command()
def login(
    ctx: typer.Context,
    email: Optional[str] = typer.Option(None, "--email", "-e", help="Account email"),
    password: Optional[str] = typer.Option(
        None, "--password", "-p", help="Account password"
    ),
):
    """Log in to the taskboard server and store the access token."""
    server_url = _get_url(ctx)
    if not email:
        email = typer.prompt("Email")
    if not password:
        password = typer.prompt("Password", hide_input=True)

    client = TaskBoardClient(base_url=server_url)
    try:
        result = client.login(email, password)
    except httpx.HTTPError as e:
        console.print(f"[red]Login failed: {error_detail(e)}[/red]")
        raise typer.Exit(1)
    finally:
        client.close()

    _store_session(server_url, result)


@app.command()
def register(
    ctx: typer.Context,
    email: Optional[str] = typer.Option(None, "--email", "-e", help="Account email"),
    password: Optional[str] = typer.Option(
        None, "--password", "-p", help="Account password (min 8 characters)"
    ),
    display_name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Display name"
    ),
):
    """Create an account on the taskboard server and log in."""
    server_url = _get_url(ctx)
    if not email:
        email = typer.prompt("Email")
    if not password:
        password = typer.prompt("Password", hide_input=True, confirmation_prompt=True)

    client = TaskBoardClient(base_url=server_url)
    try:
        result = client.register(email, password, display_name)
    except httpx.HTTPError as e:
        console.print(f"[red]Registration failed: {error_detail(e)}[/red]")
        raise typer.Exit(1)
    finally:
        client.close()

    _store_session(server_url, result)


@app.command()
def logout(ctx: typer.Context):
    """Forget the stored access token for this server."""
    from taskboard import auth

    if auth.clear_credentials(_get_url(ctx)):
        console.print("[green]Logged out.[/green]")
    else:
        console.print("[dim]Not logged in.[/dim]")


@app.command()
def whoami(ctx: typer.Context):
    """Show the currently authenticated user."""
    client = _get_client(ctx)
    try:
        user = client.me()
    except httpx.HTTPError as e:
        console.print(f"[red]Failed to fetch user info: {error_detail(e)}[/red]")
        console.print(
            "[dim]Your session may have expired. Run [bold]taskboard login[/bold] again.[/dim]"
        )
        raise typer.Exit(1)

    print_status("User", user.get("displayName") or user.get("email", "unknown"))
    print_status("Email", user.get("email", "-"))
    print_status("ID", user.get("id", "-"))


if __name__ == "__main__":
    app()
