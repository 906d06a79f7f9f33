"""
CloudFolders CLI Tool

Command-line client for a running CloudFolders server.

Usage:
    cloudfolders serve                    - Start the API server
    cloudfolders register USER            - Create an account
    cloudfolders login USER               - Print an access token
    cloudfolders ls [PATH]                - List root folders or a folder's contents
    cloudfolders mkdir NAME [--parent ID] - Create a folder
    cloudfolders rmdir ID                 - Delete a folder and its subtree
    cloudfolders upload PATH FILE         - Upload a file into a folder
    cloudfolders rm PATH --name NAME      - Delete a file from a folder
    cloudfolders share                    - Issue a share link

Set CLOUDFOLDERS_TOKEN (or pass --token) to authenticate.
"""
import os
import sys
from pathlib import Path
from urllib.parse import quote

import click
import httpx
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cloudfolders import __version__

# Load environment variables
load_dotenv()

console = Console()

# API Configuration
API_BASE = os.getenv("CLOUDFOLDERS_API", "http://localhost:8000")


def _fail(message: str):
    console.print(f"[red]✗ {message}[/red]")
    sys.exit(1)


def _folder_url(path: str) -> str:
    return f"{API_BASE}/api/v1/folders/{quote(path.strip('/'))}"


def _request(method: str, url: str, token: str | None = None, **kwargs) -> httpx.Response:
    """Send a request and exit with the server's error message on failure."""
    headers = kwargs.pop("headers", {})
    if token:
        headers["Authorization"] = f"Bearer {token}"

    try:
        response = httpx.request(method, url, headers=headers, timeout=30.0, **kwargs)
    except httpx.HTTPError as e:
        _fail(f"Could not reach {API_BASE}: {e}")

    if response.is_error:
        try:
            message = response.json().get("error") or response.text
        except ValueError:
            message = response.text
        _fail(f"{response.status_code}: {message}")
    return response


def _require_token(token: str | None) -> str:
    if not token:
        _fail("Not logged in. Run `cloudfolders login` and export CLOUDFOLDERS_TOKEN")
    return token


token_option = click.option(
    "--token",
    envvar="CLOUDFOLDERS_TOKEN",
    default=None,
    help="Access token (defaults to $CLOUDFOLDERS_TOKEN)",
)


@click.group()
@click.version_option(version=__version__, prog_name="CloudFolders")
def main():
    """
    CloudFolders - path-addressed folders with shareable links.
    """
    pass


@main.command()
@click.option("--host", default="127.0.0.1", help="Interface to bind")
@click.option("--port", default=8000, help="Port to run server on")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str, port: int, reload: bool):
    """
    Start the CloudFolders API server.

    Example:
        cloudfolders serve --port 8000
    """
    import uvicorn

    console.print(Panel(
        f"[bold green]Starting CloudFolders Server[/bold green]\n\n"
        f"API: [cyan]http://{host}:{port}/api/v1[/cyan]\n"
        f"Health: [cyan]http://{host}:{port}/health[/cyan]\n\n"
        f"[dim]Press Ctrl+C to stop[/dim]",
        border_style="green"
    ))
    uvicorn.run("cloudfolders.main:app", host=host, port=port, reload=reload)


@main.command()
@click.argument("username")
@click.password_option()
def register(username: str, password: str):
    """
    Create an account.

    Example:
        cloudfolders register alice
    """
    response = _request(
        "POST",
        f"{API_BASE}/api/v1/auth/register",
        json={"username": username, "password": password, "confirm_password": password},
    )
    console.print(f"[green]✓[/green] Registered [cyan]{response.json()['username']}[/cyan]")


@main.command()
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True)
def login(username: str, password: str):
    """
    Sign in and print an access token.

    Example:
        export CLOUDFOLDERS_TOKEN=$(cloudfolders login alice --password secret)
    """
    response = _request(
        "POST",
        f"{API_BASE}/api/v1/auth/login",
        json={"username": username, "password": password},
    )
    click.echo(response.json()["access_token"])


@main.command()
@click.argument("path", required=False, default="")
@token_option
def ls(path: str, token: str | None):
    """
    List root folders, or the contents of PATH.

    Example:
        cloudfolders ls Reports/2024
    """
    token = _require_token(token)

    if not path.strip("/"):
        data = _request("GET", f"{API_BASE}/api/v1/folders", token).json()
        folders = data.get("folders", [])
        if not folders:
            console.print("[yellow]No folders yet. Create one with:[/yellow]")
            console.print("[cyan]cloudfolders mkdir NAME[/cyan]")
            return

        table = Table(title="Root folders", show_header=True, header_style="bold cyan")
        table.add_column("ID", justify="right")
        table.add_column("Name", style="cyan")
        table.add_column("Path", style="dim")
        for folder in folders:
            table.add_row(str(folder["id"]), folder["name"], folder["path"])
        console.print(table)
        return

    data = _request("GET", _folder_url(path), token).json()
    folder = data["folder"]
    table = Table(
        title=f"{folder['path']} (id {folder['id']})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Kind")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    for entry in data.get("contents", []):
        table.add_row(entry["kind"], str(entry["id"]), entry["name"])
    console.print(table)


@main.command()
@click.argument("name")
@click.option("--parent", "parent_id", type=int, default=None, help="Parent folder id")
@token_option
def mkdir(name: str, parent_id: int | None, token: str | None):
    """
    Create a folder at the root or under --parent.

    Example:
        cloudfolders mkdir 2024 --parent 1
    """
    token = _require_token(token)
    folder = _request(
        "POST",
        f"{API_BASE}/api/v1/folders",
        token,
        json={"name": name, "folderId": parent_id},
    ).json()
    console.print(f"[green]✓[/green] Created [cyan]{folder['path']}[/cyan] (id {folder['id']})")


@main.command()
@click.argument("folder_id", type=int)
@token_option
@click.confirmation_option(prompt="Delete this folder and everything in it?")
def rmdir(folder_id: int, token: str | None):
    """
    Delete a folder with all sub-folders and files.
    """
    token = _require_token(token)
    _request("POST", f"{API_BASE}/api/v1/folders/delete", token, json={"folderId": folder_id})
    console.print(f"[green]✓[/green] Deleted folder {folder_id}")


@main.command()
@click.argument("path")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@token_option
def upload(path: str, file: Path, token: str | None):
    """
    Upload FILE into the folder at PATH.

    Example:
        cloudfolders upload Reports/2024 ./scan.png
    """
    token = _require_token(token)
    with file.open("rb") as fh:
        record = _request(
            "POST",
            f"{_folder_url(path)}/files",
            token,
            files={"file": (file.name, fh)},
        ).json()
    console.print(f"[green]✓[/green] Uploaded [cyan]{record['path']}[/cyan]")
    console.print(f"[dim]{record['physical_ref']}[/dim]")


@main.command()
@click.argument("path")
@click.option("--name", "file_name", default=None, help="File name within the folder")
@click.option("--id", "file_id", type=int, default=None, help="File id")
@token_option
def rm(path: str, file_name: str | None, file_id: int | None, token: str | None):
    """
    Delete a file from the folder at PATH, by --name or --id.
    """
    token = _require_token(token)
    if file_name is None and file_id is None:
        _fail("Provide --name or --id")

    _request(
        "POST",
        f"{_folder_url(path)}/files/delete",
        token,
        json={"fileId": file_id, "fileName": file_name},
    )
    console.print("[green]✓[/green] File deleted")


@main.command()
@token_option
def share(token: str | None):
    """
    Issue a read-only share link for your whole tree.
    """
    token = _require_token(token)
    data = _request("POST", f"{API_BASE}/api/v1/share", token).json()
    console.print(Panel(
        f"[bold cyan]{data['url']}[/bold cyan]\n\n"
        f"[dim]Expires {data['expires_at']}[/dim]",
        title="Share link",
        border_style="cyan"
    ))


if __name__ == "__main__":
    main()
