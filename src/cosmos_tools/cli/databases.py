"""Database management commands."""

import json

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..client import CosmosAPI
from ..client.exceptions import CosmosError

console = Console()


@click.group()
def db():
    """Manage databases."""
    pass


@db.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_databases(as_json: bool):
    """List all databases."""
    with CosmosAPI() as api:
        try:
            databases = api.list_databases()
        except CosmosError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.Abort()

        if as_json:
            console.print_json(json.dumps([d.to_body() for d in databases]))
            return

        if not databases:
            console.print("[yellow]No databases found.[/yellow]")
            return

        table = Table(title="Databases")
        table.add_column("ID", style="cyan")
        table.add_column("RID")
        table.add_column("Self link")

        for database in databases:
            table.add_row(database.id, database.rid or "", database.self_link or "")

        console.print(table)


@db.command("get")
@click.argument("db_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def get_database(db_id: str, as_json: bool):
    """Get database details."""
    with CosmosAPI() as api:
        try:
            database = api.get_database(db_id)
        except CosmosError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.Abort()

        if as_json:
            console.print_json(json.dumps(database.to_body()))
            return

        console.print(Panel(
            f"[bold]RID:[/bold] {database.rid or '-'}\n"
            f"[bold]Self:[/bold] {database.self_link or '-'}\n"
            f"[bold]ETag:[/bold] {database.etag or '-'}\n"
            f"[bold]Collections:[/bold] {database.colls or '-'}\n"
            f"[bold]Users:[/bold] {database.users or '-'}",
            title=f"[cyan]{db_id}[/cyan]",
        ))


@db.command("create")
@click.argument("db_id")
@click.option("--throughput", "-t", type=int, help="Shared manual throughput (RU/s, min 400)")
def create_database(db_id: str, throughput: int | None):
    """Create a database."""
    with CosmosAPI() as api:
        try:
            database = api.create_database(db_id, offer_throughput=throughput)
        except CosmosError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.Abort()

        console.print(f"[green]Created database:[/green] {database.id}")
        if api.last_request_charge is not None:
            console.print(f"[dim]Request charge: {api.last_request_charge} RU[/dim]")


@db.command("delete")
@click.argument("db_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def delete_database(db_id: str, yes: bool):
    """Delete a database and everything in it."""
    if not yes:
        click.confirm(f"Delete database '{db_id}' and all its collections?", abort=True)

    with CosmosAPI() as api:
        try:
            api.delete_database(db_id)
        except CosmosError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.Abort()

        console.print(f"[green]Deleted database:[/green] {db_id}")
