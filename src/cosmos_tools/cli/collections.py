"""Collection management commands."""

import json

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..client import CosmosAPI
from ..client.exceptions import CosmosError

console = Console()


@click.group()
def coll():
    """Manage collections."""
    pass


@coll.command("list")
@click.argument("db_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_collections(db_id: str, as_json: bool):
    """List collections in a database."""
    with CosmosAPI() as api:
        try:
            collections = api.list_collections(db_id)
        except CosmosError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.Abort()

        if as_json:
            console.print_json(json.dumps([c.to_body() for c in collections]))
            return

        if not collections:
            console.print(f"[yellow]No collections in {db_id}.[/yellow]")
            return

        table = Table(title=f"Collections in {db_id}")
        table.add_column("ID", style="cyan")
        table.add_column("Partition key")
        table.add_column("Indexing")

        for collection in collections:
            paths = ", ".join(collection.partition_key.paths) if collection.partition_key else "-"
            mode = collection.indexing_policy.indexing_mode.value if collection.indexing_policy else "-"
            table.add_row(collection.id, paths, mode)

        console.print(table)


@coll.command("get")
@click.argument("db_id")
@click.argument("coll_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def get_collection(db_id: str, coll_id: str, as_json: bool):
    """Get collection details."""
    with CosmosAPI() as api:
        try:
            collection = api.get_collection(db_id, coll_id)
        except CosmosError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.Abort()

        if as_json:
            console.print_json(json.dumps(collection.to_body()))
            return

        partition_key = collection.partition_key
        policy = collection.indexing_policy
        console.print(Panel(
            f"[bold]RID:[/bold] {collection.rid or '-'}\n"
            f"[bold]Partition key:[/bold] {', '.join(partition_key.paths) if partition_key else '-'}\n"
            f"[bold]Indexing mode:[/bold] {policy.indexing_mode.value if policy else '-'}\n"
            f"[bold]Default TTL:[/bold] {collection.default_ttl if collection.default_ttl is not None else '-'}",
            title=f"[cyan]{db_id}/{coll_id}[/cyan]",
        ))


@coll.command("pkranges")
@click.argument("db_id")
@click.argument("coll_id")
def list_partition_key_ranges(db_id: str, coll_id: str):
    """List the partition key ranges of a collection."""
    with CosmosAPI() as api:
        try:
            ranges = api.list_partition_key_ranges(db_id, coll_id)
        except CosmosError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.Abort()

        table = Table(title=f"Partition key ranges of {db_id}/{coll_id}")
        table.add_column("ID", style="cyan")
        table.add_column("Min (inclusive)")
        table.add_column("Max (exclusive)")
        table.add_column("Status")

        for pk_range in ranges:
            table.add_row(pk_range.id, pk_range.min_inclusive, pk_range.max_exclusive, pk_range.status or "-")

        console.print(table)


@coll.command("delete")
@click.argument("db_id")
@click.argument("coll_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def delete_collection(db_id: str, coll_id: str, yes: bool):
    """Delete a collection and all its documents."""
    if not yes:
        click.confirm(f"Delete collection '{db_id}/{coll_id}'?", abort=True)

    with CosmosAPI() as api:
        try:
            api.delete_collection(db_id, coll_id)
        except CosmosError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.Abort()

        console.print(f"[green]Deleted collection:[/green] {db_id}/{coll_id}")
