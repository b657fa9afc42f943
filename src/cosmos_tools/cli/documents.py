"""Document commands."""

import json
import math

import click
from rich.console import Console
from rich.table import Table

from ..client import CosmosAPI, RequestOptions
from ..client.exceptions import CosmosError

console = Console()


def parse_partition_key(value: str):
    """Interpret a partition key given on the command line.

    JSON numbers and quoted strings are decoded ("5" -> 5, '"5"' -> "5");
    anything else is used as a plain string.
    """
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        return value
    if isinstance(parsed, float) and not math.isfinite(parsed):
        return value
    if isinstance(parsed, (int, float, str)) and not isinstance(parsed, bool):
        return parsed
    return value


def parse_parameters(params: tuple[str, ...]) -> dict:
    """Parse repeated ``@name=value`` options into query parameters."""
    parameters = {}
    for param in params:
        if "=" not in param:
            raise click.BadParameter(f"Expected @name=value, got '{param}'", param_hint="--param")
        name, raw = param.split("=", 1)
        if not name.startswith("@"):
            name = "@" + name
        parameters[name] = parse_partition_key(raw)
    return parameters


@click.group()
def doc():
    """Read and query documents."""
    pass


@doc.command("list")
@click.argument("db_id")
@click.argument("coll_id")
@click.option("--limit", "-l", type=int, help="Max documents per page")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_documents(db_id: str, coll_id: str, limit: int | None, as_json: bool):
    """List documents in a collection."""
    with CosmosAPI() as api:
        try:
            documents = api.list_documents(db_id, coll_id, RequestOptions(max_item_count=limit))
        except CosmosError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.Abort()

        if as_json:
            console.print_json(json.dumps([d.to_body() for d in documents]))
            return

        if not documents:
            console.print("[yellow]No documents found.[/yellow]")
            return

        table = Table(title=f"Documents in {db_id}/{coll_id}")
        table.add_column("ID", style="cyan", max_width=36)
        table.add_column("ETag")
        table.add_column("Properties", justify="right")

        for document in documents:
            table.add_row(document.id[:36], document.etag or "", str(len(document.properties)))

        console.print(table)


@doc.command("get")
@click.argument("db_id")
@click.argument("coll_id")
@click.argument("doc_id")
@click.option("--pk", "partition_key", required=True, help="Partition key value of the document")
def get_document(db_id: str, coll_id: str, doc_id: str, partition_key: str):
    """Get a document as JSON."""
    with CosmosAPI() as api:
        try:
            document = api.get_document(db_id, coll_id, doc_id, parse_partition_key(partition_key))
        except CosmosError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.Abort()

        console.print_json(json.dumps(document.to_body()))


@doc.command("query")
@click.argument("db_id")
@click.argument("coll_id")
@click.argument("query")
@click.option("--param", "-p", "params", multiple=True, help="Query parameter as @name=value")
@click.option("--pk", "partition_key", help="Restrict the query to one partition key value")
def query_documents(db_id: str, coll_id: str, query: str, params: tuple[str, ...], partition_key: str | None):
    """Run a SQL query and print the matching documents as JSON."""
    parameters = parse_parameters(params)
    pk = parse_partition_key(partition_key) if partition_key is not None else None

    with CosmosAPI() as api:
        try:
            documents = api.query_documents(db_id, coll_id, query, parameters, partition_key=pk)
        except CosmosError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.Abort()

        console.print_json(json.dumps([d.to_body() for d in documents]))
        if api.last_request_charge is not None:
            console.print(f"[dim]{len(documents)} documents, {api.last_request_charge} RU[/dim]")


@doc.command("delete")
@click.argument("db_id")
@click.argument("coll_id")
@click.argument("doc_id")
@click.option("--pk", "partition_key", required=True, help="Partition key value of the document")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def delete_document(db_id: str, coll_id: str, doc_id: str, partition_key: str, yes: bool):
    """Delete a document."""
    if not yes:
        click.confirm(f"Delete document '{doc_id}'?", abort=True)

    with CosmosAPI() as api:
        try:
            api.delete_document(db_id, coll_id, doc_id, parse_partition_key(partition_key))
        except CosmosError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.Abort()

        console.print(f"[green]Deleted document:[/green] {doc_id}")
