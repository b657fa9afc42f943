"""Request signing command."""

import click
from rich.console import Console
from rich.table import Table

from ..client import CosmosConfig, compose_headers, parse_resource_path
from ..client.exceptions import CosmosError

console = Console()


@click.command()
@click.argument("verb")
@click.argument("path")
def sign(verb: str, path: str):
    """Print the signed headers for VERB and PATH (e.g. GET /dbs/db1/colls)."""
    config = CosmosConfig()
    try:
        config.validate_config()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort()

    if not path.startswith("/"):
        path = "/" + path

    try:
        headers = compose_headers(
            config.host,
            config.key,
            verb,
            path,
            token_type=config.resolved_token_type,
        )
    except (CosmosError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.Abort()

    resource = parse_resource_path(path)
    console.print(f"[bold]Resource type:[/bold] {resource.resource_type}")
    console.print(f"[bold]Resource id:[/bold] {resource.resource_id or '(account)'}")
    console.print(f"[bold]Token type:[/bold] {config.resolved_token_type.value}")
    console.print()

    table = Table(title=f"{verb.upper()} {path}")
    table.add_column("Header", style="cyan")
    table.add_column("Value", overflow="fold")
    for name, value in headers.items():
        table.add_row(name, value)

    console.print(table)
