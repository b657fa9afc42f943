"""Offer (throughput) commands."""

import json

import click
from rich.console import Console
from rich.table import Table

from ..client import CosmosAPI
from ..client.exceptions import CosmosError

console = Console()


@click.group()
def offer():
    """Inspect throughput offers."""
    pass


@offer.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_offers(as_json: bool):
    """List throughput offers of the account."""
    with CosmosAPI() as api:
        try:
            offers = api.list_offers()
        except CosmosError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise click.Abort()

        if as_json:
            console.print_json(json.dumps([o.to_body() for o in offers]))
            return

        if not offers:
            console.print("[yellow]No offers found.[/yellow]")
            return

        table = Table(title="Offers")
        table.add_column("ID", style="cyan")
        table.add_column("Resource")
        table.add_column("Version")
        table.add_column("Throughput", justify="right")
        table.add_column("Autoscale max", justify="right")

        for o in offers:
            content = o.content
            throughput = content.offer_throughput if content and content.offer_throughput else "-"
            autopilot = content.autopilot_settings if content else None
            table.add_row(
                o.id,
                o.resource,
                o.offer_version.value,
                str(throughput),
                str(autopilot.max_throughput) if autopilot else "-",
            )

        console.print(table)
