"""Graph command — relationship graph model as a table or JSON."""

import json

import click
from rich.console import Console
from rich.table import Table

from cli.utils import components_or_exit
from contacts.graph import build_graph
from contacts.tags import UNTAGGED

console = Console()


@click.command()
@click.option("--tag", "tags", multiple=True, help=f"Filter by tag (repeatable, '{UNTAGGED}' allowed)")
@click.option("--json", "as_json", is_flag=True, help="Print the force-layout JSON model")
@click.pass_obj
def graph(obj, tags: tuple[str, ...], as_json: bool):
    """Show contacts around you, sized by interactions, pulled in by recency."""
    c = components_or_exit(obj)
    model = build_graph(
        c["store"].get_contacts(), filters=tags, **c["config"].graph.model_dump()
    )

    if as_json:
        click.echo(json.dumps(model.to_dict(), indent=2))
        return

    if len(model.nodes) == 1:
        console.print("[yellow]No contacts to graph.[/]")
        return

    strengths = {e.target: e.strength for e in model.edges}
    table = Table(show_header=True, title="your people")
    table.add_column("Name")
    table.add_column("Size", justify="right")
    table.add_column("Strength", justify="right")
    table.add_column("Tags", style="dim")
    for node in sorted(model.nodes[1:], key=lambda n: strengths[n.id], reverse=True):
        table.add_row(
            f"[{node.color}]{node.name}[/]",
            str(node.size),
            f"{strengths[node.id]:.2f}",
            ", ".join(node.tags),
        )
    console.print(table)
