"""Contact commands — list, show, tag, import."""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from cli.utils import components_or_exit, find_contact_or_exit
from contacts.errors import PeopleGraphError
from contacts.graph import filter_roster
from contacts.importer import import_contacts, parse_vcard
from contacts.tags import UNTAGGED, get_tag_color

console = Console()


@click.group()
def contacts():
    """Manage the contact roster."""
    pass


@contacts.command("list")
@click.option("--tag", "tags", multiple=True, help=f"Filter by tag (repeatable, '{UNTAGGED}' allowed)")
@click.pass_obj
def contacts_list(obj, tags: tuple[str, ...]):
    """List contacts, most recent interaction first."""
    c = components_or_exit(obj)
    roster = filter_roster(c["store"].get_contacts(), tags)

    if not roster:
        console.print("[yellow]No contacts yet. Import a vCard or add your first note.[/]")
        return

    roster.sort(key=lambda ct: ct.last_interaction, reverse=True)
    table = Table(show_header=True, title=f"Contacts ({len(roster)})")
    table.add_column("Name")
    table.add_column("Notes", justify="right")
    table.add_column("Last", style="cyan")
    table.add_column("Tags")
    for ct in roster:
        tag_text = ", ".join(f"[{get_tag_color(t)}]{t}[/]" for t in ct.tags)
        table.add_row(ct.name, str(ct.interaction_count), ct.last_interaction[:10], tag_text)
    console.print(table)


@contacts.command("show")
@click.argument("name")
@click.pass_obj
def contacts_show(obj, name: str):
    """Show a contact and their notes."""
    c = components_or_exit(obj)
    store = c["store"]
    contact = find_contact_or_exit(store, name)

    console.print(f"\n[bold]{contact.name}[/]")
    console.print(
        f"[dim]{contact.interaction_count} interactions · Last: {contact.last_interaction[:10]}"
        f" · Since: {contact.created_at[:10]}[/]"
    )
    if contact.tags:
        console.print(f"Tags: {', '.join(contact.tags)}")

    for n in store.notes_for(contact.id):
        console.print(f"\n[cyan]{n.created_at[:10]}[/]")
        for fact in n.facts:
            console.print(f"  • {fact}")
        if n.tags:
            console.print(f"  [dim]{', '.join(n.tags)}[/]")


@contacts.command("tag")
@click.argument("name")
@click.argument("tag")
@click.pass_obj
def contacts_tag(obj, name: str, tag: str):
    """Toggle a relationship tag on a contact."""
    c = components_or_exit(obj)
    store = c["store"]
    contact = find_contact_or_exit(store, name)

    try:
        updated = store.toggle_contact_tag(contact.id, tag)
    except PeopleGraphError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    action = "Added" if tag.strip().lower() in updated.tags else "Removed"
    console.print(f"[green]{action}[/] '{tag.strip().lower()}' on {updated.name}")


@contacts.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def contacts_import(obj, path: Path):
    """Import contacts from a vCard (.vcf) file."""
    c = components_or_exit(obj)
    names = parse_vcard(path.read_text(encoding="utf-8", errors="replace"))

    try:
        imported = import_contacts(c["store"], names)
    except PeopleGraphError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    if imported:
        console.print(f"[green]Imported {imported} new contacts[/]")
    else:
        console.print("[yellow]No new contacts to import[/]")
