"""Note commands — capture a note, pick the contact, commit; list notes."""

import sys

import click
from rich.console import Console
from rich.table import Table

from cli.utils import components_or_exit, find_contact_or_exit, split_tags
from contacts.errors import ExtractionError, PeopleGraphError
from shared_types import IngestionMode

console = Console()

_PLACEHOLDER = "Sarah — talked about her new job at Stripe, Japan trip in April..."


@click.group()
def note():
    """Capture and browse notes about people."""
    pass


def _show_decision(decision) -> None:
    console.print("\n[dim]Extracted from note:[/]")
    for fact in decision.extraction.extracted_notes:
        console.print(f"  • {fact}")
    if decision.extraction.tags:
        console.print(f"[dim]Topics: {', '.join(decision.extraction.tags)}[/]")

    if decision.mode == IngestionMode.ORACLE and decision.oracle_confidence is not None:
        console.print(f"[dim]Oracle confidence: {decision.oracle_confidence:.0%}[/]")

    if not decision.matches:
        console.print(f"\nNo matches found. Create new contact [cyan]{decision.extracted_name}[/]?")
        return

    table = Table(show_header=True, title="Link to contact")
    table.add_column("#", style="cyan", width=3)
    table.add_column("Name")
    table.add_column("Match", justify="right")
    table.add_column("Notes", justify="right", style="dim")
    table.add_column("Tags", style="dim")
    for i, m in enumerate(decision.matches, 1):
        table.add_row(
            str(i),
            m.contact.name,
            f"{m.score:.0%}",
            str(m.contact.interaction_count),
            ", ".join(m.contact.tags),
        )
    console.print(table)


def _prompt_target(decision):
    """Ask which contact gets the note. Returns (cancelled, contact-or-None)."""
    choices = [str(i) for i in range(1, len(decision.matches) + 1)] + ["n", "c"]
    default = "1" if decision.matches else "n"
    choice = click.prompt(
        f"Contact number, [n]ew '{decision.extracted_name}', or [c]ancel",
        type=click.Choice(choices),
        default=default,
    )
    if choice == "c":
        return True, None
    if choice == "n":
        return False, None
    return False, decision.matches[int(choice) - 1].contact


@note.command("add")
@click.argument("text", required=False)
@click.option("--retry", is_flag=True, help="Re-submit the text of the last failed note")
@click.option(
    "--mode",
    type=click.Choice([m.value for m in IngestionMode]),
    help="Override matching mode (local fuzzy match or oracle pick)",
)
@click.option("--tags", help="Comma-separated relationship tags (skips the tag prompt)")
@click.pass_obj
def note_add(obj, text: str | None, retry: bool, mode: str | None, tags: str | None):
    """Parse a note about someone and attach it to a contact."""
    c = components_or_exit(obj, mode=mode, ingest=True)
    store, coordinator = c["store"], c["coordinator"]

    if retry:
        text = store.load_draft()
        if not text:
            console.print("[yellow]No failed note to retry.[/]")
            return
        console.print(f"[dim]Retrying:[/] {text}")

    if not text:
        text = click.edit(f"# {_PLACEHOLDER}\n")
        text = "\n".join(
            line for line in (text or "").splitlines() if not line.startswith("#")
        ).strip()
        if not text:
            console.print("[yellow]No content provided, cancelled.[/]")
            return

    try:
        with console.status("Parsing note..."):
            decision = coordinator.ingest(text)
    except ExtractionError as e:
        console.print(f"[red]Could not parse note:[/] {e}")
        console.print("[dim]Your text was kept. Run `peoplegraph note add --retry` to try again.[/]")
        sys.exit(1)
    except PeopleGraphError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    _show_decision(decision)
    cancelled, chosen = _prompt_target(decision)
    if cancelled:
        coordinator.discard(decision)
        console.print("[yellow]Discarded.[/]")
        return

    if tags is None:
        tags = click.prompt(
            "Relationship tags (comma-separated)",
            default=",".join(decision.suggested_tags),
            show_default=bool(decision.suggested_tags),
        )

    try:
        contact, saved = coordinator.commit(decision, chosen, split_tags(tags))
    except PeopleGraphError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    console.print(f"\n[green]Saved to {contact.name}[/] ({contact.interaction_count} notes)")
    for fact in saved.facts:
        console.print(f"  • {fact}")


@note.command("list")
@click.argument("name", required=False)
@click.option("-n", "--limit", default=10, help="Max notes to show")
@click.pass_obj
def note_list(obj, name: str | None, limit: int):
    """List recent notes, optionally for one contact."""
    c = components_or_exit(obj)
    store = c["store"]

    if name:
        contact = find_contact_or_exit(store, name)
        notes = store.notes_for(contact.id)
        names = {contact.id: contact.name}
    else:
        notes = store.get_notes()
        names = {ct.id: ct.name for ct in store.get_contacts()}

    if not notes:
        console.print("[yellow]No notes found.[/]")
        return

    table = Table(show_header=True)
    table.add_column("Date", style="cyan")
    table.add_column("Contact", style="green")
    table.add_column("Facts")
    table.add_column("Topics", style="dim")
    for n in notes[:limit]:
        table.add_row(
            n.created_at[:10],
            names.get(n.contact_id, "?"),
            "\n".join(n.facts),
            ", ".join(n.tags or []),
        )
    console.print(table)
