"""Contact import from vCard (.vcf) files."""

import re
from collections.abc import Callable, Iterable
from datetime import datetime

import structlog

from observability import metrics

from .models import Contact, utc_now
from .store import ContactStore

logger = structlog.get_logger()

_FN = re.compile(r"^FN(?:;[^:]*)?:(.*)$", re.IGNORECASE | re.MULTILINE)
_N = re.compile(r"^N(?:;[^:]*)?:([^;\r\n]*);([^;\r\n]*)", re.IGNORECASE | re.MULTILINE)


def _unfold(content: str) -> str:
    """Join folded lines (continuations start with a space or tab)."""
    return re.sub(r"\r?\n[ \t]", "", content)


def parse_vcard(content: str) -> list[str]:
    """Extract display names, one per card, in file order.

    Uses the formatted name (FN) when present, else "first last" from N.
    """
    names = []
    cards = re.split(r"BEGIN:VCARD", _unfold(content), flags=re.IGNORECASE)[1:]
    for card in cards:
        fn = _FN.search(card)
        if fn and fn.group(1).strip():
            names.append(fn.group(1).strip())
            continue
        n = _N.search(card)
        if n:
            full = " ".join(part.strip() for part in (n.group(2), n.group(1)) if part.strip())
            if full:
                names.append(full)
    return names


def import_contacts(
    store: ContactStore,
    names: Iterable[str],
    clock: Callable[[], datetime] = utc_now,
) -> int:
    """Create contacts for names not already on the roster (case-insensitive).

    Returns:
        Number of contacts actually created.
    """
    roster = store.get_contacts()
    seen = {c.name.strip().lower() for c in roster}
    now = clock().isoformat()

    created = []
    for name in names:
        key = name.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        created.append(Contact(name=name.strip(), created_at=now, last_interaction=now))

    if created:
        store.save_contacts([*created, *roster])
    metrics.counter("import.contacts", len(created))
    logger.info("contacts_imported", imported=len(created))
    return len(created)
