"""Versioned, idempotent upgrades for stored contact records.

Each step takes the raw JSON records and returns a new list, leaving records
that already conform untouched (same objects). Steps run on every read.
"""

from collections.abc import Callable

RawRecords = list[dict]


def ensure_tags_field(records: RawRecords) -> RawRecords:
    """Backfill ``tags = []`` on contacts stored before tags existed.

    Items that aren't objects are passed through for validation to reject.
    """
    return [
        {**record, "tags": []}
        if isinstance(record, dict) and not isinstance(record.get("tags"), list)
        else record
        for record in records
    ]


CONTACT_MIGRATIONS: list[tuple[int, Callable[[RawRecords], RawRecords]]] = [
    (1, ensure_tags_field),
]

CONTACT_SCHEMA_VERSION = max(version for version, _ in CONTACT_MIGRATIONS)


def migrate_contacts(records: RawRecords) -> tuple[RawRecords, list[int]]:
    """Run every migration step in order.

    Returns:
        (migrated records, versions whose step changed at least one record)
    """
    applied = []
    for version, step in CONTACT_MIGRATIONS:
        upgraded = step(records)
        if any(new is not old for new, old in zip(upgraded, records)):
            applied.append(version)
        records = upgraded
    return records, applied
