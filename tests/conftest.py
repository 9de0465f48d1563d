"""Shared test fixtures for peoplegraph."""

import json
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from contacts.models import Contact  # noqa: E402
from contacts.store import ContactStore  # noqa: E402
from observability import metrics  # noqa: E402

NOW = datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    """A settable clock; call ``clock.advance(days=...)`` to move time."""

    class _Clock:
        def __init__(self):
            self.current = NOW

        def __call__(self):
            return self.current

        def advance(self, **kwargs):
            self.current += timedelta(**kwargs)

    return _Clock()


@pytest.fixture
def store(tmp_path):
    return ContactStore.open(tmp_path / "peoplegraph.db")


def make_contact(name, days_ago=0, count=1, tags=None, id=None):
    ts = (NOW - timedelta(days=days_ago)).isoformat()
    data = {
        "name": name,
        "created_at": ts,
        "last_interaction": ts,
        "interaction_count": count,
        "tags": tags or [],
    }
    if id:
        data["id"] = id
    return Contact(**data)


@pytest.fixture
def roster():
    return [
        make_contact("Sarah Lee", days_ago=2, count=4, tags=["work"], id="c-sarah"),
        make_contact("Tom Baker", days_ago=10, count=1, tags=["friends"], id="c-tom"),
        make_contact("Priya", days_ago=40, count=0, id="c-priya"),
    ]


@pytest.fixture
def provider():
    """LLM provider stub; set ``provider.generate.return_value`` per test."""
    p = MagicMock()
    p.generate.return_value = json.dumps(
        {
            "extracted_name": "Sarah",
            "extracted_notes": ["Started a new job at Stripe", "Japan trip in April"],
            "tags": ["career", "travel"],
            "suggested_tags": ["work"],
        }
    )
    return p
