"""Derived relationship-graph model: the user at the center, contacts around.

Node size grows with interaction count; edge strength decays with the days
since the last interaction.
"""

from collections.abc import Collection, Sequence
from dataclasses import asdict, dataclass, field
from datetime import datetime

from .models import Contact, utc_now
from .tags import UNTAGGED, get_tag_color

CENTER_ID = "center"
CENTER_NAME = "You"
CENTER_SIZE = 20
CENTER_COLOR = "#a855f7"

MIN_NODE_SIZE = 5
MAX_NODE_SIZE = 15
SIZE_PER_INTERACTION = 2

DECAY_PER_DAY = 0.05
MIN_STRENGTH = 0.1


@dataclass
class GraphNode:
    id: str
    name: str
    size: int
    color: str
    is_center: bool = False
    tags: list[str] = field(default_factory=list)


@dataclass
class GraphEdge:
    source: str
    target: str
    strength: float


@dataclass
class GraphModel:
    nodes: list[GraphNode]
    edges: list[GraphEdge]

    def to_dict(self) -> dict:
        """Force-layout format: nodes with ``val`` and ``links``."""
        return {
            "nodes": [
                {
                    "id": n.id,
                    "name": n.name,
                    "val": n.size,
                    "color": n.color,
                    "isCenter": n.is_center,
                    "tags": n.tags,
                }
                for n in self.nodes
            ],
            "links": [asdict(e) for e in self.edges],
        }


def node_size(
    interaction_count: int,
    min_size: int = MIN_NODE_SIZE,
    max_size: int = MAX_NODE_SIZE,
) -> int:
    return min(max_size, max(min_size, interaction_count * SIZE_PER_INTERACTION))


def days_since(timestamp: str, now: datetime) -> int:
    """Whole days elapsed; future timestamps count as zero."""
    then = datetime.fromisoformat(timestamp)
    if then.tzinfo is None and now.tzinfo is not None:
        then = then.replace(tzinfo=now.tzinfo)
    elif then.tzinfo is not None and now.tzinfo is None:
        now = now.replace(tzinfo=then.tzinfo)
    return max(0, (now - then).days)


def edge_strength(
    days: int,
    decay_per_day: float = DECAY_PER_DAY,
    min_strength: float = MIN_STRENGTH,
) -> float:
    return max(min_strength, round(1 - days * decay_per_day, 10))


def filter_roster(roster: Sequence[Contact], filters: Collection[str] = ()) -> list[Contact]:
    """Keep contacts matching any selected tag filter.

    ``untagged`` selects contacts with no tags. No filters keeps everyone.
    """
    selected = {f.strip().lower() for f in filters if f.strip()}
    if not selected:
        return list(roster)
    return [
        c for c in roster
        if (UNTAGGED in selected and not c.tags) or selected.intersection(c.tags)
    ]


def build_graph(
    roster: Sequence[Contact],
    now: datetime | None = None,
    filters: Collection[str] = (),
    **tuning,
) -> GraphModel:
    """Build the node/edge model for the (optionally filtered) roster.

    Keyword tuning accepts ``min_size``, ``max_size``, ``center_size``,
    ``decay_per_day`` and ``min_strength``.
    """
    now = now or utc_now()
    min_size = tuning.get("min_size", MIN_NODE_SIZE)
    max_size = tuning.get("max_size", MAX_NODE_SIZE)
    decay = tuning.get("decay_per_day", DECAY_PER_DAY)
    floor = tuning.get("min_strength", MIN_STRENGTH)

    nodes = [
        GraphNode(
            id=CENTER_ID,
            name=CENTER_NAME,
            size=tuning.get("center_size", CENTER_SIZE),
            color=CENTER_COLOR,
            is_center=True,
        )
    ]
    edges = []
    for contact in filter_roster(roster, filters):
        nodes.append(
            GraphNode(
                id=contact.id,
                name=contact.name,
                size=node_size(contact.interaction_count, min_size, max_size),
                color=get_tag_color(contact.tags[0] if contact.tags else None),
                tags=list(contact.tags),
            )
        )
        days = days_since(contact.last_interaction, now)
        edges.append(GraphEdge(CENTER_ID, contact.id, edge_strength(days, decay, floor)))
    return GraphModel(nodes=nodes, edges=edges)
