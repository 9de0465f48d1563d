"""Fuzzy contact matching for extracted names.

Rules are evaluated top-down, first hit wins (case-insensitive, trimmed):

    exact name                       1.0
    candidate is a prefix of query   0.8
    query is a prefix of candidate   0.7
    same first token                 0.6
    substring either way             0.5

Candidates matching nothing are left out of the result entirely.
"""

from collections.abc import Sequence

from .models import Contact, ContactMatch

EXACT_SCORE = 1.0
CANDIDATE_PREFIX_SCORE = 0.8
QUERY_PREFIX_SCORE = 0.7
FIRST_TOKEN_SCORE = 0.6
SUBSTRING_SCORE = 0.5


def _normalize(name: str) -> str:
    return name.strip().lower()


def score_candidate(query: str, candidate: str) -> float:
    """Score one candidate name against the query. 0.0 means no match."""
    q = _normalize(query)
    c = _normalize(candidate)
    if not q or not c:
        return 0.0

    if c == q:
        return EXACT_SCORE
    if q.startswith(c):
        return CANDIDATE_PREFIX_SCORE
    if c.startswith(q):
        return QUERY_PREFIX_SCORE
    if c.split()[0] == q.split()[0]:
        return FIRST_TOKEN_SCORE
    if q in c or c in q:
        return SUBSTRING_SCORE
    return 0.0


def match_contacts(query: str, roster: Sequence[Contact]) -> list[ContactMatch]:
    """Rank roster contacts against an extracted name, best first.

    Ties keep roster order. An empty result means "offer a new contact".
    """
    matches = []
    for contact in roster:
        score = score_candidate(query, contact.name)
        if score > 0:
            matches.append(ContactMatch(contact=contact, score=score))
    return sorted(matches, key=lambda m: m.score, reverse=True)
