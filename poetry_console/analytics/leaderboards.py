"""
Leaderboard and Top-N Aggregators

Joins comments and poems against users by identity key. Identity keys and
display names are resolved through explicit, ordered candidate chains;
the first non-blank candidate wins.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from ..models.dashboard import TopPoem
from ..ports.document_store_port import Document
from .temporal import normalize
from .windows import InstantPredicate

UNKNOWN = "Unknown"
DEFAULT_LIMIT = 5

Extractor = Callable[[Document], Any]


def field(name: str) -> Extractor:
    """Extractor reading one document field."""
    def _extract(document: Document) -> Any:
        return document.get(name)
    _extract.__name__ = f"field_{name}"
    return _extract


def as_text(value: Any) -> Optional[str]:
    """Candidate value as text, or None when it is blank or not a scalar."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value
    return None


def first_non_blank(document: Document, chain: Sequence[Extractor]) -> Optional[str]:
    """Evaluate extractors in priority order and return the first usable value."""
    for extract in chain:
        text = as_text(extract(document))
        if text is not None:
            return text
    return None


# Key under which a user document is known to other collections
USER_KEY_CHAIN = (field("userId"), field("id"))
# Display name of a user document
USER_NAME_CHAIN = (field("name"), field("displayName"), field("email"), field("id"))
# Grouping key of a comment
COMMENT_IDENTITY_CHAIN = (field("userId"), field("email"), field("name"))
# Grouping key of a poem; falls back to the author's display name
POEM_IDENTITY_CHAIN = COMMENT_IDENTITY_CHAIN + (field("author"),)


def build_user_names(users: Iterable[Document]) -> Dict[str, str]:
    """Map each user's key (userId, else document id) to a display name."""
    names: Dict[str, str] = {}
    for user in users:
        key = first_non_blank(user, USER_KEY_CHAIN)
        if key is None:
            continue
        names[key] = first_non_blank(user, USER_NAME_CHAIN) or key
    return names


def identity_key(record: Document, include_author: bool = False) -> str:
    chain = POEM_IDENTITY_CHAIN if include_author else COMMENT_IDENTITY_CHAIN
    return first_non_blank(record, chain) or UNKNOWN


@dataclass
class LeaderboardRow:
    """Aggregated count for one identity"""
    user_id: str
    name: str
    count: int


@dataclass
class _Tally:
    count: int = 0
    name: Optional[str] = None
    email: Optional[str] = None


def _qualifies(
    record: Document,
    timestamp_field: str,
    predicate: InstantPredicate,
    tz
) -> bool:
    instant = normalize(record.get(timestamp_field), tz)
    return instant is not None and predicate(instant)


def leaderboard(
    records: Iterable[Document],
    user_names: Dict[str, str],
    predicate: InstantPredicate,
    *,
    timestamp_field: str,
    include_author: bool = False,
    limit: int = DEFAULT_LIMIT,
    tz=None
) -> List[LeaderboardRow]:
    """
    Count records per identity key and rank the identities.

    Args:
        records: Comments or poems
        user_names: Output of build_user_names
        predicate: Window predicate; records outside it are skipped
        timestamp_field: Field holding the record's timestamp
        include_author: Let the poem author act as a last identity candidate
        limit: Maximum number of rows returned

    Returns:
        Rows ordered by count descending; ties keep first-appearance order
    """
    tallies: Dict[str, _Tally] = {}

    for record in records:
        if not _qualifies(record, timestamp_field, predicate, tz):
            continue

        key = identity_key(record, include_author)
        tally = tallies.get(key)
        if tally is None:
            tally = tallies[key] = _Tally()
        tally.count += 1
        if tally.name is None:
            tally.name = as_text(record.get("name"))
        if tally.email is None:
            tally.email = as_text(record.get("email"))

    rows = [
        LeaderboardRow(
            user_id=key,
            name=tally.name or user_names.get(key) or tally.email or key or UNKNOWN,
            count=tally.count,
        )
        for key, tally in tallies.items()
    ]
    # sorted() is stable: equal counts keep the order identities first appeared in
    rows = sorted(rows, key=lambda row: row.count, reverse=True)
    return rows[:max(limit, 0)]


def top_poems_by_comments(
    poems: Iterable[Document],
    comments: Iterable[Document],
    predicate: InstantPredicate,
    *,
    limit: int = DEFAULT_LIMIT,
    tz=None
) -> List[TopPoem]:
    """
    Rank poems by the number of their comments inside the window.

    Comments with unreadable timestamps or pointing at unknown slugs are
    ignored. Poems without qualifying comments are left out.
    """
    index: Dict[str, TopPoem] = {}
    for poem in poems:
        slug = as_text(poem.get("slug"))
        if slug is None:
            continue
        index[slug] = TopPoem(slug=slug, title=as_text(poem.get("title")) or "", comment_count=0)

    for comment in comments:
        poem = index.get(as_text(comment.get("poemSlug")) or "")
        if poem is None:
            continue
        if _qualifies(comment, "timestamp", predicate, tz):
            poem.comment_count += 1

    ranked = [poem for poem in index.values() if poem.comment_count > 0]
    ranked = sorted(ranked, key=lambda poem: poem.comment_count, reverse=True)
    return ranked[:max(limit, 0)]
