"""
Moderation Service - Poem and comment listings for the moderation screens
"""
import asyncio
from datetime import datetime
from typing import Dict, List, Optional

from ..analytics.leaderboards import as_text
from ..analytics.temporal import normalize, resolve_timezone
from ..core.logging_framework import LogCategory, get_logger, log_execution
from ..core.settings import AnalyticsSettings
from ..models.moderation import CommentListing, PoemListing, ReplySummary
from ..ports.document_store_port import Collection, Document, DocumentStorePort

DEFAULT_SORT = "newest"

logger = get_logger("services.moderation")


def is_replied(comment: Document) -> bool:
    """A comment counts as replied once its admin reply has visible text."""
    reply = comment.get("adminReply")
    return isinstance(reply, str) and bool(reply.strip())


def _epoch(moment: Optional[datetime]) -> float:
    # undated rows sort as the epoch
    return moment.timestamp() if moment is not None else 0.0


def _text_key(value: str) -> str:
    return value.casefold()


def _matches(term: str, *values: str) -> bool:
    return any(term in value.lower() for value in values)


# (key, reverse) pairs; sorted() is stable so ties keep store order
POEM_SORTS: Dict[str, tuple] = {
    "newest": (lambda p: _epoch(p.date_posted), True),
    "oldest": (lambda p: _epoch(p.date_posted), False),
    "a-z": (lambda p: _text_key(p.title), False),
    "z-a": (lambda p: _text_key(p.title), True),
    "most-comments": (lambda p: p.comment_count, True),
    "least-comments": (lambda p: p.comment_count, False),
}

COMMENT_SORTS: Dict[str, tuple] = {
    "newest": (lambda c: _epoch(c.timestamp), True),
    "oldest": (lambda c: _epoch(c.timestamp), False),
    "a-z": (lambda c: _text_key(c.author), False),
    "z-a": (lambda c: _text_key(c.author), True),
    "replied": (lambda c: c.replied, True),
    "not-replied": (lambda c: c.replied, False),
}


def _sorted(rows: list, sorts: Dict[str, tuple], sort: Optional[str]) -> list:
    key, reverse = sorts.get(sort or DEFAULT_SORT, sorts[DEFAULT_SORT])
    return sorted(rows, key=key, reverse=reverse)


class ModerationService:
    """
    Service backing the poem and comment moderation screens

    Listing operations propagate store errors to the caller. Only the
    counter widgets degrade to empty results.
    """

    def __init__(
        self,
        store: DocumentStorePort,
        *,
        settings: Optional[AnalyticsSettings] = None
    ):
        self._store = store
        self._tz = resolve_timezone((settings or AnalyticsSettings()).timezone)

    async def _snapshot(self):
        return await asyncio.gather(
            self._store.list_all(Collection.POEMS),
            self._store.list_all(Collection.COMMENTS),
        )

    @staticmethod
    def _count_by_poem(poems: List[Document], comments: List[Document]) -> Dict[str, int]:
        counts = {str(poem["id"]): 0 for poem in poems if poem.get("id") is not None}
        slug_to_id: Dict[str, str] = {}
        for poem in poems:
            slug = as_text(poem.get("slug"))
            if slug is not None and poem.get("id") is not None:
                slug_to_id.setdefault(slug, str(poem["id"]))

        for comment in comments:
            poem_id = slug_to_id.get(as_text(comment.get("poemSlug")) or "")
            if poem_id is not None:
                counts[poem_id] += 1
        return counts

    def _poem_listing(self, poem: Document, comment_count: int) -> PoemListing:
        return PoemListing(
            id=str(poem.get("id", "")),
            slug=as_text(poem.get("slug")) or "",
            title=as_text(poem.get("title")) or "",
            author=as_text(poem.get("author")) or "",
            date_posted=normalize(poem.get("datePosted"), self._tz),
            comment_count=comment_count,
        )

    def _comment_listing(self, comment: Document) -> CommentListing:
        reply = comment.get("adminReply")
        return CommentListing(
            id=str(comment.get("id", "")),
            poem_slug=as_text(comment.get("poemSlug")) or "",
            author=as_text(comment.get("author")) or "",
            content=comment.get("content") if isinstance(comment.get("content"), str) else "",
            timestamp=normalize(comment.get("timestamp"), self._tz),
            admin_reply=reply if isinstance(reply, str) else None,
            replied=is_replied(comment),
        )

    # ==================== Counters ====================

    async def get_comment_counts_by_poem(self) -> Dict[str, int]:
        """
        Count comments per poem id

        Every poem appears, including those without comments. Comments
        pointing at unknown slugs are ignored.
        """
        try:
            poems, comments = await self._snapshot()
            return self._count_by_poem(poems, comments)
        except Exception as e:
            logger.error(
                f"Error counting comments by poem: {e}",
                category=LogCategory.MODERATION,
                exc_info=True
            )
            return {}

    async def get_reply_summary(self) -> ReplySummary:
        """Count comments with and without an admin reply"""
        try:
            comments = await self._store.list_all(Collection.COMMENTS)
        except Exception as e:
            logger.error(
                f"Error computing reply summary: {e}",
                category=LogCategory.MODERATION,
                exc_info=True
            )
            return ReplySummary()

        replied = sum(1 for comment in comments if is_replied(comment))
        return ReplySummary(total=len(comments), replied=replied, unreplied=len(comments) - replied)

    # ==================== Listings ====================

    @log_execution("moderation.list_poems", category=LogCategory.MODERATION)
    async def list_poems(
        self,
        search: Optional[str] = None,
        sort: Optional[str] = DEFAULT_SORT
    ) -> List[PoemListing]:
        """
        List poems with their comment counts

        Args:
            search: Case-insensitive substring of the title or author
            sort: newest, oldest, a-z, z-a, most-comments or least-comments
        """
        poems, comments = await self._snapshot()
        counts = self._count_by_poem(poems, comments)
        rows = [self._poem_listing(poem, counts.get(str(poem.get("id")), 0)) for poem in poems]

        term = (search or "").strip().lower()
        if term:
            rows = [row for row in rows if _matches(term, row.title, row.author)]
        return _sorted(rows, POEM_SORTS, sort)

    async def find_poem(self, slug: str) -> Optional[PoemListing]:
        """Get the poem with `slug`, or None"""
        poems, comments = await self._snapshot()
        counts = self._count_by_poem(poems, comments)
        for poem in poems:
            if as_text(poem.get("slug")) == slug:
                return self._poem_listing(poem, counts.get(str(poem.get("id")), 0))
        return None

    @log_execution("moderation.list_comments", category=LogCategory.MODERATION)
    async def list_comments(
        self,
        poem_slug: str,
        search: Optional[str] = None,
        sort: Optional[str] = DEFAULT_SORT
    ) -> List[CommentListing]:
        """
        List the comments of one poem

        Args:
            poem_slug: Slug of the poem
            search: Case-insensitive substring of the content or author
            sort: newest, oldest, a-z, z-a, replied or not-replied
        """
        comments = await self._store.list_all(Collection.COMMENTS)
        rows = [
            self._comment_listing(comment)
            for comment in comments
            if as_text(comment.get("poemSlug")) == poem_slug
        ]

        term = (search or "").strip().lower()
        if term:
            rows = [row for row in rows if _matches(term, row.content, row.author)]
        return _sorted(rows, COMMENT_SORTS, sort)

