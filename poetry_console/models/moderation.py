"""
Moderation listing Pydantic models
"""
from datetime import datetime
from typing import Optional

from .base import CamelModel


class PoemListing(CamelModel):
    """Poem row of the moderation screen"""
    id: str
    slug: str = ""
    title: str = ""
    author: str = ""
    date_posted: Optional[datetime] = None
    comment_count: int = 0


class CommentListing(CamelModel):
    """Comment row of the moderation screen"""
    id: str
    poem_slug: str = ""
    author: str = ""
    content: str = ""
    timestamp: Optional[datetime] = None
    admin_reply: Optional[str] = None
    replied: bool = False


class ReplySummary(CamelModel):
    """How many comments have an admin reply"""
    total: int = 0
    replied: int = 0
    unreplied: int = 0
