"""
Plain record types shared by repositories, services and routes.

Rows come out of sqlite3 as sqlite3.Row; the from_row() constructors turn
them into these records at the repository boundary.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional

NEGATIVE_PREFIX = "-"
RATING_PREFIX = "rating:"


class Rating(str, Enum):
    """Content maturity rating, ordered unrated < safe < questionable < explicit."""
    UNRATED = "u"
    SAFE = "s"
    QUESTIONABLE = "q"
    EXPLICIT = "e"

    @property
    def rank(self) -> int:
        return _RATING_RANKS[self]

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    def __lt__(self, other):
        if not isinstance(other, Rating):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Rating):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Rating):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Rating):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def from_code(cls, code: Optional[str]) -> "Rating":
        """Parse a stored code. Anything unknown reads as unrated."""
        try:
            return cls((code or "").lower())
        except ValueError:
            return cls.UNRATED

    @classmethod
    def codes(cls):
        return [rating.value for rating in cls]


_RATING_RANKS = {rating: rank for rank, rating in enumerate(Rating)}


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class User:
    """Acting identity attached to a request."""
    id: int
    username: str
    is_admin: bool = False

    @classmethod
    def from_row(cls, row) -> "User":
        return cls(id=row['id'], username=row['username'], is_admin=bool(row['is_admin']))


@dataclass(frozen=True)
class Tag:
    id: int
    name: str
    normalized_name: str

    @classmethod
    def from_row(cls, row) -> "Tag":
        return cls(id=row['id'], name=row['name'], normalized_name=row['normalized_name'])

    def to_dict(self):
        return asdict(self)


def sort_tag_string(tags: Optional[str]) -> Optional[str]:
    """Sort an aggregated, space-joined tag string. None stays None."""
    if tags is None:
        return None
    return " ".join(sorted(tags.split()))


@dataclass(frozen=True)
class PostOverview:
    """One search result: enough to render a thumbnail card."""
    id: int
    thumbnail: str
    media: str
    title: Optional[str]
    description: Optional[str]
    uploaded_at: str
    tags: Optional[str]
    media_type: str
    rating: str

    @classmethod
    def from_row(cls, row) -> "PostOverview":
        return cls(
            id=row['id'],
            thumbnail=row['thumbnail'],
            media=row['media'],
            title=row['title'],
            description=row['description'],
            uploaded_at=row['uploaded_at'],
            tags=sort_tag_string(row['tags']),
            media_type=row['media_type'],
            rating=row['rating'],
        )

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class PoolPost:
    """A post as a member of a pool, carrying its ordering key."""
    id: int
    thumbnail: str
    rating: str
    media_type: str
    pool_post_id: int
    position: float
    tags: Optional[str]

    @classmethod
    def from_row(cls, row) -> "PoolPost":
        return cls(
            id=row['id'],
            thumbnail=row['thumbnail'],
            rating=row['rating'],
            media_type=row['media_type'],
            pool_post_id=row['pool_post_id'],
            position=row['position'],
            tags=sort_tag_string(row['tags']),
        )

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class PoolMembership:
    id: int
    pool_id: int
    post_id: int
    position: float

    @classmethod
    def from_row(cls, row) -> "PoolMembership":
        return cls(id=row['id'], pool_id=row['pool_id'], post_id=row['post_id'], position=row['position'])

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class PostPoolData:
    """Neighbour navigation for a post inside one pool."""
    id: int
    name: str
    previous_post_id: Optional[int]
    next_post_id: Optional[int]

    def to_dict(self):
        return asdict(self)
