"""
Pydantic models for the Binder engine.

Models cover:
- Swipe direction and its wire literals
- Candidates served in a deck
- Decisions and saved-set entries as persisted rows
- Ephemeral deck requests and per-candidate statistics

Field names are snake_case in Python and camelCase on the wire.
Storage rows use the column names of the Supabase relations
(startup_id, investor_id, industry, ace_score, ...); the ``from_row``
constructors are the only place that mapping lives.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from binder.errors import InvalidDirection
from config.constants import ALL_CATEGORIES, DECK_PAGE_SIZE


# =============================================================================
# Direction
# =============================================================================

class Direction(str, Enum):
    """An actor's judgment of a candidate."""
    POSITIVE = "positive"
    NEGATIVE = "negative"

    @property
    def wire(self) -> str:
        """The literal used over HTTP and in the direction column."""
        return "right" if self is Direction.POSITIVE else "left"

    @classmethod
    def parse(cls, value: Any) -> "Direction":
        """
        Accept a Direction, a domain literal or a wire literal.

        Raises:
            InvalidDirection: for anything else, including None
        """
        if isinstance(value, Direction):
            return value
        if isinstance(value, str):
            found = _DIRECTION_LITERALS.get(value)
            if found is not None:
                return found
        raise InvalidDirection(value)


_DIRECTION_LITERALS: Dict[str, Direction] = {
    "positive": Direction.POSITIVE,
    "negative": Direction.NEGATIVE,
    "right": Direction.POSITIVE,
    "left": Direction.NEGATIVE,
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_category(value: Any) -> str:
    """Blank or missing categories mean "All"."""
    if value is None:
        return ALL_CATEGORIES
    value = str(value).strip()
    return value or ALL_CATEGORIES


def _as_tags(value: Any) -> List[str]:
    # stage/size/industry are text[] but older rows hold a bare string
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    return [str(v) for v in value if v]


# =============================================================================
# Base
# =============================================================================

class WireModel(BaseModel):
    """Base model serialized with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Candidate
# =============================================================================

class Candidate(WireModel):
    """A startup eligible to be swiped on. Read-only to the engine."""
    id: str
    name: str
    image_url: Optional[str] = None
    description: Optional[str] = None
    stages: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    quality_score: Optional[float] = Field(
        default=None,
        description="ACE score, 0-100"
    )

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Candidate":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            image_url=row.get("image_url"),
            description=row.get("description"),
            stages=_as_tags(row.get("stage")),
            sizes=_as_tags(row.get("size")),
            categories=_as_tags(row.get("industry")),
            created_at=row.get("created_at"),
            quality_score=row.get("ace_score"),
        )


# =============================================================================
# Decision / SavedEntry
# =============================================================================

class Decision(WireModel):
    """One actor's persisted judgment of one candidate."""
    candidate_id: str
    actor_id: str
    direction: Direction
    timestamp: datetime

    @field_validator("direction", mode="before")
    @classmethod
    def parse_direction(cls, v):
        return Direction.parse(v)

    @field_serializer("direction")
    def serialize_direction(self, direction: Direction) -> str:
        return direction.wire

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Decision":
        return cls(
            candidate_id=str(row["startup_id"]),
            actor_id=str(row["investor_id"]),
            direction=row["direction"],
            timestamp=row.get("created_at") or utcnow(),
        )


class SavedEntry(WireModel):
    """A candidate the actor has shortlisted."""
    actor_id: str
    candidate_id: str
    timestamp: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SavedEntry":
        return cls(
            actor_id=str(row["investor_id"]),
            candidate_id=str(row["startup_id"]),
            timestamp=row.get("created_at"),
        )


# =============================================================================
# Ephemeral
# =============================================================================

class DeckRequest(BaseModel):
    """Inputs of one deck composition. Never persisted."""
    actor_id: str
    category: str = ALL_CATEGORIES
    page_size: int = Field(default=DECK_PAGE_SIZE, ge=1)

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v):
        return normalize_category(v)

    @property
    def category_filter(self) -> Optional[str]:
        """The category to filter on, or None when every category is wanted."""
        return None if self.category == ALL_CATEGORIES else self.category


class CandidateStats(WireModel):
    """Decision counts for one candidate."""
    total: int = 0
    positive: int = 0

    def record(self, direction: Direction) -> None:
        self.total += 1
        if direction is Direction.POSITIVE:
            self.positive += 1


StatsSnapshot = Dict[str, CandidateStats]
