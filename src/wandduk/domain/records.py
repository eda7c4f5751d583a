"""Domain models for meal records."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from uuid import UUID, uuid4

DEFAULT_RATING = 4
MIN_RATING = 1
MAX_RATING = 7

RATING_FIELDS = ("saltiness", "richness", "spiciness", "portion", "side_dish")

SUPPORTED_CATEGORIES = ("Gukbap", "Ramen")

_CATEGORY_EMOJI = {
    "Gukbap": "🍲",
    "Ramen": "🍜",
}
_FALLBACK_EMOJI = "🍽️"


@dataclass(frozen=True)
class MealRecord:
    """One logged bowl with before/after photos and taste ratings."""

    category: str
    before_image_path: str
    after_image_path: str = ""
    saltiness: int = DEFAULT_RATING
    richness: int = DEFAULT_RATING
    spiciness: int = DEFAULT_RATING
    portion: int = DEFAULT_RATING
    side_dish: int = DEFAULT_RATING
    memo: str | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def category_emoji(self) -> str:
        """Return the display emoji for the record's category."""
        return _CATEGORY_EMOJI.get(self.category, _FALLBACK_EMOJI)

    @property
    def ratings(self) -> dict[str, int]:
        """Return the five ratings keyed by field name, in display order."""
        return {name: getattr(self, name) for name in RATING_FIELDS}

    @property
    def image_paths(self) -> tuple[str, str]:
        return self.before_image_path, self.after_image_path


class ChangeKind(StrEnum):
    """Kind of mutation applied to the record store."""

    INSERTED = "inserted"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True)
class RecordChange:
    """Notification payload delivered to record store subscribers."""

    kind: ChangeKind
    record: MealRecord


def clamp_rating(value: float) -> int:
    """Clamp a rating to the slider's seven snap positions."""
    return max(MIN_RATING, min(MAX_RATING, int(round(value))))


def normalize_memo(memo: str | None) -> str | None:
    """Collapse an empty memo to None."""
    if memo is None or not memo.strip():
        return None
    return memo
