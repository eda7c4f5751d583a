"""Taste dimensions rated on the review form."""

from dataclasses import dataclass

from wandduk.domain.records import MealRecord


@dataclass(frozen=True)
class TasteDimension:
    """One rating axis with labels for both ends and the midpoint."""

    id: str
    icon: str
    name: str
    left_label: str
    center_label: str
    right_label: str

    def feedback(self, value: int) -> str:
        """Return the feedback phrase for a 7-point rating."""
        match value:
            case 1:
                return self.left_label
            case 2:
                return f"A bit {self.left_label.lower()}"
            case 3:
                return f"Slightly {self.left_label.lower()}"
            case 5:
                return f"Slightly {self.right_label.lower()}"
            case 6:
                return f"A bit {self.right_label.lower()}"
            case 7:
                return self.right_label
            case _:
                return self.center_label


@dataclass(frozen=True)
class TasteResult:
    """A record's rating on one dimension with its feedback label."""

    dimension: TasteDimension
    value: int
    feedback: str


GUKBAP_DIMENSIONS: tuple[TasteDimension, ...] = (
    TasteDimension(
        id="saltiness",
        icon="🧂",
        name="Seasoning",
        left_label="Bland",
        center_label="Just right!",
        right_label="Salty",
    ),
    TasteDimension(
        id="richness",
        icon="🍲",
        name="Broth",
        left_label="Clear",
        center_label="Balanced",
        right_label="Rich",
    ),
    TasteDimension(
        id="spiciness",
        icon="🌶️",
        name="Heat",
        left_label="Mild",
        center_label="Warming",
        right_label="Spicy",
    ),
    TasteDimension(
        id="portion",
        icon="🥩",
        name="Toppings",
        left_label="Skimpy",
        center_label="Filling",
        right_label="Generous",
    ),
    TasteDimension(
        id="side_dish",
        icon="🥬",
        name="Kimchi",
        left_label="Ordinary",
        center_label="Tasty",
        right_label="Steals the show!",
    ),
)


def taste_results(
    record: MealRecord,
    dimensions: tuple[TasteDimension, ...] = GUKBAP_DIMENSIONS,
) -> list[TasteResult]:
    """Pair each dimension with the record's rating and feedback label."""
    results = []
    for dimension in dimensions:
        value = int(getattr(record, dimension.id))
        results.append(
            TasteResult(
                dimension=dimension,
                value=value,
                feedback=dimension.feedback(value),
            )
        )
    return results
