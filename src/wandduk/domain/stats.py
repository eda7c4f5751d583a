"""Domain models for statistics."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TasteProfile:
    """Average ratings across every stored record."""

    average_saltiness: float
    average_richness: float
    average_spiciness: float
    average_portion: float
    average_side_dish: float
    total_records: int


ZERO_PROFILE = TasteProfile(
    average_saltiness=0.0,
    average_richness=0.0,
    average_spiciness=0.0,
    average_portion=0.0,
    average_side_dish=0.0,
    total_records=0,
)
