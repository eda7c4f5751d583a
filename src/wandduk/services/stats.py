"""Taste profile statistics over the record store."""

from collections.abc import Sequence
from dataclasses import dataclass

from wandduk.domain.records import MealRecord
from wandduk.domain.stats import ZERO_PROFILE, TasteProfile
from wandduk.services.records import RecordService

HIGH_THRESHOLD = 5.0
LOW_THRESHOLD = 2.0
HIGH_SODIUM_THRESHOLD = 5.5

NO_RECORDS_MESSAGE = "No records yet. Log your first bowl to build a taste profile."

_SPICY_CLAUSE = "spicy"
_MILD_CLAUSE = "mild"
_RICH_BROTH_CLAUSE = "rich, deep broth"
_CLEAN_BROTH_CLAUSE = "clean, clear broth"
_BALANCED_BROTH_CLAUSE = "a balanced broth"
_HIGH_SODIUM_CLAUSE = " You also like things on the salty side, so watch the sodium."


@dataclass
class StatsService:
    """Service for computing the taste profile from current records."""

    record_service: RecordService

    def get_profile(self) -> TasteProfile:
        """Return averages over a fresh snapshot of every record."""
        return compute_profile(self.record_service.list_records())

    def get_description(self) -> str:
        return describe_profile(self.get_profile())


def compute_profile(records: Sequence[MealRecord]) -> TasteProfile:
    """Average each rating across ``records``; empty input yields zeros."""
    total = len(records)
    if total == 0:
        return ZERO_PROFILE
    return TasteProfile(
        average_saltiness=sum(r.saltiness for r in records) / total,
        average_richness=sum(r.richness for r in records) / total,
        average_spiciness=sum(r.spiciness for r in records) / total,
        average_portion=sum(r.portion for r in records) / total,
        average_side_dish=sum(r.side_dish for r in records) / total,
        total_records=total,
    )


def describe_profile(profile: TasteProfile) -> str:
    """Summarize a profile in one sentence using fixed thresholds."""
    if profile.total_records == 0:
        return NO_RECORDS_MESSAGE

    spice = _spice_clause(profile.average_spiciness)
    broth = _broth_clause(profile.average_richness)
    if spice:
        sentence = f"You lean toward {spice} bowls with {broth}."
    else:
        sentence = f"You lean toward bowls with {broth}."
    if profile.average_saltiness >= HIGH_SODIUM_THRESHOLD:
        sentence += _HIGH_SODIUM_CLAUSE
    return sentence


def _spice_clause(spiciness: float) -> str | None:
    if spiciness >= HIGH_THRESHOLD:
        return _SPICY_CLAUSE
    if spiciness <= LOW_THRESHOLD:
        return _MILD_CLAUSE
    return None


def _broth_clause(richness: float) -> str:
    if richness >= HIGH_THRESHOLD:
        return _RICH_BROTH_CLAUSE
    if richness <= LOW_THRESHOLD:
        return _CLEAN_BROTH_CLAUSE
    return _BALANCED_BROTH_CLAUSE
