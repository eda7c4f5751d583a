"""Archive queries and cascading deletion for the calendar views."""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import UTC, date, datetime, tzinfo
from uuid import UUID

from wandduk.domain.errors import RecordNotFoundError
from wandduk.domain.records import MealRecord
from wandduk.domain.taste import TasteResult, taste_results
from wandduk.services.images import ImageStore
from wandduk.services.records import RecordService

_logger = logging.getLogger(__name__)


@dataclass
class ArchiveService:
    """Browse stored records by day and month, and delete them with their photos."""

    record_service: RecordService
    image_store: ImageStore

    def delete_record(self, record_id: UUID) -> MealRecord:
        """Delete a record, then remove both of its images best-effort."""
        record = self.record_service.delete_record(record_id)
        for path in record.image_paths:
            if path:
                self.image_store.delete(path)
        _logger.info("Record images removed: id=%s", record_id)
        return record

    def records_on(self, day: date, tz: tzinfo = UTC) -> list[MealRecord]:
        """Return the records created on ``day`` in ``tz``, newest first."""
        return [
            record
            for record in self.record_service.list_records()
            if _local_day(record.created_at, tz) == day
        ]

    def record_counts_by_day(
        self, year: int, month: int, tz: tzinfo = UTC
    ) -> dict[date, int]:
        """Return how many records fall on each day of a month."""
        counts: Counter[date] = Counter()
        for record in self.record_service.list_records():
            day = _local_day(record.created_at, tz)
            if day.year == year and day.month == month:
                counts[day] += 1
        return dict(counts)

    def records_in_category(self, category: str) -> list[MealRecord]:
        return [
            record
            for record in self.record_service.list_records()
            if record.category == category
        ]

    def taste_summary(self, record_id: UUID) -> list[TasteResult]:
        """Return each rating of a record with its feedback label."""
        record = self.record_service.get_record(record_id)
        if record is None:
            _logger.warning("Record not found: id=%s", record_id)
            raise RecordNotFoundError(record_id)
        return taste_results(record)

    def load_images(self, record: MealRecord) -> tuple[bytes | None, bytes | None]:
        """Return the before and after image bytes, None where missing."""
        return (
            self.image_store.load(record.before_image_path),
            self.image_store.load(record.after_image_path),
        )


def _local_day(moment: datetime, tz: tzinfo) -> date:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(tz).date()
