"""Record store service with change subscriptions."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Protocol
from uuid import UUID

from wandduk.domain.errors import RecordNotFoundError
from wandduk.domain.records import ChangeKind, MealRecord, RecordChange

_logger = logging.getLogger(__name__)

RecordListener = Callable[[RecordChange], None]
RecordMutator = Callable[[MealRecord], MealRecord]


class RecordRepository(Protocol):
    """Persistence interface for meal records."""

    def insert_record(self, record: MealRecord) -> None:
        """Persist a new record."""

    def replace_record(self, record: MealRecord) -> None:
        """Overwrite a stored record; raise RecordNotFoundError if absent."""

    def delete_record(self, record_id: UUID) -> None:
        """Remove a record; raise RecordNotFoundError if absent."""

    def get_record(self, record_id: UUID) -> MealRecord | None:
        """Return a record by id, if present."""

    def list_records(self, newest_first: bool = True) -> list[MealRecord]:
        """Return every record ordered by creation time."""


@dataclass
class RecordService:
    """Ordered CRUD over meal records that notifies subscribers on change."""

    repository: RecordRepository
    _listeners: list[RecordListener] = field(default_factory=list, repr=False)

    def subscribe(self, listener: RecordListener) -> Callable[[], None]:
        """Register a change callback and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def create_record(self, record: MealRecord) -> MealRecord:
        """Append a record to the store."""
        self.repository.insert_record(record)
        _logger.info("Record inserted: id=%s category=%s", record.id, record.category)
        self._notify(RecordChange(kind=ChangeKind.INSERTED, record=record))
        return record

    def update_record(self, record_id: UUID, mutator: RecordMutator) -> MealRecord:
        """Apply ``mutator`` to a stored record and persist the result.

        The identity, creation time and image paths of the record never change.
        """
        current = self.get_record(record_id)
        if current is None:
            raise self._not_found(record_id)
        updated = replace(
            mutator(current),
            id=current.id,
            created_at=current.created_at,
            before_image_path=current.before_image_path,
            after_image_path=current.after_image_path,
        )
        self.repository.replace_record(updated)
        _logger.info("Record updated: id=%s", record_id)
        self._notify(RecordChange(kind=ChangeKind.UPDATED, record=updated))
        return updated

    def delete_record(self, record_id: UUID) -> MealRecord:
        """Remove a record and return it. Image files are left to the caller."""
        current = self.get_record(record_id)
        if current is None:
            raise self._not_found(record_id)
        self.repository.delete_record(record_id)
        _logger.info("Record deleted: id=%s", record_id)
        self._notify(RecordChange(kind=ChangeKind.DELETED, record=current))
        return current

    def get_record(self, record_id: UUID) -> MealRecord | None:
        return self.repository.get_record(record_id)

    def list_records(self, newest_first: bool = True) -> list[MealRecord]:
        """Return every record, newest first by default."""
        return self.repository.list_records(newest_first=newest_first)

    def _notify(self, change: RecordChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                _logger.exception(
                    "Record listener failed: kind=%s id=%s",
                    change.kind,
                    change.record.id,
                )

    @staticmethod
    def _not_found(record_id: UUID) -> RecordNotFoundError:
        _logger.warning("Record not found: id=%s", record_id)
        return RecordNotFoundError(record_id)
