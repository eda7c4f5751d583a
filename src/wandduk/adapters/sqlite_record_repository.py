"""SQLite repository for meal records."""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from uuid import UUID

from wandduk.domain.errors import RecordNotFoundError, StorageUnavailableError
from wandduk.domain.records import MealRecord
from wandduk.services.records import RecordRepository

_COLUMNS = (
    "id, created_at, category, before_image_path, after_image_path, "
    "saltiness, richness, spiciness, portion, side_dish, memo"
)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS meal_records (
    id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    category TEXT NOT NULL,
    before_image_path TEXT NOT NULL,
    after_image_path TEXT NOT NULL DEFAULT '',
    saltiness INTEGER NOT NULL,
    richness INTEGER NOT NULL,
    spiciness INTEGER NOT NULL,
    portion INTEGER NOT NULL,
    side_dish INTEGER NOT NULL,
    memo TEXT
);
"""

_INDEX = (
    "CREATE INDEX IF NOT EXISTS idx_meal_records_created "
    "ON meal_records(created_at DESC);"
)


@dataclass
class SqliteRecordRepository(RecordRepository):
    """SQLite implementation for meal record persistence."""

    db_path: Path | None

    def insert_record(self, record: MealRecord) -> None:
        """Insert a record row."""
        with self._connect() as conn:
            conn.execute(
                f"INSERT INTO meal_records ({_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                _to_row(record),
            )

    def replace_record(self, record: MealRecord) -> None:
        """Overwrite the editable columns of a record row; image paths are fixed."""
        with self._connect() as conn:
            cursor = conn.execute(
                """
                UPDATE meal_records
                SET category = ?, saltiness = ?, richness = ?, spiciness = ?,
                    portion = ?, side_dish = ?, memo = ?
                WHERE id = ?
                """,
                (
                    record.category,
                    record.saltiness,
                    record.richness,
                    record.spiciness,
                    record.portion,
                    record.side_dish,
                    record.memo,
                    str(record.id),
                ),
            )
            if cursor.rowcount == 0:
                raise RecordNotFoundError(record.id)

    def delete_record(self, record_id: UUID) -> None:
        """Delete a record row."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM meal_records WHERE id = ?", (str(record_id),)
            )
            if cursor.rowcount == 0:
                raise RecordNotFoundError(record_id)

    def get_record(self, record_id: UUID) -> MealRecord | None:
        """Return a record row by id."""
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM meal_records WHERE id = ? LIMIT 1",
                (str(record_id),),
            ).fetchone()
        if row is None:
            return None
        return _parse_row(row)

    def list_records(self, newest_first: bool = True) -> list[MealRecord]:
        """Return every record ordered by creation time."""
        direction = "DESC" if newest_first else "ASC"
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM meal_records "
                f"ORDER BY created_at {direction}, rowid {direction}"
            ).fetchall()
        return [_parse_row(row) for row in rows]

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        if self.db_path is None:
            raise StorageUnavailableError("Storage root could not be resolved.")
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path))
        except (OSError, sqlite3.Error) as exc:
            raise StorageUnavailableError(
                f"Could not open record database {self.db_path}."
            ) from exc
        conn.row_factory = sqlite3.Row
        try:
            conn.execute(_SCHEMA)
            conn.execute(_INDEX)
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageUnavailableError("Record database operation failed.") from exc
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()


def _to_row(record: MealRecord) -> tuple[object, ...]:
    return (
        str(record.id),
        _format_timestamp(record.created_at),
        record.category,
        record.before_image_path,
        record.after_image_path,
        record.saltiness,
        record.richness,
        record.spiciness,
        record.portion,
        record.side_dish,
        record.memo,
    )


def _format_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="microseconds")


def _parse_row(row: sqlite3.Row) -> MealRecord:
    return MealRecord(
        id=UUID(row["id"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        category=str(row["category"]),
        before_image_path=str(row["before_image_path"] or ""),
        after_image_path=str(row["after_image_path"] or ""),
        saltiness=int(row["saltiness"]),
        richness=int(row["richness"]),
        spiciness=int(row["spiciness"]),
        portion=int(row["portion"]),
        side_dish=int(row["side_dish"]),
        memo=row["memo"],
    )
