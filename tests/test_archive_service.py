"""Tests for the archive service."""

from datetime import UTC, date, datetime, timedelta, timezone
from pathlib import Path

import pytest

from tests.conftest import build_record
from wandduk.adapters.filesystem_image_store import FileSystemImageStore
from wandduk.domain.errors import RecordNotFoundError
from wandduk.services.archive import ArchiveService
from wandduk.services.records import RecordService


@pytest.fixture
def archive(
    record_service: RecordService, file_image_store: FileSystemImageStore
) -> ArchiveService:
    return ArchiveService(record_service=record_service, image_store=file_image_store)


def test_delete_record_removes_both_images(
    archive: ArchiveService,
    record_service: RecordService,
    file_image_store: FileSystemImageStore,
    tmp_path: Path,
    image_bytes: bytes,
) -> None:
    before = file_image_store.save(image_bytes)
    after = file_image_store.save(image_bytes)
    record = record_service.create_record(
        build_record(before_image_path=before, after_image_path=after)
    )

    archive.delete_record(record.id)

    assert not (tmp_path / before).exists()
    assert not (tmp_path / after).exists()
    assert record_service.list_records() == []


def test_delete_record_with_missing_images_succeeds(
    archive: ArchiveService, record_service: RecordService
) -> None:
    record = record_service.create_record(
        build_record(before_image_path="WanddukImages/gone.jpg", after_image_path="")
    )

    deleted = archive.delete_record(record.id)

    assert deleted.id == record.id
    assert record_service.get_record(record.id) is None


def test_delete_unknown_record_raises(archive: ArchiveService) -> None:
    record = build_record()

    with pytest.raises(RecordNotFoundError):
        archive.delete_record(record.id)


def test_records_on_filters_by_local_day(
    archive: ArchiveService, record_service: RecordService
) -> None:
    seoul = timezone(timedelta(hours=9))
    late_utc = record_service.create_record(
        build_record(created_at=datetime(2024, 3, 1, 20, 0, tzinfo=UTC))
    )
    morning = record_service.create_record(
        build_record(created_at=datetime(2024, 3, 2, 1, 0, tzinfo=UTC))
    )
    record_service.create_record(
        build_record(created_at=datetime(2024, 3, 3, 1, 0, tzinfo=UTC))
    )

    in_seoul = archive.records_on(date(2024, 3, 2), seoul)
    in_utc = archive.records_on(date(2024, 3, 1))

    assert [record.id for record in in_seoul] == [morning.id, late_utc.id]
    assert [record.id for record in in_utc] == [late_utc.id]


def test_record_counts_by_day_for_month(
    archive: ArchiveService, record_service: RecordService
) -> None:
    for moment in (
        datetime(2024, 3, 1, 8, 0, tzinfo=UTC),
        datetime(2024, 3, 1, 19, 0, tzinfo=UTC),
        datetime(2024, 3, 15, 12, 0, tzinfo=UTC),
        datetime(2024, 4, 1, 12, 0, tzinfo=UTC),
    ):
        record_service.create_record(build_record(created_at=moment))

    counts = archive.record_counts_by_day(2024, 3)

    assert counts == {date(2024, 3, 1): 2, date(2024, 3, 15): 1}


def test_records_in_category(
    archive: ArchiveService, record_service: RecordService
) -> None:
    ramen = record_service.create_record(build_record(category="Ramen"))
    record_service.create_record(build_record(category="Gukbap"))

    assert archive.records_in_category("Ramen") == [ramen]


def test_load_images_returns_none_for_skipped_after(
    archive: ArchiveService,
    record_service: RecordService,
    file_image_store: FileSystemImageStore,
    image_bytes: bytes,
) -> None:
    before = file_image_store.save(image_bytes)
    record = record_service.create_record(
        build_record(before_image_path=before, after_image_path="")
    )

    before_bytes, after_bytes = archive.load_images(record)

    assert before_bytes is not None
    assert after_bytes is None


def test_taste_summary_labels_each_rating(
    archive: ArchiveService, record_service: RecordService
) -> None:
    record = record_service.create_record(build_record(saltiness=1, spiciness=7))

    summary = {
        result.dimension.id: result.feedback
        for result in archive.taste_summary(record.id)
    }

    assert summary["saltiness"] == "Bland"
    assert summary["spiciness"] == "Spicy"
    assert summary["side_dish"] == "Tasty"


def test_taste_summary_unknown_record(archive: ArchiveService) -> None:
    with pytest.raises(RecordNotFoundError):
        archive.taste_summary(build_record().id)
