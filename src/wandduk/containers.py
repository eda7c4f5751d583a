"""Dependency container wiring for the application."""

from dataclasses import dataclass

from wandduk.adapters.filesystem_image_store import FileSystemImageStore
from wandduk.adapters.sample_photo_capture import SamplePhotoCapture
from wandduk.adapters.sqlite_record_repository import SqliteRecordRepository
from wandduk.app_logging import configure_logging
from wandduk.config import Settings, resolve_storage_root
from wandduk.services.archive import ArchiveService
from wandduk.services.capture import CaptureService, PhotoCapture
from wandduk.services.images import ImageStore
from wandduk.services.records import RecordService
from wandduk.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    image_store: ImageStore
    photo_capture: PhotoCapture
    record_service: RecordService
    archive_service: ArchiveService
    stats_service: StatsService
    capture_service: CaptureService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    storage_root = resolve_storage_root(resolved_settings)
    image_store = FileSystemImageStore(
        root=storage_root,
        directory=resolved_settings.image_directory,
        quality=resolved_settings.jpeg_quality,
    )
    record_repository = SqliteRecordRepository(
        db_path=(
            storage_root / resolved_settings.database_filename
            if storage_root is not None
            else None
        )
    )
    record_service = RecordService(record_repository)
    photo_capture = SamplePhotoCapture(
        delay_seconds=resolved_settings.sample_capture_delay_seconds
    )
    return AppContainer(
        settings=resolved_settings,
        image_store=image_store,
        photo_capture=photo_capture,
        record_service=record_service,
        archive_service=ArchiveService(
            record_service=record_service, image_store=image_store
        ),
        stats_service=StatsService(record_service),
        capture_service=CaptureService(
            image_store=image_store, record_service=record_service
        ),
    )
