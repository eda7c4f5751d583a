"""Shared test fixtures."""

import io
import struct
import zlib
from dataclasses import dataclass, field, replace
from pathlib import Path
from uuid import UUID, uuid4

import pytest
from PIL import Image

from wandduk.adapters.filesystem_image_store import FileSystemImageStore
from wandduk.config import Settings
from wandduk.domain.capture import CaptureStep
from wandduk.domain.errors import RecordNotFoundError, StorageUnavailableError
from wandduk.domain.records import MealRecord
from wandduk.services.capture import CaptureService, PhotoCapture
from wandduk.services.images import ImageStore
from wandduk.services.records import RecordRepository, RecordService

_COLORS: dict[str, object] = {
    "RGB": (200, 120, 40),
    "RGBA": (200, 120, 40, 128),
    "L": 128,
    "P": 3,
}


def make_image_bytes(
    size: tuple[int, int] = (32, 24),
    mode: str = "RGB",
    image_format: str = "PNG",
) -> bytes:
    color = _COLORS[mode]
    image = Image.new(mode, size, color)
    output = io.BytesIO()
    image.save(output, format=image_format)
    return output.getvalue()


def make_png_header(width: int, height: int) -> bytes:
    """Return a PNG that declares ``width`` x ``height`` but carries no pixels."""

    def chunk(kind: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(kind + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)

    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", header) + chunk(b"IEND", b"")


@dataclass
class InMemoryRecordRepository(RecordRepository):
    """In-memory record repository for tests."""

    records: dict[UUID, MealRecord] = field(default_factory=dict)
    fail_inserts: bool = False

    def insert_record(self, record: MealRecord) -> None:
        if self.fail_inserts:
            raise StorageUnavailableError("Database is read-only.")
        self.records[record.id] = record

    def replace_record(self, record: MealRecord) -> None:
        if record.id not in self.records:
            raise RecordNotFoundError(record.id)
        self.records[record.id] = record

    def delete_record(self, record_id: UUID) -> None:
        if record_id not in self.records:
            raise RecordNotFoundError(record_id)
        del self.records[record_id]

    def get_record(self, record_id: UUID) -> MealRecord | None:
        return self.records.get(record_id)

    def list_records(self, newest_first: bool = True) -> list[MealRecord]:
        return sorted(
            self.records.values(),
            key=lambda record: record.created_at,
            reverse=newest_first,
        )


@dataclass
class InMemoryImageStore(ImageStore):
    """In-memory image store for tests."""

    images: dict[str, bytes] = field(default_factory=dict)
    deleted: list[str] = field(default_factory=list)
    fail_with: Exception | None = None

    def save(self, image: bytes) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        path = f"WanddukImages/{uuid4()}.jpg"
        self.images[path] = image
        return path

    def load(self, relative_path: str) -> bytes | None:
        if not relative_path:
            return None
        return self.images.get(relative_path)

    def delete(self, relative_path: str) -> None:
        self.deleted.append(relative_path)
        self.images.pop(relative_path, None)


@dataclass
class FakePhotoCapture(PhotoCapture):
    """Photo capture that returns queued payloads."""

    payloads: list[bytes | None] = field(default_factory=list)
    steps: list[CaptureStep] = field(default_factory=list)

    async def capture_photo(self, step: CaptureStep) -> bytes | None:
        self.steps.append(step)
        if not self.payloads:
            return None
        return self.payloads.pop(0)


def build_record(**overrides: object) -> MealRecord:
    record = MealRecord(
        category="Gukbap",
        before_image_path="WanddukImages/before.jpg",
        after_image_path="WanddukImages/after.jpg",
    )
    return replace(record, **overrides)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(storage_root=tmp_path / "root", sample_capture_delay_seconds=0)


@pytest.fixture
def image_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def record_repository() -> InMemoryRecordRepository:
    return InMemoryRecordRepository()


@pytest.fixture
def record_service(record_repository: InMemoryRecordRepository) -> RecordService:
    return RecordService(record_repository)


@pytest.fixture
def memory_image_store() -> InMemoryImageStore:
    return InMemoryImageStore()


@pytest.fixture
def file_image_store(tmp_path: Path) -> FileSystemImageStore:
    return FileSystemImageStore(root=tmp_path)


@pytest.fixture
def capture_service(
    memory_image_store: InMemoryImageStore, record_service: RecordService
) -> CaptureService:
    return CaptureService(image_store=memory_image_store, record_service=record_service)

