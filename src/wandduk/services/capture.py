"""Before/after capture and review workflow."""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Protocol
from uuid import UUID

from wandduk.domain.capture import TERMINAL_STATES, CaptureStep, WorkflowState
from wandduk.domain.errors import (
    InvalidTransitionError,
    RecordNotFoundError,
    WanddukError,
)
from wandduk.domain.records import (
    DEFAULT_RATING,
    RATING_FIELDS,
    SUPPORTED_CATEGORIES,
    MealRecord,
    clamp_rating,
    normalize_memo,
)
from wandduk.services.images import ImageStore
from wandduk.services.records import RecordService

_logger = logging.getLogger(__name__)


class PhotoCapture(Protocol):
    """Source of photos for the capture steps."""

    async def capture_photo(self, step: CaptureStep) -> bytes | None:
        """Take a photo for ``step``; None when nothing was captured."""


def _default_ratings() -> dict[str, int]:
    return {name: DEFAULT_RATING for name in RATING_FIELDS}


@dataclass
class CaptureWorkflow:
    """State machine guiding one record from capture to save.

    Create mode walks AWAITING_BEFORE -> AWAITING_AFTER -> REVIEW_AND_RATE ->
    SAVING -> DONE. Edit mode starts at REVIEW_AND_RATE with the stored
    record's values and never re-captures or re-saves images.
    """

    image_store: ImageStore
    record_service: RecordService
    state: WorkflowState = WorkflowState.AWAITING_BEFORE
    category: str = SUPPORTED_CATEGORIES[0]
    memo: str | None = None
    before_image: bytes | None = None
    after_image: bytes | None = None
    editing: MealRecord | None = None
    error: str | None = None
    _ratings: dict[str, int] = field(default_factory=_default_ratings)

    @classmethod
    def for_edit(
        cls,
        record: MealRecord,
        image_store: ImageStore,
        record_service: RecordService,
    ) -> "CaptureWorkflow":
        """Start a workflow at the review form pre-filled from ``record``."""
        return cls(
            image_store=image_store,
            record_service=record_service,
            state=WorkflowState.REVIEW_AND_RATE,
            category=record.category,
            memo=record.memo,
            editing=record,
            _ratings=dict(record.ratings),
        )

    @property
    def is_editing(self) -> bool:
        return self.editing is not None

    @property
    def current_step(self) -> CaptureStep | None:
        """Return the photo step being captured, if any."""
        if self.state == WorkflowState.AWAITING_BEFORE:
            return CaptureStep.BEFORE
        if self.state == WorkflowState.AWAITING_AFTER:
            return CaptureStep.AFTER
        return None

    @property
    def step_prompt(self) -> tuple[str, str] | None:
        """Return the title and instruction for the current capture step."""
        step = self.current_step
        if step is None:
            return None
        return step.title, step.instruction

    @property
    def ratings(self) -> dict[str, int]:
        return dict(self._ratings)

    @property
    def before_image_path(self) -> str | None:
        """Stored before-image path in edit mode; read-only."""
        return self.editing.before_image_path if self.editing else None

    @property
    def after_image_path(self) -> str | None:
        """Stored after-image path in edit mode; read-only."""
        return self.editing.after_image_path if self.editing else None

    def capture(self, image: bytes | None) -> WorkflowState:
        """Hold a captured image and advance to the next step.

        A None capture (the camera produced nothing) leaves the state as is.
        """
        step = self._require_capture_step("capture")
        if image is None:
            return self.state
        if step is CaptureStep.BEFORE:
            self.before_image = image
            self.state = WorkflowState.AWAITING_AFTER
        else:
            self.after_image = image
            self.state = WorkflowState.REVIEW_AND_RATE
        return self.state

    def retake(self, image: bytes | None) -> WorkflowState:
        """Replace the image held for the current step without advancing."""
        step = self._require_capture_step("retake")
        if image is None:
            return self.state
        if step is CaptureStep.BEFORE:
            self.before_image = image
        else:
            self.after_image = image
        return self.state

    def proceed(self) -> WorkflowState:
        """Advance past the current step using the image already held."""
        step = self._require_capture_step("proceed")
        if step is CaptureStep.BEFORE:
            if self.before_image is None:
                raise InvalidTransitionError("A before photo is required.")
            self.state = WorkflowState.AWAITING_AFTER
        else:
            self.state = WorkflowState.REVIEW_AND_RATE
        return self.state

    def skip(self) -> WorkflowState:
        """Skip the after photo and go to the review form."""
        self._require(WorkflowState.AWAITING_AFTER, "skip")
        self.after_image = None
        self.state = WorkflowState.REVIEW_AND_RATE
        return self.state

    def back(self) -> WorkflowState:
        """Step back; leaving the first step cancels the workflow."""
        if self.state == WorkflowState.AWAITING_BEFORE:
            return self.cancel()
        if self.state == WorkflowState.AWAITING_AFTER:
            self.after_image = None
            self.state = WorkflowState.AWAITING_BEFORE
            return self.state
        if self.state == WorkflowState.REVIEW_AND_RATE:
            if self.is_editing:
                return self.cancel()
            self.after_image = None
            self.state = WorkflowState.AWAITING_AFTER
            return self.state
        raise InvalidTransitionError(f"Cannot go back from {self.state}.")

    def cancel(self) -> WorkflowState:
        """Abandon the workflow, discarding any captured images."""
        if self.state == WorkflowState.SAVING or self.state in TERMINAL_STATES:
            raise InvalidTransitionError(f"Cannot cancel from {self.state}.")
        self.before_image = None
        self.after_image = None
        self.state = WorkflowState.CANCELLED
        return self.state

    async def take_photo(self, photo_capture: PhotoCapture) -> WorkflowState:
        """Capture a photo for the current step from ``photo_capture``."""
        step = self._require_capture_step("take a photo")
        image = await photo_capture.capture_photo(step)
        return self.capture(image)

    def set_rating(self, name: str, value: float) -> int:
        """Set one rating, snapped to the 1-7 slider positions."""
        self._require(WorkflowState.REVIEW_AND_RATE, "rate")
        if name not in self._ratings:
            raise ValueError(f"Unknown rating: {name}")
        self._ratings[name] = clamp_rating(value)
        return self._ratings[name]

    def reset_ratings(self) -> None:
        """Put every rating back to the midpoint; category and memo stay."""
        self._require(WorkflowState.REVIEW_AND_RATE, "reset ratings")
        self._ratings = _default_ratings()

    def select_category(self, category: str) -> None:
        self._require(WorkflowState.REVIEW_AND_RATE, "select a category")
        if category not in SUPPORTED_CATEGORIES:
            raise ValueError(f"Unsupported category: {category}")
        self.category = category

    async def save(self) -> MealRecord | None:
        """Persist the record; on failure return to the form and set ``error``."""
        self._require(WorkflowState.REVIEW_AND_RATE, "save")
        self.state = WorkflowState.SAVING
        self.error = None
        try:
            if self.editing is not None:
                record = self._update(self.editing.id)
            else:
                record = await self._create()
        except WanddukError as exc:
            _logger.warning("Saving record failed: %s", exc)
            self.error = exc.message
            self.state = WorkflowState.REVIEW_AND_RATE
            return None
        except Exception:
            _logger.exception("Saving record failed unexpectedly")
            self.error = "Could not save the record."
            self.state = WorkflowState.REVIEW_AND_RATE
            raise
        self.before_image = None
        self.after_image = None
        self.state = WorkflowState.DONE
        return record

    async def _create(self) -> MealRecord:
        before_path = await self._save_image(self.before_image)
        after_path = await self._save_image(self.after_image)
        record = MealRecord(
            category=self.category,
            before_image_path=before_path,
            after_image_path=after_path,
            memo=normalize_memo(self.memo),
            **self._ratings,
        )
        return self.record_service.create_record(record)

    def _update(self, record_id: UUID) -> MealRecord:
        category = self.category
        memo = normalize_memo(self.memo)
        ratings = dict(self._ratings)

        def apply_form(record: MealRecord) -> MealRecord:
            return replace(record, category=category, memo=memo, **ratings)

        return self.record_service.update_record(record_id, apply_form)

    async def _save_image(self, image: bytes | None) -> str:
        if image is None:
            return ""
        return await asyncio.to_thread(self.image_store.save, image)

    def _require(self, expected: WorkflowState, action: str) -> None:
        if self.state != expected:
            raise InvalidTransitionError(f"Cannot {action} from {self.state}.")

    def _require_capture_step(self, action: str) -> CaptureStep:
        step = self.current_step
        if step is None:
            raise InvalidTransitionError(f"Cannot {action} from {self.state}.")
        return step


@dataclass
class CaptureService:
    """Starts capture workflows for new and existing records."""

    image_store: ImageStore
    record_service: RecordService

    def start_capture(self) -> CaptureWorkflow:
        return CaptureWorkflow(
            image_store=self.image_store, record_service=self.record_service
        )

    def start_edit(self, record_id: UUID) -> CaptureWorkflow:
        """Open the review form for an existing record."""
        record = self.record_service.get_record(record_id)
        if record is None:
            _logger.warning("Cannot edit missing record: id=%s", record_id)
            raise RecordNotFoundError(record_id)
        return CaptureWorkflow.for_edit(record, self.image_store, self.record_service)
