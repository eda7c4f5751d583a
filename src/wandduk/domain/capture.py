"""Domain models for the before/after capture workflow."""

from enum import StrEnum


class CaptureStep(StrEnum):
    """Which photo of the bowl is being taken."""

    BEFORE = "before"
    AFTER = "after"

    @property
    def title(self) -> str:
        return "Before" if self is CaptureStep.BEFORE else "Finished!"

    @property
    def instruction(self) -> str:
        if self is CaptureStep.BEFORE:
            return "Take a photo of your meal."
        return "Take a photo of the empty bowl."


class WorkflowState(StrEnum):
    """States of the capture and review workflow."""

    AWAITING_BEFORE = "AWAITING_BEFORE"
    AWAITING_AFTER = "AWAITING_AFTER"
    REVIEW_AND_RATE = "REVIEW_AND_RATE"
    SAVING = "SAVING"
    DONE = "DONE"
    CANCELLED = "CANCELLED"


TERMINAL_STATES = frozenset({WorkflowState.DONE, WorkflowState.CANCELLED})
