"""Sample photo capture for development without a camera."""

import asyncio
import io
import random
from dataclasses import dataclass, field

from PIL import Image

from wandduk.domain.capture import CaptureStep
from wandduk.services.capture import PhotoCapture

_SAMPLE_COLORS = {
    "gukbap": (196, 150, 98),
    "ramen": (222, 176, 84),
}


@dataclass
class SamplePhotoCapture(PhotoCapture):
    """Returns a generated sample photo after a short delay."""

    delay_seconds: float = 0.3
    size: tuple[int, int] = (640, 480)
    rng: random.Random = field(default_factory=random.Random)

    async def capture_photo(self, step: CaptureStep) -> bytes | None:
        """Render a solid-colour JPEG standing in for a camera shot."""
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        color = self.rng.choice(list(_SAMPLE_COLORS.values()))
        if step is CaptureStep.AFTER:
            color = tuple(min(255, channel + 40) for channel in color)
        image = Image.new("RGB", self.size, color)
        output = io.BytesIO()
        image.save(output, format="JPEG")
        return output.getvalue()
