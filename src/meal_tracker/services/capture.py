"""Turns a captured meal photo into a meal record."""

import asyncio
import base64
import logging
from dataclasses import dataclass
from datetime import datetime

from meal_tracker.domain.errors import CaptureError
from meal_tracker.domain.meals import MealRecord
from meal_tracker.services.estimator import Estimator
from meal_tracker.services.ledger import new_meal

logger = logging.getLogger(__name__)


@dataclass
class CaptureService:
    """Reads a photo, asks the estimator for calories and builds the record."""

    estimator: Estimator
    timeout_seconds: float | None = None

    async def capture(
        self, image_bytes: bytes, now: datetime | None = None
    ) -> MealRecord:
        """Return a new meal record for the photo or raise CaptureError."""
        if not image_bytes:
            raise CaptureError("The selected file is empty.")
        data_url = to_data_url(image_bytes)
        try:
            calories = await asyncio.wait_for(
                self.estimator.estimate(image_bytes), timeout=self.timeout_seconds
            )
        except TimeoutError as exc:
            logger.warning(
                "Calorie estimation timed out",
                extra={"timeout_seconds": self.timeout_seconds},
            )
            raise CaptureError("Analyzing the photo took too long.") from exc
        except Exception as exc:
            logger.exception("Calorie estimation failed")
            raise CaptureError("Failed to process image.") from exc
        return new_meal(image=data_url, calories=int(calories), now=now)


def to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL."""
    mime_type = detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
