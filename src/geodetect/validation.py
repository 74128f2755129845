"""
Pre-flight argument checks, run before any request leaves the client
"""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any, Iterable

from geodetect.exceptions import ValidationError

DETECTION_TYPES = ("count", "segmentation")
OUTPUT_TYPES = ("polygon", "bbox")
ANNOTATION_TYPES = ("outline", "training_area", "testing_area", "validation_area")
TRAINING_STEPS_RANGE = (500, 40000)

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


def validate_choice(field: str, value: str, allowed: Iterable[str]) -> str:
    """
    Checks `value` is one of `allowed`, ignoring case

    Returns:
        The lowercased value
    """
    allowed = tuple(allowed)
    if not isinstance(value, str) or value.lower() not in allowed:
        raise ValidationError(field, value, allowed)
    return value.lower()


def validate_range(field: str, value: int, low: int, high: int) -> int:
    """Checks `value` is an integer within [low, high], bounds included"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, value, "an integer in [%s, %s]" % (low, high))
    if value < low or value > high:
        raise ValidationError(field, value, "[%s, %s]" % (low, high))
    return value


def validate_uuid(field: str, value: str) -> str:
    if not isinstance(value, str) or not _UUID_RE.match(value):
        raise ValidationError(field, value, "a UUID such as 123e4567-e89b-12d3-a456-426655440000")
    return value


@dataclass
class DetectorConfiguration:
    """
    The 'configuration' sub-object of a detector

    Fields left to None are not sent, so the same structure serves both
    creation (all fields set) and partial edits (only the changed ones).
    """

    detection_type: str | None = None
    output_type: str | None = None
    training_steps: int | None = None

    def validate(self) -> DetectorConfiguration:
        if self.detection_type is not None:
            self.detection_type = validate_choice(
                "detection_type", self.detection_type, DETECTION_TYPES
            )
        if self.output_type is not None:
            self.output_type = validate_choice("output_type", self.output_type, OUTPUT_TYPES)
        if self.training_steps is not None:
            validate_range("training_steps", self.training_steps, *TRAINING_STEPS_RANGE)
        return self

    def to_json(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}
