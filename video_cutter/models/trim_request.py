"""
Trim request data model.

A time range to extract from a video asset.
"""

from dataclasses import dataclass
from typing import Dict

from core.exceptions import ValidationError


DEFAULT_OUTPUT_NAME = "output.mp4"


def validate_trim_range(start: float, end: float) -> Dict[str, str]:
    """
    Check a cut range.

    Returns:
        Mapping of field name to error message, empty when the range is valid
    """
    errors = {}
    if start < 0:
        errors['start'] = f"must be >= 0, got {start}"
    if end <= start:
        errors['end'] = f"must be greater than start ({start}), got {end}"
    return errors


@dataclass(frozen=True)
class TrimRequest:
    """
    Lossless cut of ``[start, end)`` seconds into ``output_name``.

    Whether ``end`` lies within the asset's duration is the caller's concern;
    the core only enforces ``0 <= start < end``.
    """

    start: float
    end: float
    output_name: str = DEFAULT_OUTPUT_NAME

    def __post_init__(self):
        errors = validate_trim_range(self.start, self.end)
        if not self.output_name or '/' in self.output_name or '\\' in self.output_name:
            errors['output_name'] = f"must be a plain file name, got {self.output_name!r}"
        if errors:
            raise ValidationError(errors)

    @property
    def duration(self) -> float:
        """Length of the cut in seconds."""
        return self.end - self.start
