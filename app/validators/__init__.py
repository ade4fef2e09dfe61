"""
app/validators package marker.
"""

from app.validators.range_validator import (
    InvalidRangeError,
    RangeErrorDetail,
    parse_custom_ranges_json,
    validate_custom_ranges,
)

__all__ = [
    "InvalidRangeError",
    "RangeErrorDetail",
    "parse_custom_ranges_json",
    "validate_custom_ranges",
]
