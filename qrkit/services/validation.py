"""QR code format validation and metadata allow-listing.

Codes are UUIDv4 strings: non-guessable and non-derivable. Pure functions,
no I/O.
"""

import re
from typing import Any

from qrkit.core.exceptions import InvalidInputError

_UUID_V4 = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

# Non-identifying keys only; never email, name, phone or secrets
ALLOWED_METADATA_KEYS = frozenset({"course_id", "batch_id", "issued_by_admin_id", "label", "cohort"})
MAX_METADATA_VALUE_LENGTH = 200


def validate_format(code: Any) -> bool:
    """True iff `code` is a UUIDv4-shaped string (case-insensitive, surrounding whitespace ignored)."""
    if not code or not isinstance(code, str):
        return False
    return _UUID_V4.match(code.strip()) is not None


def normalize(code: str) -> str:
    """Trim and lower-case. Does not validate."""
    return code.strip().lower()


def validate_metadata(metadata: dict[str, Any] | None) -> dict[str, Any] | None:
    """Return a clean copy of `metadata` or raise INVALID_METADATA."""
    if metadata is None:
        return None
    if not isinstance(metadata, dict):
        raise InvalidInputError("Metadata must be an object", code="INVALID_METADATA")

    unknown = sorted(set(metadata) - ALLOWED_METADATA_KEYS)
    if unknown:
        raise InvalidInputError(
            f"Metadata keys not allowed: {', '.join(unknown)}", code="INVALID_METADATA"
        )

    clean: dict[str, Any] = {}
    for key, value in metadata.items():
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise InvalidInputError(
                f"Metadata value for '{key}' must be a string or integer", code="INVALID_METADATA"
            )
        if isinstance(value, str) and len(value) > MAX_METADATA_VALUE_LENGTH:
            raise InvalidInputError(
                f"Metadata value for '{key}' is too long", code="INVALID_METADATA"
            )
        clean[key] = value
    return clean or None
