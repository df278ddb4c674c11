import base64
import binascii
import re
from typing import Any, List

from participium.errors import BadRequestError

MIN_PHOTOS = 1
MAX_PHOTOS = 3
MAX_PHOTO_BYTES = 5 * 1024 * 1024

ALLOWED_MIME_TYPES = ("image/jpeg", "image/png", "image/webp")

_DATA_URI = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)


def parse_data_uri(data_uri: str):
    """Split a base64 data URI into ``(mime_type, raw_bytes)``; None if malformed."""
    match = _DATA_URI.match(data_uri)
    if not match:
        return None
    try:
        raw = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError):
        return None
    return match.group("mime").lower(), raw


def validate_photos(photos: Any) -> List[str]:
    """Check a submitted photo list and return it unchanged."""
    if not isinstance(photos, list):
        raise BadRequestError("Photos must be an array")
    if not MIN_PHOTOS <= len(photos) <= MAX_PHOTOS:
        raise BadRequestError(
            f"Photos must contain between {MIN_PHOTOS} and {MAX_PHOTOS} images"
        )

    for index, photo in enumerate(photos):
        if not isinstance(photo, str):
            raise BadRequestError(f"Photo at index {index} must be a string")

        parsed = parse_data_uri(photo)
        if parsed is not None and parsed[0] not in ALLOWED_MIME_TYPES:
            raise BadRequestError(
                f"Photo at index {index} has unsupported format. Supported formats: JPEG, PNG, WebP"
            )
        if parsed is None or not parsed[1]:
            raise BadRequestError(f"Photo at index {index} is not a valid image data URI")
        if len(parsed[1]) > MAX_PHOTO_BYTES:
            raise BadRequestError(f"Photo at index {index} exceeds the 5MB size limit")

    return photos
