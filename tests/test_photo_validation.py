import base64

import pytest

from participium.errors import BadRequestError
from participium.services.photo_validation import MAX_PHOTO_BYTES, validate_photos

from helpers import PNG_DATA_URI


def test_accepts_one_to_three_photos():
    assert validate_photos([PNG_DATA_URI]) == [PNG_DATA_URI]
    assert len(validate_photos([PNG_DATA_URI] * 3)) == 3


@pytest.mark.parametrize("photos", [None, "data:image/png;base64,AAAA", {"a": 1}])
def test_photos_must_be_a_list(photos):
    with pytest.raises(BadRequestError, match="Photos must be an array"):
        validate_photos(photos)


@pytest.mark.parametrize("count", [0, 4])
def test_photo_count_bounds(count):
    with pytest.raises(BadRequestError, match="between 1 and 3 images"):
        validate_photos([PNG_DATA_URI] * count)


def test_each_photo_must_be_a_string():
    with pytest.raises(BadRequestError, match="Photo at index 1 must be a string"):
        validate_photos([PNG_DATA_URI, 42])


def test_unsupported_image_type():
    gif = "data:image/gif;base64," + base64.b64encode(b"GIF89a").decode()
    with pytest.raises(BadRequestError, match="unsupported format"):
        validate_photos([gif])


@pytest.mark.parametrize(
    "photo",
    ["not a data uri", "data:image/png;base64,@@@@", "data:image/png;base64,"],
)
def test_malformed_data_uri(photo):
    with pytest.raises(BadRequestError, match="not a valid image data URI"):
        validate_photos([photo])


def test_size_limit():
    payload = base64.b64encode(b"\0" * (MAX_PHOTO_BYTES + 1)).decode()
    with pytest.raises(BadRequestError, match="5MB"):
        validate_photos([f"data:image/jpeg;base64,{payload}"])
