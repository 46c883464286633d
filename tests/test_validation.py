import pytest

from qrkit.core.exceptions import InvalidInputError
from qrkit.services.token_codec import digest_token, generate_token
from qrkit.services.validation import normalize, validate_format, validate_metadata

VALID = "6f1c2a9e-3b7d-4c1e-9a2f-1d4e5b6c7a80"


class TestValidateFormat:
    def test_accepts_uuid_v4(self):
        assert validate_format(VALID)

    def test_is_case_insensitive(self):
        assert validate_format(VALID.upper())

    @pytest.mark.parametrize(
        "code",
        [
            "",
            None,
            "not-a-code",
            "6f1c2a9e3b7d4c1e9a2f1d4e5b6c7a80",          # no hyphens
            "6f1c2a9e-3b7d-1c1e-9a2f-1d4e5b6c7a80",      # version nibble 1
            "6f1c2a9e-3b7d-4c1e-7a2f-1d4e5b6c7a80",      # variant bits wrong
            "6f1c2a9e-3b7d-4c1e-9a2f-1d4e5b6c7a8",       # 35 chars
            "6f1c2a9e-3b7d-4c1e-9a2f-1d4e5b6c7a80-00",
        ],
    )
    def test_rejects_other_shapes(self, code):
        assert not validate_format(code)


def test_normalize_trims_and_lowercases():
    assert normalize(f"  {VALID.upper()}\n") == VALID


class TestValidateMetadata:
    def test_none_and_empty(self):
        assert validate_metadata(None) is None
        assert validate_metadata({}) is None

    def test_allowed_keys_pass_through(self):
        md = {"course_id": "c-101", "batch_id": 7, "label": "Spring"}
        assert validate_metadata(md) == md

    @pytest.mark.parametrize(
        "md",
        [
            {"email": "a@b.c"},
            {"course_id": ["x"]},
            {"cohort": True},
            {"label": "x" * 201},
            {"course_id": 1.5},
        ],
    )
    def test_rejections(self, md):
        with pytest.raises(InvalidInputError) as exc:
            validate_metadata(md)
        assert exc.value.code == "INVALID_METADATA"


def test_tokens_are_random_and_digest_is_stable():
    a, b = generate_token(), generate_token()
    assert a != b
    assert len(a) >= 43  # 32 bytes urlsafe-base64
    assert digest_token(a) == digest_token(a)
    assert len(digest_token(a)) == 64
    assert digest_token(a) != a
