import pytest

from airlock.detection.models import PIIType
from airlock.mapping.placeholders import (
    contains_placeholder,
    format_placeholder,
    parse_placeholder,
)


class TestFormat:
    def test_zero_pads_to_three_digits(self) -> None:
        assert format_placeholder(PIIType.NAME, 1) == "[NAME_001]"
        assert format_placeholder(PIIType.MYNUMBER, 42) == "[MYNUMBER_042]"
        assert format_placeholder(PIIType.DOB, 999) == "[DOB_999]"


class TestParse:
    def test_parses_tag_and_number(self) -> None:
        assert parse_placeholder("[PHONE_012]") == (PIIType.PHONE, 12)

    @pytest.mark.parametrize(
        "token",
        ["[PHONE_12]", "[PHONE_1000]", "[UNKNOWN_001]", "PHONE_001", " [PHONE_001]", ""],
    )
    def test_rejects_malformed(self, token: str) -> None:
        assert parse_placeholder(token) is None

    def test_every_category_is_parseable(self) -> None:
        for pii_type in PIIType:
            assert parse_placeholder(format_placeholder(pii_type, 7)) == (pii_type, 7)


class TestContains:
    def test_finds_embedded_placeholder(self) -> None:
        assert contains_placeholder("担当: [NAME_003]です")

    def test_plain_text(self) -> None:
        assert not contains_placeholder("[note] nothing here")
