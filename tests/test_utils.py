from __future__ import annotations

from datetime import datetime

import pytest

from vault.core.utils import capitalize_first, format_amount, locale_timestamp, normalize_amount, parse_amount


@pytest.mark.parametrize("value, expected", [(4700, "4,700"), (5000.0, "5,000"), (4700.5, "4,700.5"), (0, "0")])
def test_format_amount(value, expected):
    assert format_amount(value) == expected


@pytest.mark.parametrize("raw, expected", [("5,000", 5000.0), (" 12.5 ", 12.5), ("abc", None), ("", None), (True, None), ("inf", None)])
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_normalize_amount_keeps_whole_numbers_as_int():
    assert isinstance(normalize_amount(5000.0), int)
    assert normalize_amount(12.5) == 12.5


def test_locale_timestamp_shape():
    assert locale_timestamp(datetime(2025, 1, 2, 15, 4, 5)) == "1/2/2025, 3:04:05 PM"
    assert locale_timestamp(datetime(2025, 12, 31, 0, 0, 9)) == "12/31/2025, 12:00:09 AM"


def test_capitalize_first():
    assert capitalize_first("cards") == "Cards"
    assert capitalize_first("") == ""
