"""Tests for the pull request and hash helpers."""

import pytest

from comistory.utils.helpers import extract_pull_request_number, short_hash_of


@pytest.mark.parametrize(
    "message, expected",
    [
        ("Merge pull request #123 from user/branch", "123"),
        ("merge PULL REQUEST #7 from fork", "7"),
        ("feat: add new feature (#456)", "456"),
        ("fix: issue #789 in parser", "789"),
        ("Fix #12 and (#34)", "34"),
        ("feat: nothing to see", None),
        ("", None),
        (None, None),
        (123, None),
    ],
)
def test_extract_pull_request_number(message, expected):
    assert extract_pull_request_number(message) == expected


def test_short_hash_of():
    assert short_hash_of("1234567890abcdef") == "1234567"
    assert short_hash_of("1234567890abcdef", length=10) == "1234567890"
    assert short_hash_of("abc") == "abc"
    assert short_hash_of("") == ""
