"""测试 Bearer 令牌校验"""

from __future__ import annotations

import pytest

from app.utils.auth import extract_bearer_token, verify_write_token


@pytest.mark.parametrize(
    "header, expected",
    [
        ("Bearer abc", "abc"),
        ("Bearer a b", "a b"),
        ("bearer abc", None),
        ("Basic abc", None),
        ("Bearer", None),
        ("Bearer ", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


def test_verify_write_token_exact_match_only():
    assert verify_write_token("Bearer s3cret", "s3cret") is True
    assert verify_write_token("Bearer s3cret2", "s3cret") is False
    assert verify_write_token("Bearer S3CRET", "s3cret") is False


@pytest.mark.parametrize("expected", [None, ""])
def test_verify_write_token_rejects_when_unconfigured(expected):
    assert verify_write_token("Bearer ", expected) is False
    assert verify_write_token("Bearer anything", expected) is False
