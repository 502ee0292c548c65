"""Tests for the extension allow-list."""

import pytest

from mcode.core.filters import is_eligible, parse_extensions


def test_parse_strips_whitespace_and_dots() -> None:
    """Tokens are trimmed, a leading dot dropped and empties ignored."""
    assert parse_extensions(" avi , .mpg,,MKV ") == ("avi", "mpg", "MKV")


def test_parse_accepts_token_lists() -> None:
    """Lists from the YAML config parse like the comma form."""
    assert parse_extensions([".avi", " wmv "]) == ("avi", "wmv")


@pytest.mark.parametrize(("extension", "allow_list"), [("MP4", "mp4"), ("mp4", "MP4"), ("Avi", "mpg, avi")])
def test_matching_ignores_case(extension: str, allow_list: str) -> None:
    """Case never matters."""
    assert is_eligible(extension, allow_list)


def test_unlisted_extension_is_rejected() -> None:
    """Only listed extensions pass."""
    assert not is_eligible("txt", "avi,mpg")
    assert not is_eligible("av", "avi")


@pytest.mark.parametrize("allow_list", ["", " , ", ()])
def test_empty_allow_list_matches_nothing(allow_list: object) -> None:
    """No tokens means nothing is eligible."""
    assert not is_eligible("avi", allow_list)  # type: ignore[arg-type]


def test_parsed_tokens_are_accepted() -> None:
    """A pre-parsed tuple works the same as the raw string."""
    assert is_eligible("MPG", ("avi", "mpg"))
