"""Tests for bare URL autolinking."""

from __future__ import annotations

from ci_dokumentor.content import Content
from ci_dokumentor.formatter import MarkdownLinkGenerator


def _transform(text: str, *, full: bool = False) -> str:
    return MarkdownLinkGenerator().transform_urls(Content(text), full_link_format=full).text


def test_bare_url_becomes_autolink_without_trailing_punctuation() -> None:
    assert _transform("See https://x.io/a.") == "See <https://x.io/a>."
    assert _transform("Go to http://x.io, now!") == "Go to <http://x.io>, now!"


def test_full_link_format() -> None:
    assert _transform("See https://x.io/a.", full=True) == "See [https://x.io/a](https://x.io/a)."


def test_existing_links_and_autolinks_are_untouched() -> None:
    text = "[docs](https://x.io/docs) and <https://x.io/b> plus https://x.io/c"
    assert _transform(text) == "[docs](https://x.io/docs) and <https://x.io/b> plus <https://x.io/c>"


def test_code_segments_pass_through() -> None:
    text = "Run `curl https://x.io` or\n```\nhttps://x.io/raw\n```\nthen https://x.io/d"
    assert _transform(text) == (
        "Run `curl https://x.io` or\n```\nhttps://x.io/raw\n```\nthen <https://x.io/d>"
    )


def test_unclosed_backtick_makes_rest_code() -> None:
    assert _transform("a `https://x.io") == "a `https://x.io"


def test_empty_input() -> None:
    assert _transform("") == ""
