# File: tests/test_normalizer.py
import logging

import pytest

from docs_walker.crawler.link_extractor import extract_links, parse_document
from docs_walker.crawler.models import CrawlTarget
from docs_walker.crawler.normalizer import normalize_link, parse_link
from docs_walker.exceptions import DisallowedSchemeError, LinkParseError

PAGE = "https://example.com/docs/guide/intro"


@pytest.mark.parametrize(
    "href,expected",
    [
        ("a", "https://example.com/docs/guide/a"),
        ("../b", "https://example.com/docs/b"),
        ("/other", "https://example.com/other"),
        ("//cdn.example.org/x", "https://cdn.example.org/x"),
        ("https://Example.COM", "https://example.com/"),
        ("HTTP://Example.com/Path?Q=1", "http://example.com/Path?Q=1"),
        ("?page=2", "https://example.com/docs/guide/intro?page=2"),
        ("  a  ", "https://example.com/docs/guide/a"),
    ],
)
def test_resolves_against_page(href, expected):
    assert parse_link(href, PAGE) == CrawlTarget(expected)


@pytest.mark.parametrize("href", ["#section", "a#top", "https://example.com/x?y=1#frag"])
def test_fragment_is_dropped(href):
    target = parse_link(href, PAGE)
    assert "#" not in str(target)


def test_query_is_kept():
    target = parse_link("search?q=walker&page=3#results", PAGE)
    assert str(target) == "https://example.com/docs/guide/search?q=walker&page=3"


@pytest.mark.parametrize(
    "markup,expected",
    [
        ('<a href="list?a=1&amp;section=2">x</a>', "https://example.com/docs/guide/list?a=1&section=2"),
        ('<a href="list?a=1&amp;copy=3">x</a>', "https://example.com/docs/guide/list?a=1&copy=3"),
        ('<a href="q?s=&amp;lt;T&amp;gt;">x</a>', "https://example.com/docs/guide/q?s=&lt;T&gt;"),
    ],
)
def test_entities_are_decoded_once(markup, expected):
    (href,) = extract_links(parse_document(markup))
    assert str(parse_link(href, PAGE)) == expected


def test_decoded_value_is_taken_as_is():
    assert str(parse_link("list?a=1&sect=2", PAGE)) == "https://example.com/docs/guide/list?a=1&sect=2"


@pytest.mark.parametrize(
    "href",
    [
        "a",
        "https://Example.com",
        "HTTP://example.com:8080/x?y=1#z",
        "https://user@example.com/p",
        "http://[::1]:8000/v6",
    ],
)
def test_normalization_is_idempotent(href):
    once = parse_link(href, PAGE)
    assert parse_link(str(once), "https://elsewhere.org/") == once


@pytest.mark.parametrize("href", ["mailto:x@y.com", "MAILTO:x@y.com", "javascript:void(0)", " javascript:go()"])
def test_pseudo_schemes_are_rejected(href):
    with pytest.raises(DisallowedSchemeError):
        parse_link(href, PAGE)


def test_mailto_never_produces_target_and_warns(walker_logs):
    assert normalize_link("mailto:x@y.com", PAGE) is None
    warnings = [r for r in walker_logs.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "mailto" in warnings[0].getMessage()


@pytest.mark.parametrize("href", ["http://[::1", "http://example.com:port/", "http:///nohost"])
def test_malformed_links_raise(href):
    with pytest.raises(LinkParseError):
        parse_link(href, PAGE)


def test_malformed_link_is_logged_as_error(walker_logs):
    assert normalize_link("http://[::1", PAGE) is None
    errors = [r for r in walker_logs.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "http://[::1" in errors[0].getMessage()


def test_non_http_scheme_passes_normalizer():
    # the scope filter, not the normalizer, rejects these
    assert str(parse_link("ftp://files.example.com/a", PAGE)) == "ftp://files.example.com/a"
