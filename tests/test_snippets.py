import re
from typing import List

from blogsearch.parsers.base_parser import UNRESOLVED_OFFSET, HeaderRef
from blogsearch.search.matcher import MARK_CLOSE, MARK_OPEN
from blogsearch.search.snippets import (
    ELLIPSIS,
    Snippet,
    extract_snippets,
    nearest_header,
    sanitize,
)

LONG_TEXT = (
    "The quick brown fox jumps over the lazy dog while the farmer sleeps "
    "soundly in the warm afternoon sun. Later that evening the fox returns "
    "to the henhouse looking for an easy dinner, but the dog is waiting."
)

HEADERS = (
    HeaderRef(id="intro", offset=0, text="Intro", level=1),
    HeaderRef(id="middle", offset=50, text="Middle", level=2),
    HeaderRef(id="late", offset=120, text="Late", level=2),
)


def _plain(snippet: Snippet) -> str:
    text = snippet.highlighted_text.replace(MARK_OPEN, "").replace(MARK_CLOSE, "")
    return text.strip(ELLIPSIS)


def test_nearest_header_picks_last_preceding_offset() -> None:
    assert nearest_header(80, HEADERS).id == "middle"
    assert nearest_header(10, HEADERS).id == "intro"
    assert nearest_header(120, HEADERS).id == "late"
    assert nearest_header(-5, HEADERS) is None


def test_nearest_header_none_before_first_header() -> None:
    headers = (HeaderRef(id="later", offset=40, text="Later"),)
    assert nearest_header(10, headers) is None


def test_nearest_header_ignores_unresolved_headers() -> None:
    headers = (
        HeaderRef(id="lost", offset=UNRESOLVED_OFFSET, text="Lost"),
        HeaderRef(id="found", offset=20, text="Found"),
    )
    assert nearest_header(5, headers) is None
    assert nearest_header(25, headers).id == "found"


def test_nearest_header_ties_resolve_to_first_in_document_order() -> None:
    headers = (
        HeaderRef(id="first", offset=10, text="Same"),
        HeaderRef(id="second", offset=10, text="Same"),
    )
    assert nearest_header(12, headers).id == "first"


def test_sanitize_strips_markup_and_emphasis() -> None:
    assert sanitize("a <b>bold</b> *word* _x_ ~y~ `z`") == "a bbold/b word x y z"
    assert sanitize("  < >  spaced ") == "spaced"


def test_short_text_has_no_ellipsis() -> None:
    snippets = extract_snippets("hello search term world", "search term", ())

    assert snippets == [
        Snippet(
            highlighted_text="hello <mark>search term</mark> world",
            anchor_id="",
            offset=6,
        )
    ]


def test_snippet_in_middle_gets_both_ellipses_and_anchor() -> None:
    index = LONG_TEXT.index("farmer")
    snippets = extract_snippets(LONG_TEXT, "farmer", HEADERS)

    assert len(snippets) == 1
    snippet = snippets[0]
    assert snippet.offset == index
    assert snippet.highlighted_text.startswith(ELLIPSIS)
    assert snippet.highlighted_text.endswith(ELLIPSIS)
    assert "<mark>farmer</mark>" in snippet.highlighted_text
    assert snippet.anchor_id == "middle"


def test_match_at_end_has_no_trailing_ellipsis() -> None:
    snippets = extract_snippets(LONG_TEXT, "waiting.", HEADERS)

    assert len(snippets) == 1
    assert snippets[0].highlighted_text.startswith(ELLIPSIS)
    assert not snippets[0].highlighted_text.endswith(ELLIPSIS)
    assert snippets[0].anchor_id == "late"


def test_windows_never_split_words() -> None:
    for query in ("fox", "sun", "dinner", "lazy"):
        for snippet in extract_snippets(LONG_TEXT, query, ()):
            plain = _plain(snippet)
            start = LONG_TEXT.find(plain)
            assert start != -1
            end = start + len(plain)
            assert start == 0 or LONG_TEXT[start - 1].isspace()
            assert end == len(LONG_TEXT) or LONG_TEXT[end].isspace()


def test_snippets_do_not_overlap_and_increase() -> None:
    filler = " ".join(["filler"] * 15)
    text = f"needle one {filler} needle two {filler} needle three"
    snippets = extract_snippets(text, "needle", ())

    assert len(snippets) == 3
    offsets = [s.offset for s in snippets]
    assert offsets == sorted(offsets)
    spans: List[tuple] = []
    for snippet in snippets:
        plain = _plain(snippet)
        start = text.find(plain, spans[-1][1] if spans else 0)
        assert start != -1
        spans.append((start, start + len(plain)))
    for (_, prev_end), (next_start, _) in zip(spans, spans[1:]):
        assert prev_end <= next_start


def test_match_inside_previous_window_is_skipped() -> None:
    text = "foo bar foo baz and some more words after that"
    snippets = extract_snippets(text, "foo", ())

    assert len(snippets) == 1
    assert snippets[0].offset == 0
    # Both occurrences inside the single window are highlighted
    assert snippets[0].highlighted_text.count("<mark>foo</mark>") == 2


def test_matching_is_case_insensitive_and_keeps_source_case() -> None:
    snippets = extract_snippets("I write Python every day", "python", ())

    assert snippets[0].highlighted_text == "I write <mark>Python</mark> every day"


def test_sanitized_snippet_never_contains_markup_characters() -> None:
    text = "use <div> and *bold* with `code` and ~strike~ here to render it"
    snippets = extract_snippets(text, "bold", ())

    assert len(snippets) == 1
    plain = snippets[0].highlighted_text.replace(MARK_OPEN, "").replace(MARK_CLOSE, "")
    assert not re.search(r"[<>*_~`]", plain)


def test_snippet_discarded_when_sanitizing_removes_the_query() -> None:
    assert extract_snippets("call foo_bar now", "o_b", ()) == []


def test_regex_metacharacters_match_literally() -> None:
    snippets = extract_snippets("I like C++ and also C", "C++", ())

    assert len(snippets) == 1
    assert "<mark>C++</mark>" in snippets[0].highlighted_text
    assert extract_snippets("a cat sat", "c.t", ()) == []


def test_no_match_yields_no_snippets() -> None:
    assert extract_snippets(LONG_TEXT, "elephant", HEADERS) == []
    assert extract_snippets(LONG_TEXT, "", HEADERS) == []
