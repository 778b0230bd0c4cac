"""Tests of the text metrics extraction."""

import math
import time

import pytest

from sonai.data_models import FEATURE_NAMES, TextMetrics
from sonai.detection.metrics import TextMetricsExtractor, extract

AI_EXAMPLE = (
    "This is amazing!!! 🚀🚀 It's not just good, it's revolutionary — "
    "leveraging cutting-edge synergy."
)
HUMAN_EXAMPLE = "went to the store today. bought milk."

ODD_TEXTS = [
    "",
    "   \n\n  ",
    "...",
    "—",
    "🚀",
    "''''",
    "“”",
    "**",
    "```",
    "[](",
    "&#;&amp;",
    "#",
    ":",
    "a" * 5000,
    "Devlog #1: devlog #2 — devlog 3… #tag [label]\n```py\nx = 1\n",
]


def test_ai_example_has_ai_leaning_metrics() -> None:
    metrics = extract(AI_EXAMPLE)

    # Two emojis counted twice over two sentences.
    assert metrics.emoji_rate == 2.0
    # Four buzzwords among twelve words.
    assert metrics.buzzword_rate == pytest.approx(4 / 12)
    assert metrics.not_just_count == 1.0
    assert metrics.irregular_dashes == 1.0
    assert metrics.irregular_quotations == 0.0


def test_plain_human_text_has_zero_metrics() -> None:
    assert extract(HUMAN_EXAMPLE) == TextMetrics()


def test_empty_text_yields_zero_vector() -> None:
    metrics = extract("")

    assert metrics == TextMetrics()
    assert metrics.to_vector().tolist() == [0.0] * len(FEATURE_NAMES)


@pytest.mark.parametrize("text", ODD_TEXTS)
def test_metrics_are_finite_and_non_negative(text: str) -> None:
    metrics = extract(text)

    for value in metrics.to_vector():
        assert math.isfinite(value)
        assert value >= 0.0
    assert 0.0 <= metrics.irregular_quotations <= 1.0
    assert 0.0 <= metrics.irregular_dashes <= 1.0


@pytest.mark.parametrize(
    "text",
    ["One. Two. Three. Four. Five.", "no punctuation at all", "Wow!!!\n\nReally?"],
)
def test_emoji_rate_without_emojis_is_zero(text: str) -> None:
    assert extract(text).emoji_rate == 0.0


def test_emojis_common_among_humans_are_ignored() -> None:
    assert extract("lol that broke everything 😭😭 😉").emoji_rate == 0.0


def test_html_escapes_are_counted_in_raw_text() -> None:
    text = "Tom &amp; Jerry &lt;3 and &#39;quoted&#39; text"

    assert extract(text).html_escape_count == 4.0


def test_devlog_references_are_not_hashtags() -> None:
    metrics = extract("Devlog #3 added sound. devlog 4 was about UI. #gamedev #indie #devlog")

    assert metrics.devlog_count == 2.0
    assert metrics.hashtags == 2.0


def test_labels_on_lines_and_in_brackets() -> None:
    text = "Features:\n- fast\n#roadmap:\n[WIP] more soon\nhttps:"

    metrics = extract(text)

    assert metrics.labels == 3.0
    assert metrics.hashtags == 0.0


def test_only_non_canonical_ellipses_are_irregular() -> None:
    assert extract("Wait.. what.... ok... fine…").irregular_ellipsis == 3.0


def test_quotation_ratio() -> None:
    assert extract('He said “hi” and "bye"').irregular_quotations == 0.5


def test_dash_ratio_ignores_hyphenated_words() -> None:
    metrics = extract("one — two – three - four and a well-known fact")

    assert metrics.irregular_dashes == pytest.approx(1 / 3)


def test_irregular_markdown() -> None:
    text = "This is **bold** and *broken\n```\ncode"

    # One stray asterisk and one unclosed fence.
    assert extract(text).irregular_markdown == 2.0


def test_broken_links_and_unicode_bullets_are_irregular_markdown() -> None:
    text = "see [docs] (https://example.com)\n• one"

    assert extract(text).irregular_markdown == 2.0


def test_well_formed_markdown_is_regular() -> None:
    text = "# Title\n\n- item with *emphasis*\n- [a link](https://example.com)\n\n2 * 3 = 6"

    assert extract(text).irregular_markdown == 0.0


def test_code_is_not_analysed_as_prose() -> None:
    text = "```\nIt's not just code, it's 🚀 — art\n```\nplain words here."

    assert extract(text) == TextMetrics()


def test_extraction_is_deterministic() -> None:
    extractor = TextMetricsExtractor()

    assert extractor.extract(AI_EXAMPLE) == extractor.extract(AI_EXAMPLE)
    assert list(extractor.extract_many([AI_EXAMPLE, HUMAN_EXAMPLE])) == [
        extract(AI_EXAMPLE),
        extract(HUMAN_EXAMPLE),
    ]


@pytest.mark.parametrize(
    ("text", "field", "expected"),
    [
        ("I <3 this 🚀 and 5 > 4", "emoji_rate", 2.0),
        ("score x<y — that is z>w", "irregular_dashes", 1.0),
        ("<p>Shipped it 🚀</p><br/>", "emoji_rate", 2.0),
    ],
)
def test_angle_brackets_in_prose_are_kept(
    text: str, field: str, expected: float
) -> None:
    assert getattr(extract(text), field) == expected


@pytest.mark.parametrize(
    "text",
    ["not just " * 8000, "**x " * 18000, "_a " * 24000],
)
def test_long_repetitive_texts_are_extracted_quickly(text: str) -> None:
    start = time.perf_counter()
    extract(text)

    assert time.perf_counter() - start < 3.0
