"""Module computing stylistic metrics hinting at LLM-written devlogs."""

import re
from collections.abc import Iterable, Iterator
from typing import Final

import emoji

from sonai.data_models import TextMetrics
from sonai.nlp.sanitiser import sanitise, strip_code
from sonai.nlp.sentence_splitter import PunctuationSentenceSplitter, SentenceSplitter
from sonai.nlp.tokeniser import WordTokeniser

# Emojis humans use about as often as LLMs do.
HUMAN_EMOJIS: Final = frozenset({"😭", "😉", "🫣"})

BUZZWORDS: Final[tuple[str, ...]] = (
    r"leverag\w*",
    r"synerg\w*",
    r"game[- ]chang\w*",
    r"cutting[- ]edge",
    r"state[- ]of[- ]the[- ]art",
    r"next[- ]level",
    r"seamless\w*",
    r"robust\w*",
    r"delv\w*",
    r"tapestr\w*",
    r"revolutionary",
    r"revolutioni[sz]\w*",
    r"transformative",
    r"groundbreaking",
    r"innovative",
    r"empower\w*",
    r"elevat\w*",
    r"streamlin\w*",
    r"supercharg\w*",
    r"unleash\w*",
    r"harness\w*",
    r"paradigm\w*",
    r"holistic\w*",
    r"testament",
    r"meticulous\w*",
    r"effortless\w*",
    r"intuitive\w*",
    r"immersive",
    r"vibrant",
    r"pivotal",
    r"showcas\w*",
    r"embark\w*",
    r"blazing(?:ly)?[- ]fast",
    r"deep[- ]dive",
)

BUZZWORD_PATTERN: Final = re.compile(
    r"\b(?:" + "|".join(BUZZWORDS) + r")\b", flags=re.IGNORECASE
)
NOT_JUST_PATTERN: Final = re.compile(
    r"\b(?:it(?:['’]s|\s+is)\s+)?not\s+just\b[^.!?\n]{0,120}?"
    r"(?:[,;:—–]|\s-{1,2}\s)\s*(?:it(?:['’]s|\s+is)|but)\b",
    flags=re.IGNORECASE,
)
HTML_ESCAPE_PATTERN: Final = re.compile(
    r"&(?:amp|lt|gt|quot|apos|nbsp|#\d+|#x[0-9a-f]+);", flags=re.IGNORECASE
)
DEVLOG_PATTERN: Final = re.compile(r"\bdevlog\s*#?\s*\d+", flags=re.IGNORECASE)
IRREGULAR_ELLIPSIS_PATTERN: Final = re.compile(r"…|\.{4,}|(?<!\.)\.{2}(?!\.)")
HASHTAG_PATTERN: Final = re.compile(
    r"(?<![\w&#])#(?!devlog)[^\W\d_]\w*\b(?!:)", flags=re.IGNORECASE
)
BRACKET_LABEL_PATTERN: Final = re.compile(r"\[[^\W\d_][\w \-]{0,40}\](?!\s*\()")

FANCY_QUOTES: Final = "“”‘’"  # noqa: RUF001, these marks are being checked for.
STRAIGHT_QUOTES: Final = "\"'"
EM_DASH: Final = "—"
OTHER_DASHES: Final = "–‒―−﹘－‑‐⸺⸻"  # noqa: RUF001
SPACED_HYPHEN_PATTERN: Final = re.compile(r"(?<=[^\s-]) +- +(?=[^\s-])|(?<!-)--(?!-)")

CODE_FENCE_PATTERN: Final = re.compile(r"^[ \t]*```", flags=re.MULTILINE)
LIST_BULLET_PATTERN: Final = re.compile(r"^[ \t]*[*+-][ \t]+", flags=re.MULTILINE)
HORIZONTAL_RULE_PATTERN: Final = re.compile(
    r"^[ \t]*([*_-])(?:[ \t]*\1){2,}[ \t]*$", flags=re.MULTILINE
)
MATCHED_EMPHASIS_PATTERNS: Final = (
    re.compile(r"\*\*(?=\S)(.{1,200}?)(?<=\S)\*\*"),
    re.compile(r"(?<!\w)__(?=\S)(.{1,200}?)(?<=\S)__(?!\w)"),
    re.compile(r"\*(?=\S)([^*\n]{1,200}?)(?<=\S)\*"),
    re.compile(r"(?<!\w)_(?=\S)([^_\n]{1,200}?)(?<=\S)_(?!\w)"),
)
STRAY_ASTERISK_PATTERN: Final = re.compile(r"(?<!\s)\*+|\*+(?!\s)")
STRAY_UNDERSCORE_PATTERN: Final = re.compile(r"(?<!\w)_+|_+(?!\w)")
BROKEN_LINK_PATTERNS: Final = (
    re.compile(r"\[[^\]\n]{1,300}\][ \t]+\([^)\n]{0,500}\)"),
    re.compile(r"\[[^\]\n]{1,300}\]\([^)\n]{0,500}$", flags=re.MULTILINE),
)
UNICODE_BULLETS: Final = "•●"


def _ratio(numerator: int, denominator: int) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator


class TextMetricsExtractor:
    """Computes `TextMetrics` of a text with regular expressions and counting."""

    def __init__(self, sentence_splitter: SentenceSplitter | None = None) -> None:
        """
        Initialise utilities required to split text into sentences and words.

        Args:
            sentence_splitter (SentenceSplitter | None, optional): Splitter used to
                normalise per-sentence rates. Defaults to punctuation-based splitting.
        """
        self._sentence_splitter = sentence_splitter or PunctuationSentenceSplitter()
        self._word_tokeniser = WordTokeniser()

    def extract(self, text: str) -> TextMetrics:
        """
        Compute metrics of a text.

        Args:
            text (str): Raw text of a single document.

        Returns:
            TextMetrics: Metrics of the text. Empty text yields all zeros.
        """
        prose = sanitise(text)
        sentences = self._sentence_splitter.count_sentences(prose)
        words = max(self._word_tokeniser.count_words(prose), 1)

        return TextMetrics(
            emoji_rate=self._count_emojis(prose) * 2 / sentences,
            buzzword_rate=len(BUZZWORD_PATTERN.findall(prose)) / words,
            not_just_count=float(len(NOT_JUST_PATTERN.findall(prose))),
            html_escape_count=float(len(HTML_ESCAPE_PATTERN.findall(text))),
            devlog_count=float(len(DEVLOG_PATTERN.findall(prose))),
            irregular_ellipsis=float(len(IRREGULAR_ELLIPSIS_PATTERN.findall(prose))),
            irregular_quotations=self._fancy_quotation_ratio(prose),
            irregular_dashes=self._em_dash_ratio(prose),
            irregular_markdown=float(self._count_irregular_markdown(text)),
            labels=float(self._count_labels(prose)),
            hashtags=float(len(HASHTAG_PATTERN.findall(prose))),
        )

    def extract_many(self, texts: Iterable[str]) -> Iterator[TextMetrics]:
        """
        Compute metrics of many texts lazily.

        Args:
            texts (Iterable[str]): Raw texts.

        Yields:
            TextMetrics: Metrics of every text, in order.
        """
        for text in texts:
            yield self.extract(text)

    def _count_emojis(self, text: str) -> int:
        return sum(
            1
            for match in emoji.emoji_list(text)
            if match["emoji"] not in HUMAN_EMOJIS
        )

    def _fancy_quotation_ratio(self, text: str) -> float:
        fancy = sum(text.count(mark) for mark in FANCY_QUOTES)
        straight = sum(text.count(mark) for mark in STRAIGHT_QUOTES)
        return _ratio(fancy, fancy + straight)

    def _em_dash_ratio(self, text: str) -> float:
        em_dashes = text.count(EM_DASH)
        other_dashes = sum(text.count(dash) for dash in OTHER_DASHES)
        hyphen_dashes = len(SPACED_HYPHEN_PATTERN.findall(text))
        return _ratio(em_dashes, em_dashes + other_dashes + hyphen_dashes)

    def _count_irregular_markdown(self, text: str) -> int:
        # An odd number of fences means the last code block is never closed.
        unclosed_fences = len(CODE_FENCE_PATTERN.findall(text)) % 2

        markup = strip_code(text)
        broken_links = sum(
            len(pattern.findall(markup)) for pattern in BROKEN_LINK_PATTERNS
        )
        bullets = sum(markup.count(bullet) for bullet in UNICODE_BULLETS)

        markup = LIST_BULLET_PATTERN.sub("", markup)
        markup = HORIZONTAL_RULE_PATTERN.sub("", markup)
        for pattern in MATCHED_EMPHASIS_PATTERNS:
            markup = pattern.sub(r"\1", markup)
        stray_markers = len(STRAY_ASTERISK_PATTERN.findall(markup)) + len(
            STRAY_UNDERSCORE_PATTERN.findall(markup)
        )

        return unclosed_fences + broken_links + bullets + stray_markers

    def _count_labels(self, text: str) -> int:
        line_labels = 0
        for line in text.splitlines():
            stripped = line.strip()
            if not stripped.endswith(":"):
                continue
            label = stripped[:-1].lstrip("#").strip()
            if (
                label
                and all(c.isalpha() or c.isspace() for c in label)
                and label.lower() not in {"http", "https"}
            ):
                line_labels += 1
        return line_labels + len(BRACKET_LABEL_PATTERN.findall(text))


_default_extractor = TextMetricsExtractor()


def extract(text: str) -> TextMetrics:
    """
    Compute metrics of a text with the default extractor.

    Args:
        text (str): Raw text of a single document.

    Returns:
        TextMetrics: Metrics of the text.
    """
    return _default_extractor.extract(text)
