"""Module with a text sanitiser."""

import re
from typing import Final

# Opening, closing or self-closing tags with optional attributes. Comparisons
# such as `x<y` or `<3` are prose and stay.
HTML_TAG_PATTERN: Final = re.compile(
    r"</?[A-Za-z][\w:-]*"
    r"(?:\s+[\w:-]+(?:\s*=\s*(?:\"[^\"<>]*\"|'[^'<>]*'|[^\s\"'<>=]+))?){0,32}"
    r"\s*/?>"
)


def strip_code(text: str) -> str:
    """
    Remove fenced code blocks and inline code from a text.

    Args:
        text (str): Raw markdown text.

    Returns:
        str: Text without code. Unclosed fences are left in place.
    """
    text = re.sub(r"```.*?```", "", text, flags=re.DOTALL)
    return re.sub(r"`[^`\n]+`", "", text)


def sanitise(text: str) -> str:
    """
    Remove code and markup so that only prose is left for stylistic analysis.

    Line breaks are preserved because some metrics work line by line. Emphasis
    markers are kept as they do not affect prose metrics.

    Args:
        text (str): Raw text potentially containing markdown and HTML.

    Returns:
        str: Text with code, HTML tags, images, and link targets removed.
    """
    # Remove fenced code blocks and inline code.
    text = strip_code(text)

    # Remove HTML tags.
    text = HTML_TAG_PATTERN.sub("", text)

    # Remove markdown images ![alt](url).
    text = re.sub(r"!\[([^\]\n]{0,300})\]\([^)\n]{0,500}\)", "", text)

    # Remove markdown links [text](url) -> text.
    text = re.sub(r"\[([^\]\n]{0,300})\]\([^)\n]{0,500}\)", r"\1", text)

    # Remove bare URLs.
    text = re.sub(r"https?://\S+", "", text)

    # Remove markdown headers (# ## ###).
    text = re.sub(r"^[ \t]*#{1,6}[ \t]+", "", text, flags=re.MULTILINE)

    # Remove excessive whitespace (multiple spaces, tabs).
    text = re.sub(r"[ \t]+", " ", text)

    # Remove leading/trailing whitespace on each line.
    text = "\n".join(line.strip() for line in text.split("\n"))

    return text.strip()
