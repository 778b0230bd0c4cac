"""Module with natural language tokenisers."""

from abc import ABC, abstractmethod
from typing import override

from nltk.tokenize import RegexpTokenizer


class Tokeniser(ABC):
    """An interface of a natural language tokeniser."""

    @abstractmethod
    def tokenise(self, text: str) -> list[str]:
        """
        Split a text into textual tokens.

        Args:
            text (str): A text to be split.

        Returns:
            list[str]: A list of resulting textual tokens.

        """


class WordTokeniser(Tokeniser):
    """Word tokeniser keeping contractions and hyphenated words whole."""

    def __init__(self) -> None:
        """Initialise the underlying `nltk` regular expression tokeniser."""
        self._tokeniser = RegexpTokenizer(r"\w+(?:['’-]\w+)*")

    @override
    def tokenise(self, text: str) -> list[str]:
        return self._tokeniser.tokenize(text)

    def count_words(self, text: str) -> int:
        """
        Count words in a text.

        Args:
            text (str): Text to be evaluated.

        Returns:
            int: Number of words.
        """
        return len(self.tokenise(text))
