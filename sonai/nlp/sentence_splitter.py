"""Module for splitting a text into sentences."""

from abc import ABC, abstractmethod
from typing import override

from nltk.tokenize import RegexpTokenizer


class SentenceSplitter(ABC):
    """Interface for splitting a text into sentences."""

    @abstractmethod
    def split_into_sentences(self, text: str) -> list[str]:
        """
        Split a text into sentences.

        Args:
            text (str): Text to be split.

        Returns:
            list[str]: List of sentences, one items is one sentence.
        """

    def count_sentences(self, text: str) -> int:
        """
        Count sentences in a text, treating text without any as one sentence.

        Args:
            text (str): Text to be evaluated.

        Returns:
            int: Number of sentences, at least 1.
        """
        return max(len(self.split_into_sentences(text)), 1)


class PunctuationSentenceSplitter(SentenceSplitter):
    """Splits on terminal punctuation and line breaks."""

    def __init__(self) -> None:
        """Initialise a tokeniser matching runs of text between sentence ends."""
        self._tokeniser = RegexpTokenizer(r"[^.!?\n]+")

    @override
    def split_into_sentences(self, text: str) -> list[str]:
        segments = (segment.strip() for segment in self._tokeniser.tokenize(text))
        return [segment for segment in segments if segment]
