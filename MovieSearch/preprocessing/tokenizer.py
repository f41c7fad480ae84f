import re
from abc import ABC, abstractmethod
from typing import List


class Token:
    """A single piece of text produced by a tokenizer."""

    def __init__(self, text: str):
        self.text = text
        # Preprocessors rewrite this form, an empty string marks a removed token
        self.processed_form = text

    def __repr__(self):
        return f"Token({self.processed_form!r})"


class Tokenizer(ABC):
    @abstractmethod
    def tokenize(self, document: str) -> List[Token]:
        raise NotImplementedError()


class RegexMatchTokenizer(Tokenizer):
    """
    Splits text on runs of non-word characters.

    Leading or trailing separators produce empty pieces, which are dropped.
    """

    SPLIT_PATTERN = re.compile(r"\W+")

    def tokenize(self, document: str) -> List[Token]:
        """
        Split a document into tokens.

        Args:
            document: Raw document text

        Returns:
            List of tokens in document order
        """
        if not document:
            return []
        return [Token(piece) for piece in self.SPLIT_PATTERN.split(document) if piece]
