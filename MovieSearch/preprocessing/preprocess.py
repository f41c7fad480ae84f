from abc import ABC, abstractmethod
from .tokenizer import RegexMatchTokenizer, Token, Tokenizer
import json
import logging
import os
from typing import Dict, List, Optional

log = logging.getLogger(__name__)

STOP_WORDS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")


class TokenPreprocessor(ABC):
    @abstractmethod
    def preprocess(self, token: Token, document: str) -> Token:
        raise NotImplementedError()

    def preprocess_all(self, tokens: List[Token], document: str) -> List[Token]:
        return [self.preprocess(token, document) for token in tokens]


class LowercasePreprocessor(TokenPreprocessor):
    def preprocess(self, token: Token, document: str) -> Token:
        token.processed_form = token.processed_form.lower()
        return token


class StopWordsPreprocessor(TokenPreprocessor):
    """Preprocessor for removing stop words."""

    def __init__(self, language="en", stop_words_dir=STOP_WORDS_DIR, stop_words=None):
        """
        Initialize preprocessor for removing stop words.

        Args:
            language: Language code selecting the ``stopwords-<language>.json`` file
            stop_words_dir: Directory containing stop words files
            stop_words: Explicit stop word collection, overrides the file lookup
        """
        if stop_words is not None:
            self.stop_words = {word.lower() for word in stop_words}
            return

        self.stop_words = set()
        path = os.path.join(stop_words_dir, f"stopwords-{language}.json")
        if os.path.exists(path):
            with open(path, 'r', encoding='utf-8') as f:
                self.stop_words = set(json.load(f))
        else:
            log.warning("Stop words file %s not found, no stop words will be removed", path)

    def preprocess(self, token: Token, document: str) -> Token:
        """
        If token is a stop word, replace its processed_form with empty string.

        Args:
            token: Token to process
            document: Original document

        Returns:
            Processed token
        """
        if token.processed_form.lower() in self.stop_words:
            token.processed_form = ""
        return token


class PreprocessingPipeline:
    """Pipeline of token preprocessors."""

    def __init__(self, preprocessors, name="Default Pipeline", tokenizer: Optional[Tokenizer] = None):
        """
        Initialize a preprocessing pipeline.

        Args:
            preprocessors: List of preprocessor objects
            name: Name of the pipeline
            tokenizer: Tokenizer used by ``terms`` (defaults to RegexMatchTokenizer)
        """
        self.preprocessors = preprocessors
        self.name = name
        self.tokenizer = tokenizer or RegexMatchTokenizer()

    def preprocess(self, tokens: List[Token], document: str) -> List[Token]:
        """
        Apply all preprocessors to the tokens.

        Args:
            tokens: List of tokens to preprocess
            document: Original document text

        Returns:
            List of preprocessed tokens
        """
        for preprocessor in self.preprocessors:
            preprocessor.preprocess_all(tokens, document)

        return tokens

    def terms(self, document: str) -> List[str]:
        """Tokenize and preprocess a document, returning the surviving terms in order."""
        tokens = self.preprocess(self.tokenizer.tokenize(document), document)
        return [token.processed_form for token in tokens if token.processed_form]

    def __repr__(self):
        steps = ", ".join(type(p).__name__ for p in self.preprocessors)
        return f"PreprocessingPipeline({self.name!r}: {steps})"


def create_pipeline(config: Dict) -> PreprocessingPipeline:
    """
    Create a preprocessing pipeline based on configuration.

    Args:
        config: Configuration dictionary

    Returns:
        PreprocessingPipeline object
    """
    preprocessors = []
    preproc_config = config.get("preprocessing", {})

    # Add preprocessors in the order specified in config
    for step in config.get("pipeline_order", []):
        if step == "lowercase":
            if preproc_config.get("lowercase", True):
                preprocessors.append(LowercasePreprocessor())

        elif step == "stop_words":
            stop_words_config = preproc_config.get("stop_words", {})
            if stop_words_config.get("use", True):
                language = stop_words_config.get("language", "en")
                preprocessors.append(StopWordsPreprocessor(language=language))

        elif step != "tokenize":
            log.warning("Unknown pipeline step %r ignored", step)

    return PreprocessingPipeline(preprocessors, name="IndexingPipeline")


_default_pipeline = None


def default_pipeline() -> PreprocessingPipeline:
    """Lowercase + English stop words, the pipeline used when none is configured."""
    global _default_pipeline
    if _default_pipeline is None:
        _default_pipeline = PreprocessingPipeline(
            [LowercasePreprocessor(), StopWordsPreprocessor(language="en")],
            name="Default Pipeline",
        )
    return _default_pipeline


def tokenize(raw_text: str, pipeline: Optional[PreprocessingPipeline] = None) -> List[str]:
    """
    Turn raw document text into lowercase terms with stop words removed.

    Duplicates are kept and the original order is preserved.

    Args:
        raw_text: Raw document text
        pipeline: Preprocessing pipeline to use (defaults to ``default_pipeline()``)

    Returns:
        List of terms
    """
    pipeline = pipeline or default_pipeline()
    return pipeline.terms(raw_text)
