import heapq
import logging
import math
from collections import Counter
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, NamedTuple, Tuple

log = logging.getLogger(__name__)


class Posting(NamedTuple):
    """One inverted index entry: a term, a document containing it and its raw count there."""
    term: str
    doc_id: str
    tf: int


def count_terms(terms: Iterable[str]) -> Counter:
    """
    Count term occurrences within one document.

    Args:
        terms: Preprocessed terms of the document

    Returns:
        Counter mapping each term to its raw frequency
    """
    word_freq = Counter()
    for term in terms:
        if term:  # Skip empty strings
            word_freq[term] += 1
    return word_freq


def rank_scores(scores: Iterable[Tuple[str, float]], top_k: int) -> List[Tuple[str, float]]:
    """
    Select the top_k (doc_id, score) pairs.

    Higher scores come first, equal scores are ordered by ascending document ID
    so the ranking is reproducible.
    """
    if top_k <= 0:
        return []
    return heapq.nsmallest(top_k, scores, key=lambda item: (-item[1], item[0]))


class InvertedIndex:
    """
    Inverted index mapping terms to document occurrences.

    Documents are added during the build phase. ``finalize`` computes document
    frequencies and seals the index; after that it is read-only and every
    statistic is exposed through read-only views.
    """

    def __init__(self):
        self._index: Dict[str, Dict[str, int]] = {}  # {term: {doc_id: tf}}
        self._document_frequency: Dict[str, int] = {}
        self.document_count = 0
        self.finalized = False

    @classmethod
    def from_term_counts(cls, doc_term_counts: Iterable[Tuple[str, Mapping[str, int]]]) -> 'InvertedIndex':
        """
        Build a finalized index.

        Args:
            doc_term_counts: (doc_id, {term: tf}) pairs, one per document

        Returns:
            Finalized InvertedIndex
        """
        index = cls()
        for doc_id, word_freq in doc_term_counts:
            index.add_document(doc_id, word_freq)
        return index.finalize()

    def add_document(self, doc_id: str, word_freq: Mapping[str, int]):
        """
        Add a document's local term counts to the index.

        Args:
            doc_id: Document identifier, unique within the corpus
            word_freq: Dictionary mapping terms to their frequencies in the document
        """
        if self.finalized:
            raise RuntimeError("Cannot add documents to a finalized index")

        for term, freq in word_freq.items():
            if term and freq > 0:
                self._index.setdefault(term, {})[doc_id] = freq

        self.document_count += 1

    def finalize(self) -> 'InvertedIndex':
        """Compute document frequencies and make the index read-only."""
        if self.finalized:
            return self

        # Document frequency is the size of each term's distinct document set
        self._document_frequency = {term: len(docs) for term, docs in self._index.items()}
        self._index = {term: MappingProxyType(docs) for term, docs in self._index.items()}
        self.finalized = True

        log.info("Finalized inverted index with %d terms over %d documents",
                 len(self._index), self.document_count)
        return self

    @property
    def postings(self) -> Mapping[str, Mapping[str, int]]:
        """Read-only view of {term: {doc_id: tf}}."""
        return MappingProxyType(self._index)

    @property
    def document_frequency(self) -> Mapping[str, int]:
        """Read-only view of {term: df}."""
        return MappingProxyType(self._document_frequency)

    def iter_postings(self) -> Iterator[Posting]:
        for term, docs in self._index.items():
            for doc_id, tf in docs.items():
                yield Posting(term, doc_id, tf)

    def __contains__(self, term) -> bool:
        return term in self._index

    def __len__(self) -> int:
        return len(self._index)

    def get_postings(self, term: str) -> Mapping[str, int]:
        return self._index.get(term, MappingProxyType({}))

    def get_term_frequency(self, term: str, doc_id: str) -> int:
        return self._index.get(term, {}).get(doc_id, 0)

    def get_document_frequency(self, term: str) -> int:
        """
        Get the number of documents containing the given term.

        Args:
            term: The term to check

        Returns:
            Number of documents containing the term, 0 for unknown terms
        """
        return self._document_frequency.get(term, 0)

    def get_inverse_document_frequency(self, term: str) -> float:
        """
        Calculate the inverse document frequency for a term.
        IDF(t) = log2(N/DF(t))

        Args:
            term: The term to calculate IDF for

        Returns:
            IDF value for the term, 0 when the term or the corpus is empty
        """
        df = self.get_document_frequency(term)
        if df == 0 or self.document_count == 0:
            return 0.0
        return math.log2(self.document_count / df)

    def get_tf_idf(self, term: str, doc_id: str) -> float:
        """
        TF-IDF weight of a term in one document.
        w = tf * log2(N/DF(t))

        Args:
            term: The term to weight
            doc_id: Document identifier

        Returns:
            Non-negative weight, 0 if the document does not contain the term
        """
        tf = self.get_term_frequency(term, doc_id)
        if tf == 0:
            return 0.0
        return tf * self.get_inverse_document_frequency(term)


class TFIDFSearchEngine:
    """Ranks the documents containing a single term by that term's TF-IDF weight."""

    def __init__(self, inverted_index: InvertedIndex):
        if not inverted_index.finalized:
            raise ValueError("Inverted index must be finalized before searching")
        self.inverted_index = inverted_index

    def rank_term(self, term: str, top_k: int = 10) -> List[Tuple[str, float]]:
        """
        Score every document containing the term.

        Args:
            term: Preprocessed query term
            top_k: Number of top results to return

        Returns:
            List of (doc_id, tf_idf) tuples, best first
        """
        postings = self.inverted_index.get_postings(term)
        if not postings:
            log.debug("Term %r not in index", term)
            return []

        scores = ((doc_id, self.inverted_index.get_tf_idf(term, doc_id)) for doc_id in postings)
        return rank_scores(scores, top_k)

    def search_term(self, term: str, top_k: int = 10) -> List[str]:
        """Document IDs of the top_k documents for a single term."""
        return [doc_id for doc_id, _ in self.rank_term(term, top_k)]
