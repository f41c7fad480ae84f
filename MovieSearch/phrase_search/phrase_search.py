import logging
import math
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Tuple

from ..tfidf_search.tfidf_search import rank_scores

log = logging.getLogger(__name__)

_EMPTY_VECTOR: FrozenSet[str] = frozenset()


def compute_cosine_similarity(query_terms: Iterable[str], document_terms: Iterable[str]) -> float:
    """
    Bag-of-words cosine similarity between a query and a document.

    Only term presence counts: the dot product is the number of distinct shared
    terms and each magnitude is the square root of the distinct term count.

    Args:
        query_terms: Query terms (duplicates are ignored)
        document_terms: Document terms (duplicates are ignored)

    Returns:
        Similarity in [0, 1], 0 if either side has no terms
    """
    query_set = set(query_terms)
    document_set = document_terms if isinstance(document_terms, frozenset) else set(document_terms)

    # Avoid division by zero
    if not query_set or not document_set:
        return 0.0

    common_words = len(query_set & document_set)
    return common_words / (math.sqrt(len(query_set)) * math.sqrt(len(document_set)))


class DocumentVectorStore:
    """Distinct term set of every document, read-only once finalized."""

    def __init__(self):
        self._vectors: Dict[str, FrozenSet[str]] = {}
        self.finalized = False

    @classmethod
    def from_terms(cls, doc_terms: Iterable[Tuple[str, Iterable[str]]]) -> 'DocumentVectorStore':
        store = cls()
        for doc_id, terms in doc_terms:
            store.add_document(doc_id, terms)
        return store.finalize()

    def add_document(self, doc_id: str, terms: Iterable[str]):
        if self.finalized:
            raise RuntimeError("Cannot add documents to a finalized vector store")
        self._vectors[doc_id] = frozenset(term for term in terms if term)

    def finalize(self) -> 'DocumentVectorStore':
        if not self.finalized:
            self.finalized = True
            log.info("Finalized vector store with %d document vectors", len(self._vectors))
        return self

    def vector(self, doc_id: str) -> FrozenSet[str]:
        return self._vectors.get(doc_id, _EMPTY_VECTOR)

    @property
    def vectors(self) -> Mapping[str, FrozenSet[str]]:
        return MappingProxyType(self._vectors)

    def __iter__(self) -> Iterator[Tuple[str, FrozenSet[str]]]:
        return iter(self._vectors.items())

    def __len__(self) -> int:
        return len(self._vectors)


class PhraseSearchEngine:
    """Ranks every document by its cosine similarity to a multi-term query."""

    def __init__(self, vector_store: DocumentVectorStore):
        if not vector_store.finalized:
            raise ValueError("Vector store must be finalized before searching")
        self.vector_store = vector_store

    def rank_phrase(self, query_terms: Iterable[str], top_k: int = 10) -> List[Tuple[str, float]]:
        """
        Rank documents by similarity to query vector.

        Args:
            query_terms: Preprocessed query terms
            top_k: Number of top results to return

        Returns:
            List of (doc_id, similarity) tuples, best first
        """
        query_set = frozenset(term for term in query_terms if term)
        if not query_set:
            return []

        similarities = (
            (doc_id, compute_cosine_similarity(query_set, doc_vector))
            for doc_id, doc_vector in self.vector_store
        )
        return rank_scores(similarities, top_k)

    def search_phrase(self, query_terms: Iterable[str], top_k: int = 10) -> List[str]:
        """Document IDs of the top_k documents for a phrase query."""
        return [doc_id for doc_id, _ in self.rank_phrase(query_terms, top_k)]
