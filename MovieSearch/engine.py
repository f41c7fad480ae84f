"""
Index construction and query dispatch.

``MovieSearchIndex`` runs the build phase: it tokenizes every document once and
produces the inverted index and the document vector store from the same terms.
``MovieSearchEngine`` is created over a built index and answers any number of
read-only queries.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

from .config import load_config
from .phrase_search.phrase_search import DocumentVectorStore, PhraseSearchEngine
from .preprocessing.document import Document
from .preprocessing.preprocess import PreprocessingPipeline, create_pipeline
from .search_interface import Index, SearchEngine
from .tfidf_search.tfidf_search import InvertedIndex, TFIDFSearchEngine, count_terms

log = logging.getLogger(__name__)

TERM_QUERY = "term"
PHRASE_QUERY = "phrase"


class ParsedQuery(NamedTuple):
    kind: str
    terms: Tuple[str, ...]


def parse_query(query: Optional[str]) -> Optional[ParsedQuery]:
    """
    Classify a query as a single term or a phrase.

    The query is lowercased to match the indexed terms. Any whitespace inside
    the stripped query makes it a phrase, split into its non-empty pieces.

    Returns:
        ParsedQuery, or None for an empty or whitespace-only query
    """
    if not query or not query.strip():
        return None

    normalized = query.strip().lower()
    terms = tuple(normalized.split())
    if len(terms) > 1:
        return ParsedQuery(PHRASE_QUERY, terms)
    return ParsedQuery(TERM_QUERY, terms)


def _as_document(item: Union[Document, dict, tuple], position: int) -> Document:
    if isinstance(item, Document):
        # Terms are cached on the document, the caller's copy stays untouched
        return Document(doc_id=item.id, text=item.text)
    if isinstance(item, dict):
        doc_id = item.get("id", str(position))
        text = item.get("text", item.get("content", ""))
    else:
        doc_id, text = item
    if not isinstance(text, str):
        text = "" if text is None else str(text)
    return Document(doc_id=str(doc_id), text=text)


class MovieSearchIndex(Index):
    """
    Builds the read-only structures the search engine queries.
    """

    def __init__(self, config: Optional[Dict] = None, pipeline: Optional[PreprocessingPipeline] = None):
        """
        Initialize the index.

        Args:
            config: Configuration dictionary (loaded from config.json if omitted)
            pipeline: Preprocessing pipeline, overrides the configured one
        """
        super().__init__()
        self.config = config or load_config()
        self.pipeline = pipeline or create_pipeline(self.config)
        self.workers = max(1, int(self.config.get("indexing", {}).get("workers", 1)))

        self.documents: Dict[str, Document] = {}
        self.inverted_index: Optional[InvertedIndex] = None
        self.vector_store: Optional[DocumentVectorStore] = None
        self.indexed = False

    @property
    def document_count(self) -> int:
        return self.inverted_index.document_count if self.inverted_index else 0

    def index_documents(self, documents: Iterable[Union[Document, dict, tuple]]) -> None:
        """
        Tokenize all documents and build the inverted index and vector store.

        Indexing again discards the previous structures and starts from scratch.

        Args:
            documents: (doc_id, text) pairs, dicts with ``id`` and ``text`` keys or Documents
        """
        self.indexed = False
        unique_docs: Dict[str, Document] = {}
        for i, item in enumerate(documents):
            try:
                document = _as_document(item, i)
            except (TypeError, ValueError) as e:
                log.warning("Skipping malformed document at position %d: %s", i, e)
                continue
            if document.id in unique_docs:
                log.warning("Duplicate document ID %r, keeping the first occurrence", document.id)
                continue
            unique_docs[document.id] = document

        doc_list = list(unique_docs.values())
        log.info("Tokenizing %d documents with %d worker(s)", len(doc_list), self.workers)

        if self.workers > 1 and len(doc_list) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                # map keeps input order, so the merged result does not depend on scheduling
                analyzed = list(executor.map(self._analyze, doc_list))
        else:
            analyzed = [self._analyze(document) for document in doc_list]

        self.inverted_index = InvertedIndex.from_term_counts(
            (doc_id, word_freq) for doc_id, _, word_freq in analyzed
        )
        self.vector_store = DocumentVectorStore.from_terms(
            (doc_id, terms) for doc_id, terms, _ in analyzed
        )
        self.documents = unique_docs
        self.indexed = True

        log.info("Indexed %d documents, %d distinct terms",
                 self.inverted_index.document_count, len(self.inverted_index))

    def _analyze(self, document: Document):
        terms = document.tokenize(self.pipeline).get_preprocessed_terms()
        return document.id, terms, count_terms(terms)

    def get_document(self, doc_id: str) -> dict:
        """
        Get a document by ID.

        Args:
            doc_id: Document ID

        Returns:
            Document as a dictionary, empty if the ID is unknown
        """
        document = self.documents.get(doc_id)
        if document is None:
            return {}
        return {"id": document.id, "text": document.text}


class MovieSearchEngine(SearchEngine):
    """
    Answers term queries with TF-IDF ranking and phrase queries with cosine similarity.
    """

    def __init__(self, index: MovieSearchIndex, top_k: Optional[int] = None):
        """
        Initialize the search engine.

        Args:
            index: A MovieSearchIndex whose build phase has completed
            top_k: Default result count (config ``search.top_k`` if omitted)
        """
        super().__init__(index)

        if not index.indexed:
            raise ValueError("Index must be built before initializing search engines")

        self.top_k = top_k if top_k is not None else int(index.config.get("search", {}).get("top_k", 10))
        self.tfidf_engine = TFIDFSearchEngine(index.inverted_index)
        self.phrase_engine = PhraseSearchEngine(index.vector_store)

    def search_term(self, term: str, top_k: Optional[int] = None) -> List[str]:
        return self.tfidf_engine.search_term(term, self._k(top_k))

    def search_phrase(self, query_terms: Iterable[str], top_k: Optional[int] = None) -> List[str]:
        return self.phrase_engine.search_phrase(query_terms, self._k(top_k))

    def rank(self, query: str, top_k: Optional[int] = None) -> List[Tuple[str, float]]:
        """
        Score a query and return (doc_id, score) pairs, best first.

        Args:
            query: Single term or whitespace separated phrase
            top_k: Number of results to return

        Returns:
            Ranked (doc_id, score) pairs, empty for an empty query
        """
        parsed = parse_query(query)
        if parsed is None:
            return []

        k = self._k(top_k)
        if parsed.kind == PHRASE_QUERY:
            return self.phrase_engine.rank_phrase(parsed.terms, k)
        return self.tfidf_engine.rank_term(parsed.terms[0], k)

    def search(self, query: str, top_k: Optional[int] = None) -> List[str]:
        """
        Search for documents matching the query.

        Args:
            query: Single term or whitespace separated phrase
            top_k: Number of top results to return

        Returns:
            Ordered list of document IDs
        """
        return [doc_id for doc_id, _ in self.rank(query, top_k)]

    def _k(self, top_k: Optional[int]) -> int:
        return self.top_k if top_k is None else top_k
