"""
MovieSearch - term and phrase search over movie plot summaries.
"""
from MovieSearch.engine import MovieSearchEngine, MovieSearchIndex, ParsedQuery, parse_query
from MovieSearch.phrase_search import DocumentVectorStore, PhraseSearchEngine, compute_cosine_similarity
from MovieSearch.preprocessing import tokenize
from MovieSearch.tfidf_search import InvertedIndex, Posting, TFIDFSearchEngine

__all__ = [
    "MovieSearchEngine",
    "MovieSearchIndex",
    "ParsedQuery",
    "parse_query",
    "DocumentVectorStore",
    "PhraseSearchEngine",
    "compute_cosine_similarity",
    "tokenize",
    "InvertedIndex",
    "Posting",
    "TFIDFSearchEngine",
]
