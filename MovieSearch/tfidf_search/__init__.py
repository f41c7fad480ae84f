"""
TF-IDF search module for information retrieval using the TF-IDF weighting scheme.
Ranks the documents containing a query term by tf * log2(N/df).
"""
from .tfidf_search import InvertedIndex, Posting, TFIDFSearchEngine, count_terms, rank_scores
