"""
Phrase search module ranking documents by bag-of-words cosine similarity.
"""
from .phrase_search import DocumentVectorStore, PhraseSearchEngine, compute_cosine_similarity
