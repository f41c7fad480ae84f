from typing import List, Optional
from .preprocess import PreprocessingPipeline, default_pipeline


class Document:
    """
    Represents a document in the information retrieval system.
    Stores the raw text and the terms produced from it.
    """

    def __init__(self, doc_id: str, text: str = ""):
        """
        Initialize a document with content.

        Args:
            doc_id: Unique identifier for the document
            text: Raw document text
        """
        self.id = doc_id
        self.text = text or ""
        self.terms: Optional[List[str]] = None

    def tokenize(self, pipeline: Optional[PreprocessingPipeline] = None) -> 'Document':
        """
        Produce the document's terms. Runs once; later calls keep the first result.

        Args:
            pipeline: Preprocessing pipeline to apply

        Returns:
            Self for chaining operations
        """
        if self.terms is None:
            pipeline = pipeline or default_pipeline()
            self.terms = pipeline.terms(self.text)
        return self

    def get_preprocessed_terms(self) -> List[str]:
        """
        Get the preprocessed terms from the document.

        Returns:
            List of terms, empty if the document was never tokenized
        """
        return list(self.terms) if self.terms else []

    def __repr__(self):
        return f"Document(id={self.id!r}, terms={len(self.terms) if self.terms is not None else '?'})"
