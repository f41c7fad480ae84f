"""
Resolution of document IDs to movie titles.

The search core only returns document IDs; the batch driver turns them into
titles through a TitleResolver.
"""
import csv
import logging
import sys
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

log = logging.getLogger(__name__)


class TitleResolver(ABC):
    @abstractmethod
    def resolve_title(self, doc_id: str) -> Optional[str]:
        raise NotImplementedError()

    def resolve_titles(self, doc_ids: Iterable[str]) -> List[str]:
        """Titles for the given IDs in order; IDs without a title are left out."""
        titles = []
        for doc_id in doc_ids:
            title = self.resolve_title(doc_id)
            if title is not None:
                titles.append(title)
        return titles


class MetadataTitleResolver(TitleResolver):
    """Looks titles up in the tab separated movie metadata table."""

    def __init__(self, titles: Optional[Dict[str, str]] = None):
        self.titles = dict(titles or {})

    @classmethod
    def from_tsv(cls, path: str, id_column: int = 0, title_column: int = 2) -> 'MetadataTitleResolver':
        """
        Load the metadata table.

        Args:
            path: Path to the TSV file
            id_column: Column holding the document ID
            title_column: Column holding the title

        Returns:
            Resolver over the loaded titles
        """
        # Plot summaries can exceed the csv module's default field limit
        csv.field_size_limit(min(sys.maxsize, 2 ** 31 - 1))

        titles: Dict[str, str] = {}
        short_rows = 0
        needed = max(id_column, title_column) + 1
        with open(path, 'r', encoding='utf-8', errors='replace', newline='') as f:
            for row in csv.reader(f, delimiter="\t", quoting=csv.QUOTE_NONE):
                if len(row) < needed:
                    short_rows += 1
                    continue
                # First row wins for repeated IDs
                titles.setdefault(row[id_column].strip(), row[title_column])

        if short_rows:
            log.warning("Skipped %d metadata rows with fewer than %d columns", short_rows, needed)
        log.info("Loaded %d titles from %s", len(titles), path)
        return cls(titles)

    def resolve_title(self, doc_id: str) -> Optional[str]:
        return self.titles.get(doc_id)

    def __len__(self):
        return len(self.titles)


class IdentityTitleResolver(TitleResolver):
    """Used when no metadata is available: shows the document ID itself."""

    def resolve_title(self, doc_id: str) -> Optional[str]:
        return doc_id
