import logging
from typing import Iterator, List, Tuple

log = logging.getLogger(__name__)


def load_summaries(path: str) -> Iterator[Tuple[str, str]]:
    """
    Read plot summaries, one ``<doc_id>\\t<text>`` record per line.

    Lines without a tab separator or with an empty ID are skipped with a warning.

    Args:
        path: Path to the summaries file

    Yields:
        (doc_id, text) pairs in file order
    """
    skipped = 0
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        for line_no, line in enumerate(f, 1):
            line = line.rstrip("\r\n")
            if not line.strip():
                continue

            doc_id, sep, text = line.partition("\t")
            doc_id = doc_id.strip()
            if not sep or not doc_id:
                skipped += 1
                log.warning("%s:%d: malformed summary line skipped", path, line_no)
                continue

            yield doc_id, text

    if skipped:
        log.warning("Skipped %d malformed lines in %s", skipped, path)


def load_queries(path: str) -> List[str]:
    """Read one query per line, ignoring blank lines."""
    queries = []
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        for line in f:
            query = line.strip()
            if query:
                queries.append(query)
    return queries
