"""
Search module for Documentation Keyword Tools.

Finds documents by keyword, cross-reference or raw content.
"""

import re
from typing import Callable, Dict, Iterable, List, Optional

from .aggregate import collect_documents
from .context import ProjectContext
from .models import Document
from .parser import read_text


SEARCH_KINDS = ("keyword", "content", "adr", "req", "runnote")

_ADR_QUERY_RE = re.compile(r"^\[?(?:ADR-)?(\d{5})\]?$")


class SearchEngine:
    """Search engine over the documents of one or more projects."""

    def __init__(self, contexts: Iterable[ProjectContext]):
        """Initialize search engine.

        Args:
            contexts: Project contexts to search
        """
        self.contexts = list(contexts)
        self._documents: Optional[List[Document]] = None

    @property
    def documents(self) -> List[Document]:
        if self._documents is None:
            self._documents = collect_documents(self.contexts)
        return self._documents

    def _matching(self, predicate: Callable[[Document], bool]) -> List[str]:
        return sorted(doc.path for doc in self.documents if predicate(doc))

    @staticmethod
    def _strip_brackets(query: str) -> str:
        return query.strip().lstrip("[").rstrip("]")

    def find_by_keyword(self, keyword: str) -> List[str]:
        """Find documents annotated with a keyword.

        A leading colon on the query is ignored, so ``:api`` and ``api`` match
        the same documents.
        """
        keyword = keyword.strip().lstrip(":")
        return self._matching(lambda doc: keyword in doc.keywords)

    def find_by_adr(self, adr_id: str) -> List[str]:
        """Find documents referencing an ADR.

        Accepts ``00042``, ``ADR-00042`` or ``[ADR-00042]``.
        """
        query = adr_id.strip()
        match = _ADR_QUERY_RE.match(query)
        if match:
            query = match.group(1)
        return self._matching(lambda doc: query in doc.adr_refs)

    def find_by_req(self, req_id: str) -> List[str]:
        query = self._strip_brackets(req_id)
        return self._matching(lambda doc: query in doc.req_refs)

    def find_by_runnote(self, runnote_id: str) -> List[str]:
        query = self._strip_brackets(runnote_id)
        return self._matching(lambda doc: query in doc.runnote_refs)

    def find_by_content(self, substring: str) -> List[str]:
        """Find documents whose raw text contains ``substring``.

        Plain case-sensitive substring match; no regex, no tokenization.
        Unreadable files are skipped with a warning.
        """
        def contains(doc: Document) -> bool:
            content = read_text(doc.path)
            return content is not None and substring in content

        return self._matching(contains)

    def search(self, kind: str, query: str) -> List[str]:
        """Dispatch a search by kind.

        Args:
            kind: One of keyword, content, adr, req, runnote
            query: Search query

        Returns:
            Sorted list of matching document paths

        Raises:
            ValueError: If kind is unknown
        """
        handlers: Dict[str, Callable[[str], List[str]]] = {
            "keyword": self.find_by_keyword,
            "content": self.find_by_content,
            "adr": self.find_by_adr,
            "req": self.find_by_req,
            "runnote": self.find_by_runnote,
        }
        if kind not in handlers:
            raise ValueError(f"Unknown search type: {kind}. Use one of: {', '.join(SEARCH_KINDS)}")
        return handlers[kind](query)

    def disabled_contexts(self, kind: str) -> List[ProjectContext]:
        """Contexts whose configuration disables extraction for ``kind``."""
        setting = {
            "adr": "enable_adr",
            "req": "enable_req",
            "runnote": "enable_runnote",
        }.get(kind)
        if setting is None:
            return []
        return [ctx for ctx in self.contexts if not getattr(ctx.config.cross_refs, setting)]

    def format_search_results(self, kind: str, query: str, results: List[str]) -> Dict:
        """Format search results for JSON output."""
        return {
            "query": {
                "type": kind,
                "value": query,
            },
            "results": results,
            "count": len(results),
        }
