"""
Parser module for Documentation Keyword Tools.

Handles parsing of keyword annotations, cross-reference tokens and taxonomy
documents out of markdown text.
"""

import re
import sys
from pathlib import Path
from typing import Iterable, Optional, Set, Union

from .models import CrossRefs


KEYWORD_ANNOTATION_RE = re.compile(r"\[:([^\]]+)\]")
TAXONOMY_ENTRY_RE = re.compile(r"`:([^`]+)`")

ADR_REF_RE = re.compile(r"\[?ADR-(\d{5})\]?")
REQ_REF_RE = re.compile(r"\[?(REQ-[A-Z]+-[A-Za-z0-9-]+)\]?")
# Topic may not end in sentence punctuation: "RunNotes-2025-01-15-Feature." -> "...-Feature"
RUNNOTE_REF_RE = re.compile(r"\[?(RunNotes-\d{4}-\d{2}-\d{2}-[^\]\s]*[^\]\s.,;:!?()])\]?")


def read_text(filepath: Union[str, Path]) -> Optional[str]:
    """Read a text file, warning on stderr instead of raising.

    Args:
        filepath: Path to file

    Returns:
        File content, or None if the file could not be read
    """
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"Warning: Could not read {filepath}: {e}", file=sys.stderr)
        return None


class KeywordParser:
    """Parser for bracketed keyword annotations like ``[:api :security]``."""

    @staticmethod
    def extract_keywords(content: str) -> Set[str]:
        """Extract keywords from markdown content.

        Every ``[:...]`` span is split on whitespace; colons are stripped from
        each token and empty tokens are dropped. Casing is preserved.

        Args:
            content: Raw markdown text

        Returns:
            Set of keywords
        """
        keywords = set()
        for span in KEYWORD_ANNOTATION_RE.findall(content):
            for token in span.split():
                keyword = token.strip().replace(":", "")
                if keyword:
                    keywords.add(keyword)
        return keywords

    @staticmethod
    def parse_file(filepath: Union[str, Path]) -> Set[str]:
        """Extract keywords from a markdown file.

        Args:
            filepath: Path to markdown file

        Returns:
            Set of keywords; empty if the file could not be read
        """
        content = read_text(filepath)
        if content is None:
            return set()
        return KeywordParser.extract_keywords(content)

    @staticmethod
    def render(keywords: Iterable[str]) -> str:
        """Render keywords as a single annotation, e.g. ``[:api :security]``."""
        return "[" + " ".join(f":{kw}" for kw in sorted(keywords)) + "]"


class CrossRefParser:
    """Parser for ADR, requirement and RunNotes references."""

    @staticmethod
    def extract_cross_refs(
        content: str,
        enable_adr: bool = True,
        enable_req: bool = True,
        enable_runnote: bool = True,
    ) -> CrossRefs:
        """Extract cross-references from markdown content.

        Args:
            content: Raw markdown text
            enable_adr: Scan for ``ADR-NNNNN`` references
            enable_req: Scan for ``REQ-CATEGORY-ID`` references
            enable_runnote: Scan for ``RunNotes-YYYY-MM-DD-Topic`` references

        Returns:
            CrossRefs; disabled kinds are left empty
        """
        return CrossRefs(
            adr_refs=set(ADR_REF_RE.findall(content)) if enable_adr else set(),
            req_refs=set(REQ_REF_RE.findall(content)) if enable_req else set(),
            runnote_refs=set(RUNNOTE_REF_RE.findall(content)) if enable_runnote else set(),
        )

    @staticmethod
    def parse_file(filepath: Union[str, Path], **enabled) -> CrossRefs:
        """Extract cross-references from a markdown file.

        Args:
            filepath: Path to markdown file
            **enabled: ``enable_adr``/``enable_req``/``enable_runnote`` flags

        Returns:
            CrossRefs; all empty if the file could not be read
        """
        content = read_text(filepath)
        if content is None:
            return CrossRefs()
        return CrossRefParser.extract_cross_refs(content, **enabled)


class TaxonomyParser:
    """Parser for taxonomy documents declaring keywords as `` `:keyword` ``."""

    @staticmethod
    def extract_taxonomy(content: str) -> Set[str]:
        entries = (entry.strip() for entry in TAXONOMY_ENTRY_RE.findall(content))
        return {entry for entry in entries if entry}

    @staticmethod
    def load_taxonomy(filepath: Union[str, Path]) -> Optional[Set[str]]:
        """Load the recognized keywords from a taxonomy document.

        A missing or unreadable taxonomy returns None, which disables
        validation. A taxonomy without entries returns an empty set, which
        makes every keyword invalid.

        Args:
            filepath: Path to taxonomy markdown file

        Returns:
            Set of recognized keywords, or None
        """
        filepath = Path(filepath)

        if not filepath.exists():
            return None

        content = read_text(filepath)
        if content is None:
            return None

        taxonomy = TaxonomyParser.extract_taxonomy(content)
        if not taxonomy:
            print(
                f"Warning: Taxonomy {filepath} declares no keywords; "
                "every keyword will be reported invalid",
                file=sys.stderr,
            )
        return taxonomy
