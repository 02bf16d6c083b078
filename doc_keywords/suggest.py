"""
Suggestion module for Documentation Keyword Tools.

Proposes keywords for a document that it does not carry yet. Scoring is a
pluggable strategy; the default counts word and phrase occurrences and boosts
taxonomy members.
"""

import re
from collections import Counter
from pathlib import Path
from typing import Iterable, List, Optional, Set, Union

from .models import Suggestion
from .parser import KEYWORD_ANNOTATION_RE, KeywordParser, read_text


WORD_RE = re.compile(r"[a-z][a-z0-9]*(?:-[a-z0-9]+)*")
PHRASE_BREAK_RE = re.compile(r"[\n.,;:!?()\[\]{}<>|`\"]")

STOPWORDS = {
    "about", "after", "all", "also", "an", "and", "any", "are", "as", "at",
    "be", "been", "before", "but", "by", "can", "could", "do", "does", "each",
    "for", "from", "had", "has", "have", "how", "if", "in", "into", "is", "it",
    "its", "may", "more", "most", "must", "not", "of", "on", "only", "or",
    "other", "our", "should", "so", "some", "such", "than", "that", "the",
    "their", "them", "then", "there", "these", "they", "this", "those", "to",
    "use", "used", "uses", "using", "was", "we", "were", "what", "when", "where",
    "which", "while", "who", "will", "with", "would", "you", "your",
}

MIN_WORD_LENGTH = 3
MIN_PHRASE_COUNT = 2
TAXONOMY_BOOST = 2.0
DEFAULT_LIMIT = 10


def tokenize(content: str, keep: Optional[Set[str]] = None) -> List[List[str]]:
    """Split content into runs of meaningful lowercase words.

    Keyword annotations are removed first. A stopword or short word breaks a
    run, so adjacent words inside a run can form phrases.

    Args:
        content: Raw document text
        keep: Lowercase words kept even when short or a stopword

    Returns:
        List of word runs
    """
    text = KEYWORD_ANNOTATION_RE.sub(" ", content).lower()
    keep = keep or set()
    runs: List[List[str]] = []
    for segment in PHRASE_BREAK_RE.split(text):
        run: List[str] = []
        for word in WORD_RE.findall(segment):
            if word not in keep and (word in STOPWORDS or len(word) < MIN_WORD_LENGTH):
                if run:
                    runs.append(run)
                run = []
                continue
            run.append(word)
        if run:
            runs.append(run)
    return runs


class SuggestionStrategy:
    """Interface for keyword scoring strategies."""

    def score(
        self,
        content: str,
        taxonomy: Optional[Set[str]],
        existing: Set[str],
    ) -> List[Suggestion]:
        """Score candidate keywords for ``content``.

        Args:
            content: Raw document text
            taxonomy: Recognized keywords, or None
            existing: Keywords the document already carries (lowercased)

        Returns:
            Unordered candidate suggestions
        """
        raise NotImplementedError


class FrequencyStrategy(SuggestionStrategy):
    """Scores words and two-word phrases by how often they occur."""

    def __init__(self, taxonomy_boost: float = TAXONOMY_BOOST, min_phrase_count: int = MIN_PHRASE_COUNT):
        self.taxonomy_boost = taxonomy_boost
        self.min_phrase_count = min_phrase_count

    def score(
        self,
        content: str,
        taxonomy: Optional[Set[str]],
        existing: Set[str],
    ) -> List[Suggestion]:
        recognized = {kw.lower(): kw for kw in taxonomy} if taxonomy is not None else {}

        words: Counter = Counter()
        phrases: Counter = Counter()
        for run in tokenize(content, keep=set(recognized)):
            words.update(run)
            phrases.update(f"{a}-{b}" for a, b in zip(run, run[1:]))

        candidates = Counter(words)
        for phrase, count in phrases.items():
            if count >= self.min_phrase_count or phrase in recognized:
                candidates[phrase] += count

        suggestions = []
        for keyword, count in candidates.items():
            if keyword in existing:
                continue
            in_taxonomy = keyword in recognized
            score = count * self.taxonomy_boost if in_taxonomy else float(count)
            suggestions.append(
                Suggestion(keyword=recognized.get(keyword, keyword), score=score, in_taxonomy=in_taxonomy)
            )
        return suggestions


class SuggestionEngine:
    """Ranks keyword suggestions produced by a scoring strategy."""

    def __init__(self, strategy: Optional[SuggestionStrategy] = None):
        """Initialize suggestion engine.

        Args:
            strategy: Scoring strategy (default: FrequencyStrategy)
        """
        self.strategy = strategy or FrequencyStrategy()

    def suggest(
        self,
        content: str,
        taxonomy: Optional[Set[str]] = None,
        taxonomy_only: bool = False,
        limit: Optional[int] = DEFAULT_LIMIT,
    ) -> List[Suggestion]:
        """Suggest keywords missing from ``content``.

        Args:
            content: Raw document text
            taxonomy: Recognized keywords, or None
            taxonomy_only: Only suggest taxonomy members
            limit: Maximum number of suggestions (None for all)

        Returns:
            Suggestions ranked by descending score, then keyword, each with a
            confidence relative to the best score
        """
        existing = {kw.lower() for kw in KeywordParser.extract_keywords(content)}
        suggestions = self.strategy.score(content, taxonomy, existing)

        if taxonomy_only:
            suggestions = [s for s in suggestions if s.in_taxonomy]
        if not suggestions:
            return []

        best = max(s.score for s in suggestions)
        for s in suggestions:
            s.confidence = round(s.score / best, 2) if best > 0 else 0.0

        suggestions.sort(key=lambda s: (-s.score, s.keyword))
        if limit is not None:
            suggestions = suggestions[:limit]
        return suggestions

    def suggest_for_file(
        self,
        filepath: Union[str, Path],
        taxonomy: Optional[Set[str]] = None,
        taxonomy_only: bool = False,
        limit: Optional[int] = DEFAULT_LIMIT,
    ) -> List[Suggestion]:
        """Suggest keywords for a file; an unreadable file yields none."""
        content = read_text(filepath)
        if content is None:
            return []
        return self.suggest(content, taxonomy, taxonomy_only, limit)

    @staticmethod
    def format_suggestions(filepath: str, suggestions: Iterable[Suggestion], confidence: bool = False) -> dict:
        """Format suggestions for JSON output."""
        suggestions = list(suggestions)
        return {
            "file": filepath,
            "suggestions": [
                {
                    "keyword": s.keyword,
                    "in_taxonomy": s.in_taxonomy,
                    **({"confidence": s.confidence} if confidence else {}),
                }
                for s in suggestions
            ],
            "annotation": KeywordParser.render(s.keyword for s in suggestions) if suggestions else "",
            "count": len(suggestions),
        }
