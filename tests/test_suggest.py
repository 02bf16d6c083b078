"""
Unit tests for suggest module.
"""

import io
import unittest
from contextlib import redirect_stderr
from typing import List

from doc_keywords.models import Suggestion
from doc_keywords.suggest import SuggestionEngine, SuggestionStrategy, tokenize


CONTENT = """# Caching Strategy

The cache layer stores responses. Cache invalidation happens on write.
The cache layer uses Redis.

[:performance]
"""


class TestTokenize(unittest.TestCase):
    """Test tokenize function."""

    def test_stopwords_and_punctuation_break_runs(self):
        runs = tokenize("The cache layer stores responses. Cache invalidation happens on write.")
        self.assertEqual(
            runs,
            [
                ["cache", "layer", "stores", "responses"],
                ["cache", "invalidation", "happens"],
                ["write"],
            ],
        )

    def test_keep_short_words(self):
        self.assertEqual(tokenize("The UI layer", keep={"ui"}), [["ui", "layer"]])
        self.assertEqual(tokenize("The UI layer"), [["layer"]])

    def test_annotations_removed(self):
        self.assertEqual(tokenize("[:performance :api]"), [])


class TestSuggestionEngine(unittest.TestCase):
    """Test SuggestionEngine class."""

    def setUp(self):
        self.engine = SuggestionEngine()

    def test_ranked_by_frequency(self):
        """Test words and repeated phrases are ranked by occurrence."""
        suggestions = self.engine.suggest(CONTENT, limit=3)
        self.assertEqual([s.keyword for s in suggestions], ["cache", "cache-layer", "layer"])
        self.assertEqual([s.confidence for s in suggestions], [1.0, 0.67, 0.67])

    def test_single_phrase_not_suggested(self):
        """Test a phrase seen once is not a candidate."""
        keywords = [s.keyword for s in self.engine.suggest(CONTENT, limit=None)]
        self.assertNotIn("caching-strategy", keywords)
        self.assertIn("caching", keywords)

    def test_existing_keywords_excluded(self):
        """Test keywords already in the document are not suggested."""
        content = CONTENT + "\n[:cache :Layer]\n"
        keywords = [s.keyword for s in self.engine.suggest(content, limit=None)]
        self.assertNotIn("cache", keywords)
        self.assertNotIn("layer", keywords)
        self.assertNotIn("performance", keywords)

    def test_taxonomy_boost(self):
        """Test taxonomy members are boosted and keep taxonomy casing."""
        taxonomy = {"Redis", "cache-layer", "security"}
        suggestions = self.engine.suggest(CONTENT, taxonomy=taxonomy, limit=4)
        self.assertEqual([s.keyword for s in suggestions], ["cache-layer", "cache", "Redis", "layer"])
        self.assertTrue(suggestions[0].in_taxonomy)
        self.assertEqual(suggestions[0].score, 4.0)

    def test_taxonomy_only(self):
        """Test taxonomy-only mode restricts candidates to taxonomy members."""
        taxonomy = {"redis", "cache-layer", "security", "caching-strategy"}
        suggestions = self.engine.suggest(CONTENT, taxonomy=taxonomy, taxonomy_only=True)
        self.assertEqual(
            [(s.keyword, s.confidence) for s in suggestions],
            [("cache-layer", 1.0), ("caching-strategy", 0.5), ("redis", 0.5)],
        )

    def test_short_taxonomy_keyword(self):
        """Test short taxonomy keywords survive the minimum word length."""
        content = "The UI layer. UI state. UI tests."
        suggestions = self.engine.suggest(content, taxonomy={"ui"}, taxonomy_only=True)
        self.assertEqual([(s.keyword, s.confidence) for s in suggestions], [("ui", 1.0)])
        self.assertEqual(self.engine.suggest(content, taxonomy=None, taxonomy_only=False)[0].keyword, "layer")

    def test_taxonomy_only_without_taxonomy(self):
        self.assertEqual(self.engine.suggest(CONTENT, taxonomy=None, taxonomy_only=True), [])

    def test_deterministic(self):
        first = self.engine.suggest(CONTENT, taxonomy={"redis"}, limit=None)
        second = self.engine.suggest(CONTENT, taxonomy={"redis"}, limit=None)
        self.assertEqual(first, second)

    def test_empty_content(self):
        self.assertEqual(self.engine.suggest(""), [])

    def test_custom_strategy(self):
        """Test the scoring strategy can be swapped."""

        class FixedStrategy(SuggestionStrategy):
            def score(self, content, taxonomy, existing) -> List[Suggestion]:
                return [Suggestion(keyword="b", score=1.0), Suggestion(keyword="a", score=1.0)]

        suggestions = SuggestionEngine(FixedStrategy()).suggest("anything")
        self.assertEqual([s.keyword for s in suggestions], ["a", "b"])

    def test_suggest_for_missing_file(self):
        with redirect_stderr(io.StringIO()):
            self.assertEqual(self.engine.suggest_for_file("/nonexistent/doc.md"), [])

    def test_format_suggestions(self):
        suggestions = self.engine.suggest(CONTENT, limit=2)
        formatted = SuggestionEngine.format_suggestions("doc/cache.md", suggestions, confidence=True)
        self.assertEqual(formatted["count"], 2)
        self.assertEqual(formatted["annotation"], "[:cache :cache-layer]")
        self.assertIn("confidence", formatted["suggestions"][0])


if __name__ == "__main__":
    unittest.main()
