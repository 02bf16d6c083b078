"""
Unit tests for validator module.
"""

import io
import tempfile
import unittest
from contextlib import redirect_stderr
from pathlib import Path

from doc_keywords.config import ConfigResolver
from doc_keywords.context import ProjectContextBuilder
from doc_keywords.validator import validate, validate_context


class TestValidate(unittest.TestCase):
    """Test validate function."""

    def test_no_taxonomy_everything_valid(self):
        """Test validation is disabled without a taxonomy."""
        for keywords in [set(), {"api"}, {"anything", "at-all"}]:
            result = validate(keywords, None)
            self.assertTrue(result.all_valid)
            self.assertEqual(result.valid, keywords)
            self.assertEqual(result.invalid, set())

    def test_empty_taxonomy_everything_invalid(self):
        """Test an empty taxonomy invalidates every keyword."""
        self.assertTrue(validate(set(), set()).all_valid)
        result = validate({"api"}, set())
        self.assertFalse(result.all_valid)
        self.assertEqual(result.invalid, {"api"})

    def test_partition(self):
        """Test valid and invalid partition the input."""
        taxonomy = {"architecture", "api"}
        cases = [
            {"architecture", "security"},
            {"api"},
            {"x", "y", "z"},
            set(),
        ]
        for keywords in cases:
            result = validate(keywords, taxonomy)
            self.assertEqual(result.valid | result.invalid, keywords)
            self.assertEqual(result.valid & result.invalid, set())
            self.assertEqual(result.all_valid, not result.invalid)

    def test_case_sensitive(self):
        """Test keywords are compared exactly."""
        result = validate({"API"}, {"api"})
        self.assertEqual(result.invalid, {"API"})


class TestValidateContext(unittest.TestCase):
    """Test validate_context function."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name).resolve()
        self.project = self.root / "project"
        (self.project / "doc").mkdir(parents=True)
        self.resolver = ConfigResolver(global_config_path=self.root / "no-global.toml")

    def tearDown(self):
        self.tmp.cleanup()

    def _write(self, rel: str, text: str) -> Path:
        path = self.project / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def _report(self):
        context = ProjectContextBuilder(self.resolver).build(self.project)
        return validate_context(context)

    def test_invalid_keyword_reported(self):
        """Test a keyword missing from the taxonomy fails validation."""
        self._write("doc-tools/keyword-taxonomy.md", "- `:architecture`\n- `:api`\n")
        doc = self._write("doc/design.md", "# Design\n\n[:architecture :security]\n")

        report = self._report()
        self.assertFalse(report.passed)
        self.assertEqual(len(report.invalid_documents), 1)
        self.assertEqual(report.invalid_documents[0].path, str(doc))
        self.assertEqual(report.invalid_documents[0].result.invalid, {"security"})

    def test_all_valid(self):
        self._write("doc-tools/keyword-taxonomy.md", "`:api` `:security`\n")
        self._write("doc/a.md", "[:api]\n")
        self._write("doc/b.md", "[:api :security]\n")

        report = self._report()
        self.assertTrue(report.passed)
        self.assertTrue(report.taxonomy_loaded)
        self.assertEqual(len(report.documents), 2)

    def test_missing_taxonomy_passes(self):
        """Test validation is disabled when no taxonomy exists."""
        self._write("doc/a.md", "[:whatever]\n")
        report = self._report()
        self.assertFalse(report.taxonomy_loaded)
        self.assertTrue(report.passed)

    def test_require_taxonomy(self):
        """Test require_taxonomy fails a project without taxonomy."""
        self._write("doc-tools/config.toml", "[validation]\nrequire_taxonomy = true\n")
        self._write("doc/a.md", "[:api]\n")
        report = self._report()
        self.assertFalse(report.passed)
        self.assertEqual(len(report.errors), 1)

    def test_strict_untagged(self):
        """Test strict mode fails documents without keywords."""
        self._write("doc/a.md", "[:api]\n")
        untagged = self._write("doc/b.md", "# No keywords\n")

        report = self._report()
        self.assertEqual(report.untagged, [str(untagged)])
        self.assertTrue(report.passed)

        self._write("doc-tools/config.toml", "[validation]\nstrict = true\n")
        self.assertFalse(self._report().passed)

    def test_empty_taxonomy_fails_everything(self):
        """Test an empty taxonomy document reports every keyword invalid."""
        self._write("doc-tools/keyword-taxonomy.md", "# Taxonomy\n\nTBD\n")
        self._write("doc/a.md", "[:api]\n")
        with redirect_stderr(io.StringIO()):
            report = self._report()
        self.assertFalse(report.passed)
        self.assertEqual(report.invalid_documents[0].result.invalid, {"api"})


if __name__ == "__main__":
    unittest.main()
