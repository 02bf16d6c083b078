"""
Documentation Keyword Tools

Extracts, validates, indexes and analyzes bracketed keyword annotations and
cross-references embedded in markdown documentation.
"""

__version__ = "0.1.0"

from .config import ConfigError, ConfigResolver, DocConfig
from .context import ProjectContext, ProjectContextBuilder, build_context
from .parser import CrossRefParser, KeywordParser, TaxonomyParser
from .scanner import scan_markdown_files
from .search import SearchEngine
from .suggest import SuggestionEngine
from .validator import validate, validate_context

__all__ = [
    "ConfigError",
    "ConfigResolver",
    "DocConfig",
    "ProjectContext",
    "ProjectContextBuilder",
    "build_context",
    "CrossRefParser",
    "KeywordParser",
    "TaxonomyParser",
    "scan_markdown_files",
    "SearchEngine",
    "SuggestionEngine",
    "validate",
    "validate_context",
]
