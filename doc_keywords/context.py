"""
Project context module for Documentation Keyword Tools.

A ProjectContext is the resolved configuration, loaded taxonomy and exclusion
rules for one project root. It is built fresh for every command and never
mutated afterwards.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set, Tuple, Union

from .config import ConfigResolver, DocConfig
from .models import Document
from .parser import CrossRefParser, KeywordParser, TaxonomyParser, read_text
from .scanner import scan_markdown_files


@dataclass(frozen=True)
class ProjectContext:
    """Snapshot of one project's configuration and taxonomy."""

    project_root: Path
    config: DocConfig
    doc_path: Path
    taxonomy_path: Path
    template_dir: Path
    taxonomy: Optional[Set[str]]
    excluded_patterns: Tuple[str, ...]

    def markdown_files(self) -> List[Path]:
        return scan_markdown_files(self.doc_path, self.excluded_patterns)

    def load_document(self, filepath: Union[str, Path]) -> Document:
        """Extract keywords and cross-references from one file.

        An unreadable file yields a document with no keywords or references.
        """
        content = read_text(filepath)
        if content is None:
            return Document(path=str(filepath))

        settings = self.config.cross_refs
        refs = CrossRefParser.extract_cross_refs(
            content,
            enable_adr=settings.enable_adr,
            enable_req=settings.enable_req,
            enable_runnote=settings.enable_runnote,
        )
        return Document(
            path=str(filepath),
            keywords=KeywordParser.extract_keywords(content),
            adr_refs=refs.adr_refs,
            req_refs=refs.req_refs,
            runnote_refs=refs.runnote_refs,
        )

    def documents(self) -> List[Document]:
        """Scan the documentation root and extract every document.

        Scans again on each call; results are not cached.
        """
        return [self.load_document(path) for path in self.markdown_files()]


class ProjectContextBuilder:
    """Builds ProjectContexts using an injected ConfigResolver."""

    def __init__(self, resolver: ConfigResolver):
        """Initialize builder.

        Args:
            resolver: Config resolver used for loading and path resolution
        """
        self.resolver = resolver

    def build(self, project_root: Optional[Union[str, Path]] = None) -> ProjectContext:
        """Build a context for ``project_root``.

        Args:
            project_root: Project root directory (default: discovered upward
                from the current directory)

        Returns:
            ProjectContext

        Raises:
            ConfigError: If the project's configuration is invalid
        """
        if project_root is None:
            root = self.resolver.find_project_root()
        else:
            root = Path(project_root).resolve()

        config = self.resolver.load(root)
        taxonomy_path = self.resolver.resolve_taxonomy_path(config, root)

        return ProjectContext(
            project_root=root,
            config=config,
            doc_path=self.resolver.resolve_doc_path(config, root),
            taxonomy_path=taxonomy_path,
            template_dir=self.resolver.resolve_template_dir(config, root),
            taxonomy=TaxonomyParser.load_taxonomy(taxonomy_path),
            excluded_patterns=tuple(config.excluded_patterns),
        )


def build_context(
    project_root: Optional[Union[str, Path]] = None,
    resolver: Optional[ConfigResolver] = None,
) -> ProjectContext:
    """Build a ProjectContext, creating a default resolver if none is given."""
    return ProjectContextBuilder(resolver or ConfigResolver()).build(project_root)
