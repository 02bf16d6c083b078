"""
Validator module for Documentation Keyword Tools.

Checks extracted keywords against a project's taxonomy.
"""

from typing import Iterable, Optional, Set

from .context import ProjectContext
from .models import ContextValidation, DocumentValidation, ValidationResult


def validate(keywords: Iterable[str], taxonomy: Optional[Set[str]]) -> ValidationResult:
    """Partition keywords into valid and invalid sets.

    Args:
        keywords: Keywords to check
        taxonomy: Recognized keywords, or None when validation is disabled

    Returns:
        ValidationResult; with no taxonomy every keyword is valid
    """
    keywords = set(keywords)
    if taxonomy is None:
        return ValidationResult(valid=keywords, invalid=set(), all_valid=True)

    invalid = keywords - taxonomy
    return ValidationResult(
        valid=keywords & taxonomy,
        invalid=invalid,
        all_valid=not invalid,
    )


def validate_context(context: ProjectContext) -> ContextValidation:
    """Validate every document in a project.

    ``validation.require_taxonomy`` fails the project when no taxonomy is
    loaded. ``validation.strict`` fails it when a document carries no keyword
    annotations.

    Args:
        context: Project context

    Returns:
        ContextValidation report
    """
    settings = context.config.validation
    report = ContextValidation(
        project_root=str(context.project_root),
        taxonomy_path=str(context.taxonomy_path),
        taxonomy_loaded=context.taxonomy is not None,
        strict=settings.strict,
    )

    if settings.require_taxonomy and context.taxonomy is None:
        report.errors.append(f"Taxonomy required but not found: {context.taxonomy_path}")

    for doc in context.documents():
        if not doc.keywords:
            report.untagged.append(doc.path)
        report.documents.append(
            DocumentValidation(path=doc.path, result=validate(doc.keywords, context.taxonomy))
        )

    return report
