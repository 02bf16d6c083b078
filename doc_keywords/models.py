"""
Data models for Documentation Keyword Tools.

Documents, cross-references and validation results are derived on every scan
and never persisted.
"""

from typing import List, Optional, Set

from pydantic import BaseModel


class CrossRefs(BaseModel):
    """Cross-references found in one piece of content, grouped by kind."""

    adr_refs: Set[str] = set()
    req_refs: Set[str] = set()
    runnote_refs: Set[str] = set()


class Document(BaseModel):
    """A markdown file with its extracted keywords and cross-references."""

    path: str
    keywords: Set[str] = set()
    adr_refs: Set[str] = set()
    req_refs: Set[str] = set()
    runnote_refs: Set[str] = set()


class ValidationResult(BaseModel):
    """Partition of a keyword set against a taxonomy."""

    valid: Set[str] = set()
    invalid: Set[str] = set()
    all_valid: bool = True


class DocumentValidation(BaseModel):
    path: str
    result: ValidationResult


class ContextValidation(BaseModel):
    """Validation report for every document of one project."""

    project_root: str
    taxonomy_path: str
    taxonomy_loaded: bool
    documents: List[DocumentValidation] = []
    untagged: List[str] = []
    errors: List[str] = []
    strict: bool = False

    @property
    def invalid_documents(self) -> List[DocumentValidation]:
        return [doc for doc in self.documents if not doc.result.all_valid]

    @property
    def passed(self) -> bool:
        if self.errors or self.invalid_documents:
            return False
        if self.strict and self.untagged:
            return False
        return True


class Suggestion(BaseModel):
    """A candidate keyword proposed for a document."""

    keyword: str
    score: float
    confidence: Optional[float] = None
    in_taxonomy: bool = False
