"""
Aggregation module for Documentation Keyword Tools.

Builds the keyword index, the keyword co-occurrence graph and frequency
statistics over documents from one or more projects.
"""

from collections import Counter
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, Iterable, List, Optional, Tuple

from .context import ProjectContext
from .models import Document


def collect_documents(contexts: Iterable[ProjectContext]) -> List[Document]:
    """Union the documents of several projects, sorted by path.

    A path seen twice (same project passed twice) is kept once.
    """
    by_path: Dict[str, Document] = {}
    for context in contexts:
        for doc in context.documents():
            by_path.setdefault(doc.path, doc)
    return [by_path[path] for path in sorted(by_path)]


# ==================== Index ====================

def build_index(documents: Iterable[Document]) -> Dict[str, List[str]]:
    """Map each keyword to the sorted paths of documents containing it."""
    index: Dict[str, List[str]] = {}
    for doc in documents:
        for keyword in doc.keywords:
            index.setdefault(keyword, []).append(doc.path)
    return {keyword: sorted(index[keyword]) for keyword in sorted(index)}


# ==================== Co-occurrence graph ====================

@dataclass
class CooccurrenceGraph:
    """Keywords as nodes, weighted by the number of shared documents."""

    nodes: List[str] = field(default_factory=list)
    edges: Dict[Tuple[str, str], int] = field(default_factory=dict)

    def sorted_edges(self) -> List[Tuple[str, str, int]]:
        return [(a, b, self.edges[(a, b)]) for a, b in sorted(self.edges)]


def build_cooccurrence(documents: Iterable[Document]) -> Dict[Tuple[str, str], int]:
    """Count, for every keyword pair, the documents where both appear.

    Pairs are stored in lexicographic order, so ``(a, b)`` with ``a < b``.
    """
    weights: Counter = Counter()
    for doc in documents:
        for pair in combinations(sorted(doc.keywords), 2):
            weights[pair] += 1
    return dict(weights)


def build_graph(documents: Iterable[Document], min_weight: int = 1) -> CooccurrenceGraph:
    """Build the co-occurrence graph.

    Args:
        documents: Documents in scope
        min_weight: Minimum number of shared documents for an edge

    Returns:
        CooccurrenceGraph with every observed keyword as a node
    """
    documents = list(documents)
    nodes = sorted({kw for doc in documents for kw in doc.keywords})
    edges = {
        pair: weight
        for pair, weight in build_cooccurrence(documents).items()
        if weight >= min_weight
    }
    return CooccurrenceGraph(nodes=nodes, edges=edges)


def _dot_id(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def render_dot(graph: CooccurrenceGraph, weights: bool = False, name: str = "keywords") -> str:
    """Serialize a graph as Graphviz DOT.

    Nodes and edges are written in lexicographic order so the output is
    stable across runs.

    Args:
        graph: Co-occurrence graph
        weights: Annotate edges with their weight
        name: Graph name

    Returns:
        DOT source text
    """
    lines = [f"graph {_dot_id(name)} {{"]
    for node in graph.nodes:
        lines.append(f"  {_dot_id(node)};")
    for a, b, weight in graph.sorted_edges():
        attrs = f' [label="{weight}", weight={weight}]' if weights else ""
        lines.append(f"  {_dot_id(a)} -- {_dot_id(b)}{attrs};")
    lines.append("}")
    return "\n".join(lines) + "\n"


# ==================== Statistics ====================

def keyword_frequencies(documents: Iterable[Document]) -> Dict[str, int]:
    """Count the distinct documents containing each keyword."""
    counts: Counter = Counter()
    for doc in documents:
        counts.update(doc.keywords)
    return dict(counts)


def top_keywords(frequencies: Dict[str, int], top: Optional[int] = None) -> List[Tuple[str, int]]:
    """Rank keywords by descending count, ties broken alphabetically.

    Args:
        frequencies: Keyword to document count
        top: Return only the first ``top`` entries (default: all)

    Returns:
        List of (keyword, count) tuples
    """
    ranked = sorted(frequencies.items(), key=lambda item: (-item[1], item[0]))
    if top is not None:
        ranked = ranked[:top]
    return ranked


def collection_stats(documents: Iterable[Document]) -> Dict:
    """Summarize a document collection.

    Returns:
        Dictionary with document, keyword and cross-reference counts
    """
    documents = list(documents)
    tagged = [doc for doc in documents if doc.keywords]
    annotations = sum(len(doc.keywords) for doc in documents)

    return {
        "documents": len(documents),
        "tagged_documents": len(tagged),
        "untagged_documents": len(documents) - len(tagged),
        "unique_keywords": len({kw for doc in documents for kw in doc.keywords}),
        "total_annotations": annotations,
        "avg_keywords_per_tagged_document": round(annotations / len(tagged), 2) if tagged else 0.0,
        "adr_refs": len({ref for doc in documents for ref in doc.adr_refs}),
        "req_refs": len({ref for doc in documents for ref in doc.req_refs}),
        "runnote_refs": len({ref for doc in documents for ref in doc.runnote_refs}),
    }
