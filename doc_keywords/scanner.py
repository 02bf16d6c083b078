"""
Scanner module for Documentation Keyword Tools.

Discovers markdown files under a documentation root.
"""

import os
from pathlib import Path
from typing import Iterable, List, Union


MARKDOWN_EXTENSION = ".md"


def is_excluded(filename: str, excluded_patterns: Iterable[str]) -> bool:
    """Check whether a base filename contains any exclusion pattern.

    Patterns are plain substrings, not globs or regular expressions.
    """
    return any(pattern and pattern in filename for pattern in excluded_patterns)


def scan_markdown_files(
    root: Union[str, Path],
    excluded_patterns: Iterable[str] = (),
) -> List[Path]:
    """Find markdown files under a directory tree.

    Args:
        root: Documentation root directory
        excluded_patterns: Substrings that exclude a file by its base name

    Returns:
        Sorted list of markdown file paths; empty if root does not exist
    """
    root = Path(root)
    if not root.is_dir():
        return []

    patterns = list(excluded_patterns)
    files: List[Path] = []
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            if not filename.endswith(MARKDOWN_EXTENSION):
                continue
            if is_excluded(filename, patterns):
                continue
            files.append(Path(dirpath) / filename)

    return sorted(files)
