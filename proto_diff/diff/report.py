"""
Reporter - finalize and render a finished diff tree.
"""

import json
from collections import Counter
from typing import Dict, Optional, TextIO

from proto_diff.diff.tree import DiffSection, ItemKind


def finalize(root: DiffSection) -> DiffSection:
    """Trim branches without findings; the root itself is always kept."""
    root.trim()
    return root


def render_report(root: DiffSection, writer: Optional[TextIO] = None) -> None:
    """
    Trim ``root`` and write it as an indented text report.

    Args:
        root: Root section returned by the comparison engine
        writer: Text stream (default: sys.stdout)
    """
    finalize(root).render(writer)


def report_to_json(root: DiffSection, indent: Optional[int] = 2) -> str:
    """Trim ``root`` and serialize it as JSON."""
    return json.dumps(finalize(root).to_dict(), indent=indent)


def summarize(root: DiffSection) -> Dict[ItemKind, int]:
    """
    Count findings per kind across the whole tree.

    Returns:
        Dict mapping each ItemKind present in the tree to its count, in
        ItemKind declaration order
    """
    counts = Counter(item.kind for section in root.walk() for item in section.items)
    return {kind: counts[kind] for kind in ItemKind if counts[kind]}
