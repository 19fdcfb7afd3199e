# minibooklet/src/minibooklet/logic/page_selector.py
"""
Page selection expressions such as "1-4, 7, 10-8".
"""

import logging
import re
from typing import List, Optional

from .errors import EmptySelectionError

logger = logging.getLogger(__name__)

_SINGLE = re.compile(r"^(\d+)$")
_RANGE = re.compile(r"^(\d+)\s*-\s*(\d+)$")


def _expand_term(term: str, total_pages: int) -> List[int]:
    """0-based indices named by one term; invalid numbers are dropped."""
    single = _SINGLE.match(term)
    if single:
        number = int(single.group(1))
        return [number - 1] if 1 <= number <= total_pages else []

    span = _RANGE.match(term)
    if not span:
        return []

    # Only the part of the range inside the document is walked
    start, end = int(span.group(1)), int(span.group(2))
    if start <= end:
        numbers = range(max(start, 1), min(end, total_pages) + 1)
    else:
        numbers = range(min(start, total_pages), max(end, 1) - 1, -1)
    return [number - 1 for number in numbers]


def select(expression: Optional[str], total_pages: int) -> Optional[List[int]]:
    """
    Translate a selection expression into original page indices.

    Terms are separated by commas; each is a 1-based page number or an
    inclusive ``start-end`` range, descending when ``end < start``. Order and
    repetition are kept as written. Unparseable terms and page numbers outside
    ``1..total_pages`` are skipped.

    Args:
        expression: The selection, or None/blank for every page
        total_pages: Page count of the source document

    Returns:
        0-based page indices, or None when every page is to be used

    Raises:
        EmptySelectionError: no term named a valid page
    """
    if expression is None or not expression.strip():
        return None

    indices: List[int] = []
    for term in expression.split(","):
        term = term.strip()
        if not term:
            continue
        expanded = _expand_term(term, total_pages)
        if not expanded:
            logger.debug("Skipping page selection term %r", term)
        indices.extend(expanded)

    if not indices:
        raise EmptySelectionError(
            f"No valid pages in selection {expression!r} "
            f"(document has {total_pages} pages)"
        )
    return indices


def resolve_pages(expression: Optional[str], total_pages: int) -> List[int]:
    """Like ``select`` but always returns concrete indices."""
    selected = select(expression, total_pages)
    if selected is None:
        return list(range(total_pages))
    return selected
