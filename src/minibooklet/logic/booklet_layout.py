# minibooklet/src/minibooklet/logic/booklet_layout.py
"""
Pure layout generation logic.
No file I/O, no rendering, no PDF operations.
Just data structures describing which page goes where on each printed sheet.
"""

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Tuple

from .booklet_formats import (
    BookletFormat,
    FoldLayout,
    Orientation,
    front_only_table,
    full_table,
    resolve_layout,
)
from .errors import EmptyDocumentError
from .fold_simulator import Cell, Placement, Side

# Type aliases for clarity
Point = Tuple[float, float]


@dataclass(frozen=True)
class Slot:
    """One page placed on one side of a sheet."""

    src_index: int  # index into the effective page sequence
    col: int
    row: int
    rotate_deg: int  # 0 or 180


@dataclass(frozen=True)
class Sheet:
    block_start: int
    block_end: int  # last page of the block, clamped to the page count
    front_slots: Tuple[Slot, ...]
    back_slots: Tuple[Slot, ...] = ()

    @property
    def is_front_only(self) -> bool:
        return not self.back_slots

    def slots(self) -> Iterable[Slot]:
        yield from self.front_slots
        yield from self.back_slots


@dataclass(frozen=True)
class ImpositionPlan:
    layout: FoldLayout
    page_count: int
    sheets: Tuple[Sheet, ...]

    def __len__(self) -> int:
        return len(self.sheets)

    def output_page_count(self) -> int:
        """Printed sides: every front plus every non-empty back."""
        return sum(1 if sheet.is_front_only else 2 for sheet in self.sheets)


@dataclass(frozen=True)
class GuideLine:
    """Segment in grid units: cell (c, r) spans [c, c+1] x [r, r+1]."""

    start: Point
    end: Point


def _fill_slots(
    entries: List[Tuple[Cell, Placement]], block_start: int, page_count: int
) -> Tuple[Slot, ...]:
    # Cells without a backing page are left out, not padded with blanks
    slots = []
    for cell, placement in entries:
        src_index = block_start + placement.reading_position - 1
        if src_index < page_count:
            slots.append(Slot(src_index, cell.col, cell.row, placement.rotation_deg))
    return tuple(slots)


def plan_layout(layout: FoldLayout, page_count: int) -> ImpositionPlan:
    """
    Impose ``page_count`` effective pages with a fold layout.

    Each block of ``layout.block_size`` pages goes on one sheet. A block
    holding no more than half a sheet's capacity is printed on the front only,
    numbered as a single-sided fold, whether it is the only block or the last.

    Raises:
        EmptyDocumentError: page_count is below 1
    """
    if page_count < 1:
        raise EmptyDocumentError("Nothing to impose: the document has no pages")

    block_size = layout.block_size
    full = full_table(layout)
    front_only = front_only_table(layout)

    sheets = []
    for block_start in range(0, page_count, block_size):
        block_end = min(block_start + block_size, page_count) - 1
        remaining = page_count - block_start

        if remaining <= block_size // 2:
            front = _fill_slots(front_only.ordered(Side.FRONT), block_start, page_count)
            back: Tuple[Slot, ...] = ()
        else:
            front = _fill_slots(full.ordered(Side.FRONT), block_start, page_count)
            back = _fill_slots(full.ordered(Side.BACK), block_start, page_count)

        sheets.append(Sheet(block_start, block_end, front, back))

    return ImpositionPlan(layout=layout, page_count=page_count, sheets=tuple(sheets))


def plan(
    booklet_format: BookletFormat, orientation: Orientation, page_count: int
) -> ImpositionPlan:
    """Impose ``page_count`` pages for a format and page orientation."""
    return plan_layout(resolve_layout(booklet_format, orientation), page_count)


def spine_guide(sheet: Sheet) -> Optional[GuideLine]:
    """
    Guide along the spine of a sheet's front.

    The first and last page of the block face each other across the spine
    fold; when both are printed on the front and sit in neighbouring cells,
    their shared edge is returned.
    """
    by_index: Mapping[int, Slot] = {slot.src_index: slot for slot in sheet.front_slots}
    first = by_index.get(sheet.block_start)
    last = by_index.get(sheet.block_end)
    if first is None or last is None or first is last:
        return None

    d_col = abs(first.col - last.col)
    d_row = abs(first.row - last.row)

    if first.row == last.row and d_col == 1:
        x = max(first.col, last.col)
        return GuideLine((x, first.row), (x, first.row + 1))
    if first.col == last.col and d_row == 1:
        y = max(first.row, last.row)
        return GuideLine((first.col, y), (first.col + 1, y))
    return None


class BookletLayout:
    """
    Holds the active imposition plan for a document.
    Regenerated whenever the page count or the chosen format changes.
    """

    def __init__(self, page_count: int):
        """
        Args:
            page_count: Number of effective pages (after page selection)
        """
        self.page_count = page_count
        self.active_plan: Optional[ImpositionPlan] = None

    def generate(
        self, booklet_format: BookletFormat, orientation: Orientation
    ) -> ImpositionPlan:
        """Generate and store the plan for a format."""
        self.active_plan = plan(booklet_format, orientation, self.page_count)
        return self.active_plan

    def get_sheet_count(self) -> int:
        """Returns the number of physical sheets in the active plan."""
        return len(self.active_plan) if self.active_plan else 0

    def get_output_page_count(self) -> int:
        """Returns the number of printed sides in the active plan."""
        return self.active_plan.output_page_count() if self.active_plan else 0
