# minibooklet/src/minibooklet/logic/booklet_formats.py
"""
Supported booklet formats and the options that select them.
Each format is an immutable record; its cell tables are derived by the fold
simulator on first use and memoized for the process lifetime.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import List, Tuple

from .errors import OptionsError
from .fold_simulator import CellTable, FoldAxis, FoldStep, Grid, derive_permutation
from .unit_converter import mm_to_points

# Reference sheet, always stored as portrait
A4_SIZE_MM = (210.0, 297.0)

DEFAULT_SUFFIX = "-booklet"


class BookletFormat(Enum):
    A7 = "a7"
    A6 = "a6"


class Orientation(Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


@dataclass(frozen=True)
class FoldLayout:
    """Grid and fold sequence of one printable booklet variant."""

    name: str
    grid: Grid
    fold_steps: Tuple[FoldStep, ...]
    sheet_orientation: Orientation

    @property
    def block_size(self) -> int:
        """Booklet pages held by one sheet printed on both sides."""
        return 2 * self.grid.cell_count

    @property
    def sheet_size_pt(self) -> Tuple[float, float]:
        """Output sheet (width, height) in points."""
        w_mm, h_mm = A4_SIZE_MM
        if self.sheet_orientation is Orientation.LANDSCAPE:
            w_mm, h_mm = h_mm, w_mm
        return mm_to_points(w_mm), mm_to_points(h_mm)


_VERTICAL = FoldStep(FoldAxis.VERTICAL)
_HORIZONTAL = FoldStep(FoldAxis.HORIZONTAL)

A7_PORTRAIT = FoldLayout(
    name="A7 portrait",
    grid=Grid(cols=4, rows=2),
    fold_steps=(_VERTICAL, _HORIZONTAL, _VERTICAL),
    sheet_orientation=Orientation.LANDSCAPE,
)

A7_LANDSCAPE = FoldLayout(
    name="A7 landscape",
    grid=Grid(cols=2, rows=4),
    fold_steps=(_HORIZONTAL, _VERTICAL, _HORIZONTAL),
    sheet_orientation=Orientation.PORTRAIT,
)

A6 = FoldLayout(
    name="A6",
    grid=Grid(cols=2, rows=2),
    fold_steps=(_HORIZONTAL, _VERTICAL),
    sheet_orientation=Orientation.PORTRAIT,
)


def resolve_layout(booklet_format: BookletFormat, orientation: Orientation) -> FoldLayout:
    """Pick the fold layout for a format; orientation only matters for A7."""
    if booklet_format is BookletFormat.A6:
        return A6
    if orientation is Orientation.LANDSCAPE:
        return A7_LANDSCAPE
    return A7_PORTRAIT


@lru_cache(maxsize=None)
def full_table(layout: FoldLayout) -> CellTable:
    """Cell table for a sheet printed on both sides."""
    return derive_permutation(layout.grid, layout.fold_steps)


@lru_cache(maxsize=None)
def front_only_table(layout: FoldLayout) -> CellTable:
    """Cell table for a sheet printed on its front only."""
    return derive_permutation(layout.grid, layout.fold_steps, duplex=False)


def folding_instructions(layout: FoldLayout) -> List[str]:
    """Human readable steps for printing and folding one sheet."""
    # The back is laid out for a flip about the vertical sheet edge
    if layout.sheet_orientation is Orientation.LANDSCAPE:
        sheet, edge = "landscape", "short"
    else:
        sheet, edge = "portrait", "long"
    steps = [
        f"Print on A4 {sheet}, double-sided, flipping on the {edge} edge, "
        "at actual size (no fit to page)."
    ]

    paper = 4
    for step in layout.fold_steps:
        if step.axis is FoldAxis.VERTICAL:
            motion = "Fold the right half behind the left half"
        else:
            motion = "Fold the top half behind the bottom half"
        steps.append(f"{motion} (A{paper} → A{paper + 1}).")
        paper += 1

    steps.append("Trim the three open edges, keeping the last fold as the spine.")
    return steps


@dataclass(frozen=True)
class BookletOptions:
    """Options a caller can choose for one imposition run."""

    booklet_format: BookletFormat = BookletFormat.A7
    orientation: Orientation = Orientation.PORTRAIT
    page_selection: str = ""
    suffix: str = DEFAULT_SUFFIX

    @property
    def layout(self) -> FoldLayout:
        return resolve_layout(self.booklet_format, self.orientation)

    @classmethod
    def from_values(
        cls,
        booklet_format: str = "a7",
        orientation: str = "portrait",
        page_selection: str = "",
        suffix: str = DEFAULT_SUFFIX,
    ) -> "BookletOptions":
        """
        Build options from plain strings, as they come from a settings store
        or a form.

        Raises:
            OptionsError: format or orientation is not a supported value
        """
        try:
            fmt = BookletFormat((booklet_format or "").strip().lower())
        except ValueError:
            raise OptionsError(f"Unsupported booklet format: {booklet_format!r}") from None
        try:
            orient = Orientation((orientation or "").strip().lower())
        except ValueError:
            raise OptionsError(f"Unsupported page orientation: {orientation!r}") from None

        return cls(
            booklet_format=fmt,
            orientation=orient,
            page_selection=page_selection or "",
            suffix=suffix if suffix is not None else DEFAULT_SUFFIX,
        )
