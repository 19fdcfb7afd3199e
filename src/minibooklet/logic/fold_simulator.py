# minibooklet/src/minibooklet/logic/fold_simulator.py
"""
Fold simulation for mini booklets.
Derives, from a sequence of half folds, which booklet page every grid cell of
the printed sheet becomes and how it has to be rotated to read upright.
No file I/O, no PDF operations.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .errors import FoldDefinitionError, InvalidGridError, UnsupportedAxisSequenceError


class FoldAxis(Enum):
    """Direction of the crease of a half fold."""

    HORIZONTAL = "horizontal"  # crease runs left-right, halves the rows
    VERTICAL = "vertical"  # crease runs top-bottom, halves the columns


class Side(Enum):
    FRONT = "front"
    BACK = "back"


@dataclass(frozen=True)
class FoldStep:
    """
    One half fold. The half nearer the high edge (right or top) is turned
    behind the half that stays in place.
    """

    axis: FoldAxis


@dataclass(frozen=True)
class Grid:
    cols: int
    rows: int

    @property
    def cell_count(self) -> int:
        return self.cols * self.rows

    def cells(self) -> Iterator["Cell"]:
        """Cells in sheet reading order: top row first, left to right."""
        for row in reversed(range(self.rows)):
            for col in range(self.cols):
                yield Cell(col, row)

    def mirrored(self, cell: "Cell") -> "Cell":
        """Printed position of the back of ``cell`` after a duplex flip."""
        return Cell(self.cols - 1 - cell.col, cell.row)


@dataclass(frozen=True)
class Cell:
    col: int
    row: int  # 0 is the bottom row, as in PDF coordinates


@dataclass(frozen=True)
class Placement:
    reading_position: int  # 1-based
    rotation_deg: int  # 0 or 180


@dataclass(frozen=True)
class CellTable:
    """
    Reading position and rotation of every printed cell.
    Back cells are given in printed (PDF) coordinates.
    """

    grid: Grid
    front: Mapping[Cell, Placement]
    back: Mapping[Cell, Placement]

    def side(self, side: Side) -> Mapping[Cell, Placement]:
        return self.front if side is Side.FRONT else self.back

    @property
    def page_count(self) -> int:
        return len(self.front) + len(self.back)

    def ordered(self, side: Side) -> List[Tuple[Cell, Placement]]:
        """Entries of one side in sheet reading order."""
        entries = self.side(side)
        return [(cell, entries[cell]) for cell in self.grid.cells() if cell in entries]


@dataclass(frozen=True)
class _Piece:
    """A grid cell of paper as it travels through the folds."""

    cell: Cell
    front_up: bool = True
    mirror_x: bool = False
    mirror_y: bool = False

    def turned(self, axis: FoldAxis) -> "_Piece":
        if axis is FoldAxis.VERTICAL:
            return replace(self, front_up=not self.front_up, mirror_x=not self.mirror_x)
        return replace(self, front_up=not self.front_up, mirror_y=not self.mirror_y)


@dataclass(frozen=True)
class _Face:
    side: Side
    cell: Cell  # printed position
    rotation_deg: int  # apparent rotation of unrotated content


def validate_fold_sequence(grid: Grid, fold_steps: Sequence[FoldStep]):
    """Raise if ``fold_steps`` cannot fold ``grid`` down to a single leaf stack."""
    if grid.cols < 1 or grid.rows < 1:
        raise InvalidGridError(f"Grid must have at least one cell, got {grid}")
    if not fold_steps:
        raise InvalidGridError("At least one fold is required to bind a booklet")
    if grid.cell_count != 2 ** len(fold_steps):
        raise InvalidGridError(
            f"{grid.cols}x{grid.rows} grid has {grid.cell_count} cells, "
            f"{len(fold_steps)} folds need {2 ** len(fold_steps)}"
        )

    cols, rows = grid.cols, grid.rows
    for number, step in enumerate(fold_steps, start=1):
        extent = cols if step.axis is FoldAxis.VERTICAL else rows
        if extent % 2:
            raise UnsupportedAxisSequenceError(
                f"Fold {number} ({step.axis.value}) cannot bisect an extent of "
                f"{extent} cells ({cols}x{rows} remaining)"
            )
        if step.axis is FoldAxis.VERTICAL:
            cols //= 2
        else:
            rows //= 2


def _fold(grid: Grid, fold_steps: Sequence[FoldStep]) -> List[_Piece]:
    """Fold the sheet and return its leaves from top to bottom."""
    validate_fold_sequence(grid, fold_steps)

    cols, rows = grid.cols, grid.rows
    stacks: Dict[Tuple[int, int], List[_Piece]] = {
        (cell.col, cell.row): [_Piece(cell)] for cell in grid.cells()
    }

    for step in fold_steps:
        if step.axis is FoldAxis.VERTICAL:
            kept_cols, kept_rows = cols // 2, rows
        else:
            kept_cols, kept_rows = cols, rows // 2

        folded = {}
        for x in range(kept_cols):
            for y in range(kept_rows):
                if step.axis is FoldAxis.VERTICAL:
                    moving = stacks[(cols - 1 - x, y)]
                else:
                    moving = stacks[(x, rows - 1 - y)]
                # The turned half goes underneath, its stack order reversed
                folded[(x, y)] = stacks[(x, y)] + [
                    piece.turned(step.axis) for piece in reversed(moving)
                ]

        stacks = folded
        cols, rows = kept_cols, kept_rows

    return stacks[(0, 0)]


def _apparent_rotation(mirror_x: bool, mirror_y: bool) -> int:
    # A readable face always carries both mirrors or neither
    if mirror_x != mirror_y:
        raise FoldDefinitionError("Fold sequence leaves a face mirrored")
    return 180 if mirror_x else 0


def _reading_faces(grid: Grid, fold_steps: Sequence[FoldStep]) -> List[_Face]:
    """All 2 * cells faces of the folded booklet in reading order."""
    leaves = _fold(grid, fold_steps)
    spine = fold_steps[-1].axis

    # Vertical spine ends up on the right of the kept half: turn the booklet
    # in the plane so it binds on the left. A horizontal spine is already on top.
    booklet_turn = 180 if spine is FoldAxis.VERTICAL else 0

    def seen_from_below(mirror_x: bool, mirror_y: bool) -> Tuple[bool, bool]:
        # Looking at the underside means turning the leaf about the spine
        if spine is FoldAxis.VERTICAL:
            return not mirror_x, mirror_y
        return mirror_x, not mirror_y

    faces = []
    for piece in leaves:
        front_view = (piece.mirror_x, piece.mirror_y)
        back_view = (not piece.mirror_x, piece.mirror_y)  # duplex column mirror

        if piece.front_up:
            upper = (Side.FRONT, piece.cell, front_view)
            lower = (Side.BACK, grid.mirrored(piece.cell), seen_from_below(*back_view))
        else:
            upper = (Side.BACK, grid.mirrored(piece.cell), back_view)
            lower = (Side.FRONT, piece.cell, seen_from_below(*front_view))

        for side, cell, view in (upper, lower):
            rotation = (_apparent_rotation(*view) + booklet_turn) % 360
            faces.append(_Face(side, cell, rotation))

    return faces


def derive_permutation(
    grid: Grid, fold_steps: Sequence[FoldStep], duplex: bool = True
) -> CellTable:
    """
    Derive the cell table for a fold sequence.

    Args:
        grid: Cells per sheet side
        fold_steps: Folds in the order they are made
        duplex: When False, only the front is printed and its cells are
            numbered 1..cells in reading order; the back table is empty.

    Returns:
        CellTable with reading positions and print rotations

    Raises:
        InvalidGridError: cell count does not match the number of folds
        UnsupportedAxisSequenceError: a fold cannot bisect the sheet
    """
    front: Dict[Cell, Placement] = {}
    back: Dict[Cell, Placement] = {}

    position = 0
    for face in _reading_faces(grid, fold_steps):
        if not duplex and face.side is Side.BACK:
            continue
        position += 1
        target = front if face.side is Side.FRONT else back
        target[face.cell] = Placement(position, face.rotation_deg)

    return CellTable(grid=grid, front=front, back=back)


def read_booklet(
    grid: Grid,
    fold_steps: Sequence[FoldStep],
    front: Mapping[Cell, Placement],
    back: Optional[Mapping[Cell, Placement]] = None,
) -> List[Tuple[Optional[int], int]]:
    """
    Fold a printed sheet and page through the resulting booklet.

    ``front`` and ``back`` give, per printed cell, the label printed there and
    the rotation it was printed with. Returns one ``(label, rotation)`` pair
    per booklet page in reading order, where ``rotation`` is how the content
    appears to the reader (0 is upright) and ``label`` is None for a face that
    carries nothing.
    """
    back = back or {}
    pages = []
    for face in _reading_faces(grid, fold_steps):
        printed = (front if face.side is Side.FRONT else back).get(face.cell)
        if printed is None:
            pages.append((None, 0))
        else:
            pages.append(
                (
                    printed.reading_position,
                    (printed.rotation_deg + face.rotation_deg) % 360,
                )
            )
    return pages
