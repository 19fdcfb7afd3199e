# minibooklet/scripts/show_imposition.py
"""
Print the derived cell tables of every booklet layout as grids, top row first.
Each cell reads ``page@rotation``; ``--pages N`` prints the sheets of a plan
for N pages instead.
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "src"))

from minibooklet.logic.booklet_formats import (  # noqa: E402
    A6,
    A7_LANDSCAPE,
    A7_PORTRAIT,
    folding_instructions,
    front_only_table,
    full_table,
)
from minibooklet.logic.booklet_layout import plan_layout, spine_guide  # noqa: E402
from minibooklet.logic.fold_simulator import Cell, Side  # noqa: E402

LAYOUTS = (A7_PORTRAIT, A7_LANDSCAPE, A6)


def format_grid(grid, labels):
    """Rows of ``labels[Cell]``, top row first; missing cells print as dots."""
    lines = []
    for row in reversed(range(grid.rows)):
        lines.append(
            "  ".join(
                f"{labels.get(Cell(col, row), '.'):>6}" for col in range(grid.cols)
            )
        )
    return lines


def show_tables(layout):
    print(f"== {layout.name} ({layout.grid.cols}x{layout.grid.rows}) ==")
    for title, table in (("duplex", full_table(layout)), ("front only", front_only_table(layout))):
        for side in (Side.FRONT, Side.BACK):
            entries = table.side(side)
            if not entries:
                continue
            print(f"-- {title}, {side.value}")
            labels = {
                cell: f"{p.reading_position}@{p.rotation_deg}" for cell, p in entries.items()
            }
            print("\n".join(format_grid(layout.grid, labels)))
    for number, step in enumerate(folding_instructions(layout), start=1):
        print(f"{number}. {step}")
    print()


def show_plan(layout, page_count):
    imposition_plan = plan_layout(layout, page_count)
    print(f"== {layout.name}: {page_count} pages, {len(imposition_plan)} sheets ==")
    for number, sheet in enumerate(imposition_plan.sheets, start=1):
        for side, slots in (("front", sheet.front_slots), ("back", sheet.back_slots)):
            if not slots:
                continue
            labels = {
                Cell(slot.col, slot.row): f"{slot.src_index + 1}@{slot.rotate_deg}"
                for slot in slots
            }
            print(f"-- sheet {number}, {side}")
            print("\n".join(format_grid(layout.grid, labels)))
        guide = spine_guide(sheet)
        if guide:
            print(f"   spine guide {guide.start} -> {guide.end}")
    print()


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--pages", type=int, help="show the plan for this many pages")
    args = parser.parse_args()

    for layout in LAYOUTS:
        if args.pages:
            show_plan(layout, args.pages)
        else:
            show_tables(layout)


if __name__ == "__main__":
    main()
