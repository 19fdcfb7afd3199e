# minibooklet/scripts/generate_test_pdf.py
"""
Write a PDF of large page numbers for proof printing a booklet.
Each page shows its number and an arrow pointing up, so a folded proof shows
at a glance whether pages are in order and upright.

Usage: python scripts/generate_test_pdf.py [PAGES] [OUTPUT] [--landscape]
"""

import argparse
import logging

import fitz

logger = logging.getLogger(__name__)

# A7 in points
A7_PORTRAIT = fitz.Rect(0, 0, 209.76, 297.64)


def generate(page_count: int, output_path: str, landscape: bool = False):
    rect = A7_PORTRAIT
    if landscape:
        rect = fitz.Rect(0, 0, rect.height, rect.width)

    doc = fitz.open()
    for number in range(1, page_count + 1):
        page = doc.new_page(width=rect.width, height=rect.height)
        page.draw_rect(page.rect + (6, 6, -6, -6), color=(0.7, 0.7, 0.7), width=1)

        fontsize = min(rect.width, rect.height) / 3
        text_rect = fitz.Rect(0, rect.height / 2 - fontsize, rect.width, rect.height)
        page.insert_textbox(
            text_rect, str(number), fontsize=fontsize, fontname="helv", align=1
        )

        # Upward arrow near the top edge
        x = rect.width / 2
        page.draw_line((x, 50), (x, 20), color=(0.8, 0, 0), width=2)
        page.draw_polyline(
            [(x - 8, 30), (x, 20), (x + 8, 30)], color=(0.8, 0, 0), width=2
        )

    doc.save(output_path)
    doc.close()
    logger.info("Wrote %d pages to %s", page_count, output_path)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("pages", nargs="?", type=int, default=16)
    parser.add_argument("output", nargs="?", default="numbered_pages.pdf")
    parser.add_argument("--landscape", action="store_true")
    args = parser.parse_args()

    if args.pages < 1:
        parser.error("PAGES must be at least 1")

    generate(args.pages, args.output, args.landscape)


if __name__ == "__main__":
    main()
