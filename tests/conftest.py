import io
import sys
from pathlib import Path

import pytest
from pypdf import PdfWriter

# Add src to sys.path so we can import minibooklet
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

# A7 portrait page in points
A7_WIDTH_PT = 209.76
A7_HEIGHT_PT = 297.64


def build_pdf(page_count: int, width: float = A7_WIDTH_PT, height: float = A7_HEIGHT_PT) -> bytes:
    """PDF bytes with ``page_count`` blank pages."""
    writer = PdfWriter()
    for _ in range(page_count):
        writer.add_blank_page(width=width, height=height)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


# Common test fixtures
@pytest.fixture
def make_pdf():
    """Factory for source PDF bytes."""
    return build_pdf


@pytest.fixture
def pdf_file(tmp_path: Path):
    """A 20 page source PDF on disk."""
    path = tmp_path / "story.pdf"
    path.write_bytes(build_pdf(20))
    return path
