# minibooklet/src/minibooklet/logic/pdf_handler.py
import io
import logging
from pathlib import Path
from typing import Tuple, Union

from pypdf import PageObject, PdfReader
from pypdf.errors import PyPdfError

from .errors import LoadError

logger = logging.getLogger(__name__)


class PDFHandler:
    """Handles reading source PDF files."""

    @staticmethod
    def load_document(data: bytes) -> PdfReader:
        """
        Parse PDF bytes.

        Raises:
            LoadError: the bytes are not a readable PDF
        """
        try:
            reader = PdfReader(io.BytesIO(data))
            # Owner-password-only files open with an empty user password
            if reader.is_encrypted and not reader.decrypt(""):
                raise LoadError("The PDF is password protected")
            # Parse every page box so corrupt or empty pages fail here
            for number, page in enumerate(reader.pages, start=1):
                width, height = PDFHandler.intrinsic_size(page)
                if width <= 0 or height <= 0:
                    raise LoadError(
                        f"Page {number} has an empty page box ({width:g} x {height:g} pt)"
                    )
        except (PyPdfError, ValueError, KeyError, TypeError) as e:
            raise LoadError(f"Could not read PDF: {e}") from e

        logger.debug("Loaded PDF with %d pages", len(reader.pages))
        return reader

    @staticmethod
    def read_file(file_path: Union[str, Path]) -> bytes:
        """
        Read the raw bytes of a source file.

        Raises:
            LoadError: the file cannot be opened
        """
        try:
            return Path(file_path).read_bytes()
        except OSError as e:
            raise LoadError(f"Could not open {file_path}: {e.strerror or e}") from e

    @staticmethod
    def get_page_count(reader: PdfReader) -> int:
        """Returns the number of pages in the opened PDF."""
        return len(reader.pages)

    @staticmethod
    def intrinsic_size(page: PageObject) -> Tuple[float, float]:
        """(width, height) of a page in points as it is displayed."""
        box = page.mediabox
        width, height = float(box.width), float(box.height)
        if page.rotation % 180:
            width, height = height, width
        return width, height
