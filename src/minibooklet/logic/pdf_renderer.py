# minibooklet/src/minibooklet/logic/pdf_renderer.py
"""
Preview rendering using PyMuPDF (fitz).
Renders the sheets of a generated booklet - no saving, no layout logic.
"""

import logging

import fitz
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QImage, QPixmap

logger = logging.getLogger(__name__)


class PDFRenderer:
    """
    Keeps a generated booklet document open for fast repeated rendering.
    """

    def __init__(self, pdf_bytes: bytes):
        """
        Args:
            pdf_bytes: Output PDF as produced by PDFSaver.build_booklet
        """
        self.doc = fitz.open(stream=pdf_bytes, filetype="pdf")
        self.page_count = self.doc.page_count
        logger.debug("Opened preview document with %d sides", self.page_count)

    def close(self):
        """Close the PDF document. Call this when done rendering."""
        if self.doc and not self.doc.is_closed:
            self.doc.close()

    def render_page(self, page_idx: int, dpi: int = 96) -> QPixmap:
        """
        Render one printed side.

        Args:
            page_idx: Index of the side in the output document
            dpi: Resolution for rendering

        Returns:
            QPixmap of the side, null when the index is out of range
        """
        if not 0 <= page_idx < self.page_count:
            return QPixmap()

        zoom = dpi / 72.0
        pix = self.doc.load_page(page_idx).get_pixmap(
            matrix=fitz.Matrix(zoom, zoom), alpha=False
        )
        image = QImage(
            pix.samples,
            pix.width,
            pix.height,
            pix.stride,
            QImage.Format.Format_RGB888,
        )
        # QImage does not own the samples buffer
        return QPixmap.fromImage(image.copy())

    @staticmethod
    def scale_to_fit(pixmap: QPixmap, max_width: int, max_height: int) -> QPixmap:
        """Scale a pixmap to fit within max dimensions, keeping its aspect ratio."""
        if pixmap.isNull() or max_width <= 0 or max_height <= 0:
            return pixmap
        return pixmap.scaled(
            max_width,
            max_height,
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
