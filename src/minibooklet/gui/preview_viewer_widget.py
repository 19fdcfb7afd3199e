# minibooklet/src/minibooklet/gui/preview_viewer_widget.py

from PyQt6.QtWidgets import QWidget, QLabel, QScrollArea, QVBoxLayout, QSizePolicy
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QPixmap, QResizeEvent

from ..logic.pdf_renderer import PDFRenderer

PLACEHOLDER_TEXT = "Open a PDF to lay it out as a folded A6 or A7 booklet."


class PreviewViewerWidget(QWidget):
    """
    Displays one printed side of the generated booklet, scaled to the viewport.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.renderer = None
        self.current_page_index = 0
        self.dpi = 96
        self._current_pixmap = QPixmap()

        self.image_label = QLabel()
        self.image_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.image_label.setSizePolicy(
            QSizePolicy.Policy.Ignored, QSizePolicy.Policy.Ignored
        )

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setWidget(self.image_label)

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.addWidget(self.scroll_area)

        self._update_pixmap_display()

    def set_document(self, pdf_bytes: bytes):
        """Replace the previewed output and show its first side."""
        self.clear()
        self.renderer = PDFRenderer(pdf_bytes)
        self.render_page(0)

    def clear(self):
        if self.renderer:
            self.renderer.close()
            self.renderer = None
        self._current_pixmap = QPixmap()
        self.image_label.clear()
        self._update_pixmap_display()

    def page_count(self) -> int:
        return self.renderer.page_count if self.renderer else 0

    def render_page(self, page_index: int):
        self.current_page_index = page_index
        if self.renderer:
            self._current_pixmap = self.renderer.render_page(page_index, self.dpi)
        else:
            self._current_pixmap = QPixmap()
        self._update_pixmap_display()

    def _update_pixmap_display(self):
        if self._current_pixmap.isNull():
            self.image_label.setText(
                "Nothing to preview." if self.renderer else PLACEHOLDER_TEXT
            )
            return

        self.image_label.setText("")
        viewport_size = self.scroll_area.viewport().size()
        self.image_label.setPixmap(
            PDFRenderer.scale_to_fit(
                self._current_pixmap, viewport_size.width(), viewport_size.height()
            )
        )

    def resizeEvent(self, event: QResizeEvent):
        super().resizeEvent(event)
        self._update_pixmap_display()
