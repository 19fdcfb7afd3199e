# minibooklet/src/minibooklet/gui/control_widget.py
from PyQt6.QtWidgets import QWidget, QHBoxLayout, QPushButton, QSizePolicy
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QColor, QPalette

from .navigation_widget import NavigationWidget


class ControlWidget(QWidget):
    """
    Navigation on the left, Update Preview and Save PDF on the right.
    """

    update_preview_requested = pyqtSignal()
    save_pdf_requested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setup_ui()

    def setup_ui(self):
        main_layout = QHBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(10)

        self.navigation_widget = NavigationWidget()
        main_layout.addWidget(self.navigation_widget, 0, Qt.AlignmentFlag.AlignLeft)
        main_layout.addStretch(1)

        self.update_button = self._make_button("Update Preview", QColor(0, 51, 153))
        self.save_button = self._make_button("Save PDF", QColor(153, 0, 0))

        main_layout.addWidget(self.update_button)
        main_layout.addWidget(self.save_button)

        self.update_button.clicked.connect(self.update_preview_requested.emit)
        self.save_button.clicked.connect(self.save_pdf_requested.emit)

    @staticmethod
    def _make_button(text: str, color: QColor) -> QPushButton:
        button = QPushButton(text)
        button.setFixedHeight(28)
        button.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)

        # Dark background for contrast with white text
        palette = button.palette()
        palette.setColor(QPalette.ColorRole.Button, color)
        palette.setColor(QPalette.ColorRole.ButtonText, QColor(255, 255, 255))
        button.setPalette(palette)
        button.setAutoFillBackground(True)
        return button

    def update_state(
        self, current_side: int, total_sides: int, has_pdf: bool, side_name: str = ""
    ):
        self.update_button.setEnabled(has_pdf)
        self.save_button.setEnabled(has_pdf)
        self.navigation_widget.update_state(current_side, total_sides, side_name)
