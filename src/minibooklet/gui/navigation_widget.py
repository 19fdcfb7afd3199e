# minibooklet/src/minibooklet/gui/navigation_widget.py
from PyQt6.QtWidgets import QWidget, QHBoxLayout, QPushButton, QLabel, QSizePolicy
from PyQt6.QtCore import Qt, pyqtSignal


class NavigationWidget(QWidget):
    """
    Buttons to step through the printed sides, and the side label.
    """

    first_page_requested = pyqtSignal()
    prev_page_requested = pyqtSignal()
    next_page_requested = pyqtSignal()
    last_page_requested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setup_ui()

    def setup_ui(self):
        main_layout = QHBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(10)

        self.first_button = QPushButton("<< First")
        self.prev_button = QPushButton("< Previous")
        self.page_label = QLabel("No PDF loaded")
        self.page_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.next_button = QPushButton("Next >")
        self.last_button = QPushButton("Last >>")

        for btn in [self.first_button, self.prev_button, self.next_button, self.last_button]:
            btn.setFixedHeight(28)
            btn.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)

        main_layout.addWidget(self.first_button)
        main_layout.addWidget(self.prev_button)
        main_layout.addWidget(self.page_label)
        main_layout.addWidget(self.next_button)
        main_layout.addWidget(self.last_button)

        self.first_button.clicked.connect(self.first_page_requested.emit)
        self.prev_button.clicked.connect(self.prev_page_requested.emit)
        self.next_button.clicked.connect(self.next_page_requested.emit)
        self.last_button.clicked.connect(self.last_page_requested.emit)

    def update_state(self, current_side: int, total_sides: int, side_name: str = ""):
        """
        Args:
            current_side: 1-based index of the shown side, 0 when nothing is shown
            total_sides: Number of printed sides in the output
            side_name: Description such as "sheet 2, back"
        """
        has_output = total_sides > 0 and current_side > 0
        if has_output:
            text = f"Side {current_side} of {total_sides}"
            if side_name:
                text += f" ({side_name})"
            self.page_label.setText(text)
        else:
            self.page_label.setText("No PDF loaded")

        self.first_button.setEnabled(has_output and current_side > 1)
        self.prev_button.setEnabled(has_output and current_side > 1)
        self.next_button.setEnabled(has_output and current_side < total_sides)
        self.last_button.setEnabled(has_output and current_side < total_sides)
