# minibooklet/src/minibooklet/gui/general_options_widget.py

from PyQt6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QGroupBox,
    QComboBox,
    QLabel,
    QLineEdit,
)
from PyQt6.QtCore import pyqtSignal

from ..logic.booklet_formats import (
    DEFAULT_SUFFIX,
    BookletFormat,
    BookletOptions,
    Orientation,
    folding_instructions,
)


class GeneralOptionsWidget(QWidget):
    settings_changed = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        # --- Booklet Format Group ---
        self.format_group = QGroupBox("Booklet Format")
        format_layout = QVBoxLayout(self.format_group)

        self.format_combo = QComboBox()
        self.format_combo.addItem("A7 (3 folds, 16 pages per sheet)", BookletFormat.A7.value)
        self.format_combo.addItem("A6 (2 folds, 8 pages per sheet)", BookletFormat.A6.value)
        format_layout.addWidget(self.format_combo)

        layout.addWidget(self.format_group)

        # --- Page Orientation Group ---
        self.orientation_group = QGroupBox("Page Orientation")
        orientation_layout = QVBoxLayout(self.orientation_group)

        self.orientation_combo = QComboBox()
        self.orientation_combo.addItem("Portrait", Orientation.PORTRAIT.value)
        self.orientation_combo.addItem("Landscape", Orientation.LANDSCAPE.value)
        orientation_layout.addWidget(self.orientation_combo)

        layout.addWidget(self.orientation_group)

        # --- Page Selection Group ---
        self.selection_group = QGroupBox("Page Selection")
        selection_layout = QVBoxLayout(self.selection_group)

        self.page_selection_input = QLineEdit()
        self.page_selection_input.setPlaceholderText("All pages, e.g. 1-4, 7, 12-9")
        self.page_selection_input.setClearButtonEnabled(True)
        selection_layout.addWidget(self.page_selection_input)

        layout.addWidget(self.selection_group)

        # --- Output Group ---
        self.output_group = QGroupBox("Output")
        output_layout = QVBoxLayout(self.output_group)

        output_layout.addWidget(QLabel("Filename suffix:"))
        self.suffix_input = QLineEdit(DEFAULT_SUFFIX)
        output_layout.addWidget(self.suffix_input)

        layout.addWidget(self.output_group)

        # --- Folding Instructions Group ---
        self.instructions_group = QGroupBox("Printing and Folding")
        instructions_layout = QVBoxLayout(self.instructions_group)

        self.instructions_label = QLabel()
        self.instructions_label.setWordWrap(True)
        instructions_layout.addWidget(self.instructions_label)

        layout.addWidget(self.instructions_group)
        layout.addStretch()

        # Format and orientation apply immediately, text fields when edited
        self.format_combo.currentIndexChanged.connect(self._on_layout_changed)
        self.orientation_combo.currentIndexChanged.connect(self._on_layout_changed)
        self.page_selection_input.editingFinished.connect(self.settings_changed.emit)
        self.suffix_input.editingFinished.connect(self.settings_changed.emit)

        self._update_format_ui()

    # ---------------------------
    # Public API
    # ---------------------------

    def get_options(self) -> BookletOptions:
        return BookletOptions(
            booklet_format=BookletFormat(self.format_combo.currentData()),
            orientation=Orientation(self.orientation_combo.currentData()),
            page_selection=self.page_selection_input.text().strip(),
            suffix=self.suffix_input.text().strip(),
        )

    def set_options(self, options: BookletOptions):
        """Show options without emitting settings_changed."""
        self.blockSignals(True)
        try:
            self.format_combo.setCurrentIndex(
                self.format_combo.findData(options.booklet_format.value)
            )
            self.orientation_combo.setCurrentIndex(
                self.orientation_combo.findData(options.orientation.value)
            )
            self.page_selection_input.setText(options.page_selection)
            self.suffix_input.setText(options.suffix)
        finally:
            self.blockSignals(False)
        self._update_format_ui()

    # ---------------------------
    # Internals
    # ---------------------------

    def _on_layout_changed(self):
        self._update_format_ui()
        self.settings_changed.emit()

    def _update_format_ui(self):
        options = self.get_options()
        # A6 has a single fold sequence
        self.orientation_combo.setEnabled(options.booklet_format is BookletFormat.A7)

        steps = folding_instructions(options.layout)
        self.instructions_label.setText(
            "\n".join(f"{number}. {step}" for number, step in enumerate(steps, start=1))
        )
