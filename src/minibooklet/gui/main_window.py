# minibooklet/src/minibooklet/gui/main_window.py
import logging
import os

import fitz  # PyMuPDF for metadata only
from PyQt6.QtWidgets import (
    QApplication,
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QStatusBar,
    QLabel,
    QFileDialog,
    QProgressBar,
    QFrame,
    QMessageBox,
)
from PyQt6.QtGui import QAction
from PyQt6.QtCore import QSettings, QByteArray, Qt, QThread

from ..logic.booklet_formats import DEFAULT_SUFFIX, BookletOptions
from ..logic.booklet_processor import BookletProcessor
from ..logic.booklet_worker import BookletWorker
from ..logic.errors import BookletError

from .control_widget import ControlWidget
from .general_options_widget import GeneralOptionsWidget
from .preview_viewer_widget import PreviewViewerWidget

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Mini Booklet")

        # PDF state
        self.current_pdf_path = None
        self.booklet_processor = None
        self.current_side = 0
        self._is_pdf_open = False
        self.output_path = None

        # Settings
        # Organization and application names are registered in app.main
        self.settings = QSettings()
        self.load_settings()

        # Threads
        self.processing_thread = None
        self.processing_worker = None
        self.preview_thread = None
        self.preview_worker = None
        self.saving_thread = None
        self.saving_worker = None

        self._init_ui()

    # ---------------- Settings ----------------
    def load_settings(self):
        if self.settings.contains("window/geometry"):
            self.restoreGeometry(self.settings.value("window/geometry", QByteArray()))
        else:
            self.setGeometry(100, 100, 1200, 800)

    def _load_options_settings(self) -> BookletOptions:
        try:
            return BookletOptions.from_values(
                booklet_format=self.settings.value("options/format", "a7", type=str),
                orientation=self.settings.value(
                    "options/orientation", "portrait", type=str
                ),
                page_selection="",
                suffix=self.settings.value("options/suffix", DEFAULT_SUFFIX, type=str),
            )
        except BookletError:
            logger.warning("Ignoring invalid stored options")
            return BookletOptions()

    def save_options_settings(self):
        # The page selection belongs to one document and is not stored
        options = self.general_options_widget.get_options()
        self.settings.setValue("options/format", options.booklet_format.value)
        self.settings.setValue("options/orientation", options.orientation.value)
        self.settings.setValue("options/suffix", options.suffix)

    def closeEvent(self, event):
        self.settings.setValue("window/geometry", self.saveGeometry())
        self.save_options_settings()
        self.preview_viewer_widget.clear()
        event.accept()

    # ---------------- UI Initialization ----------------
    def _init_ui(self):
        self._create_menu_bar()
        self._create_status_bar()
        self._create_main_layout()

        self.general_options_widget.set_options(self._load_options_settings())
        self.general_options_widget.settings_changed.connect(self._on_options_changed)

        self.general_options_widget.setEnabled(False)
        self._update_menu_state()
        self._update_control_widget_state()

    # ---------------- Menu Bar ----------------
    def _create_menu_bar(self):
        menu_bar = self.menuBar()
        menu_bar.setStyleSheet("QMenuBar { padding: 5px 5px 5px 6px; }")

        file_menu = menu_bar.addMenu("File")

        self.open_pdf_action = QAction("Open PDF...", self)
        file_menu.addAction(self.open_pdf_action)
        self.open_pdf_action.triggered.connect(self.open_pdf_action_method)

        self.close_pdf_action = QAction("Close PDF", self)
        file_menu.addAction(self.close_pdf_action)
        self.close_pdf_action.triggered.connect(self.close_pdf_action_method)

        file_menu.addSeparator()

        self.save_pdf_action = QAction("Save PDF", self)
        file_menu.addAction(self.save_pdf_action)
        self.save_pdf_action.triggered.connect(self.save_pdf_action_method)

        self.save_as_action = QAction("Save As...", self)
        file_menu.addAction(self.save_as_action)
        self.save_as_action.triggered.connect(self.save_as_action_method)

        file_menu.addSeparator()

        self.quit_action = QAction("Quit", self)
        file_menu.addAction(self.quit_action)
        self.quit_action.triggered.connect(QApplication.instance().quit)

    # ---------------- Status Bar ----------------
    def _create_status_bar(self):
        self.statusBar = QStatusBar()
        self.setStatusBar(self.statusBar)

        self.status_message_label = QLabel("Ready.")
        self.status_message_label.setMinimumWidth(150)
        self.status_message_label.setAlignment(Qt.AlignmentFlag.AlignLeft)
        self.status_message_label.setStyleSheet("padding: 2px 2px 2px 6px;")
        self.statusBar.addWidget(self.status_message_label)

        self.status_separator = QFrame()
        self.status_separator.setFrameShape(QFrame.Shape.VLine)
        self.status_separator.setFrameShadow(QFrame.Shadow.Sunken)
        self.status_separator.setStyleSheet("color: #4040ff;")
        self.status_separator.setVisible(False)
        self.statusBar.addWidget(self.status_separator)

        self.pdf_info_label = QLabel("")
        self.pdf_info_label.setAlignment(Qt.AlignmentFlag.AlignLeft)
        self.pdf_info_label.setStyleSheet("padding-left: 10px;")
        self.statusBar.addWidget(self.pdf_info_label, 1)

        self.progress_bar = QProgressBar()
        self.progress_bar.setFixedWidth(200)
        self.progress_bar.setVisible(False)
        self.statusBar.addPermanentWidget(self.progress_bar)

    # ---------------- Main Layout ----------------
    def _create_main_layout(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QHBoxLayout(central_widget)
        main_layout.setContentsMargins(10, 0, 10, 0)
        main_layout.setSpacing(0)

        # Left side: options
        self.general_options_widget = GeneralOptionsWidget()
        self.general_options_widget.setFixedWidth(340)

        # Right side: preview + controls
        preview_layout = QVBoxLayout()
        preview_layout.setContentsMargins(10, 10, 10, 10)
        preview_layout.setSpacing(10)

        self.preview_viewer_widget = PreviewViewerWidget()
        preview_layout.addWidget(self.preview_viewer_widget, 1)

        self.control_widget = ControlWidget()
        preview_layout.addWidget(self.control_widget)

        navigation = self.control_widget.navigation_widget
        navigation.first_page_requested.connect(self._go_first_page)
        navigation.prev_page_requested.connect(self._go_prev_page)
        navigation.next_page_requested.connect(self._go_next_page)
        navigation.last_page_requested.connect(self._go_last_page)

        self.control_widget.update_preview_requested.connect(
            self.update_preview_action_method
        )
        self.control_widget.save_pdf_requested.connect(self.save_pdf_action_method)

        right_widget = QWidget()
        right_widget.setLayout(preview_layout)

        main_layout.addWidget(self.general_options_widget)
        main_layout.addWidget(right_widget, 1)

    # ---------------- Helpers ----------------
    def _cleanup_thread(self, thread_attr: str, worker_attr: str):
        """Generic thread cleanup helper."""
        thread = getattr(self, thread_attr, None)
        if thread and thread.isRunning():
            thread.quit()
            thread.wait()
        setattr(self, thread_attr, None)
        setattr(self, worker_attr, None)

    def _start_worker(self, thread_attr: str, worker_attr: str, worker, on_finished):
        """Run a BookletWorker on its own QThread, the way every job is run."""
        self._cleanup_thread(thread_attr, worker_attr)

        thread = QThread()
        worker.moveToThread(thread)

        thread.started.connect(worker.run)
        worker.progress_updated.connect(self.update_progress_bar)
        worker.processing_finished.connect(on_finished)
        worker.processing_failed.connect(self.processing_failed_handler)

        worker.processing_finished.connect(thread.quit)
        worker.processing_failed.connect(thread.quit)
        thread.finished.connect(worker.deleteLater)
        thread.finished.connect(thread.deleteLater)
        thread.finished.connect(lambda: setattr(self, thread_attr, None))
        thread.finished.connect(lambda: setattr(self, worker_attr, None))

        setattr(self, thread_attr, thread)
        setattr(self, worker_attr, worker)
        thread.start()

    def _set_busy(self, busy: bool, message: str = ""):
        if message:
            self.status_message_label.setText(message)
        self.progress_bar.setVisible(busy)
        if busy:
            self.progress_bar.setValue(0)
        self.menuBar().setEnabled(not busy)
        self.control_widget.setEnabled(not busy)
        self.general_options_widget.setEnabled(not busy and self._is_pdf_open)

    def _reset_pdf_state(self, message: str = "Ready."):
        """Reset all PDF-related state and UI."""
        self.current_pdf_path = None
        self._is_pdf_open = False
        self.booklet_processor = None
        self.current_side = 0
        self.output_path = None
        self.preview_viewer_widget.clear()
        self._set_busy(False)
        self._update_menu_state()
        self._update_control_widget_state()
        self._update_pdf_info()
        self.status_message_label.setText(message)

    def _side_names(self):
        """Label of every printed side, in output order."""
        names = []
        if not self.booklet_processor:
            return names
        for number, sheet in enumerate(self.booklet_processor.plan.sheets, start=1):
            names.append(f"sheet {number}, front")
            if not sheet.is_front_only:
                names.append(f"sheet {number}, back")
        return names

    def _update_pdf_info(self):
        if not self.current_pdf_path or not self.booklet_processor:
            self.pdf_info_label.setText("No PDF loaded.")
            self.status_separator.setVisible(False)
            return

        title = "Untitled"
        try:
            with fitz.open(self.current_pdf_path) as doc:
                meta = doc.metadata
                if meta and meta.get("title"):
                    title = meta["title"]
        except (fitz.FileDataError, RuntimeError, OSError):
            logger.warning("Could not read metadata of %s", self.current_pdf_path)

        processor = self.booklet_processor
        width_mm, height_mm = processor.get_original_page_size_mm()
        self.pdf_info_label.setText(
            f"Title: {title} | Pages: {processor.original_page_count} "
            f"({processor.get_effective_page_count()} selected) | "
            f"Size: {width_mm:.2f} x {height_mm:.2f} mm | "
            f"{processor.fold_layout.name}: {processor.get_sheet_count()} sheets"
        )
        self.status_separator.setVisible(True)

    # ---------------- Menu + Control State ----------------
    def _update_menu_state(self):
        self.close_pdf_action.setEnabled(self._is_pdf_open)
        self.save_pdf_action.setEnabled(self._is_pdf_open)
        self.save_as_action.setEnabled(self._is_pdf_open)

    def _update_control_widget_state(self):
        total_sides = self.preview_viewer_widget.page_count()
        names = self._side_names()
        side_name = names[self.current_side] if self.current_side < len(names) else ""
        self.control_widget.update_state(
            self.current_side + 1 if total_sides else 0,
            total_sides,
            self._is_pdf_open,
            side_name,
        )

    # ---------------- Navigation ----------------
    def _show_side(self, side_index: int):
        self.current_side = side_index
        self.preview_viewer_widget.render_page(side_index)
        self._update_control_widget_state()

    def _go_first_page(self):
        self._show_side(0)

    def _go_prev_page(self):
        if self.current_side > 0:
            self._show_side(self.current_side - 1)

    def _go_next_page(self):
        if self.current_side < self.preview_viewer_widget.page_count() - 1:
            self._show_side(self.current_side + 1)

    def _go_last_page(self):
        if self.preview_viewer_widget.page_count():
            self._show_side(self.preview_viewer_widget.page_count() - 1)

    # ---------------- PDF Open/Close ----------------
    def open_pdf_action_method(self):
        last_dir = self.settings.value("last_dir", "")
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open PDF", last_dir, "PDF Files (*.pdf)"
        )
        if file_path:
            self.settings.setValue("last_dir", os.path.dirname(file_path))
            self._reset_pdf_state()
            self.current_pdf_path = file_path
            self.start_processing_thread()
        else:
            self.status_message_label.setText("Open cancelled.")

    def close_pdf_action_method(self):
        self._reset_pdf_state("Ready.")

    def start_processing_thread(self):
        self._set_busy(True, "Processing...")
        self.status_separator.setVisible(False)

        # A new document starts with all of its pages
        options = self.general_options_widget.get_options()
        options = BookletOptions(
            booklet_format=options.booklet_format,
            orientation=options.orientation,
            suffix=options.suffix,
        )
        self.general_options_widget.set_options(options)

        worker = BookletWorker(pdf_path=self.current_pdf_path, options=options)
        self._start_worker(
            "processing_thread",
            "processing_worker",
            worker,
            self.processing_finished_handler,
        )

    # ---------------- Options ----------------
    def _on_options_changed(self):
        if not self.booklet_processor or not self._is_pdf_open:
            return

        options = self.general_options_widget.get_options()
        try:
            self.booklet_processor.apply_options(options)
        except BookletError as e:
            QMessageBox.warning(self, "Page Selection", str(e))
            # Show the options that are still in effect
            self.general_options_widget.set_options(self.booklet_processor.options)
            return

        self.save_options_settings()
        self._update_pdf_info()
        self.update_preview_action_method()

    # ---------------- Preview ----------------
    def update_preview_action_method(self):
        if not self.booklet_processor:
            return
        self._set_busy(True, "Generating preview...")
        worker = BookletWorker(processor=self.booklet_processor)
        self._start_worker(
            "preview_thread", "preview_worker", worker, self._on_preview_finished
        )

    def _on_preview_finished(self, pdf_bytes: bytes):
        self._set_busy(False)
        self.preview_viewer_widget.set_document(pdf_bytes)
        self.current_side = 0
        self._update_control_widget_state()
        self.status_message_label.setText(
            f"Preview ready: {self.booklet_processor.get_output_page_count()} sides "
            f"on {self.booklet_processor.get_sheet_count()} sheets."
        )

    # ---------------- Save PDF ----------------
    def save_pdf_action_method(self):
        """Triggered by File > Save PDF or the control widget."""
        if not self.booklet_processor or not self._is_pdf_open:
            QMessageBox.warning(self, "No PDF", "No PDF is currently open.")
            return

        if not self.output_path:
            self.save_as_action_method()
            return

        if os.path.exists(self.output_path):
            reply = QMessageBox.question(
                self,
                "Overwrite File?",
                f"The file '{os.path.basename(self.output_path)}' already exists.\n"
                "Do you want to overwrite it?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
                QMessageBox.StandardButton.No,
            )
            if reply != QMessageBox.StandardButton.Yes:
                self.status_message_label.setText("Save cancelled.")
                return

        self._perform_save(self.output_path)

    def save_as_action_method(self):
        """Triggered by File > Save As..."""
        if not self.booklet_processor:
            QMessageBox.warning(self, "No PDF", "No PDF is currently open.")
            return

        last_dir = self.settings.value("last_dir", "")
        default_path = os.path.join(
            last_dir, self.booklet_processor.suggested_output_name()
        )

        file_path, _ = QFileDialog.getSaveFileName(
            self, "Save PDF As", default_path, "PDF Files (*.pdf)"
        )

        if file_path:
            self.settings.setValue("last_dir", os.path.dirname(file_path))
            self.output_path = file_path
            self._perform_save(file_path)
        else:
            self.status_message_label.setText("Save cancelled.")

    def _perform_save(self, file_path: str):
        """Save the booklet in a worker thread."""
        self._set_busy(True, "Saving...")
        worker = BookletWorker(processor=self.booklet_processor, output_path=file_path)
        self._start_worker("saving_thread", "saving_worker", worker, self._on_save_finished)

    def _on_save_finished(self, _result):
        self._set_busy(False, f"Saved {os.path.basename(self.output_path)}.")
        QMessageBox.information(
            self,
            "Booklet Saved",
            "\n".join(
                f"{number}. {step}"
                for number, step in enumerate(
                    self.booklet_processor.get_folding_instructions(), start=1
                )
            ),
        )

    # ---------------- Progress + Handlers ----------------
    def update_progress_bar(self, value: int, message: str = ""):
        """Update the progress bar and status message."""
        self.progress_bar.setVisible(True)
        self.progress_bar.setValue(value)
        if message:
            self.status_message_label.setText(message)

    def processing_finished_handler(self, processor: BookletProcessor):
        """Called when the worker finishes loading the opened PDF."""
        self.booklet_processor = processor
        self._is_pdf_open = True

        self._set_busy(False, "PDF loaded successfully.")
        self._update_pdf_info()
        self._update_menu_state()
        self.update_preview_action_method()

    def processing_failed_handler(self, error_message: str):
        """Called if a worker fails."""
        if self._is_pdf_open:
            # Loading succeeded earlier; keep the document open
            self._set_busy(False, error_message)
            QMessageBox.warning(self, "Mini Booklet", error_message)
        else:
            self._reset_pdf_state(f"Processing failed: {error_message}")
