# minibooklet/src/minibooklet/logic/booklet_worker.py

import logging

from PyQt6.QtCore import QObject, pyqtSignal
from pypdf.errors import PyPdfError

from .booklet_formats import BookletOptions
from .booklet_processor import BookletProcessor
from .errors import BookletError

logger = logging.getLogger(__name__)


class BookletWorker(QObject):
    """
    A worker object to perform PDF processing (loading, preview generation
    or saving) on a separate thread.
    """

    processing_finished = pyqtSignal(object)  # processor, preview bytes or True
    processing_failed = pyqtSignal(str)  # error message
    progress_updated = pyqtSignal(int, str)  # percentage and message

    def __init__(
        self,
        pdf_path: str = None,
        processor: BookletProcessor = None,
        output_path: str = None,
        options: BookletOptions = None,
    ):
        super().__init__()

        # Loading: a path and the options to open it with
        self.pdf_path = pdf_path
        self.options = options

        # Preview and saving: an already loaded processor
        self.processor = processor
        self.output_path = output_path

    def run(self):
        """
        Loads the PDF, builds a preview, OR saves the booklet.
        This method runs on the worker thread.
        """
        if self.pdf_path and not self.processor:
            self._run_load_pdf()
        elif self.processor and self.output_path:
            self._run_save_booklet()
        elif self.processor:
            self._run_build_preview()
        else:
            self.processing_failed.emit(
                "Worker initialized with insufficient parameters."
            )

    def _run_load_pdf(self):
        self.progress_updated.emit(0, "Reading PDF...")
        try:
            processor = BookletProcessor(self.pdf_path, self.options)
        except BookletError as e:
            logger.exception("Loading %s failed", self.pdf_path)
            self.processing_failed.emit(f"Error processing PDF: {e}")
            return
        except Exception as e:
            logger.exception("Unexpected error loading %s", self.pdf_path)
            self.processing_failed.emit(f"Critical error while loading: {e}")
            return

        self.progress_updated.emit(
            100,
            f"Loaded {processor.original_page_count} pages, "
            f"{processor.get_sheet_count()} sheets to print.",
        )
        self.processing_finished.emit(processor)

    def _run_build_preview(self):
        try:
            data = self.processor.build_booklet(
                progress_callback=self.progress_updated.emit
            )
        except (BookletError, PyPdfError, ValueError) as e:
            logger.exception("Building preview failed")
            self.processing_failed.emit(f"Error building preview: {e}")
            return
        except Exception as e:
            logger.exception("Unexpected error building preview")
            self.processing_failed.emit(f"Critical error while building preview: {e}")
            return

        self.progress_updated.emit(100, "Preview ready.")
        self.processing_finished.emit(data)

    def _run_save_booklet(self):
        try:
            success, error_message = self.processor.save_booklet(
                self.output_path,
                progress_callback=self.progress_updated.emit,
            )
        except Exception as e:
            logger.exception("Unexpected error saving %s", self.output_path)
            self.processing_failed.emit(f"Critical error during saving: {e}")
            return

        if success:
            self.processing_finished.emit(True)
        else:
            self.processing_failed.emit(error_message or "Unknown save error")
