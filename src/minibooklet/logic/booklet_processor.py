# minibooklet/src/minibooklet/logic/booklet_processor.py
"""
Coordinator for mini booklet generation.
Delegates loading to PDFHandler, page selection to the page selector, layout
to BookletLayout and output to PDFSaver.
"""

import logging
import os
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from .booklet_formats import BookletOptions, FoldLayout, folding_instructions
from .booklet_layout import BookletLayout, ImpositionPlan
from .errors import EmptyDocumentError
from .page_selector import resolve_pages
from .pdf_handler import PDFHandler
from .pdf_saver import PDFSaver
from .unit_converter import points_to_mm

logger = logging.getLogger(__name__)


class BookletProcessor:
    """
    Thin coordinator that holds one source document and the current options.

    Responsibilities:
    - Load the source PDF and reject empty documents
    - Resolve the page selection into effective pages
    - Keep the imposition plan in sync with the options
    - Produce output bytes and save them
    """

    def __init__(self, source: Union[str, Path, bytes], options: Optional[BookletOptions] = None):
        """
        Args:
            source: Path to the source PDF, or its bytes
            options: Initial options, defaults when omitted

        Raises:
            LoadError: the source cannot be read
            EmptyDocumentError: the source has no pages
        """
        if isinstance(source, bytes):
            self.pdf_path = None
            data = source
        else:
            self.pdf_path = str(source)
            data = PDFHandler.read_file(source)

        self.reader = PDFHandler.load_document(data)
        self.original_page_count = PDFHandler.get_page_count(self.reader)
        if self.original_page_count == 0:
            raise EmptyDocumentError("The PDF has no pages")

        self.options = options or BookletOptions()
        self.page_indices: List[int] = []
        self.layout: Optional[BookletLayout] = None
        self.apply_options(self.options)

    # ==================== Options ====================

    def apply_options(self, options: BookletOptions) -> ImpositionPlan:
        """
        Switch to new options and regenerate the plan.

        Raises:
            EmptySelectionError: the page selection names no valid page
        """
        page_indices = resolve_pages(options.page_selection, self.original_page_count)

        layout = BookletLayout(len(page_indices))
        imposition_plan = layout.generate(options.booklet_format, options.orientation)

        # Only commit once everything above succeeded
        self.options = options
        self.page_indices = page_indices
        self.layout = layout

        logger.info(
            "%s: %d pages on %d sheets",
            imposition_plan.layout.name,
            len(page_indices),
            len(imposition_plan),
        )
        return imposition_plan

    @property
    def plan(self) -> ImpositionPlan:
        return self.layout.active_plan

    @property
    def fold_layout(self) -> FoldLayout:
        return self.plan.layout

    # ==================== Output ====================

    def build_booklet(
        self, progress_callback: Optional[Callable[[int, str], None]] = None
    ) -> bytes:
        """Render the current plan into PDF bytes."""
        return PDFSaver.build_booklet(
            self.reader, self.page_indices, self.plan, progress_callback
        )

    def save_booklet(
        self,
        output_path: str,
        progress_callback: Optional[Callable[[int, str], None]] = None,
    ) -> Tuple[bool, Optional[str]]:
        """
        Save the imposed PDF.

        Returns:
            (success: bool, error_message: Optional[str])
        """
        return PDFSaver.save_booklet(
            self.reader,
            output_path,
            self.page_indices,
            self.plan,
            progress_callback=progress_callback,
        )

    def suggested_output_name(self) -> str:
        """File name for the output: source name plus the options suffix."""
        if self.pdf_path:
            base_name = os.path.splitext(os.path.basename(self.pdf_path))[0]
        else:
            base_name = "booklet"
        return f"{base_name}{self.options.suffix}.pdf"

    # ==================== Accessors ====================

    def get_effective_page_count(self) -> int:
        return len(self.page_indices)

    def get_sheet_count(self) -> int:
        """Get the number of physical sheets to print."""
        return self.layout.get_sheet_count()

    def get_output_page_count(self) -> int:
        """Get the number of printed sides in the output PDF."""
        return self.layout.get_output_page_count()

    def get_folding_instructions(self) -> List[str]:
        return folding_instructions(self.fold_layout)

    def get_original_page_size_mm(self) -> Tuple[float, float]:
        """
        Get the size of the first source page in millimeters.

        Returns:
            (width_mm, height_mm)
        """
        width_pt, height_pt = PDFHandler.intrinsic_size(self.reader.pages[0])
        return round(points_to_mm(width_pt), 2), round(points_to_mm(height_pt), 2)
