# minibooklet/src/minibooklet/logic/pdf_saver.py
"""
PDF output generation using pypdf.
Draws every slot of an imposition plan onto A4 sheets while keeping the
source pages as vector Form XObjects.
"""

import io
import logging
from typing import Callable, List, Optional, Sequence, Tuple

from pypdf import PageObject, PdfReader, PdfWriter, Transformation
from pypdf.errors import PyPdfError
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    NameObject,
)

from .booklet_layout import GuideLine, ImpositionPlan, Slot, spine_guide
from .errors import BookletError
from .pdf_handler import PDFHandler

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, str], None]

# Spine guide stroke: grey, thin, dashed
GUIDE_STYLE = "0.6 G 0.5 w [3 3] 0 d"


class PDFSaver:
    """
    Handles PDF output generation for an imposition plan.
    Always preserves vector content.
    """

    @staticmethod
    def build_booklet(
        reader: PdfReader,
        page_indices: Sequence[int],
        imposition_plan: ImpositionPlan,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> bytes:
        """
        Render an imposition plan into PDF bytes.

        Args:
            reader: Source document
            page_indices: Original page index of every effective page
            imposition_plan: Plan built for len(page_indices) pages
            progress_callback: Optional function(percent: int, message: str)

        Returns:
            The serialized output PDF
        """
        if len(page_indices) != imposition_plan.page_count:
            raise ValueError(
                f"Plan covers {imposition_plan.page_count} pages, "
                f"got {len(page_indices)} page indices"
            )

        layout = imposition_plan.layout
        sheet_width, sheet_height = layout.sheet_size_pt
        panel_width = sheet_width / layout.grid.cols
        panel_height = sheet_height / layout.grid.rows

        writer = PdfWriter()
        total_sides = imposition_plan.output_page_count()
        done = 0

        for sheet_number, sheet in enumerate(imposition_plan.sheets, start=1):
            sides: List[Tuple[str, Tuple[Slot, ...], Optional[GuideLine]]] = [
                ("front", sheet.front_slots, spine_guide(sheet))
            ]
            # A sheet without back slots is printed single-sided
            if sheet.back_slots:
                sides.append(("back", sheet.back_slots, None))

            for side_name, slots, guide in sides:
                output_page = PageObject.create_blank_page(
                    width=sheet_width, height=sheet_height
                )
                content: List[bytes] = []

                for slot in slots:
                    source_page = reader.pages[page_indices[slot.src_index]]
                    target_rect = (
                        slot.col * panel_width,
                        slot.row * panel_height,
                        (slot.col + 1) * panel_width,
                        (slot.row + 1) * panel_height,
                    )
                    content.append(
                        PDFSaver._place_page(
                            output_page,
                            source_page,
                            f"/Pg{slot.src_index}",
                            target_rect,
                            slot.rotate_deg,
                        )
                    )

                if guide:
                    content.append(
                        PDFSaver._guide_content(guide, panel_width, panel_height)
                    )

                content_stream = DecodedStreamObject()
                content_stream.set_data(b"\n".join(content))
                output_page[NameObject("/Contents")] = content_stream
                writer.add_page(output_page)

                done += 1
                if progress_callback:
                    percent = int(5 + done / total_sides * 85)
                    progress_callback(
                        percent, f"Assembling sheet {sheet_number} ({side_name})..."
                    )

        buffer = io.BytesIO()
        writer.write(buffer)
        return buffer.getvalue()

    @staticmethod
    def save_booklet(
        reader: PdfReader,
        output_pdf_path: str,
        page_indices: Sequence[int],
        imposition_plan: ImpositionPlan,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> Tuple[bool, Optional[str]]:
        """
        Save an imposed PDF. The file is only written once the whole
        document has been produced.

        Returns:
            (success: bool, error_message: Optional[str])
        """
        try:
            if progress_callback:
                progress_callback(0, "Preparing output document...")

            data = PDFSaver.build_booklet(
                reader, page_indices, imposition_plan, progress_callback
            )

            if progress_callback:
                progress_callback(95, "Writing PDF to disk...")

            with open(output_pdf_path, "wb") as output_file:
                output_file.write(data)

            if progress_callback:
                progress_callback(100, "Save complete!")

            return True, None

        except (BookletError, PyPdfError, OSError, ValueError) as e:
            logger.exception("Saving booklet to %s failed", output_pdf_path)
            error_msg = f"Save failed: {e}"
            if progress_callback:
                progress_callback(0, error_msg)
            return False, error_msg

    @staticmethod
    def _place_page(
        output_page: PageObject,
        source_page: PageObject,
        xobj_name: str,
        target_rect: tuple,  # (x0, y0, x1, y1)
        rotate_deg: int,
    ) -> bytes:
        """
        Register a source page as a Form XObject on the output page and return
        the content that draws it fitted, centred and rotated in target_rect.
        """
        src_box = source_page.mediabox
        src_width, src_height = PDFHandler.intrinsic_size(source_page)
        if src_width <= 0 or src_height <= 0:
            raise ValueError(f"Source page for {xobj_name} has an empty page box")

        x0, y0, x1, y1 = target_rect
        target_width = x1 - x0
        target_height = y1 - y0

        # Fit inside the panel without distortion
        scale = min(target_width / src_width, target_height / src_height)

        # Undo the page's own /Rotate (clockwise) and add the slot rotation
        rotation = (rotate_deg - source_page.rotation) % 360

        transformation = Transformation().translate(
            tx=-(float(src_box.left) + float(src_box.width) / 2),
            ty=-(float(src_box.bottom) + float(src_box.height) / 2),
        )
        transformation = transformation.scale(sx=scale, sy=scale)
        if rotation:
            transformation = transformation.rotate(rotation)
        transformation = transformation.translate(
            tx=x0 + target_width / 2, ty=y0 + target_height / 2
        )

        # Clean up floating-point errors in the CTM
        ctm = []
        for value in transformation.ctm:
            if abs(value) < 1e-10:
                ctm.append(0.0)
            elif abs(value - 1.0) < 1e-10:
                ctm.append(1.0)
            elif abs(value + 1.0) < 1e-10:
                ctm.append(-1.0)
            else:
                ctm.append(value)

        # Form XObject isolates the page content and resources
        source_content = source_page.get_contents()
        form_stream = DecodedStreamObject()
        form_stream.set_data(source_content.get_data() if source_content else b"")
        form_stream[NameObject("/Type")] = NameObject("/XObject")
        form_stream[NameObject("/Subtype")] = NameObject("/Form")
        form_stream[NameObject("/FormType")] = FloatObject(1)
        form_stream[NameObject("/BBox")] = ArrayObject(
            [
                FloatObject(src_box.left),
                FloatObject(src_box.bottom),
                FloatObject(src_box.right),
                FloatObject(src_box.top),
            ]
        )
        if "/Resources" in source_page:
            form_stream[NameObject("/Resources")] = source_page["/Resources"]

        if "/Resources" not in output_page:
            output_page[NameObject("/Resources")] = DictionaryObject()
        resources = output_page["/Resources"]
        if "/XObject" not in resources:
            resources[NameObject("/XObject")] = DictionaryObject()
        resources["/XObject"][NameObject(xobj_name)] = form_stream

        a, b, c, d, e, f = ctm
        return (
            f"q\n"
            f"{x0:.4f} {y0:.4f} {target_width:.4f} {target_height:.4f} re W n\n"
            f"{a:.6f} {b:.6f} {c:.6f} {d:.6f} {e:.4f} {f:.4f} cm\n"
            f"{xobj_name} Do\n"
            f"Q"
        ).encode()

    @staticmethod
    def _guide_content(guide: GuideLine, panel_width: float, panel_height: float) -> bytes:
        """Stroke a spine guide given in grid units."""
        (gx0, gy0), (gx1, gy1) = guide.start, guide.end
        return (
            f"q {GUIDE_STYLE}\n"
            f"{gx0 * panel_width:.4f} {gy0 * panel_height:.4f} m\n"
            f"{gx1 * panel_width:.4f} {gy1 * panel_height:.4f} l S\n"
            f"Q"
        ).encode()
