"""
Tests for PDF loading and booklet output with pypdf.
"""

import io

import pytest
from pypdf import PageObject, PdfReader, PdfWriter

from minibooklet.logic.booklet_formats import A6, A7_LANDSCAPE, A7_PORTRAIT
from minibooklet.logic.booklet_layout import plan_layout
from minibooklet.logic.errors import LoadError
from minibooklet.logic.pdf_handler import PDFHandler
from minibooklet.logic.pdf_saver import PDFSaver
from minibooklet.logic.unit_converter import mm_to_points


def _read(data: bytes) -> PdfReader:
    return PdfReader(io.BytesIO(data))


def _content(page) -> bytes:
    return page.get_contents().get_data()


def _pdf_with_empty_first_page() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=0, height=100)
    writer.add_blank_page(width=100, height=100)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestPDFHandler:
    def test_load_when_valid_bytes_then_reader(self, make_pdf):
        reader = PDFHandler.load_document(make_pdf(3))
        assert PDFHandler.get_page_count(reader) == 3

    def test_load_when_garbage_then_load_error(self):
        with pytest.raises(LoadError):
            PDFHandler.load_document(b"this is not a pdf")

    def test_load_when_empty_bytes_then_load_error(self):
        with pytest.raises(LoadError):
            PDFHandler.load_document(b"")

    def test_load_when_page_has_zero_width_then_load_error(self):
        with pytest.raises(LoadError, match="Page 1 has an empty page box"):
            PDFHandler.load_document(_pdf_with_empty_first_page())

    def test_read_file_when_missing_then_load_error(self, tmp_path):
        with pytest.raises(LoadError):
            PDFHandler.read_file(tmp_path / "missing.pdf")

    def test_intrinsic_size_when_rotated_page_then_swapped(self):
        page = PageObject.create_blank_page(width=100, height=200)
        page.rotate(90)
        assert PDFHandler.intrinsic_size(page) == (200, 100)


class TestPDFSaver:
    @pytest.mark.parametrize(
        "layout,pages,sides",
        [(A7_PORTRAIT, 16, 2), (A7_PORTRAIT, 20, 3), (A7_LANDSCAPE, 5, 1), (A6, 12, 3)],
        ids=lambda value: getattr(value, "name", str(value)),
    )
    def test_build_when_plan_given_then_one_page_per_printed_side(
        self, make_pdf, layout, pages, sides
    ):
        reader = PDFHandler.load_document(make_pdf(pages))
        data = PDFSaver.build_booklet(reader, range(pages), plan_layout(layout, pages))
        assert len(_read(data).pages) == sides

    @pytest.mark.parametrize("layout", [A7_PORTRAIT, A7_LANDSCAPE, A6], ids=lambda layout: layout.name)
    def test_build_when_plan_given_then_sheet_is_a4_in_layout_orientation(
        self, make_pdf, layout
    ):
        reader = PDFHandler.load_document(make_pdf(4))
        data = PDFSaver.build_booklet(reader, range(4), plan_layout(layout, 4))
        box = _read(data).pages[0].mediabox
        width, height = layout.sheet_size_pt
        assert float(box.width) == pytest.approx(width, abs=0.01)
        assert float(box.height) == pytest.approx(height, abs=0.01)

    def test_build_when_sheet_drawn_then_each_slot_is_a_form_xobject(self, make_pdf):
        reader = PDFHandler.load_document(make_pdf(16))
        data = PDFSaver.build_booklet(reader, range(16), plan_layout(A7_PORTRAIT, 16))
        front, back = _read(data).pages

        front_names = set(front["/Resources"]["/XObject"].keys())
        back_names = set(back["/Resources"]["/XObject"].keys())
        assert front_names == {"/Pg0", "/Pg3", "/Pg4", "/Pg7", "/Pg8", "/Pg11", "/Pg12", "/Pg15"}
        assert back_names == {"/Pg1", "/Pg2", "/Pg5", "/Pg6", "/Pg9", "/Pg10", "/Pg13", "/Pg14"}
        for name in front_names:
            assert front["/Resources"]["/XObject"][name]["/Subtype"] == "/Form"

    def test_build_when_page_fills_panel_then_rotation_in_matrix(self, make_pdf):
        panel_width, panel_height = mm_to_points(105), mm_to_points(148.5)
        reader = PDFHandler.load_document(make_pdf(8, panel_width, panel_height))
        data = PDFSaver.build_booklet(reader, range(8), plan_layout(A6, 8))
        content = _content(_read(data).pages[0])

        # Page 1 is printed inverted, page 4 upright
        assert b"-1.000000 0.000000 0.000000 -1.000000" in content
        assert b"1.000000 0.000000 0.000000 1.000000" in content
        assert content.count(b" Do") == 4

    def test_build_when_front_has_spine_then_dashed_guide_on_front_only(self, make_pdf):
        reader = PDFHandler.load_document(make_pdf(8))
        data = PDFSaver.build_booklet(reader, range(8), plan_layout(A6, 8))
        front, back = _read(data).pages
        assert b"[3 3] 0 d" in _content(front)
        assert b"[3 3] 0 d" not in _content(back)

    def test_build_when_indices_remapped_then_source_pages_follow_selection(self, make_pdf):
        reader = PDFHandler.load_document(make_pdf(5))
        data = PDFSaver.build_booklet(reader, [4, 0], plan_layout(A6, 2))
        page = _read(data).pages[0]
        assert set(page["/Resources"]["/XObject"].keys()) == {"/Pg0", "/Pg1"}

    def test_build_when_index_count_differs_from_plan_then_value_error(self, make_pdf):
        reader = PDFHandler.load_document(make_pdf(5))
        with pytest.raises(ValueError):
            PDFSaver.build_booklet(reader, range(4), plan_layout(A6, 5))

    def test_build_when_progress_callback_then_reports_increasing_percent(self, make_pdf):
        reader = PDFHandler.load_document(make_pdf(20))
        updates = []
        PDFSaver.build_booklet(
            reader,
            range(20),
            plan_layout(A7_PORTRAIT, 20),
            lambda percent, message: updates.append(percent),
        )
        assert len(updates) == 3
        assert updates == sorted(updates)
        assert updates[-1] == 90

    def test_save_when_path_writable_then_file_written(self, make_pdf, tmp_path):
        reader = PDFHandler.load_document(make_pdf(12))
        output = tmp_path / "out.pdf"
        success, error = PDFSaver.save_booklet(
            reader, str(output), range(12), plan_layout(A6, 12)
        )
        assert (success, error) == (True, None)
        assert len(PdfReader(str(output)).pages) == 3

    def test_save_when_directory_missing_then_error_and_no_file(self, make_pdf, tmp_path):
        reader = PDFHandler.load_document(make_pdf(4))
        output = tmp_path / "missing" / "out.pdf"
        success, error = PDFSaver.save_booklet(
            reader, str(output), range(4), plan_layout(A6, 4)
        )
        assert success is False
        assert error.startswith("Save failed")
        assert not output.exists()

    def test_save_when_source_page_has_zero_width_then_error_and_no_file(self, tmp_path):
        reader = PdfReader(io.BytesIO(_pdf_with_empty_first_page()))
        output = tmp_path / "out.pdf"
        success, error = PDFSaver.save_booklet(
            reader, str(output), [0, 1], plan_layout(A6, 2)
        )
        assert success is False
        assert "empty page box" in error
        assert not output.exists()
