"""
Tests for the BookletProcessor coordinator and the background worker.
"""

import io

import pytest
from pypdf import PdfReader

from minibooklet.logic.booklet_formats import (
    A6,
    A7_PORTRAIT,
    BookletFormat,
    BookletOptions,
    Orientation,
)
from minibooklet.logic.booklet_processor import BookletProcessor
from minibooklet.logic.errors import EmptyDocumentError, EmptySelectionError, LoadError


class TestBookletProcessor:
    def test_init_when_path_given_then_defaults_to_a7_portrait(self, pdf_file):
        processor = BookletProcessor(pdf_file)
        assert processor.original_page_count == 20
        assert processor.fold_layout is A7_PORTRAIT
        assert processor.get_effective_page_count() == 20
        assert processor.get_sheet_count() == 2
        assert processor.get_output_page_count() == 3

    def test_init_when_no_pages_then_empty_document_error(self, make_pdf):
        with pytest.raises(EmptyDocumentError):
            BookletProcessor(make_pdf(0))

    def test_init_when_garbage_then_load_error(self):
        with pytest.raises(LoadError):
            BookletProcessor(b"%PDF-1.7 truncated")

    def test_init_when_file_missing_then_load_error(self, tmp_path):
        with pytest.raises(LoadError):
            BookletProcessor(tmp_path / "nope.pdf")

    def test_init_when_selection_names_no_page_then_empty_selection_error(self, make_pdf):
        with pytest.raises(EmptySelectionError):
            BookletProcessor(make_pdf(3), BookletOptions(page_selection="7-9"))

    def test_apply_options_when_selection_given_then_effective_pages_follow(self, pdf_file):
        processor = BookletProcessor(pdf_file)
        processor.apply_options(
            BookletOptions(booklet_format=BookletFormat.A6, page_selection="3, 1")
        )
        assert processor.page_indices == [2, 0]
        assert processor.fold_layout is A6
        assert processor.get_sheet_count() == 1
        assert processor.get_output_page_count() == 1

    def test_apply_options_when_selection_invalid_then_previous_state_kept(self, pdf_file):
        processor = BookletProcessor(pdf_file)
        with pytest.raises(EmptySelectionError):
            processor.apply_options(BookletOptions(page_selection="99"))
        assert processor.options == BookletOptions()
        assert processor.get_effective_page_count() == 20

    def test_build_booklet_when_options_applied_then_matching_page_count(self, pdf_file):
        processor = BookletProcessor(
            pdf_file, BookletOptions(orientation=Orientation.LANDSCAPE, page_selection="1-9")
        )
        reader = PdfReader(io.BytesIO(processor.build_booklet()))
        assert len(reader.pages) == 2

    def test_save_booklet_when_path_given_then_written(self, pdf_file, tmp_path):
        processor = BookletProcessor(pdf_file)
        output = tmp_path / processor.suggested_output_name()
        success, error = processor.save_booklet(str(output))
        assert success and error is None
        assert len(PdfReader(str(output)).pages) == 3

    def test_suggested_output_name_when_path_then_suffix_added(self, pdf_file):
        processor = BookletProcessor(pdf_file, BookletOptions(suffix="-a7"))
        assert processor.suggested_output_name() == "story-a7.pdf"

    def test_suggested_output_name_when_default_suffix_then_booklet(self, pdf_file):
        assert BookletProcessor(pdf_file).suggested_output_name() == "story-booklet.pdf"

    def test_original_page_size_when_a7_source_then_mm(self, pdf_file):
        width_mm, height_mm = BookletProcessor(pdf_file).get_original_page_size_mm()
        assert width_mm == pytest.approx(74.0, abs=0.01)
        assert height_mm == pytest.approx(105.0, abs=0.01)

    def test_folding_instructions_when_a6_then_two_folds(self, pdf_file):
        processor = BookletProcessor(pdf_file, BookletOptions(booklet_format=BookletFormat.A6))
        assert len(processor.get_folding_instructions()) == 4


class TestBookletWorker:
    @pytest.fixture(autouse=True)
    def _qt(self):
        pytest.importorskip("PyQt6.QtCore")

    def _run(self, worker):
        results = {"finished": [], "failed": [], "progress": []}
        worker.processing_finished.connect(results["finished"].append)
        worker.processing_failed.connect(results["failed"].append)
        worker.progress_updated.connect(
            lambda percent, message: results["progress"].append(percent)
        )
        worker.run()
        return results

    def test_run_when_loading_valid_file_then_emits_processor(self, pdf_file):
        from minibooklet.logic.booklet_worker import BookletWorker

        results = self._run(BookletWorker(pdf_path=str(pdf_file)))
        assert results["failed"] == []
        assert isinstance(results["finished"][0], BookletProcessor)
        assert results["progress"][-1] == 100

    def test_run_when_loading_garbage_then_emits_failure(self, tmp_path):
        from minibooklet.logic.booklet_worker import BookletWorker

        path = tmp_path / "bad.pdf"
        path.write_bytes(b"garbage")
        results = self._run(BookletWorker(pdf_path=str(path)))
        assert results["finished"] == []
        assert results["failed"][0].startswith("Error processing PDF")

    def test_run_when_processor_only_then_emits_preview_bytes(self, pdf_file):
        from minibooklet.logic.booklet_worker import BookletWorker

        results = self._run(BookletWorker(processor=BookletProcessor(pdf_file)))
        assert results["finished"][0].startswith(b"%PDF")

    def test_run_when_saving_then_emits_true(self, pdf_file, tmp_path):
        from minibooklet.logic.booklet_worker import BookletWorker

        output = tmp_path / "out.pdf"
        worker = BookletWorker(processor=BookletProcessor(pdf_file), output_path=str(output))
        results = self._run(worker)
        assert results["finished"] == [True]
        assert output.exists()

    def test_run_when_no_parameters_then_emits_failure(self):
        from minibooklet.logic.booklet_worker import BookletWorker

        results = self._run(BookletWorker())
        assert results["failed"] == ["Worker initialized with insufficient parameters."]

    def test_run_when_preview_raises_unexpected_error_then_emits_failure(
        self, pdf_file, monkeypatch
    ):
        from minibooklet.logic.booklet_worker import BookletWorker

        processor = BookletProcessor(pdf_file)

        def broken_build(progress_callback=None):
            raise ZeroDivisionError("float division by zero")

        monkeypatch.setattr(processor, "build_booklet", broken_build)
        results = self._run(BookletWorker(processor=processor))
        assert results["finished"] == []
        assert results["failed"][0].startswith("Critical error while building preview")

    def test_run_when_save_raises_unexpected_error_then_emits_failure(
        self, pdf_file, tmp_path, monkeypatch
    ):
        from minibooklet.logic.booklet_worker import BookletWorker

        processor = BookletProcessor(pdf_file)

        def broken_save(output_path, progress_callback=None):
            raise ZeroDivisionError("float division by zero")

        monkeypatch.setattr(processor, "save_booklet", broken_save)
        worker = BookletWorker(processor=processor, output_path=str(tmp_path / "out.pdf"))
        results = self._run(worker)
        assert results["finished"] == []
        assert results["failed"][0].startswith("Critical error during saving")
