"""Tests for the document parser orchestrator."""

import json

import pytest
from PIL import Image

from racecard_extraction.document_parser import DocumentParser, ExtractionResult
from racecard_extraction.ocr_engine import RecognitionResult
from racecard_extraction.utils.exceptions import (
    CorruptedFileError,
    InputError,
    OCRProcessingError,
)


class FakePDFProcessor:
    def __init__(self, text="", error=None, render_error=None):
        self.text = text
        self.error = error
        self.render_error = render_error
        self.extracted = []
        self.rendered = []

    def extract_text(self, path):
        self.extracted.append(path)
        if self.error is not None:
            raise self.error
        return self.text

    def render_pages(self, path):
        self.rendered.append(path)
        if self.render_error is not None:
            raise self.render_error
        return [Image.new("RGB", (20, 20), (255, 255, 255))]


class FakeOCREngine:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.recognized = []
        self.page_batches = []

    def recognize(self, image_path):
        self.recognized.append(image_path)
        if self.error is not None:
            raise self.error
        return self.result

    def recognize_images(self, images):
        self.page_batches.append(images)
        if self.error is not None:
            raise self.error
        return self.result


def make_parser(text="", pdf_error=None, ocr_result=None, ocr_error=None, render_error=None):
    pdf = FakePDFProcessor(text=text, error=pdf_error, render_error=render_error)
    engine = FakeOCREngine(result=ocr_result, error=ocr_error)
    return DocumentParser(pdf_processor=pdf, ocr_engine=engine), pdf, engine


@pytest.fixture
def pdf_file(tmp_path):
    path = tmp_path / "card.pdf"
    path.write_bytes(b"%PDF-1.4 placeholder")
    return path


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "program.png"
    Image.new("RGB", (20, 20), (255, 255, 255)).save(path)
    return path


class TestPdfPath:
    """Tests for text-bearing documents."""

    def test_long_text_layer_is_reliable(self, pdf_file):
        parser, _, _ = make_parser(text="A" * 150)
        result = parser.process_file(pdf_file)

        assert result.success
        assert result.confidence == 0.9
        assert result.engine == "text_layer"

    def test_short_text_layer_is_sparse(self, pdf_file):
        parser, _, _ = make_parser(text="A" * 50)
        result = parser.process_file(pdf_file)

        assert result.success
        assert result.confidence == 0.5

    def test_threshold_is_exclusive(self, pdf_file):
        parser, _, _ = make_parser(text="A" * 100)
        assert parser.process_file(pdf_file).confidence == 0.5

    def test_zero_races_is_still_success(self, pdf_file):
        parser, _, _ = make_parser(text="A" * 150)
        result = parser.process_file(pdf_file)

        assert result.extracted_data.races == ()
        assert "errors" not in result.to_dict()

    def test_races_are_parsed(self, pdf_file, sample_program_text):
        parser, _, _ = make_parser(text=sample_program_text)
        result = parser.process_file(pdf_file)

        assert result.text == sample_program_text
        assert result.extracted_data.track == "SANTA ANITA"
        assert [race.number for race in result.extracted_data.races] == [1]

    def test_sparse_text_does_not_trigger_recognition_by_default(self, pdf_file):
        parser, pdf, engine = make_parser(
            text="RACE 1",
            ocr_result=RecognitionResult("RACE 1\n1. ALPHA", 0.8, "tesseract", 3)
        )
        result = parser.process_file(pdf_file)

        assert result.text == "RACE 1"
        assert result.confidence == 0.5
        assert pdf.rendered == []
        assert engine.page_batches == []

    def test_sparse_text_recognition_fallback_when_enabled(self, pdf_file, config):
        config.set("input.pdf.ocr_fallback_on_sparse_text", True)
        parser, pdf, engine = make_parser(
            text="RACE 1",
            ocr_result=RecognitionResult("RACE 1\n1. ALPHA", 0.8, "tesseract", 3)
        )
        result = parser.process_file(pdf_file)

        assert result.text == "RACE 1\n1. ALPHA"
        assert result.confidence == 0.8
        assert result.engine == "tesseract"
        assert result.extracted_data.races[0].horses[0].name == "ALPHA"

    def test_failed_fallback_keeps_text_layer(self, pdf_file, config):
        config.set("input.pdf.ocr_fallback_on_sparse_text", True)
        parser, _, _ = make_parser(
            text="RACE 1",
            ocr_error=OCRProcessingError("page 1", "crashed")
        )
        result = parser.process_file(pdf_file)

        assert result.success
        assert result.text == "RACE 1"
        assert result.confidence == 0.5

    def test_failed_rendering_keeps_text_layer(self, pdf_file, config):
        config.set("input.pdf.ocr_fallback_on_sparse_text", True)
        parser, pdf, engine = make_parser(
            text="RACE 1\n1. ALPHA",
            render_error=CorruptedFileError(str(pdf_file), "no renderer")
        )
        result = parser.process_file(pdf_file)

        assert result.success
        assert result.text == "RACE 1\n1. ALPHA"
        assert result.confidence == 0.5
        assert result.extracted_data.races[0].horses[0].name == "ALPHA"
        assert pdf.rendered == [pdf_file]
        assert engine.page_batches == []

    def test_missing_renderer_keeps_text_layer(self, pdf_file, config):
        config.set("input.pdf.ocr_fallback_on_sparse_text", True)
        parser, _, _ = make_parser(
            text="RACE 1",
            render_error=InputError("No PDF rendering library available.")
        )
        result = parser.process_file(pdf_file)

        assert result.success
        assert result.confidence == 0.5

    def test_unreadable_pdf_is_a_failed_result(self, pdf_file):
        parser, _, _ = make_parser(pdf_error=CorruptedFileError(str(pdf_file), "bad xref"))
        result = parser.process_file(pdf_file)

        assert not result.success
        assert result.text == ""
        assert result.confidence == 0
        assert len(result.errors) == 1
        assert result.extracted_data is None

    def test_declared_kind_selects_strategy(self, tmp_path):
        upload = tmp_path / "upload.bin"
        upload.write_bytes(b"%PDF-1.4 placeholder")
        parser, pdf, engine = make_parser(text="A" * 150)

        result = parser.process_file(upload, file_kind="pdf")

        assert result.success
        assert pdf.extracted == [upload]
        assert engine.recognized == []


class TestImagePath:
    """Tests for recognized images."""

    def test_recognition_confidence_is_used(self, png_file, sample_program_text):
        parser, pdf, engine = make_parser(
            ocr_result=RecognitionResult(sample_program_text, 0.85, "cloud_vision", 12)
        )
        result = parser.process_file(png_file)

        assert result.success
        assert result.confidence == 0.85
        assert result.engine == "cloud_vision"
        assert result.extracted_data.race_count == 1
        assert pdf.extracted == []
        assert engine.recognized == [png_file]

    def test_recognition_failure_is_a_failed_result(self, png_file):
        parser, _, _ = make_parser(ocr_error=OCRProcessingError(str(png_file), "no text"))
        result = parser.process_file(png_file)

        assert not result.success
        assert result.confidence == 0
        assert len(result.errors) == 1


class TestRejectedInput:
    """Tests for inputs rejected before extraction."""

    def test_unsupported_kind(self, tmp_path):
        path = tmp_path / "program.gif"
        path.write_bytes(b"GIF89a")
        parser, pdf, engine = make_parser()

        result = parser.process_file(path)

        assert not result.success
        assert "Unsupported file type" in result.errors[0]
        assert pdf.extracted == []
        assert engine.recognized == []

    def test_missing_file(self, tmp_path):
        parser, _, _ = make_parser()
        result = parser.process_file(tmp_path / "missing.pdf")

        assert not result.success
        assert "File not found" in result.errors[0]


class TestBatch:
    """Tests for directory processing."""

    def test_one_bad_file_does_not_stop_the_batch(self, tmp_path):
        (tmp_path / "a.pdf").write_bytes(b"%PDF-1.4 placeholder")
        Image.new("RGB", (20, 20)).save(tmp_path / "b.png")
        (tmp_path / "notes.txt").write_text("ignored")
        parser, _, _ = make_parser(
            text="A" * 150,
            ocr_error=OCRProcessingError("b.png", "no text")
        )

        results = parser.process_batch(tmp_path)

        assert [r.source_file for r in results] == ["a.pdf", "b.png"]
        assert [r.success for r in results] == [True, False]


class TestExtractionResult:
    """Tests for the result wire format."""

    def test_failure_shape(self):
        data = ExtractionResult.failure("Unsupported file type: gif").to_dict()
        assert data == {
            "success": False,
            "text": "",
            "confidence": 0.0,
            "errors": ["Unsupported file type: gif"],
        }

    def test_success_shape(self, pdf_file, sample_program_text):
        parser, _, _ = make_parser(text=sample_program_text)
        data = json.loads(parser.process_file(pdf_file).to_json())

        assert set(data) == {"success", "text", "confidence", "extractedData"}
        assert data["extractedData"]["races"][0]["purse"] == 40000

    def test_metadata_is_opt_in(self, pdf_file):
        parser, _, _ = make_parser(text="A" * 150)
        data = parser.process_file(pdf_file).to_dict(include_metadata=True)

        assert data["sourceFile"] == "card.pdf"
        assert data["engine"] == "text_layer"
