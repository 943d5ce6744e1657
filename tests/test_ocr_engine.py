"""Tests for recognition backends and backend selection."""

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest
from PIL import Image

from racecard_extraction.ocr_engine import (
    CloudVisionBackend,
    OCREngine,
    RecognitionResult,
    TesseractWorker,
)
from racecard_extraction.utils.exceptions import (
    OCREngineNotAvailableError,
    OCRProcessingError,
)


# --- Cloud Vision fakes ---

def vision_response(*descriptions, error_message=""):
    return SimpleNamespace(
        error=SimpleNamespace(message=error_message),
        text_annotations=[SimpleNamespace(description=text) for text in descriptions]
    )


class FakeVisionClient:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def text_detection(self, image):
        self.requests.append(image)
        if self.error is not None:
            raise self.error
        return self.response


# --- Tesseract fakes ---

TESSERACT_DATA = {
    'text': ['', 'RACE', '1', '1.', 'MIDNIGHT', 'RUN'],
    'conf': ['-1', '90', '80', '70', '60', '100'],
    'left': [0, 10, 60, 10, 40, 120],
    'block_num': [1, 1, 1, 1, 1, 1],
    'par_num': [1, 1, 1, 1, 1, 1],
    'line_num': [0, 1, 1, 2, 2, 2],
}


def fake_pytesseract(data=None, error=None, version_error=None):
    calls = []

    def get_tesseract_version():
        if version_error is not None:
            raise version_error
        return "5.3.0"

    def image_to_data(image, lang=None, config=None, output_type=None):
        calls.append({'image': image, 'lang': lang, 'config': config})
        if error is not None:
            raise error
        return data if data is not None else TESSERACT_DATA

    return SimpleNamespace(
        get_tesseract_version=get_tesseract_version,
        image_to_data=image_to_data,
        Output=SimpleNamespace(DICT="dict"),
        calls=calls
    )


class FakeWorker:
    """Stands in for TesseractWorker in engine tests."""

    instances = []

    def __init__(self, confidences=(0.8,)):
        self.confidences = list(confidences)
        self.images = []
        self.terminated = False
        FakeWorker.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.terminated = True

    def recognize(self, image):
        self.images.append(image)
        confidence = self.confidences[(len(self.images) - 1) % len(self.confidences)]
        return RecognitionResult(
            text=f"page {len(self.images)}",
            confidence=confidence,
            engine="tesseract",
            block_count=3
        )


class FakeCloudBackend:
    def __init__(self, result=None, error=None):
        self.result = result or RecognitionResult("RACE 1", 0.85, "cloud_vision", 4)
        self.error = error
        self.paths = []
        self.contents = []

    def recognize(self, image_path):
        self.paths.append(Path(image_path))
        if self.error is not None:
            raise self.error
        return self.result

    def recognize_content(self, content, source="image"):
        self.contents.append(content)
        return self.result


@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "program.png"
    Image.new("RGB", (40, 20), (255, 255, 255)).save(path)
    return path


class TestCloudVisionBackend:
    """Tests for the Cloud Vision adapter."""

    def test_multiple_blocks_give_high_confidence(self, image_file):
        client = FakeVisionClient(vision_response("RACE 1\n1. ALPHA", "RACE", "1"))
        result = CloudVisionBackend(client=client).recognize(image_file)

        assert result.text == "RACE 1\n1. ALPHA"
        assert result.confidence == pytest.approx(0.85)
        assert result.engine == "cloud_vision"
        assert result.block_count == 3
        assert len(client.requests) == 1

    def test_single_block_gives_lower_confidence(self, image_file):
        client = FakeVisionClient(vision_response("RACE 1"))
        result = CloudVisionBackend(client=client).recognize(image_file)
        assert result.confidence == pytest.approx(0.7)

    def test_no_text_detected(self, image_file):
        client = FakeVisionClient(vision_response())
        with pytest.raises(OCRProcessingError, match="No text detected"):
            CloudVisionBackend(client=client).recognize(image_file)

    def test_service_error(self, image_file):
        client = FakeVisionClient(vision_response("RACE 1", error_message="quota exceeded"))
        with pytest.raises(OCRProcessingError, match="quota exceeded"):
            CloudVisionBackend(client=client).recognize(image_file)

    def test_request_failure(self, image_file):
        client = FakeVisionClient(error=RuntimeError("deadline exceeded"))
        with pytest.raises(OCRProcessingError):
            CloudVisionBackend(client=client).recognize(image_file)

    def test_unreadable_file(self, tmp_path):
        client = FakeVisionClient(vision_response("RACE 1"))
        with pytest.raises(OCRProcessingError):
            CloudVisionBackend(client=client).recognize(tmp_path / "missing.png")

    def test_unavailable_without_credentials(self):
        with pytest.raises(OCREngineNotAvailableError):
            CloudVisionBackend()

    def test_unavailable_when_disabled(self, config):
        config.set("ocr.cloud.enabled", False)
        config.set("ocr.cloud.api_key", "test-key")

        with pytest.raises(OCREngineNotAvailableError, match="disabled"):
            CloudVisionBackend()

    def test_confidence_tiers_from_config(self, image_file, config):
        config.set("confidence.cloud_single_block", 0.6)
        client = FakeVisionClient(vision_response("RACE 1"))
        assert CloudVisionBackend(client=client).recognize(image_file).confidence == 0.6


class TestTesseractWorker:
    """Tests for the scoped Tesseract worker."""

    def test_recognize_groups_words_into_lines(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "pytesseract", fake_pytesseract())

        with TesseractWorker() as worker:
            result = worker.recognize(Image.new("L", (40, 20), 255))

        assert result.text == "RACE 1\n1. MIDNIGHT RUN"
        assert result.confidence == pytest.approx(0.8)
        assert result.engine == "tesseract"
        assert result.block_count == 5

    def test_configuration_is_passed_to_tesseract(self, monkeypatch, config):
        config.set("ocr.tesseract.psm", 6)
        fake = fake_pytesseract()
        monkeypatch.setitem(sys.modules, "pytesseract", fake)

        with TesseractWorker() as worker:
            worker.recognize(Image.new("L", (40, 20), 255))

        assert fake.calls[0]['lang'] == "eng"
        assert "--psm 6" in fake.calls[0]['config']

    def test_no_words_gives_zero_confidence(self, monkeypatch):
        empty = {key: [] for key in TESSERACT_DATA}
        monkeypatch.setitem(sys.modules, "pytesseract", fake_pytesseract(data=empty))

        with TesseractWorker() as worker:
            result = worker.recognize(Image.new("L", (40, 20), 255))

        assert result.text == ""
        assert result.confidence == 0.0

    def test_scratch_directory_removed_on_exit(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "pytesseract", fake_pytesseract())

        with TesseractWorker() as worker:
            scratch = Path(worker._scratch.name)
            assert scratch.is_dir()
            assert worker.is_active

        assert not scratch.exists()
        assert not worker.is_active

    def test_released_when_recognition_fails(self, monkeypatch):
        monkeypatch.setitem(
            sys.modules, "pytesseract", fake_pytesseract(error=RuntimeError("crashed"))
        )

        worker = TesseractWorker()
        with pytest.raises(OCRProcessingError):
            with worker:
                scratch = Path(worker._scratch.name)
                worker.recognize(Image.new("L", (40, 20), 255))

        assert not scratch.exists()
        assert not worker.is_active

    def test_unusable_after_terminate(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "pytesseract", fake_pytesseract())

        worker = TesseractWorker()
        with worker:
            pass

        with pytest.raises(OCREngineNotAvailableError):
            worker.recognize(Image.new("L", (40, 20), 255))
        with pytest.raises(OCREngineNotAvailableError):
            worker.acquire()

    def test_missing_binary(self, monkeypatch):
        monkeypatch.setitem(
            sys.modules, "pytesseract",
            fake_pytesseract(version_error=OSError("tesseract not found"))
        )

        with pytest.raises(OCREngineNotAvailableError):
            with TesseractWorker():
                pass

    def test_missing_package(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "pytesseract", None)

        with pytest.raises(OCREngineNotAvailableError, match="pytesseract"):
            TesseractWorker().acquire()


class TestOCREngine:
    """Tests for backend selection and result combination."""

    def test_cloud_backend_used_when_available(self, image_file):
        cloud = FakeCloudBackend()
        engine = OCREngine(cloud_backend=cloud, worker_factory=FakeWorker)

        result = engine.recognize(image_file)

        assert engine.backend_name == "cloud_vision"
        assert result.confidence == pytest.approx(0.85)
        assert cloud.paths == [image_file]

    def test_cloud_error_is_not_retried_locally(self, image_file):
        FakeWorker.instances = []
        cloud = FakeCloudBackend(error=OCRProcessingError(str(image_file), "quota"))
        engine = OCREngine(cloud_backend=cloud, worker_factory=FakeWorker)

        with pytest.raises(OCRProcessingError):
            engine.recognize(image_file)
        assert FakeWorker.instances == []

    def test_tesseract_used_when_cloud_unavailable(self, image_file):
        FakeWorker.instances = []
        engine = OCREngine(worker_factory=FakeWorker)

        result = engine.recognize(image_file)

        assert engine.backend_name == "tesseract"
        assert result.confidence == pytest.approx(0.8)
        worker = FakeWorker.instances[0]
        assert worker.terminated
        # preprocessed before recognition
        assert worker.images[0].mode == "L"

    def test_use_cloud_false_skips_cloud_setup(self, config):
        config.set("ocr.cloud.api_key", "test-key")
        engine = OCREngine(worker_factory=FakeWorker, use_cloud=False)
        assert engine.backend_name == "tesseract"

    def test_pages_are_combined(self):
        engine = OCREngine(
            worker_factory=lambda: FakeWorker(confidences=(0.8, 0.6)),
            use_cloud=False
        )
        pages = [Image.new("RGB", (20, 20), (255, 255, 255)) for _ in range(2)]

        result = engine.recognize_images(pages)

        assert result.text == "page 1\npage 2"
        assert result.confidence == pytest.approx(0.7)
        assert result.block_count == 6

    def test_pages_sent_to_cloud_as_png(self):
        cloud = FakeCloudBackend()
        engine = OCREngine(cloud_backend=cloud)

        engine.recognize_images([Image.new("RGB", (20, 20), (255, 255, 255))])

        assert cloud.contents[0].startswith(b"\x89PNG")

    def test_no_pages(self):
        engine = OCREngine(worker_factory=FakeWorker, use_cloud=False)
        result = engine.recognize_images([])
        assert result.is_empty
        assert result.confidence == 0.0
