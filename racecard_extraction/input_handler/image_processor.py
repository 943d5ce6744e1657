"""
Image Processor Module.

This module handles photographed or scanned race programs:
    - Image loading and validation
    - Orientation correction from EXIF data
    - Resolution normalization
    - Preprocessing for local recognition (greyscale, normalize, sharpen)

Supports: JPG, JPEG, PNG

Author: Railbird Engineering Team
"""

from pathlib import Path
from typing import Union
from PIL import Image, ImageFilter, ImageOps

from config import get_config
from racecard_extraction.utils.logger import get_logger
from racecard_extraction.utils.exceptions import CorruptedFileError

# Initialize module logger
logger = get_logger(__name__)


class ImageProcessor:
    """
    Processor for program images.

    Attributes:
        max_width: Maximum image width in pixels
        max_height: Maximum image height in pixels
        auto_orient: Whether to auto-correct orientation
        greyscale: Convert to greyscale before recognition
        normalize: Stretch contrast before recognition
        sharpen: Sharpen before recognition

    Example:
        >>> processor = ImageProcessor()
        >>> image = processor.load("program.jpg")
        >>> prepared = processor.preprocess_for_ocr(image)
    """

    def __init__(self) -> None:
        """Initialize the image processor with configuration."""
        self.max_width = get_config("input.image.max_width", 2480)
        self.max_height = get_config("input.image.max_height", 3508)
        self.auto_orient = get_config("input.image.auto_orient", True)
        self.greyscale = get_config("input.image.preprocess.greyscale", True)
        self.normalize = get_config("input.image.preprocess.normalize", True)
        self.sharpen = get_config("input.image.preprocess.sharpen", True)

        logger.debug(
            f"ImageProcessor initialized (max_size={self.max_width}x{self.max_height})"
        )

    def load(self, filepath: Union[str, Path]) -> Image.Image:
        """
        Load an image file as an upright RGB image.

        Args:
            filepath: Path to the image file.

        Returns:
            PIL Image in RGB mode, downscaled if larger than the limits.

        Raises:
            CorruptedFileError: If the image cannot be decoded.
        """
        filepath = Path(filepath)
        logger.info(f"Loading image: {filepath.name}")

        try:
            with Image.open(filepath) as source:
                source.load()
                image = source.copy()
        except Exception as e:
            logger.error(f"Failed to load image {filepath}: {e}")
            raise CorruptedFileError(str(filepath), str(e))

        if self.auto_orient:
            image = self._fix_orientation(image)
        image = self._convert_to_rgb(image)
        image = self._resize_if_needed(image)

        logger.debug(f"Loaded image {filepath.name}: {image.width}x{image.height}")
        return image

    def _fix_orientation(self, image: Image.Image) -> Image.Image:
        """Rotate the image according to its EXIF orientation tag."""
        try:
            image = ImageOps.exif_transpose(image)
        except Exception as e:
            logger.debug(f"Could not fix orientation: {e}")
        return image

    def _convert_to_rgb(self, image: Image.Image) -> Image.Image:
        """
        Convert image to RGB mode.

        Transparent images are flattened onto a white background.
        """
        if image.mode == 'RGB':
            return image

        original_mode = image.mode

        if image.mode == 'RGBA':
            background = Image.new('RGB', image.size, (255, 255, 255))
            background.paste(image, mask=image.split()[3])
            image = background
        else:
            image = image.convert('RGB')

        logger.debug(f"Converted image from {original_mode} to RGB")
        return image

    def _resize_if_needed(self, image: Image.Image) -> Image.Image:
        """Downscale to fit the maximum dimensions, keeping aspect ratio."""
        width, height = image.size

        if width <= self.max_width and height <= self.max_height:
            return image

        ratio = min(self.max_width / width, self.max_height / height)
        new_width = int(width * ratio)
        new_height = int(height * ratio)

        image = image.resize((new_width, new_height), Image.LANCZOS)

        logger.debug(f"Resized image from {width}x{height} to {new_width}x{new_height}")
        return image

    def preprocess_for_ocr(self, image: Image.Image) -> Image.Image:
        """
        Prepare an image for local recognition.

        Steps (each switchable in configuration):
            1. Greyscale
            2. Normalize (stretch contrast to the full range)
            3. Sharpen

        Args:
            image: Input image.

        Returns:
            Preprocessed image.
        """
        if self.greyscale:
            image = image.convert('L')

        if self.normalize:
            image = ImageOps.autocontrast(image)

        if self.sharpen:
            image = image.filter(ImageFilter.SHARPEN)

        logger.debug(
            f"Preprocessed image (greyscale={self.greyscale}, "
            f"normalize={self.normalize}, sharpen={self.sharpen})"
        )
        return image
