"""OCR backends used to read the CAPTCHA image."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol

import pytesseract
from PIL import Image, ImageOps

from . import config
from .errors import OcrError


class OcrEngine(Protocol):
    def recognize(self, image_path: Path) -> str:
        ...


class TesseractOcr:
    """Tesseract via ``pytesseract``.

    The image is converted to grayscale and, when ``threshold`` is set,
    binarised before recognition. ``psm`` 8 treats the image as one word,
    which matches the short single-line CAPTCHA.
    """

    def __init__(
        self,
        *,
        tesseract_cmd: Optional[str] = None,
        threshold: Optional[int] = None,
        psm: int = 8,
    ) -> None:
        cmd = tesseract_cmd or config.TESSERACT_CMD
        if cmd:
            pytesseract.pytesseract.tesseract_cmd = cmd
        self.threshold = threshold
        self.psm = psm

    def preprocess(self, image: Image.Image) -> Image.Image:
        prepared = ImageOps.grayscale(image)
        if self.threshold is not None:
            cutoff = self.threshold
            prepared = prepared.point(lambda p: 255 if p > cutoff else 0)
        return prepared

    def recognize(self, image_path: Path) -> str:
        try:
            with Image.open(image_path) as image:
                prepared = self.preprocess(image)
            return pytesseract.image_to_string(prepared, config=f"--psm {self.psm}")
        except (OSError, pytesseract.TesseractError) as exc:
            raise OcrError(f"OCR failed for {image_path}", detail=str(exc)) from exc


def tesseract_version() -> str:
    """Return the installed Tesseract version, raising if the binary is missing."""

    if config.TESSERACT_CMD:
        pytesseract.pytesseract.tesseract_cmd = config.TESSERACT_CMD
    return str(pytesseract.get_tesseract_version())


__all__ = ["OcrEngine", "TesseractOcr", "tesseract_version"]
