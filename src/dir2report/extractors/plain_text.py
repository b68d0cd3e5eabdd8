"""Extraction of plain text files through the encoding detector."""

from pathlib import Path
from typing import Optional

from dir2report.encoding.text_decoder import TextDecoder
from dir2report.exceptions import ExtractionError

from .base import ContentExtractor


class PlainTextExtractor(ContentExtractor):
    """Read a file's bytes and decode them with a TextDecoder.

    Decoding itself never fails; only reading the file can.
    """

    def __init__(self, decoder: Optional[TextDecoder] = None) -> None:
        self.decoder = decoder or TextDecoder()

    def extract(self, path: Path) -> str:
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ExtractionError(e.strerror or str(e), str(path)) from e
        return self.decoder.decode(data)
