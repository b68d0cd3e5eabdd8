"""Byte-to-text decoding with BOM detection and strict UTF-8 validation."""

from .no_bom_mode import NoBomTextMode
from .text_decoder import TextDecoder, decode_bytes, default_legacy_encoding
from .utf8_validator import is_valid_utf8

__all__ = [
    "NoBomTextMode",
    "TextDecoder",
    "decode_bytes",
    "default_legacy_encoding",
    "is_valid_utf8",
]
