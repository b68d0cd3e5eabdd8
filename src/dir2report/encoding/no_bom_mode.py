"""Decoding policy enum for byte buffers that carry no byte-order mark."""

from enum import Enum


class NoBomTextMode(str, Enum):
    """Policy for decoding text that has no byte-order mark.

    Values:
        AUTO_UTF8_THEN_LOCALE: Decode as UTF-8 when the buffer is strictly valid UTF-8,
            otherwise fall back to the legacy locale encoding (default behavior)
        FORCE_LOCALE: Always decode with the legacy locale encoding
    """

    AUTO_UTF8_THEN_LOCALE = "auto"
    FORCE_LOCALE = "locale"
