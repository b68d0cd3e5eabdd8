"""Byte-order-mark aware text decoding.

This module turns raw file bytes into text. Byte-order marks are honoured first,
then (depending on the configured NoBomTextMode) strict UTF-8 is attempted before
falling back to the platform's legacy locale encoding. Decoding is a total
function: whatever the input, some text comes back and no exception is raised.
"""

import codecs
import locale
from typing import Optional, Tuple

from .no_bom_mode import NoBomTextMode
from .utf8_validator import is_valid_utf8

# Used when the locale itself reports UTF-8, so that the fallback path still
# decodes with a single-byte legacy code page.
FALLBACK_LEGACY_ENCODING = "cp1252"

# Checked in order; UTF-32 LE must precede UTF-16 LE because FF FE is a prefix of FF FE 00 00.
BOMS: Tuple[Tuple[bytes, str, int], ...] = (
    (codecs.BOM_UTF8, "utf-8", 1),
    (codecs.BOM_UTF32_LE, "utf-32-le", 4),
    (codecs.BOM_UTF32_BE, "utf-32-be", 4),
    (codecs.BOM_UTF16_LE, "utf-16-le", 2),
    (codecs.BOM_UTF16_BE, "utf-16-be", 2),
)


def default_legacy_encoding() -> str:
    """Return the codec name used for the legacy (non-Unicode) fallback.

    This is the locale's ANSI/legacy encoding, e.g. ``cp1251`` on a Russian Windows
    system. When the locale already reports UTF-8 (typical on Linux and macOS),
    ``cp1252`` is used instead so the fallback can still decode arbitrary bytes.

    Returns:
        A codec name accepted by :func:`codecs.lookup`.
    """
    encoding = locale.getencoding()
    try:
        name = codecs.lookup(encoding).name
    except LookupError:
        return FALLBACK_LEGACY_ENCODING
    if name == "utf-8":
        return FALLBACK_LEGACY_ENCODING
    return name


class TextDecoder:
    """Policy-driven decoder from bytes to text.

    Steps, first match wins:

    1. Empty buffer gives empty text.
    2. A byte-order mark selects UTF-8, UTF-32 LE/BE or UTF-16 LE/BE. The BOM is
       stripped, a trailing partial code unit is dropped, and invalid code units are
       replaced with U+FFFD.
    3. Without a BOM and with FORCE_LOCALE, the legacy encoding is used.
    4. Without a BOM and with AUTO_UTF8_THEN_LOCALE, strictly valid UTF-8 is decoded
       as UTF-8 and anything else with the legacy encoding.

    Attributes:
        mode (NoBomTextMode): Policy for buffers without a BOM.
        legacy_encoding (str): Codec used for the legacy fallback.

    Example:
        >>> decoder = TextDecoder(legacy_encoding="cp1251")
        >>> decoder.decode("héllo".encode("utf-8"))
        'héllo'
        >>> decoder.decode("Привет".encode("cp1251"))
        'Привет'
        >>> decoder.decode(b"")
        ''
    """

    def __init__(
        self,
        mode: NoBomTextMode = NoBomTextMode.AUTO_UTF8_THEN_LOCALE,
        legacy_encoding: Optional[str] = None,
    ) -> None:
        """Initialize the decoder.

        Args:
            mode: Policy for buffers without a byte-order mark.
            legacy_encoding: Codec name for the legacy fallback. Defaults to
                :func:`default_legacy_encoding`.

        Raises:
            LookupError: If legacy_encoding is not a known codec.
        """
        self.mode = NoBomTextMode(mode)
        self.legacy_encoding = codecs.lookup(legacy_encoding or default_legacy_encoding()).name

    def decode(self, data: bytes) -> str:
        """Decode a byte buffer into text. Never raises for any input.

        Args:
            data: Raw bytes, typically the full content of a file.

        Returns:
            The decoded text.
        """
        if not data:
            return ""

        for bom, codec, unit in BOMS:
            if data.startswith(bom):
                payload = data[len(bom) :]  # noqa: E203
                usable = len(payload) - len(payload) % unit
                return payload[:usable].decode(codec, errors="replace")

        if self.mode == NoBomTextMode.AUTO_UTF8_THEN_LOCALE and is_valid_utf8(data):
            return data.decode("utf-8")

        return self.decode_legacy(data)

    def decode_legacy(self, data: bytes) -> str:
        """Decode with the legacy encoding, replacing bytes the code page does not map."""
        return data.decode(self.legacy_encoding, errors="replace")


def decode_bytes(
    data: bytes,
    mode: NoBomTextMode = NoBomTextMode.AUTO_UTF8_THEN_LOCALE,
    legacy_encoding: Optional[str] = None,
) -> str:
    r"""Decode bytes with a one-off TextDecoder.

    Example:
        >>> decode_bytes(b"\xef\xbb\xbfhello")
        'hello'
        >>> decode_bytes(b"\xff\xfeh\x00i\x00")
        'hi'
    """
    return TextDecoder(mode, legacy_encoding).decode(data)
