"""Strict, byte-exact UTF-8 validation."""


def is_valid_utf8(data: bytes) -> bool:
    r"""Check whether a byte buffer is strictly valid UTF-8.

    The buffer is walked one sequence at a time. Bytes 0x00-0x7F are single-byte
    sequences; lead bytes of the form 110xxxxx, 1110xxxx and 11110xxx announce 2, 3 and
    4 byte sequences. Any other lead byte, any continuation byte not of the form
    10xxxxxx, and a sequence cut off by the end of the buffer make the buffer invalid.
    The assembled code point must also use the shortest possible encoding, must not
    be a UTF-16 surrogate (0xD800-0xDFFF) and must not exceed 0x10FFFF.

    Args:
        data: The bytes to validate.

    Returns:
        True if every byte is consumed by a well-formed sequence, False otherwise.

    Example:
        >>> is_valid_utf8(b"plain ascii")
        True
        >>> is_valid_utf8("Привет".encode("utf-8"))
        True
        >>> is_valid_utf8(b"\xc0\x80")  # overlong NUL
        False
        >>> is_valid_utf8(b"\xed\xa0\x80")  # surrogate U+D800
        False
        >>> is_valid_utf8(b"\xe2\x82")  # truncated
        False
    """
    length = len(data)
    i = 0
    while i < length:
        lead = data[i]

        if lead <= 0x7F:
            i += 1
            continue

        if lead & 0xE0 == 0xC0:
            size, code_point = 2, lead & 0x1F
        elif lead & 0xF0 == 0xE0:
            size, code_point = 3, lead & 0x0F
        elif lead & 0xF8 == 0xF0:
            size, code_point = 4, lead & 0x07
        else:
            return False

        if i + size > length:
            return False

        for k in range(1, size):
            cont = data[i + k]
            if cont & 0xC0 != 0x80:
                return False
            code_point = (code_point << 6) | (cont & 0x3F)

        # Overlong forms
        if size == 2 and code_point < 0x80:
            return False
        if size == 3 and code_point < 0x800:
            return False
        if size == 4 and code_point < 0x10000:
            return False

        if 0xD800 <= code_point <= 0xDFFF:
            return False
        if code_point > 0x10FFFF:
            return False

        i += size

    return True
