"""Character-budget truncation for extracted text."""

TRUNCATION_NOTE = "\n[TRUNCATED: output limit reached]"
SHORT_TRUNCATION_NOTE = "[...]"


def truncate_text(text: str, limit: int) -> str:
    """Cut text so that it fits in limit characters, note included.

    Text within the limit is returned unchanged, as is any text when limit is 0
    (unlimited). Otherwise the text is cut and a truncation note appended; the
    short note is used when the full note would not leave room for any content.
    Limits shorter than the short note itself cut into the note; ReportConfig
    rejects such limits.

    Args:
        text: Extracted text.
        limit: Maximum number of characters, 0 for no limit.

    Returns:
        Text of at most limit characters.

    Example:
        >>> truncate_text("hello world, this is long", 10)
        'hello[...]'
        >>> truncate_text("short", 10)
        'short'
        >>> truncate_text("anything", 0)
        'anything'
    """
    if limit <= 0 or len(text) <= limit:
        return text

    note = TRUNCATION_NOTE if len(TRUNCATION_NOTE) < limit else SHORT_TRUNCATION_NOTE
    keep = max(limit - len(note), 0)
    return (text[:keep] + note)[:limit]
