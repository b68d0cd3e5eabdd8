"""Small helpers shared by the streaming Office Open XML parsers."""

import xml.etree.ElementTree as ET
from typing import IO, Iterator, Optional, Tuple


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix from an element or attribute name.

    Example:
        >>> local_name("{http://schemas.openxmlformats.org/wordprocessingml/2006/main}t")
        't'
        >>> local_name("row")
        'row'
    """
    return tag.rpartition("}")[2]


def namespaced_attribute(elem: ET.Element, name: str) -> Optional[str]:
    """Return the value of a namespaced attribute by local name (e.g. ``r:id``)."""
    for key, value in elem.attrib.items():
        if key.startswith("{") and local_name(key) == name:
            return value
    return None


def iter_events(source: IO[bytes]) -> Iterator[Tuple[str, ET.Element, str]]:
    """Pull start/end events from an XML stream.

    Yields:
        Tuples of (event, element, local name) where event is "start" or "end".

    Raises:
        xml.etree.ElementTree.ParseError: If the document is malformed.
    """
    for event, elem in ET.iterparse(source, events=("start", "end")):
        yield event, elem, local_name(elem.tag)
