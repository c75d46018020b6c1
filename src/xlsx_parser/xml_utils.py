import logging
from enum import IntEnum
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Union
from xml.etree import ElementTree as ET

from xlsx_parser import __name__ as xlsx_parser_name
from xlsx_parser.exceptions import DecodeError

logger = logging.getLogger(xlsx_parser_name)
debug = logger.debug


def local_name(tag: str) -> str:
    """Return an element tag without its namespace."""
    if "}" in tag:
        return tag.rsplit("}", 1)[1]
    return tag


def parse_xml(path: Path, part: str) -> Optional[ET.Element]:
    """Parse a package part into an element tree, returning ``None`` if the part does not exist."""
    if not path.is_file():
        return None

    debug("parse_xml: part=%s", part)
    try:
        with path.open(mode="rb") as fh:
            return ET.parse(fh).getroot()
    except ET.ParseError as e:
        raise DecodeError(part, f"invalid XML ({e})") from e


def xml_node_to_dict(element: Optional[ET.Element]) -> Optional[Dict]:
    """
    Convert an element and its subtree to nested dicts.

    Every record has an ``attributes`` dict. Child elements are keyed by
    their local name: a single child is stored as a record, repeated
    children as a list of records. Non-blank text is stored under ``text``.
    """
    if element is None:
        return None

    record = {"attributes": {local_name(k): v for k, v in element.attrib.items()}}
    text = (element.text or "").strip()
    if text:
        record["text"] = text
    for child in element:
        name = local_name(child.tag)
        value = xml_node_to_dict(child)
        if name not in record:
            record[name] = value
        elif isinstance(record[name], list):
            record[name].append(value)
        else:
            record[name] = [record[name], value]
    return record


def as_list(value) -> list:
    """Normalize a record that may be absent, single or repeated into a list."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def joined_text(element: ET.Element) -> str:
    """Concatenate the <t> runs of a string item, ignoring phonetic runs."""
    texts = []
    for child in element:
        name = local_name(child.tag)
        if name == "t":
            texts.append(child.text or "")
        elif name == "r":
            texts.extend(t.text or "" for t in child if local_name(t.tag) == "t")
    return "".join(texts)


class EventKind(IntEnum):
    START = 1
    END = 2


class XmlEvent(NamedTuple):
    kind: EventKind
    name: str
    element: ET.Element
    depth: int

    @property
    def attrib(self) -> Dict[str, str]:
        return self.element.attrib

    @property
    def text(self) -> str:
        """str: Element text. Only complete once the element's END event is seen."""
        return self.element.text or ""


class XmlCursor:
    """
    Forward-only cursor over the start and end events of an XML stream.

    Elements are built incrementally; call :meth:`release` once an
    element has been consumed to keep memory bounded.
    """

    def __init__(self, source: Union[str, Path, object], part: str) -> None:
        self._events = ET.iterparse(source, events=("start", "end"))
        self._last = None
        self._open: List[ET.Element] = []
        self.part = part
        self.depth = 0

    def __iter__(self):
        return self

    def __next__(self) -> XmlEvent:
        try:
            event, element = next(self._events)
        except ET.ParseError as e:
            raise DecodeError(self.part, f"invalid XML ({e})") from e

        if event == "start":
            self._open.append(element)
            self.depth += 1
            self._last = XmlEvent(EventKind.START, local_name(element.tag), element, self.depth)
        else:
            self._last = XmlEvent(EventKind.END, local_name(element.tag), element, self.depth)
            self._open.pop()
            self.depth -= 1
        return self._last

    def skip(self) -> Optional[ET.Element]:
        """
        Advance to the end of the most recently opened element and return it
        with its subtree complete. Does nothing if the last event was not a
        start event.
        """
        if self._last is None or self._last.kind != EventKind.START:
            return None

        depth = self._last.depth
        for event in self:
            if event.kind == EventKind.END and event.depth == depth:
                return event.element
        return None  # pragma: no cover

    def release(self) -> None:
        """
        Clear the element that has just ended and detach it from its parent.
        Does nothing if the last event was not an end event.
        """
        if self._last is None or self._last.kind != EventKind.END:
            return

        element = self._last.element
        element.clear()
        if self._open:
            self._open[-1].remove(element)
