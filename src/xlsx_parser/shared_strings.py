import logging
from pathlib import Path
from typing import Dict, List, Optional

from xlsx_parser import __name__ as xlsx_parser_name
from xlsx_parser.exceptions import DecodeError, SharedStringIndexError, UnsupportedError
from xlsx_parser.xml_utils import EventKind, XmlCursor, joined_text

logger = logging.getLogger(xlsx_parser_name)
debug = logger.debug


class SharedStringTable:
    """
    Strings shared between cells, indexed in the order they are declared.

    The reverse mapping from text to index is only kept when the table is
    not read-only. When a string is declared more than once, the reverse
    mapping refers to its first index.
    """

    def __init__(self, read_only: bool = False, part: str = "") -> None:
        self.read_only = read_only
        self.part = part
        self._by_index: List[str] = []
        self._by_value: Optional[Dict[str, int]] = None if read_only else {}
        # Declared in the part's <sst> element; not checked against the data
        self.count: Optional[int] = None
        self.unique_count: Optional[int] = None
        self.xml: Optional[str] = None

    def __len__(self) -> int:
        return len(self._by_index)

    def __contains__(self, value: str) -> bool:
        if self._by_value is None:
            return value in self._by_index
        return value in self._by_value

    def intern_existing(self, index: int, value: str) -> None:
        """Record a string read from the document at its declared index."""
        if index != len(self._by_index):
            msg = f"shared string {index} declared out of order"
            raise DecodeError(self.part, msg)
        self._by_index.append(value)
        if self._by_value is not None and value not in self._by_value:
            self._by_value[value] = index

    def lookup_by_index(self, index: int) -> str:
        if not 0 <= index < len(self._by_index):
            msg = f"shared string index {index} out of range (table has {len(self)} strings)"
            raise SharedStringIndexError(self.part, msg)
        return self._by_index[index]

    def reverse_lookup(self, value: str) -> Optional[int]:
        """Return the index of a string, or ``None`` if it is not in the table."""
        if self._by_value is None:
            msg = "reverse lookup is not available for read-only shared strings"
            raise UnsupportedError(msg)
        return self._by_value.get(value)


def _declared_count(value: Optional[str], part: str, attr: str) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        msg = f"invalid {attr} '{value}'"
        raise DecodeError(part, msg) from None


def load_shared_strings(path: Path, part: str, read_only: bool = False) -> SharedStringTable:
    """
    Stream a shared strings part into a table. Returns an empty table if
    the part does not exist.
    """
    table = SharedStringTable(read_only=read_only, part=part)
    if not path.is_file():
        debug("load_shared_strings: no part %s", part)
        return table

    debug("load_shared_strings: phase 1, part=%s", part)
    if not read_only:
        table.xml = path.read_text(encoding="utf-8")

    debug("load_shared_strings: phase 2, part=%s", part)
    with path.open(mode="rb") as fh:
        cursor = XmlCursor(fh, part)
        for event in cursor:
            if event.kind == EventKind.START and event.name == "sst":
                table.count = _declared_count(event.attrib.get("count"), part, "count")
                table.unique_count = _declared_count(
                    event.attrib.get("uniqueCount"), part, "uniqueCount"
                )
            elif event.kind == EventKind.START and event.name == "si":
                element = cursor.skip()
                table.intern_existing(len(table), joined_text(element))
                cursor.release()

    debug("load_shared_strings: %d strings", len(table))
    return table
