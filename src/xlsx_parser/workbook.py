from pathlib import Path
from typing import Dict, List, Optional, Union

import pendulum
from pendulum import DateTime

from xlsx_parser.constants import EPOCH_1900, EPOCH_1904, SECONDS_IN_DAY
from xlsx_parser.shared_strings import SharedStringTable
from xlsx_parser.styles import StyleTables
from xlsx_parser.worksheet import Worksheet

__all__ = ["Workbook"]

Blobs = Optional[Union[bytes, Dict[int, bytes]]]


class ItemsList:
    """A list of worksheets that can also be indexed by worksheet name."""

    def __init__(self, items: Optional[List] = None) -> None:
        self._items = list(items or [])

    def __getitem__(self, key: Union[int, str]):
        if isinstance(key, int):
            if key < 0:
                key += len(self._items)
            if key < 0 or key >= len(self._items):
                msg = f"index {key} out of range"
                raise IndexError(msg)
            return self._items[key]
        elif isinstance(key, str):
            for item in self._items:
                if item.name == key:
                    return item
            msg = f"no worksheet named '{key}'"
            raise KeyError(msg)
        else:
            t = type(key).__name__
            msg = f"invalid index type {t}"
            raise LookupError(msg)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def __contains__(self, key: str) -> bool:
        return key.lower() in [x.name.lower() for x in self._items]

    def append(self, item) -> None:
        self._items.append(item)

    @property
    def names(self) -> List[str]:
        return [x.name for x in self._items]


class Workbook:
    """
    An Excel document decoded by :func:`xlsx_parser.load_workbook`.

    Document properties, styles and the preserved parts (external links,
    drawings, printer settings, worksheet relationships and macros) are
    only populated when the document is loaded without ``data_only``.
    Preserved directories are dicts of file contents keyed from 1; the
    macro project is bytes. Parts that are not present are ``None``.
    """

    def __init__(self, filepath: Optional[Path] = None, data_only: bool = False, read_only: bool = False):
        self.filepath = filepath
        self.data_only = data_only
        self.read_only = read_only
        self.worksheets = ItemsList()
        self.shared_strings = SharedStringTable(read_only=read_only)
        self.styles: Optional[StyleTables] = None
        self.defined_names = ""
        self.date1904 = False

        self.creator: Optional[str] = None
        self.modifier: Optional[str] = None
        self.created_at: Optional[str] = None
        self.modified_at: Optional[str] = None
        self.company: Optional[str] = None
        self.application: Optional[str] = None
        self.appversion: Optional[str] = None

        self.external_links: Blobs = None
        self.drawings: Blobs = None
        self.printer_settings: Blobs = None
        self.worksheet_rels: Blobs = None
        self.macros: Blobs = None

    def __repr__(self) -> str:
        return f"<Workbook '{self.filepath}' worksheets={self.worksheets.names}>"

    def __getitem__(self, key: Union[int, str]) -> Worksheet:
        return self.worksheets[key]

    @property
    def epoch(self) -> DateTime:
        """DateTime: Day zero of the workbook's date system."""
        return EPOCH_1904 if self.date1904 else EPOCH_1900

    def to_datetime(self, serial: Union[int, float]) -> DateTime:
        """Convert a date serial number stored in a cell to a date and time."""
        return self.epoch.add(seconds=round(serial * SECONDS_IN_DAY))

    @property
    def created(self) -> Optional[DateTime]:
        return _parse_timestamp(self.created_at)

    @property
    def modified(self) -> Optional[DateTime]:
        return _parse_timestamp(self.modified_at)


def _parse_timestamp(value: Optional[str]) -> Optional[DateTime]:
    if not value:
        return None
    return pendulum.parse(value)
