import logging
import re
from pathlib import Path
from typing import List, Union
from xml.etree import ElementTree as ET

from xlsx_parser import __name__ as xlsx_parser_name
from xlsx_parser.constants import (
    APP_PART,
    CORE_PART,
    DRAWINGS_DIR,
    EXTERNAL_LINKS_DIR,
    MACROS_PART,
    NS,
    PRINTER_SETTINGS_DIR,
    SHARED_STRINGS_PART,
    STYLES_PART,
    WORKBOOK_PART,
    WORKSHEET_PART,
    WORKSHEET_RELS_DIR,
)
from xlsx_parser.exceptions import MissingPartError
from xlsx_parser.package import XlsxPackage
from xlsx_parser.shared_strings import load_shared_strings
from xlsx_parser.styles import load_styles
from xlsx_parser.workbook import Workbook
from xlsx_parser.worksheet_parser import parse_worksheet
from xlsx_parser.xml_utils import parse_xml
from xlsx_parser.xref_utils import CellAddressCodec

__all__ = ["load_workbook"]

logger = logging.getLogger(xlsx_parser_name)
debug = logger.debug

DEFINED_NAMES_RE = re.compile(
    r"<(?:\w+:)?definedNames\b(?:[^>]*/>|.*?</(?:\w+:)?definedNames>)", re.DOTALL
)


def _text(root: ET.Element, path: str) -> str:
    """Return the text of the first element matching ``path``, or an empty string."""
    element = root.find(path, NS)
    if element is None or element.text is None:
        return ""
    return element.text


class Parser:
    """
    Decode the parts of an Excel document into a :class:`Workbook`.

    Parts are decoded in dependency order: the workbook part, document
    properties, styles, shared strings and then each worksheet. The
    shared strings are complete before any worksheet is decoded.

    Parameters
    ----------
    filepath: str | Path
        The ``.xlsx`` or ``.xlsm`` document, or a directory containing an
        extracted document.
    data_only: bool, optional, default: False
        Decode only cell data, skipping document properties, styles,
        worksheet metadata and preserved parts.
    read_only: bool, optional, default: False
        Reduce memory use by not retaining what is only needed to modify
        the document, such as the reverse shared strings index.
    """

    def __init__(self, filepath: Union[str, Path], data_only: bool = False, read_only: bool = False):
        self._filepath = Path(filepath)
        self._data_only = data_only
        self._read_only = read_only
        self._codec = CellAddressCodec()

    def parse(self) -> Workbook:
        """
        Raises
        ------
        FileFormatError:
            If the file is not an Excel document.
        FileError:
            If the file does not exist.
        MissingPartError:
            If a part required in the chosen mode is not in the document.
        DecodeError:
            If any part cannot be decoded.
        """
        with XlsxPackage(self._filepath) as package:
            return self._parse_package(package)

    def _parse_package(self, package: XlsxPackage) -> Workbook:
        wb = Workbook(self._filepath, data_only=self._data_only, read_only=self._read_only)

        num_sheets = self._parse_workbook_part(wb, package)
        sheet_names = self._parse_app_part(wb, package)
        if not self._data_only:
            self._parse_core_part(wb, package)

            wb.styles = load_styles(package.part_path(STYLES_PART), STYLES_PART)
            if wb.styles is None:
                raise MissingPartError(STYLES_PART)

        wb.shared_strings = load_shared_strings(
            package.part_path(SHARED_STRINGS_PART), SHARED_STRINGS_PART, read_only=self._read_only
        )

        if not self._data_only:
            wb.external_links = package.read_blobs(EXTERNAL_LINKS_DIR)
            wb.drawings = package.read_blobs(DRAWINGS_DIR)
            wb.printer_settings = package.read_blobs(PRINTER_SETTINGS_DIR)
            wb.worksheet_rels = package.read_blobs(WORKSHEET_RELS_DIR)
            wb.macros = package.read_blobs(MACROS_PART)

        if len(sheet_names) < num_sheets:
            msg = f"{len(sheet_names)} worksheet titles for {num_sheets} worksheets"
            raise MissingPartError(APP_PART, msg)

        num_cell_formats = wb.styles.num_cell_formats if wb.styles is not None else None
        for i in range(num_sheets):
            part = WORKSHEET_PART.format(i + 1)
            if not package.has_part(part):
                raise MissingPartError(part)
            path = package.part_path(part)
            worksheet = parse_worksheet(
                wb,
                path,
                part,
                name=sheet_names[i],
                data_only=self._data_only,
                num_cell_formats=num_cell_formats,
                codec=self._codec,
            )
            wb.worksheets.append(worksheet)

        return wb

    def _parse_workbook_part(self, wb: Workbook, package: XlsxPackage) -> int:
        path = package.part_path(WORKBOOK_PART)
        root = parse_xml(path, WORKBOOK_PART)
        if root is None:
            raise MissingPartError(WORKBOOK_PART)

        sheets = root.find("a:sheets", NS)
        num_sheets = 0 if sheets is None else len(sheets.findall("a:sheet", NS))

        match = DEFINED_NAMES_RE.search(path.read_text(encoding="utf-8"))
        wb.defined_names = match.group(0) if match else ""

        workbook_pr = root.find("a:workbookPr", NS)
        date1904 = "" if workbook_pr is None else workbook_pr.attrib.get("date1904", "")
        wb.date1904 = date1904.lower() in ("1", "true")
        debug("parse_workbook: sheets=%d, date1904=%s", num_sheets, wb.date1904)
        return num_sheets

    def _parse_app_part(self, wb: Workbook, package: XlsxPackage) -> List[str]:
        root = parse_xml(package.part_path(APP_PART), APP_PART)
        if root is None:
            raise MissingPartError(APP_PART)

        sheet_names = [
            lpstr.text or ""
            for lpstr in root.findall("ep:TitlesOfParts/vt:vector/vt:lpstr", NS)
        ]
        if not self._data_only:
            wb.company = _text(root, "ep:Company")
            wb.application = _text(root, "ep:Application")
            wb.appversion = _text(root, "ep:AppVersion")
        return sheet_names

    def _parse_core_part(self, wb: Workbook, package: XlsxPackage) -> None:
        root = parse_xml(package.part_path(CORE_PART), CORE_PART)
        if root is None:
            raise MissingPartError(CORE_PART)

        wb.creator = _text(root, "dc:creator")
        wb.modifier = _text(root, "cp:lastModifiedBy")
        wb.created_at = _text(root, "dcterms:created")
        wb.modified_at = _text(root, "dcterms:modified")


def load_workbook(
    filename: Union[str, Path], data_only: bool = False, read_only: bool = False
) -> Workbook:
    """
    Read an Excel document.

    Parameters
    ----------
    filename: str | Path
        Path to a ``.xlsx`` or ``.xlsm`` document.
    data_only: bool, optional, default: False
        Only decode cell values, types and formulas. Dates are not
        distinguished from numbers without the styles.
    read_only: bool, optional, default: False
        Lower the memory footprint by dropping data only needed to modify
        the document.

    Returns
    -------
    Workbook:
        The decoded document.

    Example
    -------

    .. code-block:: python

        >>> wb = load_workbook("accounts.xlsx")
        >>> wb.worksheets[0].cell("B2").value
        1234.5
    """
    return Parser(filename, data_only=data_only, read_only=read_only).parse()
