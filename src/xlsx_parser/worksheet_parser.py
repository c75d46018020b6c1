import logging
from enum import IntEnum
from pathlib import Path
from typing import Optional
from warnings import warn

from xlsx_parser import __name__ as xlsx_parser_name
from xlsx_parser.cell import Cell, Formula
from xlsx_parser.constants import (
    DEFAULT_ROW_STYLE,
    DEFAULT_STYLE_INDEX,
    WORKSHEET_METADATA_TAGS,
    CellDataType,
)
from xlsx_parser.exceptions import (
    DecodeError,
    SharedStringIndexError,
    StyleIndexError,
    TypeCoercionWarning,
)
from xlsx_parser.shared_strings import SharedStringTable
from xlsx_parser.worksheet import Worksheet
from xlsx_parser.xml_utils import (
    EventKind,
    XmlCursor,
    XmlEvent,
    as_list,
    joined_text,
    xml_node_to_dict,
)
from xlsx_parser.xref_utils import CellAddressCodec

logger = logging.getLogger(xlsx_parser_name)
debug = logger.debug

_CELL_DATA_TYPES = {t.value: t for t in CellDataType}


class DecoderState(IntEnum):
    OUTSIDE = 1
    WORKSHEET = 2
    SHEET_DATA = 3
    ROW = 4
    CELL = 5
    DONE = 6


class WorksheetParser:
    """
    Single forward pass over a worksheet part that fills in a :class:`Worksheet`.

    Rows and cells are decoded from the event stream and discarded as soon
    as they are complete. In full-fidelity mode the metadata blocks that are
    siblings of ``<sheetData>`` are captured as decoded records.
    A cell whose value cannot be converted to a number is kept without a
    value and reported with a :class:`TypeCoercionWarning`.

    Parameters
    ----------
    worksheet: Worksheet
        The worksheet to populate.
    shared_strings: SharedStringTable
        Finalized shared strings; only read by the parser.
    part: str
        Name of the part being decoded, used in error messages.
    data_only: bool, optional, default: False
        Skip all metadata, row styles and heights, and cell style indexes.
    num_cell_formats: int, optional
        Number of cell formats defined by the workbook's styles. When given,
        cell style indexes are checked against it.
    codec: CellAddressCodec, optional
        Codec used to decode cell addresses.
    """

    def __init__(  # noqa: PLR0913
        self,
        worksheet: Worksheet,
        shared_strings: SharedStringTable,
        part: str,
        data_only: bool = False,
        num_cell_formats: Optional[int] = None,
        codec: Optional[CellAddressCodec] = None,
    ) -> None:
        self.worksheet = worksheet
        self.shared_strings = shared_strings
        self.part = part
        self.data_only = data_only
        self.num_cell_formats = num_cell_formats
        self.codec = codec or CellAddressCodec()
        self.state = DecoderState.OUTSIDE
        self._row = -1
        self._row_cells = 0
        self._cell = None
        self._value_text = None
        self._inline_text = None

    def parse(self, path: Path) -> Worksheet:
        debug("parse_worksheet: part=%s", self.part)
        with path.open(mode="rb") as fh:
            cursor = XmlCursor(fh, self.part)
            for event in cursor:
                if event.kind == EventKind.START:
                    self._on_start(event, cursor)
                else:
                    self._on_end(event, cursor)
                if self.state == DecoderState.DONE:
                    break
        debug("parse_worksheet: done, part=%s", self.part)
        return self.worksheet

    def _on_start(self, event: XmlEvent, cursor: XmlCursor) -> None:  # noqa: PLR0912
        name = event.name
        if self.state == DecoderState.OUTSIDE:
            if name == "worksheet":
                self.state = DecoderState.WORKSHEET
        elif self.state == DecoderState.WORKSHEET:
            if name == "sheetData":
                self.state = DecoderState.SHEET_DATA
            else:
                element = cursor.skip()
                if not self.data_only and name in WORKSHEET_METADATA_TAGS:
                    self._capture_metadata(name, element)
                cursor.release()
        elif self.state == DecoderState.SHEET_DATA:
            if name == "row":
                self._start_row(event)
                self.state = DecoderState.ROW
            else:
                cursor.skip()
                cursor.release()
        elif self.state == DecoderState.ROW:
            if name == "c":
                self._start_cell(event, cursor)
            else:
                cursor.skip()
                cursor.release()
        elif self.state == DecoderState.CELL:
            element = cursor.skip()
            if name == "v":
                self._value_text = element.text or ""
            elif name == "f":
                self._set_formula(element)
            elif name == "is":
                self._inline_text = joined_text(element)
            cursor.release()

    def _on_end(self, event: XmlEvent, cursor: XmlCursor) -> None:
        if self.state == DecoderState.CELL and event.name == "c":
            self._finish_cell()
            cursor.release()
            self.state = DecoderState.ROW
        elif self.state == DecoderState.ROW and event.name == "row":
            if self._row_cells == 0:
                self.worksheet.sheet_data.clear_row(self._row)
            cursor.release()
            self.state = DecoderState.SHEET_DATA
        elif self.state == DecoderState.SHEET_DATA and event.name == "sheetData":
            cursor.release()
            self.state = DecoderState.WORKSHEET
        elif self.state == DecoderState.WORKSHEET and event.name == "worksheet":
            self.state = DecoderState.DONE

    def _capture_metadata(self, name: str, element) -> None:
        ws = self.worksheet
        if name == "sheetViews":
            views = as_list(xml_node_to_dict(element).get("sheetView"))
            if views:
                ws.sheet_view = views[0]
                ws.pane = ws.sheet_view.get("pane")
        elif name == "cols":
            ws.cols = as_list(xml_node_to_dict(element).get("col"))
        elif name == "mergeCells":
            ws.merged_cells = as_list(xml_node_to_dict(element).get("mergeCell")) or None
        elif name == "dataValidations":
            ws.validations = as_list(xml_node_to_dict(element).get("dataValidation")) or None
        elif name == "extLst":
            ws.ext_lst = xml_node_to_dict(element)
        elif name == "legacyDrawing":
            ws.legacy_drawing = xml_node_to_dict(element)

    def _start_row(self, event: XmlEvent) -> None:
        row_ref = event.attrib.get("r")
        if row_ref is None:
            self._row += 1
        else:
            self._row = self._parse_int(row_ref, "row number") - 1
        self._row_cells = 0

        if self.data_only:
            return

        style = event.attrib.get("s") or str(DEFAULT_ROW_STYLE)
        self.worksheet.row_styles[self._row] = {"style": self._parse_int(style, "row style")}
        height = event.attrib.get("ht")
        if height is not None and height.strip() != "":
            try:
                self.worksheet.change_row_height(self._row, float(height))
            except ValueError:
                msg = f"row {self._row + 1}: invalid row height '{height}'"
                raise DecodeError(self.part, msg) from None

    def _start_cell(self, event: XmlEvent, cursor: XmlCursor) -> None:
        label = event.attrib.get("r")
        row, col = self.codec.decode(label)
        if row < 0:
            debug("parse_worksheet: %s: skipping cell with invalid reference %s", self.part, label)
            cursor.skip()
            cursor.release()
            return

        sheet_data = self.worksheet.sheet_data
        cell = sheet_data.read(row, col)
        if cell is None:
            cell = Cell(self.worksheet, row, col)
            sheet_data.write(row, col, cell)
        else:
            cell.value = None
            cell.formula = None
            cell.style_index = DEFAULT_STYLE_INDEX

        cell.datatype = _CELL_DATA_TYPES.get(event.attrib.get("t", ""), CellDataType.NUMERIC)
        if not self.data_only:
            style = event.attrib.get("s")
            if style:
                cell.style_index = self._style_index(style, cell)

        self._cell = cell
        self._row_cells += 1
        self._value_text = None
        self._inline_text = None
        self.state = DecoderState.CELL

    def _set_formula(self, element) -> None:
        text = element.text
        if not text:
            return
        self._cell.formula = Formula(
            text,
            type=element.attrib.get("t"),
            ref=element.attrib.get("ref"),
            shared_index=element.attrib.get("si"),
        )

    def _finish_cell(self) -> None:
        cell = self._cell
        text = self._value_text

        if cell.datatype == CellDataType.INLINE_STRING:
            cell.value = self._inline_text
        elif text is None or text.strip() == "":
            cell.value = None
        elif cell.datatype == CellDataType.SHARED_STRING:
            cell.value = self._shared_string(text, cell)
        elif cell.datatype in (CellDataType.RAW_STRING, CellDataType.ERROR, CellDataType.DATE):
            cell.value = text
        else:
            cell.datatype = CellDataType.NUMERIC
            cell.value = self._number(text, cell)
        self._cell = None

    def _shared_string(self, text: str, cell: Cell) -> Optional[str]:
        try:
            index = int(text)
        except ValueError:
            self._coercion_failed(text, cell)
            return None
        try:
            return self.shared_strings.lookup_by_index(index)
        except SharedStringIndexError as e:
            msg = f"{cell.coordinate}: shared string index {index} out of range"
            raise SharedStringIndexError(self.part, msg) from e

    def _number(self, text: str, cell: Cell):
        text = text.strip()
        try:
            if any(c in text for c in ".eE"):
                return float(text)
            return int(text)
        except ValueError:
            self._coercion_failed(text, cell)
            return None

    def _coercion_failed(self, text: str, cell: Cell) -> None:
        warn(TypeCoercionWarning(self.part, cell.coordinate, text), stacklevel=2)

    def _style_index(self, style: str, cell: Cell) -> int:
        try:
            index = int(style)
        except ValueError:
            msg = f"{cell.coordinate}: invalid style index '{style}'"
            raise StyleIndexError(self.part, msg) from None
        if self.num_cell_formats is not None and not 0 <= index < self.num_cell_formats:
            msg = f"{cell.coordinate}: style index {index} out of range"
            raise StyleIndexError(self.part, msg)
        return index

    def _parse_int(self, value: str, description: str) -> int:
        try:
            return int(value)
        except ValueError:
            msg = f"invalid {description} '{value}'"
            raise DecodeError(self.part, msg) from None


def parse_worksheet(  # noqa: PLR0913
    workbook: object,
    path: Path,
    part: str,
    name: str = "",
    data_only: bool = False,
    num_cell_formats: Optional[int] = None,
    codec: Optional[CellAddressCodec] = None,
) -> Worksheet:
    """Decode a worksheet part into a new :class:`Worksheet` belonging to ``workbook``."""
    worksheet = Worksheet(workbook, name)
    parser = WorksheetParser(
        worksheet,
        workbook.shared_strings,
        part,
        data_only=data_only,
        num_cell_formats=num_cell_formats,
        codec=codec,
    )
    return parser.parse(path)


__all__ = ["WorksheetParser", "parse_worksheet"]
