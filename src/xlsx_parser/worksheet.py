from typing import Dict, Iterator, List, Optional

from xlsx_parser.cell import Cell, CellValue
from xlsx_parser.sheet_data import SheetData
from xlsx_parser.xref_utils import xl_cell_to_rowcol

__all__ = ["Worksheet"]


class Worksheet:
    """
    A worksheet's cells and the metadata decoded with them.

    View settings, column definitions, merges, validations, the legacy
    drawing reference and the extension list are only decoded when the
    workbook is loaded without ``data_only`` and are otherwise ``None``.
    They are the decoded XML records of those blocks.
    """

    def __init__(self, workbook: object, name: str = "") -> None:
        self.workbook = workbook
        self.name = name
        self.sheet_data = SheetData()
        self.row_styles: Dict[int, Dict] = {}
        self.row_heights: Dict[int, float] = {}
        self.sheet_view: Optional[Dict] = None
        self.pane: Optional[Dict] = None
        self.cols: Optional[List[Dict]] = None
        self.merged_cells: Optional[List[Dict]] = None
        self.validations: Optional[List[Dict]] = None
        self.legacy_drawing: Optional[Dict] = None
        self.ext_lst: Optional[Dict] = None

    def __repr__(self) -> str:
        return f"<Worksheet '{self.name}'>"

    def cell(self, *args) -> Optional[Cell]:
        """
        Return a single cell, or ``None`` if no cell is stored at that address.

        The ``cell()`` method supports two forms of notation to designate the position
        of cells: **Row-column** notation and **A1** notation:

        .. code-block:: python

            (0, 0)      # Row-column notation.
            ("A1")      # The same cell in A1 notation.

        Raises
        ------
        IndexError:
            If the reference is not a valid cell address.
        """
        if isinstance(args[0], str):
            (row, col) = xl_cell_to_rowcol(args[0])
            if row < 0:
                msg = f"invalid cell reference {args[0]}"
                raise IndexError(msg)
        elif len(args) != 2:
            msg = "invalid cell reference " + str(args)
            raise IndexError(msg)
        else:
            (row, col) = args
        return self.sheet_data.get(row, col)

    def rows(self, values_only: bool = False) -> List[List]:
        """Return all rows of the sheet padded to the widest row; missing cells are ``None``."""
        if values_only:
            return [[c.value if c is not None else None for c in row] for row in self.sheet_data.rows()]
        return self.sheet_data.rows()

    def iter_cells(self) -> Iterator[Cell]:
        """Yield every stored cell in row-major order."""
        return iter(self.sheet_data)

    def values(self) -> List[List[CellValue]]:
        return self.rows(values_only=True)

    def change_row_height(self, row: int, height: float) -> None:
        self.row_heights[row] = height

    def row_height(self, row: int) -> Optional[float]:
        """Return a row's custom height, or ``None`` if the row uses the default height."""
        return self.row_heights.get(row)
