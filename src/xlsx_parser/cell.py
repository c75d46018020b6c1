from dataclasses import dataclass
from typing import Optional, Union

from xlsx_parser.constants import DEFAULT_STYLE_INDEX, CellDataType
from xlsx_parser.xref_utils import xl_rowcol_to_cell

__all__ = ["Cell", "Formula"]

CellValue = Union[None, int, float, str]


@dataclass
class Formula:
    """The formula text of a cell and the optional attributes declared with it."""

    text: str
    type: Optional[str] = None
    ref: Optional[str] = None
    shared_index: Optional[str] = None

    @property
    def attributes(self) -> dict:
        """dict: The declared attributes keyed by their names in the worksheet part."""
        attrs = {"t": self.type, "ref": self.ref, "si": self.shared_index}
        return {k: v for k, v in attrs.items() if v is not None}


class Cell:
    """.. NOTE::
    Do not instantiate directly. Cells are created by the worksheet decoder.
    """

    __slots__ = ("worksheet", "row", "col", "value", "datatype", "formula", "style_index")

    def __init__(  # noqa: PLR0913
        self,
        worksheet: object,
        row: int,
        col: int,
        value: CellValue = None,
        formula: Optional[Formula] = None,
        datatype: CellDataType = CellDataType.NUMERIC,
        style_index: int = DEFAULT_STYLE_INDEX,
    ) -> None:
        self.worksheet = worksheet
        self.row = row
        self.col = col
        self.value = value
        self.formula = formula
        self.datatype = datatype
        self.style_index = style_index

    def __repr__(self) -> str:
        return (
            f"<Cell {self.coordinate} datatype={self.datatype.name} "
            f"value={self.value!r} style={self.style_index}>"
        )

    @property
    def coordinate(self) -> str:
        """str: The cell's address in A1 notation."""
        return xl_rowcol_to_cell(self.row, self.col)

    @property
    def is_empty(self) -> bool:
        """bool: ``True`` if the cell exists but holds no value."""
        return self.value is None

    @property
    def is_formula(self) -> bool:
        """bool: ``True`` if the cell contains a formula."""
        return self.formula is not None
