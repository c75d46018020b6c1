import re
from typing import NamedTuple

from xlsx_parser.xlsx_cache import Cacheable, cache

CELL_REF_RE = re.compile(r"^([A-Z]+)([0-9]+)$")


class CellAddress(NamedTuple):
    row: int
    column: int

    @property
    def is_valid(self) -> bool:
        return self.row >= 0 and self.column >= 0


INVALID_ADDRESS = CellAddress(-1, -1)


class CellAddressCodec(Cacheable):
    """
    Decode A1 notation cell labels into zero indexed row and column pairs.

    Column letters are memoized per codec instance. The mapping depends only
    on the alphabet so a single instance can be shared across documents.
    """

    @cache()
    def col_offset(self, col_str: str) -> int:
        """Convert base26 column letters (A=1 .. Z=26) to a zero indexed column."""
        col = 0
        for expn, char in enumerate(reversed(col_str)):
            col += (ord(char) - ord("A") + 1) * (26**expn)
        return col - 1

    def decode(self, cell_str: str) -> CellAddress:
        """
        Convert a cell reference in A1 notation to a zero indexed row and column.

        Parameters
        ----------
        cell_str:  str
            A1 notation cell reference such as ``AA1``. Absolute references
            and ranges are not accepted.

        Returns
        -------
        CellAddress:
            Cell row and column numbers (zero indexed), or ``(-1, -1)`` if
            ``cell_str`` is not a valid cell reference.
        """
        if not isinstance(cell_str, str):
            return INVALID_ADDRESS
        match = CELL_REF_RE.match(cell_str)
        if not match:
            return INVALID_ADDRESS

        row = int(match.group(2)) - 1
        if row < 0:
            return INVALID_ADDRESS
        return CellAddress(row, self.col_offset(match.group(1)))


_codec = CellAddressCodec()


def xl_cell_to_rowcol(cell_str: str) -> CellAddress:
    """Decode ``cell_str`` using the process-wide codec. See :meth:`CellAddressCodec.decode`."""
    return _codec.decode(cell_str)


def xl_rowcol_to_cell(row, col, row_abs=False, col_abs=False):
    """
    Convert a zero indexed row and column cell reference to a A1 style string.

    Raises
    ------
    IndexError:
        If the row or column is negative.
    """
    if row < 0:
        msg = f"row reference {row} below zero"
        raise IndexError(msg)

    if col < 0:
        msg = f"column reference {col} below zero"
        raise IndexError(msg)

    row_abs = "$" if row_abs else ""
    return xl_col_to_name(col, col_abs) + row_abs + str(row + 1)


def xl_col_to_name(col, col_abs=False):
    """Convert a zero indexed column number to column letters, e.g. ``26`` to ``AA``."""
    if col < 0:
        msg = f"column reference {col} below zero"
        raise IndexError(msg)

    col += 1
    col_str = ""
    while col:
        col, remainder = divmod(col - 1, 26)
        col_str = chr(ord("A") + remainder) + col_str

    return ("$" if col_abs else "") + col_str
