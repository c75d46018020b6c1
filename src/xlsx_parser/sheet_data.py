from typing import Iterator, List, Optional

from xlsx_parser.cell import Cell


class SheetData:
    """
    Sparse, auto-expanding grid of cells addressed by zero indexed row and column.

    Row storage is allocated the first time a row is read or written. Rows
    that were never touched are ``None`` and iterate as empty rows.
    """

    def __init__(self) -> None:
        self._data: List[Optional[List[Optional[Cell]]]] = []

    def __len__(self) -> int:
        return len(self._data)

    def row(self, row: int) -> List[Optional[Cell]]:
        """Return the storage for a row, allocating it if needed."""
        if row < 0:
            msg = f"row {row} out of range"
            raise IndexError(msg)
        if row >= len(self._data):
            self._data.extend([None] * (row + 1 - len(self._data)))
        if self._data[row] is None:
            self._data[row] = []
        return self._data[row]

    def read(self, row: int, col: int) -> Optional[Cell]:
        """Return the cell at ``(row, col)`` or ``None`` if no cell is stored there."""
        if col < 0:
            msg = f"column {col} out of range"
            raise IndexError(msg)
        cells = self.row(row)
        if col >= len(cells):
            return None
        return cells[col]

    def get(self, row: int, col: int) -> Optional[Cell]:
        """Return the cell at ``(row, col)`` without allocating storage for its row."""
        if not self.is_allocated(row) or not 0 <= col < len(self._data[row]):
            return None
        return self._data[row][col]

    def write(self, row: int, col: int, cell: Optional[Cell]) -> None:
        """Store a cell at ``(row, col)``, replacing any existing cell."""
        if col < 0:
            msg = f"column {col} out of range"
            raise IndexError(msg)
        cells = self.row(row)
        if col >= len(cells):
            cells.extend([None] * (col + 1 - len(cells)))
        cells[col] = cell

    def clear_row(self, row: int) -> None:
        """Drop all storage for a row."""
        if 0 <= row < len(self._data):
            self._data[row] = None

    def is_allocated(self, row: int) -> bool:
        return 0 <= row < len(self._data) and self._data[row] is not None

    @property
    def num_cols(self) -> int:
        return max((len(cells) for cells in self._data if cells is not None), default=0)

    @property
    def num_rows(self) -> int:
        """int: Number of rows up to and including the last row that holds a cell."""
        for row in range(len(self._data) - 1, -1, -1):
            if self._data[row] and any(cell is not None for cell in self._data[row]):
                return row + 1
        return 0

    def rows(self) -> List[List[Optional[Cell]]]:
        """
        Return every row up to the last one holding a cell, each padded with
        ``None`` to the widest row.
        """
        width = self.num_cols
        rows = []
        for cells in self._data[: self.num_rows]:
            cells = cells or []
            rows.append(cells + [None] * (width - len(cells)))
        return rows

    def __iter__(self) -> Iterator[Cell]:
        """Yield the stored cells in row-major order."""
        for cells in self._data:
            if cells is None:
                continue
            for cell in cells:
                if cell is not None:
                    yield cell
