class XlsxError(Exception):
    """Base class for other exceptions."""


class UnsupportedError(XlsxError):
    """Raised for features that are not available in the chosen decoding mode."""


class FileError(XlsxError):
    """Raised for IO and other OS errors."""


class FileFormatError(XlsxError):
    """Raised for files that are not Excel documents."""


class MissingPartError(XlsxError):
    """Raised when a part required to decode the document is absent."""

    def __init__(self, part: str, reason: str = "missing required part") -> None:
        self.part = part
        super().__init__(f"{part}: {reason}")


class DecodeError(XlsxError):
    """Raised for parsing errors during file load."""

    def __init__(self, part: str, msg: str) -> None:
        self.part = part
        super().__init__(f"{part}: {msg}")


class SharedStringIndexError(DecodeError, IndexError):
    """Raised when a cell references a shared string that does not exist."""


class StyleIndexError(DecodeError, IndexError):
    """Raised when a style record references a font, fill, border or format that does not exist."""


class TypeCoercionWarning(Warning):
    """Raised when a cell's value cannot be converted to its declared type."""

    def __init__(self, part: str, address: str, value: str) -> None:
        self.part = part
        self.address = address
        self.value = value
        super().__init__(f"{part}: {address}: cannot convert '{value}' to a number")
