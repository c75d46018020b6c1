import logging
import shutil
import tempfile
from pathlib import Path
from sys import version_info
from typing import Dict, Optional, Union
from zipfile import BadZipFile, ZipFile

from xlsx_parser import __name__ as xlsx_parser_name
from xlsx_parser.constants import IGNORED_PACKAGE_FILES, SUPPORTED_EXTENSIONS
from xlsx_parser.exceptions import FileError, FileFormatError

logger = logging.getLogger(xlsx_parser_name)
debug = logger.debug


def allowed_format(filepath: Path) -> bool:
    """bool: Return ``True`` if the filename extension is a supported Excel format."""
    return filepath.suffix.lower() in SUPPORTED_EXTENSIONS


class XlsxPackage:
    """
    The parts of an Excel document, extracted to a directory.

    Zip containers are extracted to a temporary directory that is removed
    by :meth:`close`. A directory holding an already extracted document is
    read in place and left untouched.

    .. code-block:: python

        with XlsxPackage(Path("report.xlsx")) as package:
            path = package.part_path("xl/workbook.xml")
    """

    def __init__(self, filepath: Path) -> None:
        self._filepath = Path(filepath)
        self._root = None
        self._is_temporary = False

    def __enter__(self) -> "XlsxPackage":
        self.open()
        return self

    def __exit__(self, *_args) -> None:
        self.close()

    @property
    def root(self) -> Path:
        return self._root

    def open(self) -> Path:
        """
        Check the document and make its parts available.

        Raises
        ------
        FileFormatError:
            If the file name does not have an Excel extension or the file
            is not a zip container.
        FileError:
            If the file does not exist.
        """
        filepath = self._filepath
        debug("open: filename=%s", filepath)
        if not allowed_format(filepath):
            msg = "invalid Excel document (not a .xlsx or .xlsm file)"
            raise FileFormatError(msg)
        if not filepath.exists():
            msg = "no such file or directory"
            raise FileError(msg)

        if filepath.is_dir():
            self._root = filepath
            return self._root

        zipf = self._open_zipfile(filepath)
        self._root = Path(tempfile.mkdtemp(prefix="xlsx_parser_"))
        self._is_temporary = True
        debug("open: uncompressing %s to %s", filepath, self._root)
        try:
            with zipf:
                zipf.extractall(self._root)
        except (BadZipFile, OSError) as e:
            self.close()
            msg = f"invalid Excel document ({e})"
            raise FileFormatError(msg) from e
        return self._root

    def close(self) -> None:
        if self._is_temporary and self._root is not None:
            debug("close: removing %s", self._root)
            shutil.rmtree(self._root, ignore_errors=True)
            self._root = None
            self._is_temporary = False

    def _open_zipfile(self, filepath: Path) -> ZipFile:
        """Open Zip file with the correct filename encoding supported by current python."""
        # Coverage is python version dependent, so one path with always fail coverage
        try:  # pragma: no cover
            if version_info >= (3, 11):
                return ZipFile(filepath, metadata_encoding="utf-8")
            return ZipFile(filepath)
        except BadZipFile:
            msg = "invalid Excel document"
            raise FileFormatError(msg) from None

    def part_path(self, part: str) -> Path:
        return self._root / part

    def has_part(self, part: str) -> bool:
        return self.part_path(part).is_file()

    def read_blobs(self, part: str) -> Optional[Union[bytes, Dict[int, bytes]]]:
        """
        Read a part as opaque data.

        A directory is read as a dict of each file's contents, keyed from 1
        in the order the files are found. A single file is returned as
        bytes. Missing parts return ``None``.
        """
        path = self.part_path(part)
        if path.is_dir():
            blobs = {}
            entries = sorted(
                p for p in path.iterdir() if p.is_file() and p.name not in IGNORED_PACKAGE_FILES
            )
            for i, sub_path in enumerate(entries, start=1):
                debug("read_blobs: reading %s", sub_path)
                blobs[i] = sub_path.read_bytes()
            return blobs
        if path.is_file():
            debug("read_blobs: reading %s", path)
            return path.read_bytes()
        return None
