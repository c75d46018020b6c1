"""Decode Excel spreadsheets into worksheets of typed cells."""

import importlib.metadata

from xlsx_parser.cell import *  # noqa: F403
from xlsx_parser.constants import *  # noqa: F403
from xlsx_parser.exceptions import *  # noqa: F403
from xlsx_parser.parser import *  # noqa: F403
from xlsx_parser.workbook import *  # noqa: F403
from xlsx_parser.worksheet import *  # noqa: F403

__version__ = importlib.metadata.version("xlsx-parser")


def _get_version() -> str:
    return __version__
