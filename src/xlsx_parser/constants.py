from enum import Enum

import enum_tools.documentation
from pendulum import datetime

__all__ = ["CellDataType"]

# Accepted container extensions
SUPPORTED_EXTENSIONS = (".xlsx", ".xlsm")

# Package part locations
WORKBOOK_PART = "xl/workbook.xml"
STYLES_PART = "xl/styles.xml"
SHARED_STRINGS_PART = "xl/sharedStrings.xml"
APP_PART = "docProps/app.xml"
CORE_PART = "docProps/core.xml"
WORKSHEET_PART = "xl/worksheets/sheet{}.xml"
EXTERNAL_LINKS_DIR = "xl/externalLinks"
DRAWINGS_DIR = "xl/drawings"
PRINTER_SETTINGS_DIR = "xl/printerSettings"
WORKSHEET_RELS_DIR = "xl/worksheets/_rels"
MACROS_PART = "xl/vbaProject.bin"

# Directory entries never preserved as blobs
IGNORED_PACKAGE_FILES = (".DS_Store",)

# XML namespaces
SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
DOCUMENT_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
EXTENDED_PROPERTIES_NS = "http://schemas.openxmlformats.org/officeDocument/2006/extended-properties"
DOC_PROPS_VTYPES_NS = "http://schemas.openxmlformats.org/officeDocument/2006/docPropsVTypes"
CORE_PROPERTIES_NS = "http://schemas.openxmlformats.org/package/2006/metadata/core-properties"
DC_NS = "http://purl.org/dc/elements/1.1/"
DCTERMS_NS = "http://purl.org/dc/terms/"

NS = {
    "a": SPREADSHEET_NS,
    "r": DOCUMENT_REL_NS,
    "ep": EXTENDED_PROPERTIES_NS,
    "vt": DOC_PROPS_VTYPES_NS,
    "cp": CORE_PROPERTIES_NS,
    "dc": DC_NS,
    "dcterms": DCTERMS_NS,
}

# Worksheet blocks captured as structured records in full-fidelity mode
WORKSHEET_METADATA_TAGS = (
    "sheetViews",
    "cols",
    "mergeCells",
    "dataValidations",
    "extLst",
    "legacyDrawing",
)

# Date systems
EPOCH_1900 = datetime(1899, 12, 30)
EPOCH_1904 = datetime(1904, 1, 1)
SECONDS_IN_DAY = 60 * 60 * 24

DEFAULT_ROW_STYLE = 0
DEFAULT_STYLE_INDEX = 0


@enum_tools.documentation.document_enum
class CellDataType(str, Enum):
    """
    The declared type of a cell's value.

    The value of each member is the ``t`` attribute used in worksheet
    parts. Numeric cells carry no type attribute.
    """

    NUMERIC = ""
    """Numbers, or an empty value."""
    SHARED_STRING = "s"
    """Text stored in the shared string table and referenced by index."""
    RAW_STRING = "str"
    """Text stored directly in the cell, usually the result of a formula."""
    INLINE_STRING = "inlineStr"
    """Rich text stored in the cell itself."""
    ERROR = "e"
    """An error code such as ``#DIV/0!``."""
    DATE = "d"
    """An ISO 8601 date and time, kept as text."""
