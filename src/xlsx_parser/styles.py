import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from xlsx_parser import __name__ as xlsx_parser_name
from xlsx_parser.exceptions import StyleIndexError
from xlsx_parser.xml_utils import as_list, parse_xml, xml_node_to_dict

logger = logging.getLogger(xlsx_parser_name)
debug = logger.debug

# (section, record, cell format attribute) for each counted registry
_REGISTRIES = (
    ("fonts", "font", "fontId"),
    ("fills", "fill", "fillId"),
    ("borders", "border", "borderId"),
)


@dataclass
class StyleEntry:
    definition: Dict
    count: int = 0


@dataclass
class StyleTables:
    """
    Style definitions decoded from a styles part.

    ``fonts``, ``fills`` and ``borders`` map each record's position to its
    definition and the number of cell formats that reference it. Usage
    counts are computed once when the tables are resolved. The remaining
    sections are passed through as decoded records.
    """

    fonts: Dict[int, StyleEntry] = field(default_factory=dict)
    fills: Dict[int, StyleEntry] = field(default_factory=dict)
    borders: Dict[int, StyleEntry] = field(default_factory=dict)
    cell_xfs: List[Dict] = field(default_factory=list)
    num_fmts: Optional[Dict] = None
    cell_style_xfs: Optional[Dict] = None
    cell_styles: Optional[Dict] = None
    colors: Optional[Dict] = None

    @property
    def num_cell_formats(self) -> int:
        return len(self.cell_xfs)


def _registry_key(value: str, section: str, part: str) -> int:
    try:
        return int(value)
    except ValueError:
        msg = f"invalid {section} reference '{value}'"
        raise StyleIndexError(part, msg) from None


def resolve_styles(style_hash: Dict, part: str = "") -> StyleTables:
    """
    Build indexed style registries from a decoded styles part and count
    how many cell formats use each font, fill and border.

    Raises
    ------
    StyleIndexError:
        If a cell format references a font, fill or border that does not exist.
    """
    debug("resolve_styles: part=%s", part)
    styles = StyleTables()

    for section, record, _ in _REGISTRIES:
        definitions = as_list((style_hash.get(section) or {}).get(record))
        registry = getattr(styles, section)
        for i, definition in enumerate(definitions):
            registry[i] = StyleEntry(definition)

    styles.cell_xfs = as_list((style_hash.get("cellXfs") or {}).get("xf"))
    for xf_index, xf in enumerate(styles.cell_xfs):
        attrs = xf.get("attributes", {})
        for section, _, attr in _REGISTRIES:
            ref = attrs.get(attr)
            if ref is None:
                continue
            registry = getattr(styles, section)
            key = _registry_key(ref, section, part)
            if key not in registry:
                msg = f"cell format {xf_index} references {attr} {key} (only {len(registry)} defined)"
                raise StyleIndexError(part, msg)
            registry[key].count += 1

    styles.num_fmts = style_hash.get("numFmts")
    styles.cell_style_xfs = style_hash.get("cellStyleXfs")
    styles.cell_styles = style_hash.get("cellStyles")
    styles.colors = style_hash.get("colors")
    debug(
        "resolve_styles: fonts=%d, fills=%d, borders=%d, cell_xfs=%d",
        len(styles.fonts),
        len(styles.fills),
        len(styles.borders),
        len(styles.cell_xfs),
    )
    return styles


def load_styles(path: Path, part: str) -> Optional[StyleTables]:
    """Decode and resolve a styles part, returning ``None`` if it does not exist."""
    root = parse_xml(path, part)
    if root is None:
        return None
    return resolve_styles(xml_node_to_dict(root), part)
