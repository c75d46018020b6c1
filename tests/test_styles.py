import pytest

from xlsx_parser.exceptions import StyleIndexError
from xlsx_parser.styles import load_styles, resolve_styles

from conftest import STYLES_XML

PART = "xl/styles.xml"


def record(**attrs):
    return {"attributes": attrs}


def test_usage_counts():
    style_hash = {
        "fonts": {"attributes": {}, "font": [record(), record()]},
        "fills": {"attributes": {}, "fill": [record(), record()]},
        "borders": {"attributes": {}, "border": record()},
        "cellXfs": {
            "attributes": {},
            "xf": [
                record(fontId="0", fillId="1", borderId="0"),
                record(fontId="1", fillId="1"),
                record(fontId="1"),
            ],
        },
    }
    styles = resolve_styles(style_hash, PART)
    assert {k: v.count for k, v in styles.fonts.items()} == {0: 1, 1: 2}
    assert {k: v.count for k, v in styles.fills.items()} == {0: 0, 1: 2}
    assert {k: v.count for k, v in styles.borders.items()} == {0: 1}
    assert styles.num_cell_formats == 3


def test_single_records_are_normalized():
    style_hash = {
        "fonts": {"attributes": {}, "font": record(name="Arial")},
        "cellXfs": {"attributes": {}, "xf": record(fontId="0")},
    }
    styles = resolve_styles(style_hash, PART)
    assert len(styles.fonts) == 1
    assert styles.fonts[0].definition == record(name="Arial")
    assert styles.fonts[0].count == 1
    assert styles.fills == {}
    assert styles.borders == {}
    assert styles.cell_xfs == [record(fontId="0")]


def test_empty_styles():
    styles = resolve_styles({}, PART)
    assert styles.fonts == {}
    assert styles.cell_xfs == []
    assert styles.num_cell_formats == 0
    assert styles.num_fmts is None


def test_reference_out_of_range():
    style_hash = {
        "fonts": {"attributes": {}, "font": [record(), record()]},
        "cellXfs": {"attributes": {}, "xf": [record(fontId="0"), record(fontId="7")]},
    }
    with pytest.raises(StyleIndexError, match="cell format 1 references fontId 7"):
        resolve_styles(style_hash, PART)


def test_reference_not_a_number():
    style_hash = {
        "borders": {"attributes": {}, "border": record()},
        "cellXfs": {"attributes": {}, "xf": record(borderId="thin")},
    }
    with pytest.raises(StyleIndexError, match="invalid borders reference 'thin'"):
        resolve_styles(style_hash, PART)


def test_load_styles(tmp_path):
    path = tmp_path / "styles.xml"
    path.write_text(STYLES_XML, encoding="utf-8")
    styles = load_styles(path, PART)

    assert {k: v.count for k, v in styles.fonts.items()} == {0: 1, 1: 2}
    assert styles.fills[0].count == 2
    assert styles.borders[0].count == 2
    assert styles.fonts[1].definition["b"] == {"attributes": {}}
    assert styles.fonts[1].definition["name"] == {"attributes": {"val": "Calibri"}}
    assert styles.num_cell_formats == 3
    assert styles.num_fmts["numFmt"]["attributes"]["formatCode"] == "0.000"
    assert styles.cell_styles["cellStyle"]["attributes"]["name"] == "Normal"
    assert styles.cell_style_xfs["xf"]["attributes"]["fontId"] == "0"
    assert styles.colors["indexedColors"]["rgbColor"]["attributes"]["rgb"] == "00000000"


def test_load_missing_styles(tmp_path):
    assert load_styles(tmp_path / "styles.xml", PART) is None
