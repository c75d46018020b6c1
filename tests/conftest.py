from zipfile import ZipFile

import pytest

XML_DECL = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

CONTENT_TYPES_XML = (
    XML_DECL
    + '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    + '<Default Extension="xml" ContentType="application/xml"/>'
    + "</Types>"
)

WORKBOOK_XML = (
    XML_DECL
    + f'<workbook xmlns="{MAIN_NS}" xmlns:r="{REL_NS}">'
    + '<workbookPr date1904="{date1904}" defaultThemeVersion="124226"/>'
    + "<sheets>"
    + '<sheet name="Data" sheetId="1" r:id="rId1"/>'
    + '<sheet name="Notes" sheetId="2" r:id="rId2"/>'
    + "</sheets>"
    + "<definedNames>"
    + '<definedName name="Totals">Data!$A$3:$B$3</definedName>'
    + "</definedNames>"
    + "</workbook>"
)

APP_XML = (
    XML_DECL
    + "<Properties"
    + ' xmlns="http://schemas.openxmlformats.org/officeDocument/2006/extended-properties"'
    + ' xmlns:vt="http://schemas.openxmlformats.org/officeDocument/2006/docPropsVTypes">'
    + "<Application>Microsoft Excel</Application>"
    + "<TitlesOfParts>"
    + '<vt:vector size="3" baseType="lpstr">'
    + "<vt:lpstr>Data</vt:lpstr><vt:lpstr>Notes</vt:lpstr><vt:lpstr>Totals</vt:lpstr>"
    + "</vt:vector>"
    + "</TitlesOfParts>"
    + "<Company>Acme Ltd</Company>"
    + "<AppVersion>16.0300</AppVersion>"
    + "</Properties>"
)

CORE_XML = (
    XML_DECL
    + "<cp:coreProperties"
    + ' xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties"'
    + ' xmlns:dc="http://purl.org/dc/elements/1.1/"'
    + ' xmlns:dcterms="http://purl.org/dc/terms/"'
    + ' xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
    + "<dc:creator>Ada Lovelace</dc:creator>"
    + "<cp:lastModifiedBy>Charles Babbage</cp:lastModifiedBy>"
    + '<dcterms:created xsi:type="dcterms:W3CDTF">2021-03-04T05:06:07Z</dcterms:created>'
    + '<dcterms:modified xsi:type="dcterms:W3CDTF">2022-08-09T10:11:12Z</dcterms:modified>'
    + "</cp:coreProperties>"
)

STYLES_XML = (
    XML_DECL
    + f'<styleSheet xmlns="{MAIN_NS}">'
    + '<numFmts count="1"><numFmt numFmtId="164" formatCode="0.000"/></numFmts>'
    + '<fonts count="2">'
    + '<font><sz val="11"/><name val="Calibri"/></font>'
    + '<font><b/><sz val="11"/><name val="Calibri"/></font>'
    + "</fonts>"
    + '<fills count="1"><fill><patternFill patternType="none"/></fill></fills>'
    + '<borders count="1"><border><left/><right/><top/><bottom/><diagonal/></border></borders>'
    + '<cellStyleXfs count="1"><xf numFmtId="0" fontId="0" fillId="0" borderId="0"/></cellStyleXfs>'
    + '<cellXfs count="3">'
    + '<xf numFmtId="0" fontId="0" fillId="0" borderId="0" xfId="0"/>'
    + '<xf numFmtId="164" fontId="1" fillId="0" borderId="0" xfId="0" applyFont="1"/>'
    + '<xf numFmtId="0" fontId="1" xfId="0"/>'
    + "</cellXfs>"
    + '<cellStyles count="1"><cellStyle name="Normal" xfId="0" builtinId="0"/></cellStyles>'
    + '<colors><indexedColors><rgbColor rgb="00000000"/></indexedColors></colors>'
    + "</styleSheet>"
)

SHARED_STRINGS_XML = (
    XML_DECL
    + f'<sst xmlns="{MAIN_NS}" count="7" uniqueCount="5">'
    + "<si><t>Name</t></si>"
    + "<si><t>Value</t></si>"
    + "<si><t>Hello</t></si>"
    + "<si><t>Name</t></si>"
    + '<si><r><t>Wor</t></r><r><rPr><b/></rPr><t xml:space="preserve">ld</t></r></si>'
    + "</sst>"
)

SHEET1_XML = (
    XML_DECL
    + f'<worksheet xmlns="{MAIN_NS}" xmlns:r="{REL_NS}">'
    + '<dimension ref="A1:D4"/>'
    + "<sheetViews>"
    + '<sheetView tabSelected="1" workbookViewId="0">'
    + '<pane ySplit="1" topLeftCell="A2" activePane="bottomLeft" state="frozen"/>'
    + "</sheetView>"
    + "</sheetViews>"
    + '<sheetFormatPr defaultRowHeight="15"/>'
    + "<cols>"
    + '<col min="1" max="1" width="20.5" customWidth="1"/>'
    + '<col min="2" max="4" width="12" style="1"/>'
    + "</cols>"
    + "<sheetData>"
    + '<row r="1" spans="1:2">'
    + '<c r="A1" t="s"><v>0</v></c>'
    + '<c r="B1" t="s"><v>1</v></c>'
    + "</row>"
    + '<row r="2" s="2" customFormat="1" ht="25.5" customHeight="1">'
    + '<c r="A2" t="s"><v>2</v></c>'
    + '<c r="B2" s="1"><v>3.14</v></c>'
    + "</row>"
    + '<row r="3">'
    + '<c r="A3"><v>42</v></c>'
    + '<c r="B3"><f t="shared" ref="A3:A3" si="0">SUM(A1:A2)</f><v>45</v></c>'
    + '<c r="C3" t="e"><v>#DIV/0!</v></c>'
    + '<c r="D3" t="str"><f>A1&amp;B1</f><v>NameValue</v></c>'
    + "</row>"
    + '<row r="4">'
    + '<c r="A4" t="inlineStr"><is><t>inline text</t></is></c>'
    + '<c r="B4" s="2"/>'
    + '<c r="1A"><v>99</v></c>'
    + "</row>"
    + '<row r="6" ht=" "/>'
    + "</sheetData>"
    + '<mergeCells count="1"><mergeCell ref="A5:B5"/></mergeCells>'
    + '<dataValidations count="1">'
    + '<dataValidation type="list" allowBlank="1" sqref="C1"><formula1>"Yes,No"</formula1></dataValidation>'
    + "</dataValidations>"
    + '<pageMargins left="0.7" right="0.7" top="0.75" bottom="0.75" header="0.3" footer="0.3"/>'
    + '<legacyDrawing r:id="rId1"/>'
    + "<extLst>"
    + '<ext uri="{CCE6A557-97BC-4b89-ADB6-D9C93CAAB3DF}"><note>kept</note></ext>'
    + "</extLst>"
    + "</worksheet>"
)

SHEET2_XML = (
    XML_DECL
    + f'<worksheet xmlns="{MAIN_NS}">'
    + "<sheetData>"
    + '<row r="1"><c r="A1" t="s"><v>4</v></c></row>'
    + '<row r="2"><c r="C2"><v>1.5E-3</v></c></row>'
    + "</sheetData>"
    + "</worksheet>"
)

SHEET_RELS_XML = (
    XML_DECL
    + '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
    + '<Relationship Id="rId1" Type="vmlDrawing" Target="../drawings/vmlDrawing1.vml"/>'
    + "</Relationships>"
)


def default_parts(date1904: str = "0") -> dict:
    return {
        "[Content_Types].xml": CONTENT_TYPES_XML,
        "xl/workbook.xml": WORKBOOK_XML.replace("{date1904}", date1904),
        "docProps/app.xml": APP_XML,
        "docProps/core.xml": CORE_XML,
        "xl/styles.xml": STYLES_XML,
        "xl/sharedStrings.xml": SHARED_STRINGS_XML,
        "xl/worksheets/sheet1.xml": SHEET1_XML,
        "xl/worksheets/sheet2.xml": SHEET2_XML,
        "xl/worksheets/_rels/sheet1.xml.rels": SHEET_RELS_XML,
        "xl/printerSettings/printerSettings1.bin": b"\x00\x01printer",
        "xl/printerSettings/printerSettings2.bin": b"\x00\x02printer",
    }


def worksheet_xml(sheet_data: str, extra: str = "") -> str:
    """Wrap row elements in a minimal worksheet part."""
    return (
        XML_DECL
        + f'<worksheet xmlns="{MAIN_NS}" xmlns:r="{REL_NS}">'
        + f"<sheetData>{sheet_data}</sheetData>{extra}"
        + "</worksheet>"
    )


@pytest.fixture(name="xlsx_parts")
def xlsx_parts_fixture():
    return default_parts()


@pytest.fixture(name="make_xlsx")
def make_xlsx_fixture(tmp_path):
    def make_xlsx(parts=None, filename="test.xlsx"):
        if parts is None:
            parts = default_parts()
        filepath = tmp_path / filename
        with ZipFile(filepath, "w") as zipf:
            for name, data in parts.items():
                if data is not None:
                    zipf.writestr(name, data)
        return filepath

    return make_xlsx


@pytest.fixture(name="sample_xlsx")
def sample_xlsx_fixture(make_xlsx):
    return make_xlsx()
