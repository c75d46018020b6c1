import xlsx_parser
from xlsx_parser import _get_version


def test_version():
    version = _get_version()
    assert version.count(".") == 2
    assert version == xlsx_parser.__version__
