# tests/conftest.py
"""
In-memory OOXML fixtures. Packages are assembled with zipfile so the suite
needs no binary fixture files.
"""
from io import BytesIO
import zipfile

import pytest

CORE_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
    '<cp:coreProperties'
    ' xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties"'
    ' xmlns:dc="http://purl.org/dc/elements/1.1/"'
    ' xmlns:dcterms="http://purl.org/dc/terms/"'
    ' xmlns:dcmitype="http://purl.org/dc/dcmitype/"'
    ' xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
    '<dc:title>Quarterly report</dc:title>'
    '<dc:creator>Alice</dc:creator>'
    '<cp:lastModifiedBy>Carol</cp:lastModifiedBy>'
    '<cp:revision>3</cp:revision>'
    '<dcterms:created xsi:type="dcterms:W3CDTF">2024-03-01T12:00:00Z</dcterms:created>'
    '<dcterms:modified xsi:type="dcterms:W3CDTF">2024-03-02T08:30:45Z</dcterms:modified>'
    '</cp:coreProperties>'
)

# The worked example: only creator and created are present
SPARSE_CORE_XML = (
    '<cp:coreProperties'
    ' xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties"'
    ' xmlns:dc="http://purl.org/dc/elements/1.1/"'
    ' xmlns:dcterms="http://purl.org/dc/terms/">'
    '<dc:creator>Alice</dc:creator>'
    '<dcterms:created>2023-01-01T00:00:00Z</dcterms:created>'
    '</cp:coreProperties>'
)

CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '</Types>'
)

_MAIN_PARTS = {
    "docx": "word/document.xml",
    "xlsx": "xl/workbook.xml",
    "pptx": "ppt/presentation.xml",
}


def make_package(core_xml=CORE_XML, kind="docx", include_core=True) -> bytes:
    """Build a small OOXML-shaped archive with mixed compression and a comment."""
    buf = BytesIO()
    with zipfile.ZipFile(buf, "w") as z:
        z.comment = b"fixture archive"
        z.writestr("[Content_Types].xml", CONTENT_TYPES, compress_type=zipfile.ZIP_DEFLATED)
        z.writestr("_rels/.rels", "<Relationships/>", compress_type=zipfile.ZIP_DEFLATED)
        z.writestr(_MAIN_PARTS[kind], "<body>Hello</body>" * 50, compress_type=zipfile.ZIP_DEFLATED)
        if include_core:
            info = zipfile.ZipInfo("docProps/core.xml", date_time=(2024, 3, 2, 8, 30, 44))
            info.compress_type = zipfile.ZIP_DEFLATED
            z.writestr(info, core_xml)
        z.writestr("docProps/app.xml", "<Properties><Pages>1</Pages></Properties>",
                   compress_type=zipfile.ZIP_DEFLATED)
        folder = _MAIN_PARTS[kind].split("/")[0]
        media = zipfile.ZipInfo(f"{folder}/media/image1.png", date_time=(2020, 1, 1, 0, 0, 0))
        media.compress_type = zipfile.ZIP_STORED
        z.writestr(media, b"\x89PNG\r\n\x1a\n" + bytes(range(256)))
    return buf.getvalue()


def read_entries(data: bytes) -> dict:
    with zipfile.ZipFile(BytesIO(data)) as z:
        return {name: z.read(name) for name in z.namelist()}


def read_infos(data: bytes) -> list:
    with zipfile.ZipFile(BytesIO(data)) as z:
        return z.infolist()


@pytest.fixture
def package() -> bytes:
    return make_package()


@pytest.fixture
def sparse_package() -> bytes:
    return make_package(SPARSE_CORE_XML)
