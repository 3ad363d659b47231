# propedit/office/codec.py
"""
Read and patch the four editable fields of docProps/core.xml.

encode() is a pure function of (pristine xml text, updates): every call parses
the text afresh, so repeated saves never compound serializer drift.

Elements are matched on their qualified name exactly as written in the
document ("dc:creator"), not on namespace URI. A package that binds the Dublin
Core namespace to another prefix will show empty fields and ignore edits.
"""
from __future__ import annotations
import logging
from typing import Mapping

from lxml import etree

from propedit.errors import MalformedXml, UnknownField

logger = logging.getLogger(__name__)

FIELD_TAGS = {
    "creator": "dc:creator",
    "lastModifiedBy": "cp:lastModifiedBy",
    "created": "dcterms:created",
    "modified": "dcterms:modified",
}

TIMESTAMP_FIELDS = ("created", "modified")


def _parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True, remove_blank_text=False)


def _parse(xml_text: str) -> etree._ElementTree:
    try:
        # lxml refuses str input carrying an encoding declaration
        root = etree.fromstring(xml_text.encode("utf-8"), _parser())
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise MalformedXml(f"Invalid XML: {exc}") from exc
    return root.getroottree()


def _qualified_name(el: etree._Element) -> str:
    local = etree.QName(el).localname
    return f"{el.prefix}:{local}" if el.prefix else local


def _find_first(tree: etree._ElementTree, tag_name: str) -> etree._Element | None:
    for el in tree.getroot().iter(etree.Element):
        if _qualified_name(el) == tag_name:
            return el
    return None


def _text_content(el: etree._Element) -> str:
    return "".join(el.itertext())


def _set_text_content(el: etree._Element, value: str) -> None:
    for child in list(el):
        el.remove(child)
    el.text = value


def decode(xml_text: str) -> dict[str, str]:
    tree = _parse(xml_text)
    fields = {}
    for key, tag_name in FIELD_TAGS.items():
        el = _find_first(tree, tag_name)
        fields[key] = _text_content(el) if el is not None else ""
    return fields


def encode(xml_text: str, updates: Mapping[str, str]) -> str:
    for key in updates:
        if key not in FIELD_TAGS:
            raise UnknownField(key)

    tree = _parse(xml_text)
    for key, value in updates.items():
        el = _find_first(tree, FIELD_TAGS[key])
        if el is None:
            # Absent tags are never created
            logger.debug("No <%s> element; dropping update for %s", FIELD_TAGS[key], key)
            continue
        _set_text_content(el, value)

    return _serialize(tree, xml_text)


def _serialize(tree: etree._ElementTree, source_text: str) -> str:
    has_declaration = source_text.lstrip("\ufeff \t\r\n").startswith("<?xml")
    if not has_declaration:
        return etree.tostring(tree, encoding="unicode")
    data = etree.tostring(
        tree,
        encoding="UTF-8",
        xml_declaration=True,
        standalone=tree.docinfo.standalone,
    )
    return data.decode("utf-8")
