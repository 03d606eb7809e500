from __future__ import annotations

from xml.etree import ElementTree as ET

SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
DOCUMENT_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PACKAGE_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"


def local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def children(elem: ET.Element, tag: str) -> list[ET.Element]:
    return [child for child in list(elem) if local_name(child.tag) == tag]


def child(elem: ET.Element, tag: str) -> ET.Element:
    found = children(elem, tag)
    assert found, f"<{local_name(elem.tag)}> has no <{tag}> child"
    return found[0]


def roundtrip(elem: ET.Element) -> ET.Element:
    return ET.fromstring(ET.tostring(elem))


def hyperlinks_xml(*links: dict[str, str]) -> ET.Element:
    root = ET.Element(f"{{{SPREADSHEET_NS}}}hyperlinks")
    for attrs in links:
        item = ET.SubElement(root, f"{{{SPREADSHEET_NS}}}hyperlink")
        for key, value in attrs.items():
            if key == "r:id":
                key = f"{{{DOCUMENT_REL_NS}}}id"
            item.set(key, value)
    return root
