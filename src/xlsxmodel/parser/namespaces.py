SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
DOCUMENT_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PACKAGE_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"

RELATION_TYPE_HYPERLINK = f"{DOCUMENT_REL_NS}/hyperlink"
RELATION_TYPE_DRAWING = f"{DOCUMENT_REL_NS}/drawing"

RID_ATTR = f"{{{DOCUMENT_REL_NS}}}id"


def qn(tag: str, ns: str = SPREADSHEET_NS) -> str:
    return f"{{{ns}}}{tag}"
