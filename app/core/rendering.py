import re
import xml.etree.ElementTree as ET

from fastapi.responses import Response

XML_MEDIA_TYPE = "application/xml"

# characters XML 1.0 cannot carry, even escaped
_XML_INVALID_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def _xml_text(value) -> str:
    return _XML_INVALID_CHARS.sub("", str(value))


def _tag(name: str) -> str:
    return name.replace("_", "-")


def _record_element(tag: str, record: dict) -> ET.Element:
    elem = ET.Element(_tag(tag))
    for key, value in record.items():
        child = ET.SubElement(elem, _tag(key))
        if value is None:
            child.set("nil", "true")
        elif isinstance(value, bool):
            child.set("type", "boolean")
            child.text = "true" if value else "false"
        elif isinstance(value, int):
            child.set("type", "integer")
            child.text = str(value)
        else:
            child.text = _xml_text(value)
    return elem


def xml_record(tag: str, record: dict) -> Response:
    """One record as <tag><field>..</field></tag>."""
    body = ET.tostring(_record_element(tag, record), encoding="unicode")
    return Response(
        content='<?xml version="1.0" encoding="UTF-8"?>\n' + body,
        media_type=XML_MEDIA_TYPE,
    )


def xml_collection(tag: str, item_tag: str, records: list[dict]) -> Response:
    root = ET.Element(_tag(tag), {"type": "array"})
    for record in records:
        root.append(_record_element(item_tag, record))
    body = ET.tostring(root, encoding="unicode")
    return Response(
        content='<?xml version="1.0" encoding="UTF-8"?>\n' + body,
        media_type=XML_MEDIA_TYPE,
    )
