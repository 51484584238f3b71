"""Shared helpers for WordprocessingML XML handling."""

from .xml_utils import NAMESPACES, insert_in_order, is_on, parse_xml, qn, serialize_xml

__all__ = [
    "NAMESPACES",
    "insert_in_order",
    "is_on",
    "parse_xml",
    "qn",
    "serialize_xml",
]
