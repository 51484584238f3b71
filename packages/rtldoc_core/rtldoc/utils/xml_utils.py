"""
XML utilities for WordprocessingML packages.

Handles namespace handling, hardened parsing, serialization and schema-ordered
insertion of property elements.
"""

from __future__ import annotations

from typing import Iterable, Optional
import logging

from lxml import etree

logger = logging.getLogger(__name__)

NAMESPACES = {
    'w': 'http://schemas.openxmlformats.org/wordprocessingml/2006/main',
    'r': 'http://schemas.openxmlformats.org/officeDocument/2006/relationships',
    'm': 'http://schemas.openxmlformats.org/officeDocument/2006/math',
    'sl': 'http://schemas.openxmlformats.org/schemaLibrary/2006/main',
    'rels': 'http://schemas.openxmlformats.org/package/2006/relationships',
    'ct': 'http://schemas.openxmlformats.org/package/2006/content-types',
}

XML_SPACE = '{http://www.w3.org/XML/1998/namespace}space'

REL_TYPE_OFFICE_DOCUMENT = (
    'http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument'
)
REL_TYPE_SETTINGS = (
    'http://schemas.openxmlformats.org/officeDocument/2006/relationships/settings'
)
CONTENT_TYPE_SETTINGS = (
    'application/vnd.openxmlformats-officedocument.wordprocessingml.settings+xml'
)

_FALSE_VALUES = {'0', 'false', 'off', 'none'}


def qn(tag: str) -> str:
    """
    Convert a prefixed tag such as ``w:p`` into Clark notation.

    Args:
        tag: Prefixed tag name

    Returns:
        ``{namespace}local`` tag name
    """
    prefix, local = tag.split(':', 1)
    return f"{{{NAMESPACES[prefix]}}}{local}"


def _make_parser() -> etree.XMLParser:
    # Template packages come from users; never resolve entities or fetch DTDs.
    return etree.XMLParser(resolve_entities=False, no_network=True, remove_blank_text=False)


def parse_xml(data: bytes) -> etree._Element:
    """
    Parse an XML part.

    Args:
        data: Raw part bytes

    Returns:
        Root element

    Raises:
        etree.XMLSyntaxError: If the part is not well-formed
    """
    return etree.fromstring(data, parser=_make_parser())


def serialize_xml(root: etree._Element) -> bytes:
    """Serialize a part root the way Word writes it (UTF-8, standalone)."""
    return etree.tostring(root, xml_declaration=True, encoding='UTF-8', standalone=True)


def is_on(element: Optional[etree._Element]) -> bool:
    """
    Evaluate an OOXML on/off property such as ``<w:b/>``.

    A missing element is off; an element without ``w:val`` is on.
    """
    if element is None:
        return False
    value = element.get(qn('w:val'))
    if value is None:
        return True
    return value.strip().lower() not in _FALSE_VALUES


def insert_in_order(parent: etree._Element, child: etree._Element,
                    successors: Iterable[str]) -> etree._Element:
    """
    Insert ``child`` before the first existing sibling that must follow it.

    Args:
        parent: Element receiving the child
        child: New element
        successors: Tags (Clark notation) that the schema places after ``child``

    Returns:
        The inserted child
    """
    following = set(successors)
    for index, existing in enumerate(parent):
        if existing.tag in following:
            parent.insert(index, child)
            return child
    parent.append(child)
    return child


def get_or_add_first(parent: etree._Element, tag: str) -> etree._Element:
    """Return the ``tag`` child of ``parent``, creating it as the first child if absent."""
    element = parent.find(tag)
    if element is None:
        element = etree.Element(tag)
        parent.insert(0, element)
    return element
