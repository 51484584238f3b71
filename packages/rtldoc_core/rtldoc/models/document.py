"""
In-memory DOCX document used by the transform stages.

A :class:`WordDocument` owns every part of the package. The main document part
is parsed into an lxml tree that the stages mutate in place; other XML parts
are parsed lazily when a stage asks for them. Callers only ever hold the
``WordDocument`` itself, so removing a run never invalidates a reference held
outside the tree.
"""

from __future__ import annotations

import posixpath
import zipfile
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union
import logging

from lxml import etree

from ..parser.package_reader import (
    PackageReader,
    rels_part_for,
    resolve_target,
)
from ..utils.xml_utils import (
    CONTENT_TYPE_SETTINGS,
    NAMESPACES,
    REL_TYPE_SETTINGS,
    parse_xml,
    qn,
    serialize_xml,
)

logger = logging.getLogger(__name__)

_CONTENT_TYPES_PART = '[Content_Types].xml'


def run_text(run: etree._Element) -> str:
    """Concatenated text of the ``w:t`` leaves of a run."""
    return ''.join(t.text or '' for t in run.iter(qn('w:t')))


def paragraph_runs(paragraph: etree._Element) -> List[etree._Element]:
    """Direct ``w:r`` children of a paragraph, in document order."""
    return [child for child in paragraph if child.tag == qn('w:r')]


def paragraph_text(paragraph: etree._Element) -> str:
    """Concatenated text of every ``w:t`` inside a paragraph."""
    return ''.join(t.text or '' for t in paragraph.iter(qn('w:t')))


class WordDocument:
    """
    Mutable DOCX package.

    Use :meth:`open` to load a package and :meth:`save` to write it back. The
    object is a context manager; leaving the block releases the parsed tree
    whether or not the document was saved.
    """

    def __init__(self, path: Union[str, Path], parts: Dict[str, bytes],
                 infos: Dict[str, zipfile.ZipInfo], main_part: str,
                 root: etree._Element):
        self.path = Path(path)
        self.main_part = main_part
        self._parts = parts
        self._infos = infos
        self._roots: Dict[str, etree._Element] = {main_part: root}
        self._closed = False

    @classmethod
    def open(cls, path: Union[str, Path]) -> "WordDocument":
        """
        Load every part of a DOCX package and parse its main document part.

        Args:
            path: Path to DOCX file

        Returns:
            WordDocument

        Raises:
            FileNotFoundError: If the file does not exist
            zipfile.BadZipFile: If the file is not a ZIP package
            KeyError: If the main document part is missing
            lxml.etree.XMLSyntaxError: If the main document part is malformed
            ValueError: If the main part is not a document with a body
        """
        with PackageReader(path) as reader:
            main_part = reader.get_main_document_part()
            root = parse_xml(reader.get_binary_content(main_part))
            parts: Dict[str, bytes] = {}
            infos: Dict[str, zipfile.ZipInfo] = {}
            for info in reader.get_part_infos():
                parts[info.filename] = reader.get_binary_content(info.filename)
                infos[info.filename] = info

        if root.tag != qn('w:document'):
            raise ValueError(f"Unexpected root element in {main_part}: {root.tag}")
        if root.find(qn('w:body')) is None:
            raise ValueError(f"No body element in {main_part}")

        logger.debug(f"Loaded {len(parts)} parts from {path}")
        return cls(path, parts, infos, main_part, root)

    # ------------------------------------------------------------------
    # Tree access
    # ------------------------------------------------------------------
    @property
    def root(self) -> etree._Element:
        self._check_open()
        return self._roots[self.main_part]

    @property
    def body(self) -> etree._Element:
        return self.root.find(qn('w:body'))

    def iter_paragraphs(self) -> Iterator[etree._Element]:
        """All paragraphs in the body, including those nested in tables."""
        return self.body.iter(qn('w:p'))

    def iter_runs(self) -> Iterator[etree._Element]:
        """All runs in the body, including runs nested in hyperlinks and fields."""
        return self.body.iter(qn('w:r'))

    def iter_text_leaves(self) -> Iterator[etree._Element]:
        """All ``w:t`` text leaves in the body."""
        return self.body.iter(qn('w:t'))

    def paragraphs(self) -> List[etree._Element]:
        return list(self.iter_paragraphs())

    def paragraph_texts(self) -> List[str]:
        """Text of every paragraph in the body, in document order."""
        return [paragraph_text(p) for p in self.iter_paragraphs()]

    # ------------------------------------------------------------------
    # Package parts
    # ------------------------------------------------------------------
    def has_part(self, part_name: str) -> bool:
        return part_name in self._parts or part_name in self._roots

    def get_part_xml(self, part_name: str) -> etree._Element:
        """
        Get the parsed tree of an XML part; changes are written on save.

        Raises:
            KeyError: If the part does not exist
        """
        self._check_open()
        if part_name not in self._roots:
            self._roots[part_name] = parse_xml(self._parts[part_name])
        return self._roots[part_name]

    def add_part_xml(self, part_name: str, root: etree._Element) -> etree._Element:
        self._check_open()
        self._roots[part_name] = root
        return root

    def get_settings(self, create: bool = False) -> Optional[etree._Element]:
        """
        Get the ``w:settings`` root of the document settings part.

        Args:
            create: Create the part, its relationship and its content type
                override when the document has none

        Returns:
            Settings root element, or None if absent and ``create`` is False
        """
        rels = self._main_relationships(create=create)
        settings_rel = self._settings_relationship(rels)
        if settings_rel is not None:
            part_name = resolve_target(self.main_part, settings_rel.get('Target', ''))
            if self.has_part(part_name):
                return self.get_part_xml(part_name)
        if not create:
            return None
        return self._create_settings_part(rels, settings_rel)

    @staticmethod
    def _settings_relationship(rels: Optional[etree._Element]) -> Optional[etree._Element]:
        if rels is None:
            return None
        for rel in rels.findall(f"{{{NAMESPACES['rels']}}}Relationship"):
            if rel.get('Type') == REL_TYPE_SETTINGS and rel.get('TargetMode') != 'External':
                return rel
        return None

    def _main_relationships(self, create: bool = False) -> Optional[etree._Element]:
        rels_name = rels_part_for(self.main_part)
        if self.has_part(rels_name):
            return self.get_part_xml(rels_name)
        if not create:
            return None
        root = etree.Element(f"{{{NAMESPACES['rels']}}}Relationships",
                             nsmap={None: NAMESPACES['rels']})
        return self.add_part_xml(rels_name, root)

    def _create_settings_part(self, rels: etree._Element,
                              settings_rel: Optional[etree._Element] = None) -> etree._Element:
        if settings_rel is not None:
            # Dangling relationship: create the part where it points.
            part_name = resolve_target(self.main_part, settings_rel.get('Target', ''))
        else:
            part_name = resolve_target(self.main_part, 'settings.xml')

        if self.has_part(part_name):
            # Present in the package but not referenced by the main part.
            settings = self.get_part_xml(part_name)
        else:
            settings = etree.Element(qn('w:settings'), nsmap={'w': NAMESPACES['w']})
            self.add_part_xml(part_name, settings)

        if settings_rel is None:
            existing_ids = {rel.get('Id') for rel in rels}
            index = len(existing_ids) + 1
            while f"rId{index}" in existing_ids:
                index += 1
            etree.SubElement(rels, f"{{{NAMESPACES['rels']}}}Relationship", {
                'Id': f"rId{index}",
                'Type': REL_TYPE_SETTINGS,
                'Target': posixpath.relpath(part_name, posixpath.dirname(self.main_part) or '.'),
            })

        content_types = self.get_part_xml(_CONTENT_TYPES_PART)
        override_tag = f"{{{NAMESPACES['ct']}}}Override"
        if not any(o.get('PartName') == f"/{part_name}" for o in content_types.iter(override_tag)):
            etree.SubElement(content_types, override_tag, {
                'PartName': f"/{part_name}",
                'ContentType': CONTENT_TYPE_SETTINGS,
            })
        logger.debug(f"Created settings part {part_name}")
        return settings

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """
        Write the package, including every modified part.

        Args:
            path: Destination (defaults to the path the document was opened from)

        Returns:
            Path written
        """
        self._check_open()
        out_path = Path(path) if path else self.path
        names = list(self._parts)
        names.extend(name for name in self._roots if name not in self._parts)

        with zipfile.ZipFile(out_path, 'w', zipfile.ZIP_DEFLATED) as zip_file:
            for name in names:
                data = serialize_xml(self._roots[name]) if name in self._roots else self._parts[name]
                info = self._infos.get(name)
                compress_type = info.compress_type if info is not None else zipfile.ZIP_DEFLATED
                zip_file.writestr(name, data, compress_type=compress_type)

        logger.info(f"Document saved to: {out_path}")
        return out_path

    def close(self) -> None:
        """Release the parsed tree and part buffers."""
        if not self._closed:
            self._roots.clear()
            self._parts.clear()
            self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("Document is closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
