"""
Package reader for DOCX files.

Handles read-only access to a DOCX package: part content, content types and
relationships.
"""

import posixpath
import zipfile
from pathlib import Path
from typing import Dict, List, Optional, Union
import logging

from ..utils.xml_utils import NAMESPACES, REL_TYPE_OFFICE_DOCUMENT, parse_xml

logger = logging.getLogger(__name__)

DEFAULT_MAIN_PART = 'word/document.xml'


def rels_part_for(part_name: str) -> str:
    """
    Get the relationships part that belongs to a part.

    Args:
        part_name: Part name such as ``word/document.xml`` ('' for the package)

    Returns:
        Relationships part name such as ``word/_rels/document.xml.rels``
    """
    directory, filename = posixpath.split(part_name)
    return posixpath.join(directory, '_rels', f"{filename}.rels")


def resolve_target(source_part: str, target: str) -> str:
    """Resolve a relationship target relative to its source part."""
    if target.startswith('/'):
        return target.lstrip('/')
    base = posixpath.dirname(source_part)
    return posixpath.normpath(posixpath.join(base, target))


def parse_relationships(rels_xml: bytes) -> Dict[str, Dict[str, str]]:
    """
    Parse relationship XML content.

    Returns:
        Mapping of relationship id to ``{'target', 'type'[, 'target_mode']}``
    """
    relationships: Dict[str, Dict[str, str]] = {}
    root = parse_xml(rels_xml)
    for rel in root.findall(f"{{{NAMESPACES['rels']}}}Relationship"):
        rel_id = rel.get("Id", "")
        target = rel.get("Target", "")
        if rel_id and target:
            entry = {
                "target": target,
                "type": rel.get("Type", ""),
            }
            target_mode = rel.get("TargetMode", "")
            if target_mode:
                entry["target_mode"] = target_mode
            relationships[rel_id] = entry
    return relationships


class PackageReader:
    """
    Reads DOCX package contents without modifying the file.

    The underlying ZIP file stays open until :meth:`close` (or the end of a
    ``with`` block); parts are read on demand.
    """

    def __init__(self, docx_path: Union[str, Path]):
        """
        Initialize package reader.

        Args:
            docx_path: Path to DOCX file

        Raises:
            FileNotFoundError: If the file does not exist
            zipfile.BadZipFile: If the file is not a ZIP package
        """
        self.docx_path = Path(docx_path)
        self._zip_file: Optional[zipfile.ZipFile] = None
        self._content_types: Optional[Dict[str, str]] = None
        self._relationships: Dict[str, Dict[str, Dict[str, str]]] = {}
        self._closed = False

        self._open_package()

    def _open_package(self) -> None:
        """Open DOCX package as ZIP file."""
        if not self.docx_path.exists():
            raise FileNotFoundError(f"DOCX file not found: {self.docx_path}")

        self._zip_file = zipfile.ZipFile(self.docx_path, 'r')
        logger.debug(f"Opened DOCX package: {self.docx_path}")

    @property
    def closed(self) -> bool:
        return self._closed

    def _require_open(self) -> zipfile.ZipFile:
        if self._zip_file is None or self._closed:
            raise ValueError("Package not opened")
        return self._zip_file

    def list_parts(self) -> List[str]:
        """Get names of all non-directory parts in the package."""
        zip_file = self._require_open()
        return [info.filename for info in zip_file.infolist() if not info.is_dir()]

    def has_part(self, part_name: str) -> bool:
        return part_name in self._require_open().namelist()

    def get_part_infos(self) -> List[zipfile.ZipInfo]:
        """Get ZIP entry information (name, compression) for every non-directory part."""
        return [info for info in self._require_open().infolist() if not info.is_dir()]

    def get_binary_content(self, part_name: str) -> bytes:
        """
        Get binary content for a given part name.

        Raises:
            KeyError: If the part does not exist
        """
        zip_file = self._require_open()
        if part_name not in zip_file.namelist():
            raise KeyError(f"Part not found: {part_name}")
        return zip_file.read(part_name)

    def get_xml_content(self, part_name: str) -> str:
        """
        Get XML content for a given part name.

        Args:
            part_name: Name of the part to retrieve

        Returns:
            XML content as string

        Raises:
            KeyError: If the part does not exist
        """
        return self.get_binary_content(part_name).decode('utf-8')

    def get_content_types(self) -> Dict[str, str]:
        """
        Get content types mapping from ``[Content_Types].xml``.

        Overrides are keyed by part name (``/word/document.xml``), defaults by
        ``*.<extension>``.
        """
        if self._content_types is None:
            content_types: Dict[str, str] = {}
            root = parse_xml(self.get_binary_content("[Content_Types].xml"))
            for override in root.findall(f"{{{NAMESPACES['ct']}}}Override"):
                part_name = override.get("PartName", "")
                content_type = override.get("ContentType", "")
                if part_name and content_type:
                    content_types[part_name] = content_type
            for default in root.findall(f"{{{NAMESPACES['ct']}}}Default"):
                extension = default.get("Extension", "")
                content_type = default.get("ContentType", "")
                if extension and content_type:
                    content_types[f"*.{extension}"] = content_type
            self._content_types = content_types
            logger.debug(f"Parsed {len(content_types)} content types")
        return dict(self._content_types)

    def get_relationships(self, part_name: str = '') -> Dict[str, Dict[str, str]]:
        """
        Get relationships for a specific part.

        Args:
            part_name: Source part name ('' for package-level relationships)

        Returns:
            Dictionary of relationships (empty if the part has none)
        """
        if part_name not in self._relationships:
            rels_name = rels_part_for(part_name)
            if self.has_part(rels_name):
                self._relationships[part_name] = parse_relationships(
                    self.get_binary_content(rels_name)
                )
            else:
                self._relationships[part_name] = {}
        return self._relationships[part_name]

    def get_main_document_part(self) -> str:
        """
        Resolve the main document part through the package relationships.

        Falls back to ``word/document.xml`` when the package declares none.
        """
        for rel in self.get_relationships('').values():
            if rel.get('type') == REL_TYPE_OFFICE_DOCUMENT:
                return resolve_target('', rel['target'])
        return DEFAULT_MAIN_PART

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        """Close the package reader."""
        if self._zip_file is not None and not self._closed:
            self._zip_file.close()
            logger.debug(f"Package reader closed: {self.docx_path}")
        self._closed = True
