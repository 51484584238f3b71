"""
Parser module for DOCX packages.

Contains read-only package access. Template validation lives in
:mod:`rtldoc.parser.validator`, which depends on the document model and is
therefore not imported here.
"""

from .package_reader import PackageReader, parse_relationships, rels_part_for, resolve_target

__all__ = [
    "PackageReader",
    "parse_relationships",
    "rels_part_for",
    "resolve_target",
]
