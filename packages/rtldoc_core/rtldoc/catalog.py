"""
Built-in document types and file naming conventions.

Each document type has a fixed list of fields and a template named
``<label>.docx`` inside the templates directory. Generated files are named
``<label>_<yyyyMMddHHmmss>.docx``; two generations of the same type within one
second produce the same name.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Union

from .config import DEFAULT_TIMESTAMP_FORMAT

TEMPLATE_EXTENSION = ".docx"


@dataclass(frozen=True)
class FieldSpec:
    """A named input field: placeholder key plus the label shown to users."""
    key: str
    label: str


@dataclass(frozen=True)
class DocumentType:
    """A document type the generator knows how to fill."""
    label: str
    description: str
    fields: Tuple[FieldSpec, ...]

    @property
    def keys(self) -> List[str]:
        return [spec.key for spec in self.fields]

    @property
    def template_filename(self) -> str:
        return template_filename(self.label)

    def missing_fields(self, values: Mapping[str, str]) -> List[str]:
        """Keys of this type that have no non-blank value in ``values``."""
        return [key for key in self.keys if not str(values.get(key) or "").strip()]


_FULL_NAME = FieldSpec("fullName", "الاسم الكامل")
_ID_NUMBER = FieldSpec("idNumber", "رقم البطاقة الوطنية")
_DATE = FieldSpec("date", "التاريخ")

BUILTIN_DOCUMENT_TYPES: Tuple[DocumentType, ...] = (
    DocumentType(
        label="شهادة عدم العمل",
        description="Certificate of unemployment",
        fields=(_FULL_NAME, _ID_NUMBER, FieldSpec("address", "العنوان"), _DATE),
    ),
    DocumentType(
        label="شهادة السكنى",
        description="Certificate of residence",
        fields=(
            _FULL_NAME,
            _ID_NUMBER,
            FieldSpec("residenceAddress", "عنوان السكن"),
            FieldSpec("duration", "مدة السكن"),
            _DATE,
        ),
    ),
    DocumentType(
        label="طلب خطي",
        description="Written request",
        fields=(
            _FULL_NAME,
            _ID_NUMBER,
            FieldSpec("recipient", "الجهة المقدمة إليها الطلب"),
            FieldSpec("requestContent", "محتوى الطلب"),
            _DATE,
        ),
    ),
    DocumentType(
        label="شهادة الحياة",
        description="Life certificate",
        fields=(_FULL_NAME, _ID_NUMBER, FieldSpec("residence", "مكان الإقامة"), _DATE),
    ),
)

_BY_LABEL: Dict[str, DocumentType] = {doc_type.label: doc_type for doc_type in BUILTIN_DOCUMENT_TYPES}


def list_document_types() -> List[DocumentType]:
    return list(BUILTIN_DOCUMENT_TYPES)


def get_document_type(label: str) -> Optional[DocumentType]:
    """Look up a built-in document type by its label (surrounding blanks ignored)."""
    return _BY_LABEL.get(label.strip())


def template_filename(label: str) -> str:
    """Template file name for a document type; unknown labels follow the same rule."""
    return f"{label.strip()}{TEMPLATE_EXTENSION}"


def template_path(label: str, templates_dir: Union[str, Path]) -> Path:
    return Path(templates_dir) / template_filename(label)


def output_filename(label: str, now: Optional[datetime] = None,
                    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT) -> str:
    """
    Output file name ``<label>_<timestamp>.docx``.

    Args:
        label: Document type label
        now: Generation time (defaults to the current local time)
        timestamp_format: strftime format, second resolution by default
    """
    stamp = (now or datetime.now()).strftime(timestamp_format)
    return f"{label.strip()}_{stamp}{TEMPLATE_EXTENSION}"


def output_path(label: str, output_dir: Union[str, Path], now: Optional[datetime] = None,
                timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT) -> Path:
    return Path(output_dir) / output_filename(label, now, timestamp_format)
