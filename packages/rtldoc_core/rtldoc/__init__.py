"""
rtldoc - right-to-left DOCX template filling.

Fills a pre-authored Word template with field values and writes a new
document with right-to-left paragraph and run formatting. The template's
paragraph and run structure is preserved; placeholders split across equally
formatted runs are joined before the second substitution pass.

Quick Start:
    from rtldoc import generate

    generate("Templates/طلب خطي.docx", "Generated/request.docx",
             {"fullName": "Amina", "idNumber": "77"})
"""

from .version import __version__, __version_info__

from .exceptions import (
    RtlDocError,
    InvalidArgumentError,
    TemplateNotFoundError,
    TemplateCorruptError,
    GenerationFailedError,
)
from .models import FormattingSignature, WordDocument
from .parser import PackageReader
from .parser.validator import DocumentValidator, load_and_validate
from .engine import (
    DirectionalityEnforcer,
    EnforcementResult,
    MergePolicy,
    PlaceholderEngine,
    PlaceholderInfo,
    PlaceholderSyntax,
    RunNormalizer,
    enforce_rtl,
    extract_placeholders,
    normalize,
    substitute,
)
from .config import GeneratorConfig
from .catalog import BUILTIN_DOCUMENT_TYPES, DocumentType, FieldSpec, get_document_type
from .generator import DocumentGenerator, GenerationReport, generate

__all__ = [
    # Version
    "__version__",
    "__version_info__",

    # Main entry points
    "generate",
    "DocumentGenerator",
    "GenerationReport",
    "GeneratorConfig",

    # Stages
    "load_and_validate",
    "normalize",
    "substitute",
    "enforce_rtl",
    "extract_placeholders",
    "RunNormalizer",
    "MergePolicy",
    "PlaceholderEngine",
    "PlaceholderInfo",
    "PlaceholderSyntax",
    "DirectionalityEnforcer",
    "EnforcementResult",

    # Model and package access
    "WordDocument",
    "FormattingSignature",
    "PackageReader",
    "DocumentValidator",

    # Catalog
    "BUILTIN_DOCUMENT_TYPES",
    "DocumentType",
    "FieldSpec",
    "get_document_type",

    # Exceptions
    "RtlDocError",
    "InvalidArgumentError",
    "TemplateNotFoundError",
    "TemplateCorruptError",
    "GenerationFailedError",
]


def main():
    """CLI entry point."""
    from .cli import main as cli_main
    return cli_main()
