"""
Validator for DOCX templates.

Handles structural integrity checks of a template package and the
``load_and_validate`` probe used before a template is copied.
"""

from pathlib import Path
from typing import Any, Dict, List, Union
import logging

from ..exceptions import TemplateCorruptError, TemplateNotFoundError
from ..models.document import WordDocument
from ..utils.xml_utils import parse_xml, qn
from .package_reader import PackageReader

logger = logging.getLogger(__name__)


class DocumentValidator:
    """
    Validates DOCX package integrity and structure.

    Only checks what generation relies on: a readable content-types part, a
    main document part that parses, and a ``w:body`` inside it.
    """

    def __init__(self, package_reader: PackageReader):
        """
        Initialize validator.

        Args:
            package_reader: PackageReader instance for accessing document parts
        """
        self.package_reader = package_reader
        self.validation_results: Dict[str, Any] = {}

    def validate_document(self) -> Dict[str, Any]:
        """
        Validate entire document.

        Returns:
            Dictionary of validation results with an ``overall`` flag
        """
        validation_results: Dict[str, Any] = {
            'structure': self.validate_structure(),
        }
        # Content checks need a main part to look at.
        if validation_results['structure']['valid']:
            validation_results['content'] = self.validate_content()

        validation_results['overall'] = all(
            result.get('valid', False) for result in validation_results.values()
            if isinstance(result, dict)
        )

        self.validation_results = validation_results
        return validation_results

    def validate_structure(self) -> Dict[str, Any]:
        """
        Validate package structure.

        Returns:
            Dictionary of structure validation results
        """
        structure_results = _new_result()

        try:
            content_types = self.package_reader.get_content_types()
            if not content_types:
                structure_results['errors'].append("Missing content types")
                structure_results['valid'] = False
            else:
                structure_results['checks'].append("Content types found")

            main_part = self.package_reader.get_main_document_part()
            if not self.package_reader.has_part(main_part):
                structure_results['errors'].append(f"Missing main document part {main_part}")
                structure_results['valid'] = False
            else:
                structure_results['checks'].append(f"{main_part} exists")
                if f"/{main_part}" not in content_types:
                    structure_results['warnings'].append(
                        f"No content type override for /{main_part}"
                    )

        except Exception as e:
            structure_results['errors'].append(f"Structure validation failed: {e}")
            structure_results['valid'] = False

        return structure_results

    def validate_content(self) -> Dict[str, Any]:
        """
        Validate main document content.

        Returns:
            Dictionary of content validation results
        """
        content_results = _new_result()

        try:
            main_part = self.package_reader.get_main_document_part()
            root = parse_xml(self.package_reader.get_binary_content(main_part))

            if root.tag != qn('w:document'):
                content_results['errors'].append(f"Unexpected root element {root.tag}")
                content_results['valid'] = False
                return content_results

            body = root.find(qn('w:body'))
            if body is None:
                content_results['errors'].append("Missing document body")
                content_results['valid'] = False
            else:
                content_results['checks'].append("Document body found")
                paragraphs = list(body.iter(qn('w:p')))
                if not paragraphs:
                    content_results['warnings'].append("No paragraphs found")
                else:
                    content_results['checks'].append(f"Found {len(paragraphs)} paragraphs")

        except Exception as e:
            content_results['errors'].append(f"Content validation failed: {e}")
            content_results['valid'] = False

        return content_results

    def get_validation_errors(self) -> List[str]:
        """Get validation errors from the last run."""
        errors: List[str] = []
        for result in self.validation_results.values():
            if isinstance(result, dict):
                errors.extend(result.get('errors', []))
        return errors

    def get_validation_warnings(self) -> List[str]:
        """Get validation warnings from the last run."""
        warnings: List[str] = []
        for result in self.validation_results.values():
            if isinstance(result, dict):
                warnings.extend(result.get('warnings', []))
        return warnings


def _new_result() -> Dict[str, Any]:
    return {
        'valid': True,
        'errors': [],
        'warnings': [],
        'checks': []
    }


def load_and_validate(path: Union[str, Path]) -> WordDocument:
    """
    Open a template read-only and confirm it has the structure generation needs.

    Args:
        path: Template path

    Returns:
        The loaded (unmodified) document

    Raises:
        TemplateNotFoundError: If no file exists at ``path``
        TemplateCorruptError: If the package cannot be read or lacks a body;
            the message is always the same regardless of the underlying error
    """
    template_path = Path(path)
    if not template_path.is_file():
        raise TemplateNotFoundError(
            f"Template file not found at: {template_path}",
            template_path=str(template_path),
        )

    try:
        with PackageReader(template_path) as reader:
            validator = DocumentValidator(reader)
            results = validator.validate_document()
        if not results['overall']:
            errors = validator.get_validation_errors()
            logger.error(f"Template {template_path} failed validation: {errors}")
            raise TemplateCorruptError(
                template_path=str(template_path),
                details={'errors': errors},
            )
        for warning in validator.get_validation_warnings():
            logger.warning(f"Template {template_path}: {warning}")
        return WordDocument.open(template_path)
    except TemplateCorruptError:
        raise
    except Exception as e:
        logger.error(f"Template {template_path} could not be read: {e}")
        raise TemplateCorruptError(template_path=str(template_path), cause=e) from e
