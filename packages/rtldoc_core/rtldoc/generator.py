"""
Document generator - fills a DOCX template and writes the result.

Pipeline:
    validate template -> copy template to output path -> open the copy ->
    substitute (pass 1) -> merge runs -> substitute (pass 2) ->
    right-to-left formatting -> save

The template itself is never modified. Failures are reported through the four
error kinds in :mod:`rtldoc.exceptions`; anything unexpected after validation
becomes :class:`GenerationFailedError`. A failure after the copy step can leave
a partially transformed file at the output path; it is not removed.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional, Union
import logging

from . import catalog
from .config import GeneratorConfig
from .engine.directionality import DirectionalityEnforcer
from .engine.placeholder_engine import PlaceholderEngine
from .engine.run_normalizer import RunNormalizer
from .exceptions import (
    GenerationFailedError,
    InvalidArgumentError,
    TemplateNotFoundError,
)
from .models.document import WordDocument
from .parser.validator import load_and_validate

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class GenerationReport:
    """What a generation run did."""
    template_path: Path
    output_path: Path
    first_pass_replacements: int = 0
    second_pass_replacements: int = 0
    merged_runs: int = 0
    directionality_diagnostic: Optional[str] = None

    @property
    def replacements(self) -> int:
        return self.first_pass_replacements + self.second_pass_replacements


def _require_path(value: Optional[PathLike], argument: str) -> Path:
    if value is None or not str(value).strip():
        raise InvalidArgumentError(f"{argument} cannot be null or empty", argument=argument)
    return Path(os.path.abspath(os.fspath(value)))


class DocumentGenerator:
    """
    Fills templates with field values.

    Args:
        config: Generator configuration (defaults to :class:`GeneratorConfig`)
    """

    def __init__(self, config: Optional[GeneratorConfig] = None) -> None:
        self.config = config or GeneratorConfig()

    def generate(self, template_path: PathLike, output_path: PathLike,
                 placeholder_map: Optional[Mapping[str, Any]]) -> Path:
        """
        Fill ``template_path`` with ``placeholder_map`` and write ``output_path``.

        Returns:
            Absolute output path

        Raises:
            InvalidArgumentError: Blank path or missing map
            TemplateNotFoundError: No template at the resolved path
            TemplateCorruptError: Template fails structural validation
            GenerationFailedError: Any failure while copying, transforming or saving
        """
        return self.run(template_path, output_path, placeholder_map).output_path

    def run(self, template_path: PathLike, output_path: PathLike,
            placeholder_map: Optional[Mapping[str, Any]]) -> GenerationReport:
        """Same as :meth:`generate` but returns a :class:`GenerationReport`."""
        template = _require_path(template_path, "template_path")
        output = _require_path(output_path, "output_path")
        if placeholder_map is None:
            raise InvalidArgumentError("placeholder_map cannot be null", argument="placeholder_map")
        if not isinstance(placeholder_map, Mapping):
            raise InvalidArgumentError(
                f"placeholder_map must be a mapping, got {type(placeholder_map).__name__}",
                argument="placeholder_map",
            )
        if not placeholder_map:
            logger.warning("No placeholder values supplied; only formatting will change")

        logger.debug(f"Template path: {template}")
        logger.debug(f"Output path: {output}")

        if not template.is_file():
            logger.error(f"Template file not found at: {template}")
            raise TemplateNotFoundError(f"Template file not found at: {template}",
                                        template_path=str(template))

        load_and_validate(template).close()

        report = GenerationReport(template_path=template, output_path=output)
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(template, output)

            with WordDocument.open(output) as document:
                self._transform(document, placeholder_map, report)
                document.save()
        except Exception as e:
            logger.error(f"Generation of {output} failed: {e}")
            raise GenerationFailedError(
                f"An error occurred while generating the document: {e}",
                output_path=str(output),
                cause=e,
            ) from e

        logger.info(f"Generated {output} ({report.replacements} replacements)")
        return report

    def _transform(self, document: WordDocument, placeholder_map: Mapping[str, Any],
                   report: GenerationReport) -> None:
        engine = PlaceholderEngine(placeholder_map, self.config.placeholder_syntax)
        normalizer = RunNormalizer(self.config.merge_policy)
        enforcer = DirectionalityEnforcer(self.config.default_tab_stop)

        report.first_pass_replacements = engine.substitute(document)
        normalizer.normalize(document)
        report.merged_runs = normalizer.stats.merged
        report.second_pass_replacements = engine.substitute(document)
        report.directionality_diagnostic = enforcer.enforce(document).diagnostic

    def generate_for_type(self, document_type: str, values: Optional[Mapping[str, Any]],
                          now: Optional[datetime] = None,
                          output_path: Optional[PathLike] = None) -> Path:
        """
        Generate a document for a catalog type using the naming conventions.

        The template is ``<templates_dir>/<label>.docx`` and, unless
        ``output_path`` is given, the output is
        ``<output_dir>/<label>_<timestamp>.docx``. For a known type, fields
        missing from ``values`` are filled with an empty string.
        """
        if document_type is None or not document_type.strip():
            raise InvalidArgumentError("document_type cannot be null or empty",
                                       argument="document_type")

        doc_type = catalog.get_document_type(document_type)
        if doc_type is None:
            logger.warning(f"Unknown document type '{document_type}', using its name as template name")
        elif isinstance(values, Mapping):
            missing = doc_type.missing_fields(values)
            if missing:
                logger.warning(f"No value for field(s): {', '.join(missing)}")
            # Every field of the type is filled; unset ones become empty.
            values = {**{key: "" for key in doc_type.keys}, **values}

        template = catalog.template_path(document_type, self.config.templates_dir)
        if output_path is None:
            output_path = catalog.output_path(document_type, self.config.output_dir, now,
                                              self.config.timestamp_format)
        return self.generate(template, output_path, values)


def generate(template_path: PathLike, output_path: PathLike,
             placeholder_map: Optional[Mapping[str, Any]], *,
             config: Optional[GeneratorConfig] = None) -> Path:
    """Fill a template and write the output document; see :meth:`DocumentGenerator.generate`."""
    return DocumentGenerator(config).generate(template_path, output_path, placeholder_map)
