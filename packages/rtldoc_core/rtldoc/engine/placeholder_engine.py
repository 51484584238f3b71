"""

Placeholder Engine - replaces ``{key}`` tokens in DOCX text with field values.

Supports:
- Single-brace ``{key}`` tokens (canonical)
- Double-brace ``{{key}}`` tokens when selected explicitly
- Listing the tokens present in a document

"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Pattern
import logging

from ..models.document import WordDocument
from ..utils.xml_utils import XML_SPACE

logger = logging.getLogger(__name__)


class PlaceholderSyntax(str, Enum):
    """Delimiters around a placeholder key. One syntax is used per pass."""

    SINGLE = "single"
    DOUBLE = "double"

    @property
    def delimiters(self) -> tuple:
        return ("{", "}") if self is PlaceholderSyntax.SINGLE else ("{{", "}}")

    def token(self, key: str) -> str:
        """Literal token for ``key``, e.g. ``{fullName}``."""
        open_, close = self.delimiters
        return f"{open_}{key}{close}"


@dataclass
class PlaceholderInfo:
    """A token found in the document."""
    name: str
    token: str
    count: int = 0


def clean_values(values: Mapping[str, Any]) -> Dict[str, str]:
    """
    Prepare a placeholder map for substitution.

    Blank keys are skipped, ``None`` becomes an empty string and any other
    value is converted with ``str()``.
    """
    cleaned: Dict[str, str] = {}
    for key, value in values.items():
        if key is None or not str(key).strip():
            logger.debug("Skipping placeholder with blank key")
            continue
        cleaned[str(key)] = "" if value is None else str(value)
    return cleaned


class PlaceholderEngine:
    """

    Substitutes placeholder tokens inside the text leaves of a document.

    Replacement is plain literal substitution: values are inserted as-is,
    tokens whose key is not in the map stay untouched, and a value is never
    rescanned within the same pass.

    """

    _SINGLE_PATTERN = re.compile(r"(?<!\{)\{([^{}]+)\}(?!\})")
    _DOUBLE_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")

    def __init__(self, values: Mapping[str, Any],
                 syntax: PlaceholderSyntax = PlaceholderSyntax.SINGLE) -> None:
        """

        Initializes placeholder engine.

        Args:
            values: Mapping of field name to field value
            syntax: Token delimiter syntax

        """
        self.syntax = PlaceholderSyntax(syntax)
        self.values = clean_values(values)
        self._replacements = {self.syntax.token(key): value for key, value in self.values.items()}
        self._pattern = self._compile(self._replacements)

    @staticmethod
    def _compile(replacements: Mapping[str, str]) -> Optional[Pattern[str]]:
        if not replacements:
            return None
        # Longest first so that overlapping tokens prefer the complete match.
        tokens = sorted(replacements, key=len, reverse=True)
        return re.compile("|".join(re.escape(token) for token in tokens))

    def substitute_text(self, text: str) -> tuple:
        """
        Replace every known token in ``text``.

        Returns:
            ``(new_text, replacement_count)``
        """
        if not text or self._pattern is None:
            return text, 0
        return self._pattern.subn(lambda match: self._replacements[match.group(0)], text)

    def substitute(self, document: WordDocument) -> int:
        """
        Replace tokens in every text leaf of the document body.

        Args:
            document: Document to modify in place

        Returns:
            Number of tokens replaced
        """
        total = 0
        if self._pattern is None:
            return total

        for text_leaf in document.iter_text_leaves():
            new_text, count = self.substitute_text(text_leaf.text or "")
            if count:
                text_leaf.text = new_text
                # Values may start or end with spaces.
                text_leaf.set(XML_SPACE, "preserve")
                total += count

        logger.debug(f"Replaced {total} placeholder token(s)")
        return total

    def extract_placeholders(self, document: WordDocument) -> List[PlaceholderInfo]:
        """

        Lists tokens fully contained in a single text leaf.

        Tokens split across runs are not reported until the runs are merged.

        Returns:
            List of PlaceholderInfo objects in first-seen order

        """
        return extract_placeholders(document, self.syntax)


def extract_placeholders(document: WordDocument,
                         syntax: PlaceholderSyntax = PlaceholderSyntax.SINGLE) -> List[PlaceholderInfo]:
    """Lists the tokens of the given syntax found in the document's text leaves."""
    pattern = (PlaceholderEngine._SINGLE_PATTERN if syntax is PlaceholderSyntax.SINGLE
               else PlaceholderEngine._DOUBLE_PATTERN)
    counts: Counter = Counter()
    for text_leaf in document.iter_text_leaves():
        for match in pattern.finditer(text_leaf.text or ""):
            counts[match.group(1)] += 1
    return [PlaceholderInfo(name=name, token=syntax.token(name), count=count)
            for name, count in counts.items()]


def substitute(document: WordDocument, values: Mapping[str, Any],
               syntax: PlaceholderSyntax = PlaceholderSyntax.SINGLE) -> WordDocument:
    """Replace placeholder tokens in the document body (in place)."""
    PlaceholderEngine(values, syntax).substitute(document)
    return document
