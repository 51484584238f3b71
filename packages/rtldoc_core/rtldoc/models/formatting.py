"""Run formatting signature used to decide whether adjacent runs can be merged."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from lxml import etree

from ..utils.xml_utils import is_on, qn


@dataclass(frozen=True)
class FormattingSignature:
    """
    The subset of run formatting relevant to merge decisions.

    Two signatures are equal iff every field matches. A run without ``w:rPr``
    has the all-default signature.
    """

    bold: bool = False
    italic: bool = False
    font_size: Optional[float] = None  # points
    right_to_left: bool = False

    @classmethod
    def from_run(cls, run: etree._Element) -> "FormattingSignature":
        """Build the signature of a ``w:r`` element."""
        return cls.from_properties(run.find(qn('w:rPr')))

    @classmethod
    def from_properties(cls, r_pr: Optional[etree._Element]) -> "FormattingSignature":
        """Build a signature from a ``w:rPr`` element (or ``None``)."""
        if r_pr is None:
            return cls()
        return cls(
            bold=is_on(r_pr.find(qn('w:b'))),
            italic=is_on(r_pr.find(qn('w:i'))),
            font_size=_font_size(r_pr.find(qn('w:sz'))),
            right_to_left=is_on(r_pr.find(qn('w:rtl'))),
        )


def _font_size(sz: Optional[etree._Element]) -> Optional[float]:
    if sz is None:
        return None
    raw = sz.get(qn('w:val'))
    if raw is None:
        return None
    try:
        return float(raw) / 2.0  # half-points
    except ValueError:
        return None
