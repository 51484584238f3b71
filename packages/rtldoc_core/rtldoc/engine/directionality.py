"""
Directionality enforcer - right-to-left presentation for generated documents.

Marks every paragraph as bidirectional, right-aligns paragraphs that are left
aligned or unaligned, marks every run as right-to-left and makes sure the
document settings carry a default tab stop.

The stage is cosmetic: it never raises. Any failure stops the stage and is
reported through :attr:`EnforcementResult.diagnostic`, leaving the tree in
whatever state was reached.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import logging

from lxml import etree

from ..models.document import WordDocument
from ..utils.xml_utils import get_or_add_first, insert_in_order, qn

logger = logging.getLogger(__name__)

DEFAULT_TAB_STOP_TWIPS = 708  # 0.5 inch

_LEFT_ALIGNMENTS = frozenset({"left", "start"})

# Elements the schema places after w:bidi inside w:pPr.
_PPR_AFTER_BIDI = tuple(qn(f"w:{name}") for name in (
    "adjustRightInd", "snapToGrid", "spacing", "ind", "contextualSpacing",
    "mirrorIndents", "suppressOverlap", "jc", "textDirection", "textAlignment",
    "textboxTightWrap", "outlineLvl", "divId", "cnfStyle", "rPr", "sectPr",
    "pPrChange",
))
# Elements the schema places after w:jc inside w:pPr.
_PPR_AFTER_JC = _PPR_AFTER_BIDI[_PPR_AFTER_BIDI.index(qn("w:jc")) + 1:]
# Elements the schema places after w:rtl inside w:rPr.
_RPR_AFTER_RTL = tuple(qn(f"w:{name}") for name in (
    "cs", "em", "lang", "eastAsianLayout", "specVanish", "oMath", "rPrChange",
))
# Elements the schema places after w:defaultTabStop inside w:settings (w: unless prefixed).
_SETTINGS_AFTER_TAB_STOP = tuple(qn(name if ":" in name else f"w:{name}") for name in (
    "autoHyphenation", "consecutiveHyphenLimit", "hyphenationZone",
    "doNotHyphenateCaps", "showEnvelope", "summaryLength", "clickAndTypeStyle",
    "defaultTableStyle", "evenAndOddHeaders", "bookFoldRevPrinting", "bookFoldPrinting",
    "bookFoldPrintingSheets", "drawingGridHorizontalSpacing", "drawingGridVerticalSpacing",
    "displayHorizontalDrawingGridEvery", "displayVerticalDrawingGridEvery",
    "doNotUseMarginsForDrawingGridOrigin", "drawingGridHorizontalOrigin",
    "drawingGridVerticalOrigin", "doNotShadeFormData", "noPunctuationKerning",
    "characterSpacingControl", "printTwoOnOne", "strictFirstAndLastChars",
    "noLineBreaksAfter", "noLineBreaksBefore", "savePreviewPicture",
    "doNotValidateAgainstSchema", "saveInvalidXml", "ignoreMixedContent",
    "alwaysShowPlaceholderText", "doNotDemarcateInvalidXml", "saveXmlDataOnly",
    "useXSLTWhenSaving", "saveThroughXslt", "showXMLTags", "alwaysMergeEmptyNamespace",
    "updateFields", "hdrShapeDefaults", "footnotePr", "endnotePr", "compat", "docVars",
    "rsids", "m:mathPr", "attachedSchema", "themeFontLang", "clrSchemeMapping",
    "doNotIncludeSubdocsInStats", "doNotAutoCompressPictures", "forceUpgrade",
    "captions", "readModeInkLockDown", "smartTagType", "sl:schemaLibrary",
    "shapeDefaults", "doNotEmbedSmartTags", "decimalSymbol", "listSeparator",
))


@dataclass
class EnforcementResult:
    """Outcome of a directionality pass: the tree plus an optional non-fatal diagnostic."""
    document: WordDocument
    paragraphs: int = 0
    runs: int = 0
    diagnostic: Optional[str] = None

    @property
    def completed(self) -> bool:
        return self.diagnostic is None


class DirectionalityEnforcer:
    """Applies bidi and right alignment at paragraph and run granularity."""

    def __init__(self, default_tab_stop: int = DEFAULT_TAB_STOP_TWIPS) -> None:
        self.default_tab_stop = default_tab_stop

    def enforce(self, document: WordDocument) -> EnforcementResult:
        """
        Enforce right-to-left formatting on the whole document.

        Args:
            document: Document to modify in place

        Returns:
            EnforcementResult; ``diagnostic`` is set if the stage stopped early
        """
        result = EnforcementResult(document=document)
        try:
            for paragraph in document.iter_paragraphs():
                self.enforce_paragraph(paragraph)
                result.paragraphs += 1
                for run in paragraph.iter(qn("w:r")):
                    self.enforce_run(run)
                    result.runs += 1
            self.enforce_settings(document)
        except Exception as e:
            result.diagnostic = f"Right-to-left formatting stopped early: {e}"
            logger.warning(result.diagnostic)
        else:
            logger.debug(f"Right-to-left formatting applied to {result.paragraphs} paragraphs, "
                         f"{result.runs} runs")
        return result

    def enforce_paragraph(self, paragraph: etree._Element) -> None:
        """Ensure ``w:bidi`` and a right alignment unless centered/justified."""
        p_pr = get_or_add_first(paragraph, qn("w:pPr"))

        if p_pr.find(qn("w:bidi")) is None:
            insert_in_order(p_pr, etree.Element(qn("w:bidi")), _PPR_AFTER_BIDI)

        jc = p_pr.find(qn("w:jc"))
        value = jc.get(qn("w:val")) if jc is not None else None
        if jc is None or value is None or value in _LEFT_ALIGNMENTS:
            if jc is not None:
                p_pr.remove(jc)
            jc = etree.Element(qn("w:jc"))
            jc.set(qn("w:val"), "right")
            insert_in_order(p_pr, jc, _PPR_AFTER_JC)

    def enforce_run(self, run: etree._Element) -> None:
        """Ensure ``w:rtl`` on a run."""
        r_pr = get_or_add_first(run, qn("w:rPr"))
        if r_pr.find(qn("w:rtl")) is None:
            insert_in_order(r_pr, etree.Element(qn("w:rtl")), _RPR_AFTER_RTL)

    def enforce_settings(self, document: WordDocument) -> None:
        """Ensure a default tab stop, creating the settings part if needed."""
        settings = document.get_settings(create=True)
        if settings.find(qn("w:defaultTabStop")) is None:
            tab_stop = etree.Element(qn("w:defaultTabStop"))
            tab_stop.set(qn("w:val"), str(self.default_tab_stop))
            insert_in_order(settings, tab_stop, _SETTINGS_AFTER_TAB_STOP)


def enforce_rtl(document: WordDocument,
                default_tab_stop: int = DEFAULT_TAB_STOP_TWIPS) -> EnforcementResult:
    """Apply right-to-left formatting; never raises."""
    return DirectionalityEnforcer(default_tab_stop).enforce(document)
