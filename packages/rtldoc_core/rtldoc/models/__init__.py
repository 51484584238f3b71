"""Document model: the owned package tree and run formatting signatures."""

from .document import WordDocument, paragraph_runs, paragraph_text, run_text
from .formatting import FormattingSignature

__all__ = [
    "WordDocument",
    "FormattingSignature",
    "paragraph_runs",
    "paragraph_text",
    "run_text",
]
