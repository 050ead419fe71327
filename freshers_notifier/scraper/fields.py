"""Freshers Notifier — Detail Page Field Extraction.

Turns a posting's detail page into a label → value mapping. The site
writes its fields as paragraphs that open with a bold label:

    <p><strong>Batch:</strong> 2023 / 2024</p>
    <p><strong>Apply Link:</strong> <a href="https://...">Click Here</a></p>

Extraction strategies implement FieldExtractor so another page template
can be supported without touching the listing scraper.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional

from selectolax.parser import HTMLParser, Node

from freshers_notifier.models import Fields
from freshers_notifier.utils.logger import get_logger

logger = get_logger(__name__)

# ── Field keys filled by the targeted pass ───────────────
APPLY_LINK = "Apply Link"
COMPANY_NAME = "Company Name"

_LABEL_SELECTOR = "strong, b"
_TEXT_TAG = "-text"


class ExtractionError(Exception):
    """Raised when a fetched page lacks the markup fields are read from."""


class FieldExtractor(ABC):
    """Extraction strategy interface.

    Contract:
      - extract(tree) returns every field it can find; missing fields
        are simply absent.
      - Raise ExtractionError when the page is not a usable detail page.
        Callers treat any exception as "skip this posting".
    """

    @abstractmethod
    def extract(self, tree: HTMLParser) -> Fields:
        """Extract labelled fields from a parsed detail page."""
        raise NotImplementedError


# ═══════════════════════════════════════════════════════════
# Helper Functions
# ═══════════════════════════════════════════════════════════


def _clean_label(raw: str) -> str:
    """Collapse whitespace and drop the trailing colon from a label."""
    return " ".join(raw.split()).rstrip(":").rstrip()


def _text_without(node: Node, skip: Node) -> str:
    """Concatenate the text under node, leaving out the subtree of skip.

    skip must be the first node matching _LABEL_SELECTOR under node;
    the walk is in document order, so the first label-tag element it
    meets is skip itself.
    """
    parts: list[str] = []
    skipped = False

    def walk(current: Node) -> None:
        nonlocal skipped
        for child in current.iter(include_text=True):
            if child.tag == _TEXT_TAG:
                parts.append(child.text_content or "")
            elif child.tag == "br":
                parts.append("\n")
            elif child.tag in ("strong", "b") and not skipped:
                skipped = True
            else:
                walk(child)

    walk(node)
    return "".join(parts)


def _split_block(block: Node) -> tuple[str, str]:
    """Split a paragraph into (label, value). Both are empty when unlabelled."""
    label_el = block.css_first(_LABEL_SELECTOR)
    if label_el is None:
        return "", ""
    label = _clean_label(label_el.text(deep=True))
    value = _text_without(block, label_el).strip()
    return label, value


def _find_link(
    blocks: list[Node], predicate: Callable[[str], bool]
) -> Optional[Node]:
    """Return the link inside the first block whose lower-cased label satisfies predicate.

    Blocks that match but hold no link are passed over.
    """
    for block in blocks:
        label_el = block.css_first(_LABEL_SELECTOR)
        if label_el is None:
            continue
        if not predicate(_clean_label(label_el.text(deep=True)).lower()):
            continue
        link = block.css_first("a")
        if link is not None:
            return link
    return None


# ═══════════════════════════════════════════════════════════
# Default Strategy
# ═══════════════════════════════════════════════════════════


class LabelledParagraphExtractor(FieldExtractor):
    """Reads "<p><strong>Label:</strong> value</p>" blocks.

    Two passes over the same paragraphs:
      1. Generic — every labelled paragraph with a non-empty value;
         a repeated label keeps its last value.
      2. Targeted — the apply link href and the company website link
         text. These always replace whatever the generic pass stored
         under the same keys, since older page templates label those
         blocks differently.
    """

    def __init__(self, block_selector: str = "p") -> None:
        self.block_selector = block_selector

    def extract(self, tree: HTMLParser) -> Fields:
        if tree.body is None:
            raise ExtractionError("Document has no body")

        blocks = tree.css(self.block_selector)
        if not blocks:
            raise ExtractionError(
                f"No '{self.block_selector}' blocks in document"
            )

        fields = Fields()

        # ── Generic pass ─────────────────────────────────
        for block in blocks:
            label, value = _split_block(block)
            if label and value:
                fields[label] = value

        # ── Targeted pass ────────────────────────────────
        apply_link = _find_link(blocks, lambda label: "apply link" in label)
        fields[APPLY_LINK] = (
            (apply_link.attributes.get("href") or "").strip() if apply_link else ""
        )

        company_link = _find_link(blocks, lambda label: "company website" in label)
        fields[COMPANY_NAME] = company_link.text(strip=True) if company_link else ""

        # Drop targeted keys that came out empty; Fields reads them as ""
        for key in (APPLY_LINK, COMPANY_NAME):
            if not fields[key]:
                del fields[key]

        logger.debug("Extracted %d fields: %s", len(fields), ", ".join(fields))
        return fields
