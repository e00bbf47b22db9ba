"""
Module: render.verify

Purpose:
    Check a generated PDF against the page numbers it prints. Every page
    indicator (" [p. 5]") is a link to its destination, so the number inside
    the link can be compared with the page the link jumps to. A mismatch
    means a destination moved after references already printed its old page.

Key Functions:
    - read_page_links(): Page indicator links found in a PDF
    - find_page_drift(): Page indicators the PDF contradicts

Key Classes:
    - PageLink: One page indicator and its target
    - PageDrift: One mismatching page indicator

Dependencies:
    - fitz (PyMuPDF): PDF inspection

Used By:
    - generator.controller: Post-generation check
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

import fitz

from papyrus.crossref.registry import DestinationRegistry

logger = logging.getLogger(__name__)

PdfSource = Union[Path, bytes]

PAGE_NUMBER_REGEXP = re.compile(r"\d+")

# Link rectangles can catch the brackets around the number
_INDICATOR_PUNCTUATION = " []()p.\n"


@dataclass(frozen=True)
class PageLink:
    """
    Page indicator link read from a PDF.

    Attributes:
        source_page: Page the indicator is printed on
        printed_page: Page number the indicator shows
        target_page: Page the link jumps to
    """
    source_page: int
    printed_page: int
    target_page: int


@dataclass(frozen=True)
class PageDrift:
    """
    Page indicator whose printed number differs from the page it links to.

    Attributes:
        source_page: Page the indicator is printed on
        printed_page: Page number the indicator shows
        actual_page: Page the destination occupies in the PDF
        names: Destinations that were served ``printed_page`` and now sit
            on ``actual_page`` (empty when no registry was given)
    """
    source_page: int
    printed_page: int
    actual_page: int
    names: Tuple[str, ...] = ()


def _open(source: PdfSource) -> fitz.Document:
    if isinstance(source, bytes):
        return fitz.open(stream=source, filetype="pdf")
    return fitz.open(source)


def read_page_links(source: PdfSource) -> List[PageLink]:
    """
    Read page indicator links from a PDF.

    Internal links whose text is a number are page indicators; links
    labelled with a name are skipped.

    Args:
        source: PDF path or PDF bytes

    Returns:
        PageLink per indicator, in page order

    Example:
        >>> read_page_links(Path("api.pdf"))
        [PageLink(source_page=1, printed_page=5, target_page=5)]
    """
    links: List[PageLink] = []
    with _open(source) as doc:
        for page in doc:
            for link in page.get_links():
                if link.get("kind") != fitz.LINK_GOTO:
                    continue
                text = page.get_textbox(link["from"]).strip(_INDICATOR_PUNCTUATION)
                if not PAGE_NUMBER_REGEXP.fullmatch(text):
                    continue
                target = link.get("page", -1)
                if target is None or target < 0:
                    logger.debug(f"Page indicator on page {page.number + 1} has no page target")
                    continue
                links.append(PageLink(page.number + 1, int(text), target + 1))
    return links


def _names_for(registry: DestinationRegistry, link: PageLink) -> Tuple[str, ...]:
    pages = registry.destinations()
    return tuple(sorted(
        name for name, served in registry.served_pages().items()
        if served == link.printed_page and pages.get(name) == link.target_page
    ))


def find_page_drift(
    source: PdfSource,
    registry: Optional[DestinationRegistry] = None,
) -> List[PageDrift]:
    """
    Compare printed page numbers with the pages their links jump to.

    Args:
        source: PDF path or PDF bytes
        registry: Registry used for the pass that produced the PDF, used to
            name the drifting destinations

    Returns:
        PageDrift for every page indicator that disagrees with its link
    """
    drift = []
    for link in read_page_links(source):
        if link.printed_page == link.target_page:
            continue
        names = _names_for(registry, link) if registry is not None else ()
        drift.append(PageDrift(link.source_page, link.printed_page, link.target_page, names))
    return drift
