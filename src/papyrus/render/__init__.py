"""
Module: render

Purpose:
    PDF rendering for Papyrus documents.
    Lays out documents with ReportLab, defining bookmarks for
    referenceable headings and resolving references at layout time.

Key Functions:
    - read_page_links(): Page indicator links of a generated PDF
    - find_page_drift(): Printed page numbers the PDF contradicts

Key Classes:
    - PageLayoutConfig: Page layout configuration
    - Document: Blocks to render
    - PdfPassRenderer: One full render pass per call

Dependencies:
    - reportlab: PDF generation
    - PIL: Figure images
    - fitz (PyMuPDF): PDF inspection

Used By:
    - generator.controller: generate_pdf()
"""

from .config import PageLayoutConfig
from .document import Document, FigureBlock, Heading, TextBlock, VerticalSpace
from .flowables import CrossrefParagraph, DestinationFlowable
from .pdf_renderer import PdfPassRenderer, RenderedPass
from .verify import PageDrift, PageLink, find_page_drift, read_page_links

__all__ = [
    # Config
    "PageLayoutConfig",
    # Document model
    "Document",
    "Heading",
    "TextBlock",
    "FigureBlock",
    "VerticalSpace",
    # Rendering
    "CrossrefParagraph",
    "DestinationFlowable",
    "PdfPassRenderer",
    "RenderedPass",
    # Verification
    "PageDrift",
    "PageLink",
    "find_page_drift",
    "read_page_links",
]
