"""
Module: render.flowables

Purpose:
    ReportLab flowables that take part in cross-reference resolution.

    Platypus draws each flowable right after placing it, so by the time a
    flowable is placed every flowable before it has already been drawn on
    its final page. DestinationFlowable registers its page when drawn;
    CrossrefParagraph formats its text when wrapped for placement.
    Together they make backward references resolve within the same pass
    and leave forward references to the next one.

Key Classes:
    - DestinationFlowable: Wraps content and defines a bookmark
    - CrossrefParagraph: Paragraph whose references are resolved at layout time

Dependencies:
    - reportlab.platypus: Flowable, Paragraph

Used By:
    - render.pdf_renderer: Story construction
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import Flowable, Paragraph

from papyrus.crossref.dialects import pdf_destination_key
from papyrus.crossref.formatter import CrossReferenceFormatter

logger = logging.getLogger(__name__)

# Callback receiving (destination name, 1-based page number)
DestinationSink = Callable[[str, int], None]


class DestinationFlowable(Flowable):
    """
    Content that defines a PDF destination where it is drawn.

    The wrapped content is never split, so the destination and its content
    always land on the same page.

    Args:
        name: Destination name
        content: Flowable drawn at the destination (usually a heading)
        sink: Receives (name, page) when the content is drawn
        outline_title: Title for the PDF outline; None to skip the outline
        outline_level: 0-based outline level
    """

    def __init__(
        self,
        name: str,
        content: Flowable,
        sink: DestinationSink,
        outline_title: Optional[str] = None,
        outline_level: int = 0,
    ) -> None:
        Flowable.__init__(self)
        self.name = name
        self.content = content
        self.sink = sink
        self.outline_title = outline_title
        self.outline_level = outline_level
        style = getattr(content, "style", None)
        self.keepWithNext = getattr(style, "keepWithNext", 0)

    def wrap(self, availWidth: float, availHeight: float) -> Tuple[float, float]:
        self.width, self.height = self.content.wrap(availWidth, availHeight)
        return self.width, self.height

    def getSpaceBefore(self) -> float:
        return self.content.getSpaceBefore()

    def getSpaceAfter(self) -> float:
        return self.content.getSpaceAfter()

    def draw(self) -> None:
        page = self.canv.getPageNumber()
        key = pdf_destination_key(self.name)
        self.canv.bookmarkHorizontal(key, 0, self.height)
        if self.outline_title is not None:
            self.canv.addOutlineEntry(self.outline_title, key, level=self.outline_level)
        logger.debug(f"Destination {self.name} placed on page {page}")
        self.sink(self.name, page)
        self.content.drawOn(self.canv, 0, 0)

    def __repr__(self) -> str:
        return f"DestinationFlowable({self.name!r})"


class CrossrefParagraph(Flowable):
    """
    Paragraph of documentation text formatted when it is laid out.

    The markup is rebuilt on every wrap, so a paragraph pushed to the next
    page picks up destinations drawn in the meantime. Wrapping only
    measures: platypus also wraps flowables it is not about to place (the
    paragraph after a keepWithNext heading is wrapped before the heading is
    drawn). Missing pages are recorded in the registry once the paragraph
    is actually drawn or split for placement.

    Args:
        text: Raw documentation text
        formatter: Formatter producing ReportLab paragraph markup
        style: Paragraph style
    """

    def __init__(
        self,
        text: str,
        formatter: CrossReferenceFormatter,
        style: ParagraphStyle,
    ) -> None:
        Flowable.__init__(self)
        self.text = text
        self.formatter = formatter
        self.style = style
        self._paragraph: Optional[Paragraph] = None
        self._markup: Optional[str] = None

    @property
    def markup(self) -> str:
        """Markup of the most recent layout, formatting now if never laid out."""
        if self._markup is None:
            self._build()
        return self._markup

    def _build(self) -> Paragraph:
        self._markup = self.formatter.format_text(self.text, mark_unresolved=False)
        self._paragraph = Paragraph(self._markup, self.style)
        return self._paragraph

    def _mark_unresolved(self) -> None:
        self.formatter.format_text(self.text, mark_unresolved=True)

    def wrap(self, availWidth: float, availHeight: float) -> Tuple[float, float]:
        paragraph = self._build()
        self.width, self.height = paragraph.wrap(availWidth, availHeight)
        return self.width, self.height

    def split(self, availWidth: float, availHeight: float) -> List[Flowable]:
        paragraph = self._paragraph or self._build()
        parts = paragraph.split(availWidth, availHeight)
        if parts:
            self._mark_unresolved()
        return parts

    def drawOn(self, canvas, x: float, y: float, _sW: float = 0) -> None:
        self._mark_unresolved()
        self._paragraph.drawOn(canvas, x, y, _sW)

    def getSpaceBefore(self) -> float:
        return self.style.spaceBefore

    def getSpaceAfter(self) -> float:
        return self.style.spaceAfter

    def __repr__(self) -> str:
        return f"CrossrefParagraph({self.text[:40]!r})"
