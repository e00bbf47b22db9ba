"""
Module: render.pdf_renderer

Purpose:
    Render a Document to PDF using ReportLab platypus. One call renders
    the whole document once (one pass); pages are laid out by ReportLab,
    so destination pages are only known as a side effect of rendering.

Key Functions:
    - pil_to_buffer(): PNG buffer for figure images

Key Classes:
    - RenderedPass: PDF bytes and page count of one pass
    - PdfPassRenderer: Builds the story and renders a pass

Dependencies:
    - reportlab: PDF generation
    - PIL: Figure images
    - crossref: Formatter and registry

Used By:
    - generator.controller: Passed to ConvergenceDriver.run()
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from PIL import Image
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfgen import canvas
from reportlab.platypus import Flowable, Image as ImageFlowable, KeepTogether, Paragraph, SimpleDocTemplate, Spacer

from papyrus.crossref.formatter import CrossReferenceFormatter
from papyrus.crossref.registry import DestinationRegistry

from .config import PageLayoutConfig
from .document import Document, FigureBlock, Heading, TextBlock, VerticalSpace
from .flowables import CrossrefParagraph, DestinationFlowable

logger = logging.getLogger(__name__)

FOOTER_FONT = "Helvetica"
HEADING_FONT = "Helvetica-Bold"


@dataclass(frozen=True)
class RenderedPass:
    """
    Output of one render pass.

    Attributes:
        pdf_bytes: Complete PDF file content
        page_count: Number of pages
        destinations: Destinations drawn in this pass (name -> page)
    """
    pdf_bytes: bytes
    page_count: int
    destinations: Dict[str, int] = field(default_factory=dict)

    def write_to(self, output_path: Path) -> None:
        """Write the PDF to ``output_path``, creating parent directories."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(self.pdf_bytes)


class PdfPassRenderer:
    """
    Renders a document to PDF, one full pass per call.

    Destinations drawn during a pass are registered immediately, so
    references later in the same pass already see them.

    Args:
        document: Document to render
        formatter: Formatter with a ReportLab dialect; shares ``registry``
        registry: Run-scoped destination registry
        config: Page layout

    Example:
        >>> renderer = PdfPassRenderer(document, formatter, registry)
        >>> rendered = renderer.render_pass()
        >>> rendered.page_count
        3
    """

    def __init__(
        self,
        document: Document,
        formatter: CrossReferenceFormatter,
        registry: DestinationRegistry,
        config: Optional[PageLayoutConfig] = None,
    ) -> None:
        self.document = document
        self.formatter = formatter
        self.registry = registry
        self.config = config or PageLayoutConfig()
        self.pass_count = 0
        self._placed: Dict[str, int] = {}
        self._page_count = 0
        self._styles = self._build_styles()

    def emit_destination(self, name: str, page: int) -> None:
        """Record that destination ``name`` was drawn on ``page``."""
        if name in self._placed:
            logger.warning(f"Destination {name} emitted twice in pass {self.pass_count}")
        self._placed[name] = page
        self.registry.register(name, page)

    def render_pass(self) -> RenderedPass:
        """
        Render the whole document once.

        Returns:
            RenderedPass with the PDF of this pass
        """
        self.pass_count += 1
        self._placed = {}
        self._page_count = 0

        buffer = io.BytesIO()
        cfg = self.config
        doc = SimpleDocTemplate(
            buffer,
            pagesize=cfg.page_size,
            leftMargin=cfg.margin_left,
            rightMargin=cfg.margin_right,
            topMargin=cfg.margin_top,
            bottomMargin=cfg.margin_bottom,
            title=self.document.title,
        )

        story = self.build_story()
        if not story:
            logger.warning("Empty document, creating empty PDF")
            story = [Spacer(1, 1)]

        doc.build(story, onFirstPage=self._on_page, onLaterPages=self._on_page)

        logger.info(
            f"Pass {self.pass_count}: rendered {self._page_count} pages, "
            f"{len(self._placed)} destinations"
        )
        return RenderedPass(
            pdf_bytes=buffer.getvalue(),
            page_count=self._page_count,
            destinations=dict(self._placed),
        )

    def build_story(self) -> List[Flowable]:
        """Convert document blocks to flowables."""
        story: List[Flowable] = []
        open_levels: List[int] = []
        offset = self.formatter.options.heading_level_offset

        for block in self.document:
            if isinstance(block, Heading):
                level = block.level + offset
                heading = Paragraph(
                    self.formatter.dialect.escape(block.text),
                    self._heading_style(level),
                )
                if block.destination is None:
                    story.append(heading)
                    continue
                # Outline depth counts enclosing headings, so it never skips a level
                while open_levels and open_levels[-1] >= level:
                    open_levels.pop()
                outline_level = len(open_levels)
                open_levels.append(level)
                story.append(DestinationFlowable(
                    block.destination,
                    heading,
                    self.emit_destination,
                    outline_title=block.text,
                    outline_level=outline_level,
                ))
            elif isinstance(block, TextBlock):
                story.append(CrossrefParagraph(block.text, self.formatter, self._styles["body"]))
            elif isinstance(block, FigureBlock):
                story.append(self._figure(block))
            elif isinstance(block, VerticalSpace):
                story.append(Spacer(1, block.height))
            else:
                raise TypeError(f"Unsupported block type: {type(block).__name__}")

        return story

    def _figure(self, block: FigureBlock) -> Flowable:
        """Scale an image to the text width, capped at figure_max_height."""
        cfg = self.config
        img = block.image
        width = min(block.width or cfg.available_width, cfg.available_width)
        height = width * img.height / img.width
        if height > cfg.figure_max_height:
            scale = cfg.figure_max_height / height
            width, height = width * scale, height * scale

        parts: List[Flowable] = [ImageFlowable(pil_to_buffer(img), width=width, height=height)]
        if block.caption:
            parts.append(CrossrefParagraph(block.caption, self.formatter, self._styles["caption"]))
        return KeepTogether(parts)

    def _heading_style(self, level: int) -> ParagraphStyle:
        key = f"heading{min(level, len(self.config.heading_font_sizes))}"
        return self._styles[key]

    def _build_styles(self) -> Dict[str, ParagraphStyle]:
        cfg = self.config
        base = getSampleStyleSheet()
        styles = {
            "body": ParagraphStyle(
                "PapyrusBody",
                parent=base["BodyText"],
                fontSize=cfg.body_font_size,
                leading=cfg.body_font_size * 1.3,
                spaceAfter=cfg.body_font_size * 0.6,
            ),
            "caption": ParagraphStyle(
                "PapyrusCaption",
                parent=base["Italic"],
                fontSize=cfg.body_font_size * 0.9,
                leading=cfg.body_font_size * 1.2,
                alignment=TA_CENTER,
                spaceAfter=cfg.body_font_size,
            ),
        }
        for level, size in enumerate(cfg.heading_font_sizes, start=1):
            styles[f"heading{level}"] = ParagraphStyle(
                f"PapyrusHeading{level}",
                parent=base["Normal"],
                fontName=HEADING_FONT,
                fontSize=size,
                leading=size * 1.25,
                spaceBefore=size * 0.8,
                spaceAfter=size * 0.4,
                keepWithNext=1,
            )
        return styles

    def _on_page(self, c: canvas.Canvas, doc: SimpleDocTemplate) -> None:
        """Page callback: count pages and draw the footer."""
        page = c.getPageNumber()
        self._page_count = max(self._page_count, page)
        if self.config.show_footer:
            _draw_footer(c, page, self.config)


def _draw_footer(c: canvas.Canvas, page: int, config: PageLayoutConfig) -> None:
    """
    Draw the centered page number in the bottom margin.

    Printed numbers are the same 1-based numbers page references use.
    """
    c.saveState()
    c.setFont(FOOTER_FONT, config.footer_font_size)
    c.setFillColorRGB(0.4, 0.4, 0.4)
    c.drawCentredString(config.page_width / 2, config.margin_bottom / 2, str(page))
    c.restoreState()


def pil_to_buffer(img: Image.Image) -> io.BytesIO:
    """
    Encode a PIL image as PNG for ReportLab.

    Args:
        img: PIL Image object

    Returns:
        Rewound PNG buffer
    """
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf
