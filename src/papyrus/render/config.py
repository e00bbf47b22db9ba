"""
Module: render.config

Purpose:
    Configuration for PDF page layout.
    Defines page dimensions, margins, type sizes and footer settings.

Key Classes:
    - PageLayoutConfig: Immutable layout configuration

Dependencies:
    - reportlab.lib.pagesizes: Default A4 page size

Used By:
    - render.pdf_renderer: Page template and styles
    - generator.config: GeneratorConfig.layout
"""

from __future__ import annotations

from dataclasses import dataclass

from reportlab.lib.pagesizes import A4

from papyrus.crossref.dialects import DEFAULT_LINK_COLOR

A4_WIDTH_PT, A4_HEIGHT_PT = A4


@dataclass(frozen=True)
class PageLayoutConfig:
    """
    Configuration for page layout (immutable).

    All lengths are in PDF points (1/72 inch).

    Attributes:
        page_width: Page width
        page_height: Page height
        margin_top: Top margin
        margin_bottom: Bottom margin (the footer sits inside it)
        margin_left: Left margin
        margin_right: Right margin
        body_font_size: Font size for running text
        heading_font_sizes: Font sizes for heading levels 1, 2, ...
        link_color: Colour of internal links
        show_footer: Print the page number at the bottom of every page
        footer_font_size: Footer font size
        figure_max_height: Figures taller than this are scaled down

    Example:
        >>> config = PageLayoutConfig()
        >>> round(config.available_width)
        451
    """

    # Page dimensions
    page_width: float = A4_WIDTH_PT
    page_height: float = A4_HEIGHT_PT

    # Margins
    margin_top: float = 72
    margin_bottom: float = 72
    margin_left: float = 72
    margin_right: float = 72

    # Type
    body_font_size: float = 10
    heading_font_sizes: tuple[float, ...] = (20, 16, 13, 11)
    link_color: str = DEFAULT_LINK_COLOR

    # Footer
    show_footer: bool = True
    footer_font_size: float = 8

    # Figures
    figure_max_height: float = 400

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive: {self.page_width}")
        if self.page_height <= 0:
            raise ValueError(f"page_height must be positive: {self.page_height}")
        if self.available_width <= 0:
            raise ValueError("Margins exceed page width")
        if self.available_height <= 0:
            raise ValueError("Margins exceed page height")
        if self.body_font_size <= 0:
            raise ValueError(f"body_font_size must be positive: {self.body_font_size}")
        if not self.heading_font_sizes:
            raise ValueError("heading_font_sizes must not be empty")

    @property
    def available_width(self) -> float:
        """Width available for content (excluding margins)."""
        return self.page_width - self.margin_left - self.margin_right

    @property
    def available_height(self) -> float:
        """Height available for content (excluding margins)."""
        return self.page_height - self.margin_top - self.margin_bottom

    @property
    def page_size(self) -> tuple[float, float]:
        return (self.page_width, self.page_height)

    def heading_font_size(self, level: int) -> float:
        """Font size for a 1-based heading level; deeper levels reuse the smallest."""
        index = min(max(level, 1), len(self.heading_font_sizes)) - 1
        return self.heading_font_sizes[index]
