"""
Module: render.document

Purpose:
    Data model for a document to render.
    Immutable dataclasses for headings, text, figures and spacing.

Key Classes:
    - Heading: Section title, optionally defining a destination
    - TextBlock: Paragraph of documentation text with references
    - FigureBlock: Image with optional caption
    - VerticalSpace: Fixed vertical gap
    - Document: Ordered blocks

Dependencies:
    - PIL: Figure images

Used By:
    - render.pdf_renderer: Converts blocks to flowables
    - generator.controller: generate_pdf()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple, Union

from PIL import Image


@dataclass(frozen=True)
class Heading:
    """
    Section heading.

    Attributes:
        text: Heading text (not scanned for references)
        level: 1-based heading level
        destination: Destination defined where the heading lands

    Example:
        >>> Heading("class Bbb", level=2, destination="Bbb").is_destination
        True
    """
    text: str
    level: int = 1
    destination: Optional[str] = None

    def __post_init__(self) -> None:
        if self.level < 1:
            raise ValueError(f"level must be positive: {self.level}")

    @property
    def is_destination(self) -> bool:
        return self.destination is not None


@dataclass(frozen=True)
class TextBlock:
    """Paragraph of documentation text. References are resolved at layout time."""
    text: str


@dataclass(frozen=True)
class FigureBlock:
    """
    Image whose rendered height is only known once laid out.

    Attributes:
        image: PIL image
        caption: Optional caption text (scanned for references)
        width: Display width in points; None for the full text width
    """
    image: Image.Image
    caption: Optional[str] = None
    width: Optional[float] = None


@dataclass(frozen=True)
class VerticalSpace:
    """Fixed vertical gap in points."""
    height: float

    def __post_init__(self) -> None:
        if self.height < 0:
            raise ValueError(f"height must be non-negative: {self.height}")


Block = Union[Heading, TextBlock, FigureBlock, VerticalSpace]


@dataclass(frozen=True)
class Document:
    """
    Ordered content of one generated document.

    Example:
        >>> doc = Document("API", (Heading("class Bbb", destination="Bbb"),))
        >>> doc.destinations
        ('Bbb',)
    """
    title: str
    blocks: Tuple[Block, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    @property
    def destinations(self) -> Tuple[str, ...]:
        """Destination names defined by this document, in order."""
        return tuple(
            block.destination for block in self.blocks
            if isinstance(block, Heading) and block.destination is not None
        )
