"""
Module: generator.config

Purpose:
    Configuration dataclass for PDF generation. Immutable configuration
    with validation on construction.

Key Classes:
    - GeneratorConfig: Main configuration for generating a PDF

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - generator.controller: generate_pdf()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from papyrus.crossref.convergence import DEFAULT_MAX_PASSES
from papyrus.crossref.options import FormatterOptions
from papyrus.render.config import PageLayoutConfig


@dataclass(frozen=True)
class GeneratorConfig:
    """
    Configuration for generating a PDF (immutable).

    Attributes:
        output_path: Where the final PDF is written
        options: Reference formatting options
        layout: Page layout
        max_passes: Upper bound on render passes
        chase_page_drift: Keep rendering while printed pages are stale
        verify_destinations: Read the PDF back and report page drift

    Example:
        >>> config = GeneratorConfig(
        ...     output_path=Path("out/api.pdf"),
        ...     options=FormatterOptions(show_hash=True),
        ... )
    """

    # Required
    output_path: Path

    # Formatting
    options: FormatterOptions = field(default_factory=FormatterOptions)
    layout: PageLayoutConfig = field(default_factory=PageLayoutConfig)

    # Convergence
    max_passes: int = DEFAULT_MAX_PASSES
    chase_page_drift: bool = False

    # Verification
    verify_destinations: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.max_passes < 1:
            raise ValueError(f"max_passes must be at least 1: {self.max_passes}")
        if not str(self.output_path):
            raise ValueError("output_path must not be empty")
        if Path(self.output_path).suffix.lower() != ".pdf":
            raise ValueError(f"output_path must end in .pdf: {self.output_path}")
