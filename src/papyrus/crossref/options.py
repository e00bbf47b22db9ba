"""
Module: crossref.options

Purpose:
    Formatting policy for cross-references.

Key Classes:
    - FormatterOptions: Immutable formatter configuration

Dependencies:
    - dataclasses (std)

Used By:
    - crossref.formatter: Resolution policy
    - render.pdf_renderer: heading_level_offset
    - generator.config: GeneratorConfig.options
"""

from __future__ import annotations

from dataclasses import dataclass

# Character that marks an instance method reference ("#initialize")
METHOD_PREFIX = "#"


@dataclass(frozen=True)
class FormatterOptions:
    """
    Configuration for cross-reference formatting (immutable).

    Attributes:
        show_hash: Keep the leading ``#`` of method references in link labels
        show_pages: Append a page indicator after every resolved link
        hyperlink_all: Recognize every identifier-shaped word as a candidate
            reference (many false positives)
        heading_level_offset: Added to every heading level by the renderer,
            so nested documentation gets smaller headings

    Example:
        >>> options = FormatterOptions(show_pages=False)
        >>> options.show_hash
        False
    """

    show_hash: bool = False
    show_pages: bool = True
    hyperlink_all: bool = False
    heading_level_offset: int = 0

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.heading_level_offset < 0:
            raise ValueError(
                f"heading_level_offset must be non-negative: {self.heading_level_offset}"
            )

    def display_name_for(self, raw_name: str) -> str:
        """
        Derive the link label for a reference name.

        Strips exactly one leading method prefix unless show_hash is set.

        Example:
            >>> FormatterOptions().display_name_for("#initialize")
            'initialize'
        """
        if raw_name.startswith(METHOD_PREFIX) and not self.show_hash:
            return raw_name[len(METHOD_PREFIX):]
        return raw_name
