"""
Module: crossref.models

Purpose:
    Data models for cross-reference resolution.
    Immutable dataclasses for destinations, documented entities and the
    outcome of resolving one textual mention.

Key Classes:
    - Destination: Named, page-located anchor
    - DocumentedEntity: Entity handle returned by a reference oracle
    - NotAReference: Mention that names no documented entity
    - Resolved: Mention that names a documented entity

Dependencies:
    - dataclasses (std)

Used By:
    - crossref.oracle: Returns DocumentedEntity
    - crossref.formatter: Builds ResolutionResult values
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Destination:
    """
    A point in the rendered document that may be linked to.

    Attributes:
        name: Destination name, unique per document and stable across passes
        page: 1-based page the destination was placed on

    Example:
        >>> Destination("Bbb", 5)
        Destination(name='Bbb', page=5)
    """
    name: str
    page: int

    def __post_init__(self) -> None:
        """Validate page on construction."""
        if self.page < 1:
            raise ValueError(f"page must be 1-based: {self.page}")


@dataclass(frozen=True)
class DocumentedEntity:
    """
    A documented class, module, method or constant.

    Attributes:
        full_name: Fully qualified name, e.g. "Foo::Bar#baz"
        kind: Entity kind ("class", "module", "method", ...)
        destination: Explicit destination name (defaults to full_name)

    Example:
        >>> DocumentedEntity("Foo::Bar", "class").destination_name
        'Foo::Bar'
    """
    full_name: str
    kind: str = "class"
    destination: Optional[str] = None

    @property
    def destination_name(self) -> str:
        """Name of the PDF destination this entity is rendered at."""
        return self.destination or self.full_name

    @property
    def is_method(self) -> bool:
        return self.kind == "method"

    @property
    def method_name(self) -> Optional[str]:
        """Bare method name ("bar" for "Foo#bar"), None for namespaces."""
        if not self.is_method:
            return None
        name = self.full_name
        for separator in ("#", "::", "."):
            name = name.rsplit(separator, 1)[-1]
        return name


@dataclass(frozen=True)
class NotAReference:
    """Mention the oracle could not match to any entity."""
    original_text: str


@dataclass(frozen=True)
class Resolved:
    """
    Mention matched to a documented entity.

    Attributes:
        destination_name: Destination the link points to
        display_text: Link label
        page: Page of the destination, None when not yet placed
    """
    destination_name: str
    display_text: str
    page: Optional[int] = None

    @property
    def has_page(self) -> bool:
        return self.page is not None


ResolutionResult = Union[NotAReference, Resolved]
