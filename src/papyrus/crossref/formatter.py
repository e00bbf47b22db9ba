"""
Module: crossref.formatter

Purpose:
    Turn reference candidates in documentation text into output markup:
    a link with a page indicator, a link without one, a link with a page
    placeholder, or plain text.

    This is the heart of the forward-reference mechanism. Every reference
    is looked up with DestinationRegistry.lookup_and_mark(), so references
    to destinations that have not been rendered yet are counted and the
    convergence driver can decide whether another full pass will improve
    the output.

Key Classes:
    - CrossReferenceFormatter: One resolution algorithm for every dialect

Dependencies:
    - crossref.dialects: Output syntax
    - crossref.oracle: Name resolution
    - crossref.registry: Page lookup
    - crossref.patterns: Candidate recognition

Used By:
    - render.flowables: CrossrefParagraph formats at layout time
    - generator.controller: Builds one formatter per run
"""

from __future__ import annotations

import logging
from typing import Optional

from .dialects import OutputDialect
from .models import NotAReference, Resolved, ResolutionResult
from .options import FormatterOptions
from .oracle import ReferenceOracle
from .patterns import TokenKind, is_lowercase_word, scan
from .registry import DestinationRegistry

logger = logging.getLogger(__name__)

RDOC_REF_PREFIX = "rdoc-ref:"


class CrossReferenceFormatter:
    """
    Resolves cross-references against an oracle and a destination registry.

    Args:
        oracle: Name resolution collaborator
        registry: Run-scoped destination registry
        dialect: Output syntax
        options: Formatting policy

    Example:
        >>> formatter = CrossReferenceFormatter(oracle, registry, ReportLabDialect())
        >>> formatter.format_text("See Bbb for details.")
        'See Bbb (p. ???) for details.'
    """

    def __init__(
        self,
        oracle: ReferenceOracle,
        registry: DestinationRegistry,
        dialect: OutputDialect,
        options: Optional[FormatterOptions] = None,
    ) -> None:
        self.oracle = oracle
        self.registry = registry
        self.dialect = dialect
        self.options = options or FormatterOptions()

    def format_text(self, text: str, mark_unresolved: bool = True) -> str:
        """
        Format documentation text, resolving every recognized reference.

        Args:
            text: Raw documentation text
            mark_unresolved: Record references without a known page in the
                registry. Layout code that only measures text passes False.

        Returns:
            Output markup in this formatter's dialect
        """
        parts = []
        for token in scan(text, self.options.hyperlink_all):
            if token.kind is TokenKind.CROSSREF:
                parts.append(self.handle_crossref(token.text, mark_unresolved))
            elif token.kind is TokenKind.RDOC_REF:
                parts.append(self.handle_rdoc_ref(token.text, mark_unresolved))
            else:
                parts.append(self.dialect.escape(token.text))
        return "".join(parts)

    def handle_crossref(self, text: str, mark_unresolved: bool = True) -> str:
        """
        Handle a reference candidate found by the recognizer.

        Unless hyperlink_all is set, all-lowercase words are ordinary prose
        ("new", "each") and are returned unchanged without consulting the
        oracle.
        """
        if not self.options.hyperlink_all and is_lowercase_word(text):
            return self.dialect.emit_plain_text(text)
        return self.resolve_reference(text, mark_unresolved=mark_unresolved)

    def handle_rdoc_ref(self, text: str, mark_unresolved: bool = True) -> str:
        """
        Handle an explicit ``rdoc-ref:TARGET`` link.

        The target is resolved verbatim and is also the link label. A link
        without a target is printed as it was written.
        """
        target = text[len(RDOC_REF_PREFIX):] if text.startswith(RDOC_REF_PREFIX) else text
        if not target:
            logger.debug(f"Explicit reference without target: {text!r}")
            return self.dialect.emit_plain_text(text)
        return self.resolve_reference(target, display_name=target, mark_unresolved=mark_unresolved)

    def resolve_reference(
        self,
        raw_name: str,
        display_name: Optional[str] = None,
        mark_unresolved: bool = True,
    ) -> str:
        """
        Resolve one reference name into output markup.

        Args:
            raw_name: Name to resolve (class, method, ...)
            display_name: Link label; derived from raw_name when omitted
            mark_unresolved: Record a missing page in the registry

        Returns:
            Output markup for the reference
        """
        result = self.resolve(raw_name, display_name, mark_unresolved)
        if isinstance(result, NotAReference):
            return self.dialect.emit_plain_text(result.original_text)

        if result.has_page:
            markup = self.dialect.emit_link(result.destination_name, result.display_text)
            if self.options.show_pages:
                markup += self.dialect.emit_page_annotation(result.destination_name, result.page)
            return markup

        markup = self.dialect.emit_pending_link(result.destination_name, result.display_text)
        if self.options.show_pages:
            markup += self.dialect.emit_page_placeholder()
        return markup

    def resolve(
        self,
        raw_name: str,
        display_name: Optional[str] = None,
        mark_unresolved: bool = True,
    ) -> ResolutionResult:
        """
        Resolve a reference name without producing markup.

        Marks the destination as unresolved in the registry when its page
        is not known yet, unless ``mark_unresolved`` is False.

        Returns:
            NotAReference or Resolved
        """
        if display_name is None:
            display_name = self.options.display_name_for(raw_name)

        resolved = self.oracle.resolve(raw_name, display_name)
        # A string means the name is not a documented entity
        if isinstance(resolved, str):
            return NotAReference(resolved)

        destination = resolved.destination_name
        if not mark_unresolved:
            return Resolved(destination, display_name, self.registry.lookup(destination))

        page = self.registry.lookup_and_mark(destination)
        if page is None:
            logger.debug(f"Unresolved PDF reference to {destination}")
        return Resolved(destination, display_name, page)
