"""
Module: crossref.dialects

Purpose:
    Output syntax for cross-references. The resolution algorithm lives in
    crossref.formatter; a dialect only decides how links, page indicators,
    placeholders and plain text are spelled.

Key Functions:
    - pdf_destination_key(): Destination name -> PDF-safe key

Key Classes:
    - OutputDialect: Capability interface implemented per output format
    - ReportLabDialect: ReportLab paragraph markup (PDF output)
    - LatexDialect: LaTeX with hyperref

Dependencies:
    - xml.sax.saxutils (std): XML escaping for ReportLab markup

Used By:
    - crossref.formatter: CrossReferenceFormatter
    - render.pdf_renderer: Builds paragraphs with ReportLabDialect
"""

from __future__ import annotations

import re
from typing import Iterable, Protocol
from xml.sax.saxutils import escape as xml_escape, quoteattr

PAGE_PLACEHOLDER = "???"
DEFAULT_LINK_COLOR = "#1a4f8b"

# PDF names treat "#" as an escape character; keys use only safe characters
_PDF_KEY_UNSAFE = re.compile(r"[^A-Za-z0-9_.\-]")


def pdf_destination_key(name: str) -> str:
    """
    PDF destination key for a destination name.

    Unsafe characters become a fixed-width escape, so distinct names
    always get distinct keys.

    Example:
        >>> pdf_destination_key("Aaa#initialize")
        'Aaa~000023initialize'
    """
    return _PDF_KEY_UNSAFE.sub(lambda m: f"~{ord(m.group(0)):06x}", name)


class OutputDialect(Protocol):
    """Syntax primitives the formatter needs from an output format."""

    def escape(self, text: str) -> str:
        """Escape characters that are special in the output markup."""
        ...

    def emit_plain_text(self, text: str) -> str:
        """Unlinked text."""
        ...

    def emit_link(self, destination: str, label: str) -> str:
        """Link to a destination whose page is known."""
        ...

    def emit_pending_link(self, destination: str, label: str) -> str:
        """Link to a destination that has not been placed yet."""
        ...

    def emit_page_annotation(self, destination: str, page: int) -> str:
        """Page indicator appended after a link."""
        ...

    def emit_page_placeholder(self) -> str:
        """Stand-in for a page indicator that cannot be printed yet."""
        ...


class ReportLabDialect:
    """
    ReportLab paragraph mini-markup.

    Links are internal ``<a href="#key">`` links to bookmarks defined with
    ``canvas.bookmarkHorizontal``, keyed by pdf_destination_key(). ReportLab
    writes them as explicit page destinations when the document is saved.

    Args:
        link_color: Colour of link text
        defined_destinations: Destinations the document renders. Pending
            references to these are linked; others print unlinked.

    Example:
        >>> ReportLabDialect().emit_link("Bbb", "Bbb")
        '<a href="#Bbb" color="#1a4f8b">Bbb</a>'
    """

    def __init__(
        self,
        link_color: str = DEFAULT_LINK_COLOR,
        defined_destinations: Iterable[str] = (),
    ) -> None:
        self.link_color = link_color
        self.defined_destinations = frozenset(defined_destinations)

    def escape(self, text: str) -> str:
        return xml_escape(text)

    def emit_plain_text(self, text: str) -> str:
        return self.escape(text)

    def emit_link(self, destination: str, label: str) -> str:
        href = quoteattr(f"#{pdf_destination_key(destination)}")
        color = quoteattr(self.link_color)
        return f"<a href={href} color={color}>{self.escape(label)}</a>"

    def emit_pending_link(self, destination: str, label: str) -> str:
        # ReportLab refuses to save a document that links to a named
        # destination that is never defined. Destinations the document
        # renders are defined by the time the pass is saved.
        if destination in self.defined_destinations:
            return self.emit_link(destination, label)
        return self.escape(label)

    def emit_page_annotation(self, destination: str, page: int) -> str:
        return f" [p. {self.emit_link(destination, str(page))}]"

    def emit_page_placeholder(self) -> str:
        return f" (p. {PAGE_PLACEHOLDER})"


# Characters with special meaning in LaTeX running text
_LATEX_SPECIALS = {
    "\\": r"\textbackslash{}",
    "{": r"\{",
    "}": r"\}",
    "$": r"\$",
    "&": r"\&",
    "#": r"\#",
    "^": r"\^{}",
    "_": r"\_",
    "%": r"\%",
    "~": r"\textasciitilde{}",
}
_LATEX_SPECIALS_REGEXP = re.compile("|".join(re.escape(c) for c in _LATEX_SPECIALS))
_LATEX_LABEL_REGEXP = re.compile(r"[^\w:.\-]")


class LatexDialect:
    """
    LaTeX with the hyperref package.

    Destination names are used as ``\\label`` keys. Namespace separators
    get a ``\\-`` hyphenation hint so long names such as
    ``Foo::Bar::Baz::FooBar`` can be broken across lines instead of running
    into the margin.

    Example:
        >>> LatexDialect().emit_link("Foo::Bar", "Foo::Bar")
        '\\\\hyperref[Foo::Bar]{Foo\\\\-::Bar}'
    """

    def escape(self, text: str) -> str:
        return _LATEX_SPECIALS_REGEXP.sub(lambda m: _LATEX_SPECIALS[m.group(0)], text)

    def hyphenate(self, text: str) -> str:
        """Escape text and allow line breaks before ``::``."""
        return self.escape(text).replace("::", r"\-::")

    def emit_plain_text(self, text: str) -> str:
        return self.hyphenate(text)

    def latex_label(self, destination: str) -> str:
        """Label key for a destination; characters LaTeX rejects are hex-encoded."""
        return _LATEX_LABEL_REGEXP.sub(lambda m: f"-{ord(m.group(0)):x}-", destination)

    def emit_link(self, destination: str, label: str) -> str:
        return rf"\hyperref[{self.latex_label(destination)}]{{{self.hyphenate(label)}}}"

    def emit_pending_link(self, destination: str, label: str) -> str:
        # LaTeX resolves \hyperref targets itself, an undefined one only warns
        return self.emit_link(destination, label)

    def emit_page_annotation(self, destination: str, page: int) -> str:
        return rf" \nolinebreak[2][p.~\hyperref[{self.latex_label(destination)}]{{{page}}}]"

    def emit_page_placeholder(self) -> str:
        return rf" \nolinebreak[2](p.~{PAGE_PLACEHOLDER})"
