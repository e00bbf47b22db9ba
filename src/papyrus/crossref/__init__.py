"""
Module: crossref

Purpose:
    Forward-reference resolution for generated documentation.
    Tracks the pages destinations land on, resolves references against
    them, and re-renders until references stop improving.

Key Functions:
    - scan(): Find reference candidates in text

Key Classes:
    - DestinationRegistry: Run-scoped name -> page map
    - CrossReferenceFormatter: Reference resolution for any output dialect
    - ConvergenceDriver: Multi-pass render loop
    - SymbolIndex: In-memory name resolution

Dependencies:
    - None outside the standard library

Used By:
    - papyrus.render: PDF rendering
    - papyrus.generator: Generation pipeline
"""

from .models import Destination, DocumentedEntity, NotAReference, Resolved
from .registry import DestinationRegistry
from .oracle import ReferenceOracle, SymbolIndex
from .options import FormatterOptions
from .patterns import Token, TokenKind, scan
from .dialects import (
    OutputDialect,
    ReportLabDialect,
    LatexDialect,
    pdf_destination_key,
)
from .formatter import CrossReferenceFormatter
from .convergence import ConvergenceDriver, ConvergenceResult, ConvergenceState

__all__ = [
    # Models
    "Destination",
    "DocumentedEntity",
    "NotAReference",
    "Resolved",
    # Registry / oracle
    "DestinationRegistry",
    "ReferenceOracle",
    "SymbolIndex",
    # Formatting
    "FormatterOptions",
    "Token",
    "TokenKind",
    "scan",
    "OutputDialect",
    "ReportLabDialect",
    "LatexDialect",
    "pdf_destination_key",
    "CrossReferenceFormatter",
    # Convergence
    "ConvergenceDriver",
    "ConvergenceResult",
    "ConvergenceState",
]
