"""
Module: generator.controller

Purpose:
    Orchestrate PDF generation for one document.
    Setup → Render passes until converged → Write → Verify

Key Functions:
    - generate_pdf(): Main entry point for generating a PDF

Key Classes:
    - GenerationResult: Complete generation result
    - GenerationError: Exception for generation failures

Dependencies:
    - crossref: Registry, formatter, convergence driver
    - render: ReportLab renderer and PyMuPDF verification
    - reportlab: LayoutError

Used By:
    - scripts/generate_sample_pdf.py
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

from reportlab.platypus.doctemplate import LayoutError

from papyrus.crossref.convergence import ConvergenceDriver, ConvergenceState
from papyrus.crossref.dialects import ReportLabDialect
from papyrus.crossref.formatter import CrossReferenceFormatter
from papyrus.crossref.oracle import ReferenceOracle
from papyrus.crossref.registry import DestinationRegistry
from papyrus.render.document import Document
from papyrus.render.pdf_renderer import PdfPassRenderer
from papyrus.render.verify import find_page_drift

from .config import GeneratorConfig

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """Error during PDF generation."""
    pass


@dataclass(frozen=True)
class GenerationResult:
    """
    Complete generation result (immutable).

    Attributes:
        pdf_path: Path to the generated PDF
        page_count: Number of pages in the final pass
        passes: Number of render passes
        state: DONE if every reference printed its page, else STALLED
        unresolved_names: Destinations still missing a page number
        destinations: Final name -> page map
        warnings: Any warnings during generation

    Example:
        >>> result = generate_pdf(document, index, config)
        >>> print(f"{result.page_count} pages after {result.passes} passes")
    """
    pdf_path: Path
    page_count: int
    passes: int
    state: ConvergenceState
    unresolved_names: Tuple[str, ...]
    destinations: Dict[str, int]
    warnings: Tuple[str, ...]

    @property
    def converged(self) -> bool:
        return self.state is ConvergenceState.DONE


def generate_pdf(
    document: Document,
    oracle: ReferenceOracle,
    config: GeneratorConfig,
) -> GenerationResult:
    """
    Generate a PDF with page-annotated cross-references.

    Pipeline:
    1. Create a registry, dialect and formatter for this run
    2. Render passes until every reference resolves or progress stops
    3. Write the final pass to disk
    4. (Optional) Compare printed page numbers with the pages in the PDF

    Args:
        document: Document to render
        oracle: Resolves reference names to documented entities
        config: Generation configuration

    Returns:
        GenerationResult with path and convergence details

    Raises:
        GenerationError: If the layout fails or the PDF cannot be written

    Example:
        >>> index = SymbolIndex([DocumentedEntity("Bbb")])
        >>> result = generate_pdf(document, index, GeneratorConfig(Path("api.pdf")))
        >>> result.converged
        True
    """
    warnings: List[str] = []
    start_time = time.perf_counter()

    logger.info(f"Generating {config.output_path} from {len(document)} blocks")

    # 1. Run-scoped state
    registry = DestinationRegistry()
    dialect = ReportLabDialect(
        link_color=config.layout.link_color,
        defined_destinations=document.destinations,
    )
    formatter = CrossReferenceFormatter(oracle, registry, dialect, config.options)
    renderer = PdfPassRenderer(document, formatter, registry, config.layout)

    # 2. Render until converged
    driver = ConvergenceDriver(
        registry,
        max_passes=config.max_passes,
        chase_page_drift=config.chase_page_drift,
    )
    try:
        result = driver.run(renderer.render_pass)
    except LayoutError as e:
        raise GenerationError(f"Failed to lay out {document.title!r}: {e}") from e

    if not result.converged:
        warnings.append(
            f"{result.residual_count} references left without a page number "
            f"after {result.passes} passes: {', '.join(result.unresolved_names)}"
        )

    # 3. Write the final pass
    output_path = Path(config.output_path)
    try:
        result.output.write_to(output_path)
    except OSError as e:
        raise GenerationError(f"Failed to write PDF to {output_path}: {e}") from e
    logger.info(f"Wrote PDF: {output_path}")

    # 4. Verify printed page numbers
    if config.verify_destinations:
        for drift in find_page_drift(result.output.pdf_bytes, registry):
            names = f" ({', '.join(drift.names)})" if drift.names else ""
            message = (
                f"Page indicator on page {drift.source_page} prints page "
                f"{drift.printed_page} but links to page {drift.actual_page}{names}"
            )
            logger.warning(message)
            warnings.append(message)

    elapsed = time.perf_counter() - start_time
    logger.info(f"PDF generation completed in {elapsed:.2f}s")

    return GenerationResult(
        pdf_path=output_path,
        page_count=result.output.page_count,
        passes=result.passes,
        state=result.state,
        unresolved_names=result.unresolved_names,
        destinations=registry.destinations(),
        warnings=tuple(warnings),
    )
