"""
Module: generator

Purpose:
    End-to-end PDF generation: configuration and the pipeline controller.

Key Functions:
    - generate_pdf(): Render, converge, write and verify

Key Classes:
    - GeneratorConfig: Generation configuration
    - GenerationResult: Outcome of generate_pdf()
    - GenerationError: Raised when generation fails
"""

from .config import GeneratorConfig
from .controller import GenerationError, GenerationResult, generate_pdf

__all__ = [
    "GeneratorConfig",
    "GenerationError",
    "GenerationResult",
    "generate_pdf",
]
