"""
Module: crossref.convergence

Purpose:
    Re-render a document until every cross-reference can print its page,
    or until further passes stop helping.

    A single pass cannot resolve forward references: when the reference is
    laid out, the page of its target is not known yet. The first pass fills
    the registry with every destination in the document; the second pass
    resolves what the first could not. More passes only run while the number
    of unresolved references keeps shrinking.

States:
    IDLE -> RENDERING -> EVALUATING -> {RENDERING | DONE | STALLED}

Key Classes:
    - ConvergenceState: Driver state
    - ConvergenceResult: Final output with pass history
    - ConvergenceDriver: Pass loop

Dependencies:
    - crossref.registry: DestinationRegistry

Used By:
    - generator.controller: generate_pdf()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, List, Optional, Tuple, TypeVar

from .registry import DestinationRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_PASSES = 5


class ConvergenceState(Enum):
    """State of the pass loop."""
    IDLE = "idle"
    RENDERING = "rendering"
    EVALUATING = "evaluating"
    DONE = "done"
    STALLED = "stalled"

    @property
    def is_terminal(self) -> bool:
        return self in (ConvergenceState.DONE, ConvergenceState.STALLED)


@dataclass(frozen=True)
class ConvergenceResult(Generic[T]):
    """
    Outcome of a convergence run.

    Attributes:
        output: Output of the last pass
        state: DONE or STALLED
        passes: Number of passes rendered
        unresolved_history: Outstanding reference count after each pass
        unresolved_names: Names still unresolved after the last pass
        hit_pass_limit: True if the pass cap ended the run

    Example:
        >>> result.state, result.passes, result.unresolved_history
        (<ConvergenceState.DONE: 'done'>, 2, (1, 0))
    """
    output: T
    state: ConvergenceState
    passes: int
    unresolved_history: Tuple[int, ...]
    unresolved_names: Tuple[str, ...] = ()
    hit_pass_limit: bool = False

    @property
    def converged(self) -> bool:
        return self.state is ConvergenceState.DONE

    @property
    def residual_count(self) -> int:
        """References left with a placeholder in the final output."""
        return self.unresolved_history[-1] if self.unresolved_history else 0


class ConvergenceDriver(Generic[T]):
    """
    Drives full render passes against a shared registry.

    Args:
        registry: Registry shared with the renderer and formatter
        max_passes: Upper bound on passes, whatever the progress
        chase_page_drift: Also count references that printed a page the
            destination later moved away from

    Example:
        >>> driver = ConvergenceDriver(registry)
        >>> result = driver.run(renderer.render_pass)
        >>> result.converged
        True
    """

    def __init__(
        self,
        registry: DestinationRegistry,
        max_passes: int = DEFAULT_MAX_PASSES,
        chase_page_drift: bool = False,
    ) -> None:
        if max_passes < 1:
            raise ValueError(f"max_passes must be at least 1: {max_passes}")
        self.registry = registry
        self.max_passes = max_passes
        self.chase_page_drift = chase_page_drift
        self.state = ConvergenceState.IDLE
        self.history: List[int] = []

    def outstanding(self) -> int:
        """References the last pass could not annotate correctly."""
        count = self.registry.unresolved_count()
        if self.chase_page_drift:
            count += len(self.registry.stale_names())
        return count

    def run(self, render_pass: Callable[[], T]) -> ConvergenceResult[T]:
        """
        Render passes until converged or stalled.

        Args:
            render_pass: Renders the whole document once, registering
                destinations and looking up references in the registry

        Returns:
            ConvergenceResult holding the output of the final pass
        """
        self.history = []
        output: Optional[T] = None
        hit_pass_limit = False

        while True:
            self.registry.reset_pass_state()
            self.state = ConvergenceState.RENDERING
            output = render_pass()

            self.state = ConvergenceState.EVALUATING
            count = self.outstanding()
            previous = self.history[-1] if self.history else None
            self.history.append(count)
            logger.info(f"Pass {len(self.history)}: {count} unresolved references")

            if count == 0:
                self.state = ConvergenceState.DONE
                break
            if previous is not None and count >= previous:
                self.state = ConvergenceState.STALLED
                break
            if len(self.history) >= self.max_passes:
                hit_pass_limit = True
                self.state = ConvergenceState.STALLED
                break

        unresolved = self.registry.unresolved_names()
        if self.chase_page_drift:
            unresolved = tuple(sorted(set(unresolved) | set(self.registry.stale_names())))

        if self.state is ConvergenceState.STALLED:
            reason = "pass limit reached" if hit_pass_limit else "no progress"
            logger.warning(
                f"{count} references could not be page-annotated "
                f"after {len(self.history)} passes ({reason})"
            )
        else:
            logger.info(f"All references resolved after {len(self.history)} passes")

        return ConvergenceResult(
            output=output,
            state=self.state,
            passes=len(self.history),
            unresolved_history=tuple(self.history),
            unresolved_names=unresolved,
            hit_pass_limit=hit_pass_limit,
        )
