"""
Module: crossref.registry

Purpose:
    Run-scoped registry mapping PDF destination names to the pages they
    were placed on, plus the set of names looked up during the current
    pass that were not known yet.

    The registry is created once per generation run and handed to every
    component that defines or references destinations. Page knowledge
    accumulates across passes; only the unresolved bookkeeping is reset
    between passes.

Key Classes:
    - DestinationRegistry: Page map and pass-scoped miss tracking

Dependencies:
    - threading (std): Serializes reads and writes

Used By:
    - crossref.formatter: lookup_and_mark() for every reference
    - render.pdf_renderer: register() for every destination drawn
    - crossref.convergence: reset_pass_state() / unresolved_count()
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, Optional, Set, Tuple

from .models import Destination

logger = logging.getLogger(__name__)


class DestinationRegistry:
    """
    Mapping of destination name to 1-based page number.

    Thread-safe: a single lock guards the page map and the pass state, so
    sections rendered concurrently cannot corrupt either.

    Example:
        >>> registry = DestinationRegistry()
        >>> registry.lookup_and_mark("Bbb") is None
        True
        >>> registry.unresolved_count()
        1
        >>> registry.register("Bbb", 5)
        >>> registry.reset_pass_state()
        >>> registry.lookup_and_mark("Bbb")
        5
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._pages: Dict[str, int] = {}
        self._unresolved: Set[str] = set()
        # Page each hit was served with during the current pass
        self._served: Dict[str, int] = {}
        self._lock = Lock()

    def register(self, name: str, page: int) -> None:
        """
        Record that destination ``name`` was placed on ``page``.

        Overwrites any earlier mapping; re-registration is expected on
        every pass.

        Args:
            name: Destination name
            page: 1-based page number

        Raises:
            ValueError: If page is not a positive integer
        """
        if page < 1:
            raise ValueError(f"page must be 1-based: {page}")
        with self._lock:
            previous = self._pages.get(name)
            self._pages[name] = page
        if previous is not None and previous != page:
            logger.debug(f"Destination {name} moved from page {previous} to {page}")

    def lookup(self, name: str) -> Optional[int]:
        """Return the page of ``name`` or None. No side effects."""
        with self._lock:
            return self._pages.get(name)

    def lookup_and_mark(self, name: str) -> Optional[int]:
        """
        Return the page of ``name``, marking it unresolved on a miss.

        Every reference encountered while rendering goes through this
        method so the convergence driver can tell whether another pass
        is worthwhile.

        Args:
            name: Destination name

        Returns:
            Page number, or None if the destination is not known yet
        """
        with self._lock:
            page = self._pages.get(name)
            if page is None:
                self._unresolved.add(name)
            else:
                # The earliest page served is the one that can go stale
                self._served.setdefault(name, page)
            return page

    def reset_pass_state(self) -> None:
        """Clear the unresolved set before a new pass. Pages are kept."""
        with self._lock:
            self._unresolved.clear()
            self._served.clear()

    def unresolved_count(self) -> int:
        """Number of distinct names missed during the current pass."""
        with self._lock:
            return len(self._unresolved)

    def unresolved_names(self) -> Tuple[str, ...]:
        """Sorted names missed during the current pass."""
        with self._lock:
            return tuple(sorted(self._unresolved))

    def stale_names(self) -> Tuple[str, ...]:
        """
        Names whose page changed after a reference already printed it.

        A destination re-registered on a different page later in the same
        pass leaves earlier references pointing at the old page.

        Returns:
            Sorted tuple of names served with an outdated page
        """
        with self._lock:
            return tuple(sorted(
                name for name, page in self._served.items()
                if self._pages.get(name) != page
            ))

    def served_pages(self) -> Dict[str, int]:
        """Copy of the name -> page map served to references in the current pass."""
        with self._lock:
            return dict(self._served)

    def destinations(self) -> Dict[str, int]:
        """Copy of the name -> page map."""
        with self._lock:
            return dict(self._pages)

    def iter_destinations(self) -> Tuple[Destination, ...]:
        """All known destinations ordered by page, then name."""
        with self._lock:
            items = sorted(self._pages.items(), key=lambda item: (item[1], item[0]))
        return tuple(Destination(name, page) for name, page in items)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._pages

    def __len__(self) -> int:
        with self._lock:
            return len(self._pages)
