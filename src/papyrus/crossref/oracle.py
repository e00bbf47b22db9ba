"""
Module: crossref.oracle

Purpose:
    Name resolution for cross-references: maps a textual name such as
    ``Foo::Bar#baz`` to a documented entity.

    The formatter treats the oracle as opaque. SymbolIndex is an in-memory
    implementation good enough for generated API documentation; callers with
    their own code-object model supply any object matching ReferenceOracle.

Key Classes:
    - ReferenceOracle: Protocol the formatter depends on
    - SymbolIndex: In-memory oracle over registered entities

Dependencies:
    - crossref.models: DocumentedEntity

Used By:
    - crossref.formatter: resolve()
    - generator.controller: generate_pdf()
"""

from __future__ import annotations

import logging
import re
from threading import Lock
from typing import Dict, Iterable, List, Optional, Protocol, Union

from .models import DocumentedEntity

logger = logging.getLogger(__name__)

# Trailing argument list in references like "Foo#bar(a, b)"
_ARGS_SUFFIX = re.compile(r"\([^()]*\)$")


class ReferenceOracle(Protocol):
    """Maps a reference name to an entity, or to plain text when unknown."""

    def resolve(self, raw_name: str, display_name: str) -> Union[DocumentedEntity, str]:
        """
        Resolve ``raw_name``.

        Returns:
            The documented entity, or a string to print instead when the
            name is not a documented entity
        """
        ...


class SymbolIndex:
    """
    In-memory oracle over documented entities.

    Resolution order:
    1. Escaped names (``\\Foo``) are never resolved; the name is returned
       without the backslash.
    2. Exact full name, after dropping a trailing argument list.
    3. ``#meth`` / ``::meth`` / ``.meth`` relative to the context namespace.
    4. ``Class.meth`` and ``Class::meth`` spelled with the other separator.
    5. A bare method name that is defined exactly once.

    Example:
        >>> index = SymbolIndex([DocumentedEntity("Bbb")])
        >>> index.resolve("Bbb", "Bbb").destination_name
        'Bbb'
        >>> index.resolve("Ccc", "Ccc")
        'Ccc'
    """

    def __init__(
        self,
        entities: Iterable[DocumentedEntity] = (),
        context: Optional[str] = None,
    ) -> None:
        """
        Initialize index.

        Args:
            entities: Entities to register
            context: Namespace that prefixed method references resolve in
        """
        self._entities: Dict[str, DocumentedEntity] = {}
        self._by_method: Dict[str, List[DocumentedEntity]] = {}
        self._lock = Lock()
        self.context = context
        for entity in entities:
            self.add(entity)

    def add(self, entity: DocumentedEntity) -> None:
        """Register an entity under its full name."""
        with self._lock:
            if entity.full_name in self._entities:
                logger.debug(f"Replacing documented entity {entity.full_name}")
            self._entities[entity.full_name] = entity
            if entity.method_name:
                self._by_method.setdefault(entity.method_name, []).append(entity)

    def get(self, full_name: str) -> Optional[DocumentedEntity]:
        with self._lock:
            return self._entities.get(full_name)

    def __len__(self) -> int:
        return len(self._entities)

    def resolve(self, raw_name: str, display_name: str) -> Union[DocumentedEntity, str]:
        """
        Resolve a reference name.

        Args:
            raw_name: Name as written in the documentation
            display_name: Label the caller will use for the link

        Returns:
            Matching entity, or the text to print when nothing matches
        """
        if raw_name.startswith("\\"):
            return display_name[1:] if display_name.startswith("\\") else display_name

        name = _ARGS_SUFFIX.sub("", raw_name)
        with self._lock:
            entity = self._find(name)
        if entity is None:
            logger.debug(f"No documented entity named {raw_name}")
            return display_name
        return entity

    def _find(self, name: str) -> Optional[DocumentedEntity]:
        """Lookup without locking. Caller holds the lock."""
        if name in self._entities:
            return self._entities[name]

        stripped = name.lstrip(":")
        if stripped != name and stripped in self._entities:
            return self._entities[stripped]

        for prefix in ("#", "::", "."):
            if name.startswith(prefix):
                return self._find_method(name[len(prefix):])

        for separator in ("::", "."):
            if separator in name:
                owner, _, method = name.rpartition(separator)
                for other in ("#", "::", "."):
                    candidate = f"{owner}{other}{method}"
                    if candidate in self._entities:
                        return self._entities[candidate]
        return None

    def _find_method(self, method: str) -> Optional[DocumentedEntity]:
        if self.context:
            for separator in ("#", "::", "."):
                candidate = f"{self.context}{separator}{method}"
                if candidate in self._entities:
                    return self._entities[candidate]
        candidates = self._by_method.get(method, [])
        if len(candidates) == 1:
            return candidates[0]
        return None
