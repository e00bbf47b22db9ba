"""
Unit tests for SymbolIndex name resolution.

Verified: 2026-10-18
"""

from papyrus.crossref import DocumentedEntity, SymbolIndex


class TestSymbolIndexResolve:
    """Tests for SymbolIndex.resolve()."""

    def test_resolve_when_full_name_then_entity(self, symbol_index):
        """Exact names resolve to their entity."""
        # Act
        entity = symbol_index.resolve("Foo::Bar", "Foo::Bar")

        # Assert
        assert entity.full_name == "Foo::Bar"

    def test_resolve_when_unknown_then_display_name(self, symbol_index):
        """Unknown names resolve to the text to print."""
        # Act & Assert
        assert symbol_index.resolve("Ccc", "Ccc") == "Ccc"

    def test_resolve_when_escaped_then_text_without_backslash(self, symbol_index):
        """Escaped names are never linked."""
        # Act & Assert
        assert symbol_index.resolve("\\Bbb", "\\Bbb") == "Bbb"

    def test_resolve_when_leading_colons_then_top_level_entity(self, symbol_index):
        """'::Bbb' refers to the top-level Bbb."""
        # Act
        entity = symbol_index.resolve("::Bbb", "::Bbb")

        # Assert
        assert entity.full_name == "Bbb"

    def test_resolve_when_argument_list_then_ignored(self, symbol_index):
        """'Bbb#merge(other)' resolves like 'Bbb#merge'."""
        # Act
        entity = symbol_index.resolve("Bbb#merge(other)", "Bbb#merge(other)")

        # Assert
        assert entity.full_name == "Bbb#merge"

    def test_resolve_when_other_separator_then_entity(self, symbol_index):
        """'Bbb.merge' and 'Bbb::merge' find 'Bbb#merge'."""
        # Act & Assert
        assert symbol_index.resolve("Bbb.merge", "Bbb.merge").full_name == "Bbb#merge"
        assert symbol_index.resolve("Bbb::merge", "Bbb::merge").full_name == "Bbb#merge"

    def test_resolve_when_unique_bare_method_then_entity(self, symbol_index):
        """'#merge' is unambiguous in the index."""
        # Act
        entity = symbol_index.resolve("#merge", "merge")

        # Assert
        assert entity.full_name == "Bbb#merge"

    def test_resolve_when_ambiguous_bare_method_then_text(self):
        """A method defined in several classes needs a context."""
        # Arrange
        index = SymbolIndex([
            DocumentedEntity("Aaa#to_s", kind="method"),
            DocumentedEntity("Bbb#to_s", kind="method"),
        ])

        # Act & Assert
        assert index.resolve("#to_s", "to_s") == "to_s"

    def test_resolve_when_context_set_then_context_method_preferred(self):
        """Relative method references resolve in the context namespace."""
        # Arrange
        index = SymbolIndex(
            [
                DocumentedEntity("Aaa#to_s", kind="method"),
                DocumentedEntity("Bbb#to_s", kind="method"),
            ],
            context="Bbb",
        )

        # Act
        entity = index.resolve("#to_s", "to_s")

        # Assert
        assert entity.full_name == "Bbb#to_s"


class TestSymbolIndexAdd:
    """Tests for SymbolIndex.add()."""

    def test_add_when_new_entity_then_retrievable(self):
        """Added entities can be looked up by full name."""
        # Arrange
        index = SymbolIndex()

        # Act
        index.add(DocumentedEntity("Ccc"))

        # Assert
        assert len(index) == 1
        assert index.get("Ccc").full_name == "Ccc"
