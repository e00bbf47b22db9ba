"""
Unit tests for FormatterOptions and the crossref models.

Verified: 2026-10-18
"""

import pytest

from papyrus.crossref import Destination, DocumentedEntity, FormatterOptions, Resolved


class TestFormatterOptions:
    """Tests for FormatterOptions dataclass."""

    def test_init_when_defaults_then_pages_shown_and_hash_hidden(self):
        """Defaults should annotate pages and strip the method prefix."""
        # Act
        options = FormatterOptions()

        # Assert
        assert options.show_pages is True
        assert options.show_hash is False
        assert options.hyperlink_all is False
        assert options.heading_level_offset == 0

    def test_display_name_for_when_hash_hidden_then_prefix_stripped(self):
        """'#initialize' should display as 'initialize'."""
        # Act & Assert
        assert FormatterOptions().display_name_for("#initialize") == "initialize"

    def test_display_name_for_when_show_hash_then_prefix_kept(self):
        """show_hash keeps the label as written."""
        # Act & Assert
        assert FormatterOptions(show_hash=True).display_name_for("#initialize") == "#initialize"

    def test_display_name_for_when_qualified_method_then_unchanged(self):
        """Only a leading prefix is stripped."""
        # Act & Assert
        assert FormatterOptions().display_name_for("Foo#bar") == "Foo#bar"

    def test_display_name_for_when_double_prefix_then_strips_one(self):
        """Exactly one prefix character is removed."""
        # Act & Assert
        assert FormatterOptions().display_name_for("##x") == "#x"

    def test_init_when_negative_offset_then_raises_error(self):
        """heading_level_offset must be non-negative."""
        # Act & Assert
        with pytest.raises(ValueError, match="heading_level_offset must be non-negative"):
            FormatterOptions(heading_level_offset=-1)


class TestDestination:
    """Tests for Destination dataclass."""

    def test_init_when_page_zero_then_raises_error(self):
        """Pages are 1-based."""
        # Act & Assert
        with pytest.raises(ValueError, match="page must be 1-based"):
            Destination("Bbb", 0)


class TestDocumentedEntity:
    """Tests for DocumentedEntity dataclass."""

    def test_destination_name_when_not_set_then_full_name(self):
        """Entities are rendered at a destination named after them."""
        # Act & Assert
        assert DocumentedEntity("Foo::Bar").destination_name == "Foo::Bar"

    def test_destination_name_when_explicit_then_used(self):
        """An explicit destination overrides the full name."""
        # Act & Assert
        assert DocumentedEntity("Foo", destination="class-foo").destination_name == "class-foo"

    def test_method_parts_when_instance_method_then_split(self):
        """Methods expose their bare name."""
        # Arrange
        entity = DocumentedEntity("Foo::Bar#baz", kind="method")

        # Act & Assert
        assert entity.is_method
        assert entity.method_name == "baz"

    def test_method_parts_when_class_then_none(self):
        """Namespaces have no method name."""
        # Arrange
        entity = DocumentedEntity("Foo::Bar")

        # Act & Assert
        assert entity.method_name is None


class TestResolved:
    """Tests for Resolved dataclass."""

    def test_has_page_when_page_none_then_false(self):
        """A resolution without a page is still pending."""
        # Act & Assert
        assert Resolved("Bbb", "Bbb").has_page is False
        assert Resolved("Bbb", "Bbb", 5).has_page is True
