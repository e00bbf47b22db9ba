"""
Integration tests for PdfPassRenderer.

Documents are rendered on small pages so a few filler paragraphs push
destinations onto later pages. Output is inspected with PyMuPDF.

Verified: 2026-10-18
"""

import fitz
import pytest
from PIL import Image

from papyrus.crossref import (
    ConvergenceDriver,
    CrossReferenceFormatter,
    DestinationRegistry,
    DocumentedEntity,
    FormatterOptions,
    ReportLabDialect,
    SymbolIndex,
)
from papyrus.render import (
    DestinationFlowable,
    Document,
    FigureBlock,
    Heading,
    PageLayoutConfig,
    PdfPassRenderer,
    TextBlock,
    read_page_links,
)

SMALL_PAGE = PageLayoutConfig(
    page_width=300,
    page_height=300,
    margin_top=36,
    margin_bottom=36,
    margin_left=36,
    margin_right=36,
)

FILLER = "Filler text that takes up space on the page. " * 8


def _fillers(count):
    return [TextBlock(FILLER) for _ in range(count)]


def _renderer(blocks, index, registry, **options):
    formatter = CrossReferenceFormatter(
        index, registry, ReportLabDialect(), FormatterOptions(**options)
    )
    return PdfPassRenderer(Document("Test", tuple(blocks)), formatter, registry, SMALL_PAGE)


def _page_texts(pdf_bytes):
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        return [" ".join(page.get_text(sort=True).split()) for page in doc]


@pytest.fixture
def forward_document():
    """'See Bbb' on page 1, Bbb several pages later."""
    return [
        TextBlock("See Bbb for details."),
        *_fillers(8),
        Heading("class Bbb", level=2, destination="Bbb"),
        TextBlock("Bbb body."),
    ]


class TestRenderPass:
    """Tests for a single render pass."""

    def test_render_pass_when_forward_reference_then_placeholder(self, forward_document, symbol_index):
        """The first pass cannot know the page of a later destination."""
        # Arrange
        registry = DestinationRegistry()
        renderer = _renderer(forward_document, symbol_index, registry)

        # Act
        rendered = renderer.render_pass()

        # Assert
        assert rendered.page_count > 1
        assert registry.lookup("Bbb") > 1
        assert registry.unresolved_names() == ("Bbb",)
        assert "See Bbb (p. ???) for details." in _page_texts(rendered.pdf_bytes)[0]

    def test_render_pass_when_backward_reference_then_resolved_same_pass(self, symbol_index):
        """A reference after its destination resolves immediately."""
        # Arrange
        registry = DestinationRegistry()
        renderer = _renderer(
            [Heading("class Aaa", level=2, destination="Aaa"), TextBlock("Aaa is here.")],
            symbol_index,
            registry,
        )

        # Act
        rendered = renderer.render_pass()

        # Assert
        assert registry.unresolved_count() == 0
        assert "Aaa [p. 1] is here." in _page_texts(rendered.pdf_bytes)[0]

    def test_render_pass_when_destinations_then_links_jump_to_registered_pages(self, symbol_index):
        """Links in the PDF reach the pages the registry recorded."""
        # Arrange
        registry = DestinationRegistry()
        renderer = _renderer(
            [
                Heading("class Aaa", level=2, destination="Aaa"),
                *_fillers(6),
                Heading("Aaa#initialize", level=3, destination="Aaa#initialize"),
                TextBlock("Creates an Aaa#initialize."),
            ],
            symbol_index,
            registry,
        )

        # Act
        rendered = renderer.render_pass()

        # Assert
        assert rendered.destinations == registry.destinations()
        assert registry.lookup("Aaa#initialize") > registry.lookup("Aaa")
        links = read_page_links(rendered.pdf_bytes)
        assert [(link.printed_page, link.target_page) for link in links] == [
            (registry.lookup("Aaa#initialize"), registry.lookup("Aaa#initialize")),
        ]

    def test_render_pass_when_headings_then_outline_entries(self, forward_document, symbol_index):
        """Destination headings appear in the PDF outline."""
        # Arrange
        registry = DestinationRegistry()
        renderer = _renderer(
            [Heading("class Aaa", level=2, destination="Aaa"), *forward_document],
            symbol_index,
            registry,
        )

        # Act
        rendered = renderer.render_pass()

        # Assert
        with fitz.open(stream=rendered.pdf_bytes, filetype="pdf") as doc:
            toc = doc.get_toc()
        assert [(level, title) for level, title, _ in toc] == [(1, "class Aaa"), (1, "class Bbb")]
        assert toc[1][2] == registry.lookup("Bbb")

    def test_render_pass_when_footer_enabled_then_page_numbers_printed(self, forward_document, symbol_index):
        """Each page prints its 1-based number."""
        # Arrange
        registry = DestinationRegistry()
        renderer = _renderer(forward_document, symbol_index, registry)

        # Act
        rendered = renderer.render_pass()

        # Assert
        texts = _page_texts(rendered.pdf_bytes)
        for number, text in enumerate(texts, start=1):
            assert text.endswith(str(number))

    def test_render_pass_when_figure_then_image_drawn(self, symbol_index):
        """Figures are drawn with their caption."""
        # Arrange
        registry = DestinationRegistry()
        figure = FigureBlock(Image.new("RGB", (400, 300), color="gray"), caption="Layout of Aaa.")
        renderer = _renderer([figure], symbol_index, registry)

        # Act
        rendered = renderer.render_pass()

        # Assert
        with fitz.open(stream=rendered.pdf_bytes, filetype="pdf") as doc:
            assert doc[0].get_images()
        assert "Layout of Aaa (p. ???)." in _page_texts(rendered.pdf_bytes)[0]

    def test_render_pass_when_empty_document_then_single_page(self, symbol_index):
        """An empty document still produces a valid PDF."""
        # Arrange
        registry = DestinationRegistry()
        renderer = _renderer([], symbol_index, registry)

        # Act
        rendered = renderer.render_pass()

        # Assert
        assert rendered.page_count == 1
        assert rendered.pdf_bytes.startswith(b"%PDF")


class TestBuildStory:
    """Tests for PdfPassRenderer.build_story()."""

    def test_build_story_when_offset_then_heading_style_deeper(self, symbol_index, registry):
        """heading_level_offset shifts headings to smaller styles."""
        # Arrange
        renderer = _renderer(
            [Heading("class Bbb", level=2, destination="Bbb")],
            symbol_index,
            registry,
            heading_level_offset=1,
        )

        # Act
        story = renderer.build_story()

        # Assert
        assert isinstance(story[0], DestinationFlowable)
        assert story[0].content.style.name == "PapyrusHeading3"

    def test_build_story_when_outline_skips_levels_then_clamped(self, symbol_index, registry):
        """Outline levels deepen at most one step at a time."""
        # Arrange
        renderer = _renderer(
            [
                Heading("class Aaa", level=1, destination="Aaa"),
                Heading("Aaa#initialize", level=4, destination="Aaa#initialize"),
            ],
            symbol_index,
            registry,
        )

        # Act
        story = renderer.build_story()

        # Assert
        assert [f.outline_level for f in story] == [0, 1]

    def test_build_story_when_unknown_block_then_raises_error(self, symbol_index, registry):
        """Unsupported blocks are rejected."""
        # Arrange
        renderer = _renderer([object()], symbol_index, registry)

        # Act & Assert
        with pytest.raises(TypeError, match="Unsupported block type"):
            renderer.build_story()


class TestConvergence:
    """Tests for rendering driven by ConvergenceDriver."""

    def test_run_when_forward_reference_then_page_printed_in_second_pass(self, forward_document, symbol_index):
        """The second pass prints the page the first pass discovered."""
        # Arrange
        registry = DestinationRegistry()
        renderer = _renderer(forward_document, symbol_index, registry)
        driver = ConvergenceDriver(registry)

        # Act
        result = driver.run(renderer.render_pass)

        # Assert
        page = registry.lookup("Bbb")
        assert result.converged
        assert result.passes == 2
        assert result.unresolved_history == (1, 0)
        assert f"See Bbb [p. {page}] for details." in _page_texts(result.output.pdf_bytes)[0]

    def test_run_when_destination_never_rendered_then_stalls_with_placeholder(self):
        """A documented entity missing from the document keeps its placeholder."""
        # Arrange
        index = SymbolIndex([DocumentedEntity("Ghost")])
        registry = DestinationRegistry()
        renderer = _renderer([TextBlock("See Ghost.")], index, registry)
        driver = ConvergenceDriver(registry)

        # Act
        result = driver.run(renderer.render_pass)

        # Assert
        assert not result.converged
        assert result.unresolved_history == (1, 1)
        assert result.unresolved_names == ("Ghost",)
        assert "See Ghost (p. ???)." in _page_texts(result.output.pdf_bytes)[0]
