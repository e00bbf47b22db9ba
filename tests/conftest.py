import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import papyrus
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from papyrus.crossref import (  # noqa: E402
    CrossReferenceFormatter,
    DestinationRegistry,
    DocumentedEntity,
    FormatterOptions,
    ReportLabDialect,
    SymbolIndex,
)


# Common test fixtures
@pytest.fixture
def registry():
    """Return an empty destination registry."""
    return DestinationRegistry()


@pytest.fixture
def symbol_index():
    """Index documenting Aaa, Bbb and a few methods."""
    return SymbolIndex([
        DocumentedEntity("Aaa"),
        DocumentedEntity("Aaa#initialize", kind="method"),
        DocumentedEntity("Bbb"),
        DocumentedEntity("Bbb#merge", kind="method"),
        DocumentedEntity("Foo::Bar"),
    ])


@pytest.fixture
def pdf_formatter(symbol_index, registry):
    """Formatter producing ReportLab markup with default options."""
    return CrossReferenceFormatter(symbol_index, registry, ReportLabDialect(), FormatterOptions())


@pytest.fixture
def sample_image():
    """Create a simple test image."""
    return Image.new("RGB", (200, 100), color="white")
