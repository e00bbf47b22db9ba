"""
Generate a sample API reference PDF with forward references.

Class Aaa is documented first and refers to Bbb and Bbb#merge, which are
documented several pages later, so the first pass cannot print their pages.
"""

import logging
import sys
from pathlib import Path

# Add src to path so we can import papyrus
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root / "src"))

from PIL import Image, ImageDraw

from papyrus.crossref import DocumentedEntity, FormatterOptions, SymbolIndex
from papyrus.generator import GeneratorConfig, generate_pdf
from papyrus.render import Document, FigureBlock, Heading, TextBlock, VerticalSpace

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')
logger = logging.getLogger("generate_sample_pdf")

FILLER = (
    "This paragraph stands in for the long-form documentation of a class. "
    "It exists to move later sections onto later pages. "
) * 6


def _diagram() -> Image.Image:
    img = Image.new("RGB", (480, 200), color="white")
    draw = ImageDraw.Draw(img)
    draw.rectangle((20, 60, 180, 140), outline="black", width=3)
    draw.rectangle((300, 60, 460, 140), outline="black", width=3)
    draw.line((180, 100, 300, 100), fill="black", width=3)
    draw.text((80, 92), "Aaa", fill="black")
    draw.text((360, 92), "Bbb", fill="black")
    return img


def build_sample() -> tuple[Document, SymbolIndex]:
    """Sample document plus an index of the entities it documents."""
    index = SymbolIndex([
        DocumentedEntity("Aaa"),
        DocumentedEntity("Aaa#initialize", kind="method"),
        DocumentedEntity("Bbb"),
        DocumentedEntity("Bbb#merge", kind="method"),
    ])

    blocks = [
        Heading("Sample API", level=1),
        TextBlock("Start with Aaa, then read Bbb for details."),
        Heading("class Aaa", level=2, destination="Aaa"),
        TextBlock("Aaa wraps a Bbb. Use Bbb#merge to combine two of them."),
        Heading("Aaa#initialize", level=3, destination="Aaa#initialize"),
        TextBlock("Creates a new Aaa. See also rdoc-ref:Bbb and Unknown."),
        FigureBlock(_diagram(), caption="Aaa holds a reference to Bbb."),
    ]
    blocks.extend(TextBlock(FILLER) for _ in range(12))
    blocks.extend([
        VerticalSpace(24),
        Heading("class Bbb", level=2, destination="Bbb"),
        TextBlock("Bbb is created by Aaa#initialize."),
        Heading("Bbb#merge", level=3, destination="Bbb#merge"),
        TextBlock("Returns a new Bbb. Compare with Aaa."),
    ])
    return Document("Sample API", tuple(blocks)), index


def main(output_path: Path, show_hash: bool, max_passes: int) -> int:
    document, index = build_sample()
    config = GeneratorConfig(
        output_path=output_path,
        options=FormatterOptions(show_hash=show_hash),
        max_passes=max_passes,
    )
    result = generate_pdf(document, index, config)

    print(f"Wrote {result.pdf_path} ({result.page_count} pages, {result.passes} passes)")
    for name, page in sorted(result.destinations.items(), key=lambda item: item[1]):
        print(f"  {name}: page {page}")
    for warning in result.warnings:
        print(f"[WARNING] {warning}")
    return 0 if result.converged else 1


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Generate a sample PDF with forward references")
    parser.add_argument("--output", type=Path, default=Path("sample_api.pdf"), help="Output PDF path")
    parser.add_argument("--show-hash", action="store_true", help="Keep the leading # on method references")
    parser.add_argument("--max-passes", type=int, default=5, help="Upper bound on render passes")

    args = parser.parse_args()
    sys.exit(main(args.output, args.show_hash, args.max_passes))
