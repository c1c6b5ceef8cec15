"""Benchmark fixtures and configuration."""

from __future__ import annotations

import pytest


@pytest.fixture
def large_document() -> str:
    """Generate a large footnoted document (~100 sections, ~400 footnotes)."""
    sections = []
    definitions = []
    for i in range(100):
        base = i * 4
        sections.append(f"""
# Section {i}

Paragraph {i} cites a source[^{base + 1}] and another[^{base + 2}], then
refers back to the first one[^{base + 1}] and to a named note[^n{i}].

## Details {i}

A nested subsection with a missing reference[^missing-{i}] and one more[^{base + 4}].
""")
        definitions.extend(
            [
                f"[^{base + 1}]: First source for section {i}.",
                f"[^{base + 2}]: Second source for section {i}.",
                f"[^{base + 3}]: Never referenced in section {i}.",
                f"[^{base + 4}]: Fourth source for section {i}.",
                f"[^n{i}]: Named note {i}.",
            ]
        )
    return "\n".join(sections) + "\n\n" + "\n".join(definitions) + "\n"


@pytest.fixture
def gapped_document() -> str:
    """Document whose numeric ids are sparse and out of order."""
    body = " ".join(f"word[^{n}]" for n in range(500, 0, -5))
    notes = "\n".join(f"[^{n}]: note {n}" for n in range(5, 505, 5))
    return f"{body}\n\n{notes}\n"
