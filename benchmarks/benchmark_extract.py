"""Benchmark extraction, outlining and grouping.

Run with:
    pytest benchmarks/benchmark_extract.py -v --benchmark-only
"""

import pytest

from footmark import extract, group, outline
from footmark.grouping import GroupMode


@pytest.mark.benchmark(group="extract")
def test_benchmark_extract(benchmark, large_document):
    """Benchmark a full extraction of a large document."""
    benchmark(extract, large_document)


@pytest.mark.benchmark(group="extract")
def test_benchmark_outline(benchmark, large_document):
    """Benchmark the header scan on its own."""
    benchmark(outline, large_document)


@pytest.mark.benchmark(group="group")
@pytest.mark.parametrize("mode", list(GroupMode))
def test_benchmark_group(benchmark, large_document, mode):
    """Benchmark grouping (model and outline prepared once)."""
    model = extract(large_document)
    headers = outline(large_document)
    benchmark(group, model, headers, mode)
