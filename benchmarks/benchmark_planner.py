"""Benchmark edit planning and application.

Measures the plan + apply cycle a host runs on every user command, against
the baseline of re-extracting the result.

Run with:
    pytest benchmarks/benchmark_planner.py -v --benchmark-only
"""

import pytest

from footmark import apply, extract, plan_cleanup, plan_insert, plan_renumber


@pytest.mark.benchmark(group="plan")
def test_benchmark_plan_renumber(benchmark, gapped_document):
    """Benchmark renumbering planning on a sparse document."""
    model = extract(gapped_document)
    benchmark(plan_renumber, model)


@pytest.mark.benchmark(group="apply")
def test_benchmark_apply_renumber(benchmark, gapped_document):
    """Benchmark applying a renumber edit set with ~200 ops."""
    _, edits = plan_renumber(extract(gapped_document))
    benchmark(apply, gapped_document, edits)


@pytest.mark.benchmark(group="apply")
def test_benchmark_cleanup_cycle(benchmark, large_document):
    """Benchmark extract + cleanup + apply + re-extract, as a host command does."""

    def cycle():
        cleaned = apply(large_document, plan_cleanup(extract(large_document)))
        extract(cleaned)

    benchmark(cycle)


@pytest.mark.benchmark(group="plan")
def test_benchmark_insert(benchmark, large_document):
    """Benchmark insert planning in the middle of a large document."""
    model = extract(large_document)
    benchmark(plan_insert, len(large_document) // 2, model)
