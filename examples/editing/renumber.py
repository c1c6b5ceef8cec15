"""Fill gaps and drop dangling references in one batch."""

from footmark import apply, extract, plan_cleanup, plan_renumber

source = "Later[^7], earlier[^3], broken[^9].\n\n[^3]: three\n[^7]: seven"
model = extract(source)

gaps, _ = plan_renumber(model)
print("Gaps before cleanup:", gaps)

edits = plan_cleanup(model)
print(f"{len(edits)} edit(s):")
for op in edits:
    print(f"  {op.span.start}:{op.span.end} -> {op.replacement!r}")

print()
print(apply(source, edits))
