"""Index a document's footnotes in 3 lines, zero config and zero deps."""

from footmark import extract

model = extract("See [^1] and [^2].\n\n[^1]: Cited.\n[^3]: Forgotten.")

print("Referenced:", [r.id for r in model.referenced])
print("Unreferenced:", [r.id for r in model.unreferenced])
print("Orphaned:", [ref.id for ref in model.orphaned])
