"""Insert a footnote at the cursor, fill it in, then delete it again."""

from footmark import apply, extract, plan_delete, plan_insert

text = "First[^1] point.\n\n[^1]: Existing note."

# Cursor sits after "point"
cursor = text.index(".")
new_id, edits, cursor = plan_insert(cursor, extract(text))
text = apply(text, edits)
text = text[:cursor] + "Fresh note." + text[cursor:]
print(text)
print()

# Edits are always planned against the current text
text = apply(text, plan_delete(new_id, extract(text)))
print(text)
