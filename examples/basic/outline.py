"""Footnotes under the header outline: one entry per section that cites them."""

from footmark import Footnotes, count_footnotes, iter_groups

source = """# Intro
Background[^1].

## Method
Reused background[^1] and a new source[^2].

[^1]: Smith 2020.
[^2]: Jones 2021.
[^3]: Unused draft note.
"""

doc = Footnotes(source)

for mode in ("single", "multi"):
    print(f"{mode}:")
    for node in iter_groups(doc.groups(mode)):
        indent = "  " * node.level
        ids = ", ".join(view.id for view in node.footnotes)
        print(f"  {indent}{node.title or '(preamble)'} [{count_footnotes(node)}]: {ids}")
