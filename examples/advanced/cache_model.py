"""Serialize the outline to JSON: hand it to a UI process or cache it."""

from footmark import Footnotes, from_json, to_json

doc = Footnotes("# A\nx[^1]\n# B\ny[^1]\n\n[^1]: shared")

payload = to_json(doc.groups("multi"), indent=2)
print(payload)

restored = from_json(payload)
print("Round-trip equal:", restored == doc.groups("multi"))
