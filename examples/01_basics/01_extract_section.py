#!/usr/bin/env python3
"""
Extract one section script and print its renderings.
"""

# --8<-- [start:imports]
from hother.mildoc import extract_document, render_document
from hother.mildoc.utils.logging import configure_logging

# --8<-- [end:imports]

SOURCE = """import Mathlib.Tactic
/- TEXT:
Multiplication is commutative.
TEXT. -/
-- QUOTE:
example (a b : ℕ) : a * b = b * a := by
-- SOLUTIONS:
  rw [Nat.mul_comm]
-- BOTH:
-- QUOTE.
"""


# --8<-- [start:main]
def main() -> None:
    """Run the example."""
    # --8<-- [start:example]
    document = extract_document(SOURCE)
    print(f"  Segments: {len(document.segments)}")
    for segment in document.segments:
        print(f"    {segment}")

    for name, rendering in render_document(document).items():
        print(f"\n--- {name} ({rendering.suffix}) ---")
        print(rendering.text)
    # --8<-- [end:example]


# --8<-- [end:main]


if __name__ == "__main__":
    configure_logging(log_level="WARNING")
    main()
