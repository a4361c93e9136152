"""
Shared fixtures for mildoc tests.
"""

from pathlib import Path

import pytest

SAMPLE_SECTION = """import Mathlib.Tactic
/- TEXT:
Calculating
-----------

We compute.
TEXT. -/
-- QUOTE:
example (a b : ℝ) : a * b = b * a := by
-- EXAMPLES:
  sorry
-- SOLUTIONS:
  ring
-- BOTH:
-- QUOTE.
-- OMIT:
#check mul_comm
-- BOTH:
theorem foo : 1 = 1 := rfl
"""

SAMPLE_SOLVED = """import Mathlib.Tactic
Calculating
-----------

We compute.
example (a b : ℝ) : a * b = b * a := by
  sorry
  ring
theorem foo : 1 = 1 := rfl"""

SAMPLE_EXERCISE = """import Mathlib.Tactic
Calculating
-----------

We compute.
example (a b : ℝ) : a * b = b * a := by
  sorry
  ...
theorem foo : 1 = 1 := rfl"""

SAMPLE_SOLUTIONS = """import Mathlib.Tactic
Calculating
-----------

We compute.
example (a b : ℝ) : a * b = b * a := by
  ring
theorem foo : 1 = 1 := rfl"""

SAMPLE_DOCS = """Calculating
-----------

We compute.

.. code-block:: lean

    example (a b : ℝ) : a * b = b * a := by
      sorry
      ..."""


@pytest.fixture
def anyio_backend():
    """Run async tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def sample_section() -> str:
    """A section script using every marker."""
    return SAMPLE_SECTION


@pytest.fixture
def sample_renderings() -> dict[str, str]:
    """Expected renderings of the sample section with default settings."""
    return {
        "solved": SAMPLE_SOLVED,
        "exercise": SAMPLE_EXERCISE,
        "solutions": SAMPLE_SOLUTIONS,
        "docs": SAMPLE_DOCS,
    }


@pytest.fixture
def manuscript(tmp_path: Path) -> Path:
    """A small manuscript tree with two chapters."""
    root = tmp_path / "MIL"
    basics = root / "C02_Basics"
    logic = root / "C03_Logic"
    basics.mkdir(parents=True)
    logic.mkdir()

    (basics / "S01_Calculating.lean").write_text(SAMPLE_SECTION, encoding="utf-8")
    (basics / "S02_Proving_Identities.lean").write_text(
        "/- TEXT:\nIdentities\nTEXT. -/\n-- QUOTE:\n-- SOLUTIONS:\n  rw [mul_comm]\n-- BOTH:\n-- QUOTE.\n", encoding="utf-8"
    )
    (logic / "S01_Implication.lean").write_text("", encoding="utf-8")

    # Not part of the book
    (root / "Common").mkdir()
    (root / "Common" / "S01_Helpers.lean").write_text("-- QUOTE.\n", encoding="utf-8")
    (basics / "notes.txt").write_text("scratch\n", encoding="utf-8")

    return root


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    return tmp_path / "out"
