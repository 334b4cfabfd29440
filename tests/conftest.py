"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Rule registry isolation so tests registering throwaway rules do not leak.
"""

import sys
from pathlib import Path
import pytest

# Add src to path so we can import 'cs_formatter' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Load built-in rules so they form the baseline snapshot below.
import cs_formatter.rules  # noqa: E402,F401
from cs_formatter.core.rewriter.registry import _RULES  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_rule_registry():
  """
  Restores the rule registry after each test.
  """
  original_registry = _RULES.copy()
  yield
  _RULES.clear()
  _RULES.update(original_registry)

