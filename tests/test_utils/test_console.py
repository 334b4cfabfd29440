"""
Tests for Centralized Logging Utility and Injection Mechanics.

Verifies:
1. Singleton Proxy correctness.
2. Injection capabilities (`set_console`).
3. Standard logging wrappers.
"""

import pytest
from rich.console import Console

from cs_formatter.utils.console import (
  console,
  get_console,
  log_error,
  log_info,
  log_success,
  log_warning,
  reset_console,
  set_console,
)


@pytest.fixture(autouse=True)
def cleanup_console():
  """Ensures console is reset to stdout after every test."""
  reset_console()
  yield
  reset_console()


def test_console_singleton_proxy():
  assert callable(console.print)
  assert hasattr(console, "export_text")
  assert isinstance(get_console(), Console)


def test_custom_console_injection():
  """
  Verify we can inject a capturing console and retrieve logs.
  This is how an editor integration collects diagnostics.
  """
  capture_console = Console(record=True, width=200)
  set_console(capture_console)

  log_info("Formatting Program.cs")
  log_success("Done")

  output = capture_console.export_text()
  assert "Formatting Program.cs" in output
  assert "✅ Done" in output


def test_reset_functionality():
  original_backend = get_console()

  temp = Console()
  set_console(temp)
  assert get_console() is temp

  reset_console()
  current = get_console()

  assert current is not temp
  assert current is not original_backend
  assert isinstance(current, Console)


def test_logging_wrappers_format():
  capture_console = Console(record=True, width=200)
  set_console(capture_console)

  log_warning("WarnText")
  log_error("ErrorText")

  output = capture_console.export_text()
  assert "⚠️" in output and "WarnText" in output
  assert "❌ ErrorText" in output


def test_proxy_getattr_delegation():
  # 'width' is a property of Rich Console, not defined on _ConsoleProxy
  width = console.width
  assert isinstance(width, int)
  assert width > 0
