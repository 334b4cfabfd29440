"""
Console and Logging Setup.

All user-facing output goes through the standard `logging` library, rendered
by a `rich` handler. The handler writes to whatever console the module-level
`console` proxy currently wraps, so callers (tests, editors embedding the
formatter) can redirect output with `set_console` without re-importing.

Attributes:
    console (_ConsoleProxy): Stable reference to the active Rich Console.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Between INFO and WARNING.
SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "rule": "bold magenta",
    "path": "bold blue",
  }
)


class _ConsoleProxy:
  """
  Forwards to a swappable `rich.console.Console` backend.

  Swapping the backend also re-points the root logger's `RichHandler` at it.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME)
    self._configure_logging()

  def set_backend(self, new_console: Console) -> None:
    """
    Replaces the backend console and re-routes logging to it.

    Args:
        new_console (Console): The console to write to from now on.
    """
    self._backend = new_console
    self._configure_logging()

  def reset(self) -> None:
    """Restores a fresh stdout console."""
    self.set_backend(Console(theme=_THEME))

  @property
  def backend(self) -> Console:
    return self._backend

  def _configure_logging(self) -> None:
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
      if isinstance(handler, RichHandler):
        root_logger.removeHandler(handler)

    root_logger.addHandler(
      RichHandler(
        console=self._backend,
        show_time=False,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
      )
    )
    if root_logger.level == logging.NOTSET or root_logger.level > logging.INFO:
      root_logger.setLevel(logging.INFO)

  def print(self, *args: Any, **kwargs: Any) -> None:
    self._backend.print(*args, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Redirects console output and log records to `new_console`.

  Args:
      new_console (Console): e.g. ``Console(record=True)`` to capture output.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  """Restores logging and console output to stdout."""
  console.reset()


def get_console() -> Console:
  return console.backend


def log_info(msg: str) -> None:
  """
  Logs an informational message.

  Args:
      msg (str): The message; may contain rich markup.
  """
  logging.info(msg, extra={"markup": True})


def log_success(msg: str) -> None:
  """
  Logs a message at the SUCCESS level.

  Args:
      msg (str): The message; may contain rich markup.
  """
  logging.log(SUCCESS_LEVEL_NUM, f"✅ {msg}", extra={"markup": True})


def log_warning(msg: str) -> None:
  """
  Logs a warning.

  Args:
      msg (str): The message; may contain rich markup.
  """
  logging.warning(f"⚠️  {msg}", extra={"markup": True})


def log_error(msg: str) -> None:
  """
  Logs an error.

  Args:
      msg (str): The message; may contain rich markup.
  """
  logging.error(f"❌ {msg}", extra={"markup": True})
