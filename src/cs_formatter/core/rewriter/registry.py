"""
Rule Registry.

Rules announce themselves with the `register_rule` decorator, which records
their name, description and ordering priority. The built-in rules live in
``cs_formatter.rules`` and are imported on first lookup.
"""

import importlib
from typing import Callable, Dict, List, Optional, Type

from cs_formatter.core.rewriter.interface import LocalSemanticRule

RuleClass = Type[LocalSemanticRule]

_RULES: Dict[str, RuleClass] = {}
_BUILTINS_LOADED = False


def register_rule(name: str, description: str, order: int) -> Callable[[RuleClass], RuleClass]:
  """
  Decorator registering a rule class.

  Args:
      name: Unique rule name (e.g. 'UseKeywordsOverTypes').
      description: Human readable summary.
      order: Priority; lower runs first.

  Raises:
      ValueError: If another class is already registered under `name`.
  """

  def decorator(cls: RuleClass) -> RuleClass:
    existing = _RULES.get(name)
    if existing is not None and existing is not cls:
      raise ValueError(f"Rule '{name}' is already registered by {existing.__qualname__}")
    cls.name = name
    cls.description = description
    cls.order = int(order)
    _RULES[name] = cls
    return cls

  return decorator


def load_builtin_rules() -> None:
  """Imports the bundled rules package so its decorators run."""
  global _BUILTINS_LOADED
  if not _BUILTINS_LOADED:
    importlib.import_module("cs_formatter.rules")
    _BUILTINS_LOADED = True


def get_rule(name: str) -> Optional[RuleClass]:
  """
  Retrieves a registered rule class by name.
  """
  load_builtin_rules()
  return _RULES.get(name)


def available_rules() -> List[RuleClass]:
  """
  Returns all registered rule classes sorted by (order, name).
  """
  load_builtin_rules()
  return sorted(_RULES.values(), key=lambda cls: (cls.order, cls.name))


def clear_rules() -> None:
  """
  Empties the registry. Primarily for testing.

  Built-in rule modules are not re-imported afterwards, so callers that need
  them back must restore the registry themselves.
  """
  _RULES.clear()
