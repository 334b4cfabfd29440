"""
Runtime Configuration Store.

Settings are read from the ``[tool.cs_formatter]`` table of the nearest
``pyproject.toml`` and may be overridden by explicit arguments.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from cs_formatter.enums import LanguageName

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

TOOL_SECTION = "cs_formatter"


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the formatting engine.
  """

  language: str = Field(LanguageName.CSHARP.value, description="Language documents are assumed to be written in.")
  enabled_rules: List[str] = Field(
    default_factory=list,
    description="If non-empty, only rules with these names run.",
  )
  disabled_rules: List[str] = Field(default_factory=list, description="Rules that never run.")

  @field_validator("language")
  @classmethod
  def validate_language(cls, v: str) -> str:
    """
    Ensures the language is one the engine recognizes.

    Args:
        v (str): The language name (case-insensitive).

    Returns:
        str: The canonical language name (e.g. 'C#').

    Raises:
        ValueError: If the language is unknown.
    """
    v_clean = v.strip()
    for member in LanguageName:
      if member.value.lower() == v_clean.lower():
        return member.value
    raise ValueError(f"Unknown language: '{v_clean}'. Supported languages: {[m.value for m in LanguageName]}")

  def is_rule_enabled(self, name: str) -> bool:
    """
    Decides whether a rule participates in a run.

    Args:
        name (str): The rule name.

    Returns:
        bool: False if disabled, or if an allow-list is set and excludes it.
    """
    if name in self.disabled_rules:
      return False
    if self.enabled_rules:
      return name in self.enabled_rules
    return True

  @classmethod
  def load(
    cls,
    language: Optional[str] = None,
    enabled_rules: Optional[List[str]] = None,
    disabled_rules: Optional[List[str]] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        language (Optional[str]): Override for the document language.
        enabled_rules (Optional[List[str]]): Override for the allow-list.
        disabled_rules (Optional[List[str]]): Extra rules to disable, merged with TOML.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    final_language = language or toml_config.get("language", LanguageName.CSHARP.value)

    if enabled_rules is not None:
      final_enabled = list(enabled_rules)
    else:
      final_enabled = list(toml_config.get("enabled_rules", []))

    final_disabled = list(toml_config.get("disabled_rules", []))
    for name in disabled_rules or []:
      if name not in final_disabled:
        final_disabled.append(name)

    return cls(language=final_language, enabled_rules=final_enabled, disabled_rules=final_disabled)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.

  Raises:
      ValueError: If the nearest pyproject.toml is not valid TOML.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid configuration file {toml_path}: {e}") from e

      tool_section = data.get("tool", {})
      return tool_section.get(TOOL_SECTION, {}), parent

  return {}, None
