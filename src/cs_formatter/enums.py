"""
Enumerations for cs-formatter.

This module defines standard enumerations used across the codebase for
language identification and rule ordering.
"""

from enum import Enum, IntEnum


class LanguageName(str, Enum):
  """
  Language identifiers carried by documents.

  Values match the names the host workspace reports, so plain strings compare
  equal to members.
  """

  CSHARP = "C#"
  VISUAL_BASIC = "Visual Basic"


class LocalSemanticRuleOrder(IntEnum):
  """
  Relative priority of local semantic rules. Lower values run first.
  """

  USING_LOCATION_RULE = 1
  EXPLICIT_THIS_RULE = 2
  EXPLICIT_VISIBILITY_RULE = 3
  IS_FORMATTED_FORMATTING_RULE = 4
  REMOVE_EXPLICIT_THIS_RULE = 5
