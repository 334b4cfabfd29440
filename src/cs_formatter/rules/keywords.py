"""
Keyword Mapping Table.

The fixed correspondence between the metadata names of the platform's
built-in types and their C# keyword aliases.
"""

from types import MappingProxyType
from typing import Mapping, Optional

KEYWORD_BY_METADATA_NAME: Mapping[str, str] = MappingProxyType(
  {
    "Boolean": "bool",
    "Byte": "byte",
    "Char": "char",
    "Double": "double",
    "Decimal": "decimal",
    "Single": "float",
    "Int16": "short",
    "Int32": "int",
    "Int64": "long",
    "Object": "object",
    "SByte": "sbyte",
    "String": "string",
    "UInt16": "ushort",
    "UInt32": "uint",
    "UInt64": "ulong",
    "Void": "void",
  }
)

METADATA_NAME_BY_KEYWORD: Mapping[str, str] = MappingProxyType({v: k for k, v in KEYWORD_BY_METADATA_NAME.items()})


def keyword_for(metadata_name: str) -> Optional[str]:
  """
  Looks up the keyword alias of a platform type.

  Args:
      metadata_name: Case-sensitive metadata name (e.g. 'Int32').

  Returns:
      The keyword (e.g. 'int'), or None if the type has no alias.
  """
  return KEYWORD_BY_METADATA_NAME.get(metadata_name)


def metadata_name_for(keyword: str) -> Optional[str]:
  """Reverse of `keyword_for`: 'int' -> 'Int32'."""
  return METADATA_NAME_BY_KEYWORD.get(keyword)
