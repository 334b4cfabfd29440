"""
Tests for the Keyword Mapping Table.
"""

import pytest

from cs_formatter.core.csharp.tokens import PREDEFINED_TYPE_KEYWORDS
from cs_formatter.rules.keywords import KEYWORD_BY_METADATA_NAME, keyword_for, metadata_name_for


def test_table_has_sixteen_entries():
  assert len(KEYWORD_BY_METADATA_NAME) == 16
  assert set(KEYWORD_BY_METADATA_NAME.values()) == PREDEFINED_TYPE_KEYWORDS


@pytest.mark.parametrize(
  "metadata_name, keyword",
  [
    ("Boolean", "bool"),
    ("Single", "float"),
    ("Int16", "short"),
    ("Int64", "long"),
    ("UInt16", "ushort"),
    ("SByte", "sbyte"),
    ("Void", "void"),
  ],
)
def test_keyword_for(metadata_name, keyword):
  assert keyword_for(metadata_name) == keyword
  assert metadata_name_for(keyword) == metadata_name


@pytest.mark.parametrize("name", ["DateTime", "Float", "int32", "", "Int32 "])
def test_unmapped_names(name):
  assert keyword_for(name) is None


def test_table_is_read_only():
  with pytest.raises(TypeError):
    KEYWORD_BY_METADATA_NAME["Guid"] = "guid"
