"""
Tests for Type Reference Classification.

The resolver is stubbed so each case pins exactly one decision of the
classifier: node shape, placeholder, namespace check and table lookup.
"""

from unittest.mock import MagicMock

import pytest

from cs_formatter.core.csharp.nodes import IdentifierName, PredefinedType, Token
from cs_formatter.core.csharp.parser import parse_compilation_unit
from cs_formatter.core.csharp.tokens import TokenKind
from cs_formatter.rules.classifier import classify
from cs_formatter.semantics.symbols import Symbol


def field_type(declared):
  unit = parse_compilation_unit(f"class C {{ {declared} f; }}")
  return unit.members[0].members[0].declaration.type


def resolver_returning(symbol):
  return MagicMock(return_value=symbol)


def test_platform_type_maps_to_keyword():
  resolve = resolver_returning(Symbol("Int32", "Int32", "System", is_platform=True))
  node = field_type("Int32")
  assert classify(node, resolve) == "int"
  resolve.assert_called_once_with(node)


def test_qualified_name_is_classified():
  resolve = resolver_returning(Symbol("String", "String", "System"))
  assert classify(field_type("System.String"), resolve) == "string"


def test_unresolved_name():
  assert classify(field_type("Int32"), resolver_returning(None)) is None


@pytest.mark.parametrize("namespace", ["Acme", "Acme.System", "System.Collections", ""])
def test_namespace_must_be_exactly_system(namespace):
  resolve = resolver_returning(Symbol("Boolean", "Boolean", namespace))
  assert classify(field_type("Boolean"), resolve) is None


def test_nested_type_named_like_platform_type():
  resolve = resolver_returning(Symbol("Boolean", "Boolean", "System", containing_type="System.Outer"))
  assert classify(field_type("Boolean"), resolve) is None


def test_unmapped_system_type():
  resolve = resolver_returning(Symbol("DateTime", "DateTime", "System"))
  assert classify(field_type("DateTime"), resolve) is None


@pytest.mark.parametrize("declared", ["int", "Int32[]", "Int32?", "List<Int32>", "(Int32, Int32)", "global::Int32"])
def test_ineligible_shapes_skip_resolution(declared):
  resolve = resolver_returning(Symbol("Int32", "Int32", "System"))
  assert classify(field_type(declared), resolve) is None
  resolve.assert_not_called()


def test_var_placeholder_skips_resolution():
  resolve = resolver_returning(Symbol("Int32", "Int32", "System"))
  node = IdentifierName(Token(TokenKind.IDENTIFIER, "var"))
  assert classify(node, resolve) is None
  resolve.assert_not_called()


def test_predefined_type_is_never_reclassified():
  resolve = resolver_returning(Symbol("Int32", "Int32", "System"))
  assert classify(PredefinedType(Token(TokenKind.KEYWORD, "int")), resolve) is None


def test_resolver_errors_propagate():
  resolve = MagicMock(side_effect=RuntimeError("model unavailable"))
  with pytest.raises(RuntimeError):
    classify(field_type("Int32"), resolve)
