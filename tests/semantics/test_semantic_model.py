"""
Tests for the Document Semantic Model.

Verifies C# name binding for type references:
- using directives, using aliases and namespace aliases
- nested and file-scoped namespaces
- nested types and type parameters shadowing platform types
- ambiguity between imported namespaces
- qualified and global:: names
"""

import pytest

from cs_formatter.core.csharp.nodes import CSharpNode, FieldDeclaration, MethodDeclaration
from cs_formatter.core.csharp.parser import parse_compilation_unit
from cs_formatter.semantics.model import SemanticModel
from cs_formatter.semantics.resolver import SymbolResolver
from cs_formatter.semantics.scope import ScopeKind, enter_scope


def collect(code, platform_types=None):
  """
  Parses `code` and records the declared type of every field and the
  return type of every method, together with the scope it appears in.
  """
  unit = parse_compilation_unit(code)
  model = SemanticModel(unit, platform_types)
  found = {}

  def visit(node, scope):
    scope = enter_scope(scope, node)
    if isinstance(node, FieldDeclaration):
      for variable in node.declaration.variables:
        found[variable.identifier.text] = (node.declaration.type, scope)
    elif isinstance(node, MethodDeclaration):
      found[node.identifier.text] = (node.return_type, scope)
    for child in node.children():
      if isinstance(child, CSharpNode):
        visit(child, scope)

  visit(unit, model.global_scope())
  return model, found


def resolve(code, name, platform_types=None):
  model, found = collect(code, platform_types)
  node, scope = found[name]
  return model.resolve_type(node, scope)


def test_model_satisfies_protocol():
  model = SemanticModel(parse_compilation_unit(""))
  assert isinstance(model, SymbolResolver)


def test_using_system_binds_platform_type():
  symbol = resolve("using System;\nclass C { Boolean f; }", "f")
  assert symbol.containing_namespace == "System"
  assert symbol.metadata_name == "Boolean"
  assert symbol.full_name == "System.Boolean"
  assert symbol.is_platform


def test_unimported_name_is_unbound():
  assert resolve("class C { Boolean f; }", "f") is None


def test_qualified_names():
  assert resolve("class C { System.Int32 f; }", "f").full_name == "System.Int32"
  assert resolve("class C { global::System.String f; }", "f").full_name == "System.String"
  assert resolve("class C { global::Int32 f; }", "f") is None


def test_user_type_shadows_imported_type():
  code = """
using System;
namespace Acme
{
    class Boolean { }
    class C { Boolean f; }
}
"""
  symbol = resolve(code, "f")
  assert symbol.containing_namespace == "Acme"
  assert not symbol.is_platform


def test_nested_type_shadows_imported_type():
  code = "using System;\nclass C { class String { } String f; }"
  symbol = resolve(code, "f")
  assert symbol.containing_type == "C"
  assert symbol.full_name == "C+String"


def test_type_parameters_are_not_types():
  assert resolve("using System;\nclass C<Int32> { Int32 f; }", "f") is None
  assert resolve("using System;\nclass C { Int32 M<Int32>() => default; }", "M") is None
  assert resolve("using System;\nclass C { Int32 M<T>() => default; }", "M").full_name == "System.Int32"


def test_using_alias_to_type():
  symbol = resolve("using Flag = System.Boolean;\nclass C { Flag f; }", "f")
  assert symbol.full_name == "System.Boolean"


def test_alias_target_ignores_sibling_usings():
  assert resolve("using System;\nusing Flag = Boolean;\nclass C { Flag f; }", "f") is None


def test_namespace_alias():
  code = "using Sys = System;\nclass C { Sys.Int32 f; Sys::Int64 g; }"
  assert resolve(code, "f").full_name == "System.Int32"
  assert resolve(code, "g").full_name == "System.Int64"


def test_ambiguous_imports_bind_nothing():
  code = """
using System;
using Acme;
namespace Acme { class String { } }
class C { String f; }
"""
  assert resolve(code, "f") is None


def test_usings_inside_namespace_are_local():
  code = """
namespace A.B
{
    using System;
    class C { Double f; }
}
namespace D
{
    class E { Double g; }
}
"""
  assert resolve(code, "f").full_name == "System.Double"
  assert resolve(code, "g") is None


def test_file_scoped_namespace():
  code = "using System;\nnamespace N;\nclass C { Int64 f; }\n"
  assert resolve(code, "f").full_name == "System.Int64"


def test_namespace_relative_qualified_name():
  code = """
namespace Acme
{
    namespace Inner { class Flag { } }
    class C { Inner.Flag f; }
}
"""
  symbol = resolve(code, "f")
  assert symbol.containing_namespace == "Acme.Inner"


def test_qualified_nested_type():
  code = "namespace N { class Outer { public class Inner { } } class C { Outer.Inner f; } }"
  assert resolve(code, "f").full_name == "N.Outer+Inner"


def test_generic_arity_is_part_of_identity():
  code = "using System.Collections.Generic;\nclass C { List<int> f; List g; }"
  assert resolve(code, "f").metadata_name == "List`1"
  assert resolve(code, "g") is None


@pytest.mark.parametrize("declared", ["Int32[]", "Int32?", "int", "(Int32, Int32)"])
def test_non_name_shapes_are_unbound(declared):
  assert resolve(f"using System;\nclass C {{ {declared} f; }}", "f") is None


def test_custom_platform_catalog():
  catalog = {"System": frozenset({"Int32"})}
  assert resolve("using System;\nclass C { Int32 f; }", "f", catalog).full_name == "System.Int32"
  assert resolve("using System;\nclass C { String f; }", "f", catalog) is None


def test_known_namespaces():
  model = SemanticModel(parse_compilation_unit("namespace Acme.Tools { }"))
  assert {"System", "System.Collections", "Acme", "Acme.Tools"} <= model.namespaces


def test_enter_scope_for_dotted_namespace():
  unit = parse_compilation_unit("namespace A.B { using System; }")
  model = SemanticModel(unit)
  scope = enter_scope(model.global_scope(), unit.members[0])
  assert scope.name == "A.B"
  assert scope.using_namespaces == ("System",)
  assert scope.parent.name == "A"
  assert scope.parent.using_namespaces == ()
  assert [s.kind for s in scope.chain()] == [ScopeKind.NAMESPACE] * 3
  assert str(scope) == "namespace:<global> > namespace:A > namespace:A.B"
