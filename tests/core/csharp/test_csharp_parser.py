"""
Tests for the C# Parser.

Verifies:
1. Byte-identical round trips, including malformed or unsupported input.
2. Structural recognition of declarations at every eligible position.
3. Fallback to raw token runs for statements the parser does not model.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from cs_formatter.core.csharp.nodes import (
  AliasQualifiedName,
  ArrayType,
  AttributeList,
  ConversionOperatorDeclaration,
  DelegateDeclaration,
  EventFieldDeclaration,
  FieldDeclaration,
  FileScopedNamespaceDeclaration,
  GenericName,
  IdentifierName,
  IndexerDeclaration,
  LocalDeclarationStatement,
  LocalFunctionStatement,
  MethodDeclaration,
  NamespaceDeclaration,
  NullableType,
  OperatorDeclaration,
  Parameter,
  ParameterList,
  PredefinedType,
  PropertyDeclaration,
  QualifiedName,
  RawTokens,
  TupleType,
  TypeDeclaration,
  TypeOfExpression,
  UsingDirective,
  VariableDeclaration,
  name_to_string,
)
from cs_formatter.core.csharp.parser import parse_compilation_unit


def roundtrip(code: str) -> str:
  """Helper to parse and re-emit."""
  return parse_compilation_unit(code).to_text()


def walk(node):
  """Yields every node of a subtree."""
  yield node
  for child in node.children():
    if hasattr(child, "children"):
      yield from walk(child)


def nodes_of(code, cls):
  return [n for n in walk(parse_compilation_unit(code)) if isinstance(n, cls)]


SAMPLE = """// header comment
using System;
using IO = System.IO;

namespace Acme.Tools
{
    /// <summary>Doc.</summary>
    [Serializable]
    public sealed partial class Widget<T> : Base<T>, IDisposable where T : class
    {
        private Int32 _count = 0, _other;
        public event EventHandler Changed;
        public String Name { get; private set; } = "w";
        public Boolean this[Int32 index] => index > 0;
        public Widget(Int32 count) : base(count) { _count = count; }
        ~Widget() { }
        public static Widget<T> operator +(Widget<T> a, Widget<T> b) => a;
        public static implicit operator Int64(Widget<T> w) => w._count;
        public delegate Void Callback(Object sender);

        public Int32 Compute<TOut>(Int32 x, String y = "a,b") where TOut : new()
        {
#if DEBUG
            Int32 local = x * 2;
#endif
            for (Int32 i = 0; i < 10; i++) { local += i; }
            Func<Int32, Int32> f = v => { Int32 inner = v; return inner; };
            var t = typeof(String);
            Int32 Helper(Int32 z) => z;
            return local;
        }

        public void Dispose() { }
    }

    enum Color { Red = 1, Green }
}
"""


def test_roundtrip_sample():
  assert roundtrip(SAMPLE) == SAMPLE


@pytest.mark.parametrize(
  "code",
  [
    "",
    "\ufeffusing System;\r\nclass C { }\r\n",
    "class C { void M() { if (x) { y(); } else { z(); } switch (a) { case 1: break; default: return; } } }",
    "class C { int M() => throw new Exception(); }",
    "class C { ) garbage ( ; }",
    "class C {\n  void M() {\n    Int32 x = 1;\n",
    "class C { Func<int> f = () => { ; }",
    "}}} stray",
    "namespace N; class C { }",
    "global using static System.Math;\nextern alias Foo;\n[assembly: Version(\"1\")]\n",
    "record Point(Int32 X, Int32 Y);",
    "class C { (Int32 a, String b) Pair; Int32[,][] grid; Int32? maybe; unsafe Int32* p; }",
    "class C { void M() { var s = $\"{a} {b:N2}\"; var d = new Dictionary<String, List<Int32>>(); } }",
    "interface I { Int32 P { get; } void M(); }",
  ],
)
def test_roundtrip_variety(code):
  assert roundtrip(code) == code


@settings(max_examples=60, deadline=None)
@given(st.text(alphabet=st.sampled_from(list("abcInt32 .;,{}()[]<>=\n\t/*+-:?\"'@$#")), max_size=60))
def test_roundtrip_or_syntax_error(code):
  """Any input either round-trips exactly or is rejected by the tokenizer."""
  try:
    parsed = parse_compilation_unit(code)
  except SyntaxError:
    return
  assert parsed.to_text() == code


def test_using_directives():
  unit = parse_compilation_unit("using System;\nusing IO = System.IO;\nglobal using static System.Math;\n")
  plain, alias, static = unit.members
  assert isinstance(plain, UsingDirective) and plain.alias is None
  assert name_to_string(plain.name) == "System"
  assert alias.alias.name.identifier.text == "IO"
  assert name_to_string(alias.name) == "System.IO"
  assert static.global_keyword is not None
  assert static.static_keyword is not None


def test_namespaces():
  block = parse_compilation_unit("namespace A.B { class C { } }").members[0]
  assert isinstance(block, NamespaceDeclaration)
  assert name_to_string(block.name) == "A.B"
  assert isinstance(block.members[0], TypeDeclaration)

  file_scoped = parse_compilation_unit("namespace A;\nclass C { }\nclass D { }\n").members[0]
  assert isinstance(file_scoped, FileScopedNamespaceDeclaration)
  assert [m.name for m in file_scoped.members] == ["C", "D"]


def test_assembly_attribute_does_not_swallow_namespace():
  unit = parse_compilation_unit('[assembly: Guid("x")]\nnamespace N { }\n')
  assert isinstance(unit.members[0], AttributeList)
  assert isinstance(unit.members[1], NamespaceDeclaration)


def test_member_kinds():
  members = parse_compilation_unit(SAMPLE).members[2].members[0].members
  kinds = [type(m) for m in members]
  assert kinds[:2] == [FieldDeclaration, EventFieldDeclaration]
  assert PropertyDeclaration in kinds
  assert IndexerDeclaration in kinds
  assert OperatorDeclaration in kinds
  assert ConversionOperatorDeclaration in kinds
  assert DelegateDeclaration in kinds
  assert kinds.count(MethodDeclaration) == 2


def test_type_declaration_header():
  widget = parse_compilation_unit(SAMPLE).members[2].members[0]
  assert widget.name == "Widget"
  assert widget.type_parameter_names == ("T",)
  assert widget.base_list is not None
  assert widget.constraints is not None
  assert len(widget.attribute_lists) == 1


def test_field_with_multiple_declarators():
  field = parse_compilation_unit("class C { Int32 a = 1, b; }").members[0].members[0]
  assert isinstance(field, FieldDeclaration)
  assert [v.identifier.text for v in field.declaration.variables] == ["a", "b"]
  assert isinstance(field.declaration.type, IdentifierName)


def test_type_shapes():
  code = "class C { System.Int32 a; global::System.Int32 b; List<Int32> c; Int32[] d; Int32? e; (Int32, Int32) f; int g; }"
  fields = parse_compilation_unit(code).members[0].members
  types = [f.declaration.type for f in fields]
  assert isinstance(types[0], QualifiedName)
  assert isinstance(types[1], QualifiedName)
  assert isinstance(types[1].left, AliasQualifiedName)
  assert isinstance(types[2], GenericName) and types[2].arity == 1
  assert isinstance(types[3], ArrayType)
  assert isinstance(types[4], NullableType)
  assert isinstance(types[5], TupleType)
  assert isinstance(types[6], PredefinedType)


def test_unbound_generic_arity():
  typeofs = nodes_of("class C { object o = typeof(Dictionary<,>); }", TypeOfExpression)
  assert len(typeofs) == 1
  assert typeofs[0].type.arity == 2


def test_method_type_parameters():
  method = parse_compilation_unit("class C { T Get<T>(T x) => x; }").members[0].members[0]
  assert isinstance(method, MethodDeclaration)
  assert method.type_parameter_list.names == ("T",)
  assert [p.identifier.text for p in method.parameter_list.parameters] == ["x"]


def test_statements():
  locals_ = nodes_of(SAMPLE, LocalDeclarationStatement)
  names = [s.declaration.variables[0].identifier.text for s in locals_]
  assert names == ["local", "f", "inner", "t"]

  functions = nodes_of(SAMPLE, LocalFunctionStatement)
  assert [f.identifier.text for f in functions] == ["Helper"]


def test_embedded_declarations():
  code = "class C { void M() { for (Int32 i = 0; i < 3; i++) { } using (Stream s = Open()) { } foreach (Int32 x in xs) { } } }"
  declarations = nodes_of(code, VariableDeclaration)
  assert [d.variables[0].identifier.text for d in declarations] == ["i", "s"]


def test_typeof_in_expressions():
  typeofs = nodes_of("class C { void M() { Use(typeof(String), typeof(System.Int32)); } }", TypeOfExpression)
  assert [t.type.to_text() for t in typeofs] == ["String", "System.Int32"]


def test_unrecognized_member_is_raw():
  unit = parse_compilation_unit("class C { ) garbage ; int x; }")
  members = unit.members[0].members
  assert isinstance(members[0], RawTokens)
  assert isinstance(members[-1], FieldDeclaration)


def test_unbalanced_paren_does_not_consume_closing_brace():
  unit = parse_compilation_unit("class C { ) garbage ( ; }\nclass D { }\n")
  first, second = unit.members
  assert isinstance(first, TypeDeclaration) and first.name == "C"
  assert isinstance(first.members[0], RawTokens)
  assert isinstance(second, TypeDeclaration) and second.name == "D"


def test_unterminated_body_degrades_to_raw():
  code = "class C {\n  void M() {\n    Int32 x = 1;\n"
  unit = parse_compilation_unit(code)
  assert all(isinstance(m, RawTokens) for m in unit.members)
  assert unit.to_text() == code


def test_typed_lambda_parameters():
  code = "class C { void M() { Run((Int32 a, ref String b) => a); Func<int, int> f = (x) => x; Use(out Int32 y); } }"
  lists = [p for p in nodes_of(code, ParameterList) if p.items]
  assert len(lists) == 1
  assert [p.identifier.text for p in nodes_of(code, Parameter)] == ["a", "b"]
  assert roundtrip(code) == code


def test_anonymous_method_parameters():
  code = "class C { Action<int> a = delegate (Int32 x) { Int64 y = x; }; Action b = delegate { }; }"
  assert [p.type.to_text() for p in nodes_of(code, Parameter)] == ["Int32 "]
  locals_ = nodes_of(code, LocalDeclarationStatement)
  assert [d.declaration.type.to_text() for d in locals_] == ["Int64 "]
  assert roundtrip(code) == code


def test_excessive_nesting_is_a_syntax_error():
  depth = 5000
  code = "class C { void M() " + "{" * depth + "}" * depth + " }"
  with pytest.raises(SyntaxError, match="nests too deeply"):
    parse_compilation_unit(code)
