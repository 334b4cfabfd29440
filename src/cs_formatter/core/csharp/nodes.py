"""
C# Concrete Syntax Tree Nodes.

This module defines immutable data structures for representing C# source code.
Every token carries its own leading and trailing trivia (whitespace, comments,
preprocessor directives), so concatenating the tokens of any tree reproduces the
source byte-for-byte.

Nodes are frozen dataclasses whose fields are declared in source order. Each
field holds a child node, a `Token`, ``None`` (absent optional part), or a tuple
of nodes/tokens. Separated lists (parameters, declarators, type arguments) keep
their comma tokens interleaved with the elements so no text is lost.
"""

import dataclasses
from dataclasses import dataclass, fields
from typing import Iterator, Optional, Tuple, Union

from cs_formatter.core.csharp.tokens import TokenKind, TriviaKind, VAR_KEYWORD


@dataclass(frozen=True)
class Trivia:
  """Represents non-semantic source text (whitespace, comments, directives)."""

  kind: TriviaKind
  text: str

  def to_text(self) -> str:
    return self.text


@dataclass(frozen=True)
class Token:
  """A lexical token plus the trivia attached to it."""

  kind: TokenKind
  text: str
  leading: Tuple[Trivia, ...] = ()
  trailing: Tuple[Trivia, ...] = ()

  def to_text(self) -> str:
    parts = [t.text for t in self.leading]
    parts.append(self.text)
    parts.extend(t.text for t in self.trailing)
    return "".join(parts)

  @property
  def value(self) -> str:
    """Identifier value with any verbatim ``@`` prefix removed."""
    if self.kind == TokenKind.IDENTIFIER and self.text.startswith("@"):
      return self.text[1:]
    return self.text

  def with_trivia(self, leading: Tuple[Trivia, ...], trailing: Tuple[Trivia, ...]) -> "Token":
    return dataclasses.replace(self, leading=leading, trailing=trailing)


Element = Union["CSharpNode", Token]


@dataclass(frozen=True)
class CSharpNode:
  """Abstract base class for all C# CST nodes."""

  def children(self) -> Iterator[Element]:
    """Yields direct children (nodes and tokens) in source order."""
    for f in fields(self):
      value = getattr(self, f.name)
      if value is None:
        continue
      if isinstance(value, tuple):
        for item in value:
          if item is not None:
            yield item
      else:
        yield value

  def tokens(self) -> Iterator[Token]:
    """Yields every token of the subtree in source order."""
    for child in self.children():
      if isinstance(child, Token):
        yield child
      else:
        yield from child.tokens()

  def first_token(self) -> Optional[Token]:
    return next(self.tokens(), None)

  def last_token(self) -> Optional[Token]:
    last = None
    for tok in self.tokens():
      last = tok
    return last

  def to_text(self) -> str:
    return "".join(tok.to_text() for tok in self.tokens())

  def with_changes(self, **changes) -> "CSharpNode":
    """Returns a copy with the given fields replaced."""
    return dataclasses.replace(self, **changes)


def _separated(items: Tuple[Element, ...]) -> Tuple["CSharpNode", ...]:
  return tuple(i for i in items if not isinstance(i, Token))


# --- Shared building blocks ---


@dataclass(frozen=True)
class RawTokens(CSharpNode):
  """
  A run of tokens kept without structural interpretation.

  Elements are tokens, or the few structures recognized inside expressions and
  statements: ``typeof`` expressions, lambda/statement blocks and embedded
  ``for``/``using``/``fixed`` variable declarations.
  """

  elements: Tuple[Element, ...] = ()


@dataclass(frozen=True)
class AttributeList(CSharpNode):
  open: Token
  content: RawTokens
  close: Token


@dataclass(frozen=True)
class EqualsValueClause(CSharpNode):
  equals: Token
  value: RawTokens


@dataclass(frozen=True)
class ArrowExpressionClause(CSharpNode):
  arrow: Token
  expression: RawTokens


# --- Types ---


@dataclass(frozen=True)
class TypeSyntax(CSharpNode):
  """Base class for type references."""


@dataclass(frozen=True)
class NameSyntax(TypeSyntax):
  """Base class for (possibly qualified) names."""


@dataclass(frozen=True)
class SimpleName(NameSyntax):
  """Base class for single-identifier names."""


@dataclass(frozen=True)
class IdentifierName(SimpleName):
  identifier: Token

  @property
  def is_var(self) -> bool:
    """True for the implicitly typed local placeholder ``var``."""
    return self.identifier.text == VAR_KEYWORD


@dataclass(frozen=True)
class TypeArgumentList(CSharpNode):
  less: Token
  items: Tuple[Element, ...]
  greater: Token

  @property
  def arguments(self) -> Tuple[CSharpNode, ...]:
    return _separated(self.items)


@dataclass(frozen=True)
class GenericName(SimpleName):
  identifier: Token
  type_arguments: TypeArgumentList

  @property
  def arity(self) -> int:
    # Counts separators so unbound forms like `Dictionary<,>` report 2.
    commas = sum(1 for item in self.type_arguments.items if isinstance(item, Token) and item.text == ",")
    return commas + 1


@dataclass(frozen=True)
class QualifiedName(NameSyntax):
  left: NameSyntax
  dot: Token
  right: SimpleName


@dataclass(frozen=True)
class AliasQualifiedName(NameSyntax):
  """``alias::Name``, most commonly ``global::System``."""

  alias: IdentifierName
  colons: Token
  name: SimpleName


@dataclass(frozen=True)
class PredefinedType(TypeSyntax):
  """A keyword type such as ``int`` or ``string``."""

  keyword: Token


@dataclass(frozen=True)
class ArrayRankSpecifier(CSharpNode):
  open: Token
  commas: Tuple[Token, ...]
  close: Token


@dataclass(frozen=True)
class ArrayType(TypeSyntax):
  element_type: TypeSyntax
  rank_specifiers: Tuple[ArrayRankSpecifier, ...]


@dataclass(frozen=True)
class NullableType(TypeSyntax):
  element_type: TypeSyntax
  question: Token


@dataclass(frozen=True)
class PointerType(TypeSyntax):
  element_type: TypeSyntax
  asterisk: Token


@dataclass(frozen=True)
class TupleElement(CSharpNode):
  type: TypeSyntax
  identifier: Optional[Token] = None


@dataclass(frozen=True)
class TupleType(TypeSyntax):
  open: Token
  items: Tuple[Element, ...]
  close: Token


@dataclass(frozen=True)
class TypeOfExpression(CSharpNode):
  keyword: Token
  open: Token
  type: TypeSyntax
  close: Token


# --- Parameters ---


@dataclass(frozen=True)
class Parameter(CSharpNode):
  attribute_lists: Tuple[AttributeList, ...]
  modifiers: Tuple[Token, ...]
  type: Optional[TypeSyntax]
  identifier: Token
  default: Optional[EqualsValueClause] = None


@dataclass(frozen=True)
class ParameterList(CSharpNode):
  """Parenthesized (methods) or bracketed (indexers) parameters."""

  open: Token
  items: Tuple[Element, ...]
  close: Token

  @property
  def parameters(self) -> Tuple[CSharpNode, ...]:
    return _separated(self.items)


@dataclass(frozen=True)
class TypeParameter(CSharpNode):
  attribute_lists: Tuple[AttributeList, ...]
  variance: Optional[Token]
  identifier: Token


@dataclass(frozen=True)
class TypeParameterList(CSharpNode):
  less: Token
  items: Tuple[Element, ...]
  greater: Token

  @property
  def names(self) -> Tuple[str, ...]:
    return tuple(p.identifier.value for p in _separated(self.items))


# --- Variables ---


@dataclass(frozen=True)
class VariableDeclarator(CSharpNode):
  identifier: Token
  initializer: Optional[EqualsValueClause] = None


@dataclass(frozen=True)
class VariableDeclaration(CSharpNode):
  type: TypeSyntax
  items: Tuple[Element, ...]

  @property
  def variables(self) -> Tuple[CSharpNode, ...]:
    return _separated(self.items)


# --- Statements ---


@dataclass(frozen=True)
class Block(CSharpNode):
  open: Token
  statements: Tuple[CSharpNode, ...]
  close: Token


@dataclass(frozen=True)
class LocalDeclarationStatement(CSharpNode):
  modifiers: Tuple[Token, ...]
  declaration: VariableDeclaration
  semicolon: Token


@dataclass(frozen=True)
class LocalFunctionStatement(CSharpNode):
  modifiers: Tuple[Token, ...]
  return_type: TypeSyntax
  identifier: Token
  type_parameter_list: Optional[TypeParameterList]
  parameter_list: ParameterList
  constraints: Optional[RawTokens]
  body: Optional[Block]
  expression_body: Optional[ArrowExpressionClause]
  semicolon: Optional[Token]


# --- Members ---


@dataclass(frozen=True)
class ExplicitInterfaceSpecifier(CSharpNode):
  name: NameSyntax
  dot: Token


@dataclass(frozen=True)
class Accessor(CSharpNode):
  attribute_lists: Tuple[AttributeList, ...]
  modifiers: Tuple[Token, ...]
  keyword: Token
  body: Optional[Block]
  expression_body: Optional[ArrowExpressionClause]
  semicolon: Optional[Token]


@dataclass(frozen=True)
class AccessorList(CSharpNode):
  open: Token
  accessors: Tuple[Accessor, ...]
  close: Token


@dataclass(frozen=True)
class FieldDeclaration(CSharpNode):
  attribute_lists: Tuple[AttributeList, ...]
  modifiers: Tuple[Token, ...]
  declaration: VariableDeclaration
  semicolon: Token


@dataclass(frozen=True)
class EventFieldDeclaration(CSharpNode):
  attribute_lists: Tuple[AttributeList, ...]
  modifiers: Tuple[Token, ...]
  event_keyword: Token
  declaration: VariableDeclaration
  semicolon: Token


@dataclass(frozen=True)
class EventDeclaration(CSharpNode):
  attribute_lists: Tuple[AttributeList, ...]
  modifiers: Tuple[Token, ...]
  event_keyword: Token
  type: TypeSyntax
  explicit_interface: Optional[ExplicitInterfaceSpecifier]
  identifier: Token
  accessor_list: AccessorList


@dataclass(frozen=True)
class MethodDeclaration(CSharpNode):
  attribute_lists: Tuple[AttributeList, ...]
  modifiers: Tuple[Token, ...]
  return_type: TypeSyntax
  explicit_interface: Optional[ExplicitInterfaceSpecifier]
  identifier: Token
  type_parameter_list: Optional[TypeParameterList]
  parameter_list: ParameterList
  constraints: Optional[RawTokens]
  body: Optional[Block]
  expression_body: Optional[ArrowExpressionClause]
  semicolon: Optional[Token]


@dataclass(frozen=True)
class ConstructorDeclaration(CSharpNode):
  attribute_lists: Tuple[AttributeList, ...]
  modifiers: Tuple[Token, ...]
  identifier: Token
  parameter_list: ParameterList
  initializer: Optional[RawTokens]
  body: Optional[Block]
  expression_body: Optional[ArrowExpressionClause]
  semicolon: Optional[Token]


@dataclass(frozen=True)
class DestructorDeclaration(CSharpNode):
  attribute_lists: Tuple[AttributeList, ...]
  modifiers: Tuple[Token, ...]
  tilde: Token
  identifier: Token
  parameter_list: ParameterList
  body: Optional[Block]
  expression_body: Optional[ArrowExpressionClause]
  semicolon: Optional[Token]


@dataclass(frozen=True)
class PropertyDeclaration(CSharpNode):
  attribute_lists: Tuple[AttributeList, ...]
  modifiers: Tuple[Token, ...]
  type: TypeSyntax
  explicit_interface: Optional[ExplicitInterfaceSpecifier]
  identifier: Token
  accessor_list: Optional[AccessorList]
  expression_body: Optional[ArrowExpressionClause]
  initializer: Optional[EqualsValueClause]
  semicolon: Optional[Token]


@dataclass(frozen=True)
class IndexerDeclaration(CSharpNode):
  attribute_lists: Tuple[AttributeList, ...]
  modifiers: Tuple[Token, ...]
  type: TypeSyntax
  explicit_interface: Optional[ExplicitInterfaceSpecifier]
  this_keyword: Token
  parameter_list: ParameterList
  accessor_list: Optional[AccessorList]
  expression_body: Optional[ArrowExpressionClause]
  semicolon: Optional[Token]


@dataclass(frozen=True)
class OperatorDeclaration(CSharpNode):
  attribute_lists: Tuple[AttributeList, ...]
  modifiers: Tuple[Token, ...]
  return_type: TypeSyntax
  operator_keyword: Token
  operator_tokens: Tuple[Token, ...]
  parameter_list: ParameterList
  body: Optional[Block]
  expression_body: Optional[ArrowExpressionClause]
  semicolon: Optional[Token]


@dataclass(frozen=True)
class ConversionOperatorDeclaration(CSharpNode):
  attribute_lists: Tuple[AttributeList, ...]
  modifiers: Tuple[Token, ...]
  implicit_or_explicit: Token
  operator_keyword: Token
  checked_keyword: Optional[Token]
  type: TypeSyntax
  parameter_list: ParameterList
  body: Optional[Block]
  expression_body: Optional[ArrowExpressionClause]
  semicolon: Optional[Token]


@dataclass(frozen=True)
class DelegateDeclaration(CSharpNode):
  attribute_lists: Tuple[AttributeList, ...]
  modifiers: Tuple[Token, ...]
  keyword: Token
  return_type: TypeSyntax
  identifier: Token
  type_parameter_list: Optional[TypeParameterList]
  parameter_list: ParameterList
  constraints: Optional[RawTokens]
  semicolon: Token


@dataclass(frozen=True)
class BaseList(CSharpNode):
  colon: Token
  types: RawTokens


@dataclass(frozen=True)
class TypeDeclaration(CSharpNode):
  """A class, struct, interface or record declaration."""

  attribute_lists: Tuple[AttributeList, ...]
  modifiers: Tuple[Token, ...]
  keyword: Token
  record_kind: Optional[Token]
  identifier: Token
  type_parameter_list: Optional[TypeParameterList]
  parameter_list: Optional[ParameterList]
  base_list: Optional[BaseList]
  constraints: Optional[RawTokens]
  open: Optional[Token]
  members: Tuple[CSharpNode, ...]
  close: Optional[Token]
  semicolon: Optional[Token]

  @property
  def name(self) -> str:
    return self.identifier.value

  @property
  def type_parameter_names(self) -> Tuple[str, ...]:
    return self.type_parameter_list.names if self.type_parameter_list else ()


@dataclass(frozen=True)
class EnumDeclaration(CSharpNode):
  attribute_lists: Tuple[AttributeList, ...]
  modifiers: Tuple[Token, ...]
  keyword: Token
  identifier: Token
  base_list: Optional[BaseList]
  open: Token
  body: RawTokens
  close: Token
  semicolon: Optional[Token]


# --- Compilation unit & namespaces ---


@dataclass(frozen=True)
class NameEquals(CSharpNode):
  name: IdentifierName
  equals: Token


@dataclass(frozen=True)
class UsingDirective(CSharpNode):
  global_keyword: Optional[Token]
  using_keyword: Token
  static_keyword: Optional[Token]
  alias: Optional[NameEquals]
  name: TypeSyntax
  semicolon: Token


@dataclass(frozen=True)
class NamespaceDeclaration(CSharpNode):
  keyword: Token
  name: NameSyntax
  open: Token
  members: Tuple[CSharpNode, ...]
  close: Token
  semicolon: Optional[Token] = None


@dataclass(frozen=True)
class FileScopedNamespaceDeclaration(CSharpNode):
  keyword: Token
  name: NameSyntax
  semicolon: Token
  members: Tuple[CSharpNode, ...]


@dataclass(frozen=True)
class CompilationUnit(CSharpNode):
  """Top-level container for one source document."""

  members: Tuple[CSharpNode, ...]
  end_of_file: Token


def name_to_string(node: CSharpNode) -> Optional[str]:
  """
  Flattens a name node into its dotted spelling (``System.Int32``).

  Generic names contribute their identifier only; alias qualifiers are rendered
  with ``::``. Returns None for non-name nodes.
  """
  if isinstance(node, (IdentifierName, GenericName)):
    return node.identifier.value
  if isinstance(node, QualifiedName):
    left = name_to_string(node.left)
    right = name_to_string(node.right)
    if left is None or right is None:
      return None
    return f"{left}.{right}"
  if isinstance(node, AliasQualifiedName):
    return f"{node.alias.identifier.value}::{name_to_string(node.name)}"
  return None
