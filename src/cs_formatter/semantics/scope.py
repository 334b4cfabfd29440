"""
Lexical Scopes.

A `Scope` is an immutable link in a chain running from the innermost
declaration (method, type) out to the global namespace. Namespace levels carry
the ``using`` directives declared directly inside them; type and member levels
carry their type parameters. Scopes are threaded explicitly through visitors
instead of being stored on nodes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterator, Optional, Sequence, Tuple

from cs_formatter.core.csharp.nodes import (
  CompilationUnit,
  CSharpNode,
  DelegateDeclaration,
  EnumDeclaration,
  FileScopedNamespaceDeclaration,
  GenericName,
  IdentifierName,
  LocalFunctionStatement,
  MethodDeclaration,
  NamespaceDeclaration,
  TypeDeclaration,
  TypeSyntax,
  UsingDirective,
  name_to_string,
)

GLOBAL_ALIAS = "global"


class ScopeKind(str, Enum):
  """Kinds of lexical scope levels."""

  NAMESPACE = "namespace"
  TYPE = "type"
  MEMBER = "member"


@dataclass(frozen=True)
class Scope:
  """
  Represents one level of the lexical scope chain.
  """

  kind: ScopeKind
  name: str
  """Namespace full name, type full metadata name, or member name."""

  parent: Optional["Scope"] = None
  using_namespaces: Tuple[str, ...] = ()
  using_aliases: Tuple[Tuple[str, TypeSyntax], ...] = ()
  type_parameters: FrozenSet[str] = frozenset()

  def chain(self) -> Iterator["Scope"]:
    """Yields this scope and its ancestors, innermost first."""
    current: Optional[Scope] = self
    while current is not None:
      yield current
      current = current.parent

  def alias(self, name: str) -> Optional[TypeSyntax]:
    """Returns the target of a ``using name = ...;`` declared at this level."""
    for alias_name, target in self.using_aliases:
      if alias_name == name:
        return target
    return None

  @property
  def namespace(self) -> str:
    """Name of the innermost enclosing namespace."""
    for level in self.chain():
      if level.kind == ScopeKind.NAMESPACE:
        return level.name
    return ""

  def without_imports(self) -> "Scope":
    return Scope(self.kind, self.name, self.parent, type_parameters=self.type_parameters)

  def __str__(self) -> str:
    return " > ".join(f"{s.kind.value}:{s.name or '<global>'}" for s in reversed(list(self.chain())))


def metadata_name(identifier: str, arity: int = 0) -> str:
  """
  Builds a metadata name from an identifier and generic arity.

  >>> metadata_name("List", 1)
  'List`1'
  """
  return f"{identifier}`{arity}" if arity else identifier


def strip_global(name: str) -> Tuple[str, bool]:
  """
  Removes a leading ``global::`` qualifier.

  Returns:
      Tuple[str, bool]: The remaining dotted name and whether it was absolute.
  """
  prefix = f"{GLOBAL_ALIAS}::"
  if name.startswith(prefix):
    return name[len(prefix) :], True
  return name, False


def _imports(members: Sequence[CSharpNode]) -> Tuple[Tuple[str, ...], Tuple[Tuple[str, TypeSyntax], ...]]:
  """Collects namespace imports and aliases from the using directives in `members`."""
  namespaces = []
  aliases = []
  for member in members:
    if not isinstance(member, UsingDirective) or member.static_keyword is not None:
      continue
    if member.alias is not None:
      aliases.append((member.alias.name.identifier.value, member.name))
      continue
    dotted = name_to_string(member.name)
    if dotted is not None:
      namespaces.append(strip_global(dotted)[0])
  return tuple(namespaces), tuple(aliases)


def global_scope(root: CompilationUnit) -> Scope:
  """
  Builds the outermost scope for a document.

  Args:
      root: The parsed compilation unit.

  Returns:
      Scope: The global namespace level with top-level usings applied.
  """
  namespaces, aliases = _imports(root.members)
  return Scope(ScopeKind.NAMESPACE, "", using_namespaces=namespaces, using_aliases=aliases)


def type_full_name(scope: Scope, identifier: str, arity: int = 0) -> str:
  """Full metadata name of a type declared directly inside `scope`."""
  name = metadata_name(identifier, arity)
  if scope.kind == ScopeKind.TYPE:
    return f"{scope.name}+{name}"
  if scope.name:
    return f"{scope.name}.{name}"
  return name


def enter_scope(scope: Scope, node: CSharpNode) -> Scope:
  """
  Returns the scope that applies inside `node`.

  Namespace declarations push one level per dotted segment, with the using
  directives attached to the innermost one. Type declarations and generic
  methods, delegates and local functions push a level carrying their type
  parameters. Any other node leaves the scope unchanged.

  Args:
      scope: The scope enclosing `node`.
      node: The node being entered.

  Returns:
      Scope: The scope for the node's children.
  """
  if isinstance(node, (NamespaceDeclaration, FileScopedNamespaceDeclaration)):
    dotted = name_to_string(node.name) or ""
    segments = [s for s in strip_global(dotted)[0].split(".") if s]
    namespaces, aliases = _imports(node.members)
    for i, segment in enumerate(segments):
      full = f"{scope.name}.{segment}" if scope.name else segment
      if i == len(segments) - 1:
        scope = Scope(ScopeKind.NAMESPACE, full, scope, namespaces, aliases)
      else:
        scope = Scope(ScopeKind.NAMESPACE, full, scope)
    return scope

  if isinstance(node, TypeDeclaration):
    params = node.type_parameter_names
    full = type_full_name(scope, node.name, len(params))
    return Scope(ScopeKind.TYPE, full, scope, type_parameters=frozenset(params))

  if isinstance(node, EnumDeclaration):
    return Scope(ScopeKind.TYPE, type_full_name(scope, node.identifier.value), scope)

  if isinstance(node, (MethodDeclaration, DelegateDeclaration, LocalFunctionStatement)):
    if node.type_parameter_list is None:
      return scope
    return Scope(ScopeKind.MEMBER, node.identifier.value, scope, type_parameters=frozenset(node.type_parameter_list.names))

  return scope


def simple_name_parts(node: CSharpNode) -> Optional[Tuple[str, int]]:
  """Returns (identifier, arity) for simple names, None otherwise."""
  if isinstance(node, GenericName):
    return node.identifier.value, node.arity
  if isinstance(node, IdentifierName):
    return node.identifier.value, 0
  return None
