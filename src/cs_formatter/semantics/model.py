"""
Document Semantic Model.

`SemanticModel` is the default `SymbolResolver`. It indexes every type declared
in a single document (namespace members and nested types) and combines them
with the platform catalog to bind type references following C# name lookup:

1.  Type parameters of enclosing methods and types shadow everything.
2.  Nested types of enclosing types.
3.  For each enclosing namespace, innermost first: its member types, then
    its ``using`` aliases, then the types of its ``using`` namespaces.

A name imported from more than one ``using`` namespace is ambiguous and binds
to nothing.
"""

import logging
from collections import defaultdict
from typing import Dict, FrozenSet, Mapping, Optional, Sequence, Set

from cs_formatter.core.csharp.nodes import (
  AliasQualifiedName,
  CompilationUnit,
  CSharpNode,
  DelegateDeclaration,
  EnumDeclaration,
  FileScopedNamespaceDeclaration,
  NamespaceDeclaration,
  QualifiedName,
  TypeDeclaration,
  TypeSyntax,
  name_to_string,
)
from cs_formatter.semantics.platform import PLATFORM_TYPES, namespace_closure
from cs_formatter.semantics.scope import (
  GLOBAL_ALIAS,
  Scope,
  ScopeKind,
  enter_scope,
  global_scope,
  metadata_name,
  simple_name_parts,
  strip_global,
)
from cs_formatter.semantics.symbols import Symbol

logger = logging.getLogger(__name__)


class SemanticModel:
  """
  Binds type syntax of one document to symbols.
  """

  def __init__(self, root: CompilationUnit, platform_types: Optional[Mapping[str, FrozenSet[str]]] = None):
    """
    Indexes the declarations of `root`.

    Args:
        root: The parsed document.
        platform_types: Namespace -> metadata names of known library types.
            Defaults to the built-in catalog.
    """
    self.root = root
    self._platform: Mapping[str, FrozenSet[str]] = PLATFORM_TYPES if platform_types is None else platform_types
    self._namespace_types: Dict[str, Dict[str, Symbol]] = defaultdict(dict)
    self._nested_types: Dict[str, Dict[str, Symbol]] = defaultdict(dict)
    self._global = global_scope(root)

    declared_namespaces: Set[str] = set()
    self._collect(root.members, self._global, declared_namespaces)
    self._namespaces = namespace_closure(list(self._platform) + sorted(declared_namespaces))

  # --- Indexing ---

  def _collect(self, members: Sequence[CSharpNode], scope: Scope, namespaces: Set[str]) -> None:
    for member in members:
      if isinstance(member, (NamespaceDeclaration, FileScopedNamespaceDeclaration)):
        inner = enter_scope(scope, member)
        namespaces.add(inner.name)
        self._collect(member.members, inner, namespaces)
      elif isinstance(member, (TypeDeclaration, EnumDeclaration, DelegateDeclaration)):
        self._declare(member, scope)
        if isinstance(member, TypeDeclaration):
          self._collect(member.members, enter_scope(scope, member), namespaces)

  def _declare(self, node: CSharpNode, scope: Scope) -> None:
    if isinstance(node, TypeDeclaration):
      arity = len(node.type_parameter_names)
    elif isinstance(node, DelegateDeclaration) and node.type_parameter_list is not None:
      arity = len(node.type_parameter_list.names)
    else:
      arity = 0

    identifier = node.identifier.value
    containing_type = scope.name if scope.kind == ScopeKind.TYPE else None
    symbol = Symbol(identifier, metadata_name(identifier, arity), scope.namespace, containing_type=containing_type)
    table = self._nested_types if containing_type else self._namespace_types
    # Partial declarations share one symbol.
    table[scope.name].setdefault(symbol.metadata_name, symbol)

  # --- Lookup primitives ---

  @property
  def namespaces(self) -> FrozenSet[str]:
    """All namespaces known to the model (declared, imported from the catalog, and their prefixes)."""
    return frozenset(self._namespaces)

  def global_scope(self) -> Scope:
    return self._global

  def type_in_namespace(self, namespace: str, name: str) -> Optional[Symbol]:
    """
    Finds a type declared directly in a namespace.

    Source declarations take precedence over the platform catalog.

    Args:
        namespace: Fully qualified namespace ('' for global).
        name: Metadata name (e.g. 'Int32', 'List`1').
    """
    declared = self._namespace_types.get(namespace, {}).get(name)
    if declared is not None:
      return declared
    if name in self._platform.get(namespace, ()):
      return Symbol(name.split("`")[0], name, namespace, is_platform=True)
    return None

  def nested_type(self, container: str, name: str) -> Optional[Symbol]:
    return self._nested_types.get(container, {}).get(name)

  # --- Resolution ---

  def resolve_type(self, node: TypeSyntax, scope: Scope) -> Optional[Symbol]:
    """
    Resolves a name-shaped type reference in `scope`.

    Args:
        node: The type syntax.
        scope: The enclosing scope.

    Returns:
        The bound symbol, or None for unbound, ambiguous, type-parameter or
        non-name syntax (arrays, nullables, tuples, keywords).
    """
    parts = simple_name_parts(node)
    if parts is not None:
      return self._lookup_simple(parts[0], parts[1], scope)
    if isinstance(node, QualifiedName):
      return self._lookup_qualified(node, scope)
    if isinstance(node, AliasQualifiedName):
      return self._lookup_alias_qualified(node, scope)
    return None

  def _lookup_simple(self, identifier: str, arity: int, scope: Scope) -> Optional[Symbol]:
    name = metadata_name(identifier, arity)
    for level in scope.chain():
      if arity == 0 and identifier in level.type_parameters:
        return None

      if level.kind == ScopeKind.TYPE:
        found = self.nested_type(level.name, name)
        if found is not None:
          return found
      elif level.kind == ScopeKind.NAMESPACE:
        found = self.type_in_namespace(level.name, name)
        if found is not None:
          return found

        if arity == 0:
          target = level.alias(identifier)
          if target is not None:
            # Alias targets ignore the usings declared alongside them.
            return self.resolve_type(target, level.without_imports())

        candidates = {c for c in (self.type_in_namespace(ns, name) for ns in level.using_namespaces) if c is not None}
        if len(candidates) == 1:
          return candidates.pop()
        if candidates:
          logger.debug("Ambiguous reference '%s': %s", name, ", ".join(sorted(str(c) for c in candidates)))
          return None
    return None

  def _lookup_qualified(self, node: QualifiedName, scope: Scope) -> Optional[Symbol]:
    right = simple_name_parts(node.right)
    if right is None:
      return None
    name = metadata_name(*right)

    left_name = name_to_string(node.left)
    if left_name is not None:
      namespace = self.resolve_namespace(left_name, scope)
      if namespace is not None:
        return self.type_in_namespace(namespace, name)

    container = self.resolve_type(node.left, scope)
    if container is None:
      return None
    return self.nested_type(container.full_name, name)

  def _lookup_alias_qualified(self, node: AliasQualifiedName, scope: Scope) -> Optional[Symbol]:
    parts = simple_name_parts(node.name)
    if parts is None:
      return None
    name = metadata_name(*parts)
    alias = node.alias.identifier.value
    if alias == GLOBAL_ALIAS:
      return self.type_in_namespace("", name)

    namespace = self._aliased_namespace(alias, scope)
    if namespace is None:
      return None
    return self.type_in_namespace(namespace, name)

  def resolve_namespace(self, dotted: str, scope: Scope) -> Optional[str]:
    """
    Resolves a dotted name to a known namespace as seen from `scope`.

    Args:
        dotted: Name as written (may start with ``global::`` or an alias).
        scope: The enclosing scope.

    Returns:
        The fully qualified namespace, or None.
    """
    dotted, absolute = strip_global(dotted)
    if "::" in dotted:
      alias, _, rest = dotted.partition("::")
      base = self._aliased_namespace(alias, scope)
      if base is None:
        return None
      full = f"{base}.{rest}"
      return full if full in self._namespaces else None
    if absolute:
      return dotted if dotted in self._namespaces else None

    head, _, rest = dotted.partition(".")
    for level in scope.chain():
      if level.kind != ScopeKind.NAMESPACE:
        continue
      candidate = f"{level.name}.{dotted}" if level.name else dotted
      if candidate in self._namespaces:
        return candidate
      if level.alias(head) is not None:
        base = self._aliased_namespace(head, level)
        if base is None:
          return None
        full = f"{base}.{rest}" if rest else base
        return full if full in self._namespaces else None
    return None

  def _aliased_namespace(self, alias: str, scope: Scope) -> Optional[str]:
    """Returns the namespace a ``using alias = Namespace;`` refers to."""
    for level in scope.chain():
      target = level.alias(alias)
      if target is None:
        continue
      dotted = name_to_string(target)
      if dotted is None:
        return None
      dotted = strip_global(dotted)[0]
      return dotted if dotted in self._namespaces else None
    return None
