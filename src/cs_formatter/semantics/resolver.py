"""
Symbol Resolver Protocol.

The rewriter never binds names itself. It asks a resolver what a type
reference means in a given scope, which lets tests substitute fakes and lets
callers plug in a richer compilation model.
"""

from typing import Optional, Protocol, runtime_checkable

from cs_formatter.core.csharp.nodes import CompilationUnit, TypeSyntax
from cs_formatter.semantics.scope import Scope
from cs_formatter.semantics.symbols import Symbol


@runtime_checkable
class SymbolResolver(Protocol):
  """
  Answers "which type does this syntax denote here?".
  """

  def global_scope(self) -> Scope:
    """Returns the outermost scope of the document being resolved."""
    ...

  def resolve_type(self, node: TypeSyntax, scope: Scope) -> Optional[Symbol]:
    """
    Resolves a type reference.

    Args:
        node: The type syntax as written in source.
        scope: The lexical scope enclosing the reference.

    Returns:
        The bound type symbol, or None if the name is unbound, ambiguous,
        or refers to a type parameter.
    """
    ...


class ResolverFactory(Protocol):
  """Builds a resolver for a parsed document."""

  def __call__(self, root: CompilationUnit) -> SymbolResolver: ...
