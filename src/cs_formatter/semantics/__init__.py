"""
Semantic Analysis.

Scopes, symbols and the resolver that binds type syntax to the types it names.
"""

from cs_formatter.semantics.model import SemanticModel
from cs_formatter.semantics.resolver import ResolverFactory, SymbolResolver
from cs_formatter.semantics.scope import Scope, ScopeKind, enter_scope, global_scope
from cs_formatter.semantics.symbols import Symbol

__all__ = [
  "ResolverFactory",
  "Scope",
  "ScopeKind",
  "SemanticModel",
  "Symbol",
  "SymbolResolver",
  "enter_scope",
  "global_scope",
]
