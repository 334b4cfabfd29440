"""
Type Reference Classification.

Decides whether a type reference written as a name denotes one of the
platform's built-in types and, if so, which keyword should replace it.
"""

from typing import Callable, Optional

from cs_formatter.core.csharp.nodes import CSharpNode, IdentifierName, QualifiedName
from cs_formatter.rules.keywords import keyword_for
from cs_formatter.semantics.platform import PLATFORM_ROOT_NAMESPACE
from cs_formatter.semantics.symbols import Symbol

ResolveFn = Callable[[CSharpNode], Optional[Symbol]]


def classify(node: CSharpNode, resolve: ResolveFn) -> Optional[str]:
  """
  Returns the keyword replacing `node`, or None to leave it alone.

  Only plain and dotted names qualify; keywords, arrays, generics, nullables,
  pointers, tuples and the implicit ``var`` are rejected before `resolve` is
  called. A name qualifies when it binds to a type directly inside the
  ``System`` namespace whose metadata name has a keyword alias. Exceptions
  raised by `resolve` propagate to the caller.

  Args:
      node: The type syntax found at an eligible position.
      resolve: Binds a type syntax node to its symbol (None when unbound).

  Returns:
      The keyword text (e.g. 'int') or None.
  """
  if not isinstance(node, (IdentifierName, QualifiedName)):
    return None
  if isinstance(node, IdentifierName) and node.is_var:
    return None

  symbol = resolve(node)
  if symbol is None:
    return None
  # Exact match: Acme.System.Boolean is not the platform type.
  if symbol.containing_namespace != PLATFORM_ROOT_NAMESPACE or symbol.containing_type:
    return None
  return keyword_for(symbol.metadata_name)
