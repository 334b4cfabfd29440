"""
Rewriter Context Module.

This module provides the `RewriterContext` container, which holds the state a
rule shares across one traversal: the document being processed, its semantic
model, and the cancellation signal.
"""

import threading
from concurrent.futures import CancelledError
from typing import Callable, Optional

from cs_formatter.core.csharp.nodes import CSharpNode
from cs_formatter.core.document import Document
from cs_formatter.semantics.resolver import SymbolResolver
from cs_formatter.semantics.scope import Scope
from cs_formatter.semantics.symbols import Symbol


class CancellationToken:
  """
  Cooperative cancellation signal, safe to trigger from another thread.
  """

  def __init__(self) -> None:
    self._event = threading.Event()

  def cancel(self) -> None:
    """Requests cancellation. Idempotent."""
    self._event.set()

  @property
  def is_cancelled(self) -> bool:
    return self._event.is_set()

  def raise_if_cancelled(self) -> None:
    """
    Raises:
        CancelledError: If `cancel` has been called.
    """
    if self._event.is_set():
      raise CancelledError("Operation was cancelled")


class RewriterContext:
  """
  Shared state for one rule invocation.

  Built once per `process` call; holds no per-node caches.
  """

  def __init__(
    self,
    document: Document,
    model: SymbolResolver,
    cancellation: Optional[CancellationToken] = None,
  ):
    """
    Initializes the context.

    Args:
        document: The document being rewritten.
        model: Resolver bound to the tree being rewritten.
        cancellation: Signal checked between subtrees. Defaults to a token
            that is never cancelled.
    """
    self.document = document
    self.model = model
    self.cancellation = cancellation if cancellation is not None else CancellationToken()

  def check_cancelled(self) -> None:
    self.cancellation.raise_if_cancelled()

  def resolver_for(self, scope: Scope) -> Callable[[CSharpNode], Optional[Symbol]]:
    """
    Binds the model to a scope, producing the callback the classifier expects.

    Args:
        scope: The scope enclosing the references to resolve.

    Returns:
        A function mapping type syntax to its symbol.
    """
    return lambda node: self.model.resolve_type(node, scope)
