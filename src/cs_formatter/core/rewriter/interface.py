"""
Interface definition for Local Semantic Rules.

This module defines the abstract base class that all rules must implement to
be compatible with the ``RulePipeline``. A rule rewrites a single document's
syntax tree using semantic information about that document only.
"""

from abc import ABC, abstractmethod
from typing import FrozenSet, Optional

from cs_formatter.core.csharp.nodes import CompilationUnit
from cs_formatter.core.document import Document
from cs_formatter.core.rewriter.context import CancellationToken
from cs_formatter.enums import LanguageName


class LocalSemanticRule(ABC):
  """
  Abstract contract for a rewriting rule.

  Rules are stateless between invocations; the metadata attributes are
  normally filled in by the `register_rule` decorator.
  """

  name: str = ""
  description: str = ""
  order: int = 0
  languages: FrozenSet[str] = frozenset({LanguageName.CSHARP.value})

  def supports_language(self, language_name: str) -> bool:
    """
    Reports whether the rule can process documents of a language.

    Args:
        language_name: e.g. 'C#'. Comparison is exact.
    """
    return language_name in self.languages

  @abstractmethod
  def process(
    self,
    document: Document,
    syntax_root: CompilationUnit,
    cancellation: Optional[CancellationToken] = None,
  ) -> CompilationUnit:
    """
    Rewrites the tree of `document`.

    Args:
        document: The document `syntax_root` belongs to.
        syntax_root: The tree to rewrite.
        cancellation: Optional signal checked during traversal.

    Returns:
        The rewritten tree, or `syntax_root` itself if nothing changed.

    Raises:
        NotImplementedError: If the document's language is not supported.
        concurrent.futures.CancelledError: If cancellation was requested.
    """
    pass

  async def process_async(
    self,
    document: Document,
    syntax_root: CompilationUnit,
    cancellation: Optional[CancellationToken] = None,
  ) -> CompilationUnit:
    """
    Awaitable form of `process`. The work itself runs synchronously.
    """
    return self.process(document, syntax_root, cancellation)
