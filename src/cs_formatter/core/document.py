"""
Source Documents.

A `Document` is the unit rules operate on: source text tagged with its
language, plus the factory that builds a semantic model for a parsed tree.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from cs_formatter.core.csharp.nodes import CompilationUnit
from cs_formatter.core.csharp.parser import parse_compilation_unit
from cs_formatter.enums import LanguageName
from cs_formatter.semantics.model import SemanticModel
from cs_formatter.semantics.resolver import ResolverFactory, SymbolResolver


@dataclass(frozen=True)
class Document:
  """
  Immutable source document.
  """

  text: str
  language: str = LanguageName.CSHARP.value
  path: Optional[Path] = None
  resolver_factory: Optional[ResolverFactory] = None
  """Builds the resolver for a tree. Defaults to `SemanticModel`."""

  def parse(self) -> CompilationUnit:
    """
    Parses the document text.

    Raises:
        SyntaxError: If the text cannot be tokenized.
    """
    return parse_compilation_unit(self.text)

  def get_semantic_model(self, root: CompilationUnit) -> SymbolResolver:
    """
    Builds the resolver for `root`, a tree of this document.

    Args:
        root: The syntax tree, possibly already rewritten by earlier rules.

    Returns:
        SymbolResolver: A fresh model; nothing is cached between calls.
    """
    factory = self.resolver_factory or SemanticModel
    return factory(root)
