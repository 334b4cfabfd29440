"""
UseKeywordsOverTypes Rule.

Rewrites built-in type references spelled as platform type names
(``Boolean``, ``System.Int32``) into their keyword aliases (``bool``, ``int``).
A reference is rewritten only if it binds to the type in the ``System``
namespace; a user type that happens to be named ``Boolean`` is left alone.

The rewrite touches exactly the positions listed in `ELIGIBLE_POSITIONS`.
Generic arguments, array/nullable element types, casts, ``foreach`` variables
and other expression-level type uses are out of reach.
"""

import logging
from concurrent.futures import CancelledError
from dataclasses import fields
from types import MappingProxyType
from typing import Any, Mapping, Optional, Type

from cs_formatter.core.csharp.nodes import (
  Block,
  CompilationUnit,
  ConstructorDeclaration,
  ConversionOperatorDeclaration,
  CSharpNode,
  DelegateDeclaration,
  DestructorDeclaration,
  EnumDeclaration,
  EventDeclaration,
  EventFieldDeclaration,
  FieldDeclaration,
  FileScopedNamespaceDeclaration,
  IndexerDeclaration,
  LocalDeclarationStatement,
  LocalFunctionStatement,
  MethodDeclaration,
  NamespaceDeclaration,
  OperatorDeclaration,
  Parameter,
  PredefinedType,
  PropertyDeclaration,
  RawTokens,
  Token,
  TypeDeclaration,
  TypeOfExpression,
  TypeSyntax,
  VariableDeclaration,
)
from cs_formatter.core.csharp.tokens import TokenKind
from cs_formatter.core.document import Document
from cs_formatter.core.rewriter.context import CancellationToken, RewriterContext
from cs_formatter.core.rewriter.interface import LocalSemanticRule
from cs_formatter.core.rewriter.registry import register_rule
from cs_formatter.enums import LocalSemanticRuleOrder
from cs_formatter.rules.classifier import classify
from cs_formatter.semantics.scope import Scope, enter_scope
from cs_formatter.utils.console import log_warning

logger = logging.getLogger(__name__)

# Node class -> name of the field holding the type reference to inspect.
ELIGIBLE_POSITIONS: Mapping[Type[CSharpNode], str] = MappingProxyType(
  {
    VariableDeclaration: "type",
    MethodDeclaration: "return_type",
    Parameter: "type",
    PropertyDeclaration: "type",
    IndexerDeclaration: "type",
    DelegateDeclaration: "return_type",
    OperatorDeclaration: "return_type",
    ConversionOperatorDeclaration: "type",
    TypeOfExpression: "type",
  }
)

# Cancellation is polled before entering any of these.
_CHECKPOINTS = (
  NamespaceDeclaration,
  FileScopedNamespaceDeclaration,
  TypeDeclaration,
  EnumDeclaration,
  DelegateDeclaration,
  FieldDeclaration,
  EventFieldDeclaration,
  EventDeclaration,
  MethodDeclaration,
  ConstructorDeclaration,
  DestructorDeclaration,
  PropertyDeclaration,
  IndexerDeclaration,
  OperatorDeclaration,
  ConversionOperatorDeclaration,
  Block,
  LocalDeclarationStatement,
  LocalFunctionStatement,
  RawTokens,
)


class KeywordRewriter:
  """
  Depth-first rewriter replacing eligible type references with keywords.

  Unchanged subtrees are returned as the very same objects, so a tree with
  nothing to rewrite comes back identical (``is``) to the input.
  """

  def __init__(self, context: RewriterContext) -> None:
    self.context = context
    self.rewrites = 0

  def rewrite(self, root: CompilationUnit) -> CompilationUnit:
    """
    Rewrites a whole document.

    Args:
        root: The tree to rewrite.

    Returns:
        The new tree, or `root` itself if no reference qualified.
    """
    return self.visit(root, self.context.model.global_scope())

  def visit(self, node: CSharpNode, scope: Scope) -> CSharpNode:
    if isinstance(node, _CHECKPOINTS):
      self.context.check_cancelled()

    inner = enter_scope(scope, node)
    eligible_field = ELIGIBLE_POSITIONS.get(type(node))
    changes = {}
    for f in fields(node):
      value = getattr(node, f.name)
      if f.name == eligible_field:
        new_value = self._rewrite_reference(value, inner)
      else:
        new_value = self._visit_value(value, inner)
      if new_value is not value:
        changes[f.name] = new_value

    if not changes:
      return node
    return node.with_changes(**changes)

  def _visit_value(self, value: Any, scope: Scope) -> Any:
    if value is None or isinstance(value, (Token, TypeSyntax)):
      return value
    if isinstance(value, tuple):
      items = tuple(self._visit_value(item, scope) for item in value)
      if all(new is old for new, old in zip(items, value)):
        return value
      return items
    return self.visit(value, scope)

  def _rewrite_reference(self, node: Optional[TypeSyntax], scope: Scope) -> Optional[TypeSyntax]:
    if node is None:
      return None
    try:
      keyword = classify(node, self.context.resolver_for(scope))
    except (CancelledError, RecursionError):
      raise
    except Exception as e:
      # A failed lookup only costs this one reference.
      logger.debug("Leaving '%s' unchanged, resolution failed: %s", node.to_text().strip(), e)
      return node
    if keyword is None:
      return node

    first = node.first_token()
    last = node.last_token()
    replacement = PredefinedType(Token(TokenKind.KEYWORD, keyword, first.leading, last.trailing))
    self.rewrites += 1
    logger.debug("Rewrote '%s' -> '%s' in %s", node.to_text().strip(), keyword, scope)
    return replacement


@register_rule(
  name="UseKeywordsOverTypes",
  description="Ensure use of keywords instead of types",
  order=LocalSemanticRuleOrder.EXPLICIT_VISIBILITY_RULE,
)
class UseKeywordsOverTypes(LocalSemanticRule):
  """
  Prefers ``int`` over ``Int32``, ``string`` over ``System.String``, and so on.

  A document nested deeper than the interpreter's recursion limit allows is
  returned unchanged, with a warning.
  """

  def process(
    self,
    document: Document,
    syntax_root: CompilationUnit,
    cancellation: Optional[CancellationToken] = None,
  ) -> CompilationUnit:
    if not self.supports_language(document.language):
      raise NotImplementedError(f"{self.name} does not support '{document.language}' documents")

    context = RewriterContext(document, document.get_semantic_model(syntax_root), cancellation)
    context.check_cancelled()
    rewriter = KeywordRewriter(context)
    try:
      new_root = rewriter.rewrite(syntax_root)
    except RecursionError:
      log_warning(f"[rule]{self.name}[/rule] left {document.path or '<memory>'} unchanged: nesting too deep to traverse")
      return syntax_root
    if rewriter.rewrites:
      logger.debug("%s rewrote %d type reference(s) in %s", self.name, rewriter.rewrites, document.path or "<memory>")
    return new_root
