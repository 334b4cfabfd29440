"""
cs-formatter: semantic source normalization for C#.

Exposes the convenience API for formatting C# text with the registered rules.
"""

from pathlib import Path
from typing import Optional

from cs_formatter.config import RuntimeConfig
from cs_formatter.core.document import Document
from cs_formatter.core.result import FormattingResult
from cs_formatter.core.rewriter import CancellationToken, RulePipeline
from cs_formatter.enums import LanguageName, LocalSemanticRuleOrder
from cs_formatter.semantics.resolver import ResolverFactory

__version__ = "0.0.1"


def format_code(
  text: str,
  language: Optional[str] = None,
  config: Optional[RuntimeConfig] = None,
  resolver_factory: Optional[ResolverFactory] = None,
  path: Optional[Path] = None,
  cancellation: Optional[CancellationToken] = None,
) -> str:
  """
  Formats C# source text with every enabled rule.

  Args:
      text: The source code.
      language: Document language. Defaults to the configured one ('C#').
      config: Rule selection. Defaults to `RuntimeConfig()`.
      resolver_factory: Builds the semantic model for the parsed tree.
          Defaults to the built-in `SemanticModel`.
      path: Optional origin of the text, used in diagnostics.
      cancellation: Optional cooperative cancellation signal.

  Returns:
      str: The formatted source.

  Raises:
      SyntaxError: If the text cannot be tokenized.
  """
  return format_document(text, language, config, resolver_factory, path, cancellation).code


def format_document(
  text: str,
  language: Optional[str] = None,
  config: Optional[RuntimeConfig] = None,
  resolver_factory: Optional[ResolverFactory] = None,
  path: Optional[Path] = None,
  cancellation: Optional[CancellationToken] = None,
) -> FormattingResult:
  """
  Like `format_code` but returns the full `FormattingResult`.
  """
  config = config or RuntimeConfig()
  document = Document(text, language=language or config.language, path=path, resolver_factory=resolver_factory)
  return RulePipeline(config=config).run(document, cancellation)


__all__ = [
  "CancellationToken",
  "Document",
  "FormattingResult",
  "LanguageName",
  "LocalSemanticRuleOrder",
  "RulePipeline",
  "RuntimeConfig",
  "format_code",
  "format_document",
  "__version__",
]
