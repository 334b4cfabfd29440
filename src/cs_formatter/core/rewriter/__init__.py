"""
Rule Infrastructure.

Exposes the rule contract, the registry rules announce themselves in, and the
pipeline that applies them to a document.
"""

from cs_formatter.core.rewriter.context import CancellationToken, RewriterContext
from cs_formatter.core.rewriter.interface import LocalSemanticRule
from cs_formatter.core.rewriter.pipeline import RulePipeline
from cs_formatter.core.rewriter.registry import available_rules, clear_rules, get_rule, register_rule

__all__ = [
  "CancellationToken",
  "LocalSemanticRule",
  "RewriterContext",
  "RulePipeline",
  "available_rules",
  "clear_rules",
  "get_rule",
  "register_rule",
]
