"""
Orchestration logic for applying rules to a document.

This module provides the ``RulePipeline``, which parses a document once and
threads the syntax tree through every applicable rule in priority order.
"""

import logging
from typing import List, Optional, Sequence

from cs_formatter.config import RuntimeConfig
from cs_formatter.core.document import Document
from cs_formatter.core.result import FormattingResult
from cs_formatter.core.rewriter.context import CancellationToken
from cs_formatter.core.rewriter.interface import LocalSemanticRule
from cs_formatter.core.rewriter.registry import available_rules
from cs_formatter.utils.console import log_error, log_warning

logger = logging.getLogger(__name__)


class RulePipeline:
  """
  Manages a set of rules and executes them in order.
  """

  def __init__(self, rules: Optional[Sequence[LocalSemanticRule]] = None, config: Optional[RuntimeConfig] = None) -> None:
    """
    Initializes the pipeline.

    Args:
        rules: Rule instances to run. Defaults to one instance of every
            registered rule.
        config: Enables/disables rules by name. Defaults to `RuntimeConfig()`.
    """
    self.config = config or RuntimeConfig()
    if rules is None:
      rules = [cls() for cls in available_rules()]
    self.rules: List[LocalSemanticRule] = sorted(rules, key=lambda r: r.order)

  def active_rules(self, language: str) -> List[LocalSemanticRule]:
    """
    Filters the rules down to those that will run for a language.

    Args:
        language: The document language.

    Returns:
        The enabled rules supporting `language`, in run order.
    """
    active = []
    for rule in self.rules:
      if not self.config.is_rule_enabled(rule.name):
        logger.debug("Skipping disabled rule %s", rule.name)
      elif not rule.supports_language(language):
        logger.debug("Skipping rule %s: language %s not supported", rule.name, language)
      else:
        active.append(rule)
    return active

  def run(self, document: Document, cancellation: Optional[CancellationToken] = None) -> FormattingResult:
    """
    Parses `document` and applies every active rule sequentially.

    Args:
        document: The source to format.
        cancellation: Optional signal forwarded to each rule.

    Returns:
        FormattingResult: The final text and the names of rules that changed it.

    Raises:
        SyntaxError: If the document cannot be tokenized.
        concurrent.futures.CancelledError: If cancellation was requested.
    """
    rules = self.active_rules(document.language)
    if not rules:
      log_warning(f"No rules apply to language '{document.language}'")
      return FormattingResult(code=document.text, changed=False)

    root = document.parse()
    applied: List[str] = []
    for rule in rules:
      if cancellation is not None:
        cancellation.raise_if_cancelled()
      try:
        new_root = rule.process(document, root, cancellation)
      except NotImplementedError:
        log_error(f"Rule [rule]{rule.name}[/rule] cannot process {document.language} documents")
        raise
      if new_root is not root:
        applied.append(rule.name)
        root = new_root

    code = root.to_text()
    return FormattingResult(code=code, changed=code != document.text, applied_rules=applied)
