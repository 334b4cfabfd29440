"""
Built-in rules.

Importing this package registers every rule it contains.
"""

from cs_formatter.rules.use_keywords_over_types import UseKeywordsOverTypes

__all__ = ["UseKeywordsOverTypes"]
