"""
Symbol Definitions.

A `Symbol` is the semantic identity a type reference binds to: its containing
namespace plus its metadata name (``Int32``, ``List`1``), independent of the
alias or spelling used in source.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Symbol:
  """
  Represents a resolved type.
  """

  name: str
  """The source-facing name without arity suffix (e.g. 'List')."""

  metadata_name: str
  """The canonical metadata name (e.g. 'List`1', 'Int32')."""

  containing_namespace: str
  """Fully qualified namespace ('' for the global namespace)."""

  containing_type: Optional[str] = None
  """Full name of the enclosing type for nested types."""

  is_platform: bool = False
  """True when the symbol comes from the platform catalog rather than source."""

  @property
  def full_name(self) -> str:
    """
    Fully qualified metadata name. Nested types use ``+`` as separator.

    Returns:
        str: e.g. 'System.Int32' or 'Acme.Outer+Inner'.
    """
    if self.containing_type:
      return f"{self.containing_type}+{self.metadata_name}"
    if self.containing_namespace:
      return f"{self.containing_namespace}.{self.metadata_name}"
    return self.metadata_name

  def __str__(self) -> str:
    return self.full_name
