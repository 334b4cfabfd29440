"""
Data structures representing the output of the formatting pipeline.
"""

from typing import List

from pydantic import BaseModel, Field


class FormattingResult(BaseModel):
  """
  Container for the results of formatting one document.
  """

  code: str = Field(default="", description="The formatted source code.")
  changed: bool = Field(default=False, description="True if the code differs from the input.")
  applied_rules: List[str] = Field(default_factory=list, description="Names of rules that changed the tree, in run order.")
