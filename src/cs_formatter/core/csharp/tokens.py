"""
C# Token Definitions.

Defines the enumerations for Token and Trivia kinds used by the Lexer and Parser,
plus the keyword tables the parser consults to classify identifiers.
"""

from enum import Enum
from typing import FrozenSet


class TokenKind(str, Enum):
  """Enumeration of Lexer Token Types."""

  IDENTIFIER = "IDENTIFIER"
  KEYWORD = "KEYWORD"
  NUMBER = "NUMBER"
  STRING = "STRING"
  CHAR = "CHAR"
  PUNCTUATION = "PUNCTUATION"
  EOF = "EOF"


class TriviaKind(str, Enum):
  """Enumeration of non-semantic source fragments."""

  WHITESPACE = "whitespace"
  NEWLINE = "newline"
  LINE_COMMENT = "line_comment"
  BLOCK_COMMENT = "block_comment"
  DIRECTIVE = "directive"


class Punct(str, Enum):
  """Punctuation the parser matches on."""

  LBRACE = "{"
  RBRACE = "}"
  LPAREN = "("
  RPAREN = ")"
  LBRACKET = "["
  RBRACKET = "]"
  LT = "<"
  GT = ">"
  COMMA = ","
  DOT = "."
  SEMICOLON = ";"
  COLON = ":"
  DOUBLE_COLON = "::"
  EQUALS = "="
  QUESTION = "?"
  ASTERISK = "*"
  TILDE = "~"
  ARROW = "=>"


PREDEFINED_TYPE_KEYWORDS: FrozenSet[str] = frozenset(
  {
    "bool",
    "byte",
    "char",
    "decimal",
    "double",
    "float",
    "int",
    "long",
    "object",
    "sbyte",
    "short",
    "string",
    "uint",
    "ulong",
    "ushort",
    "void",
  }
)

# Reserved words. Contextual keywords (var, partial, record, get, set, ...) lex as identifiers.
RESERVED_KEYWORDS: FrozenSet[str] = PREDEFINED_TYPE_KEYWORDS | frozenset(
  {
    "abstract",
    "as",
    "base",
    "break",
    "case",
    "catch",
    "checked",
    "class",
    "const",
    "continue",
    "default",
    "delegate",
    "do",
    "else",
    "enum",
    "event",
    "explicit",
    "extern",
    "false",
    "finally",
    "fixed",
    "for",
    "foreach",
    "goto",
    "if",
    "implicit",
    "in",
    "interface",
    "internal",
    "is",
    "lock",
    "namespace",
    "new",
    "null",
    "operator",
    "out",
    "override",
    "params",
    "private",
    "protected",
    "public",
    "readonly",
    "ref",
    "return",
    "sealed",
    "sizeof",
    "stackalloc",
    "static",
    "struct",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "typeof",
    "unchecked",
    "unsafe",
    "using",
    "virtual",
    "volatile",
    "while",
  }
)

# Modifiers allowed in front of type members and type declarations.
MEMBER_MODIFIERS: FrozenSet[str] = frozenset(
  {
    "abstract",
    "async",
    "const",
    "extern",
    "file",
    "fixed",
    "internal",
    "new",
    "override",
    "partial",
    "private",
    "protected",
    "public",
    "readonly",
    "required",
    "sealed",
    "static",
    "unsafe",
    "virtual",
    "volatile",
  }
)

# Modifiers allowed in front of a parameter.
PARAMETER_MODIFIERS: FrozenSet[str] = frozenset({"ref", "out", "in", "params", "this", "scoped", "readonly"})

# Modifiers allowed in front of a local declaration or local function.
LOCAL_MODIFIERS: FrozenSet[str] = frozenset({"const", "using", "await", "static", "async", "unsafe", "extern", "ref", "readonly", "scoped"})

TYPE_DECLARATION_KEYWORDS: FrozenSet[str] = frozenset({"class", "struct", "interface", "record"})

ACCESSOR_KEYWORDS: FrozenSet[str] = frozenset({"get", "set", "init", "add", "remove"})

# Keywords after which a statement-level `(` opens an embedded variable declaration.
EMBEDDED_DECLARATION_KEYWORDS: FrozenSet[str] = frozenset({"for", "using", "fixed"})

# The implicitly typed local placeholder.
VAR_KEYWORD = "var"
