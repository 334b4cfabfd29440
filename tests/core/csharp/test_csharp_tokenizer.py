"""
Tests for the C# Tokenizer.

Verifies:
1. Keyword vs identifier classification (contextual keywords stay identifiers).
2. Trivia attachment (trailing up to newline, leading otherwise, EOF tail).
3. Literal forms (verbatim, interpolated, raw strings, chars).
4. Error reporting for untokenizable input.
"""

import pytest

from cs_formatter.core.csharp.parser import Tokenizer
from cs_formatter.core.csharp.tokens import TokenKind, TriviaKind


def kinds_and_texts(text):
  return [(t.kind, t.text) for t in Tokenizer(text).tokenize()]


def test_keywords_and_identifiers():
  tokens = kinds_and_texts("int Int32 var record")
  assert tokens == [
    (TokenKind.KEYWORD, "int"),
    (TokenKind.IDENTIFIER, "Int32"),
    (TokenKind.IDENTIFIER, "var"),
    (TokenKind.IDENTIFIER, "record"),
    (TokenKind.EOF, ""),
  ]


def test_verbatim_identifier():
  tokens = Tokenizer("@class").tokenize()
  assert tokens[0].kind == TokenKind.IDENTIFIER
  assert tokens[0].text == "@class"
  assert tokens[0].value == "class"


def test_trailing_trivia_stops_at_newline():
  text = "a // note\n  b"
  a, b, eof = Tokenizer(text).tokenize()

  assert [t.kind for t in a.trailing] == [TriviaKind.WHITESPACE, TriviaKind.LINE_COMMENT, TriviaKind.NEWLINE]
  assert [t.text for t in b.leading] == ["  "]
  assert eof.leading == ()


def test_eof_holds_tail_trivia():
  tokens = Tokenizer("x;\n\n/* end */\n").tokenize()
  eof = tokens[-1]
  assert eof.kind == TokenKind.EOF
  assert "".join(t.text for t in eof.leading) == "\n/* end */\n"


def test_directive_is_leading_trivia():
  text = "#region Fields\nint x;\n#endregion\n"
  tokens = Tokenizer(text).tokenize()
  assert tokens[0].leading[0].kind == TriviaKind.DIRECTIVE
  assert tokens[0].leading[0].text == "#region Fields"
  assert tokens[-1].leading[0].kind == TriviaKind.DIRECTIVE


def test_hash_inside_line_is_not_directive():
  with pytest.raises(SyntaxError):
    Tokenizer("x # y").tokenize()


@pytest.mark.parametrize(
  "literal",
  [
    '"plain \\" escaped"',
    '@"verbatim ""quoted"" \\ text"',
    '$"value {x} and {{braces}}"',
    '$"nested {(flag ? "a" : "b")}"',
    '$@"path {dir}\\file"',
    '"""raw "quoted" text"""',
  ],
)
def test_string_literals_are_single_tokens(literal):
  tokens = Tokenizer(literal).tokenize()
  assert len(tokens) == 2
  assert tokens[0].kind == TokenKind.STRING
  assert tokens[0].text == literal


def test_char_literals():
  tokens = kinds_and_texts("'a' '\\'' '\\n'")
  assert [k for k, _ in tokens[:-1]] == [TokenKind.CHAR] * 3


def test_generic_closers_are_separate_tokens():
  texts = [t for _, t in kinds_and_texts("List<List<int>>")]
  assert texts == ["List", "<", "List", "<", "int", ">", ">", ""]


def test_unterminated_comment_reports_location():
  with pytest.raises(SyntaxError, match="line 2:2"):
    Tokenizer("x\n  /* open").tokenize()


def test_unterminated_interpolated_string():
  with pytest.raises(SyntaxError, match="Unterminated interpolated string"):
    Tokenizer('$"abc {x}\n').tokenize()
