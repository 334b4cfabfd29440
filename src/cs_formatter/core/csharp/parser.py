"""
C# Recursive Descent Parser.

This module parses C# source text into the CST object model defined in `nodes.py`.
It is designed to preserve trivia (comments/whitespace/directives) so that
``parse(text).to_text() == text`` holds for any input the tokenizer accepts.

Coverage is declaration-oriented: usings, namespaces, type declarations and their
members are parsed structurally, while statement and expression bodies are kept
as token runs in which only local declarations, local functions, ``typeof``
expressions, typed lambda and anonymous method parameter lists, lambda blocks
and generic names are recognized. Any member or
statement the parser cannot interpret is preserved verbatim as `RawTokens`.
"""

import re
from dataclasses import dataclass
from typing import Callable, FrozenSet, Generator, List, Optional, Tuple, TypeVar, Union

from cs_formatter.core.csharp.nodes import (
  Accessor,
  AccessorList,
  AliasQualifiedName,
  ArrayRankSpecifier,
  ArrayType,
  ArrowExpressionClause,
  AttributeList,
  BaseList,
  Block,
  CompilationUnit,
  ConstructorDeclaration,
  ConversionOperatorDeclaration,
  CSharpNode,
  DelegateDeclaration,
  DestructorDeclaration,
  Element,
  EnumDeclaration,
  EqualsValueClause,
  EventDeclaration,
  EventFieldDeclaration,
  ExplicitInterfaceSpecifier,
  FieldDeclaration,
  FileScopedNamespaceDeclaration,
  GenericName,
  IdentifierName,
  IndexerDeclaration,
  LocalDeclarationStatement,
  LocalFunctionStatement,
  MethodDeclaration,
  NameEquals,
  NameSyntax,
  NamespaceDeclaration,
  NullableType,
  OperatorDeclaration,
  Parameter,
  ParameterList,
  PointerType,
  PredefinedType,
  PropertyDeclaration,
  QualifiedName,
  RawTokens,
  SimpleName,
  Token,
  Trivia,
  TupleElement,
  TupleType,
  TypeArgumentList,
  TypeDeclaration,
  TypeOfExpression,
  TypeParameter,
  TypeParameterList,
  TypeSyntax,
  UsingDirective,
  VariableDeclaration,
  VariableDeclarator,
)
from cs_formatter.core.csharp.tokens import (
  ACCESSOR_KEYWORDS,
  EMBEDDED_DECLARATION_KEYWORDS,
  LOCAL_MODIFIERS,
  MEMBER_MODIFIERS,
  PARAMETER_MODIFIERS,
  PREDEFINED_TYPE_KEYWORDS,
  RESERVED_KEYWORDS,
  TYPE_DECLARATION_KEYWORDS,
  Punct,
  TokenKind,
  TriviaKind,
)

T = TypeVar("T")

# Tokens that may follow a `>` closing a type argument list inside an expression.
_GENERIC_FOLLOWERS = frozenset(
  {"(", ")", "]", "}", ":", ";", ",", ".", "?", "==", "!=", "|", "^", "&&", "||", "&", "[", "=", "{", "=>"}
)

_ACCESSOR_MODIFIERS = frozenset({"private", "protected", "internal", "public", "readonly"})


@dataclass
class Lexeme:
  kind: Union[TokenKind, TriviaKind]
  text: str
  offset: int


class Tokenizer:
  """
  Splits C# source into lexemes and folds trivia into the significant tokens.

  Trailing trivia of a token extends up to and including the first newline;
  all other trivia becomes leading trivia of the next token. Whatever follows
  the last token is attached to the end-of-file token.
  """

  PATTERN_DEFS = [
    ("NEWLINE", r"\r\n|\n|\r"),
    ("WHITESPACE", r"[ \t\f\v\ufeff]+"),
    ("LINE_COMMENT", r"//[^\r\n]*"),
    ("BLOCK_COMMENT", r"/\*[\s\S]*?\*/"),
    ("UNTERMINATED_COMMENT", r"/\*"),
    ("RAW_STRING", r'\$*"""[\s\S]*?"""'),
    ("VERBATIM_STRING", r'@"(?:[^"]|"")*"'),
    ("STRING", r'"(?:[^"\\\r\n]|\\.)*"'),
    ("CHAR", r"'(?:[^'\\\r\n]|\\.)+'"),
    ("NUMBER", r"0[xX][0-9a-fA-F_]+[uUlL]*|0[bB][01_]+[uUlL]*|\d[\d_]*(?:\.\d[\d_]*)?(?:[eE][+-]?\d+)?[fFdDmMuUlL]*|\.\d[\d_]*(?:[eE][+-]?\d+)?[fFdDmM]?"),
    ("IDENTIFIER", r"@?[^\W\d]\w*"),
    (
      "PUNCTUATION",
      r"\?\?=|<<=|=>|::|\?\?|\?\.|\+\+|--|&&|\|\||->|==|!=|<=|>=|\+=|-=|\*=|/=|%=|&=|\|=|\^=|<<|\.\.|[{}()\[\];,.:?<>=+\-*/%&|^!~]",
    ),
    ("MISMATCH", r"."),
  ]

  _REGEX = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in PATTERN_DEFS))

  _TRIVIA_KINDS = {
    "NEWLINE": TriviaKind.NEWLINE,
    "WHITESPACE": TriviaKind.WHITESPACE,
    "LINE_COMMENT": TriviaKind.LINE_COMMENT,
    "BLOCK_COMMENT": TriviaKind.BLOCK_COMMENT,
  }

  _TOKEN_KINDS = {
    "RAW_STRING": TokenKind.STRING,
    "VERBATIM_STRING": TokenKind.STRING,
    "STRING": TokenKind.STRING,
    "CHAR": TokenKind.CHAR,
    "NUMBER": TokenKind.NUMBER,
    "IDENTIFIER": TokenKind.IDENTIFIER,
    "PUNCTUATION": TokenKind.PUNCTUATION,
  }

  def __init__(self, text: str):
    self.text = text

  def _location(self, pos: int) -> Tuple[int, int]:
    line = self.text.count("\n", 0, pos) + 1
    line_start = self.text.rfind("\n", 0, pos) + 1
    return line, pos - line_start

  def lex(self) -> Generator[Lexeme, None, None]:
    text = self.text
    pos = 0
    at_line_start = True
    while pos < len(text):
      if at_line_start and text[pos] == "#":
        end = pos
        while end < len(text) and text[end] not in "\r\n":
          end += 1
        yield Lexeme(TriviaKind.DIRECTIVE, text[pos:end], pos)
        pos = end
        continue

      if text[pos] in "$@" and self._is_interpolated_start(pos):
        end = self._scan_interpolated(pos)
        yield Lexeme(TokenKind.STRING, text[pos:end], pos)
        pos = end
        at_line_start = False
        continue

      mo = self._REGEX.match(text, pos)
      kind_str = mo.lastgroup
      value = mo.group()

      if kind_str in ("MISMATCH", "UNTERMINATED_COMMENT"):
        line, col = self._location(pos)
        if kind_str == "MISMATCH":
          raise SyntaxError(f"Unexpected character {value!r} on line {line}:{col}")
        raise SyntaxError(f"Unterminated block comment on line {line}:{col}")

      if kind_str in self._TRIVIA_KINDS:
        kind = self._TRIVIA_KINDS[kind_str]
        if kind == TriviaKind.NEWLINE:
          at_line_start = True
        elif kind != TriviaKind.WHITESPACE:
          at_line_start = False
        yield Lexeme(kind, value, pos)
      else:
        kind = self._TOKEN_KINDS[kind_str]
        if kind == TokenKind.IDENTIFIER and value in RESERVED_KEYWORDS:
          kind = TokenKind.KEYWORD
        at_line_start = False
        yield Lexeme(kind, value, pos)
      pos = mo.end()

  def _is_interpolated_start(self, pos: int) -> bool:
    prefix = self.text[pos : pos + 3]
    if prefix.startswith('$"'):
      return not self.text.startswith('$"""', pos)
    return prefix in ('$@"', '@$"')

  def _scan_interpolated(self, pos: int) -> int:
    """Returns the end offset of the interpolated string literal starting at `pos`."""
    text = self.text
    verbatim = "@" in text[pos : pos + 2]
    i = text.index('"', pos) + 1
    depth = 0
    while i < len(text):
      c = text[i]
      nxt = text[i + 1] if i + 1 < len(text) else ""
      if depth == 0:
        if c == '"':
          if verbatim and nxt == '"':
            i += 2
            continue
          return i + 1
        if c == "\\" and not verbatim:
          i += 2
          continue
        if c in "\r\n" and not verbatim:
          break
        if c == "{":
          if nxt == "{":
            i += 2
            continue
          depth = 1
        i += 1
        continue

      if c == "{":
        depth += 1
      elif c == "}":
        depth -= 1
      elif c in "$@" and self._is_interpolated_start(i):
        i = self._scan_interpolated(i)
        continue
      elif c == '"' or c == "'":
        mo = self._REGEX.match(text, i)
        if mo.lastgroup in ("STRING", "CHAR", "VERBATIM_STRING"):
          i = mo.end()
          continue
      i += 1

    line, col = self._location(pos)
    raise SyntaxError(f"Unterminated interpolated string on line {line}:{col}")

  def tokenize(self) -> List[Token]:
    lexemes = list(self.lex())
    tokens: List[Token] = []
    pending: List[Trivia] = []
    i = 0
    while i < len(lexemes):
      lx = lexemes[i]
      i += 1
      if isinstance(lx.kind, TriviaKind):
        pending.append(Trivia(lx.kind, lx.text))
        continue

      trailing: List[Trivia] = []
      while i < len(lexemes):
        nxt = lexemes[i]
        if not isinstance(nxt.kind, TriviaKind) or nxt.kind == TriviaKind.DIRECTIVE:
          break
        trailing.append(Trivia(nxt.kind, nxt.text))
        i += 1
        if nxt.kind == TriviaKind.NEWLINE:
          break

      tokens.append(Token(lx.kind, lx.text, tuple(pending), tuple(trailing)))
      pending = []

    tokens.append(Token(TokenKind.EOF, "", tuple(pending), ()))
    return tokens


class CSharpParser:
  def __init__(self, text: str):
    self.tokens = Tokenizer(text).tokenize()
    self.pos = 0

  # --- Cursor helpers ---

  def peek(self, offset: int = 0) -> Token:
    idx = self.pos + offset
    if idx >= len(self.tokens):
      return self.tokens[-1]
    return self.tokens[idx]

  def consume(self) -> Token:
    token = self.peek()
    if token.kind != TokenKind.EOF:
      self.pos += 1
    return token

  def match(self, text: str, offset: int = 0) -> bool:
    tk = self.peek(offset)
    return tk.text == text and tk.kind in (TokenKind.PUNCTUATION, TokenKind.KEYWORD, TokenKind.IDENTIFIER)

  def at_eof(self) -> bool:
    return self.peek().kind == TokenKind.EOF

  def expect(self, text: str) -> Token:
    if not self.match(text):
      cur = self.peek()
      raise SyntaxError(f"Expected '{text}', got {cur.kind.value} ('{cur.text}')")
    return self.consume()

  def expect_identifier(self) -> Token:
    cur = self.peek()
    if cur.kind != TokenKind.IDENTIFIER:
      raise SyntaxError(f"Expected identifier, got {cur.kind.value} ('{cur.text}')")
    return self.consume()

  def _try(self, fn: Callable[..., T], *args) -> Optional[T]:
    """Runs a speculative parse, rewinding the cursor if it fails."""
    mark = self.pos
    try:
      return fn(*args)
    except SyntaxError:
      self.pos = mark
      return None

  # --- Compilation unit & namespaces ---

  def parse(self) -> CompilationUnit:
    members = self._parse_namespace_members(until_close=False)
    return CompilationUnit(members=tuple(members), end_of_file=self.consume())

  def _parse_namespace_members(self, until_close: bool) -> List[CSharpNode]:
    members: List[CSharpNode] = []
    while not self.at_eof():
      if until_close and self.match(Punct.RBRACE):
        break
      start = self.pos
      try:
        members.append(self._parse_namespace_member())
      except SyntaxError:
        self.pos = start
        members.append(self._parse_raw_statement())
    return members

  def _parse_namespace_member(self) -> CSharpNode:
    if self.match("using") and not self.match("(", 1):
      return self._parse_using_directive()
    if self.match("global") and self.match("using", 1):
      return self._parse_using_directive()
    if self.match("namespace"):
      return self._parse_namespace()
    if self.match("extern") and self.match("alias", 1):
      raise SyntaxError("extern alias is kept verbatim")
    if self.match("[") and self.peek(1).text in ("assembly", "module") and self.match(":", 2):
      open_bracket = self.consume()
      content = self._scan_raw(frozenset())
      return AttributeList(open_bracket, content, self.expect("]"))
    return self._parse_type_member()

  def _parse_using_directive(self) -> UsingDirective:
    global_kw = self.consume() if self.match("global") else None
    using_kw = self.expect("using")
    static_kw = self.consume() if self.match("static") else None
    alias = None
    if self.peek().kind == TokenKind.IDENTIFIER and self.match("=", 1):
      alias = NameEquals(IdentifierName(self.consume()), self.consume())
    name = self._parse_type()
    semicolon = self.expect(";")
    return UsingDirective(global_kw, using_kw, static_kw, alias, name, semicolon)

  def _parse_namespace(self) -> CSharpNode:
    keyword = self.expect("namespace")
    name = self._parse_name()
    if self.match(";"):
      semicolon = self.consume()
      members = self._parse_namespace_members(until_close=False)
      return FileScopedNamespaceDeclaration(keyword, name, semicolon, tuple(members))
    open_brace = self.expect("{")
    members = self._parse_namespace_members(until_close=True)
    close_brace = self.expect("}")
    semicolon = self.consume() if self.match(";") else None
    return NamespaceDeclaration(keyword, name, open_brace, tuple(members), close_brace, semicolon)

  # --- Types ---

  def _parse_type(self) -> TypeSyntax:
    tok = self.peek()
    if tok.kind == TokenKind.KEYWORD and tok.text in PREDEFINED_TYPE_KEYWORDS:
      node: TypeSyntax = PredefinedType(self.consume())
    elif self.match("("):
      node = self._parse_tuple_type()
    elif tok.kind == TokenKind.IDENTIFIER:
      node = self._parse_name()
    else:
      raise SyntaxError(f"Expected type, got {tok.kind.value} ('{tok.text}')")

    while True:
      if self.match("?"):
        node = NullableType(node, self.consume())
      elif self.match("*"):
        node = PointerType(node, self.consume())
      elif self.match("[") and (self.match("]", 1) or self.match(",", 1)):
        ranks = []
        while self.match("[") and (self.match("]", 1) or self.match(",", 1)):
          open_bracket = self.consume()
          commas = []
          while self.match(","):
            commas.append(self.consume())
          ranks.append(ArrayRankSpecifier(open_bracket, tuple(commas), self.expect("]")))
        node = ArrayType(node, tuple(ranks))
      else:
        return node

  def _parse_tuple_type(self) -> TupleType:
    open_paren = self.expect("(")
    items: List[Element] = []
    while True:
      element_type = self._parse_type()
      name = self.consume() if self.peek().kind == TokenKind.IDENTIFIER else None
      items.append(TupleElement(element_type, name))
      if self.match(","):
        items.append(self.consume())
        continue
      break
    if len(items) < 3:
      raise SyntaxError("Tuple types need at least two elements")
    return TupleType(open_paren, tuple(items), self.expect(")"))

  def _parse_name(self) -> NameSyntax:
    node: NameSyntax = self._parse_simple_name()
    if self.match("::"):
      if not isinstance(node, IdentifierName):
        raise SyntaxError("Alias qualifier must be a plain identifier")
      colons = self.consume()
      node = AliasQualifiedName(node, colons, self._parse_simple_name())
    while self.match(".") and self.peek(1).kind == TokenKind.IDENTIFIER:
      dot = self.consume()
      node = QualifiedName(node, dot, self._parse_simple_name())
    return node

  def _parse_simple_name(self) -> SimpleName:
    identifier = self.expect_identifier()
    if self.match("<"):
      args = self._try(self._parse_type_argument_list)
      if args is not None:
        return GenericName(identifier, args)
    return IdentifierName(identifier)

  def _parse_type_argument_list(self) -> TypeArgumentList:
    less = self.expect("<")
    items: List[Element] = []
    while not self.match(">"):
      if self.match(","):
        # Unbound generic: typeof(Dictionary<,>)
        items.append(self.consume())
        continue
      items.append(self._parse_type())
      if self.match(","):
        items.append(self.consume())
      elif not self.match(">"):
        cur = self.peek()
        raise SyntaxError(f"Expected ',' or '>' in type arguments, got '{cur.text}'")
    return TypeArgumentList(less, tuple(items), self.expect(">"))

  def _parse_type_parameter_list(self) -> TypeParameterList:
    less = self.expect("<")
    items: List[Element] = []
    while True:
      attrs = self._parse_attribute_lists()
      variance = self.consume() if (self.match("in") or self.match("out")) else None
      items.append(TypeParameter(attrs, variance, self.expect_identifier()))
      if self.match(","):
        items.append(self.consume())
        continue
      break
    return TypeParameterList(less, tuple(items), self.expect(">"))

  # --- Members ---

  def _parse_attribute_lists(self) -> Tuple[AttributeList, ...]:
    lists = []
    while self.match("["):
      open_bracket = self.consume()
      content = self._scan_raw(frozenset())
      lists.append(AttributeList(open_bracket, content, self.expect("]")))
    return tuple(lists)

  def _parse_modifiers(self, allowed: FrozenSet[str]) -> Tuple[Token, ...]:
    mods = []
    while True:
      tok = self.peek()
      if tok.text not in allowed or tok.kind not in (TokenKind.KEYWORD, TokenKind.IDENTIFIER):
        break
      # Contextual modifiers must be followed by another word, otherwise they name something.
      if tok.kind == TokenKind.IDENTIFIER and self.peek(1).kind not in (TokenKind.KEYWORD, TokenKind.IDENTIFIER):
        break
      mods.append(self.consume())
    return tuple(mods)

  def _is_type_declaration_start(self) -> bool:
    tok = self.peek()
    if tok.kind == TokenKind.KEYWORD and tok.text in TYPE_DECLARATION_KEYWORDS:
      return True
    if tok.kind == TokenKind.IDENTIFIER and tok.text == "record":
      nxt = self.peek(1)
      return nxt.kind == TokenKind.IDENTIFIER or nxt.text in ("class", "struct")
    return False

  def _parse_type_member(self) -> CSharpNode:
    attrs = self._parse_attribute_lists()
    mods = self._parse_modifiers(MEMBER_MODIFIERS)

    if self._is_type_declaration_start():
      return self._parse_type_declaration(attrs, mods)
    if self.match("enum"):
      return self._parse_enum(attrs, mods)
    if self.match("delegate"):
      return self._parse_delegate(attrs, mods)
    if self.match("event"):
      return self._parse_event(attrs, mods)
    if self.match("implicit") or self.match("explicit"):
      return self._parse_conversion_operator(attrs, mods)
    if self.match("~"):
      return self._parse_destructor(attrs, mods)
    if self.peek().kind == TokenKind.IDENTIFIER and self.match("(", 1):
      return self._parse_constructor(attrs, mods)

    member_type = self._parse_type()
    if self.match("operator"):
      return self._parse_operator(attrs, mods, member_type)
    if self.match("this"):
      return self._parse_indexer(attrs, mods, member_type, None, self.consume())

    explicit, identifier, type_params = self._parse_member_name()
    if identifier.kind == TokenKind.KEYWORD:
      return self._parse_indexer(attrs, mods, member_type, explicit, identifier)
    if self.match("("):
      parameters = self._parse_parameter_list("(", ")")
      constraints = self._parse_constraints()
      body, expr_body, semicolon = self._parse_body()
      return MethodDeclaration(
        attrs, mods, member_type, explicit, identifier, type_params, parameters, constraints, body, expr_body, semicolon
      )
    if type_params is not None:
      raise SyntaxError("Type parameters are only valid on methods")
    if self.match("{") or self.match("=>"):
      return self._parse_property(attrs, mods, member_type, explicit, identifier)
    if explicit is None and (self.match("=") or self.match(";") or self.match(",")):
      declaration = self._parse_variable_declaration_rest(member_type, identifier)
      return FieldDeclaration(attrs, mods, declaration, self.expect(";"))
    cur = self.peek()
    raise SyntaxError(f"Unexpected '{cur.text}' in member declaration")

  def _parse_member_name(self) -> Tuple[Optional[ExplicitInterfaceSpecifier], Token, Optional[TypeParameterList]]:
    name = self._parse_name()
    if self.match(".") and self.match("this", 1):
      dot = self.consume()
      return ExplicitInterfaceSpecifier(name, dot), self.consume(), None

    explicit = None
    if isinstance(name, QualifiedName):
      explicit = ExplicitInterfaceSpecifier(name.left, name.dot)
      simple = name.right
    elif isinstance(name, SimpleName):
      simple = name
    else:
      raise SyntaxError("Unexpected alias-qualified member name")

    type_params = None
    if isinstance(simple, GenericName):
      type_params = self._as_type_parameter_list(simple.type_arguments)
    return explicit, simple.identifier, type_params

  def _as_type_parameter_list(self, args: TypeArgumentList) -> TypeParameterList:
    items: List[Element] = []
    for item in args.items:
      if isinstance(item, Token):
        items.append(item)
      elif isinstance(item, IdentifierName):
        items.append(TypeParameter((), None, item.identifier))
      else:
        raise SyntaxError("Type parameters must be simple identifiers")
    return TypeParameterList(args.less, tuple(items), args.greater)

  def _parse_constraints(self) -> Optional[RawTokens]:
    if not (self.peek().kind == TokenKind.IDENTIFIER and self.peek().text == "where"):
      return None
    return self._scan_raw(frozenset({"{", ";", "=>"}))

  def _parse_body(self) -> Tuple[Optional[Block], Optional[ArrowExpressionClause], Optional[Token]]:
    if self.match("{"):
      block = self._parse_block()
      semicolon = self.consume() if self.match(";") else None
      return block, None, semicolon
    if self.match("=>"):
      arrow = self.consume()
      expression = self._scan_raw(frozenset({";"}))
      return None, ArrowExpressionClause(arrow, expression), self.expect(";")
    return None, None, self.expect(";")

  def _parse_parameter_list(self, open_text: str, close_text: str) -> ParameterList:
    open_tok = self.expect(open_text)
    items: List[Element] = []
    if not self.match(close_text):
      while True:
        items.append(self._parse_parameter())
        if self.match(","):
          items.append(self.consume())
          continue
        break
    return ParameterList(open_tok, tuple(items), self.expect(close_text))

  def _parse_parameter(self) -> Parameter:
    attrs = self._parse_attribute_lists()
    mods = self._parse_modifiers(PARAMETER_MODIFIERS)
    param_type = self._parse_type()
    identifier = self.expect_identifier()
    default = None
    if self.match("="):
      equals = self.consume()
      default = EqualsValueClause(equals, self._scan_raw(frozenset({","})))
    return Parameter(attrs, mods, param_type, identifier, default)

  def _parse_variable_declaration_rest(self, var_type: TypeSyntax, first: Token) -> VariableDeclaration:
    items: List[Element] = [self._parse_declarator(first)]
    while self.match(","):
      items.append(self.consume())
      items.append(self._parse_declarator(self.expect_identifier()))
    return VariableDeclaration(var_type, tuple(items))

  def _parse_declarator(self, identifier: Token) -> VariableDeclarator:
    initializer = None
    if self.match("="):
      equals = self.consume()
      initializer = EqualsValueClause(equals, self._scan_raw(frozenset({",", ";"})))
    return VariableDeclarator(identifier, initializer)

  def _parse_type_declaration(self, attrs, mods) -> TypeDeclaration:
    keyword = self.consume()
    record_kind = None
    if keyword.text == "record" and (self.match("class") or self.match("struct")):
      record_kind = self.consume()
    header = dict(
      attribute_lists=attrs,
      modifiers=mods,
      keyword=keyword,
      record_kind=record_kind,
      identifier=self.expect_identifier(),
      type_parameter_list=self._parse_type_parameter_list() if self.match("<") else None,
      parameter_list=self._parse_parameter_list("(", ")") if self.match("(") else None,
      base_list=self._parse_base_list(),
      constraints=self._parse_constraints(),
    )

    if not self.match("{"):
      # Positional record without a body: `record Point(int X, int Y);`
      return TypeDeclaration(**header, open=None, members=(), close=None, semicolon=self.expect(";"))

    open_brace = self.consume()
    members: List[CSharpNode] = []
    while not self.at_eof() and not self.match("}"):
      start = self.pos
      try:
        members.append(self._parse_type_member())
      except SyntaxError:
        self.pos = start
        members.append(self._parse_raw_statement())
    close_brace = self.expect("}")
    semicolon = self.consume() if self.match(";") else None
    return TypeDeclaration(**header, open=open_brace, members=tuple(members), close=close_brace, semicolon=semicolon)

  def _parse_base_list(self) -> Optional[BaseList]:
    if not self.match(":"):
      return None
    colon = self.consume()
    return BaseList(colon, self._scan_raw(frozenset({"{", ";", "where"})))

  def _parse_enum(self, attrs, mods) -> EnumDeclaration:
    keyword = self.expect("enum")
    identifier = self.expect_identifier()
    base_list = self._parse_base_list()
    open_brace = self.expect("{")
    body = self._scan_raw(frozenset())
    close_brace = self.expect("}")
    semicolon = self.consume() if self.match(";") else None
    return EnumDeclaration(attrs, mods, keyword, identifier, base_list, open_brace, body, close_brace, semicolon)

  def _parse_delegate(self, attrs, mods) -> DelegateDeclaration:
    keyword = self.expect("delegate")
    return_type = self._parse_type()
    identifier = self.expect_identifier()
    type_params = self._parse_type_parameter_list() if self.match("<") else None
    parameters = self._parse_parameter_list("(", ")")
    constraints = self._parse_constraints()
    return DelegateDeclaration(
      attrs, mods, keyword, return_type, identifier, type_params, parameters, constraints, self.expect(";")
    )

  def _parse_event(self, attrs, mods) -> CSharpNode:
    event_kw = self.expect("event")
    event_type = self._parse_type()
    mark = self.pos
    explicit, identifier, _ = self._parse_member_name()
    if self.match("{"):
      return EventDeclaration(attrs, mods, event_kw, event_type, explicit, identifier, self._parse_accessor_list())
    self.pos = mark
    declaration = self._parse_variable_declaration_rest(event_type, self.expect_identifier())
    return EventFieldDeclaration(attrs, mods, event_kw, declaration, self.expect(";"))

  def _parse_property(self, attrs, mods, prop_type, explicit, identifier) -> PropertyDeclaration:
    accessors = None
    expr_body = None
    initializer = None
    semicolon = None
    if self.match("=>"):
      arrow = self.consume()
      expr_body = ArrowExpressionClause(arrow, self._scan_raw(frozenset({";"})))
      semicolon = self.expect(";")
    else:
      accessors = self._parse_accessor_list()
      if self.match("="):
        equals = self.consume()
        initializer = EqualsValueClause(equals, self._scan_raw(frozenset({";"})))
        semicolon = self.expect(";")
    return PropertyDeclaration(attrs, mods, prop_type, explicit, identifier, accessors, expr_body, initializer, semicolon)

  def _parse_accessor_list(self) -> AccessorList:
    open_brace = self.expect("{")
    accessors = []
    while not self.match("}"):
      attrs = self._parse_attribute_lists()
      mods = self._parse_modifiers(_ACCESSOR_MODIFIERS)
      keyword = self.peek()
      if keyword.kind != TokenKind.IDENTIFIER or keyword.text not in ACCESSOR_KEYWORDS:
        raise SyntaxError(f"Expected accessor, got '{keyword.text}'")
      self.consume()
      body, expr_body, semicolon = self._parse_body()
      accessors.append(Accessor(attrs, mods, keyword, body, expr_body, semicolon))
    return AccessorList(open_brace, tuple(accessors), self.expect("}"))

  def _parse_indexer(self, attrs, mods, indexer_type, explicit, this_kw) -> IndexerDeclaration:
    parameters = self._parse_parameter_list("[", "]")
    accessors = None
    expr_body = None
    semicolon = None
    if self.match("=>"):
      arrow = self.consume()
      expr_body = ArrowExpressionClause(arrow, self._scan_raw(frozenset({";"})))
      semicolon = self.expect(";")
    else:
      accessors = self._parse_accessor_list()
    return IndexerDeclaration(attrs, mods, indexer_type, explicit, this_kw, parameters, accessors, expr_body, semicolon)

  def _parse_operator(self, attrs, mods, return_type) -> OperatorDeclaration:
    operator_kw = self.expect("operator")
    op_tokens = []
    while not self.match("(") and not self.at_eof():
      op_tokens.append(self.consume())
    if not op_tokens:
      raise SyntaxError("Missing operator token")
    parameters = self._parse_parameter_list("(", ")")
    body, expr_body, semicolon = self._parse_body()
    return OperatorDeclaration(
      attrs, mods, return_type, operator_kw, tuple(op_tokens), parameters, body, expr_body, semicolon
    )

  def _parse_conversion_operator(self, attrs, mods) -> ConversionOperatorDeclaration:
    kind_kw = self.consume()
    operator_kw = self.expect("operator")
    checked_kw = self.consume() if self.match("checked") else None
    target_type = self._parse_type()
    parameters = self._parse_parameter_list("(", ")")
    body, expr_body, semicolon = self._parse_body()
    return ConversionOperatorDeclaration(
      attrs, mods, kind_kw, operator_kw, checked_kw, target_type, parameters, body, expr_body, semicolon
    )

  def _parse_constructor(self, attrs, mods) -> ConstructorDeclaration:
    identifier = self.expect_identifier()
    parameters = self._parse_parameter_list("(", ")")
    initializer = None
    if self.match(":"):
      colon = self.consume()
      rest = self._scan_raw(frozenset({"{", ";", "=>"}))
      initializer = RawTokens((colon,) + rest.elements)
    body, expr_body, semicolon = self._parse_body()
    return ConstructorDeclaration(attrs, mods, identifier, parameters, initializer, body, expr_body, semicolon)

  def _parse_destructor(self, attrs, mods) -> DestructorDeclaration:
    tilde = self.expect("~")
    identifier = self.expect_identifier()
    parameters = self._parse_parameter_list("(", ")")
    body, expr_body, semicolon = self._parse_body()
    return DestructorDeclaration(attrs, mods, tilde, identifier, parameters, body, expr_body, semicolon)

  # --- Statements ---

  def _parse_block(self) -> Block:
    open_brace = self.expect("{")
    statements: List[CSharpNode] = []
    while not self.at_eof() and not self.match("}"):
      statements.append(self._parse_statement())
    return Block(open_brace, tuple(statements), self.expect("}"))

  def _parse_statement(self) -> CSharpNode:
    if self.match("{"):
      return self._parse_block()
    node = self._try(self._parse_local_declaration_or_function)
    if node is not None:
      return node
    return self._parse_raw_statement()

  def _parse_local_declaration_or_function(self) -> CSharpNode:
    mods = self._parse_modifiers(LOCAL_MODIFIERS)
    local_type = self._parse_type()
    identifier = self.expect_identifier()

    if self.match("(") or self.match("<"):
      type_params = self._parse_type_parameter_list() if self.match("<") else None
      parameters = self._parse_parameter_list("(", ")")
      constraints = self._parse_constraints()
      body, expr_body, semicolon = self._parse_body()
      return LocalFunctionStatement(
        mods, local_type, identifier, type_params, parameters, constraints, body, expr_body, semicolon
      )

    if not (self.match("=") or self.match(";") or self.match(",")):
      raise SyntaxError("Not a local declaration")
    declaration = self._parse_variable_declaration_rest(local_type, identifier)
    return LocalDeclarationStatement(mods, declaration, self.expect(";"))

  def _parse_embedded_declaration(self) -> VariableDeclaration:
    """Parses the declaration opening ``for (...)``, ``using (...)`` or ``fixed (...)``."""
    decl_type = self._parse_type()
    identifier = self.expect_identifier()
    if not self.match("="):
      raise SyntaxError("Embedded declarations require an initializer")
    declaration = self._parse_variable_declaration_rest(decl_type, identifier)
    if not (self.match(";") or self.match(")")):
      raise SyntaxError("Embedded declaration must end the clause")
    return declaration

  def _parse_raw_statement(self) -> RawTokens:
    """
    Consumes one statement (or unrecognized member) as a token run.

    The run ends after a `;` at nesting depth zero, after a block at depth zero,
    after a ``case ...:`` label, or before a closing brace that belongs to the caller.
    """
    elements: List[Element] = []
    depth = 0
    # Braces opened inside this run; any other `}` belongs to the caller.
    braces = 0
    while not self.at_eof():
      tok = self.peek()
      if tok.text == "}" and tok.kind == TokenKind.PUNCTUATION and braces == 0:
        if not elements:
          elements.append(self.consume())
        break
      if depth == 0:
        if self.match(";"):
          elements.append(self.consume())
          break
        if self.match("{"):
          block = self._try(self._parse_block)
          if block is not None:
            elements.append(block)
            break
        if self.match(":") and elements and isinstance(elements[0], Token) and elements[0].text in ("case", "default"):
          elements.append(self.consume())
          break

      if tok.kind == TokenKind.KEYWORD and tok.text in EMBEDDED_DECLARATION_KEYWORDS and self.match("(", 1):
        elements.append(self.consume())
        elements.append(self.consume())
        depth += 1
        declaration = self._try(self._parse_embedded_declaration)
        if declaration is not None:
          elements.append(declaration)
        continue

      recognized = self._scan_structure()
      if recognized is not None:
        elements.extend(recognized)
        continue

      if tok.text in ("(", "[", "{"):
        depth += 1
        braces += tok.text == "{"
      elif tok.text in (")", "]", "}"):
        depth = max(depth - 1, 0)
        braces -= tok.text == "}"
      elements.append(self.consume())
    return RawTokens(tuple(elements))

  def _scan_raw(self, stop_texts: FrozenSet[str]) -> RawTokens:
    """
    Consumes a balanced token run up to a stop token at nesting depth zero.

    An unbalanced closing bracket also ends the run; it belongs to the caller.
    """
    elements: List[Element] = []
    depth = 0
    while not self.at_eof():
      tok = self.peek()
      if depth == 0:
        if tok.text in stop_texts and tok.kind != TokenKind.STRING:
          break
        if tok.text in (")", "]", "}") and tok.kind == TokenKind.PUNCTUATION:
          break

      recognized = self._scan_structure()
      if recognized is not None:
        elements.extend(recognized)
        continue

      if tok.text in ("(", "[", "{"):
        depth += 1
      elif tok.text in (")", "]", "}"):
        depth -= 1
      elements.append(self.consume())
    return RawTokens(tuple(elements))

  def _scan_structure(self) -> Optional[List[Element]]:
    """
    Recognizes structure inside token runs: typeof expressions, explicitly
    typed lambda and anonymous method parameter lists, lambda blocks and
    generic names.
    """
    tok = self.peek()
    if tok.kind == TokenKind.KEYWORD and tok.text == "typeof" and self.match("(", 1):
      node = self._try(self._parse_typeof)
      if node is not None:
        return [node]
    elif tok.kind == TokenKind.KEYWORD and tok.text == "delegate" and self.match("(", 1):
      mark = self.pos
      keyword = self.consume()
      parameters = self._try(self._parse_parameter_list, "(", ")")
      if parameters is not None:
        body = self._try(self._parse_block) if self.match("{") else None
        return [keyword, parameters] if body is None else [keyword, parameters, body]
      self.pos = mark
    elif self.match("("):
      parameters = self._try(self._parse_lambda_parameter_list)
      if parameters is not None:
        return [parameters]
    elif self.match("=>") and self.match("{", 1):
      mark = self.pos
      arrow = self.consume()
      block = self._try(self._parse_block)
      if block is not None:
        return [arrow, block]
      self.pos = mark
    elif tok.kind == TokenKind.IDENTIFIER and self.match("<", 1):
      node = self._try(self._parse_generic_in_expression)
      if node is not None:
        return [node]
    return None

  def _parse_lambda_parameter_list(self) -> ParameterList:
    """Parses ``(Type name, ...)`` followed by ``=>``; untyped lists are rejected."""
    parameters = self._parse_parameter_list("(", ")")
    if not parameters.items or not self.match("=>"):
      raise SyntaxError("Not an explicitly typed lambda parameter list")
    return parameters

  def _parse_typeof(self) -> TypeOfExpression:
    keyword = self.expect("typeof")
    open_paren = self.expect("(")
    operand = self._parse_type()
    return TypeOfExpression(keyword, open_paren, operand, self.expect(")"))

  def _parse_generic_in_expression(self) -> GenericName:
    identifier = self.expect_identifier()
    args = self._parse_type_argument_list()
    follower = self.peek()
    if follower.kind not in (TokenKind.IDENTIFIER, TokenKind.EOF) and follower.text not in _GENERIC_FOLLOWERS:
      raise SyntaxError("Not a generic name")
    return GenericName(identifier, args)


def parse_compilation_unit(text: str) -> CompilationUnit:
  """
  Parses a full C# document.

  Args:
      text: The source code.

  Returns:
      The lossless syntax tree for the document.

  Raises:
      SyntaxError: If the text cannot be tokenized (e.g. unterminated comment),
          or nests blocks deeper than the interpreter's recursion limit allows.
  """
  try:
    return CSharpParser(text).parse()
  except RecursionError as e:
    raise SyntaxError("Source nests too deeply to parse") from e
