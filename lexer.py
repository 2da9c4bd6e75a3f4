"""
Lexer for the scripting language.

Overview:
- This module implements a small hand-written lexical analyzer (scanner) that
    transforms an input source string into a stream of `Token` objects defined
    in `tokens.py`.
- It recognizes keywords (e.g. `var`, `function`, `return`, `if`, `while`),
    identifiers, number literals, single- and double-quoted strings, one- to
    three-character operators (e.g. `==`, `===`, `<<=`, `&&`), punctuation,
    and skips whitespace, `//` line comments and `/* ... */` block comments.

Examples:
    Input:  "var total = price * 2;"
    Tokens: [VAR, IDENTIFIER('total'), ASSIGN, IDENTIFIER('price'), STAR,
             NUMBER(2.0), SEMICOLON, EOF]

Implementation notes:
- The lexer is a simple stateful scanner using `self.pos` and `self.current_char`.
    Line/column counters are updated incrementally in `advance()`.
- Operators use maximal munch: the longest entry of `OPERATORS` that matches
    at the cursor wins, so `>=` is never lexed as `>` `=`.
- Identifiers are scanned and then mapped to keywords using `KEYWORDS`.
- Malformed input (unknown characters, unterminated strings or block
    comments, numbers such as `1.`) raises a `LexError`; nothing is dropped.
"""

from __future__ import annotations
import logging
import math
import re
from typing import Iterator, List, Optional
from tokens import KEYWORDS, MAX_OPERATOR_LENGTH, OPERATORS, Token, TokenType
from errors import (
    MalformedNumberError,
    UnknownCharacterError,
    UnterminatedBlockCommentError,
    UnterminatedStringError,
)

logger = logging.getLogger(__name__)

NUMBER_RE = re.compile(r"[0-9]+(\.[0-9]+)?")


def is_ascii_letter(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def is_ascii_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class Lexer:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.current_char = self.text[self.pos] if self.text else None

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens lazily, ending with (and including) EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def advance(self) -> None:
        """Advance to next character."""
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        self.pos += 1
        if self.pos < len(self.text):
            self.current_char = self.text[self.pos]
        else:
            self.current_char = None

    def peek_char(self, offset: int = 1) -> Optional[str]:
        """Look ahead `offset` characters without consuming anything."""
        next_pos = self.pos + offset
        if next_pos < len(self.text):
            return self.text[next_pos]
        return None

    def skip_whitespace(self) -> None:
        """Skip whitespace characters."""
        while self.current_char is not None and self.current_char.isspace():
            self.advance()

    def skip_line_comment(self) -> None:
        """Skip a `// ...` comment including its terminating newline."""
        while self.current_char is not None and self.current_char != "\n":
            self.advance()

        if self.current_char == "\n":
            self.advance()

    def skip_block_comment(self) -> None:
        """Skip a `/* ... */` comment; block comments do not nest."""
        line, column = self.line, self.column
        self.advance()
        self.advance()

        while self.current_char is not None:
            if self.current_char == "*" and self.peek_char() == "/":
                self.advance()
                self.advance()
                return
            self.advance()

        raise UnterminatedBlockCommentError(line, column)

    def number(self) -> Token:
        """Scan a number literal: digit+ ('.' digit+)?"""
        line, column = self.line, self.column
        result = []

        # Take the whole run of digits and dots so that `1.` or `1.2.3` is
        # reported as one malformed literal instead of being split.
        while self.current_char is not None and (
            is_ascii_digit(self.current_char) or self.current_char == "."
        ):
            result.append(self.current_char)
            self.advance()

        text = "".join(result)
        if not NUMBER_RE.fullmatch(text):
            raise MalformedNumberError(text, line, column)

        value = float(text)
        if math.isinf(value):
            # too large for a double
            raise MalformedNumberError(text, line, column)

        return Token(TokenType.NUMBER, value, line, column)

    def string(self) -> Token:
        """Scan a string literal; the opening quote is also the terminator."""
        line, column = self.line, self.column
        quote = self.current_char
        self.advance()
        result = []

        while self.current_char is not None and self.current_char != quote:
            result.append(self.current_char)
            self.advance()

        if self.current_char is None:
            raise UnterminatedStringError(line, column)

        self.advance()  # closing quote
        return Token(TokenType.STRING, "".join(result), line, column)

    def identifier(self) -> Token:
        """Scan an identifier or keyword."""
        line, column = self.line, self.column
        result = [self.current_char]
        self.advance()

        # Following characters can be letters, digits, or underscores.
        while self.current_char is not None and (
            is_ascii_letter(self.current_char)
            or is_ascii_digit(self.current_char)
            or self.current_char == "_"
        ):
            result.append(self.current_char)
            self.advance()

        text = "".join(result)
        token_type = KEYWORDS.get(text)
        if token_type is not None:
            return Token(token_type, None, line, column)
        return Token(TokenType.IDENTIFIER, text, line, column)

    def operator(self) -> Optional[Token]:
        """Match the longest operator at the cursor, or return None."""
        line, column = self.line, self.column
        for length in range(MAX_OPERATOR_LENGTH, 0, -1):
            candidate = self.text[self.pos : self.pos + length]
            token_type = OPERATORS.get(candidate)
            if len(candidate) == length and token_type is not None:
                for _ in range(length):
                    self.advance()
                return Token(token_type, None, line, column)
        return None

    def next_token(self) -> Token:
        """Lexical analyzer that returns tokens one at a time."""
        while self.current_char is not None:
            if self.current_char.isspace():
                self.skip_whitespace()
                continue

            # Comments take priority over `/` and `/=`.
            if self.current_char == "/" and self.peek_char() == "/":
                self.skip_line_comment()
                continue

            if self.current_char == "/" and self.peek_char() == "*":
                self.skip_block_comment()
                continue

            if is_ascii_digit(self.current_char):
                return self.number()

            if self.current_char in ("'", '"'):
                return self.string()

            if is_ascii_letter(self.current_char):
                return self.identifier()

            token = self.operator()
            if token is not None:
                return token

            raise UnknownCharacterError(self.current_char, self.line, self.column)

        return Token(TokenType.EOF, None, self.line, self.column)

    def tokenize(self) -> List[Token]:
        """Return all tokens from the input string, ending with EOF."""
        tokens = list(self)
        logger.debug("Tokenized %d characters into %d tokens", len(self.text), len(tokens))
        return tokens
