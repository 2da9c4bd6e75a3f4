"""Error taxonomy for the lexer and parser.

Both stages fail fast by raising one of the exceptions below. Every error
records the 1-based `line`/`column` where it was detected and renders as a
one-line diagnostic:

    Lexical error at line 3, column 9: Unterminated string
    Parse error at line 1, column 9: Expected expression, found end of input

`FrontendError` derives from `SyntaxError` so callers that only care about
"the program did not parse" can catch the builtin.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tokens import Token


class FrontendError(SyntaxError):
    kind = "Syntax"

    def __init__(self, detail: str, line: int = 0, column: int = 0):
        self.detail = detail
        self.line = line
        self.column = column
        super().__init__(
            f"{self.kind} error at line {line}, column {column}: {detail}"
        )


# Lexical errors


class LexError(FrontendError):
    kind = "Lexical"


class UnknownCharacterError(LexError):
    def __init__(self, char: str, line: int = 0, column: int = 0):
        self.char = char
        super().__init__(f"Unexpected character {char!r}", line, column)


class UnterminatedStringError(LexError):
    def __init__(self, line: int = 0, column: int = 0):
        super().__init__("Unterminated string", line, column)


class UnterminatedBlockCommentError(LexError):
    def __init__(self, line: int = 0, column: int = 0):
        super().__init__("Unterminated block comment", line, column)


class MalformedNumberError(LexError):
    def __init__(self, text: str, line: int = 0, column: int = 0):
        self.text = text
        super().__init__(f"Malformed number '{text}'", line, column)


# Parse errors


class ParseError(FrontendError):
    kind = "Parse"


class UnexpectedTokenError(ParseError):
    def __init__(self, expected: str, found: Token):
        self.expected = expected
        self.found = found
        super().__init__(
            f"Expected {expected}, found {found.describe()}", found.line, found.column
        )


class UnexpectedEndOfInputError(ParseError):
    def __init__(self, expected: str, line: int = 0, column: int = 0):
        self.expected = expected
        super().__init__(f"Expected {expected}, found end of input", line, column)


class InvalidAssignmentTargetError(ParseError):
    def __init__(self, target: str, line: int = 0, column: int = 0):
        self.target = target
        super().__init__(f"Invalid assignment target: {target}", line, column)


class NestingTooDeepError(ParseError):
    def __init__(self, limit: int, line: int = 0, column: int = 0):
        self.limit = limit
        super().__init__(f"Nesting exceeds maximum depth of {limit}", line, column)
