"""Token definitions for the lexer.

This module defines the `TokenType` enum for all token kinds recognized by
the lexer and a small frozen `Token` dataclass that holds a token type, an
optional literal payload and the source position of the lexeme. Tokens are
the atomic units produced by the lexer and consumed by the parser.

Only `NUMBER`, `STRING` and `IDENTIFIER` tokens carry a value. Every other
kind is a fixed marker whose source text is recovered from `OPERATORS` or
`KEYWORDS`.
"""

from __future__ import annotations
from decimal import Decimal
from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Union


class TokenType(Enum):
    # Literals
    NUMBER = auto()
    STRING = auto()
    IDENTIFIER = auto()

    # Grouping and punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()
    DOT = auto()
    SEMICOLON = auto()
    COLON = auto()
    QUESTION = auto()

    # Arithmetic operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PLUS_PLUS = auto()
    MINUS_MINUS = auto()

    # Assignment
    ASSIGN = auto()
    PLUS_ASSIGN = auto()
    MINUS_ASSIGN = auto()
    STAR_ASSIGN = auto()
    SLASH_ASSIGN = auto()
    SHL_ASSIGN = auto()
    SHR_ASSIGN = auto()

    # Comparison operators
    EQ = auto()
    NEQ = auto()
    STRICT_EQ = auto()
    STRICT_NEQ = auto()
    LT = auto()
    GT = auto()
    LTE = auto()
    GTE = auto()

    # Logical operators
    AND = auto()
    OR = auto()
    NOT = auto()

    # Bitwise operators
    AMPERSAND = auto()
    PIPE = auto()
    CARET = auto()
    TILDE = auto()
    SHL = auto()
    SHR = auto()

    # Keywords
    VAR = auto()
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    FUNCTION = auto()
    RETURN = auto()
    THIS = auto()
    NULL = auto()
    TRUE = auto()
    FALSE = auto()

    # Reserved words of the fuller grammar
    BREAK = auto()
    CASE = auto()
    CATCH = auto()
    CLASS = auto()
    CONST = auto()
    CONTINUE = auto()
    DEBUGGER = auto()
    DEFAULT = auto()
    DELETE = auto()
    DO = auto()
    ENUM = auto()
    EXPORT = auto()
    EXTENDS = auto()
    FINALLY = auto()
    FOR = auto()
    IMPORT = auto()
    IN = auto()
    INSTANCEOF = auto()
    NEW = auto()
    SUPER = auto()
    SWITCH = auto()
    THROW = auto()
    TRY = auto()
    TYPEOF = auto()
    VOID = auto()
    WITH = auto()

    # Special
    EOF = auto()

    def __str__(self) -> str:
        return self.name


# Operator lexemes. The lexer tries the longest candidate first.
OPERATORS: Dict[str, TokenType] = {
    "===": TokenType.STRICT_EQ,
    "!==": TokenType.STRICT_NEQ,
    "<<=": TokenType.SHL_ASSIGN,
    ">>=": TokenType.SHR_ASSIGN,
    "==": TokenType.EQ,
    "!=": TokenType.NEQ,
    "<=": TokenType.LTE,
    ">=": TokenType.GTE,
    "&&": TokenType.AND,
    "||": TokenType.OR,
    "++": TokenType.PLUS_PLUS,
    "--": TokenType.MINUS_MINUS,
    "+=": TokenType.PLUS_ASSIGN,
    "-=": TokenType.MINUS_ASSIGN,
    "*=": TokenType.STAR_ASSIGN,
    "/=": TokenType.SLASH_ASSIGN,
    "<<": TokenType.SHL,
    ">>": TokenType.SHR,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    "?": TokenType.QUESTION,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "=": TokenType.ASSIGN,
    "!": TokenType.NOT,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "&": TokenType.AMPERSAND,
    "|": TokenType.PIPE,
    "^": TokenType.CARET,
    "~": TokenType.TILDE,
}

MAX_OPERATOR_LENGTH = max(len(op) for op in OPERATORS)

KEYWORDS: Dict[str, TokenType] = {
    "var": TokenType.VAR,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "function": TokenType.FUNCTION,
    "return": TokenType.RETURN,
    "this": TokenType.THIS,
    "null": TokenType.NULL,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "break": TokenType.BREAK,
    "case": TokenType.CASE,
    "catch": TokenType.CATCH,
    "class": TokenType.CLASS,
    "const": TokenType.CONST,
    "continue": TokenType.CONTINUE,
    "debugger": TokenType.DEBUGGER,
    "default": TokenType.DEFAULT,
    "delete": TokenType.DELETE,
    "do": TokenType.DO,
    "enum": TokenType.ENUM,
    "export": TokenType.EXPORT,
    "extends": TokenType.EXTENDS,
    "finally": TokenType.FINALLY,
    "for": TokenType.FOR,
    "import": TokenType.IMPORT,
    "in": TokenType.IN,
    "instanceof": TokenType.INSTANCEOF,
    "new": TokenType.NEW,
    "super": TokenType.SUPER,
    "switch": TokenType.SWITCH,
    "throw": TokenType.THROW,
    "try": TokenType.TRY,
    "typeof": TokenType.TYPEOF,
    "void": TokenType.VOID,
    "with": TokenType.WITH,
}

# Reverse lookup used to render fixed tokens back to source text.
FIXED_LEXEMES: Dict[TokenType, str] = {
    **{tt: text for text, tt in OPERATORS.items()},
    **{tt: text for text, tt in KEYWORDS.items()},
}


def format_number(value: float) -> str:
    """Render a float so that scanning the result yields the same value."""
    if value.is_integer():
        return str(int(value))
    # `repr` is the shortest round-tripping form; Decimal expands exponents.
    return format(Decimal(repr(value)), "f")


def quote_string(value: str) -> str:
    """Quote a string payload; strings have no escapes so pick a free quote."""
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    raise ValueError(f"String {value!r} contains both quote characters")


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: Optional[Union[float, str]] = None
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.type})"
        return f"Token({self.type}, {repr(self.value)})"

    @property
    def lexeme(self) -> str:
        """Canonical source text for this token."""
        match self.type:
            case TokenType.NUMBER:
                return format_number(self.value)
            case TokenType.STRING:
                return quote_string(self.value)
            case TokenType.IDENTIFIER:
                return self.value
            case TokenType.EOF:
                return ""
        return FIXED_LEXEMES[self.type]

    def describe(self) -> str:
        """Short description for diagnostics, e.g. ``identifier 'x'``."""
        match self.type:
            case TokenType.EOF:
                return "end of input"
            case TokenType.NUMBER:
                return f"number {format_number(self.value)}"
            case TokenType.STRING:
                return f"string {self.value!r}"
            case TokenType.IDENTIFIER:
                return f"identifier '{self.value}'"
        if self.type in KEYWORDS.values():
            return f"keyword '{self.lexeme}'"
        return f"'{self.lexeme}'"


def render_tokens(tokens: Iterable[Token]) -> str:
    """Join canonical lexemes with single spaces (EOF renders as nothing)."""
    return " ".join(tok.lexeme for tok in tokens if tok.type != TokenType.EOF)
