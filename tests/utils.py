from lexer import Lexer
from parser import Parser
from tokens import TokenType


def lex(text: str):
    """Return a list of tokens for the given source text."""
    return Lexer(text).tokenize()


def lex_types(text: str):
    """Token types for `text`, without the trailing EOF."""
    return [t.type for t in lex(text) if t.type != TokenType.EOF]


def parse_text(text: str):
    """Convenience: lex+parse a source text into an AST."""
    return Parser(Lexer(text).tokenize()).parse()


def parse_expr(text: str):
    """Parse `text` as a single expression statement and return the expression."""
    program = parse_text(f"{text};")
    assert len(program.body) == 1
    return program.body[0].expression
