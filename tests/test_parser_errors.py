import inspect
import sys

import pytest

from ast_nodes import *
from errors import (
    InvalidAssignmentTargetError,
    NestingTooDeepError,
    ParseError,
    UnexpectedEndOfInputError,
    UnexpectedTokenError,
)
from lexer import Lexer
from parser import MAX_DEPTH_LIMIT, MAX_NESTING_DEPTH, Parser
from tests.utils import parse_text
from tokens import Token, TokenType


def parse_with_recovery(text, **kwargs):
    return Parser(Lexer(text).tokenize(), **kwargs).parse_recovering()


def test_missing_initializer_reports_end_of_input():
    with pytest.raises(UnexpectedEndOfInputError) as exc:
        parse_text("var x = ")
    err = exc.value
    assert err.expected == "expression"
    assert (err.line, err.column) == (1, 9)
    assert str(err) == "Parse error at line 1, column 9: Expected expression, found end of input"


def test_missing_semicolon_at_end_of_input():
    with pytest.raises(UnexpectedEndOfInputError) as exc:
        parse_text("var x = 1")
    assert exc.value.expected == "';' after variable declaration"


def test_missing_semicolon_between_statements():
    with pytest.raises(UnexpectedTokenError) as exc:
        parse_text("x = 1 y = 2;")
    err = exc.value
    assert err.expected == "';' after expression"
    assert err.found == Token(TokenType.IDENTIFIER, "y")
    assert (err.line, err.column) == (1, 7)
    assert "found identifier 'y'" in str(err)


def test_missing_closing_paren():
    with pytest.raises(UnexpectedTokenError) as exc:
        parse_text("var x = (1 + 2;")
    assert exc.value.expected == "')' after expression"
    assert exc.value.found.type == TokenType.SEMICOLON


def test_missing_closing_paren_is_not_ignored():
    # the grouped expression must be closed even at the end of a statement
    with pytest.raises(ParseError):
        parse_text("(a")


def test_missing_closing_brace():
    with pytest.raises(UnexpectedEndOfInputError) as exc:
        parse_text("{ var a = 1;")
    assert exc.value.expected == "'}' after block"


@pytest.mark.parametrize(
    "src, expected, found",
    [
        ("var 5 = 1;", "variable name", "number 5"),
        ("function () {}", "function name", "'('"),
        ("function f(a,) {}", "parameter name", "')'"),
        ("function f() return 1;", "'{' before function body", "keyword 'return'"),
        ("if x) y;", "'(' after 'if'", "identifier 'x'"),
        ("while (x { }", "')' after while condition", "'{'"),
        ("a ? b c;", "':' in conditional expression", "identifier 'c'"),
        ("f(1 2);", "')' after arguments", "number 2"),
        ("x = ;", "expression", "';'"),
        ("var else = 1;", "variable name", "keyword 'else'"),
    ],
)
def test_unexpected_token_messages(src, expected, found):
    with pytest.raises(UnexpectedTokenError) as exc:
        parse_text(src)
    assert exc.value.expected == expected
    assert f"Expected {expected}, found {found}" in str(exc.value)


@pytest.mark.parametrize(
    "src, target",
    [
        ("1 = 2;", "NumberLiteral"),
        ("a + b = c;", "BinaryExpression"),
        ("f() = 1;", "CallExpression"),
        ("a = 1 = 2;", "NumberLiteral"),
    ],
)
def test_invalid_assignment_targets(src, target):
    with pytest.raises(InvalidAssignmentTargetError) as exc:
        parse_text(src)
    assert exc.value.target == target


def test_invalid_assignment_target_points_at_operator():
    with pytest.raises(InvalidAssignmentTargetError) as exc:
        parse_text("1 = 2;")
    assert (exc.value.line, exc.value.column) == (1, 3)


def test_parenthesized_identifier_is_assignable():
    (stmt,) = parse_text("(a) = 1;").body
    assert stmt.expression == AssignmentExpression("=", Identifier("a"), NumberLiteral(1.0))


def test_parse_errors_are_syntax_errors():
    with pytest.raises(SyntaxError):
        parse_text("var;")


def test_deep_parentheses_are_rejected():
    src = "(" * 100 + "1" + ")" * 100 + ";"
    with pytest.raises(NestingTooDeepError) as exc:
        parse_text(src)
    assert exc.value.limit == MAX_NESTING_DEPTH


def test_moderate_nesting_parses():
    src = "(" * 50 + "1" + ")" * 50 + ";"
    (stmt,) = parse_text(src).body
    assert stmt.expression == NumberLiteral(1.0)


def test_max_depth_is_configurable():
    assert Parser(Lexer("(((1)));"), max_depth=3).parse().body
    with pytest.raises(NestingTooDeepError) as exc:
        Parser(Lexer("((((1))));"), max_depth=3).parse()
    assert exc.value.limit == 3


@pytest.mark.parametrize(
    "src",
    [
        "{" * 100 + "}" * 100,
        "if (a) " * 100 + "x;",
        "while (a) " * 100 + "x;",
        "f" + "(" * 100 + ")" * 100 + ";",
        "a ? " * 100 + "b" + " : c" * 100 + ";",
    ],
)
def test_deeply_nested_statements_and_expressions_are_rejected(src):
    with pytest.raises(NestingTooDeepError):
        parse_text(src)


def test_recovery_collects_every_error_and_keeps_good_declarations():
    result = parse_with_recovery(
        "var = 1; var y = 2; x = ; function f() { return 1; }"
    )
    assert not result.ok
    assert [e.expected for e in result.errors] == ["variable name", "expression"]
    assert [n.type for n in result.program.body] == [
        NodeType.VARIABLE_DECLARATION,
        NodeType.FUNCTION_DECLARATION,
    ]
    assert result.program.body[0] == VariableDeclaration(Identifier("y"), NumberLiteral(2.0))


def test_recovery_resumes_before_statement_keyword():
    result = parse_with_recovery("x = ) var y = 2;")
    assert len(result.errors) == 1
    assert result.program.body == (
        VariableDeclaration(Identifier("y"), NumberLiteral(2.0)),
    )


def test_recovery_inside_block():
    result = parse_with_recovery("{ x = ; y; } var z = 1;")
    assert len(result.errors) == 1
    block, decl = result.program.body
    assert block == BlockStatement((ExpressionStatement(Identifier("y")),))
    assert decl.id == Identifier("z")


def test_recovery_at_end_of_input():
    result = parse_with_recovery("var x = ")
    assert len(result.errors) == 1
    assert isinstance(result.errors[0], UnexpectedEndOfInputError)
    assert result.program == Program(())


def test_recovery_on_valid_input_is_ok():
    result = parse_with_recovery("var a = 1; a += 2;")
    assert result.ok
    assert result.errors == []
    assert len(result.program.body) == 2


def test_recovery_does_not_swallow_nesting_errors():
    with pytest.raises(NestingTooDeepError):
        parse_with_recovery("(" * 100 + "1" + ")" * 100 + ";")


def test_parse_stops_at_first_error():
    parser = Parser(Lexer("var = 1; x = ;"))
    with pytest.raises(UnexpectedTokenError):
        parser.parse()
    assert parser.errors == []


@pytest.mark.parametrize("max_depth", [0, -1, MAX_DEPTH_LIMIT + 1, 1000])
def test_max_depth_outside_supported_range_is_rejected(max_depth):
    with pytest.raises(ValueError):
        Parser(Lexer("x;"), max_depth=max_depth)


def test_highest_max_depth_parses_deep_parentheses():
    src = "(" * 80 + "1" + ")" * 80 + ";"
    (stmt,) = Parser(Lexer(src), max_depth=MAX_DEPTH_LIMIT).parse().body
    assert stmt.expression == NumberLiteral(1.0)


def test_running_out_of_stack_is_a_nesting_error():
    src = "(" * 60 + "1" + ")" * 60 + ";"
    parser = Parser(Lexer(src))
    limit = sys.getrecursionlimit()
    sys.setrecursionlimit(len(inspect.stack()) + 100)
    try:
        with pytest.raises(NestingTooDeepError) as exc:
            parser.parse()
    finally:
        sys.setrecursionlimit(limit)
    assert exc.value.limit == MAX_NESTING_DEPTH


def test_recovering_twice_reports_the_same_errors():
    parser = Parser(Lexer("var = 1; x = ; var ok;"))
    first = parser.parse_recovering()
    second = parser.parse_recovering()
    assert len(first.errors) == 2
    assert [str(e) for e in second.errors] == [str(e) for e in first.errors]
    assert second.program == first.program


def test_parse_after_recovering_starts_over():
    parser = Parser(Lexer("var a = 1; a;"))
    assert parser.parse_recovering().ok
    assert parser.parse() == parser.parse_recovering().program
    assert len(parser.parse().body) == 2
