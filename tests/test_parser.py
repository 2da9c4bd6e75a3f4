import dataclasses

import pytest

from ast_nodes import *
from lexer import Lexer
from parser import Parser
from tests.utils import parse_expr, parse_text


def num(v):
    return NumberLiteral(float(v))


def ident(name):
    return Identifier(name)


def test_parser_parses_variable_and_assignment():
    src = "var x = 5; x = x + 1;"
    ast = parse_text(src)
    assert ast.type == NodeType.PROGRAM
    assert ast.body == (
        VariableDeclaration(ident("x"), num(5)),
        ExpressionStatement(
            AssignmentExpression("=", ident("x"), BinaryExpression("+", ident("x"), num(1)))
        ),
    )


def test_variable_without_initializer_has_no_init():
    (decl,) = parse_text("var x;").body
    assert isinstance(decl, VariableDeclaration)
    assert decl.init is None


def test_precedence_multiplication_binds_tighter():
    assert parse_expr("2 + 3 * 4") == BinaryExpression(
        "+", num(2), BinaryExpression("*", num(3), num(4))
    )


def test_binary_operators_are_left_associative():
    assert parse_expr("1 - 2 - 3") == BinaryExpression(
        "-", BinaryExpression("-", num(1), num(2)), num(3)
    )
    assert parse_expr("8 / 4 * 2") == BinaryExpression(
        "*", BinaryExpression("/", num(8), num(4)), num(2)
    )


def test_parentheses_override_precedence():
    assert parse_expr("(2 + 3) * 4") == BinaryExpression(
        "*", BinaryExpression("+", num(2), num(3)), num(4)
    )


def test_full_precedence_ladder():
    expr = parse_expr("a || b && c == d < e + f * g")
    assert expr == LogicalExpression(
        "||",
        ident("a"),
        LogicalExpression(
            "&&",
            ident("b"),
            BinaryExpression(
                "==",
                ident("c"),
                BinaryExpression(
                    "<",
                    ident("d"),
                    BinaryExpression("+", ident("e"), BinaryExpression("*", ident("f"), ident("g"))),
                ),
            ),
        ),
    )


def test_strict_equality_is_an_equality_operator():
    assert parse_expr("a === b !== c") == BinaryExpression(
        "!==", BinaryExpression("===", ident("a"), ident("b")), ident("c")
    )


def test_logical_operators_produce_logical_expressions():
    expr = parse_expr("a && b || c")
    assert isinstance(expr, LogicalExpression)
    assert expr.operator == "||"
    assert expr.left == LogicalExpression("&&", ident("a"), ident("b"))


def test_assignment_is_right_associative():
    assert parse_expr("a = b = 3") == AssignmentExpression(
        "=", ident("a"), AssignmentExpression("=", ident("b"), num(3))
    )


def test_compound_assignment_operators():
    for op in ("+=", "-=", "*=", "/="):
        assert parse_expr(f"total {op} 2") == AssignmentExpression(op, ident("total"), num(2))


def test_assignment_value_can_be_ternary():
    assert parse_expr("x = c ? 1 : 2") == AssignmentExpression(
        "=", ident("x"), TernaryExpression(ident("c"), num(1), num(2))
    )


def test_ternary_is_right_associative():
    assert parse_expr("a ? b : c ? d : e") == TernaryExpression(
        ident("a"), ident("b"), TernaryExpression(ident("c"), ident("d"), ident("e"))
    )


def test_unary_operators_nest():
    assert parse_expr("!-x") == UnaryExpression("!", UnaryExpression("-", ident("x")))
    assert parse_expr("-a * b") == BinaryExpression(
        "*", UnaryExpression("-", ident("a")), ident("b")
    )


def test_call_with_arguments():
    assert parse_expr("add(2, 3)") == CallExpression(ident("add"), (num(2), num(3)))


def test_call_without_arguments():
    assert parse_expr("now()") == CallExpression(ident("now"), ())


def test_call_chaining_nests_callee():
    expr = parse_expr("f(1)(2)")
    assert isinstance(expr, CallExpression)
    assert expr.arguments == (num(2),)
    assert expr.callee == CallExpression(ident("f"), (num(1),))


def test_call_binds_tighter_than_unary():
    assert parse_expr("-f(x)") == UnaryExpression("-", CallExpression(ident("f"), (ident("x"),)))


def test_literal_keywords_get_dedicated_nodes():
    assert parse_expr("true") == BooleanLiteral(True)
    assert parse_expr("false") == BooleanLiteral(False)
    assert parse_expr("null") == NullLiteral()
    assert parse_expr("this") == ThisExpression()
    assert parse_expr("'s'") == StringLiteral("s")
    # booleans are not numbers
    assert parse_expr("true") != NumberLiteral(1.0)


def test_function_declaration():
    ast = parse_text("function add(a, b) { return a + b; }")
    (func,) = ast.body
    assert isinstance(func, FunctionDeclaration)
    assert func.id == ident("add")
    assert func.params == (ident("a"), ident("b"))
    assert func.body == BlockStatement(
        (ReturnStatement(BinaryExpression("+", ident("a"), ident("b"))),)
    )


def test_function_without_parameters_and_empty_body():
    (func,) = parse_text("function noop() {}").body
    assert func.params == ()
    assert func.body == BlockStatement(())


def test_if_else_statement():
    (stmt,) = parse_text("if (x < 10) { y = 1; } else y = 2;").body
    assert isinstance(stmt, IfStatement)
    assert stmt.condition == BinaryExpression("<", ident("x"), num(10))
    assert isinstance(stmt.then_branch, BlockStatement)
    assert stmt.else_branch == ExpressionStatement(
        AssignmentExpression("=", ident("y"), num(2))
    )


def test_if_without_else():
    (stmt,) = parse_text("if (ok) go();").body
    assert stmt.else_branch is None


def test_dangling_else_binds_to_nearest_if():
    (outer,) = parse_text("if (a) if (b) x(); else y();").body
    assert outer.else_branch is None
    assert isinstance(outer.then_branch, IfStatement)
    assert outer.then_branch.else_branch is not None


def test_while_statement():
    (stmt,) = parse_text("while (i < 3) { i += 1; }").body
    assert isinstance(stmt, WhileStatement)
    assert stmt.condition == BinaryExpression("<", ident("i"), num(3))
    assert stmt.body == BlockStatement(
        (ExpressionStatement(AssignmentExpression("+=", ident("i"), num(1))),)
    )


def test_return_without_value():
    (func,) = parse_text("function f() { return; }").body
    assert func.body.body == (ReturnStatement(None),)


def test_blocks_may_contain_declarations():
    (block,) = parse_text("{ var a = 1; function g() {} }").body
    assert isinstance(block, BlockStatement)
    assert [n.type for n in block.body] == [
        NodeType.VARIABLE_DECLARATION,
        NodeType.FUNCTION_DECLARATION,
    ]


def test_empty_program():
    assert parse_text("") == Program(())
    assert parse_text("// nothing here") == Program(())


def test_node_positions_come_from_starting_tokens():
    ast = parse_text("var x = 1;\nif (x) {\n  x = 2 + 3;\n}")
    decl, if_stmt = ast.body
    assert (decl.line, decl.column) == (1, 1)
    assert (decl.id.line, decl.id.column) == (1, 5)
    assert (if_stmt.line, if_stmt.column) == (2, 1)
    stmt = if_stmt.then_branch.body[0]
    assert (stmt.line, stmt.column) == (3, 3)
    assert (stmt.expression.right.line, stmt.expression.right.column) == (3, 9)


def test_parser_accepts_lexer_directly():
    program = Parser(Lexer("var x = 1;")).parse()
    assert program.body == (VariableDeclaration(ident("x"), num(1)),)


def test_parser_accepts_tokens_without_eof():
    tokens = Lexer("x;").tokenize()[:-1]
    assert Parser(tokens).parse() == Program((ExpressionStatement(ident("x")),))


def test_long_operator_chains_do_not_recurse():
    src = " + ".join(["1"] * 5000)
    expr = parse_expr(src)
    depth = 0
    while isinstance(expr, BinaryExpression):
        expr = expr.left
        depth += 1
    assert depth == 4999


def test_long_assignment_chains_do_not_recurse():
    src = " = ".join(f"v{i}" for i in range(3000)) + " = 0"
    expr = parse_expr(src)
    count = 0
    while isinstance(expr, AssignmentExpression):
        expr = expr.right
        count += 1
    assert count == 3000
    assert expr == num(0)


def test_long_unary_chains_do_not_recurse():
    expr = parse_expr("!" * 3000 + "x")
    count = 0
    while isinstance(expr, UnaryExpression):
        expr = expr.argument
        count += 1
    assert count == 3000


def test_ast_nodes_are_immutable():
    node = parse_expr("1 + 2")
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.operator = "-"
