"""
Parser for the scripting language.

Overview and approach:
- This parser is a small, hand-written recursive-descent parser for
    declarations and statements. Expressions use precedence climbing driven by
    the `BINARY_PRECEDENCE` table, which keeps expression parsing concise while
    correctly handling operator precedence and associativity.

Key points:
- Expression parsing:
    - `parse_primary()` recognizes literals, `this`, identifiers and
        parenthesized expressions.
    - `parse_call()` handles call postfixes, which bind tightest and chain:
        `f(1)(2)` is a call whose callee is another call.
    - `parse_unary()` collects a run of prefix `!`/`-` operators.
    - `parse_binary_expression()` is the precedence-climbing loop. It keeps an
        explicit operand stack and operator stack and reduces while the operator
        on top of the stack binds at least as tightly as the incoming one, so
        all binary levels are left-associative and long chains do not recurse.
    - `parse_ternary()` and `parse_assignment()` are right-associative.
        Assignment chains are collected in a loop and folded from the right.

- Statement parsing:
    - `parse_declaration()` recognizes `var` and `function` declarations and
        otherwise delegates to `parse_statement()` (blocks, `if`, `while`,
        `return`, expression statements).

- Errors:
    - Every missing or unexpected token raises a `ParseError` naming what was
        expected and what was found. `parse()` stops at the first error;
        `parse_recovering()` synchronizes at the next statement boundary and
        returns every error it collected along with the declarations that did
        parse.
    - Nesting deeper than `max_depth` raises `NestingTooDeepError` rather than
        overflowing the interpreter stack. Each nesting level costs up to seven
        interpreter frames, so `max_depth` is capped at `MAX_DEPTH_LIMIT`; the
        default of 64 is a deliberate limit on how deeply programs may nest.
        Should the interpreter stack still run out, the `RecursionError` is
        reported as `NestingTooDeepError`.

Examples:
    - `var x = 2 + 3 * 4;`
    - `function add(a, b) { return a + b; }`
"""

from __future__ import annotations
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
from tokens import Token, TokenType, FIXED_LEXEMES
from ast_nodes import *
from errors import (
    InvalidAssignmentTargetError,
    NestingTooDeepError,
    ParseError,
    UnexpectedEndOfInputError,
    UnexpectedTokenError,
)

logger = logging.getLogger(__name__)

MAX_NESTING_DEPTH = 64
# Highest max_depth that fits in the default interpreter recursion limit.
MAX_DEPTH_LIMIT = 100

# Binary operator precedence (higher = tighter binding).
BINARY_PRECEDENCE: Dict[TokenType, int] = {
    TokenType.OR: 1,
    TokenType.AND: 2,
    TokenType.EQ: 3,
    TokenType.NEQ: 3,
    TokenType.STRICT_EQ: 3,
    TokenType.STRICT_NEQ: 3,
    TokenType.LT: 4,
    TokenType.GT: 4,
    TokenType.LTE: 4,
    TokenType.GTE: 4,
    TokenType.PLUS: 5,
    TokenType.MINUS: 5,
    TokenType.STAR: 6,
    TokenType.SLASH: 6,
}

LOGICAL_OPERATORS = (TokenType.AND, TokenType.OR)

ASSIGNMENT_OPERATORS = (
    TokenType.ASSIGN,
    TokenType.PLUS_ASSIGN,
    TokenType.MINUS_ASSIGN,
    TokenType.STAR_ASSIGN,
    TokenType.SLASH_ASSIGN,
)

UNARY_OPERATORS = (TokenType.NOT, TokenType.MINUS)

# Tokens that begin a new statement; recovery stops in front of them.
STATEMENT_KEYWORDS = (
    TokenType.VAR,
    TokenType.FUNCTION,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.RETURN,
    TokenType.FOR,
    TokenType.CLASS,
)


@dataclass
class ParseResult:
    program: Program
    errors: List[ParseError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class Parser:
    def __init__(
        self,
        tokens: Iterable[Token],
        *,
        max_depth: int = MAX_NESTING_DEPTH,
    ):
        if not 0 < max_depth <= MAX_DEPTH_LIMIT:
            raise ValueError(
                f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}, got {max_depth}"
            )
        self.tokens: List[Token] = list(tokens)
        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            last = self.tokens[-1] if self.tokens else None
            self.tokens.append(
                Token(
                    TokenType.EOF,
                    None,
                    last.line if last else 1,
                    last.column if last else 1,
                )
            )
        self.max_depth = max_depth
        self.reset()

    def reset(self) -> None:
        """Rewind to the first token and forget errors from earlier parses."""
        self.pos = 0
        self.current = self.tokens[0]
        self.recover = False
        self.depth = 0
        self.errors: List[ParseError] = []

    # Cursor primitives

    def peek(self) -> Token:
        """Return the current token without consuming it."""
        return self.current

    def previous(self) -> Token:
        """Return the most recently consumed token."""
        return self.tokens[self.pos - 1]

    def advance(self) -> Token:
        """Consume the current token and return it. EOF is never consumed."""
        token = self.current
        if token.type != TokenType.EOF:
            self.pos += 1
            self.current = self.tokens[self.pos]
        return token

    def is_at_end(self) -> bool:
        return self.current.type == TokenType.EOF

    def check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming it."""
        return self.current.type == token_type

    def match(self, *token_types: TokenType) -> bool:
        """Consume the current token if it matches any of the given types."""
        if self.current.type in token_types:
            self.advance()
            return True
        return False

    def consume(self, token_type: TokenType, expected: Optional[str] = None) -> Token:
        """Expect and consume token of given type."""
        if self.current.type == token_type:
            return self.advance()
        raise self.error(expected or f"'{FIXED_LEXEMES[token_type]}'")

    def error(self, expected: str) -> ParseError:
        """Build the error for finding the current token where `expected` was due."""
        token = self.current
        if token.type == TokenType.EOF:
            return UnexpectedEndOfInputError(expected, token.line, token.column)
        return UnexpectedTokenError(expected, token)

    @contextmanager
    def nested(self) -> Iterator[None]:
        """Track syntactic nesting so deep inputs fail with a ParseError."""
        if self.depth >= self.max_depth:
            raise NestingTooDeepError(
                self.max_depth, self.current.line, self.current.column
            )
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    # Expressions

    def parse_primary(self) -> ASTNode:
        """Parse primary expressions (literals, identifiers, parenthesized)."""
        token = self.current

        match token.type:
            case TokenType.NUMBER:
                self.advance()
                return NumberLiteral(token.value, line=token.line, column=token.column)

            case TokenType.STRING:
                self.advance()
                return StringLiteral(token.value, line=token.line, column=token.column)

            case TokenType.TRUE:
                self.advance()
                return BooleanLiteral(True, line=token.line, column=token.column)

            case TokenType.FALSE:
                self.advance()
                return BooleanLiteral(False, line=token.line, column=token.column)

            case TokenType.NULL:
                self.advance()
                return NullLiteral(line=token.line, column=token.column)

            case TokenType.THIS:
                self.advance()
                return ThisExpression(line=token.line, column=token.column)

            case TokenType.IDENTIFIER:
                self.advance()
                return Identifier(token.value, line=token.line, column=token.column)

            case TokenType.LPAREN:
                self.advance()
                with self.nested():
                    expr = self.parse_expression()
                self.consume(TokenType.RPAREN, "')' after expression")
                return expr

            case _:
                raise self.error("expression")

    def parse_arguments(self) -> Tuple[ASTNode, ...]:
        """Parse `argList? ')'` after the opening parenthesis of a call."""
        args: List[ASTNode] = []
        with self.nested():
            if not self.check(TokenType.RPAREN):
                args.append(self.parse_expression())
                while self.match(TokenType.COMMA):
                    args.append(self.parse_expression())
        self.consume(TokenType.RPAREN, "')' after arguments")
        return tuple(args)

    def parse_call(self) -> ASTNode:
        """Parse a primary followed by any number of call postfixes."""
        expr = self.parse_primary()
        while self.check(TokenType.LPAREN):
            paren = self.advance()
            expr = CallExpression(
                expr, self.parse_arguments(), line=paren.line, column=paren.column
            )
        return expr

    def parse_unary(self) -> ASTNode:
        """Parse `('!' | '-')* call`, folding the prefix operators inward."""
        operators: List[Token] = []
        while self.current.type in UNARY_OPERATORS:
            operators.append(self.advance())

        expr = self.parse_call()
        for op in reversed(operators):
            expr = UnaryExpression(
                FIXED_LEXEMES[op.type], expr, line=op.line, column=op.column
            )
        return expr

    @staticmethod
    def _reduce(operands: List[ASTNode], operators: List[Token]) -> None:
        op = operators.pop()
        right = operands.pop()
        left = operands.pop()
        node_class = (
            LogicalExpression if op.type in LOGICAL_OPERATORS else BinaryExpression
        )
        operands.append(
            node_class(
                FIXED_LEXEMES[op.type], left, right, line=op.line, column=op.column
            )
        )

    def parse_binary_expression(self) -> ASTNode:
        """Parse `||` down to `*`/`/` by precedence climbing."""
        operands: List[ASTNode] = [self.parse_unary()]
        operators: List[Token] = []

        while self.current.type in BINARY_PRECEDENCE:
            precedence = BINARY_PRECEDENCE[self.current.type]
            # Reducing on equal precedence makes every level left-associative.
            while operators and BINARY_PRECEDENCE[operators[-1].type] >= precedence:
                self._reduce(operands, operators)
            operators.append(self.advance())
            operands.append(self.parse_unary())

        while operators:
            self._reduce(operands, operators)
        return operands[0]

    def parse_ternary(self) -> ASTNode:
        """Parse `logicOr ('?' expression ':' expression)?`."""
        condition = self.parse_binary_expression()
        if not self.check(TokenType.QUESTION):
            return condition

        question = self.advance()
        with self.nested():
            then_branch = self.parse_expression()
            self.consume(TokenType.COLON, "':' in conditional expression")
            else_branch = self.parse_expression()
        return TernaryExpression(
            condition,
            then_branch,
            else_branch,
            line=question.line,
            column=question.column,
        )

    def parse_assignment(self) -> ASTNode:
        """Parse a right-associative chain of assignments."""
        targets: List[Tuple[ASTNode, Token]] = []
        expr = self.parse_ternary()

        while self.current.type in ASSIGNMENT_OPERATORS:
            op = self.advance()
            if not isinstance(expr, Identifier):
                raise InvalidAssignmentTargetError(
                    type(expr).__name__, op.line, op.column
                )
            targets.append((expr, op))
            expr = self.parse_ternary()

        # `a = b = 3` folds to a = (b = 3).
        for target, op in reversed(targets):
            expr = AssignmentExpression(
                FIXED_LEXEMES[op.type], target, expr, line=op.line, column=op.column
            )
        return expr

    def parse_expression(self) -> ASTNode:
        """Parse an expression."""
        return self.parse_assignment()

    # Statements

    def parse_block(self) -> BlockStatement:
        """Parse a block of declarations: { declaration* }"""
        brace = self.consume(TokenType.LBRACE, "'{'")
        body: List[ASTNode] = []

        with self.nested():
            while not self.check(TokenType.RBRACE) and not self.is_at_end():
                declaration = self.parse_declaration()
                if declaration is not None:
                    body.append(declaration)

        self.consume(TokenType.RBRACE, "'}' after block")
        return BlockStatement(tuple(body), line=brace.line, column=brace.column)

    def parse_if_statement(self) -> IfStatement:
        """Parse if statement: if (expr) statement (else statement)?"""
        keyword = self.consume(TokenType.IF)
        self.consume(TokenType.LPAREN, "'(' after 'if'")
        condition = self.parse_expression()
        self.consume(TokenType.RPAREN, "')' after if condition")

        with self.nested():
            then_branch = self.parse_statement()
            else_branch = None
            if self.match(TokenType.ELSE):
                else_branch = self.parse_statement()

        return IfStatement(
            condition,
            then_branch,
            else_branch,
            line=keyword.line,
            column=keyword.column,
        )

    def parse_while_statement(self) -> WhileStatement:
        """Parse while statement: while (expr) statement"""
        keyword = self.consume(TokenType.WHILE)
        self.consume(TokenType.LPAREN, "'(' after 'while'")
        condition = self.parse_expression()
        self.consume(TokenType.RPAREN, "')' after while condition")

        with self.nested():
            body = self.parse_statement()

        return WhileStatement(condition, body, line=keyword.line, column=keyword.column)

    def parse_return_statement(self) -> ReturnStatement:
        """Parse return statement: return expr? ;"""
        keyword = self.consume(TokenType.RETURN)
        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "';' after return value")
        return ReturnStatement(value, line=keyword.line, column=keyword.column)

    def parse_statement(self) -> ASTNode:
        """Parse a statement."""
        match self.current.type:
            case TokenType.LBRACE:
                return self.parse_block()
            case TokenType.IF:
                return self.parse_if_statement()
            case TokenType.WHILE:
                return self.parse_while_statement()
            case TokenType.RETURN:
                return self.parse_return_statement()
            case _:
                start = self.current
                expr = self.parse_expression()
                self.consume(TokenType.SEMICOLON, "';' after expression")
                return ExpressionStatement(expr, line=start.line, column=start.column)

    # Declarations

    def parse_variable_declaration(self) -> VariableDeclaration:
        """Parse variable declaration: var identifier (= expression)? ;"""
        keyword = self.consume(TokenType.VAR)
        name = self.consume(TokenType.IDENTIFIER, "variable name")

        init = None
        if self.match(TokenType.ASSIGN):
            init = self.parse_expression()

        self.consume(TokenType.SEMICOLON, "';' after variable declaration")
        return VariableDeclaration(
            Identifier(name.value, line=name.line, column=name.column),
            init,
            line=keyword.line,
            column=keyword.column,
        )

    def parse_function_declaration(self) -> FunctionDeclaration:
        """Parse function declaration: function ident '(' params ')' block"""
        keyword = self.consume(TokenType.FUNCTION)
        name = self.consume(TokenType.IDENTIFIER, "function name")

        self.consume(TokenType.LPAREN, "'(' after function name")
        params: List[Identifier] = []
        if not self.check(TokenType.RPAREN):
            while True:
                param = self.consume(TokenType.IDENTIFIER, "parameter name")
                params.append(
                    Identifier(param.value, line=param.line, column=param.column)
                )
                if not self.match(TokenType.COMMA):
                    break
        self.consume(TokenType.RPAREN, "')' after parameters")

        if not self.check(TokenType.LBRACE):
            raise self.error("'{' before function body")
        body = self.parse_block()

        return FunctionDeclaration(
            Identifier(name.value, line=name.line, column=name.column),
            tuple(params),
            body,
            line=keyword.line,
            column=keyword.column,
        )

    def parse_declaration(self) -> Optional[ASTNode]:
        """Parse a declaration or statement.

        In recovery mode a parse error is recorded, the parser skips ahead to
        the next statement boundary and None is returned in place of the
        broken declaration.
        """
        try:
            match self.current.type:
                case TokenType.VAR:
                    return self.parse_variable_declaration()
                case TokenType.FUNCTION:
                    return self.parse_function_declaration()
                case _:
                    return self.parse_statement()
        except NestingTooDeepError:
            raise
        except ParseError as e:
            if not self.recover:
                raise
            self.errors.append(e)
            self.synchronize()
            return None

    def synchronize(self) -> None:
        """Discard tokens until a likely statement boundary."""
        start = self.current
        self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                break
            if self.current.type in STATEMENT_KEYWORDS:
                break
            self.advance()
        logger.debug(
            "Recovered from parse error at line %d, column %d; resuming at %s",
            start.line,
            start.column,
            self.current.describe(),
        )

    def parse_program(self) -> Program:
        """Parse a complete program (sequence of declarations)."""
        body: List[ASTNode] = []

        while not self.is_at_end():
            declaration = self.parse_declaration()
            if declaration is not None:
                body.append(declaration)

        return Program(tuple(body), line=1, column=1)

    def _parse_within_stack(self) -> Program:
        try:
            return self.parse_program()
        except RecursionError:
            raise NestingTooDeepError(
                self.max_depth, self.current.line, self.current.column
            ) from None

    def parse(self) -> Program:
        """Parse the token sequence into a Program, raising on the first error."""
        self.reset()
        return self._parse_within_stack()

    def parse_recovering(self) -> ParseResult:
        """Parse with panic-mode recovery, collecting every parse error.

        A `NestingTooDeepError` still aborts the parse: the input is
        pathological rather than merely malformed.
        """
        self.reset()
        self.recover = True
        program = self._parse_within_stack()
        return ParseResult(program, list(self.errors))
